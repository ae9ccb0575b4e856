import re

import pytest

from shiptrack.dependencies import CurrentUser
from shiptrack.models import STATUS_CREATED, STATUS_DELIVERED, STATUS_IN_TRANSIT
from shiptrack.services.exceptions import (
    AuthorizationError, ConflictError, NotFoundError, ValidationError
)
from shiptrack.services.shipping.shipment_service import CREATION_NOTE

SHIPMENT = {
    'senderName': 'Acme Corp',
    'recipientName': 'Jane Doe',
    'origin': 'Memphis, TN',
    'destination': 'Austin, TX',
    'weightKg': 2.5,
}


def as_actor(user):
    return CurrentUser(id=user.id, name=user.name, email=user.email, is_admin=user.is_admin)


async def test_create_shipment_records_created_event(services, make_user):
    owner = await make_user()

    shipment, code = await services.shipment_service.create_shipment(dict(SHIPMENT), owner.id)

    assert code is None
    assert re.fullmatch(r'FDX[A-Z0-9]{8}', shipment.tracking_id)
    assert shipment.status == STATUS_CREATED
    assert shipment.created_by_id == owner.id

    events = await services.shipment_service.get_events(shipment.id)
    assert len(events) == 1
    assert events[0].status == STATUS_CREATED
    assert events[0].location == 'Memphis, TN'
    assert events[0].note == CREATION_NOTE


async def test_create_shipment_requires_text_fields(services, make_user):
    owner = await make_user()

    with pytest.raises(ValidationError) as exc_info:
        await services.shipment_service.create_shipment(dict(SHIPMENT, senderName='   '), owner.id)

    assert exc_info.value.message == 'Sender name is required'
    assert await services.storage.list_shipments() == []


async def test_create_shipment_rejects_unknown_service(services, make_user):
    owner = await make_user()

    with pytest.raises(ValidationError):
        await services.shipment_service.create_shipment(dict(SHIPMENT, serviceId=999), owner.id)


async def test_create_shipment_with_catalog_service(services, make_user):
    owner = await make_user()
    await services.catalog_service.seed_defaults()
    service = (await services.catalog_service.list_services())[0]

    shipment, _ = await services.shipment_service.create_shipment(dict(SHIPMENT, serviceId=service.id), owner.id)

    assert shipment.service_id == service.id


async def test_appended_events_drive_status(services, make_user):
    owner = await make_user()
    shipment, _ = await services.shipment_service.create_shipment(dict(SHIPMENT), owner.id)

    steps = [('in transit', 'Dallas, TX'), ('Out for Delivery', 'Austin, TX'), ('Delivered', 'Austin, TX')]
    for status, location in steps:
        shipment, event = await services.shipment_service.append_event(
            shipment.tracking_id, status=status, location=location, actor=as_actor(owner)
        )
        assert shipment.status == event.status

    tracked, events = await services.shipment_service.track(shipment.tracking_id)
    assert len(events) == len(steps) + 1
    assert events[0].status == STATUS_DELIVERED
    assert events[-1].status == STATUS_CREATED
    assert events[-2].status == STATUS_IN_TRANSIT
    assert tracked.status == events[0].status


async def test_append_event_requires_location(services, make_user):
    owner = await make_user()
    shipment, _ = await services.shipment_service.create_shipment(dict(SHIPMENT), owner.id)
    shipment_id, tracking_id = shipment.id, shipment.tracking_id

    with pytest.raises(ValidationError):
        await services.shipment_service.append_event(tracking_id, status='In Transit', location='')

    assert len(await services.shipment_service.get_events(shipment_id)) == 1


async def test_append_event_owner_or_admin_only(services, make_user):
    owner = await make_user()
    stranger = await make_user()
    admin = await make_user(is_admin=True)
    # a failed append rolls back and expires loaded rows, so keep plain values
    stranger_actor, admin_actor = as_actor(stranger), as_actor(admin)
    shipment, _ = await services.shipment_service.create_shipment(dict(SHIPMENT), owner.id)
    tracking_id = shipment.tracking_id

    with pytest.raises(AuthorizationError):
        await services.shipment_service.append_event(
            tracking_id, status='In Transit', location='Dallas, TX', actor=stranger_actor
        )

    shipment, _ = await services.shipment_service.append_event(
        tracking_id, status='In Transit', location='Dallas, TX', actor=admin_actor
    )
    assert shipment.status == STATUS_IN_TRANSIT


async def test_track_is_case_insensitive_and_reports_unknown_ids(services, make_user):
    owner = await make_user()
    shipment, _ = await services.shipment_service.create_shipment(dict(SHIPMENT), owner.id)

    found, _ = await services.shipment_service.track(f"  {shipment.tracking_id.lower()} ")
    assert found.id == shipment.id

    with pytest.raises(NotFoundError):
        await services.shipment_service.track('FDXNOTHERE')


async def test_list_by_owner_only_returns_own_shipments(services, make_user):
    owner = await make_user()
    other = await make_user()
    first, _ = await services.shipment_service.create_shipment(dict(SHIPMENT), owner.id)
    second, _ = await services.shipment_service.create_shipment(dict(SHIPMENT), owner.id)
    await services.shipment_service.create_shipment(dict(SHIPMENT), other.id)

    mine = await services.shipment_service.list_by_owner(owner.id)

    assert [s.id for s in mine] == [second.id, first.id]


async def test_shipment_code_is_single_use(services, make_user):
    admin = await make_user(is_admin=True)
    shipment, code = await services.admin_service.create_shipment(dict(SHIPMENT), admin.id)
    tracking_id = shipment.tracking_id

    assert re.fullmatch(r'[A-Z0-9]{6}', code)
    assert shipment.verification_code_used is False

    wrong = 'ZZZZZZ' if code != 'ZZZZZZ' else 'YYYYYY'
    with pytest.raises(ValidationError):
        await services.shipment_service.consume_verification_code(tracking_id, wrong)

    verified = await services.shipment_service.consume_verification_code(tracking_id, code)
    assert verified.verification_code_used is True

    with pytest.raises(ValidationError) as exc_info:
        await services.shipment_service.consume_verification_code(tracking_id, code)
    assert exc_info.value.message == 'Verification code has already been used'


async def test_shipment_code_checks(services, make_user):
    owner = await make_user()
    shipment, _ = await services.shipment_service.create_shipment(dict(SHIPMENT), owner.id)
    tracking_id = shipment.tracking_id

    with pytest.raises(ValidationError) as exc_info:
        await services.shipment_service.consume_verification_code(tracking_id, None)
    assert exc_info.value.message == 'Verification code is required'

    # user-created shipments carry no code at all
    with pytest.raises(ValidationError) as exc_info:
        await services.shipment_service.consume_verification_code(tracking_id, 'ABC123')
    assert exc_info.value.message == 'Invalid verification code'

    with pytest.raises(NotFoundError):
        await services.shipment_service.consume_verification_code('FDXNOTHERE', 'ABC123')


async def test_tracking_id_collision_is_retried(services, make_user, monkeypatch):
    owner = await make_user()
    candidates = iter(['FDXAAAAAAAA', 'FDXAAAAAAAA', 'FDXBBBBBBBB'])
    monkeypatch.setattr(
        'shiptrack.services.shipping.shipment_service.generate_tracking_id',
        lambda prefix: next(candidates)
    )

    first, _ = await services.shipment_service.create_shipment(dict(SHIPMENT), owner.id)
    second, _ = await services.shipment_service.create_shipment(dict(SHIPMENT), owner.id)

    assert first.tracking_id == 'FDXAAAAAAAA'
    assert second.tracking_id == 'FDXBBBBBBBB'


async def test_tracking_id_allocation_gives_up(services, make_user, monkeypatch):
    owner = await make_user()
    monkeypatch.setattr(
        'shiptrack.services.shipping.shipment_service.generate_tracking_id',
        lambda prefix: 'FDXAAAAAAAA'
    )
    await services.shipment_service.create_shipment(dict(SHIPMENT), owner.id)

    with pytest.raises(ConflictError):
        await services.shipment_service.create_shipment(dict(SHIPMENT), owner.id)


async def test_shipment_code_must_match_exactly(services, make_user):
    admin = await make_user(is_admin=True)
    shipment, code = await services.admin_service.create_shipment(dict(SHIPMENT), admin.id)
    tracking_id = shipment.tracking_id

    with pytest.raises(ValidationError) as exc_info:
        await services.shipment_service.consume_verification_code(tracking_id, f"  {code} ")
    assert exc_info.value.message == 'Invalid verification code'

    verified = await services.shipment_service.consume_verification_code(tracking_id, code)
    assert verified.verification_code_used is True


async def test_registry_builds_services_on_one_storage(services, storage):
    built = [
        services.auth_service, services.verification_service, services.shipment_service,
        services.catalog_service, services.subscription_service, services.admin_service,
        services.notification_service,
    ]

    assert all(service.storage is storage for service in built)
    assert services.admin_service.shipment_service is services.shipment_service
