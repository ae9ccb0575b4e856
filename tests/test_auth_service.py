import pytest

from shiptrack.services.auth.credentials import issue_token
from shiptrack.services.exceptions import AuthenticationError, ValidationError

ACCOUNT = {'name': 'Jane Doe', 'email': 'Jane@ShipTrack.io', 'password': 'secret123'}


async def test_register_then_login(services):
    token, user = await services.auth_service.register(dict(ACCOUNT))

    assert user.email == 'jane@shiptrack.io'
    assert user.password_hash != 'secret123'
    assert user.is_admin is False
    assert (await services.auth_service.resolve_token(token)).id == user.id

    login_token, login_user = await services.auth_service.login(
        {'email': 'jane@shiptrack.io', 'password': 'secret123'}
    )
    assert login_user.id == user.id
    assert login_token


async def test_register_rejects_duplicate_email(services):
    await services.auth_service.register(dict(ACCOUNT))

    with pytest.raises(ValidationError) as exc_info:
        await services.auth_service.register(dict(ACCOUNT, email='jane@shiptrack.io'))
    assert exc_info.value.message == 'Email already registered'


async def test_register_validates_input(services):
    with pytest.raises(ValidationError) as exc_info:
        await services.auth_service.register(dict(ACCOUNT, password='123'))
    assert exc_info.value.message == 'Password must be at least 6 characters'

    with pytest.raises(ValidationError) as exc_info:
        await services.auth_service.register(dict(ACCOUNT, name='  '))
    assert exc_info.value.message == 'Name is required'


async def test_login_with_wrong_credentials(services):
    await services.auth_service.register(dict(ACCOUNT))

    for credentials in ({'email': 'jane@shiptrack.io', 'password': 'wrong-pass'},
                        {'email': 'nobody@shiptrack.io', 'password': 'secret123'}):
        with pytest.raises(ValidationError) as exc_info:
            await services.auth_service.login(credentials)
        assert exc_info.value.message == 'Invalid email or password'


async def test_resolve_token_failures(services, settings):
    with pytest.raises(AuthenticationError) as exc_info:
        await services.auth_service.resolve_token('not-a-token')
    assert exc_info.value.message == 'Invalid or expired token'

    orphan = issue_token(4242, settings.SECRET_KEY)
    with pytest.raises(AuthenticationError) as exc_info:
        await services.auth_service.resolve_token(orphan)
    assert exc_info.value.message == 'User not found'
