SHIPMENT = {
    "senderName": "Acme Corp",
    "recipientName": "Jane Doe",
    "origin": "Memphis, TN",
    "destination": "Austin, TX",
    "weightKg": 2.5,
}


def bearer(token):
    return {"Authorization": f"Bearer {token}"}


def test_health(client):
    response = client.get("/health")

    assert response.status_code == 200
    assert response.json()["status"] == "healthy"
    assert "X-Request-ID" in response.headers


def test_shipment_lifecycle(client, register_user, promote_to_admin):
    token, user = register_user()

    response = client.post("/api/shipments", json=SHIPMENT, headers=bearer(token))
    assert response.status_code == 201
    shipment = response.json()["shipment"]
    tracking_id = shipment["trackingId"]
    assert shipment["status"] == "Created"
    assert shipment["createdById"] == user["id"]
    assert "verificationCode" not in shipment

    # public tracking, no token
    response = client.get(f"/api/shipments/track/{tracking_id}")
    assert response.status_code == 200
    body = response.json()
    assert body["shipment"]["trackingId"] == tracking_id
    assert [e["status"] for e in body["events"]] == ["Created"]
    assert body["events"][0]["location"] == "Memphis, TN"

    response = client.post(
        f"/api/shipments/{tracking_id}/event",
        json={"status": "In Transit", "location": "Dallas, TX", "note": "Departed hub"},
        headers=bearer(token),
    )
    assert response.status_code == 201
    assert response.json()["shipment"]["status"] == "In Transit"
    assert response.json()["event"]["note"] == "Departed hub"

    events = client.get(f"/api/shipments/track/{tracking_id}").json()["events"]
    assert [e["status"] for e in events] == ["In Transit", "Created"]

    mine = client.get("/api/shipments", headers=bearer(token)).json()["shipments"]
    assert [s["trackingId"] for s in mine] == [tracking_id]

    admin_token, admin = register_user(name="Ada Admin", email="ada@shiptrack.io")
    promote_to_admin(admin["id"])

    response = client.delete(f"/api/admin/shipments/{shipment['id']}", headers=bearer(admin_token))
    assert response.status_code == 200
    assert response.json() == {"success": True}

    response = client.get(f"/api/shipments/track/{tracking_id}")
    assert response.status_code == 404
    assert "error" in response.json()

    response = client.delete(f"/api/admin/shipments/{shipment['id']}", headers=bearer(admin_token))
    assert response.status_code == 404


def test_register_login_and_profile(client, register_user):
    token, user = register_user(email="Jane@ShipTrack.io")
    assert user["email"] == "jane@shiptrack.io"
    assert user["isAdmin"] is False
    assert "passwordHash" not in user

    response = client.post("/api/auth/login", json={"email": "jane@shiptrack.io", "password": "secret123"})
    assert response.status_code == 200
    assert response.json()["user"]["id"] == user["id"]

    response = client.get("/api/auth/me", headers=bearer(response.json()["token"]))
    assert response.status_code == 200
    assert response.json()["user"]["email"] == "jane@shiptrack.io"


def test_register_validation_errors(client, register_user):
    response = client.post("/api/auth/register", json={"email": "jane@shiptrack.io", "password": "secret123"})
    assert response.status_code == 400
    assert response.json() == {"error": "Name is required"}

    response = client.post("/api/auth/register", json={"name": "Jane", "email": "jane@shiptrack.io", "password": "123"})
    assert response.status_code == 400
    assert response.json() == {"error": "Password must be at least 6 characters"}

    register_user()
    response = client.post("/api/auth/register", json={"name": "Jane", "email": "jane@shiptrack.io", "password": "secret123"})
    assert response.status_code == 400
    assert response.json() == {"error": "Email already registered"}


def test_login_with_bad_credentials(client, register_user):
    register_user()

    response = client.post("/api/auth/login", json={"email": "jane@shiptrack.io", "password": "nope-nope"})

    assert response.status_code == 400
    assert response.json() == {"error": "Invalid email or password"}


def test_authorization_gate(client, register_user):
    token, _ = register_user()

    response = client.get("/api/auth/me")
    assert response.status_code == 401
    assert response.json() == {"error": "Missing or invalid authorization header"}

    response = client.get("/api/auth/me", headers={"Authorization": "Bearer not-a-token"})
    assert response.status_code == 401
    assert response.json() == {"error": "Invalid or expired token"}

    response = client.post("/api/shipments", json=SHIPMENT)
    assert response.status_code == 401

    response = client.get("/api/admin/users", headers=bearer(token))
    assert response.status_code == 403
    assert response.json() == {"error": "Admin access required"}


def test_only_owner_appends_events(client, register_user):
    owner_token, _ = register_user()
    other_token, _ = register_user(name="Sam", email="sam@shiptrack.io")
    tracking_id = client.post("/api/shipments", json=SHIPMENT, headers=bearer(owner_token)).json()["shipment"]["trackingId"]

    response = client.post(
        f"/api/shipments/{tracking_id}/event",
        json={"status": "Delivered", "location": "Austin, TX"},
        headers=bearer(other_token),
    )
    assert response.status_code == 403

    response = client.post(
        f"/api/shipments/{tracking_id}/event",
        json={"status": "Delivered"},
        headers=bearer(owner_token),
    )
    assert response.status_code == 400
    assert response.json() == {"error": "Location is required"}


def test_admin_shipment_verification_code(client, register_user, promote_to_admin):
    admin_token, admin = register_user(name="Ada Admin", email="ada@shiptrack.io")
    promote_to_admin(admin["id"])

    response = client.post("/api/admin/shipments", json=SHIPMENT, headers=bearer(admin_token))
    assert response.status_code == 201
    body = response.json()
    code = body["verificationCode"]
    tracking_id = body["shipment"]["trackingId"]
    assert len(code) == 6
    assert "verificationCode" not in body["shipment"]

    tracked = client.get(f"/api/shipments/track/{tracking_id}").json()
    assert "verificationCode" not in tracked["shipment"]

    response = client.post(f"/api/shipments/{tracking_id}/verify", json={})
    assert response.status_code == 400
    assert response.json() == {"error": "Verification code is required"}

    response = client.post(f"/api/shipments/{tracking_id}/verify", json={"code": code.lower() + "x"})
    assert response.status_code == 400

    response = client.post(f"/api/shipments/{tracking_id}/verify", json={"code": code})
    assert response.status_code == 200
    assert response.json()["shipment"]["verificationCodeUsed"] is True

    response = client.post(f"/api/shipments/{tracking_id}/verify", json={"code": code})
    assert response.status_code == 400

    response = client.post("/api/shipments/FDXNOTHERE/verify", json={"code": code})
    assert response.status_code == 404


def test_admin_user_management(client, register_user, promote_to_admin):
    admin_token, admin = register_user(name="Ada Admin", email="ada@shiptrack.io")
    _, user = register_user(name="Sam", email="sam@shiptrack.io")
    promote_to_admin(admin["id"])

    users = client.get("/api/admin/users", headers=bearer(admin_token)).json()["users"]
    assert {u["email"] for u in users} == {"ada@shiptrack.io", "sam@shiptrack.io"}

    response = client.patch(f"/api/admin/users/{user['id']}", json={"isAdmin": True}, headers=bearer(admin_token))
    assert response.status_code == 200
    assert response.json()["user"]["isAdmin"] is True

    response = client.patch(f"/api/admin/users/{admin['id']}", json={"isAdmin": False}, headers=bearer(admin_token))
    assert response.status_code == 400

    response = client.patch("/api/admin/users/9999", json={"isAdmin": True}, headers=bearer(admin_token))
    assert response.status_code == 404


def test_user_verification_flow(client, register_user):
    token, _ = register_user()

    response = client.post("/api/verification/generate", json={"type": "email"}, headers=bearer(token))
    assert response.status_code == 200
    assert "code" not in response.json()

    response = client.post("/api/verification/verify", json={"code": "ZZZZZ9", "type": "email"}, headers=bearer(token))
    assert response.status_code == 400

    response = client.post("/api/verification/generate", json={"type": "phone"}, headers=bearer(token))
    assert response.status_code == 400
    assert response.json() == {"error": "No phone number on file"}


def test_service_catalog(client, seed_catalog):
    assert client.get("/api/services").json() == {"services": []}

    assert seed_catalog() == 5
    assert seed_catalog() == 0

    services = client.get("/api/services").json()["services"]
    assert services[0]["name"] == "Ground Shipping"
    assert services[0]["price"] == 12.99


def test_subscription_uses_legacy_error_shape(client):
    response = client.post("/api/subscriptions", json={"trackingNumber": "fdx123"})
    assert response.status_code == 400
    assert response.json() == {"message": "Phone number is required", "field": "phoneNumber"}

    response = client.post("/api/subscriptions", json={"trackingNumber": "fdx123", "phoneNumber": "+1 555 010 2030"})
    assert response.status_code == 201
    assert response.json()["trackingNumber"] == "FDX123"


def test_padded_shipment_code_is_rejected(client, register_user, promote_to_admin):
    admin_token, admin = register_user(name="Ada Admin", email="ada@shiptrack.io")
    promote_to_admin(admin["id"])
    body = client.post("/api/admin/shipments", json=SHIPMENT, headers=bearer(admin_token)).json()
    tracking_id, code = body["shipment"]["trackingId"], body["verificationCode"]

    response = client.post(f"/api/shipments/{tracking_id}/verify", json={"code": f" {code} "})
    assert response.status_code == 400
    assert response.json() == {"error": "Invalid verification code"}


def test_over_long_fields_are_client_errors(client, register_user):
    token, _ = register_user()

    response = client.post("/api/shipments", json=dict(SHIPMENT, origin="x" * 201), headers=bearer(token))
    assert response.status_code == 400
    assert response.json() == {"error": "Origin must be at most 200 characters"}

    tracking_id = client.post("/api/shipments", json=SHIPMENT, headers=bearer(token)).json()["shipment"]["trackingId"]
    response = client.post(
        f"/api/shipments/{tracking_id}/event",
        json={"status": "x" * 51, "location": "Dallas, TX"},
        headers=bearer(token),
    )
    assert response.status_code == 400
    assert response.json() == {"error": "Status must be at most 50 characters"}
