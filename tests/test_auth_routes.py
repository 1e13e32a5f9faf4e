import logging

from services import account_service
from services.errors import DeliveryError


def test_root(client):
    response = client.get("/")
    assert response.status_code == 200
    assert response.text == "Server is running"


def test_signup_verify_login_flow(client, outbox, signup_payload):
    response = client.post("/send-otp", json=signup_payload)
    assert response.status_code == 200
    assert response.json() == {"message": "OTP sent to your email successfully!", "alert": True}

    otp = outbox[-1]["code"]
    response = client.post("/verify-otp", json={"email": signup_payload["email"], "otp": otp})
    assert response.status_code == 200

    response = client.post(
        "/login",
        json={"email": signup_payload["email"], "password": signup_payload["password"]},
    )
    assert response.status_code == 200
    body = response.json()
    assert body["alert"] is True
    assert body["data"]["email"] == signup_payload["email"]
    assert body["data"]["firstName"] == "Ada"
    assert body["token"]
    assert not any("password" in key.lower() for key in body["data"])


def test_send_otp_duplicate_email(client, outbox, signup_payload):
    client.post("/send-otp", json=signup_payload)
    response = client.post("/send-otp", json=signup_payload)

    assert response.status_code == 400
    assert response.json() == {
        "message": "Email already registered!",
        "alert": False,
        "error": "Conflict",
    }


def test_send_otp_missing_field(client, outbox, signup_payload):
    del signup_payload["image"]
    response = client.post("/send-otp", json=signup_payload)

    assert response.status_code == 400
    assert response.json()["error"] == "ValidationError"
    assert "image" in response.json()["fields"]
    assert outbox == []


def test_rejected_request_is_logged(client, outbox, signup_payload, caplog):
    del signup_payload["image"]

    with caplog.at_level(logging.INFO, logger="storefront_api.http"):
        client.post("/send-otp", json=signup_payload)

    assert "Rejected POST /send-otp" in caplog.text
    assert "image" in caplog.text


def test_send_otp_password_mismatch(client, outbox, signup_payload):
    signup_payload["confirmPassword"] = "something-else"
    response = client.post("/send-otp", json=signup_payload)

    assert response.status_code == 400
    assert response.json()["error"] == "ValidationError"
    assert outbox == []


def test_send_otp_delivery_failure(client, monkeypatch, signup_payload, load_account):
    def failing_send(email, otp, first_name=""):
        raise DeliveryError()

    monkeypatch.setattr(account_service, "send_signup_otp_email", failing_send)

    response = client.post("/send-otp", json=signup_payload)
    assert response.status_code == 500
    assert response.json()["error"] == "DeliveryError"
    assert load_account(signup_payload["email"]) is None


def test_verify_otp_invalid(client, outbox, signup_payload):
    client.post("/send-otp", json=signup_payload)
    response = client.post("/verify-otp", json={"email": signup_payload["email"], "otp": "000000"})

    assert response.status_code == 400
    assert response.json()["error"] == "InvalidCode"


def test_verify_otp_expired(client, outbox, signup_payload, expire_slot):
    client.post("/send-otp", json=signup_payload)
    expire_slot(signup_payload["email"])

    response = client.post(
        "/verify-otp", json={"email": signup_payload["email"], "otp": outbox[-1]["code"]}
    )
    assert response.status_code == 400
    assert response.json()["error"] == "Expired"

    response = client.post(
        "/login",
        json={"email": signup_payload["email"], "password": signup_payload["password"]},
    )
    assert response.status_code == 400
    assert response.json()["error"] == "NotFound"


def test_login_unverified(client, outbox, signup_payload):
    client.post("/send-otp", json=signup_payload)
    response = client.post(
        "/login",
        json={"email": signup_payload["email"], "password": signup_payload["password"]},
    )

    assert response.status_code == 403
    assert response.json()["error"] == "Unverified"
    assert "password" not in response.text.lower()


def test_login_wrong_password(client, verified_account):
    response = client.post("/login", json={"email": verified_account, "password": "nope"})

    assert response.status_code == 400
    assert response.json()["error"] == "InvalidCredential"


def test_login_unknown_email(client):
    response = client.post("/login", json={"email": "ghost@example.com", "password": "nope"})

    assert response.status_code == 400
    assert response.json()["error"] == "NotFound"


def test_forgot_password_unknown_email(client, outbox):
    response = client.post("/forgot-password", json={"email": "ghost@example.com"})

    assert response.status_code == 404
    assert response.json()["error"] == "NotFound"


def test_password_reset_flow(client, verified_account, outbox):
    response = client.post("/forgot-password", json={"email": verified_account})
    assert response.status_code == 200
    assert response.json()["alert"] is True
    token = outbox[-1]["code"]

    response = client.get(f"/verify-reset-token/{token}")
    assert response.status_code == 200
    assert response.json() == {"valid": True}

    response = client.post("/reset-password", json={"token": token, "newPassword": "NewSecret456!"})
    assert response.status_code == 200

    response = client.get(f"/verify-reset-token/{token}")
    assert response.status_code == 400
    assert response.json() == {"valid": False}

    response = client.post("/login", json={"email": verified_account, "password": "NewSecret456!"})
    assert response.status_code == 200
    response = client.post("/login", json={"email": verified_account, "password": "Secret123!"})
    assert response.status_code == 400


def test_reset_password_expired_token(client, verified_account, outbox, expire_slot):
    client.post("/forgot-password", json={"email": verified_account})
    token = outbox[-1]["code"]
    expire_slot(verified_account, "reset_password_expires")

    response = client.post("/reset-password", json={"token": token, "newPassword": "NewSecret456!"})
    assert response.status_code == 400
    assert response.json()["error"] == "InvalidOrExpiredToken"

    response = client.post("/login", json={"email": verified_account, "password": "Secret123!"})
    assert response.status_code == 200
