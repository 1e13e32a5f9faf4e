import os
import tempfile

# Settings must be in the environment before config is imported
_test_dir = tempfile.mkdtemp(prefix="storefront-tests-")
os.environ["DATABASE_URL"] = f"sqlite:///{os.path.join(_test_dir, 'test.db')}"
os.environ.setdefault("JWT_SECRET_KEY", "test-secret-key-with-enough-length-1234")
os.environ.setdefault("AWS_REGION", "us-east-2")
os.environ.setdefault("AWS_ACCESS_KEY", "testing")
os.environ.setdefault("AWS_SECRET_ACCESS_KEY", "testing")
os.environ.setdefault("AWS_SES_SENDER_EMAIL", "no-reply@example.com")

from datetime import timedelta  # noqa: E402

import pytest  # noqa: E402
from fastapi.testclient import TestClient  # noqa: E402
from sqlalchemy import update  # noqa: E402
from sqlmodel import SQLModel  # noqa: E402

from accountmodel.account_model import Account  # noqa: E402
from database import engine, get_session, init_db  # noqa: E402
from main import app  # noqa: E402
from services import account_service  # noqa: E402
from services.credential_store import find_by_email  # noqa: E402
from services.otp_service import utcnow  # noqa: E402


@pytest.fixture(autouse=True)
def fresh_database():
    """Recreate every table so each test starts from an empty store."""
    SQLModel.metadata.drop_all(engine)
    init_db()
    yield


@pytest.fixture
def load_account():
    """Read an account with a short-lived session."""

    def load(email):
        with get_session() as session:
            return find_by_email(session, email)

    return load


@pytest.fixture
def expire_slot():
    """Move an account's OTP or reset expiry into the past."""

    def expire(email, column="otp_expires_at", minutes=1):
        with get_session() as session:
            session.exec(
                update(Account)
                .where(Account.email == email)
                .values({column: utcnow() - timedelta(minutes=minutes)})
                .execution_options(synchronize_session=False)
            )
            session.commit()

    return expire


@pytest.fixture
def client():
    # Not entered as a context manager: the lifespan (and its scheduler) stays off
    return TestClient(app)


@pytest.fixture
def outbox(monkeypatch):
    """Capture outgoing OTP and reset emails instead of calling SES."""
    sent = []

    def fake_signup_otp_email(email, otp, first_name=""):
        sent.append({"kind": "otp", "email": email, "code": otp})
        return "test-message-id"

    def fake_reset_password_email(email, token):
        sent.append({"kind": "reset", "email": email, "code": token})
        return "test-message-id"

    monkeypatch.setattr(account_service, "send_signup_otp_email", fake_signup_otp_email)
    monkeypatch.setattr(account_service, "send_reset_password_email", fake_reset_password_email)
    return sent


SIGNUP = {
    "firstName": "Ada",
    "lastName": "Lovelace",
    "password": "Secret123!",
    "confirmPassword": "Secret123!",
    "email": "ada@example.com",
    "image": "data:image/png;base64,iVBORw0KGgo=",
}


@pytest.fixture
def signup_payload():
    return dict(SIGNUP)


@pytest.fixture
def verified_account(outbox):
    """Sign up and verify ada@example.com through the service layer."""
    account_service.request_signup(
        email=SIGNUP["email"],
        first_name=SIGNUP["firstName"],
        last_name=SIGNUP["lastName"],
        password=SIGNUP["password"],
        image=SIGNUP["image"],
    )
    account_service.verify_otp(SIGNUP["email"], outbox[-1]["code"])
    return SIGNUP["email"]
