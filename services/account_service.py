import logging

from argon2 import PasswordHasher
from argon2.exceptions import InvalidHash, VerificationError, VerifyMismatchError
from fastapi import status
from sqlalchemy.exc import IntegrityError

from accountmodel.account_model import Account
from database import get_session
from services.credential_store import (
    consume_reset_token,
    delete_account_with_otp,
    find_by_email,
    find_by_email_and_otp,
    find_by_reset_token,
    insert_account,
    mark_verified,
    store_reset_token,
    update_password_hash,
)
from services.email_service import send_reset_password_email, send_signup_otp_email
from services.errors import (
    ConflictError,
    ExpiredError,
    InvalidCodeError,
    InvalidCredentialError,
    InvalidOrExpiredTokenError,
    NotFoundError,
    UnverifiedError,
    ValidationError,
)
from services.otp_service import (
    as_utc,
    digest_token,
    issue_reset_token,
    issue_signup_otp,
    utcnow,
)

logger = logging.getLogger("storefront_api.account")

ph = PasswordHasher()


def normalize_email(email: str) -> str:
    """Strip surrounding whitespace; emails are case-sensitive as stored."""
    email = email.strip()
    if "@" not in email:
        logger.warning(f"Rejected request due to invalid email format: {email}")
        raise ValidationError("Invalid email")
    return email


def public_profile(account: Account) -> dict:
    return {
        "id": account.id,
        "firstName": account.first_name,
        "lastName": account.last_name,
        "email": account.email,
        "image": account.image,
    }


def request_signup(
    email: str, first_name: str, last_name: str, password: str, image: str
) -> None:
    """
    Send a signup OTP and create the pending account.

    The account row is written only after the email is delivered, so a mail
    outage leaves nothing behind.

    Raises:
        ConflictError: If an account already exists for the email
        DeliveryError: If the OTP email could not be sent
    """
    email = normalize_email(email)

    with get_session() as session:
        if find_by_email(session, email) is not None:
            logger.info(f"Signup rejected, email already registered: {email}")
            raise ConflictError()

    otp, otp_expires_at = issue_signup_otp()
    send_signup_otp_email(email, otp, first_name)

    account = Account(
        email=email,
        first_name=first_name,
        last_name=last_name,
        image=image,
        password_hash=ph.hash(password),
        otp=digest_token(otp),
        otp_expires_at=otp_expires_at,
    )
    with get_session() as session:
        try:
            insert_account(session, account)
        except IntegrityError:
            session.rollback()
            logger.info(f"Signup lost insert race for email={email}")
            raise ConflictError()

    logger.info(f"Signup OTP sent and pending account created for email={email}")


def verify_otp(email: str, otp: str) -> None:
    """
    Confirm a signup OTP.

    Wrong email, wrong code and already-consumed code all report
    InvalidCodeError. An expired code deletes the pending account.
    """
    email = email.strip()
    otp_digest = digest_token(otp.strip())
    now = utcnow()

    with get_session() as session:
        account = find_by_email_and_otp(session, email, otp_digest)
        if account is None:
            logger.warning(f"OTP verification failed: no matching OTP for email={email}")
            raise InvalidCodeError()

        if account.otp_expires_at is None or now > as_utc(account.otp_expires_at):
            delete_account_with_otp(session, account.id, otp_digest)
            logger.warning(f"OTP verification failed: OTP expired for email={email}")
            raise ExpiredError()

        if not mark_verified(session, account.id, otp_digest):
            # Consumed by a concurrent verification
            logger.warning(f"OTP verification failed: OTP already used for email={email}")
            raise InvalidCodeError()

    logger.info(f"OTP verified successfully for email={email}")


def login(email: str, password: str) -> Account:
    email = email.strip()

    with get_session() as session:
        account = find_by_email(session, email)

    if account is None:
        raise NotFoundError(status_code=status.HTTP_400_BAD_REQUEST)

    if not account.is_verified:
        raise UnverifiedError()

    try:
        ph.verify(account.password_hash, password)
    except VerifyMismatchError:
        logger.info(f"Login failed, password mismatch for email={email}")
        raise InvalidCredentialError()
    except InvalidHash:
        logger.error(f"Stored password hash is corrupted for email={email}")
        raise InvalidCredentialError()
    except VerificationError:
        logger.exception(f"General Argon2 verification error for email={email}")
        raise InvalidCredentialError()

    if ph.check_needs_rehash(account.password_hash):
        account.password_hash = ph.hash(password)
        with get_session() as session:
            update_password_hash(session, account.id, account.password_hash)

    logger.info(f"Login succeeded for email={email}")
    return account


def request_password_reset(email: str) -> None:
    """
    Store a fresh reset token for the account, then email it.

    The token is stored before delivery. When delivery fails the token stays
    in place and DeliveryError propagates; a retry overwrites it.
    """
    email = email.strip()
    token, expires_at = issue_reset_token()

    with get_session() as session:
        if not store_reset_token(session, email, digest_token(token), expires_at):
            raise NotFoundError()

    send_reset_password_email(email, token)
    logger.info(f"Password reset email sent for email={email}")


def validate_reset_token(token: str) -> bool:
    with get_session() as session:
        account = find_by_reset_token(session, digest_token(token), utcnow())
    return account is not None


def reset_password(token: str, new_password: str) -> None:
    token_digest = digest_token(token)

    with get_session() as session:
        if find_by_reset_token(session, token_digest, utcnow()) is None:
            logger.warning("Password reset rejected: token invalid or expired")
            raise InvalidOrExpiredTokenError()

    password_hash = ph.hash(new_password)

    # The conditional update still guards against a concurrent reset
    with get_session() as session:
        if not consume_reset_token(session, token_digest, utcnow(), password_hash):
            logger.warning("Password reset rejected: token invalid or expired")
            raise InvalidOrExpiredTokenError()

    logger.info("Password reset completed")
