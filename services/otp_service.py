import hashlib
import secrets
from datetime import datetime, timedelta, timezone

from config import (
    OTP_CHARACTER_LENGTH,
    OTP_LIFETIME_MINUTES,
    RESET_TOKEN_BYTES,
    RESET_TOKEN_LIFETIME_MINUTES,
)


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def as_utc(value: datetime) -> datetime:
    # SQLite stores naive datetime, so replace tzinfo
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


def generate_otp(length: int = OTP_CHARACTER_LENGTH) -> str:
    """Return a numeric code with exactly `length` digits (no leading zero)."""
    lowest = 10 ** (length - 1)
    return str(lowest + secrets.randbelow(9 * lowest))


def generate_reset_token(nbytes: int = RESET_TOKEN_BYTES) -> str:
    return secrets.token_hex(nbytes)


def digest_token(value: str) -> str:
    """Digest stored in place of an OTP or reset token."""
    return hashlib.sha256(value.encode("utf-8")).hexdigest()


def issue_signup_otp(now: datetime | None = None) -> tuple[str, datetime]:
    issued_at = now or utcnow()
    return generate_otp(), issued_at + timedelta(minutes=OTP_LIFETIME_MINUTES)


def issue_reset_token(now: datetime | None = None) -> tuple[str, datetime]:
    issued_at = now or utcnow()
    return generate_reset_token(), issued_at + timedelta(
        minutes=RESET_TOKEN_LIFETIME_MINUTES
    )
