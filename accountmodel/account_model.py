from datetime import datetime, timezone

from sqlmodel import Field, SQLModel


class Account(SQLModel, table=True):
    id: int | None = Field(default=None, primary_key=True)
    email: str = Field(index=True, unique=True)
    first_name: str
    last_name: str
    image: str
    password_hash: str
    is_verified: bool = Field(default=False)

    # Signup OTP slot, populated only while verification is pending
    otp: str | None = Field(default=None, index=True)
    otp_expires_at: datetime | None = Field(default=None, index=True)

    # Password reset slot
    reset_password_token: str | None = Field(default=None, index=True)
    reset_password_expires: datetime | None = None

    created_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
