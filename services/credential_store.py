"""Account persistence.

Every write that consumes or replaces a token slot is a single conditional
UPDATE/DELETE, and callers check the affected row count instead of
re-reading the row.
"""

from datetime import datetime

from sqlalchemy import delete, update
from sqlmodel import Session, select

from accountmodel.account_model import Account


def find_by_email(session: Session, email: str) -> Account | None:
    return session.exec(select(Account).where(Account.email == email)).first()


def find_by_email_and_otp(session: Session, email: str, otp_digest: str) -> Account | None:
    stmt = select(Account).where(Account.email == email, Account.otp == otp_digest)
    return session.exec(stmt).first()


def find_by_reset_token(session: Session, token_digest: str, now: datetime) -> Account | None:
    stmt = select(Account).where(
        Account.reset_password_token == token_digest,
        Account.reset_password_expires > now,
    )
    return session.exec(stmt).first()


def insert_account(session: Session, account: Account) -> Account:
    """Insert a new account. Raises IntegrityError if the email is taken."""
    session.add(account)
    session.commit()
    session.refresh(account)
    return account


def mark_verified(session: Session, account_id: int, otp_digest: str) -> bool:
    stmt = (
        update(Account)
        .where(
            Account.id == account_id,
            Account.otp == otp_digest,
            Account.is_verified == False,  # noqa: E712
        )
        .values(is_verified=True, otp=None, otp_expires_at=None)
        .execution_options(synchronize_session=False)
    )
    result = session.exec(stmt)
    session.commit()
    return result.rowcount == 1


def delete_account_with_otp(session: Session, account_id: int, otp_digest: str) -> bool:
    stmt = (
        delete(Account)
        .where(Account.id == account_id, Account.otp == otp_digest)
        .execution_options(synchronize_session=False)
    )
    result = session.exec(stmt)
    session.commit()
    return result.rowcount == 1


def store_reset_token(
    session: Session, email: str, token_digest: str, expires_at: datetime
) -> bool:
    stmt = (
        update(Account)
        .where(Account.email == email)
        .values(reset_password_token=token_digest, reset_password_expires=expires_at)
        .execution_options(synchronize_session=False)
    )
    result = session.exec(stmt)
    session.commit()
    return result.rowcount == 1


def consume_reset_token(
    session: Session, token_digest: str, now: datetime, password_hash: str
) -> bool:
    stmt = (
        update(Account)
        .where(
            Account.reset_password_token == token_digest,
            Account.reset_password_expires > now,
        )
        .values(
            password_hash=password_hash,
            reset_password_token=None,
            reset_password_expires=None,
        )
        .execution_options(synchronize_session=False)
    )
    result = session.exec(stmt)
    session.commit()
    return result.rowcount == 1


def update_password_hash(session: Session, account_id: int, password_hash: str) -> None:
    session.exec(
        update(Account)
        .where(Account.id == account_id)
        .values(password_hash=password_hash)
        .execution_options(synchronize_session=False)
    )
    session.commit()


def delete_expired_pending(session: Session, now: datetime) -> int:
    """Bulk delete unverified accounts whose signup OTP has lapsed."""
    stmt = (
        delete(Account)
        .where(
            Account.otp_expires_at < now,
            Account.is_verified == False,  # noqa: E712
        )
        .execution_options(synchronize_session=False)
    )
    result = session.exec(stmt)
    session.commit()
    return result.rowcount or 0
