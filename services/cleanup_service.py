import logging

from apscheduler.schedulers.background import BackgroundScheduler
from apscheduler.triggers.interval import IntervalTrigger
from sqlalchemy.exc import SQLAlchemyError

from config import EXPIRED_OTP_CLEANUP_INTERVAL_SECONDS
from database import get_session
from services.credential_store import delete_expired_pending
from services.otp_service import utcnow

logger = logging.getLogger("storefront_api.cleanup")


def clear_expired_accounts() -> int:
    """Delete unverified accounts whose signup OTP has expired."""
    with get_session() as session:
        rows_deleted = delete_expired_pending(session, utcnow())

    if rows_deleted:
        logger.info(f"Expired account cleanup removed {rows_deleted} accounts")
    return rows_deleted


def run_cleanup_job() -> None:
    # A failed sweep is retried on the next tick
    try:
        clear_expired_accounts()
    except SQLAlchemyError:
        logger.exception("Expired account cleanup failed")


def create_scheduler(interval_seconds: int = EXPIRED_OTP_CLEANUP_INTERVAL_SECONDS) -> BackgroundScheduler:
    scheduler = BackgroundScheduler(timezone="UTC")
    scheduler.add_job(
        run_cleanup_job,
        IntervalTrigger(seconds=interval_seconds),
        id="clear_expired_accounts",
        max_instances=1,
        coalesce=True,
    )
    return scheduler
