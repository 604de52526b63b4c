"""
Celery worker and beat schedule.

Runs the daily reminder sweep. Start with:

    celery -A leave_api.worker worker --beat
"""

from dataclasses import asdict
from functools import lru_cache
from typing import Any, Dict, Optional

import redis
from celery import Celery
from celery.schedules import crontab
from redis.exceptions import LockError

from leave_api.config.settings import Settings, get_settings
from leave_api.core.logging import get_logger, setup_logging
from leave_api.db.session import build_engine, build_session_factory
from leave_api.services.communication import EmailConfig, ReminderSweep, SMTPMailer, SweepResult

logger = get_logger(__name__)

SWEEP_TASK_NAME = "leave_api.reminder_sweep"
SWEEP_LOCK_NAME = "leave_api:reminder_sweep"


def build_celery(settings: Settings) -> Celery:
    """Celery application with the daily sweep scheduled in local time."""
    app = Celery(
        "leave_api",
        broker=settings.REDIS_URL,
        backend=settings.REDIS_URL,
    )
    app.conf.update(
        task_serializer="json",
        accept_content=["json"],
        result_serializer="json",
        timezone=settings.SWEEP_TIMEZONE,
        enable_utc=True,
        task_track_started=True,
        worker_prefetch_multiplier=1,
        task_acks_late=True,
    )
    app.conf.beat_schedule = {
        "daily-reminder-sweep": {
            "task": SWEEP_TASK_NAME,
            "schedule": crontab(hour=settings.SWEEP_HOUR, minute=settings.SWEEP_MINUTE),
        },
    }
    return app


def build_sweep(settings: Settings) -> ReminderSweep:
    session_factory = build_session_factory(build_engine(settings))
    return ReminderSweep(
        session_factory,
        SMTPMailer(EmailConfig.from_settings(settings)),
        leave_management_url=settings.FRONTEND_URL,
        otp_validity_minutes=settings.OTP_VALIDITY_MINUTES,
    )


def run_exclusive(
    sweep: ReminderSweep,
    redis_client: Any,
    *,
    lock_timeout: int,
) -> Optional[SweepResult]:
    """
    Run ``sweep`` unless another run holds the lock.

    Returns:
        The sweep summary, or None when the run was skipped
    """
    lock = redis_client.lock(SWEEP_LOCK_NAME, timeout=lock_timeout, blocking=False)
    if not lock.acquire(blocking=False):
        logger.info("reminder_sweep_skipped", reason="already_running")
        return None
    try:
        return sweep.run()
    finally:
        try:
            lock.release()
        except LockError:
            # Lock expired while the sweep was still running
            logger.warning("reminder_sweep_lock_lost", timeout=lock_timeout)


@lru_cache()
def _worker_sweep() -> ReminderSweep:
    return build_sweep(get_settings())


settings = get_settings()
celery_app = build_celery(settings)


@celery_app.on_after_configure.connect
def _configure_logging(sender: Celery, **kwargs: Any) -> None:
    setup_logging(settings.LOG_LEVEL, settings.LOG_FORMAT, settings.ENVIRONMENT)


@celery_app.task(name=SWEEP_TASK_NAME)
def reminder_sweep() -> Optional[Dict[str, Any]]:
    result = run_exclusive(
        _worker_sweep(),
        redis.Redis.from_url(settings.REDIS_URL),
        lock_timeout=settings.SWEEP_LOCK_TIMEOUT_SECONDS,
    )
    return asdict(result) if result is not None else None
