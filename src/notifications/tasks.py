"""Celery tasks for the scheduled reminder jobs."""

import structlog
from celery import shared_task

from notifications.service import reminder_service

logger = structlog.get_logger(__name__)


@shared_task
def send_event_reminders() -> int:
    """Daily: remind participants of tomorrow's events."""
    sent = reminder_service.send_event_reminders()
    logger.info("event_reminders_job_completed", sent=sent)
    return sent


@shared_task
def send_review_reminders() -> int:
    """Daily: ask yesterday's participants for a review."""
    sent = reminder_service.send_review_reminders()
    logger.info("review_reminders_job_completed", sent=sent)
    return sent
