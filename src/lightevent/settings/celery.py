from celery.schedules import crontab
from decouple import config

from .base import DEBUG, TIME_ZONE

REDIS_HOST = config("REDIS_HOST", default="localhost")
REDIS_PORT = config("REDIS_PORT", default=6379, cast=int)
CELERY_REDIS_DB = config("CELERY_REDIS_DB", default=0, cast=int)

# CELERY
CELERY_BROKER_URL = config("CELERY_BROKER_URL", default=f"redis://{REDIS_HOST}:{REDIS_PORT}/{CELERY_REDIS_DB}")
CELERY_ACCEPT_CONTENT = ["application/json"]
CELERY_TASK_SERIALIZER = "json"
CELERY_RESULT_SERIALIZER = "json"
CELERY_TIMEZONE = TIME_ZONE
CELERY_TASK_ALWAYS_EAGER = config("CELERY_TASK_ALWAYS_EAGER", cast=bool, default=DEBUG)
CELERY_BROKER_CONNECTION_RETRY_ON_STARTUP = True

# Task execution settings
CELERY_TASK_TIME_LIMIT = 300
CELERY_TASK_SOFT_TIME_LIMIT = 240
CELERY_WORKER_PREFETCH_MULTIPLIER = 1
CELERY_TASK_ACKS_LATE = True

# Daily sweeps, in local (UTC+8) time.
CELERY_BEAT_SCHEDULE = {
    "send-event-reminders": {
        "task": "notifications.tasks.send_event_reminders",
        "schedule": crontab(hour=config("EVENT_REMINDER_HOUR", default=9, cast=int), minute=0),
    },
    "send-review-reminders": {
        "task": "notifications.tasks.send_review_reminders",
        "schedule": crontab(hour=config("REVIEW_REMINDER_HOUR", default=10, cast=int), minute=0),
    },
}
