import os

from celery import Celery

# Only broker and schedule are read here; tasks build the full Settings when they run
redis_url = os.getenv("REDIS_URL", "redis://redis:6379/0")
sweep_schedule_minutes = int(os.getenv("SWEEP_SCHEDULE_MINUTES", "60"))


def create_celery_app(broker_url: str, schedule_minutes: int) -> Celery:
    """Celery app with the retention sweep on a beat schedule."""
    app = Celery(
        "clausewise",
        broker=broker_url,
        backend=broker_url,
        include=["clausewise.workers.retention_tasks"],
    )

    app.conf.update(
        task_serializer="json",
        accept_content=["json"],
        result_serializer="json",
        timezone="UTC",
        enable_utc=True,
        task_track_started=True,
        task_acks_late=True,
        worker_prefetch_multiplier=1,
        beat_schedule={
            "cleanup-expired-contracts": {
                "task": "retention.cleanup_expired_contracts",
                "schedule": schedule_minutes * 60.0,
                # A run that waited longer than one interval is superseded by the next
                "options": {"expires": schedule_minutes * 60},
            },
        },
    )
    return app


celery_app = create_celery_app(redis_url, sweep_schedule_minutes)
