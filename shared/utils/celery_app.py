"""
Celery Application Configuration

Compliance rollups are recomputed in the background. Crash-safe settings:
- acks_late = True
- task_reject_on_worker_lost = True
- worker_prefetch_multiplier = 1
"""

from celery import Celery

from shared.utils.config import get_settings

settings = get_settings()

celery_app = Celery(
    "caliber",
    broker=settings.redis_url,
    backend=settings.redis_url,
)

celery_app.conf.update(
    # Crash safety
    task_acks_late=True,
    task_reject_on_worker_lost=True,
    worker_prefetch_multiplier=1,

    # Task routing
    task_routes={
        "workers.compliance_worker.tasks.*": {"queue": "q.compliance"},
    },
    task_queues={
        "q.compliance": {},
    },

    # Serialization
    task_serializer="json",
    result_serializer="json",
    accept_content=["json"],

    # Timezone
    timezone="UTC",
    enable_utc=True,

    result_expires=86400,  # 24 hours
    worker_send_task_events=True,
    task_send_sent_event=True,
)

celery_app.autodiscover_tasks([
    "workers.compliance_worker",
])
