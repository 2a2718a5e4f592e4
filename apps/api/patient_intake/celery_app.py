# apps/api/patient_intake/celery_app.py
from celery import Celery

from .settings import settings

celery_app = Celery(
    "patient_intake",
    broker=settings.celery_broker_url,
    backend=settings.celery_result_backend,
    include=[
        "patient_intake.tasks.ehr_sync",
    ],
)

celery_app.conf.update(
    task_default_queue=settings.celery_default_queue,
    task_routes={
        "patients.*": {"queue": "patients"},
    },
    task_serializer="json",
    result_serializer="json",
    accept_content=["json"],
    timezone="UTC",
    enable_utc=True,
    # Dev/test convenience: run tasks inline when set
    task_always_eager=settings.celery_task_always_eager,
    task_eager_propagates=True,
)
