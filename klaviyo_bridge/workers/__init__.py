"""
Celery workers module.

Async dispatch of Klaviyo units of work.

Dependencies: celery, klaviyo_bridge.configs
System role: Background task processing
"""

from celery import Celery, signals

from klaviyo_bridge.configs import get_settings
from klaviyo_bridge.observability.logger import configure_logging

settings = get_settings()
celery_config = settings.celery

celery_app = Celery(
    "klaviyo_bridge",
    broker=celery_config.broker_url,
    backend=celery_config.result_backend_url,
    include=[
        "klaviyo_bridge.workers.tasks.identify_customer",
        "klaviyo_bridge.workers.tasks.track_event",
        "klaviyo_bridge.workers.tasks.sync_catalog",
        "klaviyo_bridge.workers.tasks.profile",
    ],
)

celery_app.conf.update(
    task_serializer=celery_config.task_serializer,
    result_serializer=celery_config.result_serializer,
    accept_content=celery_config.accept_content,
    timezone=celery_config.timezone,
    task_default_queue=celery_config.events_queue,
    task_routes={
        "klaviyo.sync_catalog": {"queue": celery_config.catalog_queue},
        "klaviyo.delete_catalog_item": {"queue": celery_config.catalog_queue},
        "klaviyo.*": {"queue": celery_config.events_queue},
    },
    # At-least-once delivery: ack after the unit finishes
    task_acks_late=True,
    task_reject_on_worker_lost=True,
    worker_prefetch_multiplier=1,
)


@signals.setup_logging.connect
def _configure_worker_logging(**kwargs) -> None:
    """Use the application log format inside workers."""
    configure_logging(settings.log_level)
