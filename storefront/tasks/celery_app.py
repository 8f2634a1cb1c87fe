from celery import Celery
from ssl import CERT_NONE

from storefront.config import settings
from storefront.core.logging import get_logger

logger = get_logger(__name__)


def to_tls_url(url: str) -> str:
    """
    Upstash Redis requires TLS: switch redis:// to rediss:// and drop the
    trailing database number, which the hosted service rejects.
    """
    if not url or "upstash.io" not in url:
        return url
    url = url.rstrip("/")
    head, _, tail = url.rpartition("/")
    if tail.isdigit() and head.count("/") >= 2:
        url = head
    if url.startswith("redis://"):
        url = url.replace("redis://", "rediss://", 1)
    return url


raw_broker_url = settings.celery_broker_url or settings.redis_url
celery_broker_url = to_tls_url(raw_broker_url)
celery_result_backend = to_tls_url(settings.celery_result_backend or settings.redis_url)

if celery_broker_url != raw_broker_url:
    logger.info("Celery broker URL converted to TLS: %s...", celery_broker_url[:50])

celery_app = Celery(
    "storefront",
    broker=celery_broker_url,
    backend=celery_result_backend,
)

config_updates = {
    "task_serializer": "json",
    "accept_content": ["json"],
    "result_serializer": "json",
    "timezone": "UTC",
    "enable_utc": True,
    "task_ignore_result": True,
    "worker_prefetch_multiplier": 1,
    "worker_max_tasks_per_child": 1000,
    "broker_connection_retry_on_startup": True,
    "result_backend_always_retry": True,
    "result_backend_max_retries": 3,
}

# Upstash uses self-signed certs; Kombu takes SSL options via broker_use_ssl
if celery_broker_url.startswith("rediss://"):
    config_updates["broker_use_ssl"] = {
        "ssl_cert_reqs": CERT_NONE,
        "ssl_ca_certs": None,
        "ssl_certfile": None,
        "ssl_keyfile": None,
    }
    config_updates["broker_transport_options"] = {"health_check_interval": 30}

celery_app.conf.update(**config_updates)

# Import tasks to register them
from storefront.tasks import view_count  # noqa: E402,F401
