import sentry_sdk

from overtime_api.core.config import settings
from overtime_api.core.logging import get_logger

logger = get_logger(__name__)


def _scrub_credentials(event, hint):
    request = event.get("request") or {}
    headers = request.get("headers") or {}
    for key in list(headers):
        if key.lower() in ("authorization", "x-csrf-token", "cookie"):
            headers[key] = "[redacted]"
    data = request.get("data")
    if isinstance(data, dict) and "password" in data:
        data["password"] = "[redacted]"
    return event


def configure_error_monitoring() -> bool:
    if not settings.sentry_dsn:
        return False
    sentry_sdk.init(
        dsn=settings.sentry_dsn,
        environment=settings.env,
        traces_sample_rate=0.2,
        send_default_pii=False,
        before_send=_scrub_credentials,
    )
    logger.info("error_monitoring_enabled", env=settings.env)
    return True
