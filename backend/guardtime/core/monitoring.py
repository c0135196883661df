import sentry_sdk

from guardtime.core.config import settings


def drop_client_errors(event: dict, hint: dict) -> dict | None:
    """Keep 4xx rejections out of Sentry and tag recalculation failures."""
    exc_info = hint.get("exc_info")
    if not exc_info:
        return event
    exc = exc_info[1]
    if getattr(exc, "status_code", 500) < 500:
        return None
    level = getattr(exc, "level", None)
    if level:
        event.setdefault("tags", {})["hierarchy_level"] = level
    return event


def configure_error_monitoring() -> None:
    if settings.sentry_dsn:
        sentry_sdk.init(
            dsn=settings.sentry_dsn,
            environment=settings.env,
            traces_sample_rate=0.2,
            send_default_pii=False,
            before_send=drop_client_errors,
        )


def report_failure(exc: Exception) -> None:
    """Forward an error the API answered itself; no-op without a DSN."""
    if settings.sentry_dsn:
        sentry_sdk.capture_exception(exc)
