import logging
import sys
from typing import Any

import structlog

# Keys whose values never reach the log stream
REDACTED_KEYS = frozenset({"password", "token", "access_token", "authorization"})


def redact_secrets(logger: Any, method_name: str, event_dict: dict) -> dict:
    for key in REDACTED_KEYS.intersection(event_dict):
        event_dict[key] = "***"
    return event_dict


def _stderr_logger(*args: Any) -> structlog.PrintLogger:
    return structlog.PrintLogger(sys.stderr)


def configure_logging(level: str = "INFO", json_output: bool = True, to_stderr: bool = False) -> None:
    processors = [
        structlog.contextvars.merge_contextvars,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.add_log_level,
        redact_secrets,
    ]
    if json_output:
        processors += [structlog.processors.format_exc_info, structlog.processors.JSONRenderer()]
    else:
        processors.append(structlog.dev.ConsoleRenderer())

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.make_filtering_bound_logger(logging.getLevelName(level)),
        logger_factory=_stderr_logger if to_stderr else structlog.PrintLoggerFactory(),
        cache_logger_on_first_use=False,
    )
    logging.basicConfig(level=level)


def bind_request_context(request_id: str, method: str, path: str) -> None:
    """Attach request fields to every log line emitted while handling it."""
    structlog.contextvars.clear_contextvars()
    structlog.contextvars.bind_contextvars(request_id=request_id, method=method, path=path)


def get_logger(name: str) -> structlog.BoundLogger:
    return structlog.get_logger(name)
