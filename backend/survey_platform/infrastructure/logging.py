import logging
import uuid
from typing import Any

import structlog

from survey_platform.config import Settings, settings as default_settings


def configure_logging(app_settings: Settings | None = None) -> None:
    app_settings = app_settings or default_settings
    log_level = getattr(logging, app_settings.log_level.upper(), logging.INFO)
    logging.basicConfig(format="%(message)s", level=log_level)

    shared_processors: list[Any] = [
        structlog.contextvars.merge_contextvars,
        structlog.processors.add_log_level,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
    ]
    renderer = structlog.processors.JSONRenderer() if app_settings.log_json else structlog.dev.ConsoleRenderer()

    structlog.configure(
        processors=[structlog.stdlib.filter_by_level, *shared_processors, renderer],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )


def get_logger(name: str):
    return structlog.get_logger(name)


def bind_request_context(method: str, path: str, client_host: str | None) -> str:
    """Attach request fields to every log line emitted while the request is handled."""
    request_id = uuid.uuid4().hex[:12]
    structlog.contextvars.clear_contextvars()
    structlog.contextvars.bind_contextvars(
        request_id=request_id,
        method=method,
        path=path,
        client_host=client_host or "unknown",
    )
    return request_id


def clear_request_context() -> None:
    structlog.contextvars.clear_contextvars()
