"""structlog configuration for the console.

Development gets a coloured console renderer, production (``APP_ENV`` or
``json_output``) one JSON object per line.  The standard-library root
logger is routed through the same processors so uvicorn output matches.

Every provider call goes through httpx, whose own ``INFO`` line per
request would double the provider's logging; httpx and httpcore are held
at ``WARNING`` unless the console itself runs at ``DEBUG``.

Request-scoped fields (request id, method, path) are bound with
:func:`bind_request_context` and merged into every event logged while the
request is handled.
"""

import logging
import os
import sys

import structlog

_TRANSPORT_LOGGERS = ("httpx", "httpcore")


def configure_logging(log_level: str = "INFO", json_output: bool = False) -> structlog.BoundLogger:
    """Install the structlog pipeline and rewire stdlib logging through it."""
    level_name = log_level.upper()
    level = logging.getLevelName(level_name)
    use_json = json_output or os.environ.get("APP_ENV", "development") == "production"

    shared_processors: list[structlog.types.Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.processors.add_log_level,
        structlog.processors.StackInfoRenderer(),
        structlog.dev.set_exc_info,
        structlog.processors.TimeStamper(fmt="iso"),
    ]
    renderer: structlog.types.Processor = (
        structlog.processors.JSONRenderer()
        if use_json
        else structlog.dev.ConsoleRenderer(colors=True)
    )

    structlog.configure(
        processors=[*shared_processors, renderer],
        wrapper_class=structlog.make_filtering_bound_logger(level),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(),
        cache_logger_on_first_use=True,
    )

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(
        structlog.stdlib.ProcessorFormatter(
            processors=[
                structlog.stdlib.ProcessorFormatter.remove_processors_meta,
                *shared_processors,
                renderer,
            ],
        )
    )
    root_logger = logging.getLogger()
    root_logger.handlers.clear()
    root_logger.addHandler(handler)
    root_logger.setLevel(level_name)

    transport_level = level if level <= logging.DEBUG else logging.WARNING
    for name in _TRANSPORT_LOGGERS:
        logging.getLogger(name).setLevel(transport_level)

    return structlog.get_logger()


def get_logger(name: str) -> structlog.BoundLogger:
    """Named logger; falls back to the development setup if nothing configured it."""
    if not structlog.is_configured():
        configure_logging()
    return structlog.get_logger(logger_name=name)


def bind_request_context(request_id: str, method: str, path: str) -> None:
    """Attach request fields to every event logged in the current context."""
    structlog.contextvars.clear_contextvars()
    structlog.contextvars.bind_contextvars(request_id=request_id, method=method, path=path)


def clear_request_context() -> None:
    structlog.contextvars.clear_contextvars()


def redact_secret(value: str | None) -> str:
    """Render a secret for log output without revealing it."""
    return "***REDACTED***" if value else "undefined"
