# /storeops/utils/logging.py

import logging
import sys
import structlog
from storeops.config.settings import settings

# One structlog pipeline for the whole assistant. Message handlers log through
# stdlib loggers and the webhook routes through structlog; both end up on
# stdout, rendered for humans in development and as JSON lines elsewhere.

QUIET_LOGGERS = ("uvicorn.access", "httpx", "openai")


def setup_logging(environment: str | None = None, level: str | None = None) -> logging.Handler:
    """
    Routes structlog and stdlib logging through a single stdout handler.
    Safe to call more than once; the previous root handlers are replaced.
    """
    environment = environment or settings.environment
    level = (level or settings.log_level).upper()

    shared_processors = [
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
        structlog.processors.UnicodeDecoder(),
    ]

    if environment == "development":
        renderer = structlog.dev.ConsoleRenderer()
    else:
        renderer = structlog.processors.JSONRenderer()

    structlog.configure(
        processors=shared_processors + [structlog.stdlib.ProcessorFormatter.wrap_for_formatter],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(structlog.stdlib.ProcessorFormatter(
        processor=renderer,
        foreign_pre_chain=shared_processors,
    ))

    root_logger = logging.getLogger()
    root_logger.handlers = [handler]
    root_logger.setLevel(level)

    for name in QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)
    return handler
