"""structlog setup for the chatbot.

Every module asks for ``get_logger(__name__)``; the returned logger carries a
``component`` field (``engine``, ``data_store``, ...) so events from the
engine and the loader can be told apart in the Streamlit server log.
"""

from __future__ import annotations

import logging

import structlog

_configured = False


def configure_logging(level: str = "INFO", json_logs: bool = True) -> None:
    """Route structlog through the stdlib root logger. Later calls are no-ops."""
    global _configured
    if _configured:
        return

    logging.basicConfig(format="%(message)s", level=getattr(logging, level.upper(), logging.INFO))
    renderer = structlog.processors.JSONRenderer() if json_logs else structlog.dev.ConsoleRenderer()
    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            renderer,
        ],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )
    _configured = True


def get_logger(name: str):
    # initial values keep the proxy lazy until configure_logging() has run
    return structlog.get_logger(name, component=name.rsplit(".", 1)[-1])
