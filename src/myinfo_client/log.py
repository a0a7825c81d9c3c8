"""
Logging support for the MyInfo client.

Clients never write to a concrete sink on their own. They take a ``logger``
argument that follows the structlog calling convention
(``logger.info("event", key=value)``) and default to :class:`NullLogger`.
Applications that want output call :func:`configure_logging` once and pass
:func:`get_logger` to the client.
"""

import logging
import sys
from typing import Any, Dict, Protocol

import structlog


class ClientLogger(Protocol):
    """Observer interface the clients log through"""

    def debug(self, event: str, **fields: Any) -> Any:
        ...

    def info(self, event: str, **fields: Any) -> Any:
        ...

    def warning(self, event: str, **fields: Any) -> Any:
        ...

    def error(self, event: str, **fields: Any) -> Any:
        ...


class NullLogger:
    """Logger that discards every event"""

    def debug(self, event: str, **fields: Any) -> None:
        pass

    def info(self, event: str, **fields: Any) -> None:
        pass

    def warning(self, event: str, **fields: Any) -> None:
        pass

    def error(self, event: str, **fields: Any) -> None:
        pass


def add_sdk_context(logger: Any, method_name: str, event_dict: Dict[str, Any]) -> Dict[str, Any]:
    """Tag log events with the SDK name."""
    event_dict.setdefault("sdk", "myinfo-client")
    return event_dict


def configure_logging(log_level: str = "info", json_output: bool = False, stream=None) -> None:
    """Configure structured logging for an application using the client."""
    renderer = structlog.processors.JSONRenderer() if json_output else structlog.dev.ConsoleRenderer(colors=False)

    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            add_sdk_context,
            renderer,
        ],
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )

    logging.basicConfig(
        format="%(message)s",
        stream=stream or sys.stderr,
        level=getattr(logging, log_level.upper()),
    )


def get_logger(name: str = "myinfo_client") -> structlog.BoundLogger:
    """Get a structured logger instance."""
    return structlog.get_logger(name)
