"""
Shared logging configuration for the ACL evaluator.

The evaluator is embedded in host applications, so its loggers are plain
stdlib loggers wrapped by structlog. Until ``configure_logging`` is
called, records follow whatever the host configured for the ``acl``
namespace and nothing is printed on its own.
"""

import sys
import structlog
import logging
from typing import Any, Dict

# Keep the library quiet when the host has no handlers
logging.getLogger("acl").addHandler(logging.NullHandler())

_handlers: Dict[str, logging.Handler] = {}


def configure_logging(service_name: str, log_level: str = "info") -> None:
    """Configure structured JSON logging for a service namespace.

    Only the ``service_name`` logger gets a handler, the root logger is
    left to the host. Calling it again replaces the previous handler.
    """

    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            structlog.stdlib.PositionalArgumentsFormatter(),
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            structlog.processors.UnicodeDecoder(),
            add_service_context,
            structlog.processors.JSONRenderer()
        ],
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(logging.Formatter("%(message)s"))

    logger = logging.getLogger(service_name)
    previous = _handlers.pop(service_name, None)
    if previous is not None:
        logger.removeHandler(previous)
    logger.addHandler(handler)
    logger.setLevel(getattr(logging, log_level.upper()))
    _handlers[service_name] = handler


def reset_logging(service_name: str) -> None:
    """Undo ``configure_logging`` for a service namespace."""
    handler = _handlers.pop(service_name, None)
    logger = logging.getLogger(service_name)
    if handler is not None:
        logger.removeHandler(handler)
    logger.setLevel(logging.NOTSET)
    structlog.reset_defaults()


def add_service_context(logger: Any, method_name: str, event_dict: Dict[str, Any]) -> Dict[str, Any]:
    """Add service and component names taken from the logger name."""
    logger_name = event_dict.get("logger", "")
    if "." in logger_name:
        service_name, component = logger_name.split(".", 1)
        event_dict["service"] = service_name
        event_dict["component"] = component

    return event_dict


def get_logger(name: str) -> structlog.stdlib.BoundLogger:
    """Get a structured logger backed by the stdlib logger ``name``."""
    return structlog.wrap_logger(logging.getLogger(name), wrapper_class=structlog.stdlib.BoundLogger)
