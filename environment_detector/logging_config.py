"""Structured logging configuration for environment detection"""
import logging
import sys
from typing import Any, Dict, Optional
import structlog
from structlog.stdlib import LoggerFactory
from structlog.dev import ConsoleRenderer
from structlog.processors import JSONRenderer, TimeStamper, StackInfoRenderer

from .config import DetectorSettings


def setup_structured_logging(settings: Optional[DetectorSettings] = None) -> None:
    """Setup structured logging, JSON or console rendered

    The library never calls this itself; applications opt in.
    """
    settings = settings or DetectorSettings()
    level = getattr(logging, settings.log_level.upper())

    processors = [
        structlog.stdlib.filter_by_level,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        TimeStamper(fmt="iso"),
        StackInfoRenderer(),
        structlog.processors.format_exc_info,
    ]

    if settings.log_format == "json":
        processors.append(JSONRenderer())
    else:
        processors.append(ConsoleRenderer())

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.stdlib.BoundLogger,
        logger_factory=LoggerFactory(),
        cache_logger_on_first_use=True,
    )

    handlers = []

    console_handler = logging.StreamHandler(sys.stderr)
    console_handler.setLevel(level)
    handlers.append(console_handler)

    if settings.log_file is not None:
        settings.log_file.parent.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(str(settings.log_file))
        file_handler.setLevel(level)
        handlers.append(file_handler)

    logging.basicConfig(
        level=level,
        format="%(message)s",
        handlers=handlers,
        force=True,
    )


def get_logger(name: str) -> structlog.stdlib.BoundLogger:
    """Get a structured logger instance backed by the stdlib logger ``name``

    Processors come from the structlog configuration at call time, but
    output always goes through stdlib logging, so an application that never
    configures logging sees nothing.
    """
    return structlog.wrap_logger(logging.getLogger(name), wrapper_class=structlog.stdlib.BoundLogger)


def log_detection(logger: structlog.stdlib.BoundLogger, detector: str, cached: bool, duration: float = 0.0) -> None:
    """Log a single detector run"""
    logger.debug(
        "Detection completed",
        detector=detector,
        cached=cached,
        duration_seconds=round(duration, 6),
        event_type="detection",
    )


def log_plugin_event(logger: structlog.stdlib.BoundLogger, event: Any) -> None:
    """Log a plugin lifecycle event"""
    logger.info(
        "Plugin event",
        plugin=event.plugin.name,
        plugin_version=getattr(event.plugin, "version", None),
        event_type=event.type.value,
    )


def log_error(logger: structlog.stdlib.BoundLogger, error: BaseException, context: Dict[str, Any] = None) -> None:
    """Log error with structured context"""
    logger.error(
        "Error occurred",
        error=str(error),
        error_type=type(error).__name__,
        context=context or {},
        event_type="error",
        exc_info=error,
    )
