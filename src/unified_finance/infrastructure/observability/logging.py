"""
Structured logging infrastructure for unified-finance.
Provides consistent, machine-readable logs across all components.

Log Structure:
    {
        "app": "unified-finance",      # Application identifier
        "layer": "ingestion",          # Architectural layer
        "component": "token-bucket",   # Specific component/service
        "module": "...",               # Python module (optional)
        "provider": "YAHOO",           # Upstream provider context
        "event": "token_acquired",     # What happened
        ...
    }

Architectural Layers:
    - infrastructure: Cross-cutting (config, transport)
    - ingestion: Access layer (rate limiter, cache, auth)
    - pipeline: Request orchestration and batch fan-out
    - service: Domain services (quotes, history, options, macro, ...)

Secrets (anti-forgery tokens, API keys) must never be passed as log context.
"""

import logging
import sys
from typing import Any, Literal

import structlog
from structlog.types import EventDict

# Define valid architectural layers
Layer = Literal["infrastructure", "ingestion", "pipeline", "service"]


def add_app_context(logger: Any, method_name: str, event_dict: EventDict) -> EventDict:
    """Add application-wide context to every log entry."""
    event_dict["app"] = "unified-finance"
    return event_dict


def add_severity_level(
    logger: Any, method_name: str, event_dict: EventDict
) -> EventDict:
    """
    Add severity level for cloud logging compatibility.
    Maps Python log levels to standard severity levels.
    """
    level = event_dict.get("level")
    if level:
        severity_map = {
            "debug": "DEBUG",
            "info": "INFO",
            "warning": "WARNING",
            "error": "ERROR",
            "critical": "CRITICAL",
        }
        event_dict["severity"] = severity_map.get(level, "INFO")
    return event_dict


def setup_logging(
    level: str = "INFO",
    json_logs: bool = True,
    include_timestamp: bool = True,
) -> None:
    """
    Configure structured logging for the application.

    Args:
        level: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        json_logs: If True, output JSON. If False, use human-readable format (dev mode).
        include_timestamp: Whether to include ISO timestamps in logs

    Usage:
        >>> from unified_finance.infrastructure.observability import setup_logging
        >>> setup_logging(level="DEBUG", json_logs=False)
    """
    log_level = getattr(logging, level.upper(), logging.INFO)

    logging.basicConfig(
        format="%(message)s",
        stream=sys.stdout,
        level=log_level,
    )

    processors = [
        structlog.contextvars.merge_contextvars,
        add_app_context,
        structlog.stdlib.add_log_level,
        add_severity_level,
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
        structlog.processors.UnicodeDecoder(),
    ]

    if include_timestamp:
        processors.insert(0, structlog.processors.TimeStamper(fmt="iso"))

    if json_logs:
        processors.append(structlog.processors.JSONRenderer())
    else:
        processors.append(
            structlog.dev.ConsoleRenderer(
                colors=True,
                exception_formatter=structlog.dev.plain_traceback,
            )
        )

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )


def get_logger(
    name: str | None = None,
    layer: Layer | None = None,
    component: str | None = None,
    **initial_context: Any,
) -> structlog.stdlib.BoundLogger:
    """
    Get a configured logger instance with architectural context.

    Args:
        name: Logger name (typically __name__ of the calling module)
        layer: Architectural layer (infrastructure, ingestion, pipeline, service)
        component: Specific component within the layer
        **initial_context: Additional context key-value pairs to bind to logger

    Returns:
        Configured structlog logger with bound context

    Usage:
        >>> log = get_logger(__name__, layer="ingestion", component="ttl-cache")
        >>> log.info("cache_hit", key="quote:AAPL")
    """
    logger = structlog.get_logger(name)

    context = {}

    if layer:
        context["layer"] = layer

    if component:
        context["component"] = component

    if name:
        context["module"] = name

    context.update(initial_context)

    if context:
        logger = logger.bind(**context)

    return logger


# ============================================================================
# Layer-Specific Logger Factories
# ============================================================================


def get_infrastructure_logger(
    component: str,
    **context: Any,
) -> structlog.stdlib.BoundLogger:
    """
    Get a logger for infrastructure layer (config, transport).

    Usage:
        >>> log = get_infrastructure_logger("aiohttp-client")
        >>> log.debug("session_created")
    """
    return get_logger(
        "infrastructure",
        layer="infrastructure",
        component=component,
        **context,
    )


def get_ingestion_logger(
    component: str,
    provider: str | None = None,
    **context: Any,
) -> structlog.stdlib.BoundLogger:
    """
    Get a logger for the access layer (rate limiter, cache, auth).

    Args:
        component: Component name (e.g., "token-bucket", "ttl-cache", "yahoo-auth")
        provider: Provider key (e.g., "YAHOO", "FRED") - optional
        **context: Additional context

    Usage:
        >>> log = get_ingestion_logger("token-bucket", provider="YAHOO")
        >>> log.debug("token_wait", wait_ms=200)
    """
    ctx = {}
    if provider:
        ctx["provider"] = provider
    ctx.update(context)

    return get_logger(
        "ingestion",
        layer="ingestion",
        component=component,
        **ctx,
    )


def get_pipeline_logger(
    component: str = "request-pipeline",
    **context: Any,
) -> structlog.stdlib.BoundLogger:
    """
    Get a logger for the request pipeline and batch fan-out.

    Usage:
        >>> log = get_pipeline_logger()
        >>> log.warning("batch_item_failed", item="XYZ")
    """
    return get_logger(
        "pipeline",
        layer="pipeline",
        component=component,
        **context,
    )


def get_service_logger(
    component: str,
    **context: Any,
) -> structlog.stdlib.BoundLogger:
    """
    Get a logger for a domain service.

    Usage:
        >>> log = get_service_logger("quote-service")
        >>> log.info("quotes_fetched", count=3)
    """
    return get_logger(
        "service",
        layer="service",
        component=component,
        **context,
    )
