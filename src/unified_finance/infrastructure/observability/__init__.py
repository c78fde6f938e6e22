"""
Observability for the unified-finance access layer: structured logging shared by
the rate limiter, cache, authentication, request pipeline and domain services.
"""

from .logging import (
    get_infrastructure_logger,
    get_ingestion_logger,
    # Base logger factory
    get_logger,
    get_pipeline_logger,
    get_service_logger,
    # Setup
    setup_logging,
)

__all__ = [
    # Setup
    "setup_logging",
    # Base
    "get_logger",
    # Layer-specific
    "get_infrastructure_logger",
    "get_ingestion_logger",
    "get_pipeline_logger",
    "get_service_logger",
]
