"""Configuration value objects injected into access-layer components."""

from .value_objects import (
    BatchConfig,
    FredEndpoints,
    HttpClientConfig,
    RateLimitConfig,
    YahooEndpoints,
)

__all__ = [
    "BatchConfig",
    "FredEndpoints",
    "HttpClientConfig",
    "RateLimitConfig",
    "YahooEndpoints",
]
