from .token_bucket import RateLimiterRegistry, RateLimiterStatus, TokenBucketRateLimiter

__all__ = ["RateLimiterRegistry", "RateLimiterStatus", "TokenBucketRateLimiter"]
