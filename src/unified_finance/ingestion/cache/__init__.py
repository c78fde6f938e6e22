from .ttl_cache import CacheEntry, TtlCache

__all__ = ["CacheEntry", "TtlCache"]
