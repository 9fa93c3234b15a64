# cache/__init__.py
from .summary_cache import (
    SUMMARY_CACHE_KEY,
    cache_stats,
    get_or_build_summary,
    init_cache,
    invalidate_summary,
    CacheStats,
)

__all__ = ["SUMMARY_CACHE_KEY", "cache_stats", "get_or_build_summary",
           "init_cache", "invalidate_summary", "CacheStats"]
