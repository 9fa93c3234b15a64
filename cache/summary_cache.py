"""
summary_cache.py — Cache layer for the tournament summary.

Uses Flask-Caching. Only raw aggregates (counts, sums, top run scorer,
top wicket taker, average player value) are cached; per-player derived
stats are always recomputed. Any player write drops the cached summary.
"""

import logging
from datetime import datetime, timezone

logger = logging.getLogger("fantasy")

SUMMARY_CACHE_KEY = "tournament_summary"


# ── Cache stats tracking ──────────────────────────────────────────────────

class CacheStats:
    """Simple hit/miss counter (in-memory, resets on restart)."""

    def __init__(self):
        self.hits = 0
        self.misses = 0
        self.invalidations = 0
        self.last_invalidation = None

    @property
    def total(self):
        return self.hits + self.misses

    @property
    def hit_rate(self):
        return round(self.hits / self.total * 100, 1) if self.total > 0 else 0.0

    def record_hit(self):
        self.hits += 1

    def record_miss(self):
        self.misses += 1

    def record_invalidation(self):
        self.invalidations += 1
        self.last_invalidation = datetime.now(timezone.utc).isoformat()

    def to_dict(self):
        return {
            "hits": self.hits,
            "misses": self.misses,
            "total_requests": self.total,
            "hit_rate_pct": self.hit_rate,
            "invalidations": self.invalidations,
            "last_invalidation": self.last_invalidation,
        }


# Singleton stats instance
cache_stats = CacheStats()


def get_or_build_summary(cache, build):
    """Return the cached summary, or build, cache and return it."""
    cached = cache.get(SUMMARY_CACHE_KEY) if cache is not None else None
    if cached is not None:
        cache_stats.record_hit()
        return cached

    cache_stats.record_miss()
    summary = build()
    if cache is not None:
        cache.set(SUMMARY_CACHE_KEY, summary)
    return summary


def invalidate_summary(cache):
    if cache is not None:
        cache.delete(SUMMARY_CACHE_KEY)
    cache_stats.record_invalidation()


# ── Init helper ───────────────────────────────────────────────────────────

def init_cache(app, cache):
    """
    Configure Flask-Caching on the app.

    Call this once at app creation time:
        from flask_caching import Cache
        cache = Cache()
        init_cache(app, cache)
    """
    app.config.setdefault("CACHE_TYPE", "SimpleCache")
    app.config.setdefault("CACHE_DEFAULT_TIMEOUT", 300)
    app.config.setdefault("CACHE_KEY_PREFIX", "fantasy_")

    cache.init_app(app)
    logger.info(
        f"Cache initialised: type={app.config['CACHE_TYPE']}, "
        f"TTL={app.config['CACHE_DEFAULT_TIMEOUT']}s"
    )
