# scoring/__init__.py
from .valuation import (
    PlayerStatistics,
    DerivedStats,
    InvalidStatisticsError,
    compute_stats,
    team_total,
)
from .categories import canonical_category, matches_category

__all__ = [
    "PlayerStatistics", "DerivedStats", "InvalidStatisticsError",
    "compute_stats", "team_total",
    "canonical_category", "matches_category",
]
