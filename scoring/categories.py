"""
categories.py — Player role normalisation.

CSV files and admin forms spell roles many ways ("Batsmen", "bat",
"All Rounder"). Filters compare canonical names.
"""

BATSMAN = "batsman"
BOWLER = "bowler"
ALL_ROUNDER = "all-rounder"

_ALIASES = {
    BATSMAN: {"batsman", "batsmen", "bat", "batter", "batters"},
    BOWLER: {"bowler", "bowlers", "bowl"},
    ALL_ROUNDER: {"all-rounder", "all rounder", "allrounder",
                  "all-rounders", "all rounders", "allrounders"},
}


def canonical_category(category):
    """Return the canonical role for a raw category, or the cleaned input."""
    cleaned = (category or "").strip().lower()
    for canonical, aliases in _ALIASES.items():
        if cleaned in aliases:
            return canonical
    return cleaned


def matches_category(player_category, filter_category):
    """True when both sides name the same role; blank values never match."""
    if not (player_category or "").strip() or not (filter_category or "").strip():
        return False
    return canonical_category(player_category) == canonical_category(filter_category)


def category_aliases(category):
    """All lower-cased spellings that match `category`, for SQL IN filters."""
    canonical = canonical_category(category)
    return sorted(_ALIASES.get(canonical, {canonical}))


def is_category_filter(category):
    """A blank value or "All" means no filtering."""
    cleaned = (category or "").strip()
    return bool(cleaned) and cleaned.lower() != "all"
