"""
valuation.py — Player valuation and fantasy points engine.

Turns raw season statistics into derived rates, an internal points score
and a budget value rounded to the nearest 50,000. Every endpoint that needs
a rate, a value or a team total goes through compute_stats(); nothing else
in the code base repeats the formula.

Usage:
    from scoring.valuation import PlayerStatistics, compute_stats
    derived = compute_stats(PlayerStatistics(total_runs=500, balls_faced=400))
    derived.player_value   # -> int, multiple of 50_000

Points are internal. They feed player_value and team totals and are never
part of a response schema.
"""

import math
from dataclasses import dataclass

VALUE_INCREMENT = 50000
BALLS_PER_OVER = 6
MAX_STAT_VALUE = 10**9

STAT_FIELDS = (
    "total_runs", "balls_faced", "innings_played",
    "wickets", "overs_bowled", "runs_conceded",
)


class InvalidStatisticsError(ValueError):
    """Raised when a raw statistic is negative, too large or not a finite number."""

    def __init__(self, field, value):
        self.field = field
        self.value = value
        super().__init__(
            f"{field} must be a number between 0 and {MAX_STAT_VALUE}, got {value!r}"
        )


@dataclass(frozen=True)
class PlayerStatistics:
    total_runs: int = 0
    balls_faced: int = 0
    innings_played: int = 0
    wickets: int = 0
    overs_bowled: float = 0.0
    runs_conceded: int = 0

    @classmethod
    def from_mapping(cls, row):
        """Build from a dict or sqlite3.Row carrying the six stat columns."""
        return cls(**{name: row[name] for name in STAT_FIELDS})


@dataclass(frozen=True)
class DerivedStats:
    batting_strike_rate: float
    batting_average: float
    bowling_strike_rate: float | None
    economy_rate: float | None
    points: float
    player_value: int


def validate_statistics(stats):
    """Reject negative, oversized, NaN or non-numeric fields."""
    for name in STAT_FIELDS:
        value = getattr(stats, name)
        if isinstance(value, bool) or not isinstance(value, (int, float)):
            raise InvalidStatisticsError(name, value)
        try:
            as_float = float(value)
        except OverflowError:
            raise InvalidStatisticsError(name, value)
        if not math.isfinite(as_float) or not 0 <= value <= MAX_STAT_VALUE:
            raise InvalidStatisticsError(name, value)


def player_value_for(points):
    """Discretise points into a budget value (ties round half to even)."""
    raw_value = (9.0 * points + 100.0) * 1000.0
    if not math.isfinite(raw_value):
        raise InvalidStatisticsError("points", points)
    return int(round(raw_value / VALUE_INCREMENT) * VALUE_INCREMENT)


def compute_stats(stats):
    """
    Compute derived rates, points and player value for one player.

    Parameters
    ----------
    stats : PlayerStatistics

    Returns
    -------
    DerivedStats — bowling_strike_rate is None without wickets and
    economy_rate is None without balls bowled.
    """
    validate_statistics(stats)

    balls_bowled = stats.overs_bowled * BALLS_PER_OVER

    batting_strike_rate = (
        stats.total_runs * 100.0 / stats.balls_faced if stats.balls_faced > 0 else 0.0
    )
    batting_average = (
        stats.total_runs / stats.innings_played if stats.innings_played > 0 else 0.0
    )
    bowling_strike_rate = balls_bowled / stats.wickets if stats.wickets > 0 else None
    economy_rate = (
        stats.runs_conceded / balls_bowled * 6.0 if balls_bowled > 0 else None
    )

    batting_component = (batting_strike_rate / 5.0) + (batting_average * 0.8)

    # A defined rate of exactly zero (wickets without overs, or overs
    # without runs conceded) contributes nothing.
    bowling_component = 0.0
    if bowling_strike_rate:
        bowling_component += 500.0 / bowling_strike_rate
    if economy_rate:
        bowling_component += 140.0 / economy_rate

    # Overs close to zero push the bowling rates past float range.
    if (economy_rate is not None and not math.isfinite(economy_rate)) \
            or not math.isfinite(bowling_component):
        raise InvalidStatisticsError("overs_bowled", stats.overs_bowled)

    points = batting_component + bowling_component

    return DerivedStats(
        batting_strike_rate=batting_strike_rate,
        batting_average=batting_average,
        bowling_strike_rate=bowling_strike_rate,
        economy_rate=economy_rate,
        points=points,
        player_value=player_value_for(points),
    )


def team_total(stats_list):
    """Sum of points over a team's players; 0 for an empty team."""
    return sum((compute_stats(s).points for s in stats_list), 0.0)


def format_rate(value):
    """Two-decimal display string, or "Undefined" for an undefined rate."""
    return "Undefined" if value is None else f"{value:.2f}"
