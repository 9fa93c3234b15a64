"""
players.py — Shape stored player rows into responses with derived stats.

Points are read here only to be dropped: the dict returned by
player_with_stats() never carries them.
"""
import logging

from scoring.categories import is_category_filter, matches_category
from scoring.valuation import PlayerStatistics, compute_stats, format_rate

logger = logging.getLogger("fantasy")


def player_with_stats(row):
    """Raw columns of a player row plus derived rates and value."""
    player = dict(row)
    derived = compute_stats(PlayerStatistics.from_mapping(player))
    player.update({
        "batting_strike_rate": derived.batting_strike_rate,
        "batting_average": derived.batting_average,
        "bowling_strike_rate": derived.bowling_strike_rate,
        "economy_rate": derived.economy_rate,
        "player_value": derived.player_value,
        "bowling_strike_rate_display": format_rate(derived.bowling_strike_rate),
        "economy_rate_display": format_rate(derived.economy_rate),
    })
    return player


def available_players(rows, owned_ids, budget, category=""):
    """
    Players a user can still pick.

    Owned players are always hidden. With a category filter every other
    player of that role is listed; without one, players costing more than
    the remaining budget are hidden too.
    """
    players = [player_with_stats(r) for r in rows if r["player_id"] not in owned_ids]
    if is_category_filter(category):
        players = [p for p in players if matches_category(p["category"], category)]
    else:
        players = [p for p in players if p["player_value"] <= budget]
    logger.debug(f"{len(players)} players available (category={category!r}, budget={budget})")
    return players
