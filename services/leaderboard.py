"""
leaderboard.py — Team totals and ranking.

Totals are recomputed from the players' raw statistics on every request
and written back as each team's ranking score. Only complete teams are
ranked; the caller's own incomplete team is appended with rank 0.
"""
import logging

from scoring.valuation import PlayerStatistics, team_total

logger = logging.getLogger("fantasy")


def roster_total(player_rows):
    return team_total(PlayerStatistics.from_mapping(r) for r in player_rows)


def build_leaderboard(store, team_size, user_id=None):
    """
    Parameters
    ----------
    store : FantasyStore
    team_size : int — players needed for a team to be ranked
    user_id : int or None — caller, whose incomplete team is appended

    Returns list of entry dicts ordered by rank.
    """
    rosters = store.get_team_rosters()
    totals = {r["team"]["team_id"]: roster_total(r["players"]) for r in rosters}
    store.save_team_totals(totals)

    complete = [r for r in rosters if len(r["players"]) == team_size]
    complete.sort(key=lambda r: (-totals[r["team"]["team_id"]], r["team"]["team_id"]))

    entries = [
        _entry(r, totals, rank=i, is_complete=True)
        for i, r in enumerate(complete, start=1)
    ]

    if user_id is not None and not any(e["user_id"] == user_id for e in entries):
        own = next((r for r in rosters if r["team"]["user_id"] == user_id), None)
        if own is not None:
            entries.append(_entry(own, totals, rank=0, is_complete=False))

    logger.info(f"Leaderboard built: {len(complete)} ranked of {len(rosters)} teams")
    return entries


def _entry(roster, totals, rank, is_complete):
    team = roster["team"]
    return {
        "rank": rank,
        "user_id": team["user_id"],
        "username": team["username"],
        "team_id": team["team_id"],
        "team_name": team["team_name"],
        "total_points": round(totals[team["team_id"]], 2),
        "players_count": len(roster["players"]),
        "is_complete": is_complete,
    }
