"""
recommendations.py — Deterministic picks for the team-building assistant.

Provides:
  - top run scorers / wicket takers
  - a balanced best-team suggestion within the remaining budget
    (4 batsmen, 4 bowlers, 3 all-rounders, owned players excluded)
  - player lookup by name

Every value comes from scoring.valuation, so a recommended player costs
exactly what the team endpoint will charge.
"""
import logging

from scoring.categories import ALL_ROUNDER, BATSMAN, BOWLER, matches_category
from services.players import player_with_stats

logger = logging.getLogger("fantasy")

TEAM_SHAPE = (
    (BATSMAN, 4, "Top-class batsman with impressive run-scoring ability"),
    (BOWLER, 4, "Excellent bowler with strong wicket-taking ability"),
    (ALL_ROUNDER, 3, "Versatile all-rounder contributing with bat and ball"),
)


def _batting_order(p):
    return (-p["total_runs"], -p["batting_strike_rate"], p["player_id"])


def _bowling_order(p):
    # Undefined economy sorts after every defined one.
    economy = p["economy_rate"]
    return (-p["wickets"], economy is None, economy or 0.0, p["player_id"])


def _all_round_order(p):
    return (-(p["total_runs"] * p["wickets"]), p["player_id"])


_ORDERING = {
    BATSMAN: _batting_order,
    BOWLER: _bowling_order,
    ALL_ROUNDER: _all_round_order,
}


def top_run_scorers(store, limit=5):
    players = [player_with_stats(r) for r in store.top_players("total_runs", limit)]
    lines = [
        f"{i}. {p['name']} ({p['university']}) - {p['total_runs']} runs, "
        f"Strike Rate: {p['batting_strike_rate']:.2f}"
        for i, p in enumerate(players, start=1)
    ]
    reply = "Here are the top run-scorers:\n" + "\n".join(lines) if players \
        else "No batting statistics are available yet."
    return {"reply": reply, "recommended_players": players}


def top_wicket_takers(store, limit=5):
    players = [player_with_stats(r) for r in store.top_players("wickets", limit)]
    lines = [
        f"{i}. {p['name']} ({p['university']}) - {p['wickets']} wickets, "
        f"Economy: {p['economy_rate_display']}"
        for i, p in enumerate(players, start=1)
    ]
    reply = "Here are the top wicket-takers:\n" + "\n".join(lines) if players \
        else "No bowling statistics are available yet."
    return {"reply": reply, "recommended_players": players}


def best_team(store, budget, owned_ids=()):
    """
    Greedy balanced team within `budget`.

    Each role's candidates are walked in ranking order and a player is
    taken when their value still fits; the budget shrinks as picks are made.
    """
    owned = set(owned_ids)
    pool = [player_with_stats(r) for r in store.list_players()
            if r["player_id"] not in owned]
    remaining = budget
    picks = []

    for role, wanted, reason in TEAM_SHAPE:
        candidates = sorted(
            (p for p in pool if matches_category(p["category"], role)),
            key=_ORDERING[role],
        )
        taken = 0
        for player in candidates:
            if taken == wanted:
                break
            if player["player_value"] > remaining:
                continue
            picks.append(dict(player, recommendation_reason=reason))
            remaining -= player["player_value"]
            taken += 1

    logger.info(f"Best team suggestion: {len(picks)} players, {remaining} budget left")
    if picks:
        reply = (f"Here is a balanced team of {len(picks)} players within your "
                 f"budget. Remaining budget after these picks: {remaining}.")
    else:
        reply = "No players fit your remaining budget right now."
    return {"reply": reply, "recommended_players": picks, "remaining_budget": remaining}


def player_lookup(store, name, limit=5):
    players = [player_with_stats(r) for r in store.search_players_by_name(name, limit)]
    if not players:
        return {"reply": f"No player found matching '{name}'.", "recommended_players": []}
    lines = [
        f"{p['name']} ({p['university']}, {p['category']}): {p['total_runs']} runs, "
        f"average {p['batting_average']:.2f}, {p['wickets']} wickets, "
        f"bowling strike rate {p['bowling_strike_rate_display']}"
        for p in players
    ]
    return {"reply": "\n".join(lines), "recommended_players": players}
