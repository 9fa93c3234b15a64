"""
teams.py — /api/teams endpoints: view the caller's team, buy and sell players.
"""
import logging
from flask import Blueprint, current_app, jsonify, request

from api.middleware.auth import current_user_id, login_required
from api.schemas.common import BudgetMessageSchema
from api.schemas.team_schema import TeamPlayerRequestSchema, TeamResponseSchema
from services.leaderboard import roster_total
from services.players import player_with_stats

logger = logging.getLogger("fantasy")

teams_bp = Blueprint("teams", __name__, url_prefix="/api/teams")

_store = None


def init_teams_bp(store):
    global _store
    _store = store


@teams_bp.route("")
@login_required
def get_team():
    user_id = current_user_id()
    team_size = current_app.config["TEAM_SIZE"]
    user = _store.get_user(user_id)
    budget = user["budget"] if user else 0

    team = _store.get_team_for_user(user_id)
    if team is None:
        return jsonify(TeamResponseSchema().dump({
            "team_id": 0,
            "team_name": current_app.config["DEFAULT_TEAM_NAME"],
            "total_points": 0.0,
            "players_count": 0,
            "is_complete": False,
            "budget": budget,
            "players": [],
        }))

    rows = _store.get_team_players(team["team_id"])
    return jsonify(TeamResponseSchema().dump({
        "team_id": team["team_id"],
        "team_name": team["team_name"],
        "total_points": round(roster_total(rows), 2),
        "players_count": len(rows),
        "is_complete": len(rows) == team_size,
        "budget": budget,
        "players": [player_with_stats(r) for r in rows],
    }))


@teams_bp.route("/players", methods=["POST"])
@login_required
def add_player():
    data = TeamPlayerRequestSchema().load(request.get_json(silent=True) or {})
    remaining = _store.add_player_to_team(
        current_user_id(), data["player_id"], current_app.config["TEAM_SIZE"]
    )
    return jsonify(BudgetMessageSchema().dump(
        {"message": "Player added to team", "remaining_budget": remaining}
    ))


@teams_bp.route("/players/<int:player_id>", methods=["DELETE"])
@login_required
def remove_player(player_id):
    budget = _store.remove_player_from_team(current_user_id(), player_id)
    return jsonify(BudgetMessageSchema().dump({"message": "Player removed from team", "budget": budget}))
