"""
players.py — /api/players endpoints for team building.
"""
import logging
from flask import Blueprint, jsonify, request

from api.middleware.auth import current_user_id, login_required
from api.schemas.player_schema import PlayerListResponseSchema, player_response
from services.errors import NotFoundError
from services.players import available_players, player_with_stats

logger = logging.getLogger("fantasy")

players_bp = Blueprint("players", __name__, url_prefix="/api/players")

_store = None


def init_players_bp(store):
    global _store
    _store = store


@players_bp.route("")
@login_required
def list_players():
    """
    Players the caller can still pick.
    GET /api/players?category=Batsman
    """
    category = request.args.get("category", "").strip()
    user_id = current_user_id()

    user = _store.get_user(user_id)
    budget = user["budget"] if user else 0
    owned = _store.get_team_player_ids(user_id)

    players = available_players(_store.list_players(), owned, budget, category)
    return jsonify(PlayerListResponseSchema().dump({"players": players, "budget": budget}))


@players_bp.route("/<int:player_id>")
@login_required
def get_player(player_id):
    row = _store.get_player(player_id)
    if row is None:
        raise NotFoundError("Player not found")
    return jsonify(player_response.dump(player_with_stats(row)))
