"""
recommendations.py — /api/recommendations endpoints for the team assistant.
"""
import logging
from flask import Blueprint, jsonify, request

from api.middleware.auth import current_user_id, login_required
from api.schemas.player_schema import AssistantReplySchema
from services import recommendations
from services.errors import InvalidRequestError

logger = logging.getLogger("fantasy")

recommend_bp = Blueprint("recommend", __name__, url_prefix="/api/recommendations")

_store = None


def init_recommend_bp(store):
    global _store
    _store = store


def _limit():
    return min(max(request.args.get("limit", 5, type=int), 1), 20)


@recommend_bp.route("/top-batsmen")
@login_required
def top_batsmen():
    reply = recommendations.top_run_scorers(_store, _limit())
    return jsonify(AssistantReplySchema().dump(reply))


@recommend_bp.route("/top-bowlers")
@login_required
def top_bowlers():
    reply = recommendations.top_wicket_takers(_store, _limit())
    return jsonify(AssistantReplySchema().dump(reply))


@recommend_bp.route("/best-team")
@login_required
def best_team():
    user_id = current_user_id()
    user = _store.get_user(user_id)
    budget = user["budget"] if user else 0
    reply = recommendations.best_team(_store, budget, _store.get_team_player_ids(user_id))
    return jsonify(AssistantReplySchema().dump(reply))


@recommend_bp.route("/player")
@login_required
def player_stats():
    """GET /api/recommendations/player?name=kasun"""
    name = request.args.get("name", "").strip()
    if not name:
        raise InvalidRequestError("name is required")
    reply = recommendations.player_lookup(_store, name)
    return jsonify(AssistantReplySchema().dump(reply))
