"""
leaderboard.py — /api/leaderboard endpoint.
"""
import logging
from flask import Blueprint, current_app, jsonify

from api.middleware.auth import current_user_id, login_required
from api.schemas.team_schema import LeaderboardEntrySchema
from services.leaderboard import build_leaderboard

logger = logging.getLogger("fantasy")

leaderboard_bp = Blueprint("leaderboard", __name__, url_prefix="/api")

_store = None


def init_leaderboard_bp(store):
    global _store
    _store = store


@leaderboard_bp.route("/leaderboard")
@login_required
def leaderboard():
    """Complete teams ranked by total; the caller's unfinished team has rank 0."""
    entries = build_leaderboard(
        _store, current_app.config["TEAM_SIZE"], user_id=current_user_id()
    )
    return jsonify(LeaderboardEntrySchema(many=True).dump(entries))
