"""
admin.py — /api/admin endpoints: CSV import, player CRUD, tournament stats.
"""
import logging
from flask import Blueprint, jsonify, request

from api.middleware.auth import admin_required
from api.middleware.rate_limiter import IMPORT_LIMIT, limiter
from api.schemas.common import MessageSchema
from api.schemas.player_schema import (
    ImportResultSchema, PlayerInputSchema, PlayerPageSchema, PlayerQuerySchema,
    player_response,
)
from cache.summary_cache import cache_stats, get_or_build_summary, invalidate_summary
from data.csv_loader import load_players_csv
from scoring.valuation import PlayerStatistics, compute_stats
from services.errors import InvalidRequestError, NotFoundError
from services.players import player_with_stats

logger = logging.getLogger("fantasy")

admin_bp = Blueprint("admin", __name__, url_prefix="/api/admin")

_store = None
_cache = None


def init_admin_bp(store, cache=None):
    global _store, _cache
    _store = store
    _cache = cache


def _load_player_input():
    data = PlayerInputSchema().load(request.get_json(silent=True) or {})
    for key in ("name", "university", "category"):
        data[key] = data[key].strip()
    # Reject anything the valuation engine would refuse before touching the DB.
    compute_stats(PlayerStatistics.from_mapping(data))
    return data


# ── Import ────────────────────────────────────────────────────────────────

@admin_bp.route("/importPlayers", methods=["POST"])
@limiter.limit(IMPORT_LIMIT)
@admin_required
def import_players():
    """
    Bulk import from a CSV upload.
    POST multipart/form-data: file=<players.csv>, update_existing=true|false
    """
    upload = request.files.get("file")
    if upload is None or not upload.filename:
        raise InvalidRequestError("No file uploaded")
    if not upload.filename.lower().endswith(".csv"):
        raise InvalidRequestError("File must be a CSV")

    update_existing = request.form.get("update_existing", "false").strip().lower() in (
        "1", "true", "yes", "on",
    )
    logger.info(f"Importing {upload.filename} (update_existing={update_existing})")

    result = load_players_csv(upload.read())
    if not result.records:
        raise InvalidRequestError("No valid player records found in the CSV")

    added, updated, skipped = _store.import_players(result.records, update_existing)
    skipped += result.skipped
    invalidate_summary(_cache)

    return jsonify(ImportResultSchema().dump({
        "message": (f"Import completed. Added: {added}, Updated: {updated}, "
                    f"Skipped: {skipped}, Failed: {result.failed}"),
        "added": added,
        "updated": updated,
        "skipped": skipped,
        "failed": result.failed,
    }))


# ── Player CRUD ───────────────────────────────────────────────────────────

@admin_bp.route("/players")
@admin_required
def list_players():
    """
    Paginated player list.
    GET /api/admin/players?page=1&page_size=10&search=ali&category=Bowler
    """
    query = PlayerQuerySchema().load(request.args.to_dict())
    page = _store.page_players(
        page=query["page"], per_page=query["page_size"],
        search=query["search"].strip(), category=query["category"],
    )
    page["players"] = [player_with_stats(r) for r in page["players"]]
    return jsonify(PlayerPageSchema().dump(page))


@admin_bp.route("/player/<int:player_id>")
@admin_required
def get_player(player_id):
    row = _store.get_player(player_id)
    if row is None:
        raise NotFoundError(f"Player with ID {player_id} not found")
    return jsonify(player_response.dump(player_with_stats(row)))


@admin_bp.route("/player", methods=["POST"])
@admin_required
def create_player():
    data = _load_player_input()
    player_id = _store.create_player(data)
    invalidate_summary(_cache)
    logger.info(f"Created player {player_id}: {data['name']} ({data['university']})")
    return jsonify(player_response.dump(player_with_stats(_store.get_player(player_id)))), 201


@admin_bp.route("/player/<int:player_id>", methods=["PUT"])
@admin_required
def update_player(player_id):
    data = _load_player_input()
    _store.update_player(player_id, data)
    invalidate_summary(_cache)
    logger.info(f"Updated player {player_id}")
    return jsonify(player_response.dump(player_with_stats(_store.get_player(player_id))))


@admin_bp.route("/player/<int:player_id>", methods=["DELETE"])
@admin_required
def delete_player(player_id):
    _store.delete_player(player_id)
    invalidate_summary(_cache)
    return jsonify(MessageSchema().dump({"message": f"Player with ID {player_id} successfully deleted"}))


@admin_bp.route("/players", methods=["DELETE"])
@admin_required
def clear_players():
    removed = _store.clear_players()
    invalidate_summary(_cache)
    return jsonify({"message": f"Successfully cleared {removed} players", "removed": removed})


# ── Dashboards ────────────────────────────────────────────────────────────

@admin_bp.route("/stats")
@admin_required
def stats():
    counts = _store.get_counts()
    return jsonify(dict(counts, **_top_performers()))


@admin_bp.route("/tournamentSummary")
@admin_required
def tournament_summary():
    return jsonify(get_or_build_summary(_cache, _build_summary))


@admin_bp.route("/cache/stats")
@admin_required
def summary_cache_stats():
    return jsonify(cache_stats.to_dict())


def _top_performers():
    batsmen = _store.top_players("total_runs", limit=1)
    bowlers = _store.top_players("wickets", limit=1)
    top_batsman = batsmen[0] if batsmen else None
    top_bowler = bowlers[0] if bowlers else None
    return {
        "top_batsman": {
            "name": top_batsman["name"],
            "university": top_batsman["university"],
            "total_runs": top_batsman["total_runs"],
        } if top_batsman else None,
        "top_bowler": {
            "name": top_bowler["name"],
            "university": top_bowler["university"],
            "wickets": top_bowler["wickets"],
        } if top_bowler else None,
    }


def _build_summary():
    totals = _store.get_totals()
    values = [
        compute_stats(PlayerStatistics.from_mapping(r)).player_value
        for r in _store.list_players()
    ]
    summary = dict(totals)
    summary["average_player_value"] = round(sum(values) / len(values)) if values else 0
    summary.update(_top_performers())
    return summary
