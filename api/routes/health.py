"""
health.py — /api/health endpoint for readiness and liveness probes.
"""
import logging
import sqlite3
from flask import Blueprint, jsonify
from datetime import datetime, timezone

logger = logging.getLogger("fantasy")

health_bp = Blueprint("health", __name__, url_prefix="/api")

_store = None


def init_health_bp(store):
    global _store
    _store = store


@health_bp.route("/health")
def health():
    """Health check / liveness probe."""
    checks = {
        "status": "ok",
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "database": False,
    }

    if _store:
        try:
            checks["database"] = _store.ping()
        except sqlite3.Error as e:
            logger.error(f"Health check failed: {e}")

    if not checks["database"]:
        checks["status"] = "degraded"
    status_code = 200 if checks["database"] else 503
    return jsonify(checks), status_code
