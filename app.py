"""
app.py — Application Factory for the fantasy cricket backend.

Assembles all blueprints, middleware, and services.
Usage:
    flask --app app run
    flask --app app init-db
    flask --app app create-admin <username> <password>
"""

import os

import click
from flask import Flask, jsonify

from config import config_map

# Middleware & Ext
from flask_caching import Cache
from flask_compress import Compress
from cache.summary_cache import init_cache
from api.middleware.rate_limiter import init_limiter
from api.middleware.error_handler import register_error_handlers

# Services
from services.auth import hash_password
from services.errors import ConflictError
from services.logger import setup_logging
from services.store import FantasyStore

# Blueprints
from api.routes.auth import auth_bp, init_auth_bp
from api.routes.players import players_bp, init_players_bp
from api.routes.teams import teams_bp, init_teams_bp
from api.routes.leaderboard import leaderboard_bp, init_leaderboard_bp
from api.routes.admin import admin_bp, init_admin_bp
from api.routes.recommendations import recommend_bp, init_recommend_bp
from api.routes.health import health_bp, init_health_bp

cache = Cache()


def create_app(config_name=None, overrides=None):
    """Flask application factory."""
    config_name = config_name or os.environ.get("FLASK_ENV", "development")
    app = Flask(__name__)

    # ── Configuration ──
    app.config.from_object(config_map[config_name])
    if overrides:
        app.config.update(overrides)

    # ── Setup Logging ──
    logger = setup_logging(app.config["LOG_DIR"], app.config["LOG_LEVEL"])
    logger.info(f"Starting fantasy cricket backend ({config_name} mode)")

    # ── Initialize Extensions ──
    Compress(app)
    init_cache(app, cache)
    init_limiter(app)
    register_error_handlers(app)

    # ── Initialize Core Services ──
    store = FantasyStore(app.config["DATABASE_PATH"])
    app.extensions["fantasy_store"] = store

    # ── Initialize Blueprint Dependencies ──
    init_auth_bp(store)
    init_players_bp(store)
    init_teams_bp(store)
    init_leaderboard_bp(store)
    init_admin_bp(store, cache)
    init_recommend_bp(store)
    init_health_bp(store)

    # ── Register Blueprints ──
    app.register_blueprint(auth_bp)
    app.register_blueprint(players_bp)
    app.register_blueprint(teams_bp)
    app.register_blueprint(leaderboard_bp)
    app.register_blueprint(admin_bp)
    app.register_blueprint(recommend_bp)
    app.register_blueprint(health_bp)

    @app.route("/")
    def index():
        return jsonify({"service": "fantasy-cricket", "status": "ok"})

    _register_cli(app, store)
    return app


def _register_cli(app, store):

    @app.cli.command("init-db")
    def init_db():
        """Create the database schema."""
        click.echo(f"Database ready at {store.db_path}")

    @app.cli.command("create-admin")
    @click.argument("username")
    @click.argument("password")
    def create_admin(username, password):
        """Create an admin account, or promote an existing user."""
        try:
            store.create_user(
                username=username,
                password_hash=hash_password(password),
                budget=app.config["DEFAULT_BUDGET"],
                team_name=app.config["DEFAULT_TEAM_NAME"],
                is_admin=True,
            )
            click.echo(f"Admin {username} created")
        except ConflictError:
            store.set_admin(username, True)
            click.echo(f"Existing user {username} promoted to admin")


if __name__ == "__main__":
    create_app().run(host="0.0.0.0", port=5000)
