"""
rate_limiter.py — Flask-Limiter setup and the per-endpoint limits.

The app-wide default comes from RATELIMIT_DEFAULT in config; the
endpoints below that create accounts, check passwords or accept uploads
get tighter limits of their own.
"""
import logging
from flask_limiter import Limiter
from flask_limiter.util import get_remote_address

logger = logging.getLogger("fantasy")

REGISTER_LIMIT = "10/minute"
LOGIN_LIMIT = "20/minute"
IMPORT_LIMIT = "10/minute"

limiter = Limiter(key_func=get_remote_address, storage_uri="memory://")


def init_limiter(app):
    limiter.init_app(app)
    logger.info(
        f"Rate limiter initialised: default={app.config.get('RATELIMIT_DEFAULT')}, "
        f"enabled={app.config.get('RATELIMIT_ENABLED', True)}"
    )
    return limiter
