"""
config.py — Application configuration classes.
"""

import os

BASE_DIR = os.path.dirname(os.path.abspath(__file__))


class Config:
    """Base configuration."""
    SECRET_KEY = os.environ.get("SECRET_KEY", "fantasy-dev-key")
    BASE_DIR = BASE_DIR

    # Auth tokens
    JWT_SECRET = os.environ.get("JWT_SECRET", "fantasy-dev-jwt-secret-change-me-32b")
    JWT_ALGORITHM = "HS256"
    JWT_EXPIRY_MINUTES = int(os.environ.get("JWT_EXPIRY_MINUTES", "60"))

    # Game rules
    DEFAULT_BUDGET = 9000000
    TEAM_SIZE = 11
    DEFAULT_TEAM_NAME = "My Team"

    # Cache (tournament summary only)
    CACHE_TYPE = "SimpleCache"
    CACHE_DEFAULT_TIMEOUT = 300
    CACHE_THRESHOLD = 500
    CACHE_KEY_PREFIX = "fantasy_"

    # Compression
    COMPRESS_MIMETYPES = [
        "text/html", "text/css", "text/xml", "text/javascript",
        "application/json", "application/javascript",
    ]
    COMPRESS_MIN_SIZE = 256

    # Rate limiting
    RATELIMIT_DEFAULT = "120/minute"
    RATELIMIT_STORAGE_URI = "memory://"
    RATELIMIT_HEADERS_ENABLED = True

    # Uploads
    MAX_CONTENT_LENGTH = 100 * 1024 * 1024

    # Logging
    LOG_DIR = os.path.join(BASE_DIR, "logs")
    LOG_LEVEL = "INFO"

    # Database
    DATABASE_PATH = os.environ.get(
        "DATABASE_PATH", os.path.join(BASE_DIR, "instance", "fantasy.db")
    )


class DevelopmentConfig(Config):
    DEBUG = True
    LOG_LEVEL = "DEBUG"


class ProductionConfig(Config):
    DEBUG = False
    RATELIMIT_DEFAULT = "60/minute"
    CACHE_DEFAULT_TIMEOUT = 600


class TestingConfig(Config):
    TESTING = True
    CACHE_TYPE = "NullCache"
    RATELIMIT_ENABLED = False
    JWT_SECRET = "testing-jwt-secret-with-enough-bytes"


config_map = {
    "development": DevelopmentConfig,
    "production": ProductionConfig,
    "testing": TestingConfig,
}
