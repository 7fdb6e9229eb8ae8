"""Base configuration shared by every environment."""
import os
from datetime import timedelta


class Config:
    """Base configuration."""
    SECRET_KEY = os.environ.get('SECRET_KEY') or 'dev-secret-key-change-in-production'
    SQLALCHEMY_TRACK_MODIFICATIONS = False
    SQLALCHEMY_ECHO = False

    # JWT Configuration (tokens are issued by the identity provider)
    JWT_SECRET_KEY = os.environ.get('JWT_SECRET_KEY') or 'jwt-secret-key-change-in-production'
    JWT_ACCESS_TOKEN_EXPIRES = timedelta(days=7)
    JWT_ALGORITHM = 'HS256'

    # CORS
    CORS_ORIGINS = ["http://localhost:*", "http://127.0.0.1:*"]

    # Rate Limiting
    RATELIMIT_STORAGE_URI = os.environ.get('REDIS_URL') or 'memory://'
    RATELIMIT_DEFAULT = "200 per day, 50 per hour"

    # Geofence
    DEFAULT_ALLOWED_RADIUS_METERS = 100
    PRESENCE_HISTORY_LIMIT = 50

    # Logbook and reviews
    REVIEW_WEEKDAY = 4  # Friday (Monday == 0)
    SIWES_TIMEZONE = os.environ.get('SIWES_TIMEZONE', 'UTC')

    # Audit trail
    AUDIT_ASYNC = True
    AUDIT_MAX_WORKERS = 2
    AUDIT_LOG_PAGE_SIZE = 100
    MAX_AUDIT_LOG_PAGE_SIZE = 500

    # Number of trusted reverse proxies setting X-Forwarded-For (0 = none)
    PROXY_FIX_X_FOR = int(os.environ.get('PROXY_FIX_X_FOR', 0))

    # Logging
    LOG_LEVEL = 'INFO'
    LOG_FILE = 'logs/app.log'
