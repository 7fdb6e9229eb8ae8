"""Testing configuration."""
from .base import Config


class TestingConfig(Config):
    """Testing configuration class."""
    DEBUG = False
    TESTING = True
    SECRET_KEY = 'test-secret-key'

    # Database (in-memory SQLite for testing)
    SQLALCHEMY_DATABASE_URI = 'sqlite:///:memory:'

    JWT_SECRET_KEY = 'test-jwt-secret-key-with-enough-length'

    # Rate Limiting (disabled for testing)
    RATELIMIT_ENABLED = False
    RATELIMIT_STORAGE_URI = 'memory://'

    # Audit events are written inline so tests can assert on them
    AUDIT_ASYNC = False

    # Requests come straight from the test client
    PROXY_FIX_X_FOR = 0

    LOG_LEVEL = 'WARNING'
