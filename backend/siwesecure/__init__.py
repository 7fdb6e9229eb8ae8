"""SIWESecure - Application Factory."""
import logging
import os

from flask import Flask, jsonify
from flask_cors import CORS
from flask_jwt_extended import JWTManager
from flask_limiter import Limiter
from flask_limiter.util import get_remote_address
from flask_migrate import Migrate
from flask_sqlalchemy import SQLAlchemy
from werkzeug.middleware.proxy_fix import ProxyFix

# Initialize extensions
db = SQLAlchemy()
migrate = Migrate()
jwt = JWTManager()
limiter = Limiter(key_func=get_remote_address)


def create_app(config_name: str = None, clock=None) -> Flask:
    """Application factory pattern.

    ``clock`` replaces the server wall clock (tests pin dates with it).
    """
    app = Flask(__name__)

    # Load configuration
    from siwesecure.config import get_config
    config_class = get_config(config_name)
    app.config.from_object(config_class)

    # Trust forwarded client addresses only behind configured proxies
    x_for = app.config.get('PROXY_FIX_X_FOR', 0)
    if x_for:
        app.wsgi_app = ProxyFix(app.wsgi_app, x_for=x_for)

    # Initialize extensions
    db.init_app(app)
    migrate.init_app(app, db)
    jwt.init_app(app)
    limiter.init_app(app)

    # Configure CORS
    CORS(app, origins=app.config.get('CORS_ORIGINS', ["*"]))

    # Setup logging
    setup_logging(app)

    # Import models so metadata is complete
    from siwesecure import models  # noqa: F401

    # Wire domain services
    from siwesecure.services.registry import Services
    Services(app, clock=clock)

    # Register blueprints
    register_blueprints(app)

    # Register error handlers
    register_error_handlers(app)

    # Add CLI commands
    register_commands(app)

    # Add health check
    @app.route('/health')
    def health_check():
        return jsonify({
            'status': 'ok',
            'service': 'SIWESecure API',
            'version': '1.0.0'
        })

    return app


def register_blueprints(app: Flask) -> None:
    """Register all application blueprints."""
    from siwesecure.api.presence import presence_bp
    from siwesecure.api.logbook import logbook_bp
    from siwesecure.api.supervisor import supervisor_bp
    from siwesecure.api.locations import locations_bp
    from siwesecure.api.admin import admin_bp

    # Students
    app.register_blueprint(presence_bp, url_prefix='/api/presence')
    app.register_blueprint(logbook_bp, url_prefix='/api/logbook')

    # Supervisors
    app.register_blueprint(supervisor_bp, url_prefix='/api/supervisor')

    # Administration
    app.register_blueprint(locations_bp, url_prefix='/api/locations')
    app.register_blueprint(admin_bp, url_prefix='/api/admin')


def register_error_handlers(app: Flask) -> None:
    """Register error handlers."""
    from werkzeug.exceptions import HTTPException
    from siwesecure.utils.errors import SiwesError
    from siwesecure.utils.helpers import handle_error

    @app.errorhandler(SiwesError)
    def handle_domain_error(error):
        return handle_error(error, error.status_code)

    @app.errorhandler(HTTPException)
    def handle_exception(e):
        return handle_error(e.description, e.code)

    @app.errorhandler(500)
    def internal_error(error):
        db.session.rollback()
        return handle_error("Internal server error", 500)

    # JWT error handlers
    @jwt.expired_token_loader
    def expired_token_callback(jwt_header, jwt_payload):
        return handle_error('Token has expired', 401)

    @jwt.invalid_token_loader
    def invalid_token_callback(error):
        return handle_error('Invalid token', 401)

    @jwt.unauthorized_loader
    def missing_token_callback(error):
        return handle_error('No token provided', 401)


def setup_logging(app: Flask) -> None:
    """Setup application logging."""
    level = getattr(logging, app.config.get('LOG_LEVEL', 'INFO'), logging.INFO)
    app.logger.setLevel(level)

    if not app.debug and not app.testing:
        log_file = app.config.get('LOG_FILE', 'logs/app.log')
        log_dir = os.path.dirname(log_file)
        if log_dir:
            os.makedirs(log_dir, exist_ok=True)

        file_handler = logging.FileHandler(log_file)
        file_handler.setFormatter(logging.Formatter(
            '%(asctime)s %(levelname)s: %(message)s [in %(pathname)s:%(lineno)d]'
        ))
        file_handler.setLevel(level)
        app.logger.addHandler(file_handler)

        app.logger.info('SIWESecure startup')


def register_commands(app: Flask) -> None:
    """Register CLI commands."""
    import click

    @app.cli.command('create-db')
    def create_db():
        """Create database tables."""
        db.create_all()
        click.echo('Database tables created.')

    @app.cli.command('drop-db')
    def drop_db():
        """Drop all database tables."""
        if click.confirm('Are you sure you want to drop all tables?'):
            db.drop_all()
            click.echo('Database tables dropped.')

    @app.cli.command('seed-demo')
    def seed_demo():
        """Seed database with a demo admin, supervisors, student and site."""
        from siwesecure.services.seed_service import SeedService

        summary = SeedService.seed_demo()
        for line in summary:
            click.echo(line)
