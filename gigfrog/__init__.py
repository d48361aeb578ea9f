"""
Flask application factory.

Creates and configures the Flask app, registers all blueprints.
"""
import logging

from flask import Flask, jsonify
from pydantic import ValidationError
from werkzeug.exceptions import HTTPException

from gigfrog.errors import ApiError

logger = logging.getLogger('gigfrog')

_CONFIG_KEYS = (
    'DATABASE_URL',
    'SUPABASE_URL',
    'SUPABASE_SERVICE_ROLE_KEY',
    'AUTH_TIMEOUT',
    'JOB_FETCH_TIMEOUT',
    'CORS_ALLOW_ORIGIN',
)


def _validation_message(error):
    """'field: problem; other: problem' from a pydantic ValidationError."""
    parts = []
    for err in error.errors():
        loc = '.'.join(str(p) for p in err.get('loc', ()) if p != '__root__')
        parts.append(f"{loc}: {err['msg']}" if loc else err['msg'])
    return '; '.join(parts) or 'Invalid request'


def _register_error_handlers(app):

    @app.errorhandler(ApiError)
    def handle_api_error(e):
        return jsonify(e.to_dict()), e.status_code

    @app.errorhandler(ValidationError)
    def handle_validation_error(e):
        return jsonify({'error': _validation_message(e)}), 400

    @app.errorhandler(HTTPException)
    def handle_http_error(e):
        return jsonify({'error': e.name}), e.code

    @app.errorhandler(Exception)
    def handle_unexpected(e):
        logger.error("Unhandled error: %s", e, exc_info=True)
        return jsonify({'error': str(e)}), 500


def create_app(overrides=None):
    """Create and configure the Flask application."""
    from gigfrog import config
    from gigfrog.database import init_database
    from gigfrog.logging_config import configure_logging

    app = Flask(__name__)

    configure_logging(app)

    for key in _CONFIG_KEYS:
        app.config[key] = getattr(config, key)
    app.config.update(overrides or {})

    init_database(app)
    _register_error_handlers(app)

    @app.after_request
    def add_cors_headers(response):
        response.headers['Access-Control-Allow-Origin'] = app.config['CORS_ALLOW_ORIGIN']
        response.headers['Access-Control-Allow-Headers'] = 'Content-Type, Authorization'
        response.headers['Access-Control-Allow-Methods'] = 'GET, POST, PUT, DELETE, OPTIONS'
        return response

    # Register blueprints
    from gigfrog.routes.health import bp as health_bp
    from gigfrog.routes.leads import bp as leads_bp
    from gigfrog.routes.user_leads import bp as user_leads_bp
    from gigfrog.routes.referrals import bp as referrals_bp
    from gigfrog.routes.pipeline import bp as pipeline_bp
    from gigfrog.routes.parse_job_url import bp as parse_job_url_bp

    app.register_blueprint(health_bp)
    app.register_blueprint(leads_bp)
    app.register_blueprint(user_leads_bp)
    app.register_blueprint(referrals_bp)
    app.register_blueprint(pipeline_bp)
    app.register_blueprint(parse_job_url_bp)

    # Initialize circuit breakers for external API services
    from gigfrog.extensions import redis_client
    from gigfrog.services.circuit_breaker import init_breakers
    init_breakers(redis_client)

    return app
