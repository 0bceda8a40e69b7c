"""
Store Admin - Application Factory

This module provides the Flask application factory pattern for creating
and configuring the application instance.
"""

import logging
import os

from flask import Flask
from storeadmin.extensions import db
from storeadmin.config import Config

logger = logging.getLogger(__name__)


def create_app(config_class=Config):
    """Create and configure the Flask application.

    Args:
        config_class: Configuration class to use (default: Config)

    Returns:
        Configured Flask application instance
    """
    app = Flask(__name__)
    app.config.from_object(config_class)

    _configure_logging(app)

    # Initialize extensions
    db.init_app(app)

    # Server-side sessions; the same store is used by the session guard
    from storeadmin.sessions import ServerSideSessionInterface, build_session_store
    store = build_session_store(app.config['SESSION_STORE'])
    app.extensions['session_store'] = store
    app.session_interface = ServerSideSessionInterface(store)

    # Register blueprints
    from storeadmin.admin import admin_bp
    from storeadmin.tax import tax_bp
    from storeadmin.health import health_bp

    prefix = app.config['ADMIN_PREFIX'].rstrip('/')
    app.register_blueprint(admin_bp, url_prefix=prefix)
    app.register_blueprint(tax_bp, url_prefix=prefix + '/api')
    app.register_blueprint(health_bp)

    # Guard every path under the admin prefix, including unknown ones
    from storeadmin.admin.guard import enforce_admin_session
    app.before_request(enforce_admin_session)

    from storeadmin.errors import register_error_handlers
    register_error_handlers(app)

    # Create database tables
    with app.app_context():
        uri = app.config['SQLALCHEMY_DATABASE_URI']
        if uri.startswith('sqlite:///') and ':memory:' not in uri:
            os.makedirs(os.path.dirname(uri[len('sqlite:///'):]), exist_ok=True)
        db.create_all()
        _ensure_seed_admin(app)

    return app


def _configure_logging(app):
    level = str(app.config.get('LOG_LEVEL') or 'INFO').upper()
    if not logging.getLogger().handlers:
        logging.basicConfig(level=level,
                            format='%(asctime)s %(levelname)s %(name)s: %(message)s')
    logging.getLogger('storeadmin').setLevel(level)


def _ensure_seed_admin(app):
    """Create the configured seed administrator if it does not exist yet."""
    from storeadmin.services import ensure_seed_admin

    email = app.config.get('ADMIN_EMAIL')
    password = app.config.get('ADMIN_PASSWORD')
    if not email or not password:
        return None

    logger.warning('Seeding administrator %s from ADMIN_EMAIL/ADMIN_PASSWORD. '
                   'The password sits in plain text in the environment; '
                   'change it after the first login and unset ADMIN_PASSWORD.', email)
    # A ProvisioningError here aborts startup
    return ensure_seed_admin(email, password, app.config.get('ADMIN_FULL_NAME') or 'Admin')
