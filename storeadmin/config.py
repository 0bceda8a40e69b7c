"""
Configuration settings for the Store Admin service
"""
import os
from datetime import timedelta


def _database_uri(basedir):
    """Resolve the database URI from the environment.

    DATABASE_URL wins. Otherwise the discrete DB_* variables injected by the
    hosting platform are assembled into a PostgreSQL URL. Local development
    falls back to SQLite under instance/.
    """
    url = os.environ.get('DATABASE_URL')
    if url:
        # Some hosts still hand out the pre-SQLAlchemy-1.4 scheme
        if url.startswith('postgres://'):
            url = 'postgresql://' + url[len('postgres://'):]
        return url

    host = os.environ.get('DB_HOST')
    if host:
        user = os.environ.get('DB_USER', 'postgres')
        password = os.environ.get('DB_PASSWORD', '')
        port = os.environ.get('DB_PORT', '5432')
        name = os.environ.get('DB_NAME', 'postgres')
        auth = f'{user}:{password}' if password else user
        return f'postgresql://{auth}@{host}:{port}/{name}'

    return 'sqlite:///' + os.path.join(basedir, 'instance', 'storeadmin.db')


def _env_bool(name, default=False):
    value = os.environ.get(name)
    if value is None:
        return default
    return value.strip().lower() in ('1', 'true', 'yes', 'on')


class Config:
    """Flask application configuration"""

    # Flask secret key
    SECRET_KEY = os.environ.get('SECRET_KEY') or 'dev-secret-key-change-in-production-12345'

    # Database configuration
    basedir = os.path.abspath(os.path.dirname(os.path.dirname(__file__)))
    SQLALCHEMY_DATABASE_URI = _database_uri(basedir)
    SQLALCHEMY_TRACK_MODIFICATIONS = False

    # Server-side admin sessions: 'database' or 'memory'
    SESSION_STORE = os.environ.get('SESSION_STORE') or 'database'
    SESSION_COOKIE_NAME = os.environ.get('SESSION_COOKIE_NAME') or 'asid'
    SESSION_COOKIE_HTTPONLY = True
    SESSION_COOKIE_SAMESITE = 'Lax'
    SESSION_COOKIE_SECURE = _env_bool('SESSION_COOKIE_SECURE')
    PERMANENT_SESSION_LIFETIME = timedelta(hours=int(os.environ.get('SESSION_LIFETIME_HOURS', '24')))

    # Admin panel
    ADMIN_PREFIX = '/admin'
    MIN_PASSWORD_LENGTH = 6

    # Seed administrator, created once at startup when both are set.
    # There is deliberately no default password.
    ADMIN_EMAIL = os.environ.get('ADMIN_EMAIL')
    ADMIN_PASSWORD = os.environ.get('ADMIN_PASSWORD')
    ADMIN_FULL_NAME = os.environ.get('ADMIN_FULL_NAME') or 'Admin'

    LOG_LEVEL = os.environ.get('LOG_LEVEL') or 'INFO'


class TestConfig(Config):
    """Testing configuration"""
    TESTING = True
    SQLALCHEMY_DATABASE_URI = 'sqlite:///:memory:'
    SESSION_STORE = 'memory'
    ADMIN_EMAIL = None
    ADMIN_PASSWORD = None
