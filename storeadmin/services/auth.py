"""
Admin Authentication Service

Credential verification on login, and the per-request session guard that
re-validates a session against the admin_user table.
"""

import logging
import secrets
from dataclasses import dataclass
from functools import lru_cache

from sqlalchemy.exc import SQLAlchemyError
from werkzeug.security import generate_password_hash, check_password_hash

from storeadmin.errors import InvalidCredentials, PersistenceError
from storeadmin.extensions import db
from storeadmin.models import AdminUser, AdministratorRecord

logger = logging.getLogger(__name__)

# Key under which the authenticated administrator's id lives in the session
ADMIN_SESSION_KEY = 'admin_user_id'


@dataclass(frozen=True)
class Redirect:
    """Outcome of a failed authorization: send the browser to `location`."""
    location: str


def normalize_email(email):
    if not isinstance(email, str):
        return ''
    return email.strip().lower()


def hash_password(password):
    if not password:
        raise ValueError('password_blank')
    return generate_password_hash(password, method='pbkdf2:sha256')


def verify_password(password, password_hash):
    if not isinstance(password, str) or not password or not password_hash:
        return False
    try:
        return check_password_hash(password_hash, password)
    except ValueError:
        # Unknown hash format stored in the row
        logger.warning('Unrecognised password hash format')
        return False


@lru_cache(maxsize=1)
def _dummy_hash():
    return hash_password(secrets.token_urlsafe(16))


def find_active_admin_by_email(email):
    email = normalize_email(email)
    if not email:
        return None
    try:
        return AdminUser.query.filter(
            db.func.lower(AdminUser.email) == email,
            AdminUser.status.is_(True),
        ).first()
    except SQLAlchemyError as e:
        db.session.rollback()
        raise PersistenceError() from e


def find_active_admin_by_id(admin_id):
    try:
        return AdminUser.query.filter_by(id=admin_id, status=True).first()
    except SQLAlchemyError as e:
        db.session.rollback()
        raise PersistenceError() from e


def authenticate(email, password, session=None):
    """Check an email/password pair against the active administrators.

    Args:
        email: compared case-insensitively
        password: checked against the stored salted hash
        session: optional mutable session for the current request; on
            success it is cleared, given a new token and bound to the
            administrator

    Returns:
        AdministratorRecord of the authenticated administrator

    Raises:
        InvalidCredentials: unknown/inactive email or wrong password, with
            the same message in both cases
        PersistenceError: the lookup itself failed
    """
    if not normalize_email(email) or not isinstance(password, str) or not password:
        raise InvalidCredentials()

    admin = find_active_admin_by_email(email)
    if admin is None:
        # Unknown emails pay the same hashing cost as a wrong password
        verify_password(password, _dummy_hash())
    if admin is None or not verify_password(password, admin.password):
        logger.info('Admin login rejected')
        raise InvalidCredentials()

    record = AdministratorRecord.from_model(admin)

    if session is not None:
        session.clear()
        regenerate = getattr(session, 'regenerate', None)
        if regenerate is not None:
            regenerate()
        session[ADMIN_SESSION_KEY] = record.id

    logger.info('Admin %s logged in', record.id)
    return record


def authorize(session_store, token, login_url):
    """Session guard: resolve a session token to an active administrator.

    Every call re-reads the session and the admin_user row. Nothing is
    cached between requests, so a deactivated or deleted administrator is
    locked out on their very next request.

    Returns:
        AdministratorRecord when authorized, otherwise Redirect(login_url).
        Storage failures propagate as PersistenceError.
    """
    record = session_store.load(token) if token else None
    if record is None:
        return Redirect(login_url)

    admin_id = record.data.get(ADMIN_SESSION_KEY)
    try:
        admin_id = int(admin_id)
    except (TypeError, ValueError):
        return Redirect(login_url)

    admin = find_active_admin_by_id(admin_id)
    if admin is None:
        logger.debug('Session references missing or inactive admin %s', admin_id)
        return Redirect(login_url)

    return AdministratorRecord.from_model(admin)
