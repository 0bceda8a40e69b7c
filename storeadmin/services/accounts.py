"""
Administrator Provisioning

Accounts are only ever created here, never as a side effect of logging in.
"""

import logging

from sqlalchemy.exc import SQLAlchemyError

from storeadmin.errors import InvalidCredentials, PersistenceError, ProvisioningError, ValidationError
from storeadmin.extensions import db
from storeadmin.models import AdminUser, AdministratorRecord
from storeadmin.services.auth import (
    find_active_admin_by_id,
    hash_password,
    normalize_email,
    verify_password,
)

logger = logging.getLogger(__name__)


def _find_admin_by_email(email):
    return AdminUser.query.filter(db.func.lower(AdminUser.email) == email).first()


def create_admin(email, password, full_name=None, status=True, min_password_length=6):
    """Provision a new administrator.

    Raises:
        ValidationError: blank/invalid email, short password, or the email
            is already registered
        PersistenceError: the insert failed; nothing was written
    """
    email = normalize_email(email)
    if not email or '@' not in email:
        raise ValidationError('A valid email address is required.')
    if not isinstance(password, str) or len(password) < min_password_length:
        raise ValidationError(f'Password must be at least {min_password_length} characters long.')

    try:
        if _find_admin_by_email(email) is not None:
            raise ValidationError('Email already registered.')
        admin = AdminUser(email=email,
                          password=hash_password(password),
                          full_name=(full_name or '').strip() or None,
                          status=bool(status))
        db.session.add(admin)
        db.session.commit()
    except SQLAlchemyError as e:
        db.session.rollback()
        raise PersistenceError() from e

    logger.info('Created administrator %s', admin.id)
    return AdministratorRecord.from_model(admin)


def ensure_seed_admin(email, password, full_name='Admin'):
    """Make sure the configured seed administrator exists.

    Idempotent: an existing account with that email is returned untouched,
    including its password and status. Any failure while creating the
    account rolls back the whole transaction and raises ProvisioningError,
    so no partially written row survives.

    Returns:
        AdministratorRecord, or None when email/password are not configured
    """
    email = normalize_email(email)
    if not email or not password:
        return None

    try:
        existing = _find_admin_by_email(email)
        if existing is not None:
            if not existing.status:
                logger.warning('Seed administrator %s exists but is inactive, leaving it unchanged', email)
            return AdministratorRecord.from_model(existing)

        admin = AdminUser(email=email,
                          password=hash_password(password),
                          full_name=full_name,
                          status=True)
        db.session.add(admin)
        db.session.commit()
    except Exception as e:
        db.session.rollback()
        raise ProvisioningError() from e

    logger.info('Created seed administrator %s', email)
    return AdministratorRecord.from_model(admin)


def change_password(admin_id, current_password, new_password, min_password_length=6):
    """Replace an administrator's password after checking the current one."""
    admin = find_active_admin_by_id(admin_id)
    if admin is None or not verify_password(current_password, admin.password):
        raise InvalidCredentials()
    if not isinstance(new_password, str) or len(new_password) < min_password_length:
        raise ValidationError(f'Password must be at least {min_password_length} characters long.')

    try:
        admin.password = hash_password(new_password)
        db.session.commit()
    except SQLAlchemyError as e:
        db.session.rollback()
        raise PersistenceError() from e

    logger.info('Administrator %s changed password', admin.id)
    return AdministratorRecord.from_model(admin)


def set_admin_status(admin_id, active):
    """Activate or deactivate an administrator. Returns False if not found."""
    try:
        admin = db.session.get(AdminUser, admin_id)
        if admin is None:
            return False
        admin.status = bool(active)
        db.session.commit()
    except SQLAlchemyError as e:
        db.session.rollback()
        raise PersistenceError() from e

    logger.info('Administrator %s status set to %s', admin_id, 'active' if active else 'inactive')
    return True
