"""
Tax Settings Service

CRUD for tax classes and the rate rows shown in the admin tax settings.
"""

import logging
import math

from sqlalchemy.exc import SQLAlchemyError

from storeadmin.errors import NotFound, PersistenceError, ValidationError
from storeadmin.extensions import db
from storeadmin.models import TaxClass, TaxRate

logger = logging.getLogger(__name__)

# Location fields; '*' matches anything
_RATE_TEXT_FIELDS = ('country', 'province', 'postcode')


def _commit():
    try:
        db.session.commit()
    except SQLAlchemyError as e:
        db.session.rollback()
        raise PersistenceError() from e


def _as_bool(value):
    if isinstance(value, bool):
        return value
    if isinstance(value, (int, float)):
        return bool(value)
    if isinstance(value, str) and value.strip().lower() in ('1', 'true', 'yes', 'on'):
        return True
    if isinstance(value, str) and value.strip().lower() in ('0', 'false', 'no', 'off', ''):
        return False
    raise ValidationError('isCompound must be a boolean.')


def _as_text(value, label):
    if value is None:
        return ''
    if not isinstance(value, str):
        raise ValidationError(f'{label} must be a string.')
    return value.strip()


def _as_number(value, label):
    """Finite number from a JSON number or numeric string. Booleans are refused."""
    if isinstance(value, bool) or not isinstance(value, (int, float, str)):
        raise ValidationError(f'{label} must be a number.')
    try:
        number = float(value)
    except (ValueError, OverflowError):
        raise ValidationError(f'{label} must be a number.')
    if not math.isfinite(number):
        raise ValidationError(f'{label} must be a finite number.')
    return number


def clean_rate_payload(payload, partial=False):
    """Validate a rate payload and map it onto model attribute names.

    Accepts the camelCase keys the admin UI sends (isCompound) as well as
    snake_case. With partial=True only the supplied fields are returned.
    """
    payload = payload or {}
    cleaned = {}

    if 'name' in payload or not partial:
        name = _as_text(payload.get('name'), 'Rate name')
        if not name:
            raise ValidationError('Rate name is required.')
        cleaned['name'] = name

    if 'rate' in payload or not partial:
        rate = _as_number(payload.get('rate'), 'Rate')
        if rate < 0:
            raise ValidationError('Rate must not be negative.')
        cleaned['rate'] = rate

    if 'priority' in payload or not partial:
        priority = _as_number(payload.get('priority', 0), 'Priority')
        if not priority.is_integer():
            raise ValidationError('Priority must be an integer.')
        priority = int(priority)
        if priority < 0:
            raise ValidationError('Priority must not be negative.')
        cleaned['priority'] = priority

    compound_key = 'isCompound' if 'isCompound' in payload else 'is_compound'
    if compound_key in payload:
        cleaned['is_compound'] = _as_bool(payload[compound_key])
    elif not partial:
        cleaned['is_compound'] = False

    for key in _RATE_TEXT_FIELDS:
        if key in payload:
            cleaned[key] = _as_text(payload.get(key), key.capitalize()) or '*'
        elif not partial:
            cleaned[key] = '*'

    return cleaned


def list_tax_classes():
    try:
        return TaxClass.query.order_by(TaxClass.id).all()
    except SQLAlchemyError as e:
        db.session.rollback()
        raise PersistenceError() from e


def get_tax_class(class_uuid):
    tax_class = TaxClass.query.filter_by(uuid=class_uuid).first()
    if tax_class is None:
        raise NotFound('Tax class not found')
    return tax_class


def get_tax_rate(rate_uuid):
    rate = TaxRate.query.filter_by(uuid=rate_uuid).first()
    if rate is None:
        raise NotFound('Tax rate not found')
    return rate


def create_tax_class(name):
    name = _as_text(name, 'Tax class name')
    if not name:
        raise ValidationError('Tax class name is required.')
    tax_class = TaxClass(name=name)
    db.session.add(tax_class)
    _commit()
    logger.info('Created tax class %s', tax_class.uuid)
    return tax_class


def create_tax_rate(class_uuid, payload):
    tax_class = get_tax_class(class_uuid)
    rate = TaxRate(tax_class_id=tax_class.id, **clean_rate_payload(payload))
    db.session.add(rate)
    _commit()
    logger.info('Created tax rate %s in class %s', rate.uuid, tax_class.uuid)
    return rate


def update_tax_rate(rate_uuid, payload):
    rate = get_tax_rate(rate_uuid)
    for key, value in clean_rate_payload(payload, partial=True).items():
        setattr(rate, key, value)
    _commit()
    return rate


def delete_tax_rate(rate_uuid):
    rate = get_tax_rate(rate_uuid)
    db.session.delete(rate)
    _commit()
    logger.info('Deleted tax rate %s', rate_uuid)
