"""
Health Routes
"""

import logging

from flask import jsonify
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError

from storeadmin.extensions import db
from storeadmin.health import health_bp

logger = logging.getLogger(__name__)


@health_bp.route('/')
def health():
    """Liveness plus a trivial database round trip."""
    try:
        db.session.execute(text('SELECT 1'))
    except SQLAlchemyError:
        db.session.rollback()
        logger.exception('Health check could not reach the database')
        return jsonify({'status': 'degraded', 'database': 'unreachable'}), 503
    return jsonify({'status': 'ok', 'database': 'ok'})
