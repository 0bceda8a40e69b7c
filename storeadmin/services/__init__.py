"""
Services Package

Exports all services for easy importing.
"""

from storeadmin.services.auth import ADMIN_SESSION_KEY, Redirect, authenticate, authorize
from storeadmin.services.accounts import change_password, create_admin, ensure_seed_admin, set_admin_status

__all__ = [
    'ADMIN_SESSION_KEY',
    'Redirect',
    'authenticate',
    'authorize',
    'change_password',
    'create_admin',
    'ensure_seed_admin',
    'set_admin_status',
]
