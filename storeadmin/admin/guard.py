"""
Admin Session Guard

Runs before every request under the admin prefix. A session cookie alone
never grants access: the administrator it points at is reloaded from the
database on each request and must still exist and be active.
"""

import logging
from functools import wraps

from flask import current_app, g, redirect, request, session, url_for

from storeadmin.services.auth import ADMIN_SESSION_KEY, Redirect, authorize

logger = logging.getLogger(__name__)

# Reachable without an authenticated session
PUBLIC_ENDPOINTS = {'admin.login_page', 'admin.login', 'admin.logout'}


def session_store():
    return current_app.extensions['session_store']


def session_token():
    return request.cookies.get(current_app.config['SESSION_COOKIE_NAME'])


def guard_admin_request():
    """Authorize the current request at most once.

    Returns None when the request may proceed (g.admin_user is set), or a
    redirect response to the login page.
    """
    if 'admin_user' in g:
        return None

    outcome = authorize(session_store(), session_token(), url_for('admin.login_page'))
    if isinstance(outcome, Redirect):
        # Drop a stale binding so the browser stops presenting it
        session.pop(ADMIN_SESSION_KEY, None)
        logger.debug('Redirecting unauthenticated request for %s', request.path)
        return redirect(outcome.location)

    g.admin_user = outcome
    return None


def enforce_admin_session():
    """before_request hook covering every path under ADMIN_PREFIX."""
    prefix = current_app.config['ADMIN_PREFIX'].rstrip('/')
    path = request.path
    if path != prefix and not path.startswith(prefix + '/'):
        return None
    if request.endpoint in PUBLIC_ENDPOINTS:
        return None
    return guard_admin_request()


def admin_required(f):
    """Decorator to ensure the request is from an authenticated admin."""
    @wraps(f)
    def wrapper(*args, **kwargs):
        response = guard_admin_request()
        if response is not None:
            return response
        return f(*args, **kwargs)
    return wrapper
