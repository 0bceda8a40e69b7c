"""
Error Taxonomy

InvalidCredentials and PersistenceError are raised by the services and
turned into JSON responses by the handlers registered here. An
unauthenticated request is not an error: the session guard answers it with
a redirect.
"""

import logging

from flask import jsonify

logger = logging.getLogger(__name__)

INVALID_CREDENTIALS_MESSAGE = 'Invalid email or password'


class AuthError(Exception):
    """Base class for authentication failures."""
    status_code = 401


class InvalidCredentials(AuthError):
    """Wrong email or password. The message never says which."""

    def __init__(self, message=INVALID_CREDENTIALS_MESSAGE):
        super().__init__(message)
        self.message = message


class PersistenceError(Exception):
    """The database could not be reached or a query failed."""
    status_code = 503

    def __init__(self, message='Storage is unavailable, please try again later'):
        super().__init__(message)
        self.message = message


class ProvisioningError(PersistenceError):
    """Creating an administrator failed and was rolled back."""

    def __init__(self, message='Could not provision administrator'):
        super().__init__(message)


class ValidationError(ValueError):
    """Request payload failed validation."""
    status_code = 400

    def __init__(self, message):
        super().__init__(message)
        self.message = message


class NotFound(Exception):
    status_code = 404

    def __init__(self, message='Not found'):
        super().__init__(message)
        self.message = message


def error_response(status_code, message):
    response = jsonify({'error': {'status': status_code, 'message': message}})
    response.status_code = status_code
    return response


def register_error_handlers(app):
    """Attach JSON error handlers for the service exceptions."""

    @app.errorhandler(AuthError)
    def handle_auth_error(exc):
        return error_response(exc.status_code, str(exc))

    @app.errorhandler(PersistenceError)
    def handle_persistence_error(exc):
        logger.error('Persistence failure: %s', exc, exc_info=exc)
        return error_response(exc.status_code, exc.message)

    @app.errorhandler(ValidationError)
    def handle_validation_error(exc):
        return error_response(exc.status_code, exc.message)

    @app.errorhandler(NotFound)
    def handle_not_found(exc):
        return error_response(exc.status_code, exc.message)
