"""
Admin Blueprint

Login, logout and the pages of the admin panel. Every request under the
admin prefix passes the session guard first (see guard.py).
"""

from flask import Blueprint

admin_bp = Blueprint('admin', __name__)

from storeadmin.admin import routes  # noqa: E402, F401
