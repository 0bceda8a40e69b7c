"""
Tax Settings API Blueprint

JSON endpoints behind the admin tax settings page. Mounted under the admin
prefix, so the session guard covers them.
"""

from flask import Blueprint

tax_bp = Blueprint('tax', __name__)

from storeadmin.tax import routes  # noqa: E402, F401
