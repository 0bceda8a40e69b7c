"""
Flask Extensions

Admin sessions are stored server-side; see storeadmin.sessions.
"""

from flask_sqlalchemy import SQLAlchemy

# Database instance
db = SQLAlchemy()
