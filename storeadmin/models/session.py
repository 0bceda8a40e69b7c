"""
Admin Session Model

Backing table for DatabaseSessionStore.
"""

from storeadmin.extensions import db
from storeadmin.models.admin_user import utcnow


class AdminSession(db.Model):
    """Server-side session keyed by the cookie token"""
    __tablename__ = 'admin_session'

    token = db.Column(db.String(64), primary_key=True)
    data = db.Column(db.JSON, nullable=False, default=dict)
    expires_at = db.Column(db.DateTime, nullable=False, index=True)
    created_at = db.Column(db.DateTime, default=utcnow)

    def __repr__(self):
        return f'<AdminSession expires:{self.expires_at}>'
