"""
Administrator Model
"""

import uuid
from dataclasses import asdict, dataclass
from datetime import datetime, timezone
from typing import Optional

from storeadmin.extensions import db


def new_uuid():
    return str(uuid.uuid4())


def utcnow():
    """Naive UTC timestamp, the form every DateTime column here stores."""
    return datetime.now(timezone.utc).replace(tzinfo=None)


class AdminUser(db.Model):
    """Privileged user allowed into the admin panel"""
    __tablename__ = 'admin_user'

    id = db.Column('admin_user_id', db.Integer, primary_key=True)
    uuid = db.Column(db.String(36), unique=True, nullable=False, default=new_uuid)
    # Always stored lower-cased
    email = db.Column(db.String(255), unique=True, nullable=False, index=True)
    password = db.Column(db.String(255), nullable=False)
    status = db.Column(db.Boolean, default=True, nullable=False)
    full_name = db.Column(db.String(255))
    created_at = db.Column(db.DateTime, default=utcnow)
    updated_at = db.Column(db.DateTime, default=utcnow, onupdate=utcnow)

    def __repr__(self):
        return f'<AdminUser {self.email}>'


@dataclass(frozen=True)
class AdministratorRecord:
    """Read-only view of an administrator, without the password hash."""

    id: int
    uuid: str
    email: str
    full_name: Optional[str]
    status: bool

    @classmethod
    def from_model(cls, admin):
        return cls(id=admin.id, uuid=admin.uuid, email=admin.email,
                   full_name=admin.full_name, status=bool(admin.status))

    def to_dict(self):
        return asdict(self)
