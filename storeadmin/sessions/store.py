"""
Session Stores

A session record is keyed by an opaque token (the cookie value) and holds
the authenticated administrator's id plus any other request data. Expired
records are treated as absent.
"""

import copy
import secrets
import threading
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict, Optional

from sqlalchemy.exc import SQLAlchemyError

from storeadmin.errors import PersistenceError
from storeadmin.extensions import db
from storeadmin.models import AdminSession
from storeadmin.models.admin_user import utcnow


@dataclass
class SessionRecord:
    """Session data stored server-side."""

    token: str
    expires_at: datetime
    data: Dict[str, Any] = field(default_factory=dict)

    def is_expired(self, now: Optional[datetime] = None) -> bool:
        return (now or utcnow()) >= self.expires_at


class SessionStore:
    """Interface every session backend implements."""

    def new_token(self) -> str:
        return secrets.token_urlsafe(32)

    def load(self, token: str) -> Optional[SessionRecord]:
        raise NotImplementedError

    def save(self, token: str, data: Dict[str, Any], expires_at: datetime) -> None:
        raise NotImplementedError

    def delete(self, token: str) -> bool:
        raise NotImplementedError

    def purge_expired(self) -> int:
        raise NotImplementedError


class MemorySessionStore(SessionStore):
    """Process-local store, used by tests and single-worker setups."""

    def __init__(self):
        self._records: Dict[str, SessionRecord] = {}
        self._lock = threading.Lock()

    def load(self, token):
        if not token:
            return None
        with self._lock:
            record = self._records.get(token)
            if record is None:
                return None
            if record.is_expired():
                del self._records[token]
                return None
            return SessionRecord(token=record.token,
                                 expires_at=record.expires_at,
                                 data=copy.deepcopy(record.data))

    def save(self, token, data, expires_at):
        with self._lock:
            self._records[token] = SessionRecord(token=token,
                                                 expires_at=expires_at,
                                                 data=copy.deepcopy(dict(data)))

    def delete(self, token):
        with self._lock:
            return self._records.pop(token, None) is not None

    def purge_expired(self):
        now = utcnow()
        with self._lock:
            expired = [t for t, r in self._records.items() if r.is_expired(now)]
            for token in expired:
                del self._records[token]
        return len(expired)


class DatabaseSessionStore(SessionStore):
    """Store backed by the admin_session table."""

    def load(self, token):
        if not token:
            return None
        try:
            row = db.session.get(AdminSession, token)
            if row is None:
                return None
            if row.expires_at <= utcnow():
                db.session.delete(row)
                db.session.commit()
                return None
            return SessionRecord(token=row.token,
                                 expires_at=row.expires_at,
                                 data=dict(row.data or {}))
        except SQLAlchemyError as e:
            db.session.rollback()
            raise PersistenceError() from e

    def save(self, token, data, expires_at):
        try:
            row = db.session.get(AdminSession, token)
            if row is None:
                row = AdminSession(token=token)
                db.session.add(row)
            # Reassign so the JSON column is flagged dirty
            row.data = dict(data)
            row.expires_at = expires_at
            db.session.commit()
        except SQLAlchemyError as e:
            db.session.rollback()
            raise PersistenceError() from e

    def delete(self, token):
        try:
            n = AdminSession.query.filter_by(token=token).delete()
            db.session.commit()
            return n > 0
        except SQLAlchemyError as e:
            db.session.rollback()
            raise PersistenceError() from e

    def purge_expired(self):
        try:
            n = AdminSession.query.filter(AdminSession.expires_at <= utcnow()).delete()
            db.session.commit()
            return n
        except SQLAlchemyError as e:
            db.session.rollback()
            raise PersistenceError() from e


def build_session_store(kind):
    """Create the store named by the SESSION_STORE setting."""
    if kind == 'memory':
        return MemorySessionStore()
    if kind == 'database':
        return DatabaseSessionStore()
    raise ValueError(f'Unknown SESSION_STORE: {kind!r}')
