"""
Server-side Sessions

The session store is an explicit capability: create_app builds one and
hands it both to the Flask session interface and to the session guard.
"""

from storeadmin.sessions.store import (
    SessionRecord,
    SessionStore,
    MemorySessionStore,
    DatabaseSessionStore,
    build_session_store,
)
from storeadmin.sessions.interface import ServerSideSession, ServerSideSessionInterface

__all__ = [
    'SessionRecord',
    'SessionStore',
    'MemorySessionStore',
    'DatabaseSessionStore',
    'build_session_store',
    'ServerSideSession',
    'ServerSideSessionInterface',
]
