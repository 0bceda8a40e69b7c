"""
Flask Session Interface

Replaces Flask's signed-cookie session with one whose contents live in a
SessionStore. The cookie only carries the opaque token.
"""

import logging

from flask.sessions import SessionInterface, SessionMixin
from werkzeug.datastructures import CallbackDict

from storeadmin.errors import PersistenceError
from storeadmin.models.admin_user import utcnow

logger = logging.getLogger(__name__)


class ServerSideSession(CallbackDict, SessionMixin):
    """Session dict that remembers its token and whether it changed."""

    def __init__(self, initial=None, sid=None, new=False):
        def on_update(self):
            self.modified = True
        CallbackDict.__init__(self, initial, on_update)
        self.sid = sid
        self.new = new
        self.modified = False
        self.previous_sid = None

    def regenerate(self):
        """Issue a fresh token on the next save and drop the old record.

        Called on login so a token planted before authentication never
        becomes an authenticated one.
        """
        if self.sid is not None and self.previous_sid is None:
            self.previous_sid = self.sid
        self.sid = None
        self.modified = True


class ServerSideSessionInterface(SessionInterface):

    def __init__(self, store):
        self.store = store

    def open_session(self, app, request):
        token = request.cookies.get(self.get_cookie_name(app))
        if token:
            try:
                record = self.store.load(token)
            except PersistenceError:
                # The guard re-reads the store and reports the failure.
                logger.warning('Could not load session, continuing with an empty one')
                record = None
            if record is not None:
                return ServerSideSession(record.data, sid=token)
        return ServerSideSession(new=True)

    def save_session(self, app, session, response):
        name = self.get_cookie_name(app)
        domain = self.get_cookie_domain(app)
        path = self.get_cookie_path(app)

        if session.previous_sid:
            self.store.delete(session.previous_sid)
            session.previous_sid = None

        if not session:
            # Never persisted, nothing to clean up and no cookie to set
            if session.sid is None or session.new:
                return
            self.store.delete(session.sid)
            response.delete_cookie(name, domain=domain, path=path)
            return

        if not session.modified and not app.config.get('SESSION_REFRESH_EACH_REQUEST', True):
            return

        if session.sid is None:
            session.sid = self.store.new_token()

        expires_at = utcnow() + app.permanent_session_lifetime
        self.store.save(session.sid, dict(session), expires_at)

        response.vary.add('Cookie')
        response.set_cookie(
            name,
            session.sid,
            max_age=int(app.permanent_session_lifetime.total_seconds()),
            httponly=self.get_cookie_httponly(app),
            domain=domain,
            path=path,
            secure=self.get_cookie_secure(app),
            samesite=self.get_cookie_samesite(app),
        )
