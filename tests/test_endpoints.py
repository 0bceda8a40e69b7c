from datetime import timedelta

from conftest import ADMIN_EMAIL, ADMIN_PASSWORD, login
from storeadmin import create_app
from storeadmin.config import TestConfig
from storeadmin.errors import PersistenceError
from storeadmin.extensions import db
from storeadmin.models import AdminSession
from storeadmin.models.admin_user import utcnow
from storeadmin.services import ADMIN_SESSION_KEY, create_admin, set_admin_status

COOKIE = 'asid'


def _is_login_redirect(r):
    return r.status_code in (301, 302) and r.headers['Location'].endswith('/admin/login')


def test_health(client):
    r = client.get('/')
    assert r.status_code == 200
    assert r.get_json()['status'] == 'ok'


def test_unauthenticated_redirects(client):
    assert _is_login_redirect(client.get('/admin'))
    assert _is_login_redirect(client.get('/admin/user/me'))
    assert _is_login_redirect(client.get('/admin/api/tax-classes'))
    assert _is_login_redirect(client.delete('/admin/api/tax-rates/some-uuid'))
    # Unknown paths under the prefix are guarded too
    assert _is_login_redirect(client.get('/admin/does-not-exist'))


def test_login_page_renders(client):
    r = client.get('/admin/login')
    assert r.status_code == 200
    assert 'Admin Login' in r.get_data(as_text=True)


def test_login_unknown_account(client):
    r = login(client, 'a@b.com', 'secret')
    assert r.status_code == 401
    assert r.get_json() == {'error': {'status': 401, 'message': 'Invalid email or password'}}
    assert client.get_cookie(COOKIE) is None


def test_wrong_password_same_error(client, admin):
    r = login(client, ADMIN_EMAIL, 'wrong-password')
    assert r.status_code == 401
    assert r.get_json()['error']['message'] == 'Invalid email or password'
    assert client.get_cookie(COOKIE) is None


def test_login_then_dashboard(client, admin):
    r = login(client)
    assert r.status_code == 200
    assert r.get_json() == {'data': {'redirectUrl': '/admin'}}
    assert client.get_cookie(COOKIE) is not None

    r = client.get('/admin')
    assert r.status_code == 200
    body = r.get_data(as_text=True)
    assert 'Admin Dashboard' in body
    assert 'Store Admin' in body


def test_form_encoded_login(client, admin):
    r = client.post('/admin/user/login', data={'email': ADMIN_EMAIL, 'password': ADMIN_PASSWORD})
    assert r.status_code == 200
    assert client.get('/admin').status_code == 200


def test_session_cookie_is_opaque_and_stored_server_side(client, admin, store):
    login(client)
    token = client.get_cookie(COOKIE).value
    record = store.load(token)
    assert record.data == {ADMIN_SESSION_KEY: admin.id}
    assert len(token) >= 32


def test_repeated_requests_stay_authorized(auth_client, admin):
    for _ in range(2):
        r = auth_client.get('/admin/user/me')
        assert r.status_code == 200
        assert r.get_json()['data']['id'] == admin.id


def test_login_rotates_existing_token(client, admin, store):
    store.save('planted-token', {'visited': True}, utcnow() + timedelta(hours=1))
    client.set_cookie(COOKIE, 'planted-token')

    login(client)
    new_token = client.get_cookie(COOKIE).value
    assert new_token != 'planted-token'
    assert store.load('planted-token') is None
    assert store.load(new_token).data == {ADMIN_SESSION_KEY: admin.id}


def test_cookie_for_missing_admin_redirects_without_loop(client, admin, store):
    store.save('forged', {ADMIN_SESSION_KEY: admin.id + 1000}, utcnow() + timedelta(hours=1))
    client.set_cookie(COOKIE, 'forged')

    assert _is_login_redirect(client.get('/admin'))
    # The login page must render instead of bouncing back to the dashboard
    r = client.get('/admin/login')
    assert r.status_code == 200


def test_deactivated_admin_is_logged_out_on_next_request(app, auth_client, admin):
    assert auth_client.get('/admin').status_code == 200
    with app.app_context():
        set_admin_status(admin.id, False)
    assert _is_login_redirect(auth_client.get('/admin'))
    assert auth_client.get('/admin/login').status_code == 200


def test_login_page_sends_authenticated_admin_to_dashboard(auth_client):
    r = auth_client.get('/admin/login')
    assert r.status_code == 302
    assert r.headers['Location'].endswith('/admin')


def test_logout_destroys_session(auth_client, store):
    token = auth_client.get_cookie(COOKIE).value
    r = auth_client.get('/admin/logout')
    assert _is_login_redirect(r)
    assert store.load(token) is None
    assert auth_client.get_cookie(COOKIE) is None
    assert _is_login_redirect(auth_client.get('/admin'))


def test_persistence_failure_is_5xx(client, admin, monkeypatch):
    def broken(email):
        raise PersistenceError()

    monkeypatch.setattr('storeadmin.services.auth.find_active_admin_by_email', broken)
    r = login(client)
    assert r.status_code == 503
    assert r.get_json()['error']['status'] == 503
    assert client.get_cookie(COOKIE) is None


def test_change_password(client, auth_client):
    r = auth_client.post('/admin/user/password',
                         json={'currentPassword': 'wrong', 'newPassword': 'another-pass'})
    assert r.status_code == 401

    r = auth_client.post('/admin/user/password',
                         json={'currentPassword': ADMIN_PASSWORD, 'newPassword': '123'})
    assert r.status_code == 400

    r = auth_client.post('/admin/user/password',
                         json={'currentPassword': ADMIN_PASSWORD, 'newPassword': 'another-pass'})
    assert r.status_code == 200

    auth_client.get('/admin/logout')
    assert login(client, ADMIN_EMAIL, ADMIN_PASSWORD).status_code == 401
    assert login(client, ADMIN_EMAIL, 'another-pass').status_code == 200


def test_non_string_login_fields_are_invalid_credentials(client, admin):
    for body in ({'email': 123, 'password': ADMIN_PASSWORD},
                 {'email': ADMIN_EMAIL, 'password': 123456},
                 {'email': [ADMIN_EMAIL], 'password': {'p': 1}},
                 {'email': None, 'password': None}):
        r = client.post('/admin/user/login', json=body)
        assert r.status_code == 401
        assert r.get_json()['error']['message'] == 'Invalid email or password'
        assert client.get_cookie(COOKIE) is None


def test_non_string_new_password_rejected(auth_client):
    r = auth_client.post('/admin/user/password',
                         json={'currentPassword': ADMIN_PASSWORD, 'newPassword': 12345678})
    assert r.status_code == 400
    r = auth_client.post('/admin/user/password',
                         json={'currentPassword': 12345678, 'newPassword': 'another-pass'})
    assert r.status_code == 401


class DatabaseSessionConfig(TestConfig):
    SESSION_STORE = 'database'


def test_database_session_store_flow():
    app = create_app(DatabaseSessionConfig)
    with app.app_context():
        admin = create_admin(ADMIN_EMAIL, ADMIN_PASSWORD, full_name='Store Admin')

    client = app.test_client()
    assert login(client).status_code == 200
    token = client.get_cookie(COOKIE).value
    with app.app_context():
        assert db.session.get(AdminSession, token).data == {ADMIN_SESSION_KEY: admin.id}

    assert client.get('/admin').status_code == 200
    assert client.get('/admin/login').status_code == 302

    with app.app_context():
        set_admin_status(admin.id, False)
    assert _is_login_redirect(client.get('/admin'))
    assert client.get('/admin/login').status_code == 200
    with app.app_context():
        assert db.session.get(AdminSession, token) is None
        db.drop_all()
