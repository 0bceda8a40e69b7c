import pytest

from storeadmin import create_app
from storeadmin.config import TestConfig
from storeadmin.extensions import db
from storeadmin.services import create_admin

ADMIN_EMAIL = 'admin@example.com'
ADMIN_PASSWORD = 'secret-pass'


@pytest.fixture()
def app():
    app = create_app(TestConfig)
    yield app
    with app.app_context():
        db.session.remove()
        db.drop_all()


@pytest.fixture()
def app_context(app):
    with app.app_context():
        yield


@pytest.fixture()
def client(app):
    return app.test_client()


@pytest.fixture()
def admin(app):
    with app.app_context():
        return create_admin(ADMIN_EMAIL, ADMIN_PASSWORD, full_name='Store Admin')


@pytest.fixture()
def store(app):
    return app.extensions['session_store']


def login(client, email=ADMIN_EMAIL, password=ADMIN_PASSWORD):
    return client.post('/admin/user/login', json={'email': email, 'password': password})


@pytest.fixture()
def auth_client(client, admin):
    r = login(client)
    assert r.status_code == 200
    return client
