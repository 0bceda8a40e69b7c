import pytest

from conftest import ADMIN_EMAIL, ADMIN_PASSWORD, login
from storeadmin import create_app
from storeadmin.config import TestConfig
from storeadmin.errors import InvalidCredentials, ProvisioningError, ValidationError
from storeadmin.extensions import db
from storeadmin.models import AdminUser
from storeadmin.services import (
    authenticate,
    change_password,
    create_admin,
    ensure_seed_admin,
    set_admin_status,
)


class SeededConfig(TestConfig):
    ADMIN_EMAIL = 'Owner@Shop.test'
    ADMIN_PASSWORD = 'owner-pass'
    ADMIN_FULL_NAME = 'Shop Owner'


def test_create_admin_normalizes_email(app_context):
    record = create_admin('  New@Example.COM ', 'password1', full_name='New')
    assert record.email == 'new@example.com'
    assert record.full_name == 'New'
    row = db.session.get(AdminUser, record.id)
    assert row.password != 'password1'


def test_create_admin_rejects_duplicates_case_insensitively(app_context, admin):
    with pytest.raises(ValidationError):
        create_admin(ADMIN_EMAIL.upper(), 'password1')
    assert AdminUser.query.count() == 1


def test_create_admin_validation(app_context):
    with pytest.raises(ValidationError):
        create_admin('not-an-email', 'password1')
    with pytest.raises(ValidationError):
        create_admin('x@example.com', '123')
    assert AdminUser.query.count() == 0


def test_seed_is_idempotent(app_context):
    first = ensure_seed_admin('seed@example.com', 'seed-pass')
    second = ensure_seed_admin('SEED@example.com', 'seed-pass')
    assert first.id == second.id
    assert AdminUser.query.count() == 1


def test_seed_keeps_existing_password_and_status(app_context, admin):
    set_admin_status(admin.id, False)
    record = ensure_seed_admin(ADMIN_EMAIL, 'different-pass')
    assert record.id == admin.id
    assert record.status is False

    set_admin_status(admin.id, True)
    assert authenticate(ADMIN_EMAIL, ADMIN_PASSWORD).id == admin.id
    with pytest.raises(InvalidCredentials):
        authenticate(ADMIN_EMAIL, 'different-pass')


def test_seed_skipped_without_credentials(app_context):
    assert ensure_seed_admin(None, 'x') is None
    assert ensure_seed_admin('seed@example.com', '') is None
    assert AdminUser.query.count() == 0


def test_seed_failure_leaves_no_partial_row(app_context, monkeypatch):
    real_add = db.session.add

    def add_then_fail(obj):
        real_add(obj)
        raise RuntimeError('disk full')

    monkeypatch.setattr(db.session, 'add', add_then_fail)
    with pytest.raises(ProvisioningError):
        ensure_seed_admin('seed@example.com', 'seed-pass')
    monkeypatch.undo()
    assert AdminUser.query.count() == 0


def test_create_app_seeds_admin_once():
    app = create_app(SeededConfig)
    with app.app_context():
        rows = AdminUser.query.all()
        assert [r.email for r in rows] == ['owner@shop.test']
        assert rows[0].full_name == 'Shop Owner'

    client = app.test_client()
    assert login(client, 'owner@shop.test', 'owner-pass').status_code == 200
    assert client.get('/admin').status_code == 200
    with app.app_context():
        db.drop_all()


def test_change_password_service(app_context, admin):
    with pytest.raises(InvalidCredentials):
        change_password(admin.id, 'wrong', 'new-password')
    with pytest.raises(ValidationError):
        change_password(admin.id, ADMIN_PASSWORD, 'short')

    change_password(admin.id, ADMIN_PASSWORD, 'new-password')
    assert authenticate(ADMIN_EMAIL, 'new-password').id == admin.id


def test_change_password_for_inactive_admin(app_context, admin):
    set_admin_status(admin.id, False)
    with pytest.raises(InvalidCredentials):
        change_password(admin.id, ADMIN_PASSWORD, 'new-password')


def test_set_status_unknown_admin(app_context):
    assert set_admin_status(12345, False) is False
