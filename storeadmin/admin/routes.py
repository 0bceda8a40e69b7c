"""
Admin Routes

Session-based administrator login backed by the admin_user table.
"""

from flask import current_app, g, jsonify, redirect, render_template, request, session, url_for

from storeadmin.admin import admin_bp
from storeadmin.admin.guard import admin_required, session_store, session_token
from storeadmin.models import AdministratorRecord, TaxClass
from storeadmin.services import authenticate, authorize, change_password


def _payload():
    """JSON body if there is one, form fields otherwise."""
    data = request.get_json(silent=True)
    if isinstance(data, dict):
        return data
    return request.form


@admin_bp.route('/login')
def login_page():
    """Admin login page.

    An already-authenticated administrator is sent on to the dashboard, but
    only after the session has been re-validated. Redirecting on cookie
    presence alone would bounce a stale session between this page and the
    guard forever.
    """
    outcome = authorize(session_store(), session_token(), url_for('admin.login_page'))
    if isinstance(outcome, AdministratorRecord):
        return redirect(url_for('admin.dashboard'))
    return render_template('admin/login.html', login_api=url_for('admin.login'))


@admin_bp.route('/user/login', methods=['POST'])
def login():
    """Credential submission. Sets the session cookie on success."""
    payload = _payload()
    authenticate(payload.get('email', ''), payload.get('password', ''), session=session)
    return jsonify({'data': {'redirectUrl': url_for('admin.dashboard')}})


@admin_bp.route('/logout')
def logout():
    """Admin logout - destroys the server-side session."""
    session.clear()
    return redirect(url_for('admin.login_page'))


@admin_bp.route('')
@admin_required
def dashboard():
    """Admin dashboard."""
    total_tax_classes = TaxClass.query.count()
    return render_template('admin/dashboard.html',
                           admin=g.admin_user,
                           total_tax_classes=total_tax_classes,
                           logout_url=url_for('admin.logout'))


@admin_bp.route('/user/me')
@admin_required
def current_admin():
    """The administrator the server sees, so the UI renders the same state."""
    return jsonify({'data': g.admin_user.to_dict()})


@admin_bp.route('/user/password', methods=['POST'])
@admin_required
def update_password():
    payload = _payload()
    change_password(g.admin_user.id,
                    payload.get('currentPassword', ''),
                    payload.get('newPassword', ''),
                    min_password_length=current_app.config['MIN_PASSWORD_LENGTH'])
    return jsonify({'data': {'message': 'Password updated successfully.'}})
