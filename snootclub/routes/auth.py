"""
Member identity routes - registration, phone login, sessions.

Members authenticate with a bearer session token obtained through a login
code texted to their phone. Administrators present the shared PIN in the
X-Admin-Pin header (or ?pin=) on every request.
"""

import re
from functools import wraps
from flask import Blueprint, jsonify, g, request

from snootclub.errors import Unauthorized
from snootclub.schemas import (
    AdminLoginRequest, AdminPinRequest, RegisterRequest, RequestCodeRequest, VerifyCodeRequest, parse_body,
)
from snootclub.services import directory, sessions

auth_bp = Blueprint('auth', __name__)


# ============== AUTHENTICATION HELPERS ==============

def bearer_token():
    header = request.headers.get('Authorization', '')
    return re.sub(r'^Bearer\s+', '', header, flags=re.IGNORECASE).strip()


def presented_admin_pin():
    return (request.headers.get('X-Admin-Pin') or request.args.get('pin') or '').strip()


def _load_member():
    token = bearer_token()
    if not token:
        raise Unauthorized('auth required')
    member = sessions.resolve_session(token)
    if not member:
        raise Unauthorized('invalid session')
    g.member = member
    g.session_token = token
    return member


def member_required(f):
    """Decorator to require a valid session of an approved member."""
    @wraps(f)
    def decorated_function(*args, **kwargs):
        _load_member()
        return f(*args, **kwargs)
    return decorated_function


def admin_required(f):
    """Decorator to require the admin PIN. A member session is not enough."""
    @wraps(f)
    def decorated_function(*args, **kwargs):
        if not sessions.is_admin_pin(presented_admin_pin()):
            raise Unauthorized('admin pin required')
        return f(*args, **kwargs)
    return decorated_function


def member_or_admin_required(f):
    """Decorator accepting either the admin PIN or a member session."""
    @wraps(f)
    def decorated_function(*args, **kwargs):
        if sessions.is_admin_pin(presented_admin_pin()):
            g.member = None
            g.actor = 'admin'
        else:
            _load_member()
            g.actor = 'member'
        return f(*args, **kwargs)
    return decorated_function


# ============== ADMIN AUTH ==============

@auth_bp.route('/auth/admin', methods=['POST'])
def admin_pin_check():
    """Let the admin page check a PIN before storing it."""
    body = parse_body(AdminPinRequest)
    return jsonify({'ok': sessions.is_admin_pin(body.pin)})


@auth_bp.route('/auth/admin-login', methods=['POST'])
def admin_login():
    """Stricter admin login: PIN plus the phone of an approved admin member."""
    body = parse_body(AdminLoginRequest)
    member = sessions.admin_login(body.phone, body.pin)
    return jsonify({'ok': True, 'member': {**member.public_dict(), 'isAdmin': True}})


# ============== MEMBER REGISTRATION & LOGIN ==============

@auth_bp.route('/register', methods=['POST'])
def register():
    body = parse_body(RegisterRequest)
    result = directory.register_or_touch(body.phone, name=body.name, email=body.email,
                                         push_token=body.expo_token)
    return jsonify({'ok': True, 'status': result['status'], 'memberId': result['member_id']})


@auth_bp.route('/auth/request-code', methods=['POST'])
def request_code():
    """Text a login code to an approved member."""
    body = parse_body(RequestCodeRequest)
    result = sessions.request_code(body.phone)
    response = {'ok': True, 'sent': result['sent']}
    if 'demo_code' in result:
        response['demoCode'] = result['demo_code']
    return jsonify(response)


@auth_bp.route('/auth/verify-code', methods=['POST'])
def verify_code():
    """Exchange a login code for a session token."""
    body = parse_body(VerifyCodeRequest)
    result = sessions.verify_code(body.phone, body.code, push_token=body.expo_token)
    return jsonify({'ok': True, 'token': result['token'], 'member': result['member']})


@auth_bp.route('/auth/logout', methods=['POST'])
@member_required
def logout():
    sessions.logout(g.session_token)
    return jsonify({'ok': True})


@auth_bp.route('/me')
@member_required
def me():
    member = g.member
    return jsonify({**member.public_dict(), 'status': member.status, 'isAdmin': member.is_admin})
