"""
Authentication Routes

Handles user registration, login/logout and account deletion.
"""

from flask import Blueprint, jsonify, session

from webapp.routes import json_body, require_fields
from webapp.services.auth_service import (
    LoginResult,
    RegistrationResult,
    register_user,
    login,
    delete_user,
)

auth_bp = Blueprint('auth', __name__, url_prefix='/auth')

_REGISTRATION_STATUS = {
    RegistrationResult.SUCCESS: (201, "User registered successfully"),
    RegistrationResult.USERNAME_TAKEN: (409, "Username already taken"),
    RegistrationResult.WEAK_PASSWORD: (
        400,
        "Password must contain at least one uppercase letter, one lowercase letter, and one number.",
    ),
}

_LOGIN_STATUS = {
    LoginResult.SUCCESS: (200, "Login successful"),
    LoginResult.INVALID_CREDENTIALS: (401, "Invalid username or password"),
    LoginResult.LOCKED: (423, "Account temporarily locked. Please try again shortly."),
}


@auth_bp.route('/signup', methods=['POST'])
def signup():
    payload = json_body()
    require_fields(payload, 'username', 'password')
    result = register_user(payload['username'], payload['password'])
    status, message = _REGISTRATION_STATUS[result]
    return jsonify({'result': result.value, 'message': message}), status


@auth_bp.route('/login', methods=['POST'])
def login_route():
    payload = json_body()
    require_fields(payload, 'username', 'password')
    username = payload['username']
    result = login(username, payload['password'])
    if result is LoginResult.SUCCESS:
        session['user'] = username
    status, message = _LOGIN_STATUS[result]
    return jsonify({'result': result.value, 'message': message}), status


@auth_bp.route('/logout', methods=['POST'])
def logout():
    session.clear()
    return jsonify({'message': "Logged out successfully"})


@auth_bp.route('/delete', methods=['DELETE'])
def delete_account():
    payload = json_body()
    require_fields(payload, 'username')
    username = payload['username']
    if not delete_user(username):
        return jsonify({'error': 'not_found', 'message': "User deletion failed"}), 404
    if session.get('user') == username:
        session.clear()
    return jsonify({'message': "User deleted successfully"})
