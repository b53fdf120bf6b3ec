from flask import Blueprint, current_app, jsonify, request

from jobboard.auth import service
from jobboard.exceptions import ValidationError
from jobboard.models import Section
from jobboard.simple_logger import get_logger

logger = get_logger("auth")

auth_bp = Blueprint('auth', __name__, url_prefix='/api/auth')


def _json_body():
    data = request.get_json(silent=True)
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ValidationError("Request body must be a JSON object.")
    return data


def _required_fields(data, *fields):
    values = []
    for field in fields:
        value = data.get(field)
        if not isinstance(value, str) or not value:
            return None
        values.append(value)
    return values


@auth_bp.route('/signup', methods=['POST'])
def signup():
    data = _json_body()
    values = _required_fields(data, 'username', 'password', 'section')
    if values is None:
        raise ValidationError("Username, password, and section are required.")
    username, password, section = values

    # Reject a bad section before touching the database
    parsed_section = Section.parse(section)

    account = service.signup(username, password, parsed_section)
    return jsonify({
        'message': f"Signup successful for user: {account.username}",
        **account.to_dict(),
    }), 201


@auth_bp.route('/login', methods=['POST'])
def login():
    data = _json_body()
    values = _required_fields(data, 'username', 'password')
    if values is None:
        raise ValidationError("Username and password are required.")
    username, password = values

    account = service.login(username, password)
    token = current_app.extensions['token_issuer'].issue(account.username)
    return jsonify({
        'message': f"Login successful for user: {account.username}",
        **account.to_dict(),
        'token': token,
    }), 200


@auth_bp.route('/logout', methods=['POST'])
def logout():
    data = _json_body()
    values = _required_fields(data, 'username')
    if values is None:
        raise ValidationError("Username is required for logout.")
    username, = values

    service.logout(username)
    return jsonify({'message': f"Logout successful for user: {username}"}), 200
