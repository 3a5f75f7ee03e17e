from functools import wraps
from flask import Blueprint, request, jsonify
from flask_login import login_user, logout_user, login_required, current_user
from league.models import User

main = Blueprint('main', __name__)


def admin_required(f):
    """Reject non-admin users. Must be used after @login_required."""
    @wraps(f)
    def decorated_function(*args, **kwargs):
        if not current_user.is_authenticated:
            return jsonify({'error': 'Unauthorized'}), 401
        if not current_user.is_admin:
            return jsonify({'error': 'Forbidden: Admin access required'}), 403
        return f(*args, **kwargs)
    return decorated_function


def parse_id(value, label):
    """Coerce a JSON id to int. Booleans are refused even though int(True) == 1."""
    if value is None:
        raise ValueError(f'{label} is required')
    if isinstance(value, bool):
        raise ValueError(f'{label} must be an integer')
    try:
        return int(value)
    except (TypeError, ValueError):
        raise ValueError(f'{label} must be an integer')


@main.route('/')
def index():
    return jsonify({'message': 'Welcome to the fantasy golf league server!'})


@main.route('/login', methods=['POST', 'OPTIONS'])
def login():
    if request.method == 'OPTIONS':
        return jsonify({'status': 'ok'}), 200
    data = request.get_json(silent=True) or {}
    user = User.query.filter_by(email=data.get('email')).first()
    if user and user.check_password(data.get('password') or ''):
        login_user(user, remember=True)
        return jsonify({"success": True, "user": user.to_dict()})
    return jsonify({"success": False, "message": "Invalid credentials"}), 401


@main.route('/check_login', methods=['GET', 'OPTIONS'])
def check_login():
    if request.method == 'OPTIONS':
        return jsonify({'status': 'ok'}), 200

    @login_required
    def protected_check():
        return jsonify({"success": True, "user": current_user.to_dict()})

    return protected_check()


@main.route('/logout', methods=['POST', 'OPTIONS'])
@login_required
def logout():
    logout_user()
    return jsonify({"success": True})
