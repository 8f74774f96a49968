"""Role-based access decorators."""

from functools import wraps
from flask import jsonify
from flask_login import current_user


def farm_required(f):
    """Decorator to require farm role with a farm profile."""
    @wraps(f)
    def decorated_function(*args, **kwargs):
        if not current_user.is_authenticated:
            return jsonify({'success': False, 'message': 'Authentication required'}), 401
        if not current_user.is_farm():
            return jsonify({'success': False, 'message': 'Access denied. Farm account required.'}), 403
        if not current_user.farm_profile:
            return jsonify({'success': False, 'message': 'Farm profile not found'}), 403
        return f(*args, **kwargs)
    return decorated_function


def admin_required(f):
    """Decorator to require admin role."""
    @wraps(f)
    def decorated_function(*args, **kwargs):
        if not current_user.is_authenticated:
            return jsonify({'success': False, 'message': 'Authentication required'}), 401
        if not current_user.is_admin():
            return jsonify({'success': False, 'message': 'Access denied. Admin privileges required.'}), 403
        return f(*args, **kwargs)
    return decorated_function
