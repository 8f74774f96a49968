"""Authentication routes."""

from flask import Blueprint, jsonify
from flask_login import login_user, logout_user, login_required, current_user
from flask_wtf.csrf import generate_csrf
from banana_market.extensions import db
from banana_market.exceptions import UnauthorizedException, ForbiddenException
from banana_market.forms.auth import LoginForm, RegistrationForm
from banana_market.models import User, Profile, UserRole, Role

auth_bp = Blueprint('auth', __name__)


@auth_bp.route('/csrf-token')
def csrf_token():
    """Issue a CSRF token for the X-CSRFToken header."""
    return jsonify({'csrf_token': generate_csrf()})


@auth_bp.route('/register', methods=['POST'])
def register():
    """Create an account with its profile and the default user role."""
    form = RegistrationForm().validate_or_raise()

    user = User(email=form.email.data.strip().lower())
    user.set_password(form.password.data)
    db.session.add(user)
    db.session.add(Profile(user=user, full_name=form.full_name.data.strip() or 'User'))
    db.session.add(UserRole(user=user, role=Role.USER))
    db.session.commit()

    return jsonify({
        'success': True,
        'message': 'Account created! Please sign in.',
        'user': user.to_dict()
    }), 201


@auth_bp.route('/login', methods=['POST'])
def login():
    """User login."""
    form = LoginForm().validate_or_raise()
    user = User.query.filter_by(email=form.email.data.strip().lower()).first()

    if user is None or not user.check_password(form.password.data):
        raise UnauthorizedException('Invalid email or password.')
    if not user.is_active:
        raise ForbiddenException('Your account has been deactivated. Please contact support.')

    login_user(user, remember=form.remember.data)
    return jsonify({
        'success': True,
        'message': f'Welcome back, {user.display_name}!',
        'user': user.to_dict()
    })


@auth_bp.route('/logout', methods=['POST'])
@login_required
def logout():
    """User logout."""
    logout_user()
    return jsonify({'success': True, 'message': 'You have been logged out.'})


@auth_bp.route('/me')
@login_required
def me():
    """Current user with roles and profiles."""
    data = current_user.to_dict()
    farm = current_user.farm_profile
    data['farm_profile'] = farm.to_dict() if farm else None
    return jsonify({'success': True, 'user': data})
