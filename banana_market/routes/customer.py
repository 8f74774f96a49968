"""Buyer dashboard, profile, farm upgrade, and notification routes."""

from flask import Blueprint, jsonify, request
from flask_login import login_required, current_user
from banana_market.extensions import db
from banana_market.exceptions import ConflictException, ValidationException
from banana_market.forms.profile import FarmUpgradeRequestForm, ProfileForm
from banana_market.models import FarmUpgradeRequest, Notification, Order, Profile

customer_bp = Blueprint('customer', __name__)


@customer_bp.route('/dashboard')
@login_required
def dashboard():
    """Buyer dashboard."""
    orders = Order.query.filter_by(user_id=current_user.id).order_by(
        Order.created_at.desc()
    ).all()
    return jsonify({
        'user': current_user.to_dict(),
        'orders': [o.to_dict() for o in orders]
    })


@customer_bp.route('/profile', methods=['GET', 'PUT'])
@login_required
def profile():
    """Profile management."""
    profile = current_user.profile
    if profile is None:
        profile = Profile(user=current_user, full_name='User')
        db.session.add(profile)
        db.session.commit()

    if request.method == 'PUT':
        form = ProfileForm().validate_or_raise()
        profile.full_name = form.full_name.data.strip()
        profile.phone = form.phone.data or None
        profile.address = form.address.data or None
        profile.avatar_url = form.avatar_url.data or None
        db.session.commit()
        return jsonify({'success': True, 'message': 'Profile updated', 'profile': profile.to_dict()})

    return jsonify({'profile': profile.to_dict()})


# --- Farm upgrade ---
@customer_bp.route('/farm-upgrade-requests', methods=['GET'])
@login_required
def my_upgrade_requests():
    """The user's farm upgrade requests."""
    requests_ = FarmUpgradeRequest.query.filter_by(user_id=current_user.id).order_by(
        FarmUpgradeRequest.created_at.desc()
    ).all()
    return jsonify({'requests': [r.to_dict() for r in requests_]})


@customer_bp.route('/farm-upgrade-requests', methods=['POST'])
@login_required
def request_farm_upgrade():
    """Ask an admin to turn this account into a farm."""
    if current_user.is_farm():
        raise ConflictException('You already have a farm account')

    pending = FarmUpgradeRequest.query.filter_by(
        user_id=current_user.id,
        status=FarmUpgradeRequest.PENDING
    ).first()
    if pending:
        raise ConflictException('You already have a pending request')

    form = FarmUpgradeRequestForm().validate_or_raise()
    upgrade = FarmUpgradeRequest(
        user_id=current_user.id,
        farm_name=form.farm_name.data.strip(),
        farm_location=form.farm_location.data.strip(),
        description=form.description.data
    )
    db.session.add(upgrade)
    db.session.commit()

    return jsonify({'success': True, 'message': 'Request submitted', 'request': upgrade.to_dict()}), 201


# --- Notifications ---
@customer_bp.route('/notifications')
@login_required
def notifications():
    """User notifications, newest first."""
    limit = request.args.get('limit', 20, type=int)

    items = Notification.query.filter_by(
        user_id=current_user.id
    ).order_by(Notification.created_at.desc(), Notification.id.desc()).limit(limit).all()

    unread_count = Notification.query.filter_by(
        user_id=current_user.id,
        is_read=False
    ).count()

    return jsonify({
        'notifications': [n.to_dict() for n in items],
        'unread_count': unread_count
    })


@customer_bp.route('/notifications/mark-read', methods=['POST'])
@login_required
def mark_notifications_read():
    """Mark notifications as read."""
    data = request.get_json(silent=True) or {}
    if not isinstance(data, dict):
        raise ValidationException('Request body must be a JSON object')

    notification_ids = data.get('ids') or []
    if not isinstance(notification_ids, list) or not all(
        isinstance(i, int) and not isinstance(i, bool) for i in notification_ids
    ):
        raise ValidationException('ids must be a list of notification ids')

    if notification_ids:
        Notification.query.filter(
            Notification.id.in_(notification_ids),
            Notification.user_id == current_user.id
        ).update({'is_read': True}, synchronize_session=False)
    else:
        # Mark all as read
        Notification.query.filter_by(
            user_id=current_user.id,
            is_read=False
        ).update({'is_read': True})

    db.session.commit()
    return jsonify({'success': True})
