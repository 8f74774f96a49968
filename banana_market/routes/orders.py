"""Buyer order routes."""

from flask import Blueprint, jsonify
from flask_login import login_required, current_user
from banana_market.extensions import db
from banana_market.forms.market import CancelForm, ReviewForm
from banana_market.models import Order, OrderStatus
from banana_market.services import orders as order_service

orders_bp = Blueprint('orders', __name__)


@orders_bp.route('/')
@login_required
def my_orders():
    """Buyer's orders grouped by where they are in the lifecycle."""
    orders = Order.query.filter_by(user_id=current_user.id).order_by(
        Order.created_at.desc()
    ).all()

    buckets = {
        'pending': [],
        'confirmed': [],
        'shipped': [],
        'delivered': [],
        'history': [],
    }
    for order in orders:
        if order.status in OrderStatus.TERMINAL:
            buckets['history'].append(order)
        else:
            buckets[order.status].append(order)

    data = {}
    for name, items in buckets.items():
        entries = []
        for order in items:
            entry = order.to_dict()
            if name == 'pending' and order.reservation is not None:
                entry['reservation'] = order.reservation.to_dict()
            entries.append(entry)
        data[name] = entries

    return jsonify({'orders': data})


@orders_bp.route('/<int:order_id>')
@login_required
def order_detail(order_id):
    """Order detail for the buyer."""
    order = order_service.get_buyer_order(current_user, order_id)
    data = order.to_dict()
    data['review'] = order.review.to_dict() if order.review else None
    data['reservation'] = order.reservation.to_dict() if order.reservation else None
    return jsonify({'order': data})


@orders_bp.route('/<int:order_id>/receive', methods=['POST'])
@login_required
def confirm_received(order_id):
    """Buyer confirms the shipment arrived."""
    order = order_service.get_buyer_order(current_user, order_id)
    order_service.mark_delivered(current_user, order.id)
    db.session.commit()
    return jsonify({'success': True, 'message': 'Receipt confirmed', 'order': order.to_dict()})


@orders_bp.route('/<int:order_id>/cancel', methods=['POST'])
@login_required
def cancel_order(order_id):
    """Buyer cancels an order that has not shipped yet."""
    form = CancelForm().validate_or_raise()
    order = order_service.get_buyer_order(current_user, order_id)
    order_service.cancel_order(current_user, order.id, form.reason.data)
    db.session.commit()
    return jsonify({'success': True, 'message': 'Order cancelled', 'order': order.to_dict()})


@orders_bp.route('/<int:order_id>/review', methods=['POST'])
@login_required
def write_review(order_id):
    """Review a delivered order."""
    form = ReviewForm().validate_or_raise()
    review = order_service.submit_review(
        current_user, order_id, form.rating.data, form.comment.data or None
    )
    db.session.commit()
    return jsonify({'success': True, 'message': 'Thank you for your review!', 'review': review.to_dict()}), 201
