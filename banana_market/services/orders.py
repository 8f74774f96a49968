"""Order lifecycle: reservations, status transitions, and reviews.

Every function takes the acting user explicitly and leaves committing to
the caller, so a route (or a sweep job) decides the transaction boundary.

Lifecycle::

    pending -> confirmed -> shipped -> delivered -> reviewed
    pending/confirmed -> cancelled
"""

import logging
from datetime import datetime, timedelta
from decimal import Decimal
from flask import current_app
from banana_market.extensions import db
from banana_market.exceptions import (
    BusinessRuleException,
    ConflictException,
    ForbiddenException,
    NotFoundException,
    ValidationException,
)
from banana_market.models import (
    Notification,
    NotificationType,
    Order,
    OrderStatus,
    Product,
    Reservation,
    Review,
)

logger = logging.getLogger(__name__)

VALID_TRANSITIONS = {
    OrderStatus.PENDING: (OrderStatus.CONFIRMED, OrderStatus.CANCELLED),
    OrderStatus.CONFIRMED: (OrderStatus.SHIPPED, OrderStatus.CANCELLED),
    OrderStatus.SHIPPED: (OrderStatus.DELIVERED,),
    OrderStatus.DELIVERED: (OrderStatus.REVIEWED,),
}


def can_transition(current_status, new_status):
    return new_status in VALID_TRANSITIONS.get(current_status, ())


def _transition(order, new_status):
    if not can_transition(order.status, new_status):
        raise BusinessRuleException(
            f"Cannot move order from '{order.status}' to '{new_status}'."
        )
    logger.info('Order %s: %s -> %s', order.id, order.status, new_status)
    order.status = new_status


# --- Lookups ---
def get_buyer_order(buyer, order_id):
    """Fetch an order owned by the buyer."""
    order = Order.query.filter_by(id=order_id, user_id=buyer.id).first()
    if order is None:
        raise NotFoundException('Order not found')
    return order


def get_farm_order(farm_user, order_id):
    """Fetch an order placed with the farm."""
    order = Order.query.filter_by(id=order_id, farm_id=farm_user.id).first()
    if order is None:
        raise NotFoundException('Order not found')
    return order


def get_participant_order(user, order_id):
    """Fetch an order the user is either buyer or farm of."""
    order = Order.query.get(order_id)
    if order is None:
        raise NotFoundException('Order not found')
    if user.id not in (order.user_id, order.farm_id) and not user.is_admin():
        raise ForbiddenException('Access denied')
    return order


# --- Reservations ---
def reserve_product(buyer, product_id, quantity, delivery_address,
                    delivery_notes=None, now=None):
    """Hold stock for a buyer and open a pending order.

    The product row is locked for the duration of the transaction so two
    buyers cannot both take the last units.
    """
    now = now or datetime.utcnow()

    if quantity is None or quantity < 1:
        raise ValidationException('Quantity must be at least 1')
    delivery_address = (delivery_address or '').strip()
    if not delivery_address:
        raise ValidationException('Delivery address is required')

    product = (
        Product.query
        .filter_by(id=product_id, is_active=True)
        .with_for_update()
        .first()
    )
    if product is None:
        raise NotFoundException('Product not found')
    if product.farm_id == buyer.id:
        raise BusinessRuleException('You cannot reserve your own product')
    if not product.reduce_stock(quantity):
        raise BusinessRuleException('Requested quantity exceeds available stock')

    total_price = (Decimal(product.price_per_unit) * quantity).quantize(Decimal('0.01'))

    order = Order(
        user_id=buyer.id,
        farm_id=product.farm_id,
        product_id=product.id,
        quantity=quantity,
        total_price=total_price,
        status=OrderStatus.PENDING,
        delivery_address=delivery_address,
        delivery_notes=delivery_notes,
        created_at=now,
    )
    db.session.add(order)
    db.session.flush()

    window = timedelta(hours=current_app.config['CONFIRMATION_WINDOW_HOURS'])
    order.reservation = Reservation(
        user_id=buyer.id,
        product_id=product.id,
        quantity=quantity,
        status=Reservation.HELD,
        expires_at=now + window,
        created_at=now,
    )

    db.session.add(Notification(
        user_id=product.farm_id,
        title='New Order',
        message=f'{buyer.display_name} reserved {quantity} {product.unit} of {product.name}.',
        type=NotificationType.NEW_ORDER,
        related_order_id=order.id,
    ))
    logger.info('Reserved %s x product %s for user %s (order %s)',
                quantity, product.id, buyer.id, order.id)
    return order


def release_reservation(order):
    """Return held stock to the product. Safe to call more than once."""
    reservation = order.reservation
    if reservation is None or reservation.status == Reservation.RELEASED:
        return False
    reservation.status = Reservation.RELEASED
    order.product.restore_stock(reservation.quantity)
    return True


# --- Transitions ---
def confirm_reservation(farm_user, order_id, now=None):
    """Farm accepts a pending order."""
    order = get_farm_order(farm_user, order_id)
    _transition(order, OrderStatus.CONFIRMED)
    order.confirmed_at = now or datetime.utcnow()
    if order.reservation is not None:
        order.reservation.status = Reservation.CONFIRMED

    db.session.add(Notification.create_order_notification(
        order.user_id, order.id, OrderStatus.CONFIRMED
    ))
    return order


def ship_order(farm_user, order_id, tracking_number, carrier=None, now=None):
    """Farm hands a confirmed order to a carrier."""
    tracking_number = (tracking_number or '').strip()
    if not tracking_number:
        raise ValidationException('Please enter a tracking number')

    order = get_farm_order(farm_user, order_id)
    _transition(order, OrderStatus.SHIPPED)
    order.shipped_at = now or datetime.utcnow()
    order.tracking_number = tracking_number
    order.carrier = (carrier or '').strip() or None

    notification = Notification.create_order_notification(
        order.user_id, order.id, OrderStatus.SHIPPED
    )
    notification.message = f'Your order is on its way! Tracking number: {tracking_number}'
    db.session.add(notification)
    return order


def mark_delivered(actor, order_id, now=None):
    """Buyer confirms receipt, or the farm records the delivery."""
    order = get_participant_order(actor, order_id)
    if actor.id not in (order.user_id, order.farm_id):
        raise ForbiddenException('Only the buyer or the farm can complete delivery')

    _transition(order, OrderStatus.DELIVERED)
    order.delivered_at = now or datetime.utcnow()

    farm_profile = order.farm.farm_profile
    if farm_profile is not None:
        farm_profile.record_sale(Decimal(order.total_price))

    if actor.id == order.user_id:
        db.session.add(Notification(
            user_id=order.farm_id,
            title='Order Delivered',
            message='The buyer confirmed receiving the order.',
            type=NotificationType.ORDER_DELIVERED,
            related_order_id=order.id,
        ))
    else:
        db.session.add(Notification.create_order_notification(
            order.user_id, order.id, OrderStatus.DELIVERED
        ))
    return order


def apply_cancellation(order, reason, now=None):
    """Cancel an order in memory and release its stock hold."""
    reason = (reason or '').strip()
    if not reason:
        raise ValidationException('A cancellation reason is required')
    _transition(order, OrderStatus.CANCELLED)
    order.cancelled_at = now or datetime.utcnow()
    order.cancellation_reason = reason
    release_reservation(order)
    return order


def cancel_order(actor, order_id, reason=None, now=None):
    """Buyer withdraws, or the farm declines, an order not yet shipped."""
    order = get_participant_order(actor, order_id)

    if actor.id == order.user_id:
        apply_cancellation(order, reason or 'Buyer requested cancellation', now)
        db.session.add(Notification(
            user_id=order.farm_id,
            title='Order Cancelled',
            message=f'The buyer cancelled the order: {order.cancellation_reason}',
            type=NotificationType.ORDER_CANCELLED,
            related_order_id=order.id,
        ))
    elif actor.id == order.farm_id:
        apply_cancellation(order, reason or 'Farm declined the order', now)
        notification = Notification.create_order_notification(
            order.user_id, order.id, OrderStatus.CANCELLED
        )
        notification.message = f'Your order has been cancelled: {order.cancellation_reason}'
        db.session.add(notification)
    else:
        raise ForbiddenException('Only the buyer or the farm can cancel this order')
    return order


# --- Reviews ---
def submit_review(buyer, order_id, rating, comment=None, now=None):
    """Review a delivered order. One review per order."""
    order = get_buyer_order(buyer, order_id)

    if Review.query.filter_by(order_id=order.id).first() is not None:
        raise ConflictException('This order has already been reviewed')
    if rating is None or not 1 <= rating <= 5:
        raise ValidationException('Rating must be between 1 and 5')

    _transition(order, OrderStatus.REVIEWED)
    order.reviewed_at = now or datetime.utcnow()

    review = Review(
        order_id=order.id,
        user_id=buyer.id,
        farm_id=order.farm_id,
        rating=rating,
        comment=comment,
    )
    db.session.add(review)
    db.session.flush()

    farm_profile = order.farm.farm_profile
    if farm_profile is not None:
        farm_profile.update_rating()

    db.session.add(Notification(
        user_id=order.farm_id,
        title='New Review',
        message=f'{buyer.display_name} rated your order {rating}/5.',
        type=NotificationType.ORDER_REVIEWED,
        related_order_id=order.id,
    ))
    return review
