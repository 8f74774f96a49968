"""Scheduled sweeps that cancel orders on time-based conditions.

Each sweep fetches the eligible order ids up front and then cancels them
one by one in their own transaction. A row that fails is rolled back,
logged, and left eligible for the next run; the sweep carries on with the
remaining rows. There is no retry.
"""

import logging
from datetime import datetime, timedelta
from flask import current_app
from banana_market.extensions import db
from banana_market.models import (
    Notification,
    NotificationType,
    Order,
    OrderStatus,
    Product,
)
from banana_market.services.orders import release_reservation

logger = logging.getLogger(__name__)

UNCONFIRMED_REASON = 'Farm did not confirm within {hours} hours'
POST_HARVEST_REASON = 'Auto-cancelled: Exceeded {days} days after harvest date'


def _cancel_row(order_id, allowed_statuses, reason, now):
    """Cancel one order if it is still in an allowed status.

    The status is re-checked in the UPDATE itself, so an order cancelled by
    an overlapping run is skipped instead of notified twice.
    """
    updated = (
        Order.query
        .filter(Order.id == order_id, Order.status.in_(allowed_statuses))
        .update({
            'status': OrderStatus.CANCELLED,
            'cancelled_at': now,
            'cancellation_reason': reason,
        }, synchronize_session=False)
    )
    if not updated:
        return None
    order = db.session.get(Order, order_id)
    db.session.refresh(order)
    release_reservation(order)
    return order


def cancel_unconfirmed_orders(now=None, window_hours=None):
    """Cancel pending orders the farm left unconfirmed past the window.

    Notifies both the buyer and the farm for every cancelled order.
    """
    now = now or datetime.utcnow()
    if window_hours is None:
        window_hours = current_app.config['CONFIRMATION_WINDOW_HOURS']
    cutoff = now - timedelta(hours=window_hours)
    reason = UNCONFIRMED_REASON.format(hours=window_hours)

    stats = {'checked': 0, 'cancelled': 0, 'errors': 0}

    rows = (
        db.session.query(Order.id, Order.user_id, Order.farm_id)
        .filter(Order.status == OrderStatus.PENDING, Order.created_at < cutoff)
        .order_by(Order.created_at.asc())
        .all()
    )
    stats['checked'] = len(rows)
    logger.info('Found %d unconfirmed orders', len(rows))

    for order_id, user_id, farm_id in rows:
        try:
            order = _cancel_row(order_id, (OrderStatus.PENDING,), reason, now)
            if order is None:
                db.session.rollback()
                continue

            db.session.add(Notification(
                user_id=user_id,
                title='Order Cancelled',
                message=f'Your order was cancelled as the farm did not confirm within {window_hours} hours.',
                type=NotificationType.ORDER_CANCELLED,
                related_order_id=order_id,
            ))
            db.session.add(Notification(
                user_id=farm_id,
                title='Missed Confirmation',
                message=f'An order was auto-cancelled due to no confirmation within {window_hours} hours.',
                type=NotificationType.CONFIRMATION_MISSED,
                related_order_id=order_id,
            ))
            db.session.commit()
        except Exception:
            db.session.rollback()
            logger.exception('Error cancelling order %s', order_id)
            stats['errors'] += 1
            continue

        stats['cancelled'] += 1
        logger.info('Cancelled unconfirmed order %s', order_id)

    stats['message'] = f"Cancelled {stats['cancelled']} unconfirmed orders"
    return stats


def cancel_post_harvest_orders(now=None, window_days=None):
    """Cancel open orders whose product was harvested too long ago.

    Only the buyer is notified.
    """
    now = now or datetime.utcnow()
    if window_days is None:
        window_days = current_app.config['HARVEST_PICKUP_WINDOW_DAYS']
    cutoff_date = (now - timedelta(days=window_days)).date()
    reason = POST_HARVEST_REASON.format(days=window_days)

    stats = {'checked': 0, 'cancelled': 0, 'errors': 0}

    rows = (
        db.session.query(Order.id, Order.user_id)
        .join(Product, Order.product_id == Product.id)
        .filter(
            Order.status.in_(OrderStatus.CANCELLABLE),
            Product.harvest_date < cutoff_date,
        )
        .order_by(Order.created_at.asc())
        .all()
    )
    stats['checked'] = len(rows)
    logger.info('Found %d orders to cancel', len(rows))

    for order_id, user_id in rows:
        try:
            order = _cancel_row(order_id, OrderStatus.CANCELLABLE, reason, now)
            if order is None:
                db.session.rollback()
                continue

            db.session.add(Notification(
                user_id=user_id,
                title='Order Cancelled',
                message='Your order was automatically cancelled as it exceeded the pickup window.',
                type=NotificationType.ORDER_CANCELLED,
                related_order_id=order_id,
            ))
            db.session.commit()
        except Exception:
            db.session.rollback()
            logger.exception('Error cancelling order %s', order_id)
            stats['errors'] += 1
            continue

        stats['cancelled'] += 1
        logger.info('Cancelled order %s', order_id)

    stats['message'] = f"Cancelled {stats['cancelled']} orders"
    return stats
