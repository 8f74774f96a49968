"""Tests for the scheduled order sweeps."""

import logging
from datetime import date, datetime, timedelta

import pytest

from banana_market.models import (
    Notification,
    NotificationType,
    Order,
    OrderStatus,
    Product,
    Reservation,
)
from banana_market.services import sweeps


NOW = datetime(2024, 6, 15, 12, 0, 0)


def _reload(db, order):
    db.session.expire_all()
    return db.session.get(Order, order.id)


# ---------------------------------------------------------------------------
# Unconfirmed orders
# ---------------------------------------------------------------------------

def test_stale_pending_order_is_cancelled(db, buyer, farm_user, product, make_order):
    order = make_order(product, created_at=NOW - timedelta(hours=49), quantity=3)

    result = sweeps.cancel_unconfirmed_orders(now=NOW)

    assert result['cancelled'] == 1
    assert result['errors'] == 0
    assert result['message'] == 'Cancelled 1 unconfirmed orders'

    order = _reload(db, order)
    assert order.status == OrderStatus.CANCELLED
    assert order.cancelled_at == NOW
    assert order.cancellation_reason == 'Farm did not confirm within 48 hours'
    assert order.reservation.status == Reservation.RELEASED
    assert db.session.get(Product, product.id).available_quantity == 100

    notes = Notification.query.filter_by(related_order_id=order.id).all()
    by_user = {n.user_id: n for n in notes}
    assert len(notes) == 2
    assert by_user[buyer.id].title == 'Order Cancelled'
    assert by_user[buyer.id].type == NotificationType.ORDER_CANCELLED
    assert by_user[farm_user.id].title == 'Missed Confirmation'
    assert by_user[farm_user.id].type == NotificationType.CONFIRMATION_MISSED


def test_recent_and_confirmed_orders_are_left_alone(db, product, make_order):
    recent = make_order(product, created_at=NOW - timedelta(hours=47))
    confirmed = make_order(product, status=OrderStatus.CONFIRMED,
                           created_at=NOW - timedelta(hours=72))

    result = sweeps.cancel_unconfirmed_orders(now=NOW)

    assert result['cancelled'] == 0
    assert result['message'] == 'Cancelled 0 unconfirmed orders'
    assert _reload(db, recent).status == OrderStatus.PENDING
    assert _reload(db, confirmed).status == OrderStatus.CONFIRMED
    assert Notification.query.count() == 0


def test_unconfirmed_sweep_is_idempotent(db, product, make_order):
    make_order(product, created_at=NOW - timedelta(hours=60))

    first = sweeps.cancel_unconfirmed_orders(now=NOW)
    second = sweeps.cancel_unconfirmed_orders(now=NOW)

    assert first['cancelled'] == 1
    assert second['checked'] == 0
    assert second['cancelled'] == 0
    assert Notification.query.count() == 2


def test_window_can_be_overridden(db, product, make_order):
    order = make_order(product, created_at=NOW - timedelta(hours=13))

    result = sweeps.cancel_unconfirmed_orders(now=NOW, window_hours=12)

    assert result['cancelled'] == 1
    assert _reload(db, order).cancellation_reason == 'Farm did not confirm within 12 hours'


def test_failing_row_does_not_stop_the_sweep(db, monkeypatch, caplog, product, make_order):
    broken = make_order(product, created_at=NOW - timedelta(hours=80))
    healthy = make_order(product, created_at=NOW - timedelta(hours=70))

    broken_id = broken.id
    real_release = sweeps.release_reservation

    def flaky_release(order):
        if order.id == broken_id:
            raise RuntimeError('reservation row locked')
        return real_release(order)

    monkeypatch.setattr(sweeps, 'release_reservation', flaky_release)

    with caplog.at_level(logging.ERROR, logger='banana_market.services.sweeps'):
        result = sweeps.cancel_unconfirmed_orders(now=NOW)

    assert result['checked'] == 2
    assert result['cancelled'] == 1
    assert result['errors'] == 1
    assert f'Error cancelling order {broken_id}' in caplog.text

    assert _reload(db, broken).status == OrderStatus.PENDING
    assert Notification.query.filter_by(related_order_id=broken_id).count() == 0
    assert _reload(db, healthy).status == OrderStatus.CANCELLED
    assert Notification.query.filter_by(related_order_id=healthy.id).count() == 2


# ---------------------------------------------------------------------------
# Post-harvest orders
# ---------------------------------------------------------------------------

def test_post_harvest_orders_are_cancelled(db, buyer, farm_user, make_product, make_order):
    product = make_product(harvest_date=NOW.date() - timedelta(days=8))
    pending = make_order(product, created_at=NOW - timedelta(hours=1))
    confirmed = make_order(product, status=OrderStatus.CONFIRMED,
                           created_at=NOW - timedelta(days=3))
    shipped = make_order(product, status=OrderStatus.SHIPPED,
                         created_at=NOW - timedelta(days=3))

    result = sweeps.cancel_post_harvest_orders(now=NOW)

    assert result['checked'] == 2
    assert result['cancelled'] == 2
    assert result['message'] == 'Cancelled 2 orders'

    for order in (pending, confirmed):
        order = _reload(db, order)
        assert order.status == OrderStatus.CANCELLED
        assert order.cancellation_reason == 'Auto-cancelled: Exceeded 7 days after harvest date'
        notes = Notification.query.filter_by(related_order_id=order.id).all()
        assert [n.user_id for n in notes] == [buyer.id]
        assert notes[0].type == NotificationType.ORDER_CANCELLED

    assert _reload(db, shipped).status == OrderStatus.SHIPPED
    assert Notification.query.filter_by(user_id=farm_user.id).count() == 0


def test_harvest_exactly_at_window_is_kept(db, make_product, make_order):
    product = make_product(harvest_date=NOW.date() - timedelta(days=7))
    order = make_order(product, created_at=NOW - timedelta(hours=1))

    result = sweeps.cancel_post_harvest_orders(now=NOW)

    assert result['cancelled'] == 0
    assert _reload(db, order).status == OrderStatus.PENDING


def test_future_harvest_is_kept(db, make_product, make_order):
    product = make_product(harvest_date=date(2024, 7, 1))
    order = make_order(product, created_at=NOW - timedelta(hours=1))

    sweeps.cancel_post_harvest_orders(now=NOW)

    assert _reload(db, order).status == OrderStatus.PENDING


def test_post_harvest_sweep_is_idempotent(db, make_product, make_order):
    product = make_product(harvest_date=NOW.date() - timedelta(days=30))
    make_order(product, created_at=NOW - timedelta(days=1))

    sweeps.cancel_post_harvest_orders(now=NOW)
    second = sweeps.cancel_post_harvest_orders(now=NOW)

    assert second['cancelled'] == 0
    assert Notification.query.count() == 1


# ---------------------------------------------------------------------------
# Both sweeps
# ---------------------------------------------------------------------------

@pytest.mark.parametrize('status,age,harvest_age', [
    (OrderStatus.PENDING, timedelta(hours=60), timedelta(days=1)),
    (OrderStatus.DELIVERED, timedelta(days=20), timedelta(days=30)),
    (OrderStatus.REVIEWED, timedelta(days=20), timedelta(days=30)),
    (OrderStatus.CANCELLED, timedelta(days=20), timedelta(days=30)),
])
def test_orders_outside_a_sweep_predicate_are_untouched(db, make_product, make_order,
                                                       status, age, harvest_age):
    product = make_product(harvest_date=NOW.date() - harvest_age)
    order = make_order(product, status=status, created_at=NOW - age)

    harvest = sweeps.cancel_post_harvest_orders(now=NOW)

    assert harvest['checked'] == 0
    assert _reload(db, order).status == status

    if status != OrderStatus.PENDING:
        unconfirmed = sweeps.cancel_unconfirmed_orders(now=NOW)
        assert unconfirmed['checked'] == 0
        assert _reload(db, order).status == status

    assert Notification.query.count() == 0
