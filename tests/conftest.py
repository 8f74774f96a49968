"""Pytest fixtures: app on in-memory SQLite, users, products, orders."""

from datetime import date, datetime, timedelta
from decimal import Decimal

import pytest
from flask import g

from banana_market import create_app
from banana_market.extensions import db as _db
from banana_market.models import (
    FarmProfile,
    Order,
    OrderStatus,
    Product,
    Profile,
    Reservation,
    Role,
    User,
    UserRole,
)


@pytest.fixture
def app():
    app = create_app('testing')
    with app.app_context():
        _db.create_all()
        yield app
        _db.session.remove()
        _db.drop_all()


@pytest.fixture
def db(app):
    return _db


@pytest.fixture
def client(app):
    return app.test_client()


def _create_user(email, full_name, roles, address=None):
    user = User(email=email)
    user.set_password('secret123')
    _db.session.add(user)
    _db.session.add(Profile(user=user, full_name=full_name, address=address))
    for role in roles:
        _db.session.add(UserRole(user=user, role=role))
    _db.session.commit()
    return user


@pytest.fixture
def buyer(app):
    return _create_user('buyer@example.com', 'Niran Buyer', [Role.USER],
                        address='99 Sukhumvit Rd, Bangkok')


@pytest.fixture
def farm_user(app):
    user = _create_user('farm@example.com', 'Somchai Farm', [Role.USER, Role.FARM])
    _db.session.add(FarmProfile(user_id=user.id, farm_name='Suan Kluay', farm_location='Chanthaburi'))
    _db.session.commit()
    return user


@pytest.fixture
def other_farm_user(app):
    user = _create_user('farm2@example.com', 'Malee Farm', [Role.USER, Role.FARM])
    _db.session.add(FarmProfile(user_id=user.id, farm_name='Baan Kluay', farm_location='Nakhon Pathom'))
    _db.session.commit()
    return user


@pytest.fixture
def admin(app):
    return _create_user('admin@example.com', 'Admin User', [Role.USER, Role.ADMIN])


@pytest.fixture
def make_product(farm_user):
    def _make(harvest_date=None, available_quantity=100, price='45.00', **kwargs):
        product = Product(
            farm_id=kwargs.pop('farm_id', farm_user.id),
            name=kwargs.pop('name', 'Gros Michel bunch'),
            product_type=kwargs.pop('product_type', 'fruit'),
            price_per_unit=Decimal(price),
            available_quantity=available_quantity,
            harvest_date=harvest_date or date.today(),
            **kwargs
        )
        _db.session.add(product)
        _db.session.commit()
        return product
    return _make


@pytest.fixture
def product(make_product):
    return make_product()


@pytest.fixture
def make_order(buyer):
    """Create an order with its stock hold, bypassing the reservation flow."""
    def _make(product, status=OrderStatus.PENDING, created_at=None, quantity=2, user=None):
        user = user or buyer
        created_at = created_at or datetime.utcnow()
        order = Order(
            user_id=user.id,
            farm_id=product.farm_id,
            product_id=product.id,
            quantity=quantity,
            total_price=Decimal(product.price_per_unit) * quantity,
            status=status,
            delivery_address='99 Sukhumvit Rd, Bangkok',
            created_at=created_at,
        )
        if status in (OrderStatus.CONFIRMED, OrderStatus.SHIPPED, OrderStatus.DELIVERED):
            order.confirmed_at = created_at
        if status in (OrderStatus.SHIPPED, OrderStatus.DELIVERED):
            order.shipped_at = created_at
            order.tracking_number = 'TH123456789'
        if status == OrderStatus.DELIVERED:
            order.delivered_at = created_at
        hold_status = Reservation.HELD if status == OrderStatus.PENDING else Reservation.CONFIRMED
        order.reservation = Reservation(
            user_id=user.id,
            product_id=product.id,
            quantity=quantity,
            status=hold_status,
            expires_at=created_at + timedelta(hours=48),
            created_at=created_at,
        )
        product.available_quantity -= quantity
        _db.session.add(order)
        _db.session.commit()
        return order
    return _make


@pytest.fixture
def login(client):
    def _login(user):
        with client.session_transaction() as sess:
            sess['_user_id'] = str(user.id)
            sess['_fresh'] = True
        # Requests share the fixture's app context, so drop the cached user
        g.pop('_login_user', None)
        return client
    return _login
