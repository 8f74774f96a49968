"""Tests for the HTTP sweep endpoints under /functions."""

from datetime import datetime, timedelta

import pytest

from banana_market.models import Order, OrderStatus
from banana_market.services import sweeps

AUTH = {'Authorization': 'Bearer test-service-key'}


@pytest.mark.parametrize('path', ['/functions/check-farm-confirm', '/functions/auto-cancel-orders'])
def test_preflight_returns_cors_headers(client, path):
    response = client.options(path, headers={
        'Origin': 'https://scheduler.example.com',
        'Access-Control-Request-Method': 'POST',
        'Access-Control-Request-Headers': 'authorization, content-type',
    })

    assert response.status_code == 200
    assert response.headers['Access-Control-Allow-Origin'] == '*'
    allowed = response.headers['Access-Control-Allow-Headers'].lower()
    assert 'authorization' in allowed
    assert 'content-type' in allowed


def test_missing_token_is_unauthorized(client):
    response = client.post('/functions/check-farm-confirm')

    assert response.status_code == 401
    assert 'error' in response.get_json()


def test_wrong_token_is_unauthorized(client):
    response = client.post('/functions/auto-cancel-orders',
                           headers={'Authorization': 'Bearer nope'})

    assert response.status_code == 401


def test_unconfigured_service_key_is_server_error(app, client):
    app.config['SERVICE_ROLE_KEY'] = None

    response = client.post('/functions/check-farm-confirm', headers=AUTH)

    assert response.status_code == 500
    assert 'error' in response.get_json()


def test_unconfigured_database_url_is_server_error(app, client):
    app.config['DATABASE_URL'] = None

    response = client.post('/functions/auto-cancel-orders', headers=AUTH)

    assert response.status_code == 500
    assert response.get_json() == {'error': 'Service credentials are not configured'}


def test_check_farm_confirm_cancels_stale_orders(db, client, product, make_order):
    order = make_order(product, created_at=datetime.utcnow() - timedelta(hours=50))

    response = client.post('/functions/check-farm-confirm', headers=AUTH)

    assert response.status_code == 200
    assert response.get_json() == {'success': True, 'message': 'Cancelled 1 unconfirmed orders'}
    db.session.expire_all()
    assert db.session.get(Order, order.id).status == OrderStatus.CANCELLED


def test_auto_cancel_orders_accepts_any_method(client, make_product, make_order):
    product = make_product(harvest_date=datetime.utcnow().date() - timedelta(days=10))
    make_order(product)

    response = client.get('/functions/auto-cancel-orders', headers=AUTH)

    assert response.status_code == 200
    assert response.get_json() == {'success': True, 'message': 'Cancelled 1 orders'}


def test_sweep_failure_returns_error_body(client, monkeypatch):
    def boom(*args, **kwargs):
        raise RuntimeError('database unavailable')

    monkeypatch.setattr(sweeps, 'cancel_unconfirmed_orders', boom)

    response = client.post('/functions/check-farm-confirm', headers=AUTH)

    assert response.status_code == 500
    assert response.get_json() == {'error': 'database unavailable'}
