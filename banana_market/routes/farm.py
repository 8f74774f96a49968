"""Farm dashboard routes."""

from datetime import datetime
from flask import Blueprint, jsonify, request
from flask_login import login_required, current_user
from sqlalchemy import func
from banana_market.extensions import db
from banana_market.exceptions import NotFoundException, ValidationException
from banana_market.forms.market import CancelForm, ProductForm, ShipForm
from banana_market.forms.profile import FarmProfileForm
from banana_market.models import Cultivar, Order, OrderStatus, Product
from banana_market.services import orders as order_service
from banana_market.utils.decorators import farm_required

farm_bp = Blueprint('farm', __name__)


@farm_bp.route('/dashboard')
@login_required
@farm_required
def dashboard():
    """Farm dashboard with overview."""
    farm = current_user.farm_profile

    total_products = Product.query.filter_by(farm_id=current_user.id).count()
    active_products = Product.query.filter_by(farm_id=current_user.id, is_active=True).count()

    status_counts = dict(
        db.session.query(Order.status, func.count(Order.id))
        .filter(Order.farm_id == current_user.id)
        .group_by(Order.status)
        .all()
    )
    orders_by_status = {status: status_counts.get(status, 0) for status in OrderStatus.ALL}

    return jsonify({
        'farm': farm.to_dict(),
        'total_products': total_products,
        'active_products': active_products,
        'total_orders': sum(orders_by_status.values()),
        'orders_by_status': orders_by_status
    })


@farm_bp.route('/profile', methods=['GET', 'PUT'])
@login_required
@farm_required
def profile():
    """Farm profile settings."""
    farm = current_user.farm_profile

    if request.method == 'PUT':
        form = FarmProfileForm().validate_or_raise()
        farm.farm_name = form.farm_name.data.strip()
        farm.farm_location = form.farm_location.data.strip()
        farm.farm_description = form.farm_description.data
        farm.farm_image_url = form.farm_image_url.data or None
        db.session.commit()
        return jsonify({'success': True, 'message': 'Farm profile updated', 'farm': farm.to_dict()})

    return jsonify({'farm': farm.to_dict()})


# --- Products ---
@farm_bp.route('/products')
@login_required
@farm_required
def products():
    """Farm's active products, newest first."""
    items = Product.query.filter_by(
        farm_id=current_user.id,
        is_active=True
    ).order_by(Product.created_at.desc()).all()
    return jsonify({'products': [p.to_dict() for p in items]})


@farm_bp.route('/products', methods=['POST'])
@login_required
@farm_required
def add_product():
    """Add new product."""
    form = ProductForm().validate_or_raise()

    cultivar_id = form.cultivar_id.data
    if cultivar_id and Cultivar.query.get(cultivar_id) is None:
        raise ValidationException('Unknown cultivar')

    product = Product(
        farm_id=current_user.id,
        cultivar_id=cultivar_id or None,
        name=form.name.data.strip(),
        description=form.description.data,
        product_type=form.product_type.data,
        price_per_unit=form.price_per_unit.data,
        available_quantity=form.available_quantity.data,
        unit=form.unit.data or 'kg',
        harvest_date=form.harvest_date.data,
        expiry_date=form.expiry_date.data,
        image_url=form.image_url.data or None,
        is_active=True
    )
    db.session.add(product)
    db.session.commit()

    return jsonify({'success': True, 'message': 'Product added successfully!', 'product': product.to_dict()}), 201


def _own_product(product_id):
    product = Product.query.filter_by(id=product_id, farm_id=current_user.id).first()
    if product is None:
        raise NotFoundException('Product not found')
    return product


@farm_bp.route('/products/<int:product_id>/toggle', methods=['POST'])
@login_required
@farm_required
def toggle_product(product_id):
    """Toggle product availability."""
    product = _own_product(product_id)
    product.is_active = not product.is_active
    db.session.commit()

    status = 'active' if product.is_active else 'inactive'
    return jsonify({'success': True, 'message': f'Product is now {status}.', 'product': product.to_dict()})


@farm_bp.route('/products/<int:product_id>', methods=['DELETE'])
@login_required
@farm_required
def delete_product(product_id):
    """Soft delete: the product stays referenced by its orders."""
    product = _own_product(product_id)
    product.is_active = False
    db.session.commit()
    return jsonify({'success': True, 'message': 'Product removed'})


# --- Orders ---
@farm_bp.route('/orders')
@login_required
@farm_required
def orders():
    """Farm orders in work buckets."""
    items = Order.query.filter_by(farm_id=current_user.id).order_by(
        Order.created_at.asc()
    ).all()

    today = datetime.utcnow().date()
    buckets = {'pending': [], 'ship_today': [], 'upcoming': [], 'shipping': [], 'done': []}
    for order in items:
        if order.status == OrderStatus.PENDING:
            buckets['pending'].append(order)
        elif order.status == OrderStatus.CONFIRMED:
            # Ships once the harvest date is reached
            if order.product.harvest_date <= today:
                buckets['ship_today'].append(order)
            else:
                buckets['upcoming'].append(order)
        elif order.status == OrderStatus.SHIPPED:
            buckets['shipping'].append(order)
        else:
            buckets['done'].append(order)

    return jsonify({
        'orders': {name: [o.to_dict() for o in group] for name, group in buckets.items()}
    })


@farm_bp.route('/orders/<int:order_id>')
@login_required
@farm_required
def order_detail(order_id):
    """Order detail for the farm."""
    order = order_service.get_farm_order(current_user, order_id)
    data = order.to_dict()
    buyer = order.buyer
    data['buyer'] = {
        'full_name': buyer.display_name,
        'phone': buyer.profile.phone if buyer.profile else None,
    }
    return jsonify({'order': data})


@farm_bp.route('/orders/<int:order_id>/confirm', methods=['POST'])
@login_required
@farm_required
def confirm_order(order_id):
    """Accept a pending reservation."""
    order = order_service.confirm_reservation(current_user, order_id)
    db.session.commit()
    return jsonify({'success': True, 'message': 'Order confirmed', 'order': order.to_dict()})


@farm_bp.route('/orders/<int:order_id>/ship', methods=['POST'])
@login_required
@farm_required
def ship_order(order_id):
    """Ship a confirmed order. Requires a tracking number."""
    form = ShipForm().validate_or_raise()
    order = order_service.ship_order(
        current_user, order_id, form.tracking_number.data, form.carrier.data
    )
    db.session.commit()
    return jsonify({'success': True, 'message': 'Order shipped', 'order': order.to_dict()})


@farm_bp.route('/orders/<int:order_id>/deliver', methods=['POST'])
@login_required
@farm_required
def deliver_order(order_id):
    """Record delivery of a shipped order."""
    order_service.get_farm_order(current_user, order_id)
    order = order_service.mark_delivered(current_user, order_id)
    db.session.commit()
    return jsonify({'success': True, 'message': 'Order delivered', 'order': order.to_dict()})


@farm_bp.route('/orders/<int:order_id>/cancel', methods=['POST'])
@login_required
@farm_required
def cancel_order(order_id):
    """Decline an order that has not shipped yet."""
    form = CancelForm().validate_or_raise()
    order_service.get_farm_order(current_user, order_id)
    order = order_service.cancel_order(current_user, order_id, form.reason.data)
    db.session.commit()
    return jsonify({'success': True, 'message': 'Order cancelled', 'order': order.to_dict()})
