"""Public knowledge base and market routes."""

from flask import Blueprint, jsonify, request, current_app
from flask_login import login_required, current_user
from banana_market.extensions import db
from banana_market.exceptions import ValidationException
from banana_market.forms.market import ReserveForm
from banana_market.models import Cultivar, FarmProfile, Product, ProductType
from banana_market.services import orders as order_service

main_bp = Blueprint('main', __name__)


# --- Knowledge base ---
@main_bp.route('/cultivars')
def cultivars():
    """All cultivars ordered by name."""
    items = Cultivar.query.order_by(Cultivar.name.asc()).all()
    return jsonify({'cultivars': [c.to_dict() for c in items]})


@main_bp.route('/cultivars/<slug>')
def cultivar_detail(slug):
    """Cultivar detail with the active products grown from it."""
    cultivar = Cultivar.query.filter_by(slug=slug).first_or_404()
    products = cultivar.products.filter_by(is_active=True).order_by(
        Product.created_at.desc()
    ).limit(12).all()
    return jsonify({
        'cultivar': cultivar.to_dict(),
        'products': [p.to_dict() for p in products]
    })


# --- Market ---
@main_bp.route('/market')
def market():
    """Active products with search and filter."""
    page = request.args.get('page', 1, type=int)
    search = request.args.get('q', '').strip()
    product_type = request.args.get('type', '')
    cultivar_slug = request.args.get('cultivar', '')

    query = Product.query.filter(Product.is_active == True)

    if search:
        query = query.filter(Product.name.ilike(f'%{search}%'))

    if product_type:
        if product_type not in ProductType.ALL:
            raise ValidationException(f'Unknown product type: {product_type}')
        query = query.filter(Product.product_type == product_type)

    if cultivar_slug:
        query = query.join(Cultivar).filter(Cultivar.slug == cultivar_slug)

    pagination = query.order_by(Product.created_at.desc()).paginate(
        page=page,
        per_page=current_app.config.get('ITEMS_PER_PAGE', 12),
        error_out=False
    )

    return jsonify({
        'products': [p.to_dict() for p in pagination.items],
        'page': pagination.page,
        'pages': pagination.pages,
        'total': pagination.total
    })


@main_bp.route('/products/<int:product_id>')
def product_detail(product_id):
    """Active product detail."""
    product = Product.query.filter_by(id=product_id, is_active=True).first_or_404()
    return jsonify({'product': product.to_dict()})


@main_bp.route('/farms/<int:farm_id>')
def farm_detail(farm_id):
    """Farm profile with its active products."""
    farm = FarmProfile.query.filter_by(id=farm_id).first_or_404()
    products = Product.query.filter_by(farm_id=farm.user_id, is_active=True).order_by(
        Product.created_at.desc()
    ).all()
    return jsonify({
        'farm': farm.to_dict(),
        'products': [p.to_dict() for p in products]
    })


@main_bp.route('/products/<int:product_id>/reserve', methods=['POST'])
@login_required
def reserve(product_id):
    """Reserve product stock and open a pending order."""
    form = ReserveForm().validate_or_raise()

    if form.use_saved_address.data:
        profile = current_user.profile
        address = profile.address if profile else None
        if not address:
            raise ValidationException('No saved address on your profile')
    else:
        address = (form.delivery_address.data or '').strip()
        if not address:
            raise ValidationException('Please enter a delivery address')

    order = order_service.reserve_product(
        current_user,
        product_id,
        form.quantity.data,
        delivery_address=address,
        delivery_notes=form.note.data or None,
    )
    db.session.commit()

    return jsonify({
        'success': True,
        'message': 'Product reserved',
        'order': order.to_dict(),
        'reservation': order.reservation.to_dict()
    }), 201
