"""Admin routes."""

from datetime import datetime
from flask import Blueprint, jsonify, request
from flask_login import login_required, current_user
from banana_market.extensions import db
from banana_market.exceptions import BusinessRuleException, ConflictException
from banana_market.forms.market import CultivarForm
from banana_market.models import (Cultivar, FarmProfile, FarmUpgradeRequest,
                                  Notification, NotificationType, Role)
from banana_market.utils.decorators import admin_required

admin_bp = Blueprint('admin', __name__)


# --- Farm upgrade requests ---
@admin_bp.route('/farm-upgrade-requests')
@login_required
@admin_required
def upgrade_requests():
    """Farm upgrade requests, optionally filtered by status."""
    status = request.args.get('status', '')

    query = FarmUpgradeRequest.query
    if status:
        query = query.filter_by(status=status)

    items = query.order_by(FarmUpgradeRequest.created_at.desc()).all()
    return jsonify({'requests': [r.to_dict() for r in items]})


def _pending_request(request_id):
    upgrade = FarmUpgradeRequest.query.get_or_404(request_id)
    if upgrade.status != FarmUpgradeRequest.PENDING:
        raise BusinessRuleException(f'Request is already {upgrade.status}')
    return upgrade


@admin_bp.route('/farm-upgrade-requests/<int:request_id>/approve', methods=['POST'])
@login_required
@admin_required
def approve_upgrade(request_id):
    """Grant the farm role and create the farm profile."""
    upgrade = _pending_request(request_id)
    user = upgrade.user

    user.add_role(Role.FARM)
    if user.farm_profile is None:
        db.session.add(FarmProfile(
            user_id=user.id,
            farm_name=upgrade.farm_name,
            farm_location=upgrade.farm_location,
            farm_description=upgrade.description
        ))

    upgrade.status = FarmUpgradeRequest.APPROVED
    upgrade.reviewed_by = current_user.id
    upgrade.reviewed_at = datetime.utcnow()

    db.session.add(Notification(
        user_id=user.id,
        title='Farm Account Approved',
        message=f'{upgrade.farm_name} is now open. You can start listing products.',
        type=NotificationType.FARM_UPGRADE
    ))
    db.session.commit()

    return jsonify({'success': True, 'message': f'{upgrade.farm_name} has been approved!', 'request': upgrade.to_dict()})


@admin_bp.route('/farm-upgrade-requests/<int:request_id>/reject', methods=['POST'])
@login_required
@admin_required
def reject_upgrade(request_id):
    upgrade = _pending_request(request_id)
    upgrade.status = FarmUpgradeRequest.REJECTED
    upgrade.reviewed_by = current_user.id
    upgrade.reviewed_at = datetime.utcnow()

    db.session.add(Notification(
        user_id=upgrade.user_id,
        title='Farm Request Declined',
        message=f'Your request to open {upgrade.farm_name} was declined.',
        type=NotificationType.FARM_UPGRADE
    ))
    db.session.commit()

    return jsonify({'success': True, 'message': 'Request rejected', 'request': upgrade.to_dict()})


# --- Farms ---
@admin_bp.route('/farms/<int:farm_id>/toggle-verified', methods=['POST'])
@login_required
@admin_required
def toggle_farm_verified(farm_id):
    """Toggle farm verified badge."""
    farm = FarmProfile.query.get_or_404(farm_id)
    farm.verified = not farm.verified
    db.session.commit()

    status = 'verified' if farm.verified else 'unverified'
    return jsonify({'success': True, 'message': f'{farm.farm_name} is now {status}.', 'farm': farm.to_dict()})


# --- Cultivars ---
def _fill_cultivar(cultivar, form):
    name = form.name.data.strip()
    clash = Cultivar.query.filter(Cultivar.name == name, Cultivar.id != cultivar.id).first()
    if clash is not None:
        raise ConflictException(f'Cultivar {name} already exists')

    renamed = cultivar.name != name
    cultivar.name = name
    cultivar.thai_name = form.thai_name.data.strip()
    cultivar.description = form.description.data
    cultivar.characteristics = form.characteristics.data
    cultivar.growing_conditions = form.growing_conditions.data
    cultivar.uses = form.uses.data
    cultivar.image_url = form.image_url.data or None
    if renamed or not cultivar.slug:
        cultivar.generate_slug()


@admin_bp.route('/cultivars', methods=['POST'])
@login_required
@admin_required
def add_cultivar():
    form = CultivarForm().validate_or_raise()
    cultivar = Cultivar()
    _fill_cultivar(cultivar, form)
    db.session.add(cultivar)
    db.session.commit()
    return jsonify({'success': True, 'message': 'Cultivar added', 'cultivar': cultivar.to_dict()}), 201


@admin_bp.route('/cultivars/<int:cultivar_id>', methods=['PUT'])
@login_required
@admin_required
def edit_cultivar(cultivar_id):
    cultivar = Cultivar.query.get_or_404(cultivar_id)
    form = CultivarForm().validate_or_raise()
    _fill_cultivar(cultivar, form)
    db.session.commit()
    return jsonify({'success': True, 'message': 'Cultivar updated', 'cultivar': cultivar.to_dict()})
