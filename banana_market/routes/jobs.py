"""HTTP entry points for the scheduled order sweeps.

An external scheduler calls these with the service key as a bearer token.
Any method is accepted; CORS preflight is answered by Flask-Cors.
"""

import hmac
import logging
from flask import Blueprint, jsonify, request, current_app
from banana_market.extensions import db
from banana_market.services import sweeps

logger = logging.getLogger(__name__)

jobs_bp = Blueprint('jobs', __name__)

ANY_METHOD = ['GET', 'POST', 'PUT', 'PATCH', 'DELETE']


def _credentials_error():
    """Return an error response when the caller may not run a sweep."""
    service_key = current_app.config.get('SERVICE_ROLE_KEY')
    database_url = current_app.config.get('DATABASE_URL')
    if not service_key or not database_url:
        logger.error('Sweep called without SERVICE_ROLE_KEY/DATABASE_URL configured')
        return jsonify({'error': 'Service credentials are not configured'}), 500

    header = request.headers.get('Authorization', '')
    token = header[len('Bearer '):] if header.startswith('Bearer ') else ''
    if not hmac.compare_digest(token.encode(), service_key.encode()):
        return jsonify({'error': 'Unauthorized'}), 401
    return None


def _run(job_name, sweep):
    error = _credentials_error()
    if error is not None:
        return error

    logger.info('Running %s job...', job_name)
    try:
        result = sweep()
    except Exception as e:
        db.session.rollback()
        logger.exception('Error in %s', job_name)
        return jsonify({'error': str(e) or 'Unknown error'}), 500

    return jsonify({'success': True, 'message': result['message']})


@jobs_bp.route('/check-farm-confirm', methods=ANY_METHOD)
def check_farm_confirm():
    """Cancel pending orders the farm did not confirm in time."""
    return _run('check-farm-confirm', sweeps.cancel_unconfirmed_orders)


@jobs_bp.route('/auto-cancel-orders', methods=ANY_METHOD)
def auto_cancel_orders():
    """Cancel open orders past the post-harvest pickup window."""
    return _run('auto-cancel-orders', sweeps.cancel_post_harvest_orders)
