"""
Health routes — liveness check and circuit-breaker status/reset.
"""
from flask import Blueprint, jsonify

from gigfrog.errors import NotFound
from gigfrog.services.circuit_breaker import get_all_breakers

bp = Blueprint('health', __name__)


@bp.route('/health')
def health_check():
    """Health check endpoint."""
    return jsonify({"status": "healthy"}), 200


@bp.route('/api/health')
def api_health():
    """Circuit breaker state for every upstream service."""
    services = {name: cb.get_health() for name, cb in get_all_breakers().items()}
    return jsonify({'services': services})


@bp.route('/api/health/<service>/reset', methods=['POST'])
def reset_circuit(service):
    breaker = get_all_breakers().get(service)
    if breaker is None:
        raise NotFound(f'Unknown service: {service}')
    breaker.reset()
    return jsonify({'ok': True, 'service': service, 'state': breaker.state})
