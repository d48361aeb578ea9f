"""
Pipeline and publish routes — /api/pipeline (GET) and /api/publish-leads (POST).
"""
from flask import Blueprint, g, jsonify, request

from gigfrog.database import get_session
from gigfrog.schemas import PublishRequest, parse_id, parse_request
from gigfrog.services import publish
from gigfrog.services.auth import require_auth
from gigfrog.services.pipeline import get_pipeline

bp = Blueprint('pipeline', __name__)


@bp.route('/api/pipeline', methods=['GET'])
@require_auth
def pipeline():
    """Caller's saved leads grouped by status: [{_id, count, leads}]."""
    session = get_session()
    try:
        return jsonify(get_pipeline(session, g.user))
    finally:
        session.close()


@bp.route('/api/publish-leads', methods=['POST'])
@require_auth
def publish_leads():
    """Body {mode: 'single', leadId} or {mode: 'all'}."""
    payload = parse_request(PublishRequest, request.get_json(silent=True))
    session = get_session()
    try:
        if payload.mode == 'single':
            result = publish.publish_single(session, g.user, parse_id(payload.lead_id, 'leadId'))
        else:
            result = publish.publish_all(session, g.user)
        return jsonify(result)
    finally:
        session.close()
