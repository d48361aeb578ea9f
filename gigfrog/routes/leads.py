"""
Lead routes — /api/leads list/get/create/update/delete.
"""
from flask import Blueprint, g, jsonify, request

from gigfrog.database import get_session
from gigfrog.schemas import LeadCreate, LeadUpdate, parse_id, parse_request
from gigfrog.services import leads as lead_store
from gigfrog.services.auth import optional_auth, require_auth

bp = Blueprint('leads', __name__)


@bp.route('/api/leads', methods=['GET'])
@optional_auth
def get_leads():
    """Single lead with ?id=, otherwise one page of visible leads."""
    lead_id = request.args.get('id')
    session = get_session()
    try:
        if lead_id is not None:
            lead = lead_store.get_lead(session, parse_id(lead_id), g.user)
            return jsonify(lead.to_dict())

        page, limit = lead_store.parse_pagination(request.args.get('page'), request.args.get('limit'))
        return jsonify(lead_store.list_leads(
            session, g.user,
            page=page,
            limit=limit,
            sort=request.args.get('sort'),
            search=request.args.get('search'),
            industry=request.args.get('industry'),
            location=request.args.get('location'),
        ))
    finally:
        session.close()


@bp.route('/api/leads', methods=['POST'])
@require_auth
def create_lead():
    payload = parse_request(LeadCreate, request.get_json(silent=True))
    session = get_session()
    try:
        lead = lead_store.create_lead(session, payload, g.user)
        return jsonify(lead.to_dict()), 201
    finally:
        session.close()


@bp.route('/api/leads', methods=['PUT'])
@require_auth
def update_lead():
    lead_id = parse_id(request.args.get('id'))
    payload = parse_request(LeadUpdate, request.get_json(silent=True))
    session = get_session()
    try:
        lead = lead_store.update_lead(session, lead_id, payload, g.user)
        return jsonify(lead.to_dict())
    finally:
        session.close()


@bp.route('/api/leads', methods=['DELETE'])
@require_auth
def delete_lead():
    lead_id = parse_id(request.args.get('id'))
    session = get_session()
    try:
        lead_store.delete_lead(session, lead_id, g.user)
        return '', 204
    finally:
        session.close()
