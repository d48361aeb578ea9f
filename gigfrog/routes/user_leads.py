"""
Saved-lead routes — /api/user-leads. Everything is scoped to the caller.
"""
from flask import Blueprint, g, jsonify, request

from gigfrog.database import get_session
from gigfrog.schemas import SaveLeadRequest, SavedLeadUpdate, parse_id, parse_request
from gigfrog.services import saved_leads
from gigfrog.services.auth import require_auth

bp = Blueprint('user_leads', __name__)


@bp.route('/api/user-leads', methods=['GET'])
@require_auth
def get_user_leads():
    """
    ?id=                 one saved lead with leadDetails
    ?id=&activity=true   its activity timeline, newest first
    ?leadId=             the caller's saved lead for that lead
    (none)               all saved leads, optional ?status= and ?priority=
    """
    args = request.args
    session = get_session()
    try:
        if args.get('id') is not None:
            saved_lead_id = parse_id(args.get('id'))
            if args.get('activity') == 'true':
                return jsonify(saved_leads.get_activity(session, saved_lead_id, g.user))
            return jsonify(saved_leads.get_saved_lead(session, saved_lead_id, g.user))

        if args.get('leadId') is not None:
            lead_id = parse_id(args.get('leadId'), 'leadId')
            return jsonify(saved_leads.get_saved_lead_for_lead(session, lead_id, g.user))

        return jsonify(saved_leads.list_saved_leads(
            session, g.user,
            status=args.get('status'),
            priority=args.get('priority'),
        ))
    finally:
        session.close()


@bp.route('/api/user-leads', methods=['POST'])
@require_auth
def save_lead():
    payload = parse_request(SaveLeadRequest, request.get_json(silent=True))
    payload.lead_id = parse_id(payload.lead_id, 'leadId')
    session = get_session()
    try:
        return jsonify(saved_leads.save_lead(session, g.user, payload)), 201
    finally:
        session.close()


@bp.route('/api/user-leads', methods=['PUT'])
@require_auth
def update_user_lead():
    saved_lead_id = parse_id(request.args.get('id'))
    payload = parse_request(SavedLeadUpdate, request.get_json(silent=True))
    session = get_session()
    try:
        return jsonify(saved_leads.update_saved_lead(session, saved_lead_id, g.user, payload))
    finally:
        session.close()


@bp.route('/api/user-leads', methods=['DELETE'])
@require_auth
def remove_user_lead():
    saved_lead_id = parse_id(request.args.get('id'))
    session = get_session()
    try:
        saved_leads.remove_saved_lead(session, saved_lead_id, g.user)
        return '', 204
    finally:
        session.close()
