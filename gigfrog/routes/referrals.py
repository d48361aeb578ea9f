"""
Referral routes — /api/referrals, owner-scoped.
"""
from flask import Blueprint, g, jsonify, request

from gigfrog.database import get_session
from gigfrog.schemas import ReferralCreate, ReferralUpdate, parse_id, parse_request
from gigfrog.services import referrals
from gigfrog.services.auth import require_auth

bp = Blueprint('referrals', __name__)


@bp.route('/api/referrals', methods=['GET'])
@require_auth
def get_referrals():
    """All of the caller's referrals, one with ?id=, or its activity with ?id=&activity=true."""
    session = get_session()
    try:
        if request.args.get('id') is None:
            return jsonify(referrals.list_referrals(session, g.user))

        referral_id = parse_id(request.args.get('id'))
        if request.args.get('activity') == 'true':
            return jsonify(referrals.get_activity(session, referral_id, g.user))
        return jsonify(referrals.get_referral(session, referral_id, g.user).to_dict())
    finally:
        session.close()


@bp.route('/api/referrals', methods=['POST'])
@require_auth
def create_referral():
    payload = parse_request(ReferralCreate, request.get_json(silent=True))
    session = get_session()
    try:
        referral = referrals.create_referral(session, g.user, payload)
        return jsonify(referral.to_dict()), 201
    finally:
        session.close()


@bp.route('/api/referrals', methods=['PUT'])
@require_auth
def update_referral():
    referral_id = parse_id(request.args.get('id'))
    payload = parse_request(ReferralUpdate, request.get_json(silent=True))
    session = get_session()
    try:
        referral = referrals.update_referral(session, referral_id, g.user, payload)
        return jsonify(referral.to_dict())
    finally:
        session.close()


@bp.route('/api/referrals', methods=['DELETE'])
@require_auth
def delete_referral():
    referral_id = parse_id(request.args.get('id'))
    session = get_session()
    try:
        referrals.delete_referral(session, referral_id, g.user)
        return '', 204
    finally:
        session.close()
