"""
POST /api/parse-job-url — fetch a job posting and hand its HTML back to the client.
"""
from flask import Blueprint, current_app, jsonify, request

from gigfrog.schemas import ParseJobUrlRequest, parse_request
from gigfrog.services.auth import require_auth
from gigfrog.services.job_fetch import fetch_job_page

bp = Blueprint('parse_job_url', __name__)


@bp.route('/api/parse-job-url', methods=['POST'])
@require_auth
def parse_job_url():
    payload = parse_request(ParseJobUrlRequest, request.get_json(silent=True))
    html = fetch_job_page(payload.url, timeout=current_app.config.get('JOB_FETCH_TIMEOUT', 15))
    return jsonify({'html': html})
