"""Tests for gigfrog.services.auth — Supabase token verification and decorators."""
import pytest
import requests
from unittest.mock import MagicMock, patch

from gigfrog.services.auth import Identity, is_admin, verify_token
from gigfrog.services.circuit_breaker import OPEN, get_breaker


def _response(status_code, payload=None):
    resp = MagicMock()
    resp.status_code = status_code
    resp.json.return_value = payload
    if status_code >= 400:
        resp.raise_for_status.side_effect = requests.HTTPError(f'{status_code} error')
    else:
        resp.raise_for_status.return_value = None
    return resp


@pytest.fixture
def ctx(app):
    with app.app_context():
        yield app


@pytest.fixture
def mock_get():
    with patch('gigfrog.services.auth.requests.get') as mock:
        yield mock


class TestVerifyToken:

    @pytest.mark.parametrize('header', [None, '', 'Token abc', 'Bearer ', 'bearer abc'])
    def test_malformed_headers_yield_no_identity(self, ctx, mock_get, header):
        assert verify_token(header) is None
        mock_get.assert_not_called()

    def test_valid_token_with_profile_role(self, ctx, mock_get):
        mock_get.side_effect = [
            _response(200, {'id': 'u-1', 'email': 'a@example.com'}),
            _response(200, [{'role': 'admin'}]),
        ]
        user = verify_token('Bearer good-token')
        assert user == Identity(id='u-1', email='a@example.com', role='admin')

        auth_call, profile_call = mock_get.call_args_list
        assert auth_call.args[0] == 'https://supabase.test/auth/v1/user'
        assert auth_call.kwargs['headers']['Authorization'] == 'Bearer good-token'
        assert auth_call.kwargs['headers']['apikey'] == 'service-key'
        assert profile_call.args[0] == 'https://supabase.test/rest/v1/user_profiles'
        assert profile_call.kwargs['params'] == {'id': 'eq.u-1', 'select': 'role'}

    def test_missing_profile_defaults_to_user_role(self, ctx, mock_get):
        mock_get.side_effect = [_response(200, {'id': 'u-1'}), _response(200, [])]
        assert verify_token('Bearer t').role == 'user'

    def test_profile_lookup_failure_defaults_to_user_role(self, ctx, mock_get):
        mock_get.side_effect = [_response(200, {'id': 'u-1'}), requests.ConnectionError('down')]
        assert verify_token('Bearer t').role == 'user'

    def test_profile_server_error_counts_as_failure(self, ctx, mock_get):
        mock_get.side_effect = [_response(200, {'id': 'u-1'}), _response(503)]
        assert verify_token('Bearer t').role == 'user'
        assert get_breaker('supabase').failure_count == 1

    def test_profile_not_found_does_not_count_as_failure(self, ctx, mock_get):
        mock_get.side_effect = [_response(200, {'id': 'u-1'}), _response(404)]
        assert verify_token('Bearer t').role == 'user'
        assert get_breaker('supabase').failure_count == 0

    def test_rejected_token(self, ctx, mock_get):
        mock_get.return_value = _response(401, {'msg': 'invalid JWT'})
        assert verify_token('Bearer expired') is None
        assert mock_get.call_count == 1

    def test_rejected_token_does_not_count_as_breaker_failure(self, ctx, mock_get):
        mock_get.return_value = _response(401)
        verify_token('Bearer expired')
        assert get_breaker('supabase').failure_count == 0

    def test_network_error_counts_as_failure(self, ctx, mock_get):
        mock_get.side_effect = requests.ConnectionError('unreachable')
        assert verify_token('Bearer t') is None
        assert get_breaker('supabase').failure_count == 1

    def test_server_error_counts_as_failure(self, ctx, mock_get):
        mock_get.return_value = _response(503)
        assert verify_token('Bearer t') is None
        assert get_breaker('supabase').failure_count == 1

    def test_open_circuit_skips_provider(self, ctx, mock_get):
        mock_get.side_effect = requests.ConnectionError('unreachable')
        for _ in range(5):
            verify_token('Bearer t')
        assert get_breaker('supabase').state == OPEN

        mock_get.reset_mock()
        assert verify_token('Bearer t') is None
        mock_get.assert_not_called()

    def test_unconfigured_provider(self, ctx, mock_get):
        ctx.config['SUPABASE_URL'] = None
        assert verify_token('Bearer t') is None
        mock_get.assert_not_called()


class TestDecorators:

    def test_required_auth_rejects_anonymous(self, client):
        resp = client.get('/api/pipeline')
        assert resp.status_code == 401
        assert resp.get_json() == {'error': 'Unauthorized'}

    def test_optional_auth_allows_anonymous(self, client):
        assert client.get('/api/leads').status_code == 200


class TestIsAdmin:

    def test_roles(self):
        assert is_admin(Identity(id='a', role='admin'))
        assert not is_admin(Identity(id='b'))
        assert not is_admin(None)
