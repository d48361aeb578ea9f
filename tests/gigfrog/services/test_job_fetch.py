"""Tests for gigfrog.services.job_fetch."""
import pytest
import requests
from unittest.mock import MagicMock, patch

from gigfrog.errors import UpstreamError
from gigfrog.services.job_fetch import BROWSER_HEADERS, fetch_job_page


@pytest.fixture
def mock_get():
    with patch('gigfrog.services.job_fetch.requests.get') as mock:
        yield mock


class TestFetchJobPage:

    def test_returns_html_with_browser_headers(self, mock_get):
        mock_get.return_value = MagicMock(ok=True, status_code=200, text='<html>job</html>')
        assert fetch_job_page('https://jobs.example/1', timeout=5) == '<html>job</html>'
        mock_get.assert_called_once_with('https://jobs.example/1', headers=BROWSER_HEADERS, timeout=5)
        assert 'Mozilla/5.0' in BROWSER_HEADERS['User-Agent']

    def test_non_2xx_carries_upstream_status(self, mock_get):
        mock_get.return_value = MagicMock(ok=False, status_code=404, reason='Not Found')
        with pytest.raises(UpstreamError) as exc_info:
            fetch_job_page('https://jobs.example/missing')
        assert exc_info.value.status_code == 404
        assert exc_info.value.message == 'Failed to fetch URL: Not Found'

    def test_network_errors_propagate(self, mock_get):
        mock_get.side_effect = requests.ConnectionError('no route to host')
        with pytest.raises(requests.ConnectionError):
            fetch_job_page('https://jobs.example/1')
