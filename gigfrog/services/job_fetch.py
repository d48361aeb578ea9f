"""
Fetch a job posting page so the client can scrape it. Returns the raw HTML.
"""
import logging

import requests

from gigfrog.errors import UpstreamError

logger = logging.getLogger('services.job_fetch')

BROWSER_HEADERS = {
    'User-Agent': (
        'Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 '
        '(KHTML, like Gecko) Chrome/91.0.4472.124 Safari/537.36'
    ),
    'Accept': 'text/html,application/xhtml+xml,application/xml;q=0.9,image/webp,*/*;q=0.8',
    'Accept-Language': 'en-US,en;q=0.5',
    'Accept-Encoding': 'gzip, deflate',
    'Connection': 'keep-alive',
    'Upgrade-Insecure-Requests': '1',
}


def fetch_job_page(url, timeout=15):
    """GET url with browser-like headers. Non-2xx raises UpstreamError carrying the upstream status."""
    resp = requests.get(url, headers=BROWSER_HEADERS, timeout=timeout)
    if not resp.ok:
        logger.info("Job page fetch %s returned HTTP %s", url, resp.status_code)
        raise UpstreamError(f'Failed to fetch URL: {resp.reason}', status_code=resp.status_code)
    return resp.text
