"""
Supabase-backed identity: exchanges a bearer token for (id, email, role).

verify_token() never raises — an absent, malformed or rejected credential, a
misconfigured provider and an unreachable provider all mean "no identity".
Calls go through the 'supabase' circuit breaker; only transport errors and 5xx
responses count as failures, a rejected token does not.
"""
import logging
from dataclasses import dataclass
from functools import wraps
from typing import Optional

import requests
from flask import current_app, g, request

from gigfrog.config import ADMIN_ROLE
from gigfrog.errors import Unauthorized
from gigfrog.services.circuit_breaker import CircuitOpenError, get_breaker

logger = logging.getLogger('services.auth')

DEFAULT_ROLE = 'user'


@dataclass(frozen=True)
class Identity:
    id: str
    email: Optional[str] = None
    role: str = DEFAULT_ROLE


def is_admin(user: Optional[Identity]) -> bool:
    return user is not None and user.role == ADMIN_ROLE


def _supabase_settings():
    cfg = current_app.config
    return cfg.get('SUPABASE_URL'), cfg.get('SUPABASE_SERVICE_ROLE_KEY'), cfg.get('AUTH_TIMEOUT', 10)


def _fetch_user(base_url, service_key, token, timeout):
    """GET /auth/v1/user for the token. Returns the user dict, or None if the token is rejected."""
    resp = requests.get(
        f"{base_url.rstrip('/')}/auth/v1/user",
        headers={'apikey': service_key, 'Authorization': f'Bearer {token}'},
        timeout=timeout,
    )
    if resp.status_code >= 500:
        resp.raise_for_status()
    if resp.status_code != 200:
        logger.info("Token verification failed: HTTP %s", resp.status_code)
        return None
    return resp.json()


def _get_profile(base_url, service_key, user_id, timeout):
    resp = requests.get(
        f"{base_url.rstrip('/')}/rest/v1/user_profiles",
        params={'id': f'eq.{user_id}', 'select': 'role'},
        headers={'apikey': service_key, 'Authorization': f'Bearer {service_key}'},
        timeout=timeout,
    )
    if resp.status_code >= 500:
        resp.raise_for_status()
    return resp


def _fetch_role(breaker, base_url, service_key, user_id, timeout):
    """Read user_profiles.role for user_id; falls back to the default role."""
    try:
        resp = breaker.call(_get_profile, base_url, service_key, user_id, timeout)
        rows = resp.json() if resp.status_code == 200 else None
    except CircuitOpenError as e:
        logger.warning("%s; using default role for %s", e, user_id)
        return DEFAULT_ROLE
    except (requests.RequestException, ValueError) as e:
        logger.info("Profile fetch error for %s: %s", user_id, e)
        return DEFAULT_ROLE
    if rows and isinstance(rows, list):
        return rows[0].get('role') or DEFAULT_ROLE
    return DEFAULT_ROLE


def verify_token(auth_header: Optional[str]) -> Optional[Identity]:
    """Resolve an Authorization header to an Identity, or None."""
    if not auth_header or not auth_header.startswith('Bearer '):
        return None
    token = auth_header[len('Bearer '):].strip()
    if not token:
        return None

    base_url, service_key, timeout = _supabase_settings()
    if not base_url or not service_key:
        logger.warning("Supabase environment variables not configured")
        return None

    breaker = get_breaker('supabase')
    try:
        user = breaker.call(_fetch_user, base_url, service_key, token, timeout)
    except CircuitOpenError as e:
        logger.warning("%s", e)
        return None
    except (requests.RequestException, ValueError) as e:
        logger.error("Auth verification error: %s", e)
        return None

    if not user or not user.get('id'):
        return None

    role = _fetch_role(breaker, base_url, service_key, user['id'], timeout)
    return Identity(id=user['id'], email=user.get('email'), role=role)


def _current_header():
    return request.headers.get('Authorization')


def require_auth(view):
    """Reject with 401 unless the request carries a valid credential. Sets g.user."""
    @wraps(view)
    def wrapper(*args, **kwargs):
        user = verify_token(_current_header())
        if user is None:
            raise Unauthorized()
        g.user = user
        return view(*args, **kwargs)
    return wrapper


def optional_auth(view):
    """Resolve the credential if present. g.user is None for anonymous callers."""
    @wraps(view)
    def wrapper(*args, **kwargs):
        g.user = verify_token(_current_header())
        return view(*args, **kwargs)
    return wrapper
