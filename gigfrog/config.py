"""
Centralized configuration — all env vars and constants.
"""
import os


# ── Logging ──────────────────────────────────────────────────────────────────
LOG_LEVEL = os.getenv('LOG_LEVEL', 'INFO')
LOG_FORMAT = os.getenv('LOG_FORMAT', 'text')

# ── Redis ─────────────────────────────────────────────────────────────────────
REDIS_URL = os.getenv('REDIS_URL', 'redis://localhost:6379/0')

# ── Database ──────────────────────────────────────────────────────────────────
DATABASE_URL = os.getenv('DATABASE_URL', 'sqlite:///gigfrog.db')

# ── Supabase (identity provider) ─────────────────────────────────────────────
SUPABASE_URL = os.getenv('SUPABASE_URL')
SUPABASE_SERVICE_ROLE_KEY = os.getenv('SUPABASE_SERVICE_ROLE_KEY')
AUTH_TIMEOUT = float(os.getenv('AUTH_TIMEOUT', '10'))

# ── Job URL fetching ──────────────────────────────────────────────────────────
JOB_FETCH_TIMEOUT = float(os.getenv('JOB_FETCH_TIMEOUT', '15'))

# ── HTTP ──────────────────────────────────────────────────────────────────────
CORS_ALLOW_ORIGIN = os.getenv('CORS_ALLOW_ORIGIN', '*')

# ── Pagination ────────────────────────────────────────────────────────────────
DEFAULT_PAGE_SIZE = int(os.getenv('DEFAULT_PAGE_SIZE', '10'))
MAX_PAGE_SIZE = int(os.getenv('MAX_PAGE_SIZE', '100'))

# ── Ownership sentinels ───────────────────────────────────────────────────────
SYSTEM_OWNER = 'system'
COMMUNITY_OWNER = 'community'
ADMIN_ROLE = 'admin'
