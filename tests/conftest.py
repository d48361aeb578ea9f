"""Shared test fixtures."""
from datetime import datetime, timezone, timedelta

import pytest
from unittest.mock import patch

from gigfrog.database import get_database, get_session
from gigfrog.models.lead import Lead
from gigfrog.models.referral import Referral
from gigfrog.models.saved_lead import SavedLead
from gigfrog.services.auth import Identity


# Bearer token → identity, used in place of the Supabase round trip
USERS = {
    'alice-token': Identity(id='user-alice', email='alice@example.com', role='user'),
    'bob-token': Identity(id='user-bob', email='bob@example.com', role='user'),
    'admin-token': Identity(id='user-admin', email='admin@example.com', role='admin'),
}

BASE_TIME = datetime(2026, 1, 15, 10, 0, tzinfo=timezone.utc)


class FakeRedis:
    """Minimal in-memory Redis fake for circuit breaker state."""

    def __init__(self):
        self.get_store = {}
        self.hash_store = {}

    def get(self, key):
        return self.get_store.get(key)

    def set(self, key, value):
        self.get_store[key] = str(value)

    def incr(self, key):
        val = int(self.get_store.get(key, 0)) + 1
        self.get_store[key] = str(val)
        return val

    def delete(self, *keys):
        for k in keys:
            self.get_store.pop(k, None)
            self.hash_store.pop(k, None)

    def hset(self, key, field, value):
        self.hash_store.setdefault(key, {})[field] = str(value)

    def hincrby(self, key, field, amount):
        h = self.hash_store.setdefault(key, {})
        h[field] = str(int(h.get(field, 0)) + amount)

    def hgetall(self, key):
        return dict(self.hash_store.get(key, {}))

    def pipeline(self):
        return FakePipeline(self)


class FakePipeline:
    """Fake Redis pipeline that replays queued commands on execute()."""

    def __init__(self, redis):
        self._redis = redis
        self._ops = []

    def set(self, key, value):
        self._ops.append(('set', key, value))
        return self

    def delete(self, *keys):
        self._ops.append(('delete', keys))
        return self

    def hincrby(self, key, field, amount):
        self._ops.append(('hincrby', key, field, amount))
        return self

    def hset(self, key, field, value):
        self._ops.append(('hset', key, field, value))
        return self

    def execute(self):
        for op in self._ops:
            if op[0] == 'set':
                self._redis.set(op[1], op[2])
            elif op[0] == 'delete':
                self._redis.delete(*op[1])
            elif op[0] == 'hincrby':
                self._redis.hincrby(op[1], op[2], op[3])
            elif op[0] == 'hset':
                self._redis.hset(op[1], op[2], op[3])
        self._ops = []


@pytest.fixture
def fake_redis():
    """In-memory Redis fake with dict-backed storage."""
    return FakeRedis()


@pytest.fixture
def app(fake_redis):
    """Flask test app on a private in-memory SQLite database."""
    from gigfrog import create_app
    with patch('gigfrog.extensions.redis_client', fake_redis):
        app = create_app({
            'DATABASE_URL': 'sqlite://',
            'TESTING': True,
            'SUPABASE_URL': 'https://supabase.test',
            'SUPABASE_SERVICE_ROLE_KEY': 'service-key',
        })
    db = get_database(app)
    db.create_all()
    yield app
    db.dispose()


@pytest.fixture
def fake_identity():
    """Resolve bearer tokens through USERS instead of Supabase."""
    def _verify(header):
        if not header or not header.startswith('Bearer '):
            return None
        return USERS.get(header[len('Bearer '):])

    with patch('gigfrog.services.auth.verify_token', side_effect=_verify) as mock:
        yield mock


@pytest.fixture
def client(app, fake_identity):
    """Flask test client."""
    with app.test_client() as c:
        yield c


@pytest.fixture
def auth_headers():
    """auth_headers('bob-token') → Authorization header dict."""
    def _headers(token='alice-token'):
        return {'Authorization': f'Bearer {token}'}
    return _headers


@pytest.fixture
def db_session(app):
    """Session on the app's database, inside an app context."""
    with app.app_context():
        session = get_session()
        yield session
        session.close()


@pytest.fixture
def alice():
    return USERS['alice-token']


@pytest.fixture
def bob():
    return USERS['bob-token']


@pytest.fixture
def admin():
    return USERS['admin-token']


# ── Factories ────────────────────────────────────────────────────────────────

@pytest.fixture
def make_lead(db_session):
    """Factory fixture — inserts a Lead. Private to user-alice unless overridden."""
    counter = {'n': 0}

    def _make(**overrides):
        counter['n'] += 1
        defaults = dict(
            title='Backend Engineer',
            company='Acme',
            location='Remote',
            team='Platform',
            compensation={'min': 150000, 'max': 175000, 'currency': 'USD', 'raw': '$150k-$175k'},
            contact_name='Dana Recruiter',
            contact_email='dana@acme.example',
            additional_emails=['jobs@acme.example'],
            additional_links=[{'title': 'Careers', 'url': 'https://acme.example/careers'}],
            contact_linkedin='https://linkedin.com/in/dana',
            source_link='https://acme.example/jobs/1',
            industry='Software',
            is_global=False,
            created_by='user-alice',
            created_at=BASE_TIME + timedelta(minutes=counter['n']),
        )
        defaults.update(overrides)
        lead = Lead(**defaults)
        db_session.add(lead)
        db_session.commit()
        return lead
    return _make


@pytest.fixture
def make_saved_lead(db_session):
    """Factory fixture — inserts a SavedLead in status 'saved' for (user_id, lead)."""
    counter = {'n': 0}

    def _make(lead, user_id='user-alice', **overrides):
        counter['n'] += 1
        at = BASE_TIME + timedelta(hours=counter['n'])
        defaults = dict(
            user_id=user_id,
            lead_id=lead.id,
            current_status='saved',
            status_history=[{'status': 'saved', 'timestamp': at.isoformat(), 'note': 'Lead saved to pipeline'}],
            priority='medium',
            notes='',
            saved_at=at,
            last_activity_at=at,
        )
        defaults.update(overrides)
        saved = SavedLead(**defaults)
        db_session.add(saved)
        db_session.commit()
        return saved
    return _make


@pytest.fixture
def make_referral(db_session):
    """Factory fixture — inserts a Referral owned by user-alice unless overridden."""
    counter = {'n': 0}

    def _make(**overrides):
        counter['n'] += 1
        at = BASE_TIME + timedelta(days=counter['n'])
        defaults = dict(
            user_id='user-alice',
            name='Sam Insider',
            company='Acme',
            email='sam@acme.example',
            linkedin='',
            notes='',
            linked_leads=[],
            activity_history=[{'timestamp': at.isoformat(), 'action': 'created', 'description': 'Referral created'}],
            created_at=at,
            updated_at=at,
        )
        defaults.update(overrides)
        referral = Referral(**defaults)
        db_session.add(referral)
        db_session.commit()
        return referral
    return _make
