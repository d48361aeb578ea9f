"""
Database engine + session factory.

A Database owns one engine and its session factory. create_app() builds it from
DATABASE_URL and registers it on the app; get_session() hands out sessions from
the current app's Database. dispose() releases the connection pool.
"""
import logging
from datetime import datetime, timezone

from flask import current_app
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker, DeclarativeBase
from sqlalchemy.pool import StaticPool

logger = logging.getLogger('gigfrog.database')

EXTENSION_KEY = 'gigfrog.db'


class Base(DeclarativeBase):
    pass


def normalize_url(url):
    """Hosted Postgres providers hand out postgres:// but SQLAlchemy 2.x requires postgresql://"""
    return url.replace('postgres://', 'postgresql://', 1)


class Database:
    """Engine + sessionmaker pair with an explicit shutdown."""

    def __init__(self, url, echo=False):
        self.url = normalize_url(url)

        # SQLite needs different engine kwargs than Postgres
        if self.url in ('sqlite://', 'sqlite:///:memory:'):
            # One shared connection, otherwise every session sees an empty database
            self.engine = create_engine(
                self.url, echo=echo,
                connect_args={'check_same_thread': False},
                poolclass=StaticPool,
            )
        elif self.url.startswith('sqlite'):
            self.engine = create_engine(self.url, echo=echo, connect_args={'check_same_thread': False})
        else:
            self.engine = create_engine(
                self.url, echo=echo, pool_pre_ping=True, pool_size=5, max_overflow=10,
            )

        self._sessionmaker = sessionmaker(bind=self.engine)

    def session(self):
        """Return a new DB session. Callers close it."""
        return self._sessionmaker()

    def create_all(self):
        """Create every table known to Base.metadata (tests and local dev only)."""
        register_models()
        Base.metadata.create_all(self.engine)

    def dispose(self):
        self.engine.dispose()
        logger.info("Database connection pool disposed")


def register_models():
    """Import models so Base.metadata knows about them."""
    import importlib
    importlib.import_module('gigfrog.models.lead')
    importlib.import_module('gigfrog.models.saved_lead')
    importlib.import_module('gigfrog.models.referral')
    importlib.import_module('gigfrog.models.activity')


def init_database(app):
    """Build the app's Database from app.config and register it."""
    db = Database(app.config['DATABASE_URL'], echo=app.config.get('SQL_ECHO', False))
    app.extensions[EXTENSION_KEY] = db
    return db


def get_database(app=None):
    app = app or current_app
    return app.extensions[EXTENSION_KEY]


def get_session():
    """Return a new DB session from the current app's Database."""
    return get_database().session()


def utcnow():
    return datetime.now(timezone.utc)


def isoformat(value):
    """ISO-8601 string for a datetime column, or None."""
    return value.isoformat() if value else None
