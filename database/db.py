"""
Database Configuration Module

Connection Pooling Strategy:
- PostgreSQL: pool_size=10, max_overflow=10 (20 total)
- SQLite (tests / local runs via DATABASE_URL): a single shared connection

Set DATABASE_URL to override the PostgreSQL URI assembled from the
db_user / db_password / db_host / db_port / db_name variables.
"""

import os
from datetime import datetime
from urllib.parse import quote_plus
import uuid as uuid
from pytz import timezone
from dotenv import load_dotenv

load_dotenv()

from sqlalchemy import Column, TIMESTAMP, Uuid, create_engine, event
from sqlalchemy.orm import declarative_base
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import QueuePool, StaticPool

from logger import logging


# ============================================
# DATABASE CONNECTION CONFIGURATION
# ============================================

DBTYPE_POSTGRES = "postgresql"

# Build connection URI
CORE_SQLALCHEMY_DATABASE_URI = os.environ.get("DATABASE_URL") or "%s://%s:%s@%s:%s/%s" % (
    DBTYPE_POSTGRES,
    os.environ.get("db_user", "postgres"),
    quote_plus(os.environ.get("db_password", "")),
    os.environ.get("db_host", "localhost"),
    os.environ.get("db_port", "5432"),
    os.environ.get("db_name", "laundry"),
)

IS_SQLITE = CORE_SQLALCHEMY_DATABASE_URI.startswith("sqlite")

# ============================================
# CONNECTION POOL SETTINGS
# ============================================

if IS_SQLITE:
    # every session shares one connection so in-memory databases persist
    POOL_CONFIG = {
        "connect_args": {"check_same_thread": False},
        "poolclass": StaticPool,
        "echo": False,
    }
else:
    POOL_CONFIG = {
        # Base pool size - always maintain this many connections
        "pool_size": 10,
        # Additional connections allowed during peak load
        "max_overflow": 10,
        # Timeout waiting for a connection from pool (seconds)
        "pool_timeout": 30,
        # Test connection health before using (handles stale connections)
        "pool_pre_ping": True,
        # Recycle connections after 30 minutes
        "pool_recycle": 1800,
        "echo": False,
        "poolclass": QueuePool,
    }

db_engine = create_engine(
    CORE_SQLALCHEMY_DATABASE_URI,
    **POOL_CONFIG,
)

# ============================================
# SESSION CONFIGURATION
# ============================================

SessionLocal = sessionmaker(
    autoflush=False,
    bind=db_engine,
    expire_on_commit=False,  # records are serialised after commit
)

UTC = timezone("UTC")


def time_now():
    """Get current UTC time"""
    return datetime.now(UTC)


# ============================================
# CONNECTION POOL MONITORING
# ============================================


@event.listens_for(db_engine, "checkout")
def receive_checkout(dbapi_connection, connection_record, connection_proxy):
    logging.debug("Connection checked out from pool")


@event.listens_for(db_engine, "checkin")
def receive_checkin(dbapi_connection, connection_record):
    logging.debug("Connection returned to pool")


if IS_SQLITE:

    @event.listens_for(db_engine, "connect")
    def enable_sqlite_foreign_keys(dbapi_connection, connection_record):
        # SQLite ignores ON DELETE rules unless asked to enforce them
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()


# ============================================
# DECLARATIVE BASE
# ============================================

DBBase = declarative_base()


def init_models():
    """Create all tables that do not exist yet."""
    # register the model classes on the metadata
    import models  # noqa: F401

    DBBase.metadata.create_all(bind=db_engine)
    logging.info("Database tables initialised")


# ============================================
# BASE MODEL CLASS
# ============================================


class DBBaseClass:
    """
    Base class for all database models.

    Provides:
    - UUID primary key (the external record id)
    - Created timestamp
    """

    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4)

    created_at = Column(TIMESTAMP(timezone=True), default=time_now, nullable=False)

    def to_dict(self):
        """
        Convert model to dictionary.
        Override in subclasses for custom serialization.
        """
        return {
            "id": str(self.id),
            "created_at": self.created_at.isoformat() if self.created_at else None,
        }
