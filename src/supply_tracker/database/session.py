"""
Database Configuration
Engine creation, session factory and table initialisation.
"""

from sqlalchemy import create_engine, text
from sqlalchemy.engine import URL, make_url
from sqlalchemy.orm import sessionmaker

from supply_tracker.logging_config import get_logger

logger = get_logger(__name__)


def build_engine(url):
    """
    Create the database engine.

    Args:
        url: SQLAlchemy URL or URL string
            (postgresql+psycopg2://... in production, sqlite in tests)
    """
    if not isinstance(url, URL):
        url = make_url(url)

    connect_args = {}
    if url.get_backend_name() == "postgresql":
        connect_args["connect_timeout"] = 10  # Connection timeout in seconds

    return create_engine(
        url,
        pool_pre_ping=True,  # Test connections before using them
        connect_args=connect_args,
    )


def make_session_factory(engine):
    """Create the Session class bound to engine."""
    return sessionmaker(
        autocommit=False,
        autoflush=False,
        bind=engine,
        expire_on_commit=False,
    )


def check_connection(engine) -> None:
    """Open and close one connection; raises the driver error if it fails."""
    with engine.connect() as conn:
        conn.execute(text("SELECT 1"))


def init_db(engine) -> None:
    """
    Create all tables.

    Safe to call multiple times (idempotent).
    """
    # Import all models so they're registered with the metadata
    from supply_tracker.database.base import Base
    from supply_tracker.database.models import EquipmentRow, SupplyRequestRow, AuditLog  # noqa: F401

    Base.metadata.create_all(bind=engine)
    logger.info("[OK] Database tables ready")
