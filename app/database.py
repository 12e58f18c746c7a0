"""
Database Configuration and Session Management
"""

from sqlalchemy import create_engine
from sqlalchemy.orm import declarative_base, sessionmaker
from app.config import settings
import logging

logger = logging.getLogger(__name__)

engine = None
SessionLocal = None


def sqlalchemy_url(database_url: str) -> str:
    """Route plain postgresql:// URLs to the psycopg (v3) driver."""
    if database_url.startswith("postgresql://"):
        return database_url.replace("postgresql://", "postgresql+psycopg://", 1)
    return database_url


def init_db():
    """Initialize database connection"""
    global engine, SessionLocal

    if not settings.database_url:
        logger.warning("DATABASE_URL not configured - database features disabled")
        return

    db_url = sqlalchemy_url(settings.database_url)

    connect_args = {}
    if db_url.startswith("postgresql"):
        # Request-scoped timeout for every statement (lock waits included)
        connect_args["options"] = f"-c statement_timeout={settings.db_statement_timeout_ms}"

    logger.info("Connecting to database...")
    engine = create_engine(
        db_url,
        pool_pre_ping=True,  # Verify connections before using them
        pool_size=5,
        max_overflow=10,
        connect_args=connect_args,
    )

    SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)
    logger.info("Database connection established")


def get_db():
    """
    Dependency for getting database session.
    Usage: db: Session = Depends(get_db)

    Yields None if the database is not configured; routers answer 503.
    """
    if SessionLocal is None:
        logger.warning("Database not configured")
        yield None
        return

    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


# Base class for all models
Base = declarative_base()
