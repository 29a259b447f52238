"""
Database configuration and session management.

This module sets up SQLAlchemy with SQLite and provides
database session management for the game record store.
"""

from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker, Session, declarative_base
from pathlib import Path

from reaction_race.config import get_settings

settings = get_settings()

# Get the backend directory path (parent of the package directory)
BACKEND_DIR = Path(__file__).parent.parent
DATA_DIR = BACKEND_DIR / "data"

# Ensure the data directory exists
DATA_DIR.mkdir(parents=True, exist_ok=True)

# Database file path
DB_FILE = DATA_DIR / "reaction_race.db"
DATABASE_URL = f"sqlite:///{DB_FILE}"

# Create SQLAlchemy engine
engine = create_engine(
    DATABASE_URL,
    connect_args={"check_same_thread": False},  # Needed for SQLite
    echo=settings.database.ECHO_SQL,
)

# Create session factory
SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

# Base class for all models
Base = declarative_base()


def get_db() -> Session:
    """
    Dependency function to get database session.

    Yields:
        Session: Database session that will be automatically closed.
    """
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def init_db() -> None:
    """
    Initialise the database.

    Creates all tables defined in the models if they don't exist.
    This is called on application startup.
    """
    # Import all models here so they are registered with Base
    from reaction_race.models import game_record  # noqa: F401

    Base.metadata.create_all(bind=engine)
    print(f"Database initialised at {DB_FILE}")
