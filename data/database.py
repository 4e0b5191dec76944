"""
Database connection and session management.

Provides utilities for creating database engine, sessions, and table initialization.
"""
import logging
from contextlib import contextmanager
from typing import Generator, Optional

from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker, Session

from config.settings import settings
from .db_models import Base

logger = logging.getLogger(__name__)


class DatabaseManager:
    """Manages database connections and sessions."""

    def __init__(self, database_url: Optional[str] = None):
        """
        Initialize database manager.

        Args:
            database_url: SQLAlchemy database URL. If None, uses settings.database_url.
        """
        self.database_url = database_url or settings.database_url

        # SQLite connections are shared with worker threads
        if self.database_url.startswith('sqlite'):
            self.engine = create_engine(
                self.database_url,
                connect_args={'check_same_thread': False},
                echo=False
            )
        else:
            self.engine = create_engine(self.database_url, echo=False)

        # Create session factory
        self.SessionLocal = sessionmaker(
            autocommit=False,
            autoflush=False,
            bind=self.engine
        )

    def create_tables(self):
        """Create all database tables."""
        Base.metadata.create_all(bind=self.engine)
        logger.info("Database tables created at: %s", self.database_url)

    def drop_tables(self):
        """Drop all database tables. Use with caution!"""
        Base.metadata.drop_all(bind=self.engine)
        logger.warning("Database tables dropped from: %s", self.database_url)

    def get_session(self) -> Session:
        """
        Get a new database session.

        The caller closes it; prefer the session() context manager.
        """
        return self.SessionLocal()

    @contextmanager
    def session(self) -> Generator[Session, None, None]:
        """
        Context manager for database sessions.

        Automatically commits on success and rolls back on exception.

        Usage:
            with db_manager.session() as session:
                # ... use session ...
        """
        session = self.SessionLocal()
        try:
            yield session
            session.commit()
        except Exception:
            session.rollback()
            raise
        finally:
            session.close()


# Global database manager instance
_db_manager = None


def get_db_manager(database_url: Optional[str] = None) -> DatabaseManager:
    """
    Get or create global database manager instance.

    Args:
        database_url: Optional database URL. Only used on first call.
    """
    global _db_manager
    if _db_manager is None:
        _db_manager = DatabaseManager(database_url)
    return _db_manager


def init_database(database_url: Optional[str] = None) -> DatabaseManager:
    """
    Initialize database by creating all tables.

    Args:
        database_url: Optional database URL
    """
    db_manager = get_db_manager(database_url)
    db_manager.create_tables()
    return db_manager


@contextmanager
def session_scope() -> Generator[Session, None, None]:
    """
    Context manager for database sessions using global manager.

    Usage:
        with session_scope() as session:
            repo = ProcessedDocumentRepository(session)
    """
    with get_db_manager().session() as session:
        yield session
