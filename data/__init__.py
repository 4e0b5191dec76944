"""Data access layer - Audit store models, connections and repositories."""

from .db_models import Base, ProcessedDocumentRecord, ElementRecord
from .database import (
    DatabaseManager,
    get_db_manager,
    session_scope,
    init_database,
)
from .repositories import ProcessedDocumentRepository

__all__ = [
    # Models
    'Base',
    'ProcessedDocumentRecord',
    'ElementRecord',

    # Database
    'DatabaseManager',
    'get_db_manager',
    'session_scope',
    'init_database',

    # Repositories
    'ProcessedDocumentRepository',
]
