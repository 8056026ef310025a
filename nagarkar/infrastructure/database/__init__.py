"""Database access: declarative base, async sessions and the generic repository."""

from nagarkar.infrastructure.database.base import Base, BaseModel
from nagarkar.infrastructure.database.dependencies import DatabaseSession, get_db
from nagarkar.infrastructure.database.repository import BaseRepository
from nagarkar.infrastructure.database.session import (
    check_database_connection,
    close_database,
    create_database_engine,
    create_tables,
    get_async_session,
    get_engine,
    get_session_factory,
)

__all__ = [
    "Base",
    "BaseModel",
    "BaseRepository",
    "DatabaseSession",
    "check_database_connection",
    "close_database",
    "create_database_engine",
    "create_tables",
    "get_async_session",
    "get_db",
    "get_engine",
    "get_session_factory",
]
