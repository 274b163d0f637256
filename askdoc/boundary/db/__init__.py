"""
Metadata database boundary.

SQLAlchemy async engine, ORM models and CRUD for collections, sites,
sessions, messages and ingestion jobs.
"""

from askdoc.boundary.db.base import Base
from askdoc.boundary.db.connection import (
    create_tables,
    get_async_db,
    get_async_engine,
    get_async_session_factory,
)

__all__ = [
    "Base",
    "create_tables",
    "get_async_db",
    "get_async_engine",
    "get_async_session_factory",
]
