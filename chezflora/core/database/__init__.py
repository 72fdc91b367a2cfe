"""
Storefront persistence layer.

- entities/: SQLModel tables, one module per aggregate (catalog, carts, orders...)
- repositories/: flush-only data access used by the server services
- session.py: process-wide engine, session factory and the ``get_session`` dependency
- utils.py: engine/session factories and table creation
"""

from . import entities
from .base import Base
from .session import async_session_maker, engine, get_session, init_db
from .utils import create_all, create_engine, create_sessionmaker, normalize_url

__all__ = [
    "Base",
    "async_session_maker",
    "create_all",
    "create_engine",
    "create_sessionmaker",
    "engine",
    "entities",
    "get_session",
    "init_db",
    "normalize_url",
]
