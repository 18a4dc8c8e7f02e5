"""Database connection pool and schema initialization."""

from src.shared.db.connection import ConnectionPool
from src.shared.db.schema import init_quality_gates_db

__all__ = [
    "ConnectionPool",
    "init_quality_gates_db",
]
