"""Database infrastructure helpers (engine, schema, repositories)."""

from .base import Base
from .session import build_engine, dispose_engine, get_engine, init_db

__all__ = ["Base", "build_engine", "dispose_engine", "get_engine", "init_db"]
