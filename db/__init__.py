"""db package exports for the project's database layer.

This file makes the `db` directory a package and re-exports commonly used
symbols to simplify imports in scripts (e.g. `from db import Store`).
"""
from .models import Base  # noqa: F401
from .session import get_session, engine  # noqa: F401
from .store import Store, AssetNotFound  # noqa: F401

__all__ = ["Base", "get_session", "engine", "Store", "AssetNotFound"]
