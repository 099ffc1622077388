"""
db/session.py

Engine and session wiring for the batch store.

Pool sizing comes from the environment (DB_POOL_SIZE, DB_MAX_OVERFLOW,
DB_POOL_RECYCLE, SQL_ECHO) and is read once, when the engine is first built.
"""

from __future__ import annotations

import os
from collections.abc import Generator
from dataclasses import dataclass
from functools import lru_cache

from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, sessionmaker

from db.config import resolve_database_url

_TRUTHY = {"1", "true", "yes", "on"}


@dataclass(frozen=True)
class PoolSettings:
    pool_size: int = 5
    max_overflow: int = 10
    pool_recycle: int = 1800
    echo: bool = False

    @classmethod
    def from_env(cls) -> "PoolSettings":
        defaults = cls()
        return cls(
            pool_size=_env_int("DB_POOL_SIZE", defaults.pool_size),
            max_overflow=_env_int("DB_MAX_OVERFLOW", defaults.max_overflow),
            pool_recycle=_env_int("DB_POOL_RECYCLE", defaults.pool_recycle),
            echo=os.getenv("SQL_ECHO", "").strip().lower() in _TRUTHY,
        )


def _env_int(name: str, default: int) -> int:
    raw = os.getenv(name, "").strip()
    if not raw:
        return default
    try:
        return int(raw)
    except ValueError:
        return default


def create_db_engine(pool: PoolSettings | None = None) -> Engine:
    database_url = resolve_database_url()
    if not database_url.startswith("postgresql"):
        raise RuntimeError("The batch store requires a PostgreSQL URL.")

    pool = pool or PoolSettings.from_env()
    return create_engine(
        database_url,
        echo=pool.echo,
        pool_pre_ping=True,
        pool_size=pool.pool_size,
        max_overflow=pool.max_overflow,
        pool_recycle=pool.pool_recycle,
    )


@lru_cache(maxsize=1)
def get_engine() -> Engine:
    """Shared engine, built on first use."""
    return create_db_engine()


@lru_cache(maxsize=1)
def _session_factory() -> sessionmaker[Session]:
    # Rows are committed one by one during an import; keep loaded
    # attributes readable after each commit.
    return sessionmaker(bind=get_engine(), autoflush=False, expire_on_commit=False)


def SessionLocal() -> Session:
    return _session_factory()()


def get_db() -> Generator[Session, None, None]:
    """FastAPI dependency: one session per request, always closed."""
    with SessionLocal() as db:
        yield db
