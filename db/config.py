"""
db/config.py

Database URL resolution shared by the API and migrations.

Lookup order: DATABASE_URL, then CLOUD_DATABASE_URL when ENVIRONMENT names a
hosted deployment, then LOCAL_DATABASE_URL. `.env` and `.env.local` at the
project root are read first; they never override variables already set.
"""

from __future__ import annotations

import os
from pathlib import Path

PROJECT_ROOT = Path(__file__).resolve().parents[1]
_ENV_FILES = (".env", ".env.local")
_CLOUD_ENVIRONMENTS = {"prod", "production", "staging", "cloud"}
_DRIVER_PREFIXES = ("postgres://", "postgresql://")


def _read_env_file(path: Path) -> dict[str, str]:
    pairs: dict[str, str] = {}
    for raw_line in path.read_text(encoding="utf-8").splitlines():
        line = raw_line.strip()
        if not line or line.startswith("#") or "=" not in line:
            continue
        key, _, value = line.partition("=")
        key = key.strip()
        if key:
            pairs[key] = value.strip().strip("\"'")
    return pairs


def load_env_files() -> None:
    for filename in _ENV_FILES:
        path = PROJECT_ROOT / filename
        if path.is_file():
            for key, value in _read_env_file(path).items():
                os.environ.setdefault(key, value)


def normalize_postgres_url(url: str) -> str:
    """Pin bare postgres URLs to the psycopg (v3) driver."""
    for prefix in _DRIVER_PREFIXES:
        if url.startswith(prefix):
            return "postgresql+psycopg://" + url[len(prefix):]
    return url


def resolve_database_url() -> str:
    load_env_files()

    environment = os.getenv("ENVIRONMENT", "local").strip().lower()
    candidates = [os.getenv("DATABASE_URL")]
    if environment in _CLOUD_ENVIRONMENTS:
        candidates.append(os.getenv("CLOUD_DATABASE_URL"))
    candidates.append(os.getenv("LOCAL_DATABASE_URL"))

    for url in candidates:
        if url:
            return normalize_postgres_url(url)

    raise RuntimeError(
        "No database URL configured. Set DATABASE_URL, or configure "
        "LOCAL_DATABASE_URL / CLOUD_DATABASE_URL."
    )
