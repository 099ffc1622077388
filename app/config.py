"""
app/config.py

Application-level configuration helpers.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from functools import lru_cache

from db.config import load_env_files


@lru_cache(maxsize=1)
def _load_env_once() -> None:
    """
    Ensure project `.env` files are loaded once before reading app settings.
    """

    load_env_files()


def _get_bool_env(name: str, default: bool) -> bool:
    """
    Read a boolean from environment variables with safe fallback.
    """

    _load_env_once()
    raw_value = os.getenv(name)
    if raw_value is None:
        return default
    return raw_value.strip().lower() in {"1", "true", "yes", "on"}


def _get_int_env(name: str, default: int) -> int:
    """
    Read an integer from environment variables with safe fallback.
    """

    _load_env_once()
    raw_value = os.getenv(name)
    if raw_value is None:
        return default
    try:
        return int(raw_value)
    except ValueError:
        return default


@dataclass(frozen=True)
class BatchImportSettings:
    """
    Runtime settings for controller batch imports and linking.
    """

    candidate_limit: int = 100
    retained_candidates: int = 5
    log_validation_errors: bool = True
    reject_duplicates: bool = False


@lru_cache(maxsize=1)
def get_batch_import_settings() -> BatchImportSettings:
    """
    Return cached batch import settings from environment variables.
    """

    return BatchImportSettings(
        candidate_limit=max(1, _get_int_env("BATCH_IMPORT_CANDIDATE_LIMIT", 100)),
        retained_candidates=max(1, _get_int_env("BATCH_IMPORT_RETAINED_CANDIDATES", 5)),
        log_validation_errors=_get_bool_env("BATCH_IMPORT_LOG_VALIDATION_ERRORS", True),
        reject_duplicates=_get_bool_env("BATCH_IMPORT_REJECT_DUPLICATES", False),
    )
