"""
app/config.py

Application-level configuration helpers.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from functools import lru_cache

from db.config import load_env_files

DEFAULT_MAX_UPLOAD_BYTES = 5 * 1024 * 1024
DEFAULT_MAX_IMPORT_RECORDS = 10_000
DEFAULT_MAX_NESTING_DEPTH = 32


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


def _get_str_env(name: str, default: str) -> str:
    _load_env_once()
    value = os.getenv(name)
    if value is None:
        return default
    stripped = value.strip()
    return stripped if stripped else default


@dataclass(frozen=True)
class AppSettings:
    """
    Process-level settings for the API.
    """

    log_level: str = "INFO"
    api_title: str = "Account Registry API"


@dataclass(frozen=True)
class AccountImportSettings:
    """
    Runtime limits for bulk account import.
    """

    max_upload_bytes: int = DEFAULT_MAX_UPLOAD_BYTES
    max_candidates: int = DEFAULT_MAX_IMPORT_RECORDS
    max_nesting_depth: int = DEFAULT_MAX_NESTING_DEPTH
    log_failures: bool = True


@lru_cache(maxsize=1)
def get_app_settings() -> AppSettings:
    """
    Return cached application settings.
    """

    return AppSettings(
        log_level=_get_str_env("LOG_LEVEL", "INFO").upper(),
        api_title=_get_str_env("API_TITLE", "Account Registry API"),
    )


@lru_cache(maxsize=1)
def get_account_import_settings() -> AccountImportSettings:
    """
    Return cached account import settings from environment variables.
    """

    return AccountImportSettings(
        max_upload_bytes=max(1, _get_int_env("ACCOUNT_IMPORT_MAX_UPLOAD_BYTES", DEFAULT_MAX_UPLOAD_BYTES)),
        max_candidates=max(1, _get_int_env("ACCOUNT_IMPORT_MAX_RECORDS", DEFAULT_MAX_IMPORT_RECORDS)),
        max_nesting_depth=max(1, _get_int_env("ACCOUNT_IMPORT_MAX_DEPTH", DEFAULT_MAX_NESTING_DEPTH)),
        log_failures=_get_bool_env("ACCOUNT_IMPORT_LOG_FAILURES", True),
    )
