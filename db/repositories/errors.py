"""
Repository-layer exceptions for account storage.
"""

from __future__ import annotations


class AccountRepositoryError(Exception):
    """Base exception for account repository failures."""


class AccountStoreError(AccountRepositoryError):
    """Raised when the store cannot complete a read or write."""

