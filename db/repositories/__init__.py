"""
Repository layer exports.
"""

from db.repositories.account_repository import AccountStore, SqlAlchemyAccountStore
from db.repositories.errors import (
    AccountRepositoryError,
    AccountStoreError,
)

__all__ = [
    "AccountStore",
    "SqlAlchemyAccountStore",
    "AccountRepositoryError",
    "AccountStoreError",
]
