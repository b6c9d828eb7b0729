"""
Model package exports.

Import every SQLAlchemy model here so metadata registration and Alembic
autogeneration work without extra imports.
"""

from db.models.account import ACCOUNT_STATUS_VALUES, DEFAULT_ACCOUNT_STATUS, Account, AccountStatus

__all__ = [
    "ACCOUNT_STATUS_VALUES",
    "DEFAULT_ACCOUNT_STATUS",
    "Account",
    "AccountStatus",
]
