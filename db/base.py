"""
db/base.py

Declarative base and shared column mixins for the account registry models.

Constraint and index names follow NAMING_CONVENTION so that the names
produced by Base.metadata match the ones written in the Alembic revisions
(ck_accounts_status, ix_accounts_status, ...).
"""

from datetime import datetime, timezone
from typing import Any

from sqlalchemy import DateTime, MetaData, func
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column

NAMING_CONVENTION: dict[str, str] = {
    "ix": "ix_%(table_name)s_%(column_0_name)s",
    "uq": "uq_%(table_name)s_%(column_0_name)s",
    "ck": "ck_%(table_name)s_%(constraint_name)s",
    "fk": "fk_%(table_name)s_%(column_0_name)s_%(referred_table_name)s",
    "pk": "pk_%(table_name)s",
}


class Base(DeclarativeBase):
    """
    Declarative base for the account tables; Alembic autogenerate compares
    against its metadata.
    """

    metadata = MetaData(naming_convention=NAMING_CONVENTION)

    # Every timestamp column is stored timezone-aware.
    type_annotation_map: dict[type, Any] = {
        datetime: DateTime(timezone=True),
    }


class TimestampMixin:
    """
    Audit columns for rows that are edited after creation.

    Both columns are filled by the database on INSERT. updated_at moves on
    every ORM UPDATE, which for accounts means a status change.
    """

    created_at: Mapped[datetime] = mapped_column(server_default=func.now())

    updated_at: Mapped[datetime] = mapped_column(
        server_default=func.now(),
        onupdate=lambda: datetime.now(timezone.utc),
    )
