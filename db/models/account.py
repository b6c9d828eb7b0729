"""
db/models/account.py

Account model: one customer account record managed through the API or
created in bulk by the import pipeline.
"""

from __future__ import annotations

from enum import Enum

from sqlalchemy import CheckConstraint, Index, Integer, String
from sqlalchemy.orm import Mapped, mapped_column

from db.base import Base, TimestampMixin


class AccountStatus(str, Enum):
    ACTIVE = "active"
    INACTIVE = "inactive"
    PENDING = "pending"


ACCOUNT_STATUS_VALUES: tuple[str, ...] = tuple(member.value for member in AccountStatus)
DEFAULT_ACCOUNT_STATUS = AccountStatus.ACTIVE


class Account(Base, TimestampMixin):
    """
    Persisted account.

    The integer id is assigned by the database. status is stored as plain
    text but constrained to the AccountStatus values at the table level.
    """

    __tablename__ = "accounts"

    id: Mapped[int] = mapped_column(
        Integer,
        primary_key=True,
        autoincrement=True,
    )

    name: Mapped[str] = mapped_column(
        String(255),
        nullable=False,
    )

    email: Mapped[str | None] = mapped_column(
        String(255),
        nullable=True,
    )

    phone: Mapped[str | None] = mapped_column(
        String(50),
        nullable=True,
    )

    company: Mapped[str | None] = mapped_column(
        String(255),
        nullable=True,
    )

    status: Mapped[str] = mapped_column(
        String(32),
        nullable=False,
        default=DEFAULT_ACCOUNT_STATUS.value,
        comment="active, inactive, pending",
    )

    __table_args__ = (
        CheckConstraint(
            f"status IN ({', '.join(repr(value) for value in ACCOUNT_STATUS_VALUES)})",
            name="status",
        ),
        Index("ix_accounts_status", "status"),
        Index("ix_accounts_name", "name"),
    )

    def __repr__(self) -> str:
        return f"<Account id={self.id} name={self.name!r} status={self.status!r}>"
