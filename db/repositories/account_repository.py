"""
Account store contract and its SQLAlchemy implementation.

Every mutating call runs in its own transaction. Callers must not assume
atomicity across calls; a bulk import is a sequence of independent creates.
"""

from __future__ import annotations

import logging
from typing import Protocol

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from app.schemas.accounts import AccountCreate
from db.models.account import Account, AccountStatus
from db.repositories.errors import AccountStoreError

logger = logging.getLogger(__name__)


class AccountStore(Protocol):
    """
    Operations the API and the import pipeline depend on.

    Any method may raise AccountStoreError.
    """

    def create_account(self, payload: AccountCreate) -> Account:
        ...

    def get_all_accounts(self) -> list[Account]:
        ...

    def get_account(self, account_id: int) -> Account | None:
        ...

    def update_account_status(self, account_id: int, status: AccountStatus) -> Account | None:
        ...

    def delete_account(self, account_id: int) -> bool:
        ...


class SqlAlchemyAccountStore:
    """
    Account store backed by one SQLAlchemy session (caller owns lifecycle).
    """

    def __init__(self, session: Session) -> None:
        self._session = session

    def create_account(self, payload: AccountCreate) -> Account:
        account = Account(
            name=payload.name,
            email=payload.email,
            phone=payload.phone,
            company=payload.company,
            status=payload.status.value,
        )
        try:
            self._session.add(account)
            self._session.commit()
            self._session.refresh(account)
        except SQLAlchemyError as exc:
            self._session.rollback()
            raise AccountStoreError(f"Failed to create account: {self._describe(exc)}") from exc
        return account

    def get_all_accounts(self) -> list[Account]:
        try:
            return list(self._session.scalars(select(Account).order_by(Account.id)).all())
        except SQLAlchemyError as exc:
            self._session.rollback()
            raise AccountStoreError("Failed to fetch accounts.") from exc

    def get_account(self, account_id: int) -> Account | None:
        try:
            return self._session.get(Account, account_id)
        except SQLAlchemyError as exc:
            self._session.rollback()
            raise AccountStoreError(f"Failed to fetch account {account_id}.") from exc

    def update_account_status(self, account_id: int, status: AccountStatus) -> Account | None:
        try:
            account = self._session.get(Account, account_id)
            if account is None:
                return None
            account.status = status.value
            self._session.commit()
            self._session.refresh(account)
        except SQLAlchemyError as exc:
            self._session.rollback()
            raise AccountStoreError(f"Failed to update account {account_id}.") from exc
        return account

    def delete_account(self, account_id: int) -> bool:
        try:
            account = self._session.get(Account, account_id)
            if account is None:
                return False
            self._session.delete(account)
            self._session.commit()
        except SQLAlchemyError as exc:
            self._session.rollback()
            raise AccountStoreError(f"Failed to delete account {account_id}.") from exc
        logger.info("Deleted account id=%s", account_id)
        return True

    @staticmethod
    def _describe(exc: SQLAlchemyError) -> str:
        # DBAPI errors carry the driver message on .orig
        original = getattr(exc, "orig", None)
        lines = str(original if original is not None else exc).strip().splitlines()
        return lines[0] if lines else type(exc).__name__
