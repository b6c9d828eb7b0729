"""
Shared fixtures: an in-memory account store, a TestClient wired to it, and
a SQLite-backed session for repository tests.
"""

from __future__ import annotations

from collections.abc import Iterable, Iterator
from datetime import datetime, timezone

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from app.api.dependencies import get_account_store
from app.api.routers import accounts_router
from app.schemas.accounts import AccountCreate
from app.services.account_import_service import AccountImportService, get_account_import_service
from db.base import Base
from db.models.account import Account, AccountStatus
from db.repositories.errors import AccountStoreError


class FakeAccountStore:
    """
    Dict-backed AccountStore that records how often it was written to.
    """

    def __init__(
        self,
        *,
        fail_on_names: Iterable[str] = (),
        fail_reads: bool = False,
    ) -> None:
        self.accounts: dict[int, Account] = {}
        self.create_calls = 0
        self._next_id = 1
        self._fail_on_names = set(fail_on_names)
        self._fail_reads = fail_reads

    def create_account(self, payload: AccountCreate) -> Account:
        self.create_calls += 1
        if payload.name in self._fail_on_names:
            raise AccountStoreError(f"Failed to create account: duplicate name {payload.name!r}")

        now = datetime.now(timezone.utc)
        account = Account(
            id=self._next_id,
            name=payload.name,
            email=payload.email,
            phone=payload.phone,
            company=payload.company,
            status=payload.status.value,
            created_at=now,
            updated_at=now,
        )
        self.accounts[account.id] = account
        self._next_id += 1
        return account

    def get_all_accounts(self) -> list[Account]:
        if self._fail_reads:
            raise AccountStoreError("Failed to fetch accounts.")
        return [self.accounts[key] for key in sorted(self.accounts)]

    def get_account(self, account_id: int) -> Account | None:
        return self.accounts.get(account_id)

    def update_account_status(self, account_id: int, status: AccountStatus) -> Account | None:
        account = self.accounts.get(account_id)
        if account is None:
            return None
        account.status = status.value
        account.updated_at = datetime.now(timezone.utc)
        return account

    def delete_account(self, account_id: int) -> bool:
        return self.accounts.pop(account_id, None) is not None


@pytest.fixture()
def store() -> FakeAccountStore:
    return FakeAccountStore()


@pytest.fixture()
def import_service() -> AccountImportService:
    return AccountImportService(
        max_upload_bytes=64 * 1024,
        max_candidates=100,
        max_nesting_depth=8,
        log_failures=True,
    )


@pytest.fixture()
def client(store: FakeAccountStore, import_service: AccountImportService) -> Iterator[TestClient]:
    application = FastAPI()
    application.include_router(accounts_router)
    application.dependency_overrides[get_account_store] = lambda: store
    application.dependency_overrides[get_account_import_service] = lambda: import_service
    with TestClient(application) as test_client:
        yield test_client


@pytest.fixture()
def sqlite_session() -> Iterator[Session]:
    engine = create_engine(
        "sqlite+pysqlite:///:memory:",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(engine)
    factory = sessionmaker(bind=engine, class_=Session, autoflush=False)
    session = factory()
    try:
        yield session
    finally:
        session.close()
        Base.metadata.drop_all(engine)
        engine.dispose()
