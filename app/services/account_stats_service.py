"""
app/services/account_stats_service.py

Per-status account counts, computed fresh from the store on every call.
"""

from __future__ import annotations

from collections import Counter

from app.domain.account_import import StatsSummary
from db.models.account import AccountStatus
from db.repositories.account_repository import AccountStore


def compute_account_stats(store: AccountStore) -> StatsSummary:
    """
    Count accounts per status.

    Every AccountStatus value is present in the result, with 0 when no
    account has it, so the per-status counts always sum to the total.

    Raises:
        AccountStoreError: the store could not be read.
        ValueError:        an account carries a status outside AccountStatus.
    """

    accounts = store.get_all_accounts()
    counts = Counter(AccountStatus(account.status).value for account in accounts)
    by_status = {status.value: counts.get(status.value, 0) for status in AccountStatus}
    return StatsSummary(total=len(accounts), by_status=by_status)
