"""
app/domain/account_import.py

Domain models produced by the account import and stats flows.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from db.models.account import Account

ROOT_FIELD = "(root)"


class ImportFailureKind:
    VALIDATION = "validation"
    STORE = "store"


@dataclass(frozen=True)
class FieldViolation:
    """
    One field-level schema violation.
    """

    field: str
    reason: str


@dataclass(frozen=True)
class ImportFailure:
    """
    One rejected import candidate together with why it was rejected.

    candidate is the untouched decoded value so operators can inspect it.
    """

    candidate: Any
    kind: str
    message: str
    violations: list[FieldViolation] = field(default_factory=list)


@dataclass(frozen=True)
class ImportReport:
    """
    End-of-run import report.

    accounts and error_details are both in input order and together cover
    every processed candidate exactly once.
    """

    accounts: list[Account] = field(default_factory=list)
    error_details: list[ImportFailure] = field(default_factory=list)

    @property
    def imported(self) -> int:
        return len(self.accounts)

    @property
    def errors(self) -> int:
        return len(self.error_details)

    @property
    def total(self) -> int:
        return self.imported + self.errors


@dataclass(frozen=True)
class StatsSummary:
    total: int
    by_status: dict[str, int]


def summarize_violations(violations: list[FieldViolation]) -> str:
    """
    Render violations as one human-readable line.
    """

    return "; ".join(f"{violation.field}: {violation.reason}" for violation in violations)
