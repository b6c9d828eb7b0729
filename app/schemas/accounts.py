"""
app/schemas/accounts.py

Request and response schemas for the account endpoints.

AccountCreate and AccountStatusUpdate double as the record schema used by
the import pipeline, so they forbid unknown fields.
"""

from __future__ import annotations

from datetime import datetime
from typing import Annotated, Any

from pydantic import BaseModel, ConfigDict, Field, StringConstraints
from pydantic.alias_generators import to_camel

from app.domain.account_import import ImportReport
from db.models.account import DEFAULT_ACCOUNT_STATUS, AccountStatus

_EMAIL_PATTERN = r"^[^@\s]+@[^@\s]+\.[^@\s]+$"

AccountName = Annotated[
    str,
    StringConstraints(strict=True, strip_whitespace=True, min_length=1, max_length=255),
]
AccountEmail = Annotated[
    str,
    StringConstraints(strict=True, strip_whitespace=True, max_length=255, pattern=_EMAIL_PATTERN),
]
AccountPhone = Annotated[
    str,
    StringConstraints(strict=True, strip_whitespace=True, max_length=50),
]
AccountCompany = Annotated[
    str,
    StringConstraints(strict=True, strip_whitespace=True, max_length=255),
]


class AccountCreate(BaseModel):
    """
    Normalized account creation payload.
    """

    model_config = ConfigDict(extra="forbid")

    name: AccountName
    email: AccountEmail | None = None
    phone: AccountPhone | None = None
    company: AccountCompany | None = None
    status: AccountStatus = DEFAULT_ACCOUNT_STATUS


class AccountStatusUpdate(BaseModel):
    model_config = ConfigDict(extra="forbid")

    status: AccountStatus


class _CamelModel(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )


class AccountResponse(_CamelModel):
    id: int
    name: str
    email: str | None = None
    phone: str | None = None
    company: str | None = None
    status: AccountStatus
    created_at: datetime | None = None
    updated_at: datetime | None = None


class FieldViolationResponse(_CamelModel):
    field: str
    reason: str


class ImportErrorDetailResponse(_CamelModel):
    """
    One rejected import candidate, echoed back unchanged for inspection.
    """

    account: Any = None
    kind: str
    error: str
    violations: list[FieldViolationResponse] = Field(default_factory=list)


class ImportReportResponse(_CamelModel):
    """
    API response model for one bulk import run.
    """

    imported: int = Field(..., ge=0)
    errors: int = Field(..., ge=0)
    accounts: list[AccountResponse] = Field(default_factory=list)
    error_details: list[ImportErrorDetailResponse] = Field(default_factory=list)

    @classmethod
    def from_report(cls, report: ImportReport) -> ImportReportResponse:
        return cls(
            imported=report.imported,
            errors=report.errors,
            accounts=[AccountResponse.model_validate(account) for account in report.accounts],
            error_details=[
                ImportErrorDetailResponse(
                    account=failure.candidate,
                    kind=failure.kind,
                    error=failure.message,
                    violations=[
                        FieldViolationResponse(field=violation.field, reason=violation.reason)
                        for violation in failure.violations
                    ],
                )
                for failure in report.error_details
            ],
        )


class StatsSummaryResponse(_CamelModel):
    total: int = Field(..., ge=0)
    by_status: dict[str, int]
