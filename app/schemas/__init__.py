"""
app/schemas package marker.
"""

from app.schemas.accounts import (
    AccountCreate,
    AccountResponse,
    AccountStatusUpdate,
    FieldViolationResponse,
    ImportErrorDetailResponse,
    ImportReportResponse,
    StatsSummaryResponse,
)

__all__ = [
    "AccountCreate",
    "AccountResponse",
    "AccountStatusUpdate",
    "FieldViolationResponse",
    "ImportErrorDetailResponse",
    "ImportReportResponse",
    "StatsSummaryResponse",
]
