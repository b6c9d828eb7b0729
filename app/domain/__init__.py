"""
app/domain package marker.
"""

from app.domain.account_import import (
    ROOT_FIELD,
    FieldViolation,
    ImportFailure,
    ImportFailureKind,
    ImportReport,
    StatsSummary,
    summarize_violations,
)

__all__ = [
    "ROOT_FIELD",
    "FieldViolation",
    "ImportFailure",
    "ImportFailureKind",
    "ImportReport",
    "StatsSummary",
    "summarize_violations",
]
