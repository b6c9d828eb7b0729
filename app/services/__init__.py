"""
app/services package marker.
"""

from app.services.account_import_service import AccountImportService, get_account_import_service
from app.services.account_stats_service import compute_account_stats

__all__ = [
    "AccountImportService",
    "compute_account_stats",
    "get_account_import_service",
]
