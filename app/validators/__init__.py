"""
app/validators package marker.
"""

from app.validators.account_validator import AccountRecordValidator

__all__ = [
    "AccountRecordValidator",
]
