"""
app/api/dependencies.py

Shared FastAPI dependencies for the account endpoints.
"""

from __future__ import annotations

from fastapi import Depends, File, HTTPException, UploadFile, status
from sqlalchemy.orm import Session

from app.validators.account_validator import AccountRecordValidator
from db.repositories.account_repository import AccountStore, SqlAlchemyAccountStore
from db.session import get_db

_VALIDATOR = AccountRecordValidator()


def get_account_store(db: Session = Depends(get_db)) -> AccountStore:
    """
    Request-scoped account store bound to the request's DB session.
    """

    return SqlAlchemyAccountStore(db)


def get_account_validator() -> AccountRecordValidator:
    return _VALIDATOR


def get_import_upload(file: UploadFile | None = File(default=None)) -> UploadFile:
    """
    Require the multipart ``file`` field of an import request.

    The file content itself is judged by the payload decoder, not by its
    name or MIME type.
    """

    if file is None:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail={"message": "No file provided.", "accounts": []},
        )
    return file
