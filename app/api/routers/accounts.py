"""
app/api/routers/accounts.py

Account CRUD, bulk import and statistics endpoints.
"""

from __future__ import annotations

import logging
from typing import Any

from fastapi import APIRouter, Body, Depends, HTTPException, Response, UploadFile, status

from app.api.dependencies import get_account_store, get_account_validator, get_import_upload
from app.domain.account_import import FieldViolation
from app.parsers.literal_parser import MalformedPayloadError
from app.schemas.accounts import (
    AccountResponse,
    ImportReportResponse,
    StatsSummaryResponse,
)
from app.services.account_import_service import AccountImportService, get_account_import_service
from app.services.account_stats_service import compute_account_stats
from app.validators.account_validator import AccountRecordValidator
from db.repositories.account_repository import AccountStore
from db.repositories.errors import AccountStoreError

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/accounts", tags=["accounts"])

_MAX_ACCOUNT_ID = 2**31 - 1


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _invalid_data(violations: list[FieldViolation]) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_400_BAD_REQUEST,
        detail={
            "message": "Invalid data.",
            "errors": [{"field": v.field, "reason": v.reason} for v in violations],
        },
    )


def _account_not_found() -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_404_NOT_FOUND,
        detail="Account not found.",
    )


def _parse_account_id(raw: str) -> int:
    # accounts.id is a 32-bit serial; anything else cannot name an account.
    if not (raw.isascii() and raw.isdigit()) or len(raw) > 10 or int(raw) > _MAX_ACCOUNT_ID:
        raise _account_not_found()
    return int(raw)


# ---------------------------------------------------------------------------
# Endpoints
# ---------------------------------------------------------------------------


@router.get("", response_model=list[AccountResponse])
def list_accounts(
    store: AccountStore = Depends(get_account_store),
) -> list[AccountResponse]:
    try:
        accounts = store.get_all_accounts()
    except AccountStoreError as exc:
        logger.exception("Failed to fetch accounts")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to fetch accounts.",
        ) from exc
    return [AccountResponse.model_validate(account) for account in accounts]


@router.post(
    "",
    response_model=AccountResponse,
    status_code=status.HTTP_201_CREATED,
)
def create_account(
    body: Any = Body(default=None),
    store: AccountStore = Depends(get_account_store),
    validator: AccountRecordValidator = Depends(get_account_validator),
) -> AccountResponse:
    """
    Create one account.

    Raises HTTP 400 with per-field violations when the body does not match
    the account schema.
    """
    payload, violations = validator.validate(body)
    if payload is None:
        raise _invalid_data(violations)

    try:
        account = store.create_account(payload)
    except AccountStoreError as exc:
        logger.exception("Failed to create account")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to create account.",
        ) from exc
    return AccountResponse.model_validate(account)


@router.post("/import", response_model=ImportReportResponse)
def import_accounts(
    file: UploadFile = Depends(get_import_upload),
    store: AccountStore = Depends(get_account_store),
    import_service: AccountImportService = Depends(get_account_import_service),
) -> ImportReportResponse:
    """
    Import accounts from an uploaded JSON / JavaScript data file.

    A batch where some records fail is still a 200; the failures are listed
    in errorDetails. Only an unreadable payload turns into a 400.
    """

    try:
        report = import_service.import_upload(upload_file=file, store=store)
    except MalformedPayloadError as exc:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=exc.to_dict(),
        ) from exc
    except Exception as exc:  # noqa: BLE001
        logger.exception("Account import failed")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to import accounts.",
        ) from exc
    finally:
        file.file.close()

    return ImportReportResponse.from_report(report)


@router.get("/stats", response_model=StatsSummaryResponse)
def account_stats(
    store: AccountStore = Depends(get_account_store),
) -> StatsSummaryResponse:
    try:
        summary = compute_account_stats(store)
    except (AccountStoreError, ValueError) as exc:
        logger.exception("Failed to compute account statistics")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to fetch statistics.",
        ) from exc
    return StatsSummaryResponse(total=summary.total, by_status=summary.by_status)


@router.patch("/{account_id}/status", response_model=AccountResponse)
def update_account_status(
    account_id: str,
    body: Any = Body(default=None),
    store: AccountStore = Depends(get_account_store),
    validator: AccountRecordValidator = Depends(get_account_validator),
) -> AccountResponse:
    """
    Change the status of one account.

    The body is validated before the lookup, so an invalid status is a 400
    even for unknown ids.
    """
    update, violations = validator.validate_status_update(body)
    if update is None:
        raise _invalid_data(violations)

    parsed_id = _parse_account_id(account_id)
    try:
        account = store.update_account_status(parsed_id, update.status)
    except AccountStoreError as exc:
        logger.exception("Failed to update account id=%s", parsed_id)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to update account.",
        ) from exc

    if account is None:
        raise _account_not_found()
    return AccountResponse.model_validate(account)


@router.delete(
    "/{account_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    response_class=Response,
)
def delete_account(
    account_id: str,
    store: AccountStore = Depends(get_account_store),
) -> Response:
    parsed_id = _parse_account_id(account_id)
    try:
        deleted = store.delete_account(parsed_id)
    except AccountStoreError as exc:
        logger.exception("Failed to delete account id=%s", parsed_id)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to delete account.",
        ) from exc

    if not deleted:
        raise _account_not_found()
    return Response(status_code=status.HTTP_204_NO_CONTENT)
