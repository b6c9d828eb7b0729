"""
app/services/account_import_service.py

Service layer for bulk account import.

Flow per request:

    raw upload -> decode_account_payload -> candidates
    for each candidate, in order:
        AccountRecordValidator.validate -> AccountStore.create_account

Decoding is all-or-nothing: a MalformedPayloadError aborts the request before
any candidate reaches the store. Per-candidate failures (schema violations
or store errors) are recorded in the report and never stop the loop. There
is no batch transaction; accounts created before an aborted request stay
persisted.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence
from functools import lru_cache
from typing import Any

from fastapi import UploadFile

from app.config import get_account_import_settings
from app.domain.account_import import (
    FieldViolation,
    ImportFailure,
    ImportFailureKind,
    ImportReport,
    summarize_violations,
)
from app.logging_utils import log_event
from app.parsers.literal_parser import DEFAULT_MAX_DEPTH, MalformedPayloadError, decode_account_payload
from app.validators.account_validator import AccountRecordValidator
from db.models.account import Account
from db.repositories.account_repository import AccountStore
from db.repositories.errors import AccountStoreError

logger = logging.getLogger(__name__)


class AccountImportService:
    """
    Coordinates payload decoding, record validation and account creation.
    """

    def __init__(
        self,
        *,
        max_upload_bytes: int | None = None,
        max_candidates: int | None = None,
        max_nesting_depth: int = DEFAULT_MAX_DEPTH,
        log_failures: bool = True,
        validator: AccountRecordValidator | None = None,
    ) -> None:
        self._max_upload_bytes = max_upload_bytes
        self._max_candidates = max_candidates
        self._max_nesting_depth = max(1, max_nesting_depth)
        self._log_failures = log_failures
        self._validator = validator or AccountRecordValidator()

    def import_upload(self, *, upload_file: UploadFile, store: AccountStore) -> ImportReport:
        """
        Read an uploaded file (bounded by the size limit) and import it.
        """

        raw_file = upload_file.file
        raw_file.seek(0)
        if self._max_upload_bytes is None:
            raw = raw_file.read()
        else:
            # one byte past the limit is enough to detect an oversized upload
            raw = raw_file.read(self._max_upload_bytes + 1)
        logger.info(
            "Account import upload received filename=%r bytes=%d",
            upload_file.filename,
            len(raw),
        )
        return self.import_payload(raw=raw, store=store)

    def import_payload(self, *, raw: bytes | str, store: AccountStore) -> ImportReport:
        """
        Decode an uploaded payload and import every candidate it contains.

        Raises:
            MalformedPayloadError: the payload could not be decoded, or holds
                                   more candidates than allowed. No account
                                   is created in that case.
        """

        candidates = decode_account_payload(
            raw,
            max_bytes=self._max_upload_bytes,
            max_depth=self._max_nesting_depth,
        )
        if self._max_candidates is not None and len(candidates) > self._max_candidates:
            raise MalformedPayloadError(
                f"File contains {len(candidates)} accounts; "
                f"at most {self._max_candidates} can be imported at once."
            )

        log_event(logger, logging.INFO, "account_import_started", candidates=len(candidates))
        return self.import_candidates(candidates=candidates, store=store)

    def import_candidates(
        self,
        *,
        candidates: Sequence[Any],
        store: AccountStore,
    ) -> ImportReport:
        """
        Validate and create each candidate in input order.

        Only AccountStoreError is absorbed per candidate; anything else is a
        programming or infrastructure fault and propagates.
        """

        created: list[Account] = []
        failures: list[ImportFailure] = []

        for position, candidate in enumerate(candidates):
            payload, violations = self._validator.validate(candidate)
            if payload is None:
                self._record_failure(
                    failures,
                    position=position,
                    failure=ImportFailure(
                        candidate=candidate,
                        kind=ImportFailureKind.VALIDATION,
                        message=summarize_violations(violations) or "Invalid account record.",
                        violations=list(violations),
                    ),
                )
                continue

            try:
                account = store.create_account(payload)
            except AccountStoreError as exc:
                self._record_failure(
                    failures,
                    position=position,
                    failure=ImportFailure(
                        candidate=candidate,
                        kind=ImportFailureKind.STORE,
                        message=str(exc),
                    ),
                )
                continue

            created.append(account)

        report = ImportReport(accounts=created, error_details=failures)
        log_event(
            logger,
            logging.INFO,
            "account_import_completed",
            imported=report.imported,
            errors=report.errors,
            total=report.total,
        )
        return report

    def _record_failure(
        self,
        failures: list[ImportFailure],
        *,
        position: int,
        failure: ImportFailure,
    ) -> None:
        failures.append(failure)
        if not self._log_failures:
            return
        log_event(
            logger,
            logging.WARNING,
            "account_import_record_rejected",
            position=position,
            kind=failure.kind,
            fields=_violation_fields(failure.violations),
            message=failure.message,
        )


def _violation_fields(violations: list[FieldViolation]) -> list[str]:
    return [violation.field for violation in violations]


@lru_cache(maxsize=1)
def get_account_import_service() -> AccountImportService:
    """
    Build and cache the import service with env-driven settings.
    """
    settings = get_account_import_settings()
    return AccountImportService(
        max_upload_bytes=settings.max_upload_bytes,
        max_candidates=settings.max_candidates,
        max_nesting_depth=settings.max_nesting_depth,
        log_failures=settings.log_failures,
    )
