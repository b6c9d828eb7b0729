"""
scripts/import_accounts.py

Import accounts from a JSON / JavaScript data file straight into the
configured database, bypassing the HTTP layer.

Usage:
    python -m scripts.import_accounts path/to/accounts.js [--dry-run]
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path

from app.config import get_app_settings
from app.logging_utils import configure_logging
from app.parsers.literal_parser import MalformedPayloadError, decode_account_payload
from app.schemas.accounts import ImportReportResponse
from app.services.account_import_service import get_account_import_service
from app.validators.account_validator import AccountRecordValidator
from db.repositories.account_repository import SqlAlchemyAccountStore
from db.session import SessionLocal

logger = logging.getLogger("scripts.import_accounts")


def _parse_args(argv: list[str] | None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Bulk import accounts from a data file.")
    parser.add_argument("path", type=Path, help="JSON or JavaScript file holding an array of accounts")
    parser.add_argument(
        "--dry-run",
        action="store_true",
        help="Decode and validate only; nothing is written to the database.",
    )
    return parser.parse_args(argv)


def _dry_run(raw: bytes) -> dict[str, object]:
    validator = AccountRecordValidator()
    candidates = decode_account_payload(raw)
    rejected = []
    for position, candidate in enumerate(candidates):
        _, violations = validator.validate(candidate)
        if violations:
            rejected.append(
                {
                    "position": position,
                    "violations": [{"field": v.field, "reason": v.reason} for v in violations],
                }
            )
    return {
        "candidates": len(candidates),
        "valid": len(candidates) - len(rejected),
        "invalid": len(rejected),
        "rejected": rejected,
    }


def main(argv: list[str] | None = None) -> int:
    args = _parse_args(argv)
    configure_logging(get_app_settings().log_level)

    try:
        raw = args.path.read_bytes()
    except OSError as exc:
        logger.error("Cannot read %s: %s", args.path, exc)
        return 2

    try:
        if args.dry_run:
            output: dict[str, object] = _dry_run(raw)
        else:
            db = SessionLocal()
            try:
                report = get_account_import_service().import_payload(
                    raw=raw,
                    store=SqlAlchemyAccountStore(db),
                )
                output = ImportReportResponse.from_report(report).model_dump(mode="json", by_alias=True)
            finally:
                db.close()
    except MalformedPayloadError as exc:
        logger.error("Import rejected: %s", exc)
        return 1

    json.dump(output, sys.stdout, indent=2)
    sys.stdout.write("\n")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
