"""
app/validators/account_validator.py

Record-level validation of untyped account candidates.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any, TypeVar

from pydantic import BaseModel, ValidationError

from app.domain.account_import import ROOT_FIELD, FieldViolation
from app.schemas.accounts import AccountCreate, AccountStatusUpdate

_ModelT = TypeVar("_ModelT", bound=BaseModel)


class AccountRecordValidator:
    """
    Validates one decoded candidate against the account schema.

    Pure: returns either the normalized payload or the violations, never
    raises for bad input and never touches storage.
    """

    def validate(self, candidate: Any) -> tuple[AccountCreate | None, list[FieldViolation]]:
        """
        Validate one account creation candidate.
        """

        return self._validate_model(AccountCreate, candidate)

    def validate_status_update(
        self,
        payload: Any,
    ) -> tuple[AccountStatusUpdate | None, list[FieldViolation]]:
        """
        Validate a ``{"status": ...}`` update body.
        """

        return self._validate_model(AccountStatusUpdate, payload)

    def _validate_model(
        self,
        model: type[_ModelT],
        candidate: Any,
    ) -> tuple[_ModelT | None, list[FieldViolation]]:
        if not isinstance(candidate, Mapping):
            return None, [
                FieldViolation(
                    field=ROOT_FIELD,
                    reason=f"Expected an object, got {self._describe_type(candidate)}.",
                )
            ]

        try:
            return model.model_validate(dict(candidate)), []
        except ValidationError as exc:
            return None, [self._to_violation(error) for error in exc.errors()]

    @staticmethod
    def _to_violation(error: Mapping[str, Any]) -> FieldViolation:
        location = ".".join(str(part) for part in error.get("loc", ()))
        return FieldViolation(field=location or ROOT_FIELD, reason=str(error.get("msg", "Invalid value.")))

    @staticmethod
    def _describe_type(value: Any) -> str:
        if value is None:
            return "null"
        if isinstance(value, bool):
            return "boolean"
        if isinstance(value, (int, float)):
            return "number"
        if isinstance(value, str):
            return "string"
        if isinstance(value, (list, tuple)):
            return "array"
        return type(value).__name__
