"""Field rules for patient payloads.

Rules depend on the operation: `registeredDate` is required when creating a
patient and optional when updating one. Only the shape of dates is checked
here; whether `2024-02-30` is a real day is decided when the mapper parses it.
"""

from __future__ import annotations

import enum
import re
from typing import Any

from email_validator import EmailNotValidError, validate_email

from patient_service.domain.exceptions import ValidationFailedError
from patient_service.patients.models import NAME_MAX_LENGTH
from patient_service.patients.schemas import PatientRequest

DATE_PATTERN = re.compile(r"\d{4}-\d{2}-\d{2}", re.ASCII)


class ValidationMode(enum.Enum):
    CREATE = "create"
    UPDATE = "update"


def _is_blank(value: str | None) -> bool:
    return value is None or not value.strip()


def _is_valid_email(value: str) -> bool:
    try:
        validate_email(value, check_deliverability=False)
    except EmailNotValidError:
        return False
    return True


def _check_name(value: str | None) -> str | None:
    if _is_blank(value):
        return "Name is required"
    if len(value) > NAME_MAX_LENGTH:
        return f"Name cannot exceed {NAME_MAX_LENGTH} characters"
    return None


def _check_email(value: str | None) -> str | None:
    if _is_blank(value):
        return "Email is required"
    if not _is_valid_email(value):
        return "Email should be valid"
    return None


def _check_address(value: str | None) -> str | None:
    if _is_blank(value):
        return "Address is required"
    return None


def _check_date(value: str | None, *, label: str, required: bool) -> str | None:
    if value is None or (required and not value.strip()):
        return f"{label} is required" if required else None
    if not DATE_PATTERN.fullmatch(value):
        return f"{label} must be in format yyyy-MM-dd"
    return None


def _check_type(value: Any, *, label: str) -> str | None:
    if value is not None and not isinstance(value, str):
        return f"{label} must be a string"
    return None


def collect_violations(request: PatientRequest, mode: ValidationMode) -> dict[str, str]:
    """Return every violated rule as `{wire field name: message}`; empty when valid."""

    checks = {
        "name": _check_type(request.name, label="Name") or _check_name(request.name),
        "email": _check_type(request.email, label="Email") or _check_email(request.email),
        "address": (
            _check_type(request.address, label="Address") or _check_address(request.address)
        ),
        "dateOfBirth": (
            _check_type(request.date_of_birth, label="Date of birth")
            or _check_date(request.date_of_birth, label="Date of birth", required=True)
        ),
        "registeredDate": (
            _check_type(request.registered_date, label="Registered date")
            or _check_date(
                request.registered_date,
                label="Registered date",
                required=mode is ValidationMode.CREATE,
            )
        ),
    }
    return {field: message for field, message in checks.items() if message is not None}


def validate_patient_request(request: PatientRequest, mode: ValidationMode) -> None:
    """Raise `ValidationFailedError` carrying all violations, if there are any."""

    violations = collect_violations(request, mode)
    if violations:
        raise ValidationFailedError(violations)
