"""Errors raised by the patient service.

The service raises these and never catches them; `api.exception_handlers`
is the only place that turns them into HTTP responses.
"""

from __future__ import annotations

import uuid


class PatientServiceError(Exception):
    """Base class for errors with a client-facing meaning."""

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ValidationFailedError(PatientServiceError):
    """One or more request fields violate their constraints."""

    def __init__(self, details: dict[str, str], message: str = "Validation failed"):
        super().__init__(message)
        self.details = details


class InvalidDateError(ValidationFailedError):
    """A date string matched yyyy-MM-dd but is not a real calendar date."""

    def __init__(self, *, field: str, value: str):
        super().__init__(
            {field: f"Invalid date: {value}"},
            message="Invalid date format. Dates must be in yyyy-MM-dd format",
        )
        self.field = field
        self.value = value


class PatientNotFoundError(PatientServiceError):
    def __init__(self, patient_id: uuid.UUID):
        super().__init__(f"Patient not found with id: {patient_id}")
        self.patient_id = patient_id


class EmailAlreadyExistsError(PatientServiceError):
    # The email itself is kept off the message; messages end up in logs.
    def __init__(self) -> None:
        super().__init__("Patient already exists with this email")


class MalformedInputError(PatientServiceError):
    """A request argument could not be interpreted (e.g. an unknown sort field)."""
