from __future__ import annotations

from datetime import date

from patient_service.domain.exceptions import InvalidDateError
from patient_service.patients.models import Patient
from patient_service.patients.schemas import PatientOut, PatientRequest


def parse_date(*, field: str, value: str) -> date:
    """Parse a yyyy-MM-dd string, rejecting impossible days such as 2024-02-30."""
    try:
        return date.fromisoformat(value)
    except ValueError:
        raise InvalidDateError(field=field, value=value) from None


def format_date(value: date) -> str:
    return value.isoformat()


def to_response(patient: Patient) -> PatientOut:
    return PatientOut(
        id=str(patient.id),
        name=patient.name,
        email=patient.email,
        address=patient.address,
        date_of_birth=format_date(patient.date_of_birth),
        registered_date=format_date(patient.registered_date),
    )


def to_entity(request: PatientRequest) -> Patient:
    """Build a new, unsaved patient from a request that passed CREATE validation."""
    return Patient(
        name=request.name,
        email=request.email,
        address=request.address,
        date_of_birth=parse_date(field="dateOfBirth", value=request.date_of_birth),
        registered_date=parse_date(field="registeredDate", value=request.registered_date),
    )


def apply_to_entity(patient: Patient, request: PatientRequest) -> Patient:
    """Copy the fields present in `request` onto `patient` in place.

    The id is never touched. The registration date is parsed so a bad value is
    still rejected, but it is not applied: it is fixed at creation.
    """
    # Parse first so a bad date leaves the entity untouched.
    date_of_birth = (
        parse_date(field="dateOfBirth", value=request.date_of_birth)
        if request.date_of_birth is not None
        else None
    )
    if request.registered_date is not None:
        parse_date(field="registeredDate", value=request.registered_date)

    if request.name is not None:
        patient.name = request.name
    if request.email is not None:
        patient.email = request.email
    if request.address is not None:
        patient.address = request.address
    if date_of_birth is not None:
        patient.date_of_birth = date_of_birth
    return patient
