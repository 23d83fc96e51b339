from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

# Wire format is camelCase (`dateOfBirth`); snake_case keys are accepted on input.
_WIRE_CONFIG = ConfigDict(alias_generator=to_camel, populate_by_name=True)

_STRING_SCHEMA = {"type": "string"}


class PatientRequest(BaseModel):
    """
    Raw, unvalidated patient payload.

    Fields accept any JSON value so that missing, mistyped or malformed values
    reach `patients.validation` and are reported together, field by field. The
    documented schema still says string.
    """

    model_config = _WIRE_CONFIG

    name: Any = Field(
        default=None,
        json_schema_extra=_STRING_SCHEMA,
        description="Patient name, at most 100 characters.",
        examples=["Jane Doe"],
    )
    email: Any = Field(
        default=None,
        json_schema_extra=_STRING_SCHEMA,
        description="Email address. Must be unique across patients.",
        examples=["jane.doe@clinic.org"],
    )
    address: Any = Field(
        default=None,
        json_schema_extra=_STRING_SCHEMA,
        description="Postal address.",
        examples=["12 Harbour Road, Leith"],
    )
    date_of_birth: Any = Field(
        default=None,
        json_schema_extra=_STRING_SCHEMA,
        description="Date of birth (yyyy-MM-dd).",
        examples=["1980-01-31"],
    )
    registered_date: Any = Field(
        default=None,
        json_schema_extra=_STRING_SCHEMA,
        description=(
            "Registration date (yyyy-MM-dd). Required on create. Accepted but ignored on "
            "update: the registration date cannot change."
        ),
        examples=["2024-05-02"],
    )


class PatientOut(BaseModel):
    model_config = _WIRE_CONFIG

    id: str = Field(description="Patient identifier (UUID).")
    name: str = Field(description="Patient name.")
    email: str = Field(description="Email address.")
    address: str = Field(description="Postal address.")
    date_of_birth: str = Field(description="Date of birth (yyyy-MM-dd).")
    registered_date: str = Field(description="Registration date (yyyy-MM-dd).")


class PatientPageOut(BaseModel):
    model_config = _WIRE_CONFIG

    items: list[PatientOut] = Field(description="Patients on this page.")
    page: int = Field(description="Zero-based page index.", examples=[0])
    size: int = Field(description="Requested page size.", examples=[10])
    total_items: int = Field(description="Number of patients across all pages.")
    total_pages: int = Field(description="Number of pages at this page size.")
    sort: str = Field(description="Applied ordering.", examples=["name,asc"])
