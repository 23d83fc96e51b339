"""Unit tests: PatientService against an in-memory repository."""

from __future__ import annotations

import asyncio
import uuid

import pytest
from sqlalchemy.exc import IntegrityError

from patient_service.domain.exceptions import (
    EmailAlreadyExistsError,
    PatientNotFoundError,
    ValidationFailedError,
)
from patient_service.patients.models import Patient, fold_email
from patient_service.patients.paging import Page, PageRequest
from patient_service.patients.schemas import PatientRequest
from patient_service.patients.service import PatientService


class InMemoryPatientRepository:
    """Stands in for PatientRepository; records writes for assertions."""

    def __init__(self) -> None:
        self.rows: dict[uuid.UUID, Patient] = {}
        self.saves = 0
        self.fail_next_save = False

    async def find_all(self, paging: PageRequest | None = None):
        rows = sorted(self.rows.values(), key=lambda p: (p.name, str(p.id)))
        if paging is None:
            return rows
        window = rows[paging.offset : paging.offset + paging.size]
        return Page(items=window, request=paging, total_items=len(rows))

    async def find_by_id(self, patient_id: uuid.UUID) -> Patient | None:
        return self.rows.get(patient_id)

    async def exists_by_id(self, patient_id: uuid.UUID) -> bool:
        return patient_id in self.rows

    async def exists_by_email(self, email: str, *, case_insensitive: bool = False) -> bool:
        if case_insensitive:
            return any(p.email_key == fold_email(email) for p in self.rows.values())
        return any(p.email == email for p in self.rows.values())

    async def save(self, patient: Patient) -> Patient:
        if self.fail_next_save:
            self.fail_next_save = False
            raise IntegrityError("INSERT INTO patients", {}, Exception("UNIQUE constraint failed"))
        if patient.id is None:
            patient.id = uuid.uuid4()
        self.rows[patient.id] = patient
        self.saves += 1
        return patient

    async def delete_by_id(self, patient_id: uuid.UUID) -> None:
        del self.rows[patient_id]


def _request(**overrides: str | None) -> PatientRequest:
    fields: dict[str, str | None] = {
        "name": "Ada Lovelace",
        "email": "ada@clinic.org",
        "address": "12 St James's Square",
        "date_of_birth": "1815-12-10",
        "registered_date": "2024-01-15",
    }
    fields.update(overrides)
    return PatientRequest(**fields)


@pytest.fixture
def repo() -> InMemoryPatientRepository:
    return InMemoryPatientRepository()


@pytest.fixture
def service(repo: InMemoryPatientRepository) -> PatientService:
    return PatientService(repo, email_case_insensitive=True)  # type: ignore[arg-type]


def test_create_assigns_id_and_returns_projection(
    service: PatientService, repo: InMemoryPatientRepository
) -> None:
    out = asyncio.run(service.create_patient(_request()))

    assert uuid.UUID(out.id) in repo.rows
    assert out.name == "Ada Lovelace"
    assert out.registered_date == "2024-01-15"


def test_validation_runs_before_uniqueness_and_write(
    service: PatientService, repo: InMemoryPatientRepository
) -> None:
    asyncio.run(service.create_patient(_request()))

    with pytest.raises(ValidationFailedError):
        asyncio.run(service.create_patient(_request(name="")))

    assert repo.saves == 1


def test_duplicate_email_performs_no_write(
    service: PatientService, repo: InMemoryPatientRepository
) -> None:
    asyncio.run(service.create_patient(_request()))

    with pytest.raises(EmailAlreadyExistsError):
        asyncio.run(service.create_patient(_request(name="Someone Else")))

    assert repo.saves == 1
    assert len(repo.rows) == 1


def test_case_sensitive_policy_allows_case_variants(repo: InMemoryPatientRepository) -> None:
    service = PatientService(repo, email_case_insensitive=False)  # type: ignore[arg-type]
    asyncio.run(service.create_patient(_request(email="ada@clinic.org")))

    asyncio.run(service.create_patient(_request(email="ADA@clinic.org")))

    assert len(repo.rows) == 2


def test_unique_index_rejection_surfaces_as_email_conflict(
    service: PatientService, repo: InMemoryPatientRepository
) -> None:
    repo.fail_next_save = True

    with pytest.raises(EmailAlreadyExistsError):
        asyncio.run(service.create_patient(_request()))


def test_missing_patient_operations_raise_not_found(service: PatientService) -> None:
    missing = uuid.uuid4()

    with pytest.raises(PatientNotFoundError):
        asyncio.run(service.get_patient(missing))
    with pytest.raises(PatientNotFoundError):
        asyncio.run(service.update_patient(missing, _request()))
    with pytest.raises(PatientNotFoundError):
        asyncio.run(service.delete_patient(missing))


def test_list_patients_with_and_without_paging(service: PatientService) -> None:
    people = [("Zed", "z@clinic.org"), ("Amy", "amy@clinic.org"), ("Bo", "bo@clinic.org")]
    for name, email in people:
        asyncio.run(service.create_patient(_request(name=name, email=email)))

    everyone = asyncio.run(service.list_patients())
    first_page = asyncio.run(service.list_patients(PageRequest(page=0, size=2)))

    assert [p.name for p in everyone] == ["Amy", "Bo", "Zed"]
    assert [p.name for p in first_page.items] == ["Amy", "Bo"]
    assert first_page.total_items == 3
    assert first_page.total_pages == 2


def test_delete_removes_patient(service: PatientService, repo: InMemoryPatientRepository) -> None:
    out = asyncio.run(service.create_patient(_request()))

    asyncio.run(service.delete_patient(uuid.UUID(out.id)))

    assert repo.rows == {}
