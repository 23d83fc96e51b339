"""Business rules for patient records.

Every write runs validate -> duplicate email check -> save, in that order.
The duplicate check is a plain read before the write, so two concurrent
requests with the same new email can both pass it. The unique index on
`patients.email` rejects the second commit, and that rejection is reported as
the same `EmailAlreadyExistsError` the read check raises. Addresses that
differ only in letter case are not covered by the index.
"""

from __future__ import annotations

import logging
import uuid

from sqlalchemy.exc import IntegrityError

from patient_service.domain.exceptions import EmailAlreadyExistsError, PatientNotFoundError
from patient_service.patients import mapper
from patient_service.patients.models import Patient, fold_email
from patient_service.patients.paging import Page, PageRequest
from patient_service.patients.repository import PatientRepository
from patient_service.patients.schemas import PatientOut, PatientRequest
from patient_service.patients.validation import ValidationMode, validate_patient_request

logger = logging.getLogger(__name__)


class PatientService:
    def __init__(self, repository: PatientRepository, *, email_case_insensitive: bool = True):
        self._repo = repository
        self._email_case_insensitive = email_case_insensitive

    async def list_patients(
        self, paging: PageRequest | None = None
    ) -> list[PatientOut] | Page[PatientOut]:
        """Return every patient ordered by name, or one page when `paging` is given."""
        if paging is None:
            logger.debug("Fetching all patients")
            return [mapper.to_response(p) for p in await self._repo.find_all()]

        logger.debug(
            "Fetching patients page %s (size %s, sort %s)",
            paging.page,
            paging.size,
            paging.sort_label,
        )
        page = await self._repo.find_all(paging)
        return Page(
            items=[mapper.to_response(p) for p in page.items],
            request=page.request,
            total_items=page.total_items,
        )

    async def get_patient(self, patient_id: uuid.UUID) -> PatientOut:
        return mapper.to_response(await self._get_existing(patient_id))

    async def create_patient(self, request: PatientRequest) -> PatientOut:
        """
        Create a patient.

        Raises:
            ValidationFailedError: a field is missing or malformed (incl. InvalidDateError).
            EmailAlreadyExistsError: another patient already uses the email.
        """
        validate_patient_request(request, ValidationMode.CREATE)
        if await self._email_in_use(request.email):
            raise EmailAlreadyExistsError()

        patient = await self._save(mapper.to_entity(request))
        logger.info("Created patient", extra={"patient_id": str(patient.id)})
        return mapper.to_response(patient)

    async def update_patient(self, patient_id: uuid.UUID, request: PatientRequest) -> PatientOut:
        """
        Replace the mutable fields of an existing patient.

        Raises:
            PatientNotFoundError: no patient has this id.
            ValidationFailedError: a field is missing or malformed (incl. InvalidDateError).
            EmailAlreadyExistsError: the email changes to one another patient uses.
        """
        patient = await self._get_existing(patient_id)
        validate_patient_request(request, ValidationMode.UPDATE)

        if self._email_changed(patient.email, request.email) and await self._email_in_use(
            request.email
        ):
            raise EmailAlreadyExistsError()

        patient = await self._save(mapper.apply_to_entity(patient, request))
        logger.info("Updated patient", extra={"patient_id": str(patient.id)})
        return mapper.to_response(patient)

    async def delete_patient(self, patient_id: uuid.UUID) -> None:
        if not await self._repo.exists_by_id(patient_id):
            raise PatientNotFoundError(patient_id)
        await self._repo.delete_by_id(patient_id)
        logger.info("Deleted patient", extra={"patient_id": str(patient_id)})

    async def _get_existing(self, patient_id: uuid.UUID) -> Patient:
        patient = await self._repo.find_by_id(patient_id)
        if patient is None:
            raise PatientNotFoundError(patient_id)
        return patient

    async def _email_in_use(self, email: str) -> bool:
        return await self._repo.exists_by_email(
            email, case_insensitive=self._email_case_insensitive
        )

    def _email_changed(self, current: str, new: str) -> bool:
        if self._email_case_insensitive:
            return fold_email(current) != fold_email(new)
        return current != new

    async def _save(self, patient: Patient) -> Patient:
        try:
            return await self._repo.save(patient)
        except IntegrityError:
            # Lost the race against a concurrent write with the same email.
            raise EmailAlreadyExistsError() from None
