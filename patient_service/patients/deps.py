from __future__ import annotations

from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from patient_service.core.db import get_session
from patient_service.core.settings import get_settings
from patient_service.patients.repository import PatientRepository
from patient_service.patients.service import PatientService


def get_patient_service(session: AsyncSession = Depends(get_session)) -> PatientService:
    """Request-scoped PatientService bound to the request's DB session."""
    settings = get_settings()
    return PatientService(
        PatientRepository(session),
        email_case_insensitive=settings.email_case_insensitive,
    )
