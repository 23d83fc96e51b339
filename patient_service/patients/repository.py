"""Database access for patients.

All SQL for the patients table lives here; the service only sees entities.
"""

from __future__ import annotations

import uuid
from typing import overload

from sqlalchemy import Select, delete, func, select
from sqlalchemy.ext.asyncio import AsyncSession

from patient_service.patients.models import Patient, fold_email
from patient_service.patients.paging import Page, PageRequest


def _apply_sorting(stmt: Select[tuple[Patient]], paging: PageRequest) -> Select[tuple[Patient]]:
    sort_col = getattr(Patient, paging.sort)
    if paging.direction == "desc":
        return stmt.order_by(sort_col.desc(), Patient.id.desc())
    # id breaks ties so pages stay stable between requests.
    return stmt.order_by(sort_col.asc(), Patient.id.asc())


class PatientRepository:
    def __init__(self, session: AsyncSession):
        self._session = session

    @overload
    async def find_all(self, paging: None = None) -> list[Patient]: ...

    @overload
    async def find_all(self, paging: PageRequest) -> Page[Patient]: ...

    async def find_all(self, paging: PageRequest | None = None) -> list[Patient] | Page[Patient]:
        if paging is None:
            stmt = select(Patient).order_by(Patient.name.asc(), Patient.id.asc())
            return list((await self._session.execute(stmt)).scalars().all())

        total = int(
            (await self._session.execute(select(func.count()).select_from(Patient))).scalar_one()
        )
        stmt = _apply_sorting(select(Patient), paging).offset(paging.offset).limit(paging.size)
        items = list((await self._session.execute(stmt)).scalars().all())
        return Page(items=items, request=paging, total_items=total)

    async def find_by_id(self, patient_id: uuid.UUID) -> Patient | None:
        return await self._session.get(Patient, patient_id)

    async def exists_by_id(self, patient_id: uuid.UUID) -> bool:
        stmt = select(Patient.id).where(Patient.id == patient_id).limit(1)
        return (await self._session.execute(stmt)).first() is not None

    async def exists_by_email(self, email: str, *, case_insensitive: bool = False) -> bool:
        if case_insensitive:
            condition = Patient.email_key == fold_email(email)
        else:
            condition = Patient.email == email
        stmt = select(Patient.id).where(condition).limit(1)
        return (await self._session.execute(stmt)).first() is not None

    async def save(self, patient: Patient) -> Patient:
        """Insert or update `patient` and commit. Rolls back before re-raising on failure."""
        self._session.add(patient)
        try:
            await self._session.commit()
        except Exception:
            await self._session.rollback()
            raise
        await self._session.refresh(patient)
        return patient

    async def delete_by_id(self, patient_id: uuid.UUID) -> None:
        await self._session.execute(delete(Patient).where(Patient.id == patient_id))
        await self._session.commit()
