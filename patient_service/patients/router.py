from __future__ import annotations

import uuid

from fastapi import APIRouter, Body, Depends, Query, status

from patient_service.core.settings import get_settings
from patient_service.patients.deps import get_patient_service
from patient_service.patients.paging import parse_page_request
from patient_service.patients.schemas import PatientOut, PatientPageOut, PatientRequest
from patient_service.patients.service import PatientService

router = APIRouter(prefix="/api/patients", tags=["patients"])

_NOT_FOUND = {status.HTTP_404_NOT_FOUND: {"description": "Patient not found"}}
_BAD_REQUEST = {status.HTTP_400_BAD_REQUEST: {"description": "Invalid input"}}
_CONFLICT = {status.HTTP_409_CONFLICT: {"description": "Email already exists"}}


@router.get("", response_model=PatientPageOut, summary="List patients (paginated)")
async def get_patients(
    page: int = Query(default=0, ge=0, description="Zero-based page index."),
    size: int | None = Query(
        default=None, ge=1, description="Page size (default 10, capped by server settings)."
    ),
    sort: str | None = Query(
        default=None,
        description="Sort field with optional direction, e.g. `name` or `dateOfBirth,desc`.",
        examples=["name,asc"],
    ),
    service: PatientService = Depends(get_patient_service),
) -> PatientPageOut:
    settings = get_settings()
    page_size = min(size or settings.page_size_default, settings.page_size_max)
    result = await service.list_patients(parse_page_request(page=page, size=page_size, sort=sort))
    return PatientPageOut(
        items=result.items,
        page=result.request.page,
        size=result.request.size,
        total_items=result.total_items,
        total_pages=result.total_pages,
        sort=result.request.sort_label,
    )


@router.get("/all", response_model=list[PatientOut], summary="List all patients")
async def get_all_patients(
    service: PatientService = Depends(get_patient_service),
) -> list[PatientOut]:
    return await service.list_patients()


@router.get(
    "/{patient_id}", response_model=PatientOut, responses=_NOT_FOUND, summary="Get patient by ID"
)
async def get_patient_by_id(
    patient_id: uuid.UUID,
    service: PatientService = Depends(get_patient_service),
) -> PatientOut:
    return await service.get_patient(patient_id)


@router.post(
    "",
    status_code=status.HTTP_201_CREATED,
    response_model=PatientOut,
    responses={**_BAD_REQUEST, **_CONFLICT},
    summary="Create a patient",
)
async def create_patient(
    payload: PatientRequest = Body(),
    service: PatientService = Depends(get_patient_service),
) -> PatientOut:
    return await service.create_patient(payload)


@router.put(
    "/{patient_id}",
    response_model=PatientOut,
    responses={**_NOT_FOUND, **_BAD_REQUEST, **_CONFLICT},
    summary="Update a patient",
)
async def update_patient(
    patient_id: uuid.UUID,
    payload: PatientRequest = Body(),
    service: PatientService = Depends(get_patient_service),
) -> PatientOut:
    return await service.update_patient(patient_id, payload)


@router.delete(
    "/{patient_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    response_model=None,
    responses=_NOT_FOUND,
    summary="Delete a patient",
)
async def delete_patient(
    patient_id: uuid.UUID,
    service: PatientService = Depends(get_patient_service),
) -> None:
    await service.delete_patient(patient_id)
