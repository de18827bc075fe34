"""
Tutor Discovery API Endpoints

GET /api/v1/tutors - Tutors with completed profiles, optionally by subject
GET /api/v1/tutors/{tutor_id} - Single tutor profile
GET /api/v1/subjects - Subject catalog with tutor counts
"""
from typing import List, Optional
from uuid import UUID

from fastapi import APIRouter, Depends, Path, Query
from pydantic import BaseModel

from scholarlink.api.auth import get_services
from scholarlink.api.schemas import UserEnvelope, UserListEnvelope, UserResponse
from scholarlink.services.container import ServiceContainer
from scholarlink.services.exceptions import NotFound

router = APIRouter(prefix="/api/v1", tags=["tutors"])


class SubjectSummary(BaseModel):
    subject: str
    tutor_count: int


class SubjectCatalogResponse(BaseModel):
    data: List[SubjectSummary]


@router.get("/tutors", response_model=UserListEnvelope)
async def list_tutors(
    subject: Optional[str] = Query(None, description="Only tutors offering this subject"),
    only_complete: bool = Query(True, description="Hide tutors who have not finished profile setup"),
    services: ServiceContainer = Depends(get_services),
):
    tutors = await services.users.list_tutors(only_complete=only_complete, subject=subject)
    return UserListEnvelope(
        data=[UserResponse.model_validate(tutor) for tutor in tutors],
        metadata={"count": len(tutors), "subject": subject},
    )


@router.get("/tutors/{tutor_id}", response_model=UserEnvelope)
async def get_tutor(
    tutor_id: UUID = Path(..., description="Tutor user id"),
    services: ServiceContainer = Depends(get_services),
):
    tutor = await services.users.get_user(tutor_id)
    if not tutor.is_tutor:
        raise NotFound(f"Tutor {tutor_id} not found")
    return UserEnvelope(data=UserResponse.model_validate(tutor))


@router.get("/subjects", response_model=SubjectCatalogResponse)
async def list_subjects(services: ServiceContainer = Depends(get_services)):
    """Catalog subjects in display order with the number of tutors offering each"""
    counts = await services.users.tutor_counts_by_subject()
    return SubjectCatalogResponse(
        data=[SubjectSummary(subject=subject, tutor_count=count) for subject, count in counts.items()]
    )
