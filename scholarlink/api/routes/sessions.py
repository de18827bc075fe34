"""
Session Booking API Endpoints

POST /api/v1/sessions - Book a session with a tutor (acting user is the student)
GET /api/v1/sessions/student - Bookings made by the acting user
GET /api/v1/sessions/tutor - Requests addressed to the acting user
GET /api/v1/sessions/{session_id} - One booking (participants only)
POST /api/v1/sessions/{session_id}/accept - Tutor accepts a pending request
POST /api/v1/sessions/{session_id}/reject - Tutor rejects a pending request
"""
import logging
from datetime import datetime
from typing import Optional
from uuid import UUID

from fastapi import APIRouter, Depends, Path, Query, status
from pydantic import BaseModel, Field

from scholarlink.api.auth import get_current_user, get_services
from scholarlink.api.schemas import SessionEnvelope, SessionListEnvelope, SessionResponse
from scholarlink.models.enums import Decision, SessionStatus
from scholarlink.models.user import User
from scholarlink.services.container import ServiceContainer
from scholarlink.services.exceptions import Forbidden

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/v1/sessions", tags=["sessions"])


class BookSessionRequest(BaseModel):
    """Request model for booking a session"""
    tutor_id: UUID
    subject: str
    requested_at: datetime = Field(..., description="Session start; naive values are UTC")
    duration_minutes: int = Field(60, description="One of 30, 60, 90, 120")
    message: str = ""


def _session_list(sessions, role: str, status_filter: Optional[SessionStatus]) -> SessionListEnvelope:
    return SessionListEnvelope(
        data=[SessionResponse.model_validate(s) for s in sessions],
        metadata={
            "count": len(sessions),
            "role": role,
            "status": status_filter.value if status_filter else None,
        },
    )


@router.post("", response_model=SessionEnvelope, status_code=status.HTTP_201_CREATED)
async def book_session(
    request: BookSessionRequest,
    user: User = Depends(get_current_user),
    services: ServiceContainer = Depends(get_services),
):
    """
    Book a session with a tutor.

    Creates a pending request at the tutor's current rate and notifies the tutor.
    """
    session_request = await services.coordinator.book_session(
        student_id=user.id,
        tutor_id=request.tutor_id,
        subject=request.subject,
        requested_at=request.requested_at,
        duration_minutes=request.duration_minutes,
        message=request.message,
    )
    return SessionEnvelope(data=SessionResponse.model_validate(session_request))


@router.get("/student", response_model=SessionListEnvelope)
async def list_student_sessions(
    status_filter: Optional[SessionStatus] = Query(None, alias="status"),
    user: User = Depends(get_current_user),
    services: ServiceContainer = Depends(get_services),
):
    sessions = await services.sessions.list_for_student(user.id, status_filter)
    return _session_list(sessions, "student", status_filter)


@router.get("/tutor", response_model=SessionListEnvelope)
async def list_tutor_sessions(
    status_filter: Optional[SessionStatus] = Query(None, alias="status"),
    user: User = Depends(get_current_user),
    services: ServiceContainer = Depends(get_services),
):
    sessions = await services.sessions.list_for_tutor(user.id, status_filter)
    return _session_list(sessions, "tutor", status_filter)


@router.get("/{session_id}", response_model=SessionEnvelope)
async def get_session(
    session_id: UUID = Path(...),
    user: User = Depends(get_current_user),
    services: ServiceContainer = Depends(get_services),
):
    session_request = await services.sessions.get(session_id)
    if user.id not in (session_request.student_id, session_request.tutor_id):
        raise Forbidden("Only the student and tutor can view this session")
    return SessionEnvelope(data=SessionResponse.model_validate(session_request))


@router.post("/{session_id}/accept", response_model=SessionEnvelope)
async def accept_session(
    session_id: UUID = Path(...),
    user: User = Depends(get_current_user),
    services: ServiceContainer = Depends(get_services),
):
    session_request = await services.coordinator.respond(session_id, user.id, Decision.ACCEPT)
    return SessionEnvelope(data=SessionResponse.model_validate(session_request))


@router.post("/{session_id}/reject", response_model=SessionEnvelope)
async def reject_session(
    session_id: UUID = Path(...),
    user: User = Depends(get_current_user),
    services: ServiceContainer = Depends(get_services),
):
    session_request = await services.coordinator.respond(session_id, user.id, Decision.REJECT)
    return SessionEnvelope(data=SessionResponse.model_validate(session_request))
