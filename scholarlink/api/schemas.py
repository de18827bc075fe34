"""Pydantic response models shared by several routers"""
from datetime import datetime
from typing import Any, Dict, List, Optional
from uuid import UUID

from pydantic import BaseModel, ConfigDict

from scholarlink.models.enums import NotificationType, SessionStatus, UserRole


class UserResponse(BaseModel):
    """Public view of a user (never includes the password)"""
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    email: str
    username: str
    first_name: str
    last_name: str
    display_name: str
    bio: str
    role: UserRole
    is_profile_complete: bool
    selected_subjects: List[str]
    hourly_rate: Optional[float] = None
    years_experience: Optional[int] = None
    date_created: datetime


class SessionResponse(BaseModel):
    """Booking with its derived total cost"""
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    student_id: UUID
    tutor_id: UUID
    subject: str
    requested_at: datetime
    duration_minutes: int
    message: str
    hourly_rate: float
    total_cost: float
    status: SessionStatus
    date_created: datetime
    responded_at: Optional[datetime] = None


class NotificationResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    title: str
    message: str
    type: NotificationType
    recipient_email: str
    related_session_id: Optional[UUID] = None
    created_at: datetime
    is_read: bool


class UserEnvelope(BaseModel):
    data: UserResponse


class UserListEnvelope(BaseModel):
    data: List[UserResponse]
    metadata: Dict[str, Any]


class SessionEnvelope(BaseModel):
    data: SessionResponse


class SessionListEnvelope(BaseModel):
    data: List[SessionResponse]
    metadata: Dict[str, Any]
