"""SQLAlchemy ORM Models for ScholarLink Database Schema"""
from scholarlink.models.enums import (
    UserRole,
    SessionStatus,
    NotificationType,
    Decision,
    ALLOWED_DURATIONS,
    SUBJECTS,
)
from scholarlink.models.user import User
from scholarlink.models.session_request import SessionRequest
from scholarlink.models.notification import Notification

__all__ = [
    "User",
    "SessionRequest",
    "Notification",
    "UserRole",
    "SessionStatus",
    "NotificationType",
    "Decision",
    "ALLOWED_DURATIONS",
    "SUBJECTS",
]
