"""Enum definitions and fixed vocabularies for ScholarLink models."""
import enum


class UserRole(str, enum.Enum):
    """The two marketplace roles. Every user starts as a learner."""

    LEARNER = "learner"
    TUTOR = "tutor"


class SessionStatus(str, enum.Enum):
    """Booking lifecycle: pending is initial, accepted/rejected are terminal."""

    PENDING = "pending"
    ACCEPTED = "accepted"
    REJECTED = "rejected"

    @property
    def is_terminal(self) -> bool:
        return self is not SessionStatus.PENDING


class NotificationType(str, enum.Enum):
    SESSION_REQUEST = "session_request"
    SESSION_ACCEPTED = "session_accepted"
    SESSION_REJECTED = "session_rejected"
    GENERAL = "general"


class Decision(str, enum.Enum):
    """A tutor's answer to a pending booking request."""

    ACCEPT = "accept"
    REJECT = "reject"

    @property
    def target_status(self) -> SessionStatus:
        if self is Decision.ACCEPT:
            return SessionStatus.ACCEPTED
        return SessionStatus.REJECTED


# Session lengths a learner can book, in minutes
ALLOWED_DURATIONS = (30, 60, 90, 120)

# Subject catalog offered during profile setup
SUBJECTS = [
    "Mathematics",
    "Programming",
    "Science",
    "English",
    "History",
    "Physics",
    "Chemistry",
    "Biology",
    "Psychology",
    "Economics",
    "Art",
    "Music",
]


def enum_values(enum_cls) -> list:
    """Persist enum values (not member names) in string columns"""
    return [member.value for member in enum_cls]
