"""SessionRequest model - A learner's booking request with a tutor"""
from sqlalchemy import Column, String, Integer, Float, DateTime, Text, Enum, Uuid, ForeignKey, Index
import uuid

from scholarlink.database import Base
from scholarlink.datetime_utils import monotonic_utc_now
from scholarlink.models.enums import SessionStatus, enum_values


class SessionRequest(Base):
    """
    Booking between a student and a tutor.

    The hourly rate is a snapshot copied from the tutor at booking time.
    Status moves once, from pending to accepted or rejected, and the record
    is immutable afterwards.
    """

    __tablename__ = "session_requests"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    student_id = Column(Uuid, ForeignKey("users.id"), nullable=False)
    tutor_id = Column(Uuid, ForeignKey("users.id"), nullable=False)
    subject = Column(String(100), nullable=False)
    requested_at = Column(DateTime(timezone=True), nullable=False)
    duration_minutes = Column(Integer, nullable=False)
    message = Column(Text, nullable=False, default="")
    hourly_rate = Column(Float, nullable=False)
    status = Column(
        Enum(SessionStatus, name="session_status", native_enum=False, values_callable=enum_values, length=20),
        nullable=False,
        default=SessionStatus.PENDING,
    )
    date_created = Column(DateTime(timezone=True), default=monotonic_utc_now, nullable=False)
    responded_at = Column(DateTime(timezone=True), nullable=True)

    # Indexes for the per-student / per-tutor projections
    __table_args__ = (
        Index("idx_session_requests_student", "student_id"),
        Index("idx_session_requests_tutor_status", "tutor_id", "status"),
        Index("idx_session_requests_requested_at", "requested_at"),
    )

    @property
    def total_cost(self) -> float:
        return self.hourly_rate * (self.duration_minutes / 60.0)

    @property
    def is_pending(self) -> bool:
        return self.status == SessionStatus.PENDING

    @property
    def is_accepted(self) -> bool:
        return self.status == SessionStatus.ACCEPTED

    @property
    def is_rejected(self) -> bool:
        return self.status == SessionStatus.REJECTED

    def __repr__(self):
        return f"<SessionRequest(id={self.id}, subject={self.subject}, status={self.status})>"
