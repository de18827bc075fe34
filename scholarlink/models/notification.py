"""Notification model - Per-recipient inbox entries"""
from sqlalchemy import Column, String, Boolean, DateTime, Text, Enum, Uuid, ForeignKey, Index
import uuid

from scholarlink.database import Base
from scholarlink.datetime_utils import monotonic_utc_now
from scholarlink.models.enums import NotificationType, enum_values


class Notification(Base):
    """User-facing event; only the read flag changes after creation"""

    __tablename__ = "notifications"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    title = Column(String(200), nullable=False)
    message = Column(Text, nullable=False)
    type = Column(
        Enum(NotificationType, name="notification_type", native_enum=False, values_callable=enum_values, length=30),
        nullable=False,
        default=NotificationType.GENERAL,
    )
    recipient_email = Column(String(255), nullable=False)  # stored lowercased
    related_session_id = Column(Uuid, ForeignKey("session_requests.id"), nullable=True)
    created_at = Column(DateTime(timezone=True), default=monotonic_utc_now, nullable=False)
    is_read = Column(Boolean, nullable=False, default=False)

    __table_args__ = (
        Index("idx_notifications_recipient_read", "recipient_email", "is_read"),
        Index("idx_notifications_related_session", "related_session_id"),
    )

    def __repr__(self):
        return f"<Notification(id={self.id}, type={self.type}, recipient={self.recipient_email})>"
