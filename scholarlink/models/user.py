"""User model - Learner and tutor identity and profile"""
from sqlalchemy import Column, String, Integer, Float, Boolean, DateTime, Text, JSON, Enum, Uuid, Index
import uuid

from scholarlink.database import Base
from scholarlink.datetime_utils import monotonic_utc_now
from scholarlink.models.enums import UserRole, enum_values


class User(Base):
    """Marketplace user; tutors carry subjects, hourly rate and experience"""

    __tablename__ = "users"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    email = Column(String(255), unique=True, nullable=False)  # stored lowercased
    username = Column(String(100), nullable=False)
    username_normalized = Column(String(100), unique=True, nullable=False)
    password = Column(String(255), nullable=False)  # plaintext, compared exactly
    date_created = Column(DateTime(timezone=True), default=monotonic_utc_now, nullable=False)

    # Profile
    first_name = Column(String(100), nullable=False, default="")
    last_name = Column(String(100), nullable=False, default="")
    bio = Column(Text, nullable=False, default="")
    role = Column(
        Enum(UserRole, name="user_role", native_enum=False, values_callable=enum_values, length=20),
        nullable=False,
        default=UserRole.LEARNER,
    )
    is_profile_complete = Column(Boolean, nullable=False, default=False)
    selected_subjects = Column(JSON, nullable=False, default=list)  # ordered, no dedup
    hourly_rate = Column(Float, nullable=True)  # tutors only
    years_experience = Column(Integer, nullable=True)  # tutors only

    # Soft delete marker set by admin removal
    deleted_at = Column(DateTime(timezone=True), nullable=True)

    __table_args__ = (
        Index("idx_users_role", "role"),
    )

    @property
    def is_tutor(self) -> bool:
        return self.role == UserRole.TUTOR

    @property
    def is_active(self) -> bool:
        return self.deleted_at is None

    @property
    def display_name(self) -> str:
        full_name = f"{self.first_name or ''} {self.last_name or ''}".strip()
        return full_name or self.username

    def __repr__(self):
        return f"<User(id={self.id}, username={self.username}, role={self.role})>"
