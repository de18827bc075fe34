"""
User Directory Service

Registration, credential checks, profile completion and tutor discovery.
Emails and usernames are unique case-insensitively; passwords are compared
by exact value.
"""
import logging
import math
from typing import Dict, List, Optional, Sequence
from uuid import UUID

from sqlalchemy import func, or_, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from scholarlink.database import session_scope
from scholarlink.datetime_utils import utc_now
from scholarlink.models.enums import SUBJECTS, UserRole
from scholarlink.models.user import User
from scholarlink.services.exceptions import (
    DuplicateEmail,
    DuplicateUsername,
    InvalidCredentials,
    NotFound,
    ValidationError,
)

logger = logging.getLogger(__name__)


def _clean(value: Optional[str]) -> str:
    return (value or "").strip()


class UserDirectory:
    """Holds learner and tutor records for the other services"""

    def __init__(self, session_factory: async_sessionmaker):
        self.session_factory = session_factory

    async def register(
        self,
        email: str,
        username: str,
        password: str,
        confirm_password: Optional[str] = None,
        db: Optional[AsyncSession] = None,
    ) -> User:
        """
        Create a learner account with an incomplete profile.

        Raises:
            ValidationError: A field is empty or the confirmation differs
            DuplicateEmail: Email already registered (any case)
            DuplicateUsername: Username already taken (any case)
        """
        email = _clean(email).lower()
        username = _clean(username)
        password = _clean(password)

        if not email or not username or not password:
            raise ValidationError("Please fill in all fields.")
        if confirm_password is not None and _clean(confirm_password) != password:
            raise ValidationError("Passwords do not match.")

        async with session_scope(self.session_factory, db) as session:
            if await self._exists(session, User.email == email):
                raise DuplicateEmail("This email is already registered.")
            if await self._exists(session, User.username_normalized == username.lower()):
                raise DuplicateUsername("This username is already taken.")

            user = User(
                email=email,
                username=username,
                username_normalized=username.lower(),
                password=password,
                role=UserRole.LEARNER,
                is_profile_complete=False,
                selected_subjects=[],
            )
            session.add(user)
            try:
                await session.flush()
            except IntegrityError as e:
                # Lost a race with a concurrent registration
                if "email" in str(e.orig).lower():
                    raise DuplicateEmail("This email is already registered.") from e
                raise DuplicateUsername("This username is already taken.") from e

        logger.info(f"Registered user {user.username} ({user.id})")
        return user

    async def authenticate(
        self, identifier: str, password: str, db: Optional[AsyncSession] = None
    ) -> User:
        """
        Find the user whose email or username matches `identifier`.

        Raises:
            InvalidCredentials: No active user matches the identifier and password
        """
        identifier = _clean(identifier).lower()
        password = _clean(password)
        if not identifier or not password:
            raise InvalidCredentials()

        async with session_scope(self.session_factory, db) as session:
            result = await session.execute(
                select(User).where(
                    or_(User.email == identifier, User.username_normalized == identifier),
                    User.password == password,
                    User.deleted_at.is_(None),
                )
            )
            user = result.scalars().first()

        if user is None:
            logger.warning("Failed login attempt")
            raise InvalidCredentials()
        return user

    async def complete_profile(
        self,
        user_id: UUID,
        first_name: str,
        last_name: str,
        bio: str,
        role: UserRole,
        subjects: Sequence[str],
        hourly_rate: Optional[float] = None,
        years_experience: Optional[int] = None,
        db: Optional[AsyncSession] = None,
    ) -> User:
        """
        Fill in profile fields and mark the profile complete.

        Tutors must offer at least one subject, a positive hourly rate and
        non-negative years of experience. Learners have rate and experience
        cleared.

        Raises:
            NotFound: Unknown or deleted user
            ValidationError: Missing name or incomplete tutor details
        """
        role = UserRole(role)
        first_name = _clean(first_name)
        last_name = _clean(last_name)
        subjects = list(subjects or [])

        if not first_name or not last_name:
            raise ValidationError("Please fill in your name.")

        if role == UserRole.TUTOR:
            if not subjects:
                raise ValidationError("Please select at least one subject area.")
            if hourly_rate is None or not math.isfinite(hourly_rate) or hourly_rate <= 0:
                raise ValidationError("Please enter a valid hourly rate.")
            if years_experience is None or years_experience < 0:
                raise ValidationError("Please enter valid years of experience.")
        else:
            hourly_rate = None
            years_experience = None

        async with session_scope(self.session_factory, db) as session:
            user = await self._load(session, user_id)
            user.first_name = first_name
            user.last_name = last_name
            user.bio = _clean(bio)
            user.role = role
            user.selected_subjects = subjects
            user.hourly_rate = hourly_rate
            user.years_experience = years_experience
            user.is_profile_complete = True

        logger.info(f"Profile completed for {user.username} as {role.value}")
        return user

    async def get_user(
        self, user_id: UUID, include_deleted: bool = False, db: Optional[AsyncSession] = None
    ) -> User:
        """Raises NotFound for unknown users, and for deleted ones unless `include_deleted`"""
        async with session_scope(self.session_factory, db) as session:
            return await self._load(session, user_id, include_deleted)

    async def list_tutors(
        self,
        only_complete: bool = True,
        subject: Optional[str] = None,
        db: Optional[AsyncSession] = None,
    ) -> List[User]:
        """Tutors in registration order, optionally complete-only and by subject"""
        query = select(User).where(User.role == UserRole.TUTOR, User.deleted_at.is_(None))
        if only_complete:
            query = query.where(User.is_profile_complete.is_(True))
        query = query.order_by(User.date_created)

        async with session_scope(self.session_factory, db) as session:
            tutors = list((await session.execute(query)).scalars().all())

        # Subject membership is checked in Python: JSON containment differs per backend
        if subject is not None:
            tutors = [tutor for tutor in tutors if subject in (tutor.selected_subjects or [])]
        return tutors

    async def list_users(self, db: Optional[AsyncSession] = None) -> List[User]:
        """All active users in registration order (admin view)"""
        async with session_scope(self.session_factory, db) as session:
            result = await session.execute(
                select(User).where(User.deleted_at.is_(None)).order_by(User.date_created)
            )
            return list(result.scalars().all())

    async def tutor_counts_by_subject(self, db: Optional[AsyncSession] = None) -> Dict[str, int]:
        """Number of complete tutors offering each catalog subject"""
        tutors = await self.list_tutors(only_complete=True, db=db)
        return {
            subject: sum(1 for tutor in tutors if subject in (tutor.selected_subjects or []))
            for subject in SUBJECTS
        }

    async def user_stats(self, db: Optional[AsyncSession] = None) -> Dict[str, int]:
        """Totals shown on the admin panel"""
        async with session_scope(self.session_factory, db) as session:
            result = await session.execute(
                select(User.role, func.count(User.id))
                .where(User.deleted_at.is_(None))
                .group_by(User.role)
            )
            counts = {role: count for role, count in result.all()}

        tutors = counts.get(UserRole.TUTOR, 0)
        learners = counts.get(UserRole.LEARNER, 0)
        return {"total_users": tutors + learners, "tutors": tutors, "learners": learners}

    async def delete_user(self, user_id: UUID, db: Optional[AsyncSession] = None) -> User:
        """
        Administrative removal (soft delete).

        The record stays so sessions and notifications keep their
        counterparty; the user is hidden from listings and can no longer log
        in. Email and username remain reserved.

        Raises:
            NotFound: Unknown or already deleted user
        """
        async with session_scope(self.session_factory, db) as session:
            user = await self._load(session, user_id)
            user.deleted_at = utc_now()

        logger.info(f"Deleted user {user.username} ({user.id})")
        return user

    async def _load(self, session: AsyncSession, user_id: UUID, include_deleted: bool = False) -> User:
        user = await session.get(User, user_id)
        if user is None or (user.deleted_at is not None and not include_deleted):
            raise NotFound(f"User {user_id} not found")
        return user

    async def _exists(self, session: AsyncSession, condition) -> bool:
        result = await session.execute(select(User.id).where(condition).limit(1))
        return result.first() is not None
