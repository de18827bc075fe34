"""
Session Store

Owns booking records and their lifecycle status. A request starts pending
and moves exactly once, to accepted or rejected, by its tutor.
"""
import logging
from datetime import datetime
from typing import List, Optional
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from scholarlink.database import session_scope
from scholarlink.datetime_utils import as_utc, utc_now
from scholarlink.models.enums import ALLOWED_DURATIONS, SessionStatus
from scholarlink.models.session_request import SessionRequest
from scholarlink.services.exceptions import (
    Forbidden,
    InvalidTransition,
    NotFound,
    ValidationError,
)

logger = logging.getLogger(__name__)


def validate_booking_window(requested_at: datetime, duration_minutes: int, now: Optional[datetime] = None) -> datetime:
    """
    Check the requested start time and duration of a booking.

    Args:
        requested_at: Requested start; naive values are taken as UTC
        duration_minutes: Session length
        now: Reference time (defaults to the current UTC time)

    Returns:
        The requested start as an aware UTC datetime

    Raises:
        ValidationError: Start in the past or unsupported duration
    """
    if requested_at is None:
        raise ValidationError("Please choose a date and time for the session.")
    requested_at = as_utc(requested_at)
    if requested_at < as_utc(now or utc_now()):
        raise ValidationError("Requested session time is in the past.")
    if duration_minutes not in ALLOWED_DURATIONS:
        raise ValidationError(
            f"Invalid duration: {duration_minutes}. Must be one of: {list(ALLOWED_DURATIONS)}"
        )
    return requested_at


class SessionStore:
    """Booking records plus per-student and per-tutor projections"""

    def __init__(self, session_factory: async_sessionmaker):
        self.session_factory = session_factory

    async def create_request(
        self,
        student_id: UUID,
        tutor_id: UUID,
        subject: str,
        requested_at: datetime,
        duration_minutes: int,
        message: Optional[str],
        hourly_rate: float,
        db: Optional[AsyncSession] = None,
    ) -> SessionRequest:
        """
        Record a new booking in the pending state.

        Raises:
            ValidationError: Past start time or duration outside 30/60/90/120
        """
        requested_at = validate_booking_window(requested_at, duration_minutes)

        request = SessionRequest(
            student_id=student_id,
            tutor_id=tutor_id,
            subject=subject,
            requested_at=requested_at,
            duration_minutes=duration_minutes,
            message=(message or "").strip(),
            hourly_rate=hourly_rate,
            status=SessionStatus.PENDING,
        )
        async with session_scope(self.session_factory, db) as session:
            session.add(request)
            await session.flush()

        logger.info(
            f"Session request {request.id} created: {subject}, "
            f"{duration_minutes}min at {requested_at.isoformat()}"
        )
        return request

    async def get(self, session_id: UUID, db: Optional[AsyncSession] = None) -> SessionRequest:
        async with session_scope(self.session_factory, db) as session:
            request = await session.get(SessionRequest, session_id)
        if request is None:
            raise NotFound(f"Session {session_id} not found")
        return request

    async def list_for_student(
        self, student_id: UUID, status: Optional[SessionStatus] = None, db: Optional[AsyncSession] = None
    ) -> List[SessionRequest]:
        return await self._list(SessionRequest.student_id == student_id, status, db)

    async def list_for_tutor(
        self, tutor_id: UUID, status: Optional[SessionStatus] = None, db: Optional[AsyncSession] = None
    ) -> List[SessionRequest]:
        return await self._list(SessionRequest.tutor_id == tutor_id, status, db)

    async def list_pending_for_tutor(self, tutor_id: UUID, db: Optional[AsyncSession] = None) -> List[SessionRequest]:
        return await self.list_for_tutor(tutor_id, SessionStatus.PENDING, db)

    async def list_accepted_for_student(self, student_id: UUID, db: Optional[AsyncSession] = None) -> List[SessionRequest]:
        return await self.list_for_student(student_id, SessionStatus.ACCEPTED, db)

    async def list_accepted_between(
        self, start: datetime, end: datetime, db: Optional[AsyncSession] = None
    ) -> List[SessionRequest]:
        """Accepted sessions starting in [start, end), earliest first"""
        async with session_scope(self.session_factory, db) as session:
            result = await session.execute(
                select(SessionRequest)
                .where(
                    SessionRequest.status == SessionStatus.ACCEPTED,
                    SessionRequest.requested_at >= start,
                    SessionRequest.requested_at < end,
                )
                .order_by(SessionRequest.requested_at)
            )
            return list(result.scalars().all())

    async def accept(self, session_id: UUID, acting_tutor_id: UUID, db: Optional[AsyncSession] = None) -> SessionRequest:
        """pending -> accepted; see _transition for failure modes"""
        return await self._transition(session_id, acting_tutor_id, SessionStatus.ACCEPTED, db)

    async def reject(self, session_id: UUID, acting_tutor_id: UUID, db: Optional[AsyncSession] = None) -> SessionRequest:
        """pending -> rejected; see _transition for failure modes"""
        return await self._transition(session_id, acting_tutor_id, SessionStatus.REJECTED, db)

    async def _transition(
        self,
        session_id: UUID,
        acting_tutor_id: UUID,
        target: SessionStatus,
        db: Optional[AsyncSession],
    ) -> SessionRequest:
        """
        Move a pending request to a terminal status.

        Raises:
            NotFound: No such session
            Forbidden: Acting user is not the session's tutor
            InvalidTransition: Session is no longer pending
        """
        async with session_scope(self.session_factory, db) as session:
            result = await session.execute(
                select(SessionRequest)
                .where(SessionRequest.id == session_id)
                .with_for_update()
            )
            request = result.scalar_one_or_none()

            if request is None:
                raise NotFound(f"Session {session_id} not found")
            if request.tutor_id != acting_tutor_id:
                logger.warning(f"User {acting_tutor_id} tried to respond to session {session_id}")
                raise Forbidden("Only the requested tutor can respond to this session")
            if request.status != SessionStatus.PENDING:
                logger.warning(
                    f"Rejected transition {request.status.value} -> {target.value} for session {session_id}"
                )
                raise InvalidTransition(
                    f"Session is already {request.status.value}",
                    details={"current_status": request.status.value, "requested_status": target.value},
                )

            request.status = target
            request.responded_at = utc_now()
            await session.flush()

        logger.info(f"Session {session_id} {target.value}")
        return request

    async def _list(self, condition, status: Optional[SessionStatus], db: Optional[AsyncSession]) -> List[SessionRequest]:
        query = select(SessionRequest).where(condition)
        if status is not None:
            query = query.where(SessionRequest.status == status)
        query = query.order_by(SessionRequest.date_created)

        async with session_scope(self.session_factory, db) as session:
            result = await session.execute(query)
            return list(result.scalars().all())
