"""
Session Lifecycle Coordinator

The single entry point that changes session state. Each booking or response
runs under one lock and inside one database transaction together with its
notification, so a session is never observed transitioned without the paired
notification, or the reverse. If the notification cannot be stored the whole
operation rolls back and the caller receives StorageError.
"""
import asyncio
import logging
from datetime import datetime, timedelta
from typing import Any, Dict, Optional
from uuid import UUID

from sqlalchemy.ext.asyncio import async_sessionmaker

from scholarlink.database import session_scope
from scholarlink.datetime_utils import as_utc, utc_now
from scholarlink.models.enums import Decision, NotificationType
from scholarlink.models.session_request import SessionRequest
from scholarlink.services.exceptions import ValidationError
from scholarlink.services.notification_center import NotificationCenter
from scholarlink.services.session_store import SessionStore
from scholarlink.services.user_directory import UserDirectory

logger = logging.getLogger(__name__)


class SessionLifecycleCoordinator:
    """Enforces booking rules and pairs every transition with its notification"""

    def __init__(
        self,
        session_factory: async_sessionmaker,
        users: Optional[UserDirectory] = None,
        sessions: Optional[SessionStore] = None,
        notifications: Optional[NotificationCenter] = None,
    ):
        self.session_factory = session_factory
        self.users = users or UserDirectory(session_factory)
        self.sessions = sessions or SessionStore(session_factory)
        self.notifications = notifications or NotificationCenter(session_factory)
        self._lock: Optional[asyncio.Lock] = None

    @property
    def lock(self) -> asyncio.Lock:
        """Serializes coordinator operations; created inside the running loop on first use"""
        if self._lock is None:
            self._lock = asyncio.Lock()
        return self._lock

    async def book_session(
        self,
        student_id: UUID,
        tutor_id: UUID,
        subject: str,
        requested_at: datetime,
        duration_minutes: int,
        message: str = "",
    ) -> SessionRequest:
        """
        Create a pending booking and notify the tutor.

        The tutor's current hourly rate is copied onto the booking.

        Raises:
            NotFound: Unknown student or tutor
            ValidationError: Self-booking, not a tutor, subject not offered,
                no hourly rate, past start time or unsupported duration
        """
        async with self.lock:
            async with session_scope(self.session_factory) as db:
                student = await self.users.get_user(student_id, db=db)
                tutor = await self.users.get_user(tutor_id, db=db)

                if student.id == tutor.id:
                    raise ValidationError("You cannot book a session with yourself.")
                if not tutor.is_tutor:
                    raise ValidationError(f"{tutor.display_name} is not a tutor.")
                if subject not in (tutor.selected_subjects or []):
                    raise ValidationError(f"{tutor.display_name} does not offer {subject}.")
                if tutor.hourly_rate is None:
                    raise ValidationError(f"{tutor.display_name} has not set an hourly rate.")

                request = await self.sessions.create_request(
                    student_id=student.id,
                    tutor_id=tutor.id,
                    subject=subject,
                    requested_at=requested_at,
                    duration_minutes=duration_minutes,
                    message=message,
                    hourly_rate=tutor.hourly_rate,
                    db=db,
                )
                await self.notifications.notify(
                    NotificationType.SESSION_REQUEST,
                    recipient_email=tutor.email,
                    title="New Session Request",
                    message=f"{student.display_name} wants to book a {subject} session with you",
                    related_session_id=request.id,
                    db=db,
                )

        logger.info(f"Booked session {request.id}: student {student.id} -> tutor {tutor.id}")
        return request

    async def respond(self, session_id: UUID, acting_tutor_id: UUID, decision: Decision) -> SessionRequest:
        """
        Accept or reject a pending booking and notify the student.

        Nothing is emitted if the transition fails. The tutor is not notified
        of their own action.

        Raises:
            NotFound: Unknown session
            Forbidden: Acting user is not the session's tutor
            InvalidTransition: Session already answered
        """
        decision = Decision(decision)

        async with self.lock:
            async with session_scope(self.session_factory) as db:
                if decision is Decision.ACCEPT:
                    request = await self.sessions.accept(session_id, acting_tutor_id, db=db)
                else:
                    request = await self.sessions.reject(session_id, acting_tutor_id, db=db)

                student = await self.users.get_user(request.student_id, include_deleted=True, db=db)
                tutor = await self.users.get_user(request.tutor_id, include_deleted=True, db=db)

                if decision is Decision.ACCEPT:
                    await self.notifications.notify(
                        NotificationType.SESSION_ACCEPTED,
                        recipient_email=student.email,
                        title="Session Accepted!",
                        message=f"{tutor.display_name} accepted your {request.subject} session request",
                        related_session_id=request.id,
                        db=db,
                    )
                else:
                    await self.notifications.notify(
                        NotificationType.SESSION_REJECTED,
                        recipient_email=student.email,
                        title="Session Request Declined",
                        message=f"{tutor.display_name} declined your {request.subject} session request",
                        related_session_id=request.id,
                        db=db,
                    )

        return request

    async def send_reminders(self, window_hours: int, now: Optional[datetime] = None) -> Dict[str, Any]:
        """
        Remind both participants of accepted sessions starting within the window.

        Each participant receives at most one reminder per session. Session
        records are not modified.

        Returns:
            Summary with sessions_checked and reminders_sent
        """
        now = as_utc(now or utc_now())
        end = now + timedelta(hours=window_hours)
        reminders_sent = 0

        async with self.lock:
            async with session_scope(self.session_factory) as db:
                upcoming = await self.sessions.list_accepted_between(now, end, db=db)

                for request in upcoming:
                    student = await self.users.get_user(request.student_id, include_deleted=True, db=db)
                    tutor = await self.users.get_user(request.tutor_id, include_deleted=True, db=db)
                    starts = as_utc(request.requested_at).strftime("%Y-%m-%d %H:%M UTC")

                    for recipient, counterpart in ((student, tutor), (tutor, student)):
                        if not recipient.is_active:
                            continue
                        if await self.notifications.has_notification(
                            recipient.email, request.id, NotificationType.GENERAL, db=db
                        ):
                            continue
                        await self.notifications.notify(
                            NotificationType.GENERAL,
                            recipient_email=recipient.email,
                            title="Upcoming Session",
                            message=(
                                f"Your {request.subject} session with {counterpart.display_name} "
                                f"starts at {starts}"
                            ),
                            related_session_id=request.id,
                            db=db,
                        )
                        reminders_sent += 1

        return {"sessions_checked": len(upcoming), "reminders_sent": reminders_sent}
