"""
Integration tests for SessionStore

Lifecycle state machine, ownership checks and projections.
"""
import uuid
from datetime import timedelta

import pytest
import pytest_asyncio

from helpers import create_learner, create_tutor
from scholarlink.datetime_utils import utc_now
from scholarlink.models.enums import SessionStatus
from scholarlink.services.exceptions import (
    Forbidden,
    InvalidTransition,
    NotFound,
    ValidationError,
)


@pytest_asyncio.fixture
async def pair(services):
    student = await create_learner(services)
    tutor = await create_tutor(services)
    return student, tutor


async def _request(services, student, tutor, when, duration=60, rate=40.0):
    return await services.sessions.create_request(
        student_id=student.id,
        tutor_id=tutor.id,
        subject="Mathematics",
        requested_at=when,
        duration_minutes=duration,
        message="  Calculus help  ",
        hourly_rate=rate,
    )


class TestCreateRequest:

    @pytest.mark.asyncio
    async def test_created_pending(self, services, pair, future_time):
        student, tutor = pair
        request = await _request(services, student, tutor, future_time, duration=90, rate=40.0)

        assert request.status == SessionStatus.PENDING
        assert request.message == "Calculus help"
        assert request.total_cost == 60.0
        assert request.responded_at is None

        stored = await services.sessions.get(request.id)
        assert stored.hourly_rate == 40.0
        assert stored.duration_minutes == 90

    @pytest.mark.asyncio
    async def test_past_time_rejected(self, services, pair):
        student, tutor = pair
        with pytest.raises(ValidationError):
            await _request(services, student, tutor, utc_now() - timedelta(hours=1))
        assert await services.sessions.list_for_student(student.id) == []

    @pytest.mark.asyncio
    async def test_unsupported_duration(self, services, pair, future_time):
        student, tutor = pair
        with pytest.raises(ValidationError):
            await _request(services, student, tutor, future_time, duration=45)

    @pytest.mark.asyncio
    async def test_get_unknown(self, services):
        with pytest.raises(NotFound):
            await services.sessions.get(uuid.uuid4())


class TestTransitions:

    @pytest.mark.asyncio
    async def test_accept(self, services, pair, future_time):
        student, tutor = pair
        request = await _request(services, student, tutor, future_time)

        accepted = await services.sessions.accept(request.id, tutor.id)

        assert accepted.status == SessionStatus.ACCEPTED
        assert accepted.responded_at is not None
        assert (await services.sessions.get(request.id)).status == SessionStatus.ACCEPTED

    @pytest.mark.asyncio
    async def test_reject(self, services, pair, future_time):
        student, tutor = pair
        request = await _request(services, student, tutor, future_time)

        rejected = await services.sessions.reject(request.id, tutor.id)
        assert rejected.status == SessionStatus.REJECTED

    @pytest.mark.asyncio
    @pytest.mark.parametrize("first,second", [("accept", "accept"), ("accept", "reject"), ("reject", "accept"), ("reject", "reject")])
    async def test_terminal_states_are_final(self, services, pair, future_time, first, second):
        student, tutor = pair
        request = await _request(services, student, tutor, future_time)
        await getattr(services.sessions, first)(request.id, tutor.id)

        with pytest.raises(InvalidTransition):
            await getattr(services.sessions, second)(request.id, tutor.id)

        expected = SessionStatus.ACCEPTED if first == "accept" else SessionStatus.REJECTED
        assert (await services.sessions.get(request.id)).status == expected

    @pytest.mark.asyncio
    async def test_wrong_tutor_forbidden(self, services, pair, future_time):
        student, tutor = pair
        other = await create_tutor(services, name="otto")
        request = await _request(services, student, tutor, future_time)

        with pytest.raises(Forbidden):
            await services.sessions.accept(request.id, other.id)
        with pytest.raises(Forbidden):
            await services.sessions.reject(request.id, student.id)

        assert (await services.sessions.get(request.id)).status == SessionStatus.PENDING

    @pytest.mark.asyncio
    async def test_unknown_session(self, services, pair):
        _, tutor = pair
        with pytest.raises(NotFound):
            await services.sessions.accept(uuid.uuid4(), tutor.id)


class TestProjections:

    @pytest.mark.asyncio
    async def test_per_student_and_tutor_views(self, services, pair, future_time):
        student, tutor = pair
        other_student = await create_learner(services, name="olga")

        first = await _request(services, student, tutor, future_time)
        second = await _request(services, student, tutor, future_time + timedelta(days=1))
        third = await _request(services, other_student, tutor, future_time)

        await services.sessions.accept(first.id, tutor.id)
        await services.sessions.reject(third.id, tutor.id)

        assert [s.id for s in await services.sessions.list_for_student(student.id)] == [first.id, second.id]
        assert [s.id for s in await services.sessions.list_for_tutor(tutor.id)] == [first.id, second.id, third.id]
        assert [s.id for s in await services.sessions.list_pending_for_tutor(tutor.id)] == [second.id]
        assert [s.id for s in await services.sessions.list_accepted_for_student(student.id)] == [first.id]
        assert await services.sessions.list_accepted_for_student(other_student.id) == []

    @pytest.mark.asyncio
    async def test_accepted_between(self, services, pair):
        student, tutor = pair
        now = utc_now()
        soon = await _request(services, student, tutor, now + timedelta(hours=3))
        later = await _request(services, student, tutor, now + timedelta(days=5))
        await _request(services, student, tutor, now + timedelta(hours=4))  # stays pending

        await services.sessions.accept(soon.id, tutor.id)
        await services.sessions.accept(later.id, tutor.id)

        upcoming = await services.sessions.list_accepted_between(now, now + timedelta(hours=24))
        assert [s.id for s in upcoming] == [soon.id]
