"""
Integration tests for UserDirectory

Registration conflicts, login by email or username, profile completion,
tutor discovery and admin removal against a real database.
"""
import pytest

from helpers import create_learner, create_tutor
from scholarlink.models.enums import SUBJECTS, UserRole
from scholarlink.services.exceptions import (
    DuplicateEmail,
    DuplicateUsername,
    InvalidCredentials,
    NotFound,
    ValidationError,
)


class TestRegistration:

    @pytest.mark.asyncio
    async def test_register_creates_incomplete_learner(self, services):
        user = await services.users.register("  Sam@Example.com ", "SamL", "pw")

        assert user.email == "sam@example.com"
        assert user.username == "SamL"
        assert user.role == UserRole.LEARNER
        assert user.is_profile_complete is False
        assert user.selected_subjects == []
        assert user.hourly_rate is None

    @pytest.mark.asyncio
    async def test_duplicate_email_any_case(self, services):
        await services.users.register("sam@example.com", "sam", "pw")

        with pytest.raises(DuplicateEmail):
            await services.users.register("SAM@EXAMPLE.COM", "someone_else", "pw")

        assert len(await services.users.list_users()) == 1

    @pytest.mark.asyncio
    async def test_duplicate_username_any_case(self, services):
        await services.users.register("sam@example.com", "Sam", "pw")

        with pytest.raises(DuplicateUsername):
            await services.users.register("other@example.com", "sAM", "pw")

        assert len(await services.users.list_users()) == 1

    @pytest.mark.asyncio
    async def test_empty_fields_rejected(self, services):
        with pytest.raises(ValidationError):
            await services.users.register("sam@example.com", "   ", "pw")

    @pytest.mark.asyncio
    async def test_password_confirmation_mismatch(self, services):
        with pytest.raises(ValidationError, match="do not match"):
            await services.users.register("sam@example.com", "sam", "pw", confirm_password="pw2")


class TestAuthentication:

    @pytest.mark.asyncio
    async def test_login_by_email_or_username(self, services):
        user = await services.users.register("sam@example.com", "SamL", "pw")

        assert (await services.users.authenticate("SAM@example.com", "pw")).id == user.id
        assert (await services.users.authenticate("saml", "pw")).id == user.id

    @pytest.mark.asyncio
    async def test_wrong_password(self, services):
        await services.users.register("sam@example.com", "sam", "pw")

        with pytest.raises(InvalidCredentials):
            await services.users.authenticate("sam", "PW")

    @pytest.mark.asyncio
    async def test_unknown_identifier(self, services):
        with pytest.raises(InvalidCredentials):
            await services.users.authenticate("nobody", "pw")


class TestProfileCompletion:

    @pytest.mark.asyncio
    async def test_tutor_profile(self, services):
        tutor = await create_tutor(services, subjects=["Mathematics", "Physics"], hourly_rate=45.0)

        assert tutor.role == UserRole.TUTOR
        assert tutor.is_profile_complete is True
        assert tutor.selected_subjects == ["Mathematics", "Physics"]
        assert tutor.hourly_rate == 45.0
        assert tutor.years_experience == 3

    @pytest.mark.asyncio
    async def test_subjects_keep_order_and_duplicates(self, services):
        tutor = await create_tutor(services, subjects=["Art", "Music", "Art"])
        reloaded = await services.users.get_user(tutor.id)
        assert reloaded.selected_subjects == ["Art", "Music", "Art"]

    @pytest.mark.asyncio
    async def test_name_required(self, services):
        user = await services.users.register("sam@example.com", "sam", "pw")

        with pytest.raises(ValidationError, match="name"):
            await services.users.complete_profile(
                user.id, first_name="", last_name="Smith", bio="", role=UserRole.LEARNER, subjects=[]
            )

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "subjects,rate,experience",
        [
            ([], 40.0, 2),
            (["Mathematics"], None, 2),
            (["Mathematics"], 0.0, 2),
            (["Mathematics"], float("nan"), 2),
            (["Mathematics"], float("inf"), 2),
            (["Mathematics"], float("-inf"), 2),
            (["Mathematics"], 40.0, None),
            (["Mathematics"], 40.0, -1),
        ],
    )
    async def test_tutor_requirements(self, services, subjects, rate, experience):
        user = await services.users.register("tara@example.com", "tara", "pw")

        with pytest.raises(ValidationError):
            await services.users.complete_profile(
                user.id,
                first_name="Tara",
                last_name="Tutor",
                bio="",
                role=UserRole.TUTOR,
                subjects=subjects,
                hourly_rate=rate,
                years_experience=experience,
            )

        assert (await services.users.get_user(user.id)).is_profile_complete is False

    @pytest.mark.asyncio
    async def test_learner_to_tutor_reclassification(self, services):
        learner = await create_learner(services)
        tutor = await services.users.complete_profile(
            learner.id,
            first_name="Sam",
            last_name="Student",
            bio="",
            role=UserRole.TUTOR,
            subjects=["English"],
            hourly_rate=30.0,
            years_experience=0,
        )
        assert tutor.role == UserRole.TUTOR

    @pytest.mark.asyncio
    async def test_unknown_user(self, services):
        import uuid

        with pytest.raises(NotFound):
            await services.users.complete_profile(
                uuid.uuid4(), first_name="A", last_name="B", bio="", role=UserRole.LEARNER, subjects=[]
            )


class TestTutorDiscovery:

    @pytest.mark.asyncio
    async def test_list_tutors_in_registration_order(self, services):
        first = await create_tutor(services, name="zoe")
        await create_learner(services, name="sam")
        second = await create_tutor(services, name="adam", subjects=["Physics"])

        tutors = await services.users.list_tutors()
        assert [t.id for t in tutors] == [first.id, second.id]

    @pytest.mark.asyncio
    async def test_filter_by_subject(self, services):
        await create_tutor(services, name="zoe", subjects=["Mathematics"])
        physics = await create_tutor(services, name="adam", subjects=["Physics", "Chemistry"])

        tutors = await services.users.list_tutors(subject="Chemistry")
        assert [t.id for t in tutors] == [physics.id]

    @pytest.mark.asyncio
    async def test_subject_counts_and_stats(self, services):
        await create_tutor(services, name="zoe", subjects=["Mathematics", "Physics"])
        await create_tutor(services, name="adam", subjects=["Physics"])
        await create_learner(services, name="sam")

        counts = await services.users.tutor_counts_by_subject()
        assert list(counts) == SUBJECTS
        assert counts["Physics"] == 2
        assert counts["Mathematics"] == 1
        assert counts["Music"] == 0

        assert await services.users.user_stats() == {"total_users": 3, "tutors": 2, "learners": 1}


class TestDeleteUser:

    @pytest.mark.asyncio
    async def test_soft_delete_hides_user(self, services):
        tutor = await create_tutor(services)
        await services.users.delete_user(tutor.id)

        assert await services.users.list_tutors() == []
        assert await services.users.list_users() == []
        with pytest.raises(NotFound):
            await services.users.get_user(tutor.id)
        with pytest.raises(InvalidCredentials):
            await services.users.authenticate("tara", "secret")

        kept = await services.users.get_user(tutor.id, include_deleted=True)
        assert kept.deleted_at is not None

    @pytest.mark.asyncio
    async def test_deleted_identity_stays_reserved(self, services):
        user = await services.users.register("sam@example.com", "sam", "pw")
        await services.users.delete_user(user.id)

        with pytest.raises(DuplicateEmail):
            await services.users.register("sam@example.com", "sam2", "pw")

    @pytest.mark.asyncio
    async def test_delete_twice(self, services):
        user = await services.users.register("sam@example.com", "sam", "pw")
        await services.users.delete_user(user.id)
        with pytest.raises(NotFound):
            await services.users.delete_user(user.id)
