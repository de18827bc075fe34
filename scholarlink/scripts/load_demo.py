"""
Demo Scenario Loader

Loads pre-configured demo scenarios for consistent presentations.
Every record goes through the public services, so seeded data obeys the
same rules as live traffic.
Usage: python -m scholarlink.scripts.load_demo --scenario marketplace
"""
import argparse
import asyncio
import random
from datetime import timedelta
from typing import Any, Dict, List

from faker import Faker
from sqlalchemy import delete

from scholarlink.database import AsyncSessionLocal, init_db
from scholarlink.datetime_utils import utc_now
from scholarlink.models.enums import ALLOWED_DURATIONS, SUBJECTS, Decision, UserRole
from scholarlink.models.notification import Notification
from scholarlink.models.session_request import SessionRequest
from scholarlink.models.user import User
from scholarlink.services.container import ServiceContainer, build_services

DEMO_PASSWORD = "demo1234"


async def clear_demo_data(services: ServiceContainer):
    """Clear all existing data"""
    async with services.session_factory() as session:
        for model in (Notification, SessionRequest, User):
            await session.execute(delete(model))
        await session.commit()
    print("✓ Cleared existing data")


async def _create_user(services: ServiceContainer, fake: Faker, index: int, role: UserRole) -> User:
    first_name = fake.first_name()
    last_name = fake.last_name()
    username = f"{first_name.lower()}{index}"
    user = await services.users.register(
        email=f"{username}@scholarlink.demo",
        username=username,
        password=DEMO_PASSWORD,
    )

    if role == UserRole.TUTOR:
        return await services.users.complete_profile(
            user.id,
            first_name=first_name,
            last_name=last_name,
            bio=fake.sentence(nb_words=12),
            role=UserRole.TUTOR,
            subjects=random.sample(SUBJECTS, k=random.randint(1, 3)),
            hourly_rate=float(random.choice([25, 30, 40, 50, 65])),
            years_experience=random.randint(0, 15),
        )
    return await services.users.complete_profile(
        user.id,
        first_name=first_name,
        last_name=last_name,
        bio="",
        role=UserRole.LEARNER,
        subjects=[],
    )


async def load_marketplace_scenario(services: ServiceContainer, fake: Faker) -> Dict[str, Any]:
    """
    Load Marketplace scenario.

    Scenario: 6 tutors and 10 learners; every learner books two sessions and
    tutors answer roughly two thirds of them.
    """
    print("\nLoading Marketplace scenario...")

    tutors: List[User] = [await _create_user(services, fake, i, UserRole.TUTOR) for i in range(6)]
    learners: List[User] = [await _create_user(services, fake, i + 100, UserRole.LEARNER) for i in range(10)]
    print(f"  Created {len(tutors)} tutors and {len(learners)} learners")

    bookings = []
    now = utc_now()
    for learner in learners:
        for _ in range(2):
            tutor = random.choice(tutors)
            bookings.append(
                await services.coordinator.book_session(
                    student_id=learner.id,
                    tutor_id=tutor.id,
                    subject=random.choice(tutor.selected_subjects),
                    requested_at=now + timedelta(days=random.randint(1, 14), hours=random.randint(0, 8)),
                    duration_minutes=random.choice(ALLOWED_DURATIONS),
                    message=fake.sentence(nb_words=8),
                )
            )

    responded = 0
    for booking in bookings:
        roll = random.random()
        if roll < 0.33:
            continue
        decision = Decision.ACCEPT if roll < 0.8 else Decision.REJECT
        await services.coordinator.respond(booking.id, booking.tutor_id, decision)
        responded += 1

    print(f"  Created {len(bookings)} bookings, {responded} answered by tutors")
    print("  ✓ Marketplace scenario loaded")
    return {"tutors": len(tutors), "learners": len(learners), "bookings": len(bookings), "responded": responded}


async def load_pending_inbox_scenario(services: ServiceContainer, fake: Faker) -> Dict[str, Any]:
    """
    Load Pending Inbox scenario.

    Scenario: one tutor with 5 unanswered requests from 5 learners.
    """
    print("\nLoading Pending Inbox scenario...")

    tutor = await _create_user(services, fake, 1, UserRole.TUTOR)
    now = utc_now()
    bookings = 0
    for i in range(5):
        learner = await _create_user(services, fake, i + 100, UserRole.LEARNER)
        await services.coordinator.book_session(
            student_id=learner.id,
            tutor_id=tutor.id,
            subject=tutor.selected_subjects[0],
            requested_at=now + timedelta(days=i + 1),
            duration_minutes=60,
            message=fake.sentence(nb_words=8),
        )
        bookings += 1

    print(f"  Tutor {tutor.username} has {bookings} pending requests")
    print("  ✓ Pending Inbox scenario loaded")
    return {"tutors": 1, "learners": bookings, "bookings": bookings, "responded": 0}


SCENARIOS = {
    "marketplace": load_marketplace_scenario,
    "pending_inbox": load_pending_inbox_scenario,
}


async def load_scenario(scenario_name: str, services: ServiceContainer, seed: int = 42) -> Dict[str, Any]:
    """
    Load a demo scenario.

    Args:
        scenario_name: Name of scenario to load
        services: Wired services to load through
        seed: Random seed for reproducible demo data

    Raises:
        ValueError: Unknown scenario
    """
    if scenario_name not in SCENARIOS:
        raise ValueError(f"Unknown scenario '{scenario_name}'. Available: {', '.join(SCENARIOS)}")

    random.seed(seed)
    fake = Faker()
    Faker.seed(seed)

    await clear_demo_data(services)
    summary = await SCENARIOS[scenario_name](services, fake)

    print(f"\n✅ Scenario '{scenario_name}' loaded successfully!")
    print(f"Demo accounts use the password '{DEMO_PASSWORD}'")
    return summary


async def _run(scenario_name: str, seed: int):
    await init_db()
    await load_scenario(scenario_name, build_services(AsyncSessionLocal), seed)


def main():
    """CLI entry point"""
    parser = argparse.ArgumentParser(description="Load demo scenarios")
    parser.add_argument(
        "--scenario",
        "-s",
        choices=sorted(SCENARIOS),
        required=True,
        help="Scenario to load"
    )
    parser.add_argument("--seed", type=int, default=42, help="Random seed")
    args = parser.parse_args()

    asyncio.run(_run(args.scenario, args.seed))


if __name__ == "__main__":
    main()
