"""Builders for users in a known state"""
from typing import List, Optional

from scholarlink.models.enums import UserRole
from scholarlink.models.user import User
from scholarlink.services.container import ServiceContainer


async def create_learner(services: ServiceContainer, name: str = "sam") -> User:
    user = await services.users.register(f"{name}@example.com", name, "secret")
    return await services.users.complete_profile(
        user.id, first_name=name.title(), last_name="Student", bio="", role=UserRole.LEARNER, subjects=[]
    )


async def create_tutor(
    services: ServiceContainer,
    name: str = "tara",
    subjects: Optional[List[str]] = None,
    hourly_rate: float = 50.0,
    years_experience: int = 3,
) -> User:
    user = await services.users.register(f"{name}@example.com", name, "secret")
    return await services.users.complete_profile(
        user.id,
        first_name=name.title(),
        last_name="Tutor",
        bio="Patient and thorough",
        role=UserRole.TUTOR,
        subjects=subjects if subjects is not None else ["Mathematics"],
        hourly_rate=hourly_rate,
        years_experience=years_experience,
    )
