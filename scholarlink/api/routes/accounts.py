"""
Account API Endpoints

POST /api/v1/auth/register - Create a learner account
POST /api/v1/auth/login - Check credentials by email or username
GET /api/v1/users/me - Current user
PUT /api/v1/users/me/profile - Complete or update the profile
"""
import logging
from typing import List, Optional

from fastapi import APIRouter, Depends, status
from pydantic import BaseModel, Field

from scholarlink.api.auth import get_current_user, get_services
from scholarlink.api.schemas import UserEnvelope, UserResponse
from scholarlink.models.enums import UserRole
from scholarlink.models.user import User
from scholarlink.services.container import ServiceContainer

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/v1", tags=["accounts"])


# Request models
class RegisterRequest(BaseModel):
    email: str
    username: str
    password: str
    confirm_password: Optional[str] = None


class LoginRequest(BaseModel):
    """Identifier is either the email or the username"""
    identifier: str
    password: str


class ProfileRequest(BaseModel):
    first_name: str
    last_name: str
    bio: str = ""
    role: UserRole = UserRole.LEARNER
    subjects: List[str] = Field(default_factory=list)
    hourly_rate: Optional[float] = Field(None, allow_inf_nan=False)
    years_experience: Optional[int] = None


@router.post("/auth/register", response_model=UserEnvelope, status_code=status.HTTP_201_CREATED)
async def register(
    request: RegisterRequest,
    services: ServiceContainer = Depends(get_services),
):
    """Register a learner with an incomplete profile"""
    user = await services.users.register(
        email=request.email,
        username=request.username,
        password=request.password,
        confirm_password=request.confirm_password,
    )
    return UserEnvelope(data=UserResponse.model_validate(user))


@router.post("/auth/login", response_model=UserEnvelope)
async def login(
    request: LoginRequest,
    services: ServiceContainer = Depends(get_services),
):
    """
    Authenticate by email or username.

    The returned user id is what clients send as X-User-Id afterwards.
    """
    user = await services.users.authenticate(request.identifier, request.password)
    return UserEnvelope(data=UserResponse.model_validate(user))


@router.get("/users/me", response_model=UserEnvelope)
async def read_current_user(user: User = Depends(get_current_user)):
    return UserEnvelope(data=UserResponse.model_validate(user))


@router.put("/users/me/profile", response_model=UserEnvelope)
async def complete_profile(
    request: ProfileRequest,
    user: User = Depends(get_current_user),
    services: ServiceContainer = Depends(get_services),
):
    """Fill in name, bio, role, subjects and (for tutors) rate and experience"""
    updated = await services.users.complete_profile(
        user.id,
        first_name=request.first_name,
        last_name=request.last_name,
        bio=request.bio,
        role=request.role,
        subjects=request.subjects,
        hourly_rate=request.hourly_rate,
        years_experience=request.years_experience,
    )
    return UserEnvelope(data=UserResponse.model_validate(updated))
