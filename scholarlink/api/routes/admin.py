"""
Admin API Endpoints (bearer token required)

GET /api/v1/admin/users - All active users
GET /api/v1/admin/stats - User totals by role
DELETE /api/v1/admin/users/{user_id} - Remove a user (soft delete)
"""
import logging
from typing import Dict
from uuid import UUID

from fastapi import APIRouter, Depends, Path, Response, status
from pydantic import BaseModel

from scholarlink.api.auth import get_services, require_admin
from scholarlink.api.schemas import UserListEnvelope, UserResponse
from scholarlink.services.container import ServiceContainer

logger = logging.getLogger(__name__)

router = APIRouter(
    prefix="/api/v1/admin",
    tags=["admin"],
    dependencies=[Depends(require_admin)],
)


class StatsResponse(BaseModel):
    data: Dict[str, int]


@router.get("/users", response_model=UserListEnvelope)
async def list_users(services: ServiceContainer = Depends(get_services)):
    users = await services.users.list_users()
    return UserListEnvelope(
        data=[UserResponse.model_validate(user) for user in users],
        metadata={"count": len(users)},
    )


@router.get("/stats", response_model=StatsResponse)
async def user_stats(services: ServiceContainer = Depends(get_services)):
    """Total users, tutors and learners"""
    return StatsResponse(data=await services.users.user_stats())


@router.delete("/users/{user_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_user(
    user_id: UUID = Path(...),
    services: ServiceContainer = Depends(get_services),
):
    """
    Remove a user.

    The account is soft-deleted: it disappears from listings and can no
    longer log in, while existing sessions and notifications are kept.
    """
    user = await services.users.delete_user(user_id)
    logger.info(f"Admin removed user {user.username}")
    return Response(status_code=status.HTTP_204_NO_CONTENT)
