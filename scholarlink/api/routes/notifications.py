"""
Notification API Endpoints

GET /api/v1/notifications - Inbox of the acting user, newest first
GET /api/v1/notifications/unread-count - Badge count
POST /api/v1/notifications/read-all - Mark every notification read
POST /api/v1/notifications/{notification_id}/read - Mark one notification read
"""
from typing import Any, Dict, List
from uuid import UUID

from fastapi import APIRouter, Depends, Path, Query
from pydantic import BaseModel

from scholarlink.api.auth import get_current_user, get_services
from scholarlink.api.schemas import NotificationResponse
from scholarlink.models.user import User
from scholarlink.services.container import ServiceContainer
from scholarlink.services.exceptions import Forbidden

router = APIRouter(prefix="/api/v1/notifications", tags=["notifications"])


class NotificationListResponse(BaseModel):
    data: List[NotificationResponse]
    metadata: Dict[str, Any]


class NotificationEnvelope(BaseModel):
    data: NotificationResponse


class CountResponse(BaseModel):
    data: Dict[str, int]


@router.get("", response_model=NotificationListResponse)
async def list_notifications(
    unread_only: bool = Query(False),
    user: User = Depends(get_current_user),
    services: ServiceContainer = Depends(get_services),
):
    notifications = await services.notifications.list_for(user.email, unread_only=unread_only)
    unread = await services.notifications.unread_count(user.email)
    return NotificationListResponse(
        data=[NotificationResponse.model_validate(n) for n in notifications],
        metadata={"count": len(notifications), "unread_count": unread},
    )


@router.get("/unread-count", response_model=CountResponse)
async def unread_count(
    user: User = Depends(get_current_user),
    services: ServiceContainer = Depends(get_services),
):
    count = await services.notifications.unread_count(user.email)
    return CountResponse(data={"unread_count": count})


@router.post("/read-all", response_model=CountResponse)
async def mark_all_read(
    user: User = Depends(get_current_user),
    services: ServiceContainer = Depends(get_services),
):
    changed = await services.notifications.mark_all_read_for(user.email)
    return CountResponse(data={"marked_read": changed})


@router.post("/{notification_id}/read", response_model=NotificationEnvelope)
async def mark_read(
    notification_id: UUID = Path(...),
    user: User = Depends(get_current_user),
    services: ServiceContainer = Depends(get_services),
):
    notification = await services.notifications.get(notification_id)
    if notification.recipient_email != user.email:
        raise Forbidden("This notification belongs to another user")
    notification = await services.notifications.mark_read(notification_id)
    return NotificationEnvelope(data=NotificationResponse.model_validate(notification))
