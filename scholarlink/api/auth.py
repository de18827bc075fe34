"""
Authentication Dependencies

Acting-user resolution and admin bearer token check for MVP.
The identity provider is external: clients send the id returned by
login/registration in the X-User-Id header. Placeholder for future OAuth.
"""
import logging
from typing import Optional
from uuid import UUID

from fastapi import Depends, Header, HTTPException, Request, status
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials

from scholarlink import config
from scholarlink.models.user import User
from scholarlink.services.container import ServiceContainer
from scholarlink.services.exceptions import NotFound

logger = logging.getLogger(__name__)

# Security scheme
security = HTTPBearer(auto_error=False)


def get_services(request: Request) -> ServiceContainer:
    """Services wired onto the application by create_app()"""
    return request.app.state.services


def _unauthorized(code: str, message: str, details: str) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail={
            "error": {
                "code": code,
                "message": message,
                "details": details
            }
        },
        headers={"WWW-Authenticate": "Bearer"}
    )


async def require_admin(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
) -> bool:
    """
    Verify the admin bearer token.

    Returns:
        True if valid, raises HTTPException otherwise
    """
    if credentials is None:
        raise _unauthorized(
            "AUTH_001",
            "Authorization header missing",
            "Please provide a valid bearer token"
        )

    # MVP: Simple token comparison
    if credentials.credentials != config.ADMIN_TOKEN:
        logger.warning(f"Invalid admin token attempt: {credentials.credentials[:10]}...")
        raise _unauthorized(
            "AUTH_002",
            "Invalid or expired token",
            "The provided token is not valid"
        )

    return True


async def get_current_user(
    x_user_id: Optional[str] = Header(default=None),
    services: ServiceContainer = Depends(get_services),
) -> User:
    """
    Load the acting user from the X-User-Id header.

    Raises:
        401 if the header is missing, malformed or names no active user
    """
    if not x_user_id:
        raise _unauthorized(
            "AUTH_003",
            "User identity missing",
            "Send the id returned by login in the X-User-Id header"
        )

    try:
        user_id = UUID(x_user_id)
    except ValueError:
        raise _unauthorized("AUTH_004", "Malformed user id", "X-User-Id must be a UUID")

    try:
        return await services.users.get_user(user_id)
    except NotFound:
        logger.warning(f"Request with unknown user id {user_id}")
        raise _unauthorized("AUTH_005", "Unknown user", "No active user has this id")
