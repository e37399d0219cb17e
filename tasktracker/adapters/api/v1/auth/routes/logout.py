"""Logout endpoint.

Always answers ``200``: a missing, expired or forged token is treated as a
client that is already logged out.
"""

import structlog
from fastapi import APIRouter, Request, status

from tasktracker.adapters.api.v1.auth.schemas import MessageResponse
from tasktracker.infrastructure.dependency_injection.auth_dependencies import AuthGateway

logger = structlog.get_logger(__name__)

router = APIRouter()


@router.post(
    "",
    response_model=MessageResponse,
    status_code=status.HTTP_200_OK,
    summary="Revoke all sessions of the current user",
)
async def logout(request: Request, gateway: AuthGateway):
    revoked = await gateway.logout(request.headers.get("Authorization"))
    logger.info(
        "Logout handled",
        correlation_id=getattr(request.state, "correlation_id", None),
        revoked_sessions=revoked,
    )
    return MessageResponse(message="Logged out successfully")
