"""Refresh endpoint: exchanges a refresh token for a new pair and rotates the session."""

import structlog
from fastapi import APIRouter, Request, status

from tasktracker.adapters.api.v1.auth.schemas import RefreshTokenRequest, TokenPair
from tasktracker.infrastructure.dependency_injection.auth_dependencies import AuthGateway

logger = structlog.get_logger(__name__)

router = APIRouter()


@router.post(
    "",
    response_model=TokenPair,
    status_code=status.HTTP_200_OK,
    summary="Rotate a refresh token",
    responses={
        400: {"description": "Not a refresh token"},
        401: {"description": "Refresh token invalid, unknown, reused or expired"},
    },
)
async def refresh_tokens(request: Request, payload: RefreshTokenRequest, gateway: AuthGateway):
    tokens = await gateway.refresh(payload.refresh_token)
    logger.debug(
        "Refresh succeeded", correlation_id=getattr(request.state, "correlation_id", None)
    )
    return TokenPair.from_result(tokens)
