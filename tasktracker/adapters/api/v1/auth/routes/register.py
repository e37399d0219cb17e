"""Registration endpoint.

Creates an account and acknowledges it. No tokens are issued here; the client
logs in afterwards.
"""

import structlog
from fastapi import APIRouter, Request, status

from tasktracker.adapters.api.v1.auth.schemas import RegisterRequest, RegisterResponse
from tasktracker.infrastructure.dependency_injection.auth_dependencies import AuthGateway

logger = structlog.get_logger(__name__)

router = APIRouter()


@router.post(
    "",
    response_model=RegisterResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Register a new user",
    responses={409: {"description": "Email or username already taken"}},
)
async def register_user(request: Request, payload: RegisterRequest, gateway: AuthGateway):
    request_logger = logger.bind(
        correlation_id=getattr(request.state, "correlation_id", None),
        endpoint="register",
    )
    request_logger.info("Registration attempt", username=payload.username)

    result = await gateway.register(
        username=payload.username,
        email=payload.email,
        first_name=payload.first_name,
        last_name=payload.last_name,
        raw_password=payload.password,
    )

    request_logger.info("Registration succeeded", user_id=str(result.user_id))
    return RegisterResponse(message=result.message, user_id=result.user_id)
