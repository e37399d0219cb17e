"""Login endpoint.

Authenticates with email and password, opens a session and returns a token
pair with the user's profile. All of the logic lives in the gateway.
"""

import structlog
from fastapi import APIRouter, Request, status

from tasktracker.adapters.api.v1.auth.schemas import AuthResponse, LoginRequest, TokenPair, UserOut
from tasktracker.adapters.api.v1.auth.utils import get_session_metadata
from tasktracker.infrastructure.dependency_injection.auth_dependencies import AuthGateway

logger = structlog.get_logger(__name__)

router = APIRouter()


@router.post(
    "",
    response_model=AuthResponse,
    status_code=status.HTTP_200_OK,
    summary="Authenticate a user",
    responses={
        401: {"description": "Invalid credentials"},
        403: {"description": "Account is inactive"},
    },
)
async def login_user(request: Request, payload: LoginRequest, gateway: AuthGateway):
    """Authenticate a user with email and password.

    The client's user agent and address are stored on the new session so the
    user can recognise it later in ``GET /auth/sessions``.
    """
    metadata = get_session_metadata(request)
    request_logger = logger.bind(
        correlation_id=getattr(request.state, "correlation_id", None),
        client_ip=metadata.ip_address,
        endpoint="login",
    )
    request_logger.info("Login attempt initiated")

    result = await gateway.login(payload.email, payload.password, metadata)

    request_logger.info("Login succeeded", user_id=str(result.user.id))
    return AuthResponse(
        user=UserOut.from_profile(result.user),
        tokens=TokenPair.from_result(result.tokens),
    )
