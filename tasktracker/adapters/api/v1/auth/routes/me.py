"""Current-user endpoints.

``GET /me`` requires a valid access token. ``GET /me/optional`` is a probe:
it never fails the request on its own account and reports the
authentication outcome in both the status code and the body.
"""

from fastapi import APIRouter, Request, status
from fastapi.responses import JSONResponse

from tasktracker.adapters.api.v1.auth.schemas import OptionalAuthResponse, UserOut
from tasktracker.core.dependencies.auth import CurrentUserId
from tasktracker.domain.value_objects.auth_outcome import (
    Authenticated,
    BadRequest,
    Error,
    NotFound,
    OptionalAuthOutcome,
    Unauthenticated,
)
from tasktracker.infrastructure.dependency_injection.auth_dependencies import AuthGateway

router = APIRouter()

OUTCOME_STATUS_CODES = {
    Authenticated: status.HTTP_200_OK,
    Unauthenticated: status.HTTP_401_UNAUTHORIZED,
    BadRequest: status.HTTP_400_BAD_REQUEST,
    NotFound: status.HTTP_404_NOT_FOUND,
    Error: status.HTTP_500_INTERNAL_SERVER_ERROR,
}


def render_outcome(outcome: OptionalAuthOutcome) -> JSONResponse:
    body = OptionalAuthResponse(
        authenticated=isinstance(outcome, Authenticated),
        status=outcome.status.value,
        reason=outcome.reason,
        user=UserOut.from_profile(outcome.profile) if isinstance(outcome, Authenticated) else None,
    )
    return JSONResponse(
        status_code=OUTCOME_STATUS_CODES[type(outcome)],
        content=body.model_dump(mode="json"),
    )


@router.get(
    "",
    response_model=UserOut,
    status_code=status.HTTP_200_OK,
    summary="Profile of the authenticated user",
)
async def read_current_user(user_id: CurrentUserId, gateway: AuthGateway):
    profile = await gateway.current_user(user_id)
    return UserOut.from_profile(profile)


@router.get(
    "/optional",
    response_model=OptionalAuthResponse,
    summary="Report authentication status without requiring it",
)
async def probe_current_user(request: Request, gateway: AuthGateway):
    outcome = await gateway.optional_auth(request.headers.get("Authorization"))
    return render_outcome(outcome)
