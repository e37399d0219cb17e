"""Lists the caller's active sessions."""

from typing import List

from fastapi import APIRouter, status

from tasktracker.adapters.api.v1.auth.schemas import SessionOut
from tasktracker.core.dependencies.auth import CurrentUserId
from tasktracker.infrastructure.dependency_injection.auth_dependencies import AuthGateway

router = APIRouter()


@router.get("", response_model=List[SessionOut], status_code=status.HTTP_200_OK)
async def list_sessions(user_id: CurrentUserId, gateway: AuthGateway):
    summaries = await gateway.list_sessions(user_id)
    return [SessionOut.from_summary(s) for s in summaries]
