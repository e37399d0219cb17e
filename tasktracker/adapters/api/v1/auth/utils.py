from __future__ import annotations

"""Helpers shared by the authentication routes."""

from fastapi import Request

from tasktracker.domain.value_objects.user_profile import SessionMetadata

MAX_USER_AGENT_LENGTH = 500


def get_client_ip(request: Request) -> str | None:
    """Best-effort client address.

    Proxies are trusted in this order: the first ``X-Forwarded-For`` entry,
    then ``X-Real-IP``, then the socket peer.
    """
    forwarded_for = request.headers.get("x-forwarded-for")
    if forwarded_for:
        first = forwarded_for.split(",")[0].strip()
        if first:
            return first
    real_ip = request.headers.get("x-real-ip")
    if real_ip and real_ip.strip():
        return real_ip.strip()
    return request.client.host if request.client else None


def get_session_metadata(request: Request) -> SessionMetadata:
    user_agent = request.headers.get("user-agent")
    if user_agent:
        user_agent = user_agent[:MAX_USER_AGENT_LENGTH]
    return SessionMetadata(user_agent=user_agent, ip_address=get_client_ip(request))
