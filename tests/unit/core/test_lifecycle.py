import asyncio
import uuid
from datetime import datetime, timedelta, timezone
from unittest.mock import AsyncMock

import pytest

from tasktracker.core import lifecycle
from tasktracker.core.lifecycle import purge_expired_sessions, run_session_cleanup


@pytest.mark.asyncio
async def test_purge_removes_only_expired_sessions(session_repository, memory_store):
    # Arrange
    user_id = uuid.uuid4()
    old = await session_repository.create(user_id, "old", timedelta(days=1))
    await session_repository.create(user_id, "live", timedelta(days=1))
    memory_store.sessions[old.id].expires_at = datetime.now(timezone.utc) - timedelta(hours=1)

    # Act
    purged = await purge_expired_sessions(session_repository)

    # Assert
    assert purged == 1
    assert [s.refresh_token for s in memory_store.sessions.values()] == ["live"]


@pytest.mark.asyncio
async def test_cleanup_loop_keeps_running_after_a_failed_sweep(mocker):
    sweep = mocker.patch.object(
        lifecycle, "_sweep_once", AsyncMock(side_effect=[RuntimeError("db down"), 0, 0])
    )

    task = asyncio.create_task(run_session_cleanup(0))
    while sweep.await_count < 3:
        await asyncio.sleep(0)
    task.cancel()

    with pytest.raises(asyncio.CancelledError):
        await task
    assert sweep.await_count >= 3
