import asyncio

import pytest

from tasktracker.infrastructure.services.authentication.password_hasher import PasswordHasher


@pytest.mark.asyncio
async def test_hash_and_verify(password_hasher):
    hashed = await password_hasher.hash("P@ss1")

    assert hashed.startswith("$2b$04$")
    assert await password_hasher.verify("P@ss1", hashed)
    assert not await password_hasher.verify("p@ss1", hashed)


@pytest.mark.asyncio
async def test_same_password_hashes_differently(password_hasher):
    assert await password_hasher.hash("x") != await password_hasher.hash("x")


@pytest.mark.asyncio
@pytest.mark.parametrize("raw, stored", [("", "$2b$04$abc"), ("pw", ""), ("pw", "not-a-hash")])
async def test_unusable_input_does_not_verify(password_hasher, raw, stored):
    assert await password_hasher.verify(raw, stored) is False


@pytest.mark.asyncio
async def test_dummy_verify_completes(password_hasher):
    assert await password_hasher.dummy_verify() is None


@pytest.mark.asyncio
async def test_hashing_runs_off_the_event_loop(mocker):
    hasher = PasswordHasher(work_factor=4)
    to_thread = mocker.spy(asyncio, "to_thread")

    await hasher.hash("pw")

    to_thread.assert_called_once()
