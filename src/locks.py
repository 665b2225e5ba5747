"""Redis-based per-listing locks for settlement workflows."""

from __future__ import annotations

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from time import monotonic
from uuid import uuid4

from redis.asyncio import Redis

from src.config import get_settings

logger = logging.getLogger(__name__)

_MEMORY_LOCKS: dict[str, tuple[str, float]] = {}

# Delete only when the stored token still matches ours.
_RELEASE_SCRIPT = """
if redis.call("get", KEYS[1]) == ARGV[1] then
    return redis.call("del", KEYS[1])
end
return 0
"""


class LockUnavailableError(RuntimeError):
    """Raised when another request already holds the lock."""

    def __init__(self, key: str) -> None:
        super().__init__(f"Lock already held: {key}")
        self.key = key


def build_lock_key(*, scope: str, resource_id: str) -> str:
    """Build namespaced lock key."""

    return f"lock:{scope}:{resource_id}"


def _acquire_memory_lock(key: str, token: str, ttl_seconds: int) -> bool:
    now = monotonic()
    expired = [
        lock_key for lock_key, (_, expiry) in _MEMORY_LOCKS.items() if expiry <= now
    ]
    for lock_key in expired:
        _MEMORY_LOCKS.pop(lock_key, None)

    if key in _MEMORY_LOCKS:
        return False

    _MEMORY_LOCKS[key] = (token, now + ttl_seconds)
    return True


def _release_memory_lock(key: str, token: str) -> None:
    held = _MEMORY_LOCKS.get(key)
    if held is not None and held[0] == token:
        _MEMORY_LOCKS.pop(key, None)


async def acquire_lock(key: str, token: str, ttl_seconds: int) -> bool:
    """Acquire lock via Redis SET NX EX semantics."""

    settings = get_settings()

    if settings.settlement_lock_in_memory:
        return _acquire_memory_lock(key, token, ttl_seconds)

    client = Redis.from_url(settings.redis_url, encoding="utf-8", decode_responses=True)
    try:
        locked = await client.set(key, token, nx=True, ex=ttl_seconds)
        return bool(locked)
    finally:
        await client.aclose()


async def release_lock(key: str, token: str) -> None:
    """Release lock if it is still owned by ``token``."""

    settings = get_settings()

    if settings.settlement_lock_in_memory:
        _release_memory_lock(key, token)
        return

    client = Redis.from_url(settings.redis_url, encoding="utf-8", decode_responses=True)
    try:
        await client.eval(_RELEASE_SCRIPT, 1, key, token)
    finally:
        await client.aclose()


@asynccontextmanager
async def settlement_lock(listing_id: str) -> AsyncIterator[str]:
    """Hold the settlement lock for ``listing_id`` for the duration of the block.

    Raises:
        LockUnavailableError: another settlement for the listing is running.
    """

    settings = get_settings()
    key = build_lock_key(scope="settlement", resource_id=listing_id)
    token = uuid4().hex

    if not await acquire_lock(key, token, settings.settlement_lock_ttl_seconds):
        logger.info("Settlement lock busy for listing_id=%s", listing_id)
        raise LockUnavailableError(key)

    try:
        yield key
    finally:
        await release_lock(key, token)
