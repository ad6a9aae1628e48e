"""Timeout helper for async calls."""
from __future__ import annotations

import asyncio
from typing import Awaitable, Any, Optional


async def with_timeout(coro: Awaitable[Any], timeout: Optional[float]) -> Any:
    if timeout is None:
        return await coro
    return await asyncio.wait_for(coro, timeout=timeout)
