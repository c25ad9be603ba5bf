"""Bot identity: the bot's own user id, resolved lazily and cached."""

import asyncio
import sys
from enum import Enum
from typing import Awaitable, Callable, Optional

from relay.domain.retry import RetryPolicy


def _log(msg: str):
    print(msg, file=sys.stderr)


class IdentityStatus(str, Enum):
    UNRESOLVED = "unresolved"
    RESOLVED = "resolved"


class BotIdentity:
    """Process-wide holder for the bot user id.

    get() returns the cached id, or tries the resolver (with retries) while
    unresolved. A failed resolution leaves the holder unresolved and returns
    None, so the next caller tries again.
    """

    def __init__(
        self,
        resolver: Callable[[], Awaitable[str]],
        retry_policy: Optional[RetryPolicy] = None,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ):
        self._resolver = resolver
        self._retry = retry_policy or RetryPolicy()
        self._sleep = sleep
        self._lock = asyncio.Lock()
        self._user_id: Optional[str] = None
        self._status = IdentityStatus.UNRESOLVED

    @property
    def status(self) -> IdentityStatus:
        return self._status

    @property
    def resolved(self) -> bool:
        return self._status == IdentityStatus.RESOLVED

    @property
    def user_id(self) -> Optional[str]:
        """Cached id without triggering resolution."""
        return self._user_id

    def invalidate(self):
        """Drop the cached id; the next get() resolves again."""
        self._user_id = None
        self._status = IdentityStatus.UNRESOLVED

    async def _resolve_once(self) -> str:
        user_id = await self._resolver()
        if not user_id:
            raise RuntimeError("resolver returned an empty user id")
        return user_id

    async def get(self) -> Optional[str]:
        if self.resolved:
            return self._user_id
        async with self._lock:
            if self.resolved:
                return self._user_id
            try:
                user_id = await self._retry.run(
                    self._resolve_once,
                    retry_on=(Exception,),
                    sleep=self._sleep,
                    on_retry=lambda n, e, d: _log(
                        f"[identity] resolve attempt {n} failed ({e}), retrying in {d:.1f}s"
                    ),
                )
            except Exception as e:
                _log(f"[identity] could not resolve bot user id: {e}")
                return None
            self._user_id = user_id
            self._status = IdentityStatus.RESOLVED
            _log(f"[identity] bot user id resolved: {user_id}")
            return user_id
