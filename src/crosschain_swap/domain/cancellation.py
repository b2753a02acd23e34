"""Cooperative cancellation shared by streams and monitors."""

from __future__ import annotations

import asyncio
from dataclasses import dataclass, field


@dataclass(slots=True)
class CancellationToken:
    """Caller-held signal checked at every suspension point."""

    _event: asyncio.Event = field(default_factory=asyncio.Event)

    @property
    def cancelled(self) -> bool:
        """Whether `cancel()` was called."""

        return self._event.is_set()

    def cancel(self) -> None:
        """Trigger cancellation; idempotent."""

        self._event.set()

    async def wait(self) -> None:
        """Block until the token is cancelled."""

        await self._event.wait()


__all__ = ["CancellationToken"]
