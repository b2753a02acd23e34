"""Bounded-retry poller that follows a transfer until it settles."""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Awaitable, Callable

from crosschain_swap.domain.cancellation import CancellationToken
from crosschain_swap.domain.errors import (
    CrossChainClientError,
    MonitoringCancelledError,
    MonitoringTimeoutError,
)
from crosschain_swap.domain.ports import MonitorObserver, StatusFetcher
from crosschain_swap.domain.transfer_status import StatusRequest, TransferStatus

_DEFAULT_MAX_ATTEMPTS = 60
_DEFAULT_INTERVAL_SECONDS = 5.0

SleepFunction = Callable[[float], Awaitable[None]]

logger = logging.getLogger(__name__)


class TransactionMonitor:
    """Poll the status endpoint on a fixed interval until a terminal status.

    Terminal statuses cover both settled and permanently failed transfers;
    callers inspect `TransferStatus.is_success` to tell them apart. Only an
    error on the last attempt, or running out of attempts, fails the monitor.
    """

    def __init__(
        self,
        fetcher: StatusFetcher,
        *,
        max_attempts: int = _DEFAULT_MAX_ATTEMPTS,
        interval_seconds: float = _DEFAULT_INTERVAL_SECONDS,
        sleep: SleepFunction = asyncio.sleep,
    ) -> None:
        if max_attempts < 1:
            raise ValueError("max_attempts must be >= 1.")
        if interval_seconds < 0:
            raise ValueError("interval_seconds must be >= 0.")
        self._fetcher = fetcher
        self._max_attempts = max_attempts
        self._interval_seconds = interval_seconds
        self._sleep = sleep

    @property
    def max_attempts(self) -> int:
        """Return the attempt budget per monitoring call."""

        return self._max_attempts

    @property
    def interval_seconds(self) -> float:
        """Return the wait between attempts."""

        return self._interval_seconds

    async def monitor(
        self,
        request: StatusRequest,
        observer: MonitorObserver | None = None,
        cancel_token: CancellationToken | None = None,
    ) -> TransferStatus:
        """Return the first terminal status, or raise after the budget is spent.

        A triggered `cancel_token` raises `MonitoringCancelledError` before the
        next fetch or during the wait between attempts.
        """

        last_status: TransferStatus | None = None
        for attempt in range(1, self._max_attempts + 1):
            if cancel_token is not None and cancel_token.cancelled:
                raise MonitoringCancelledError(attempt - 1, last_status)

            try:
                status = await self._fetcher.get_status(request)
            except CrossChainClientError as exc:
                logger.warning(
                    "Status check attempt %s/%s for %s failed: %s",
                    attempt,
                    self._max_attempts,
                    request.origin_tx_hash,
                    exc,
                )
                if observer is not None:
                    self._notify(observer.on_attempt_failed, attempt, exc)
                if attempt == self._max_attempts:
                    raise
            else:
                last_status = status
                if observer is not None:
                    self._notify(observer.on_status, attempt, status)
                if status.is_terminal:
                    return status

            if attempt < self._max_attempts:
                if await self._pause(cancel_token):
                    raise MonitoringCancelledError(attempt, last_status)

        raise MonitoringTimeoutError(self._max_attempts, last_status)

    async def _pause(self, cancel_token: CancellationToken | None) -> bool:
        """Wait one interval; return True when the token fired first."""

        if cancel_token is None:
            await self._sleep(self._interval_seconds)
            return False
        if cancel_token.cancelled:
            return True

        sleeper = asyncio.ensure_future(self._sleep(self._interval_seconds))
        cancel_waiter = asyncio.ensure_future(cancel_token.wait())
        try:
            await asyncio.wait({sleeper, cancel_waiter}, return_when=asyncio.FIRST_COMPLETED)
        finally:
            for task in (sleeper, cancel_waiter):
                if not task.done():
                    task.cancel()
            await asyncio.gather(sleeper, cancel_waiter, return_exceptions=True)
        if sleeper.cancelled():
            return True
        sleeper.result()
        return False

    def _notify(
        self,
        callback: Callable[[int, object], None],
        attempt: int,
        payload: object,
    ) -> None:
        try:
            callback(attempt, payload)
        except Exception:
            logger.exception("Transaction monitor observer failed on attempt %s.", attempt)


__all__ = ["SleepFunction", "TransactionMonitor"]
