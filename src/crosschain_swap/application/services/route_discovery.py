"""Route discovery over the quote stream, one-shot and session based."""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Callable
from contextlib import suppress
from dataclasses import dataclass, field
from enum import StrEnum

from crosschain_swap.application.services.stream_event_parser import (
    StreamEventParser,
    iter_stream_events,
)
from crosschain_swap.domain.cancellation import CancellationToken
from crosschain_swap.domain.errors import (
    ConnectError,
    FatalStreamError,
    NoResponseBodyError,
    StreamEndedWithoutResultError,
    StreamError,
    StreamParseError,
)
from crosschain_swap.domain.ports import QuoteStreamSource
from crosschain_swap.domain.quote_models import StreamQuoteRequest
from crosschain_swap.domain.stream_events import FatalError, RouteFound, StreamResult

RouteCallback = Callable[[RouteFound], None]
ParseErrorCallback = Callable[[StreamParseError], None]

logger = logging.getLogger(__name__)


class StreamState(StrEnum):
    """Lifecycle of one route discovery run."""

    IDLE = "idle"
    STREAMING = "streaming"
    COMPLETED = "completed"
    FATAL = "fatal"
    INCOMPLETE = "incomplete"
    CANCELLED = "cancelled"
    FAILED = "failed"


@dataclass(slots=True)
class RouteDiscoveryResult:
    """Routes accumulated from one stream and how the stream ended."""

    outcome: StreamState = StreamState.INCOMPLETE
    routes: list[RouteFound] = field(default_factory=list)
    liquidity_available: bool | None = None
    error: StreamError | None = None
    parse_errors: list[StreamParseError] = field(default_factory=list)

    def raise_for_outcome(self) -> None:
        """Raise the error matching a non-completed outcome."""

        if self.outcome is StreamState.COMPLETED:
            return
        if self.outcome is StreamState.CANCELLED:
            raise asyncio.CancelledError
        if self.outcome is StreamState.INCOMPLETE:
            raise StreamEndedWithoutResultError(
                f"Quote stream closed after {len(self.routes)} route(s) without a result event."
            )
        if self.error is not None:
            raise self.error
        raise StreamError(f"Quote stream ended in state '{self.outcome}'.")


async def discover_routes(
    source: QuoteStreamSource,
    request: StreamQuoteRequest,
    *,
    cancel_token: CancellationToken | None = None,
    on_route: RouteCallback | None = None,
    on_parse_error: ParseErrorCallback | None = None,
    api_key: str | None = None,
) -> RouteDiscoveryResult:
    """Consume one quote stream until a terminal event, its end, or cancellation.

    Connection failures are reported through the result rather than raised;
    call `raise_for_outcome()` for exception semantics.
    """

    token = cancel_token or CancellationToken()
    result = RouteDiscoveryResult()

    def record_parse_error(error: StreamParseError) -> None:
        result.parse_errors.append(error)
        if on_parse_error is not None:
            on_parse_error(error)

    async def consume() -> None:
        parser = StreamEventParser(on_parse_error=record_parse_error)
        chunks = source.stream_quote_chunks(request, cancel_token=token, api_key=api_key)
        async for event in iter_stream_events(chunks, parser, token):
            if isinstance(event, RouteFound):
                result.routes.append(event)
                if on_route is not None:
                    on_route(event)
            elif isinstance(event, StreamResult):
                result.outcome = StreamState.COMPLETED
                result.liquidity_available = event.liquidity_available
            elif isinstance(event, FatalError):
                result.outcome = StreamState.FATAL
                result.error = FatalStreamError(event.message, event.code)
            else:
                raise TypeError(f"Unsupported quote stream event {event!r}.")

    consumer = asyncio.create_task(consume(), name="quote-stream-consumer")
    cancel_waiter = asyncio.create_task(token.wait(), name="quote-stream-cancel-waiter")
    try:
        await asyncio.wait({consumer, cancel_waiter}, return_when=asyncio.FIRST_COMPLETED)
    finally:
        cancel_waiter.cancel()
        consumer.cancel()
        await asyncio.gather(consumer, cancel_waiter, return_exceptions=True)

    if consumer.cancelled():
        if result.outcome is StreamState.INCOMPLETE:
            result.outcome = StreamState.CANCELLED
        return result

    error = consumer.exception()
    if error is None:
        if token.cancelled and result.outcome is StreamState.INCOMPLETE:
            result.outcome = StreamState.CANCELLED
        return result
    if isinstance(error, (ConnectError, NoResponseBodyError)):
        result.outcome = StreamState.FAILED
        result.error = error
        return result
    raise error


@dataclass(slots=True, frozen=True)
class RouteStreamSnapshot:
    """Point-in-time view of a route stream session."""

    state: StreamState
    routes: tuple[RouteFound, ...] = ()
    liquidity_available: bool | None = None
    error: str | None = None
    parse_error_count: int = 0


class RouteStreamSession:
    """Own at most one active quote stream.

    Starting a new stream cancels and awaits the previous one first, so
    events from an abandoned connection never reach the new state.
    """

    def __init__(self, source: QuoteStreamSource) -> None:
        self._source = source
        self._lifecycle_lock = asyncio.Lock()
        self._task: asyncio.Task[None] | None = None
        self._token: CancellationToken | None = None
        self._generation = 0
        self._state = StreamState.IDLE
        self._routes: list[RouteFound] = []
        self._liquidity_available: bool | None = None
        self._error: str | None = None
        self._parse_error_count = 0

    @property
    def active(self) -> bool:
        """Whether a stream is currently being consumed."""

        return self._task is not None and not self._task.done()

    async def start(self, request: StreamQuoteRequest, api_key: str | None = None) -> None:
        """Cancel any in-flight stream and start consuming a new one."""

        async with self._lifecycle_lock:
            await self._cancel_active()

            self._generation += 1
            self._state = StreamState.STREAMING
            self._routes = []
            self._liquidity_available = None
            self._error = None
            self._parse_error_count = 0
            self._token = CancellationToken()
            self._task = asyncio.create_task(
                self._run(request, api_key, self._token, self._generation),
                name="route-stream-session",
            )

    async def stop(self) -> None:
        """Cancel the active stream, keeping routes received so far."""

        async with self._lifecycle_lock:
            await self._cancel_active()
            if self._state is StreamState.STREAMING:
                self._state = StreamState.CANCELLED

    async def wait(self) -> RouteStreamSnapshot:
        """Wait for the active stream to end and return the final snapshot."""

        task = self._task
        if task is not None:
            with suppress(asyncio.CancelledError):
                await task
        return self.snapshot()

    async def close(self) -> None:
        """Release the session; equivalent to `stop()`."""

        await self.stop()

    def snapshot(self) -> RouteStreamSnapshot:
        """Return the current state, routes and error."""

        return RouteStreamSnapshot(
            state=self._state,
            routes=tuple(self._routes),
            liquidity_available=self._liquidity_available,
            error=self._error,
            parse_error_count=self._parse_error_count,
        )

    async def _run(
        self,
        request: StreamQuoteRequest,
        api_key: str | None,
        token: CancellationToken,
        generation: int,
    ) -> None:
        def on_route(event: RouteFound) -> None:
            if generation == self._generation:
                self._routes.append(event)

        def on_parse_error(_: StreamParseError) -> None:
            if generation == self._generation:
                self._parse_error_count += 1

        try:
            result = await discover_routes(
                self._source,
                request,
                cancel_token=token,
                on_route=on_route,
                on_parse_error=on_parse_error,
                api_key=api_key,
            )
        except Exception as exc:
            logger.exception("Route stream session failed.")
            if generation == self._generation:
                self._state = StreamState.FAILED
                self._error = f"Connection error: {exc}"
            return

        if generation != self._generation:
            return
        self._state = result.outcome
        self._liquidity_available = result.liquidity_available
        if result.error is not None:
            self._error = str(result.error)
        elif result.outcome is StreamState.INCOMPLETE:
            self._error = "Stream ended without a result."

    async def _cancel_active(self) -> None:
        task = self._task
        token = self._token
        self._task = None
        self._token = None
        if token is not None:
            token.cancel()
        if task is None or task.done():
            return
        task.cancel()
        with suppress(asyncio.CancelledError):
            await task


__all__ = [
    "RouteDiscoveryResult",
    "RouteStreamSession",
    "RouteStreamSnapshot",
    "StreamState",
    "discover_routes",
]
