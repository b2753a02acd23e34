"""Incremental decoder for the quote stream's `data:` framed JSON events."""

from __future__ import annotations

import codecs
import json
import logging
from collections.abc import AsyncIterator, Callable
from typing import Any

from pydantic import ValidationError

from crosschain_swap.domain.cancellation import CancellationToken
from crosschain_swap.domain.errors import StreamParseError
from crosschain_swap.domain.stream_events import (
    TERMINAL_EVENT_TYPES,
    FatalError,
    RouteFound,
    StreamEvent,
    StreamResult,
    StreamRoute,
)

_DATA_PREFIX = "data:"

ParseErrorCallback = Callable[[StreamParseError], None]

logger = logging.getLogger(__name__)


class StreamEventParser:
    """Stateful line/JSON decoder fed with raw byte chunks.

    Holds one carry-over buffer of text that has not been terminated by a
    newline yet. Once a result or fatal event is decoded the parser is
    terminated and ignores any further input.
    """

    def __init__(self, on_parse_error: ParseErrorCallback | None = None) -> None:
        self._on_parse_error = on_parse_error
        self._decoder = codecs.getincrementaldecoder("utf-8")(errors="replace")
        self._buffer = ""
        self._route_count = 0
        self._terminated = False

    @property
    def terminated(self) -> bool:
        """Whether a terminal event has been emitted."""

        return self._terminated

    @property
    def route_count(self) -> int:
        """Number of `RouteFound` events emitted so far."""

        return self._route_count

    @property
    def pending_text(self) -> str:
        """Unterminated text held back for the next chunk."""

        return self._buffer

    def feed(self, chunk: bytes) -> list[StreamEvent]:
        """Decode one chunk and return the events completed by it."""

        if self._terminated:
            return []

        self._buffer += self._decoder.decode(chunk)
        lines = self._buffer.split("\n")
        self._buffer = lines.pop()

        events: list[StreamEvent] = []
        for line in lines:
            event = self._parse_line(line.removesuffix("\r"))
            if event is None:
                continue
            events.append(event)
            if isinstance(event, TERMINAL_EVENT_TYPES):
                self._terminated = True
                self._buffer = ""
                break
        return events

    def _parse_line(self, line: str) -> StreamEvent | None:
        if not line.startswith(_DATA_PREFIX):
            return None
        payload = line[len(_DATA_PREFIX) :].removeprefix(" ")
        if not payload.strip():
            return None

        try:
            data = json.loads(payload)
        except ValueError as exc:
            self._report(payload, f"invalid JSON: {exc}")
            return None
        if not isinstance(data, dict):
            self._report(payload, "payload is not a JSON object")
            return None

        if "error" in data:
            return self._fatal_error(data["error"])
        return self._structured_event(payload, data)

    def _fatal_error(self, error: Any) -> FatalError:
        if isinstance(error, dict):
            message = error.get("message")
            code = error.get("code")
            return FatalError(
                message=str(message) if message is not None else "unknown error",
                code=str(code) if code is not None else None,
            )
        return FatalError(message=str(error))

    def _structured_event(self, payload: str, data: dict[str, Any]) -> StreamEvent | None:
        envelope = data.get("data")
        event = envelope.get("event") if isinstance(envelope, dict) else None
        if not isinstance(event, dict):
            self._report(payload, "missing data.event object")
            return None

        correlation_id = envelope.get("zid")
        event_type = event.get("type")
        event_data = event.get("data")

        if event_type == "route":
            return self._route_found(payload, event_data, correlation_id)
        if event_type == "result":
            if not isinstance(event_data, dict) or not isinstance(
                event_data.get("liquidityAvailable"), bool
            ):
                self._report(payload, "result event without boolean liquidityAvailable")
                return None
            return StreamResult(
                liquidity_available=event_data["liquidityAvailable"],
                correlation_id=str(correlation_id) if correlation_id is not None else None,
            )

        logger.debug("Ignoring quote stream event of type %r.", event_type)
        return None

    def _route_found(
        self,
        payload: str,
        event_data: Any,
        correlation_id: Any,
    ) -> RouteFound | None:
        if not isinstance(event_data, dict):
            self._report(payload, "route event without data object")
            return None

        try:
            route = StreamRoute.model_validate(normalize_route_payload(event_data))
        except ValidationError as exc:
            self._report(payload, f"invalid route: {exc.error_count()} error(s)")
            return None

        self._route_count += 1
        sequence_number = route.seq_num
        if sequence_number is None and isinstance(event_data.get("seqNum"), int):
            sequence_number = event_data["seqNum"]
        return RouteFound(
            route=route,
            sequence_number=sequence_number,
            correlation_id=str(correlation_id) if correlation_id is not None else "",
            display_index=self._route_count,
        )

    def _report(self, raw: str, reason: str) -> None:
        logger.warning("Skipping malformed quote stream line (%s): %s", reason, raw[:200])
        if self._on_parse_error is not None:
            self._on_parse_error(StreamParseError(raw=raw, reason=reason))


def normalize_route_payload(event_data: dict[str, Any]) -> dict[str, Any]:
    """Flatten `{route: {...}, allowanceTarget}` into a single route record."""

    nested = event_data.get("route")
    if isinstance(nested, dict):
        flattened = dict(nested)
        flattened["allowanceTarget"] = event_data.get("allowanceTarget")
        return flattened
    return dict(event_data)


async def iter_stream_events(
    chunks: AsyncIterator[bytes],
    parser: StreamEventParser | None = None,
    cancel_token: CancellationToken | None = None,
) -> AsyncIterator[StreamEvent]:
    """Feed chunks through a parser and yield events until a terminal one.

    The chunk source is closed as soon as a terminal event is yielded or the
    token fires. A source that ends without a terminal event simply ends the
    sequence; leftover partial text is discarded.
    """

    active_parser = parser or StreamEventParser()
    try:
        async for chunk in chunks:
            if cancel_token is not None and cancel_token.cancelled:
                return
            for event in active_parser.feed(chunk):
                yield event
            if active_parser.terminated:
                return
    finally:
        aclose = getattr(chunks, "aclose", None)
        if aclose is not None:
            await aclose()

    if active_parser.pending_text.strip():
        logger.debug(
            "Quote stream ended with %d unterminated characters.",
            len(active_parser.pending_text),
        )


__all__ = [
    "ParseErrorCallback",
    "StreamEventParser",
    "iter_stream_events",
    "normalize_route_payload",
]
