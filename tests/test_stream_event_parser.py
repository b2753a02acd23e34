from __future__ import annotations

import asyncio
import json
from collections.abc import AsyncIterator
from typing import Any

from crosschain_swap.application.services import (
    StreamEventParser,
    iter_stream_events,
    normalize_route_payload,
)
from crosschain_swap.domain.cancellation import CancellationToken
from crosschain_swap.domain.errors import StreamParseError
from crosschain_swap.domain.quote_models import EvmGasCosts, SvmGasCosts
from crosschain_swap.domain.stream_events import FatalError, RouteFound, StreamResult


def _route(seq: int | None, buy_amount: str, **extra: Any) -> dict[str, Any]:
    route: dict[str, Any] = {
        "sellAmount": "1000000",
        "buyAmount": buy_amount,
        "minBuyAmount": str(int(buy_amount) - 10),
        "estimatedTimeSeconds": 12.5,
        "gasCosts": {"chainType": "evm", "totalNetworkFee": "21000"},
        **extra,
    }
    if seq is not None:
        route["seqNum"] = seq
    return route


def _line(payload: dict[str, Any]) -> bytes:
    return b"data: " + json.dumps(payload, ensure_ascii=False).encode("utf-8") + b"\n\n"


def _event_line(event_type: str, data: dict[str, Any], zid: str = "zid-1") -> bytes:
    return _line({"data": {"zid": zid, "event": {"type": event_type, "data": data}}})


def _two_routes_and_result() -> bytes:
    return (
        _event_line("route", _route(1, "500"))
        + _event_line("route", {"route": _route(2, "600"), "allowanceTarget": "0xspender"})
        + _event_line("result", {"liquidityAvailable": True})
    )


def _summarize(events: list[object]) -> list[tuple[object, ...]]:
    summary: list[tuple[object, ...]] = []
    for event in events:
        if isinstance(event, RouteFound):
            summary.append(
                (
                    "route",
                    event.display_index,
                    event.sequence_number,
                    event.route.buy_amount,
                    event.route.allowance_target,
                    event.correlation_id,
                )
            )
        elif isinstance(event, StreamResult):
            summary.append(("result", event.liquidity_available, event.correlation_id))
        else:
            summary.append(("fatal", event.message, event.code))
    return summary


_EXPECTED = [
    ("route", 1, 1, "500", None, "zid-1"),
    ("route", 2, 2, "600", "0xspender", "zid-1"),
    ("result", True, "zid-1"),
]


def test_parser_emits_routes_then_result_and_terminates() -> None:
    parser = StreamEventParser()

    events = parser.feed(_two_routes_and_result())

    assert _summarize(events) == _EXPECTED
    assert parser.terminated is True
    assert parser.route_count == 2


def test_parser_output_is_independent_of_chunk_boundaries() -> None:
    stream = _two_routes_and_result()

    for split in range(len(stream) + 1):
        parser = StreamEventParser()
        events = parser.feed(stream[:split]) + parser.feed(stream[split:])
        assert _summarize(events) == _EXPECTED, split


def test_parser_handles_byte_by_byte_delivery() -> None:
    stream = _two_routes_and_result()
    parser = StreamEventParser()

    events: list[object] = []
    for index in range(len(stream)):
        events.extend(parser.feed(stream[index : index + 1]))

    assert _summarize(events) == _EXPECTED


def test_parser_decodes_multibyte_characters_split_across_chunks() -> None:
    stream = _event_line("route", _route(1, "700", note="bridge 🚀 naïve"))
    emoji_offset = stream.index("🚀".encode("utf-8"))

    for split in range(emoji_offset, emoji_offset + 4):
        parser = StreamEventParser()
        events = parser.feed(stream[:split]) + parser.feed(stream[split:])
        assert len(events) == 1
        route_event = events[0]
        assert isinstance(route_event, RouteFound)
        assert route_event.route.model_extra == {"note": "bridge 🚀 naïve"}


def test_parser_ignores_input_after_termination() -> None:
    parser = StreamEventParser()
    parser.feed(_event_line("result", {"liquidityAvailable": False}))

    assert parser.terminated is True
    assert parser.feed(_event_line("route", _route(1, "500"))) == []
    assert parser.feed(_event_line("result", {"liquidityAvailable": True})) == []


def test_parser_short_circuits_on_fatal_error() -> None:
    parser = StreamEventParser()
    chunk = (
        _line({"error": {"message": "Rate limited", "code": "429"}})
        + _event_line("route", _route(1, "500"))
        + _event_line("result", {"liquidityAvailable": True})
    )

    events = parser.feed(chunk)

    assert events == [FatalError(message="Rate limited", code="429")]
    assert parser.terminated is True
    assert parser.route_count == 0


def test_parser_accepts_plain_string_error() -> None:
    parser = StreamEventParser()

    assert parser.feed(_line({"error": "upstream unavailable"})) == [
        FatalError(message="upstream unavailable")
    ]


def test_nested_and_flat_route_payloads_are_equivalent() -> None:
    flat = _route(3, "800", allowanceTarget="0xspender")
    nested = {"route": _route(3, "800"), "allowanceTarget": "0xspender"}

    assert normalize_route_payload(nested) == normalize_route_payload(flat)

    flat_event = StreamEventParser().feed(_event_line("route", flat))[0]
    nested_event = StreamEventParser().feed(_event_line("route", nested))[0]
    assert flat_event == nested_event


def test_nested_route_uses_outer_allowance_target() -> None:
    nested = {
        "route": _route(1, "500", allowanceTarget="0xinner"),
        "allowanceTarget": "0xouter",
    }

    assert normalize_route_payload(nested)["allowanceTarget"] == "0xouter"


def test_parser_falls_back_to_outer_sequence_number() -> None:
    nested = {"route": _route(None, "500"), "allowanceTarget": None, "seqNum": 7}

    events = StreamEventParser().feed(_event_line("route", nested))

    assert isinstance(events[0], RouteFound)
    assert events[0].sequence_number == 7


def test_parser_reports_malformed_lines_and_keeps_going() -> None:
    reported: list[StreamParseError] = []
    parser = StreamEventParser(on_parse_error=reported.append)
    chunk = (
        b"data: {not json}\n"
        + b"data: [1, 2, 3]\n"
        + _line({"data": {"zid": "z"}})
        + _event_line("route", {"sellAmount": "1"})
        + _event_line("result", {"liquidityAvailable": "yes"})
        + _event_line("route", _route(1, "500"))
    )

    events = parser.feed(chunk)

    assert [event.display_index for event in events if isinstance(event, RouteFound)] == [1]
    assert parser.terminated is False
    assert len(reported) == 5
    assert reported[0].raw == "{not json}"
    assert reported[0].reason.startswith("invalid JSON")
    assert reported[1].reason == "payload is not a JSON object"
    assert reported[2].reason == "missing data.event object"
    assert reported[3].reason.startswith("invalid route")
    assert reported[4].reason == "result event without boolean liquidityAvailable"


def test_parser_skips_heartbeats_comments_and_unknown_events() -> None:
    reported: list[StreamParseError] = []
    parser = StreamEventParser(on_parse_error=reported.append)
    chunk = (
        b": keep-alive\n\n"
        + b"data: \n\n"
        + b"data:\n"
        + b"event: ping\n"
        + b"id: 4\n"
        + _event_line("progress", {"percent": 40})
    )

    assert parser.feed(chunk) == []
    assert reported == []
    assert parser.terminated is False


def test_parser_accepts_crlf_and_missing_space_after_prefix() -> None:
    payload = json.dumps(
        {"data": {"event": {"type": "route", "data": _route(1, "500")}}}
    ).encode()
    parser = StreamEventParser()

    events = parser.feed(b"data:" + payload + b"\r\n\r\n")

    assert len(events) == 1
    assert isinstance(events[0], RouteFound)
    assert events[0].correlation_id == ""


def test_parser_holds_back_unterminated_text() -> None:
    parser = StreamEventParser()
    line = _event_line("route", _route(1, "500"))

    assert parser.feed(line[:-3]) == []
    assert parser.pending_text != ""
    assert len(parser.feed(line[-3:])) == 1
    assert parser.pending_text == ""


def test_parser_decodes_svm_gas_costs() -> None:
    route = _route(1, "500")
    route["gasCosts"] = {"chainType": "svm", "base": "5000", "priority": "100", "total": "5100"}

    event = StreamEventParser().feed(_event_line("route", route))[0]

    assert isinstance(event, RouteFound)
    assert isinstance(event.route.gas_costs, SvmGasCosts)
    assert event.route.gas_costs.total == "5100"


def test_parser_decodes_evm_gas_costs() -> None:
    event = StreamEventParser().feed(_event_line("route", _route(1, "500")))[0]

    assert isinstance(event, RouteFound)
    assert isinstance(event.route.gas_costs, EvmGasCosts)
    assert event.route.gas_costs.total_network_fee == "21000"


class ChunkSource:
    def __init__(self, chunks: list[bytes]) -> None:
        self._chunks = chunks
        self.consumed = 0
        self.closed = False

    async def __call__(self) -> AsyncIterator[bytes]:
        try:
            for chunk in self._chunks:
                self.consumed += 1
                yield chunk
        finally:
            self.closed = True


def test_iter_stream_events_closes_source_after_terminal_event() -> None:
    source = ChunkSource(
        [
            _event_line("route", _route(1, "500")),
            _event_line("result", {"liquidityAvailable": True}),
            _event_line("route", _route(2, "600")),
        ]
    )

    async def scenario() -> list[object]:
        return [event async for event in iter_stream_events(source())]

    events = asyncio.run(scenario())

    assert [type(event) for event in events] == [RouteFound, StreamResult]
    assert source.consumed == 2
    assert source.closed is True


def test_iter_stream_events_ends_quietly_without_terminal_event() -> None:
    source = ChunkSource(
        [
            _event_line("route", _route(1, "500")),
            b'data: {"data": {"event": {"type": "rou',
        ]
    )

    async def scenario() -> list[object]:
        return [event async for event in iter_stream_events(source())]

    events = asyncio.run(scenario())

    assert len(events) == 1
    assert source.closed is True


def test_iter_stream_events_stops_when_token_is_cancelled() -> None:
    source = ChunkSource(
        [
            _event_line("route", _route(1, "500")),
            _event_line("route", _route(2, "600")),
            _event_line("result", {"liquidityAvailable": True}),
        ]
    )
    token = CancellationToken()

    async def scenario() -> list[object]:
        events: list[object] = []
        async for event in iter_stream_events(source(), cancel_token=token):
            events.append(event)
            token.cancel()
        return events

    events = asyncio.run(scenario())

    assert len(events) == 1
    assert source.closed is True
