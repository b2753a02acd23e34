"""Application services public API."""

from crosschain_swap.application.services.route_discovery import (
    RouteDiscoveryResult,
    RouteStreamSession,
    RouteStreamSnapshot,
    StreamState,
    discover_routes,
)
from crosschain_swap.application.services.stream_event_parser import (
    StreamEventParser,
    iter_stream_events,
    normalize_route_payload,
)
from crosschain_swap.application.services.transaction_monitor import TransactionMonitor

__all__ = [
    "RouteDiscoveryResult",
    "RouteStreamSession",
    "RouteStreamSnapshot",
    "StreamEventParser",
    "StreamState",
    "TransactionMonitor",
    "discover_routes",
    "iter_stream_events",
    "normalize_route_payload",
]
