"""Domain public API."""

from crosschain_swap.domain.cancellation import CancellationToken
from crosschain_swap.domain.errors import (
    ApiTransportError,
    ConnectError,
    CrossChainClientError,
    CrossChainError,
    FatalStreamError,
    MonitoringCancelledError,
    MonitoringTimeoutError,
    NoResponseBodyError,
    RemoteError,
    SchemaViolationError,
    StreamEndedWithoutResultError,
    StreamError,
    StreamParseError,
)
from crosschain_swap.domain.ports import MonitorObserver, QuoteStreamSource, StatusFetcher
from crosschain_swap.domain.quote_models import (
    LiquidQuote,
    LiquidRoutes,
    NoLiquidity,
    QuoteRequest,
    QuoteResponse,
    Route,
    RoutesRequest,
    RoutesResponse,
    StreamQuoteRequest,
)
from crosschain_swap.domain.stream_events import (
    FatalError,
    RouteFound,
    StreamEvent,
    StreamResult,
    StreamRoute,
)
from crosschain_swap.domain.transfer_status import (
    StatusRequest,
    TransactionLeg,
    TransferStatus,
    TransferStatusValue,
    TransferSubStatus,
)

__all__ = [
    "ApiTransportError",
    "CancellationToken",
    "ConnectError",
    "CrossChainClientError",
    "CrossChainError",
    "FatalError",
    "FatalStreamError",
    "LiquidQuote",
    "LiquidRoutes",
    "MonitorObserver",
    "MonitoringCancelledError",
    "MonitoringTimeoutError",
    "NoLiquidity",
    "NoResponseBodyError",
    "QuoteRequest",
    "QuoteResponse",
    "QuoteStreamSource",
    "RemoteError",
    "Route",
    "RouteFound",
    "RoutesRequest",
    "RoutesResponse",
    "SchemaViolationError",
    "StatusFetcher",
    "StatusRequest",
    "StreamEndedWithoutResultError",
    "StreamError",
    "StreamEvent",
    "StreamParseError",
    "StreamQuoteRequest",
    "StreamResult",
    "StreamRoute",
    "TransactionLeg",
    "TransferStatus",
    "TransferStatusValue",
    "TransferSubStatus",
]
