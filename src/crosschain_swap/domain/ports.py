"""Ports between the monitoring/streaming services and their adapters."""

from __future__ import annotations

from collections.abc import AsyncIterator
from typing import Protocol

from crosschain_swap.domain.cancellation import CancellationToken
from crosschain_swap.domain.errors import CrossChainClientError
from crosschain_swap.domain.quote_models import StreamQuoteRequest
from crosschain_swap.domain.transfer_status import StatusRequest, TransferStatus


class StatusFetcher(Protocol):
    """Single-shot status lookup for one transfer."""

    async def get_status(self, request: StatusRequest) -> TransferStatus:
        """Return the validated current status or raise `CrossChainClientError`."""


class QuoteStreamSource(Protocol):
    """Opens the quote stream and yields raw byte chunks."""

    def stream_quote_chunks(
        self,
        request: StreamQuoteRequest,
        cancel_token: CancellationToken | None = None,
        api_key: str | None = None,
    ) -> AsyncIterator[bytes]:
        """Yield response body chunks until the response ends or is cancelled."""


class MonitorObserver(Protocol):
    """Progress channel written to by the transaction monitor."""

    def on_status(self, attempt: int, status: TransferStatus) -> None:
        """Called after every successful status lookup."""

    def on_attempt_failed(self, attempt: int, error: CrossChainClientError) -> None:
        """Called after every failed status lookup."""


__all__ = ["MonitorObserver", "QuoteStreamSource", "StatusFetcher"]
