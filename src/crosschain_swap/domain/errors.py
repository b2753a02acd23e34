"""Domain exceptions for cross-chain API calls, streams and monitoring."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from crosschain_swap.domain.transfer_status import TransferStatus


class CrossChainError(Exception):
    """Base class for toolkit errors."""


class CrossChainClientError(CrossChainError):
    """Raised when a one-shot API call fails."""


class RemoteError(CrossChainClientError):
    """Raised when the API answers with a non-2xx status."""

    def __init__(self, status_code: int, body: str, *, url: str | None = None) -> None:
        self.status_code = status_code
        self.body = body
        self.url = url
        target = f"{url} " if url else ""
        super().__init__(f"GET {target}failed: {status_code} {body or '<no response body>'}")


class ApiTransportError(CrossChainClientError):
    """Raised when the request never produced an HTTP response."""


class SchemaViolationError(CrossChainClientError):
    """Raised when a response payload does not match the expected shape."""


class StreamError(CrossChainError):
    """Base class for quote stream errors."""


class ConnectError(StreamError):
    """Raised when the quote stream could not be opened."""

    def __init__(self, status_code: int | None, body: str) -> None:
        self.status_code = status_code
        self.body = body
        if status_code is None:
            super().__init__(f"Connection error: {body}")
        else:
            super().__init__(f"API error: {status_code} - {body or '<no response body>'}")


class NoResponseBodyError(StreamError):
    """Raised when a successful stream response carries no readable body."""


class FatalStreamError(StreamError):
    """Raised for a remote-signaled fatal stream condition."""

    def __init__(self, message: str, code: str | None = None) -> None:
        self.message = message
        self.code = code
        suffix = f" ({code})" if code else ""
        super().__init__(f"Fatal error: {message}{suffix}")


class StreamEndedWithoutResultError(StreamError):
    """Raised when a stream closed before a result or fatal event arrived."""


class MonitoringTimeoutError(CrossChainError):
    """Raised when the attempt budget runs out while the transfer is pending."""

    def __init__(self, attempts: int, last_status: TransferStatus | None = None) -> None:
        self.attempts = attempts
        self.last_status = last_status
        super().__init__(f"Transaction monitoring timed out after {attempts} attempts")


class MonitoringCancelledError(CrossChainError):
    """Raised when the caller's cancel token stops a monitor between attempts."""

    def __init__(self, attempts: int, last_status: TransferStatus | None = None) -> None:
        self.attempts = attempts
        self.last_status = last_status
        super().__init__(f"Transaction monitoring cancelled after {attempts} attempts")


@dataclass(slots=True, frozen=True)
class StreamParseError:
    """One malformed `data:` line; reported to observers, never raised."""

    raw: str
    reason: str


__all__ = [
    "ApiTransportError",
    "ConnectError",
    "CrossChainClientError",
    "CrossChainError",
    "FatalStreamError",
    "MonitoringCancelledError",
    "MonitoringTimeoutError",
    "NoResponseBodyError",
    "RemoteError",
    "SchemaViolationError",
    "StreamEndedWithoutResultError",
    "StreamError",
    "StreamParseError",
]
