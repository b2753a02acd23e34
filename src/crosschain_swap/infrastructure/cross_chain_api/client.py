"""HTTP client for the cross-chain swap API."""

from __future__ import annotations

import logging
from collections.abc import AsyncIterator
from typing import Any

import httpx
from pydantic import BaseModel, TypeAdapter, ValidationError

from crosschain_swap.domain.cancellation import CancellationToken
from crosschain_swap.domain.errors import (
    ApiTransportError,
    ConnectError,
    NoResponseBodyError,
    RemoteError,
    SchemaViolationError,
)
from crosschain_swap.domain.quote_models import (
    QUOTE_RESPONSE_ADAPTER,
    ROUTES_RESPONSE_ADAPTER,
    QuoteRequest,
    QuoteResponse,
    RoutesRequest,
    RoutesResponse,
    StreamQuoteRequest,
)
from crosschain_swap.domain.transfer_status import StatusRequest, TransferStatus

DEFAULT_BASE_URL = "https://api.0x.org"
DEFAULT_API_KEY_HEADER = "0x-api-key"

_STATUS_PATH = "/cross-chain/status"
_QUOTE_PATH = "/cross-chain/quote"
_ROUTES_PATH = "/cross-chain/routes"
_QUOTE_STREAM_PATH = "/cross-chain/quote/stream"
_BODYLESS_STATUS_CODES = frozenset({204, 205})

logger = logging.getLogger(__name__)

_STATUS_ADAPTER: TypeAdapter[TransferStatus] = TypeAdapter(TransferStatus)


def query_params(request: BaseModel) -> dict[str, str]:
    """Serialize a request model into query parameters, dropping unset values."""

    payload = request.model_dump(by_alias=True, exclude_none=True, mode="json")
    return {key: _query_value(value) for key, value in payload.items()}


def _query_value(value: object) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


class CrossChainClient:
    """Async wrapper around the status, quote, routes and stream endpoints."""

    def __init__(
        self,
        api_key: str,
        base_url: str = DEFAULT_BASE_URL,
        *,
        api_key_header: str = DEFAULT_API_KEY_HEADER,
        timeout_seconds: float = 30.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._api_key = api_key
        self._base_url = self._normalize_base_url(base_url)
        self._api_key_header = api_key_header
        self._timeout_seconds = timeout_seconds
        self._http = httpx.AsyncClient(timeout=timeout_seconds, transport=transport)

    async def __aenter__(self) -> CrossChainClient:
        return self

    async def __aexit__(self, *_: object) -> None:
        await self.close()

    async def close(self) -> None:
        """Release underlying HTTP resources."""

        await self._http.aclose()

    async def get_status(self, request: StatusRequest) -> TransferStatus:
        """Call `/cross-chain/status` for one origin transaction."""

        payload = await self._get_json(_STATUS_PATH, query_params(request))
        return self._validate(_STATUS_ADAPTER, payload, _STATUS_PATH)

    async def get_quote(self, request: QuoteRequest) -> QuoteResponse:
        """Call `/cross-chain/quote` and return the best route."""

        payload = await self._get_json(_QUOTE_PATH, query_params(request))
        return self._validate(QUOTE_RESPONSE_ADAPTER, payload, _QUOTE_PATH)

    async def get_routes(self, request: RoutesRequest) -> RoutesResponse:
        """Call `/cross-chain/routes` and return ranked candidate routes."""

        payload = await self._get_json(_ROUTES_PATH, query_params(request))
        return self._validate(ROUTES_RESPONSE_ADAPTER, payload, _ROUTES_PATH)

    async def stream_quote_chunks(
        self,
        request: StreamQuoteRequest,
        cancel_token: CancellationToken | None = None,
        api_key: str | None = None,
    ) -> AsyncIterator[bytes]:
        """Open `/cross-chain/quote/stream` and yield raw body chunks.

        The token is checked before every read and before every chunk is
        handed out. Once it fires the response is closed and the generator
        ends without yielding further chunks.
        """

        if cancel_token is not None and cancel_token.cancelled:
            return

        url = self._endpoint(_QUOTE_STREAM_PATH)
        try:
            async with self._http.stream(
                "GET",
                url,
                params=query_params(request),
                headers=self._headers(api_key, accept="text/event-stream"),
                timeout=httpx.Timeout(self._timeout_seconds, read=None),
            ) as response:
                if not response.is_success:
                    body = (await response.aread()).decode("utf-8", errors="replace")
                    raise ConnectError(response.status_code, body.strip())
                if (
                    response.status_code in _BODYLESS_STATUS_CODES
                    or response.request.method == "HEAD"
                ):
                    raise NoResponseBodyError(
                        f"GET {url} returned {response.status_code} without a body."
                    )

                async for chunk in response.aiter_bytes():
                    if cancel_token is not None and cancel_token.cancelled:
                        logger.debug("Quote stream cancelled; closing connection.")
                        return
                    if chunk:
                        yield chunk
        except httpx.HTTPError as exc:
            raise ConnectError(None, str(exc) or exc.__class__.__name__) from exc

    async def _get_json(self, path: str, params: dict[str, str]) -> Any:
        url = self._endpoint(path)
        try:
            response = await self._http.get(url, params=params, headers=self._headers())
        except httpx.HTTPError as exc:
            raise ApiTransportError(f"GET {url} failed: {exc}") from exc

        if not response.is_success:
            raise RemoteError(response.status_code, response.text.strip(), url=url)
        try:
            return response.json()
        except ValueError as exc:
            raise SchemaViolationError(f"GET {url} returned invalid JSON.") from exc

    def _validate(self, adapter: TypeAdapter[Any], payload: Any, path: str) -> Any:
        try:
            return adapter.validate_python(payload)
        except ValidationError as exc:
            raise SchemaViolationError(
                f"GET {path} returned an unexpected payload: {exc.error_count()} error(s)\n{exc}"
            ) from exc

    def _headers(self, api_key: str | None = None, *, accept: str | None = None) -> dict[str, str]:
        headers = {self._api_key_header: api_key or self._api_key}
        if accept is not None:
            headers["Accept"] = accept
        return headers

    def _endpoint(self, path: str) -> str:
        return f"{self._base_url}{path}"

    def _normalize_base_url(self, base_url: str) -> str:
        normalized = base_url.strip().rstrip("/")
        if not normalized:
            raise ValueError("Cross-chain API base URL cannot be empty.")
        return normalized


__all__ = [
    "CrossChainClient",
    "DEFAULT_API_KEY_HEADER",
    "DEFAULT_BASE_URL",
    "query_params",
]
