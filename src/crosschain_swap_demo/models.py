"""Request/response models for the route discovery demo backend."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field, model_validator

from crosschain_swap.application.services import RouteStreamSnapshot
from crosschain_swap.domain.addresses import ensure_address_for_chain
from crosschain_swap.domain.chains import (
    chain_display_name,
    explorer_url,
    resolve_chain,
    resolve_token,
)
from crosschain_swap.domain.quote_models import EvmGasCosts, StreamQuoteRequest
from crosschain_swap.domain.stream_events import RouteFound
from crosschain_swap.domain.transfer_status import TransferStatus


class UiModel(BaseModel):
    """Base model with strict payload validation."""

    model_config = ConfigDict(extra="forbid", populate_by_name=True)


class StartStreamRequest(UiModel):
    """Route discovery form payload."""

    origin_chain: str | int = Field(alias="originChain")
    destination_chain: str | int = Field(alias="destinationChain")
    sell_token: str = Field(alias="sellToken", min_length=1)
    buy_token: str = Field(alias="buyToken", min_length=1)
    sell_amount: str = Field(alias="sellAmount", pattern=r"^[0-9]+$")
    origin_address: str = Field(alias="originAddress")
    destination_address: str | None = Field(default=None, alias="destinationAddress")

    @model_validator(mode="after")
    def validate_addresses(self) -> StartStreamRequest:
        """Check each address against the family of its chain."""

        ensure_address_for_chain(
            resolve_chain(self.origin_chain), self.origin_address, field="originAddress"
        )
        if self.destination_address is not None:
            ensure_address_for_chain(
                resolve_chain(self.destination_chain),
                self.destination_address,
                field="destinationAddress",
            )
        return self

    def to_stream_request(self) -> StreamQuoteRequest:
        """Resolve chain and token aliases into the stream query."""

        return StreamQuoteRequest(
            origin_chain=resolve_chain(self.origin_chain),
            destination_chain=resolve_chain(self.destination_chain),
            sell_token=resolve_token(self.sell_token),
            buy_token=resolve_token(self.buy_token),
            sell_amount=self.sell_amount,
            origin_address=self.origin_address.strip(),
            destination_address=(
                self.destination_address.strip() if self.destination_address else None
            ),
        )


class RouteView(UiModel):
    """One streamed route as rendered in the route list."""

    display_index: int = Field(alias="displayIndex")
    sequence_number: int | None = Field(default=None, alias="sequenceNumber")
    correlation_id: str = Field(alias="correlationId")
    sell_amount: str = Field(alias="sellAmount")
    buy_amount: str = Field(alias="buyAmount")
    min_buy_amount: str = Field(alias="minBuyAmount")
    estimated_time_seconds: float = Field(alias="estimatedTimeSeconds")
    network_fee: str | None = Field(default=None, alias="networkFee")
    allowance_target: str | None = Field(default=None, alias="allowanceTarget")

    @classmethod
    def from_event(cls, event: RouteFound) -> RouteView:
        route = event.route
        if isinstance(route.gas_costs, EvmGasCosts):
            network_fee = route.gas_costs.total_network_fee
        else:
            network_fee = route.gas_costs.total
        return cls(
            display_index=event.display_index,
            sequence_number=event.sequence_number,
            correlation_id=event.correlation_id,
            sell_amount=route.sell_amount,
            buy_amount=route.buy_amount,
            min_buy_amount=route.min_buy_amount,
            estimated_time_seconds=route.estimated_time_seconds,
            network_fee=network_fee,
            allowance_target=route.allowance_target,
        )


class StreamSnapshotResponse(UiModel):
    """Current state of one session's route stream."""

    session_id: str = Field(alias="sessionId")
    state: str
    routes: list[RouteView] = Field(default_factory=list)
    liquidity_available: bool | None = Field(default=None, alias="liquidityAvailable")
    error: str | None = None
    parse_error_count: int = Field(default=0, alias="parseErrorCount")

    @classmethod
    def from_snapshot(cls, session_id: str, snapshot: RouteStreamSnapshot) -> StreamSnapshotResponse:
        return cls(
            session_id=session_id,
            state=snapshot.state.value,
            routes=[RouteView.from_event(event) for event in snapshot.routes],
            liquidity_available=snapshot.liquidity_available,
            error=snapshot.error,
            parse_error_count=snapshot.parse_error_count,
        )


class TransactionLegView(UiModel):
    """One transfer leg with its explorer link."""

    chain_id: int = Field(alias="chainId")
    chain: str
    chain_name: str = Field(alias="chainName")
    tx_hash: str = Field(alias="txHash")
    timestamp: int
    explorer_url: str = Field(alias="explorerUrl")


class TransferStatusResponse(UiModel):
    """Status lookup result."""

    status: str
    sub_status: str | None = Field(default=None, alias="subStatus")
    bridge: str | None = None
    request_id: str = Field(alias="zid")
    is_terminal: bool = Field(alias="isTerminal")
    is_success: bool = Field(alias="isSuccess")
    transactions: list[TransactionLegView] = Field(default_factory=list)

    @classmethod
    def from_status(cls, status: TransferStatus) -> TransferStatusResponse:
        return cls(
            status=status.status.value,
            sub_status=status.sub_status.value if status.sub_status else None,
            bridge=status.bridge,
            request_id=status.request_id,
            is_terminal=status.is_terminal,
            is_success=status.is_success,
            transactions=[
                TransactionLegView(
                    chain_id=leg.chain_id,
                    chain=leg.chain,
                    chain_name=chain_display_name(leg.chain_id),
                    tx_hash=leg.tx_hash,
                    timestamp=leg.timestamp,
                    explorer_url=explorer_url(leg),
                )
                for leg in status.transactions
            ],
        )


__all__ = [
    "RouteView",
    "StartStreamRequest",
    "StreamSnapshotResponse",
    "TransactionLegView",
    "TransferStatusResponse",
]
