"""Pydantic models for quote, routes and stream request/response payloads."""

from __future__ import annotations

from enum import StrEnum
from typing import Annotated, Literal

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter


class ApiModel(BaseModel):
    """Base model for inbound API payloads."""

    model_config = ConfigDict(extra="ignore", populate_by_name=True, frozen=True)


class RequestModel(BaseModel):
    """Base model for outbound query parameters."""

    model_config = ConfigDict(extra="forbid", populate_by_name=True)


class SortRoutesBy(StrEnum):
    """Ranking applied to candidate routes."""

    SPEED = "speed"
    PRICE = "price"


class FeeType(StrEnum):
    """How a fee is charged."""

    VOLUME = "volume"
    NATIVE = "native"


class Fee(ApiModel):
    """Single fee charged on a route or step."""

    amount: str
    token: str
    type: FeeType


class Fees(ApiModel):
    """Fee breakdown for a route or step."""

    integrator_fee: Fee | None = Field(default=None, alias="integratorFee")
    zero_ex_fee: Fee | None = Field(default=None, alias="zeroExFee")
    bridge_native_fee: Fee | None = Field(default=None, alias="bridgeNativeFee")


class EvmGasCosts(ApiModel):
    """Gas cost breakdown for EVM origin chains."""

    chain_type: Literal["evm"] = Field(alias="chainType")
    gas_price: str | None = Field(default=None, alias="gasPrice")
    max_fee_per_gas: str | None = Field(default=None, alias="maxFeePerGas")
    max_priority_fee_per_gas: str | None = Field(default=None, alias="maxPriorityFeePerGas")
    gas_limit: str | None = Field(default=None, alias="gasLimit")
    estimated_gas_used: str | None = Field(default=None, alias="estimatedGasUsed")
    total_network_fee: str | None = Field(default=None, alias="totalNetworkFee")


class SvmGasCosts(ApiModel):
    """Fee breakdown for Solana origin transactions."""

    chain_type: Literal["svm"] = Field(alias="chainType")
    base: str | None = None
    priority: str | None = None
    total: str | None = None


GasCosts = Annotated[EvmGasCosts | SvmGasCosts, Field(discriminator="chain_type")]


class SwapStep(ApiModel):
    """Same-chain swap leg of a route."""

    type: Literal["swap"]
    chain_id: int | None = Field(default=None, alias="chainId")
    sell_token: str = Field(alias="sellToken")
    buy_token: str = Field(alias="buyToken")
    sell_amount: str = Field(alias="sellAmount")
    buy_amount: str = Field(alias="buyAmount")
    min_buy_amount: str = Field(alias="minBuyAmount")
    fees: Fees | None = None
    estimated_time_seconds: float = Field(alias="estimatedTimeSeconds")


class BridgeStep(ApiModel):
    """Cross-chain bridge leg of a route."""

    type: Literal["bridge"]
    origin_chain_id: int | None = Field(default=None, alias="originChainId")
    destination_chain_id: int | None = Field(default=None, alias="destinationChainId")
    sell_token: str = Field(alias="sellToken")
    buy_token: str = Field(alias="buyToken")
    sell_amount: str = Field(alias="sellAmount")
    buy_amount: str = Field(alias="buyAmount")
    min_buy_amount: str = Field(alias="minBuyAmount")
    provider: str | None = None
    fees: Fees | None = None
    estimated_time_seconds: float = Field(alias="estimatedTimeSeconds")


Step = Annotated[SwapStep | BridgeStep, Field(discriminator="type")]


class EvmTransactionDetails(ApiModel):
    """Unsigned EVM call prepared by the API."""

    to: str
    data: str
    value: str
    gas: str | None = None
    gas_price: str | None = Field(default=None, alias="gasPrice")
    max_fee_per_gas: str | None = Field(default=None, alias="maxFeePerGas")
    max_priority_fee_per_gas: str | None = Field(default=None, alias="maxPriorityFeePerGas")


class EvmTransaction(ApiModel):
    """Transaction to sign with an EVM wallet."""

    chain_type: Literal["evm"] = Field(alias="chainType")
    details: EvmTransactionDetails


class SvmTransactionDetails(ApiModel):
    """Serialized Solana transaction prepared by the API."""

    serialized_transaction: str = Field(alias="serializedTransaction")


class SvmTransaction(ApiModel):
    """Transaction to sign with a Solana wallet."""

    chain_type: Literal["svm"] = Field(alias="chainType")
    details: SvmTransactionDetails


Transaction = Annotated[EvmTransaction | SvmTransaction, Field(discriminator="chain_type")]


class AllowanceIssue(ApiModel):
    """Token approval required before the route can execute."""

    actual: str
    spender: str


class BalanceIssue(ApiModel):
    """Sender balance is below the sell amount."""

    token: str
    actual: str
    expected: str


class Issues(ApiModel):
    """Pre-flight problems detected by the API simulation."""

    allowance: AllowanceIssue | None = None
    balance: BalanceIssue | None = None
    simulation_incomplete: bool = Field(default=False, alias="simulationIncomplete")
    invalid_sources_passed: list[str] | None = Field(default=None, alias="invalidSourcesPassed")
    invalid_bridges_passed: list[str] | None = Field(default=None, alias="invalidBridgesPassed")


class Route(ApiModel):
    """One executable plan for a cross-chain transfer."""

    sell_amount: str = Field(alias="sellAmount")
    buy_amount: str = Field(alias="buyAmount")
    min_buy_amount: str = Field(alias="minBuyAmount")
    fees: Fees | None = None
    gas_costs: GasCosts = Field(alias="gasCosts")
    steps: list[Step] = Field(default_factory=list)
    transaction: Transaction
    estimated_time_seconds: float = Field(alias="estimatedTimeSeconds")
    issues: Issues = Field(default_factory=Issues)

    @property
    def bridge_provider(self) -> str | None:
        """Return the provider of the first bridge step, when any."""

        for step in self.steps:
            if isinstance(step, BridgeStep):
                return step.provider
        return None


class NoLiquidity(ApiModel):
    """Response when no route can be built for the request."""

    liquidity_available: Literal[False] = Field(alias="liquidityAvailable")
    request_id: str = Field(alias="zid")


class _LiquidResponse(ApiModel):
    liquidity_available: Literal[True] = Field(alias="liquidityAvailable")
    origin_chain_id: int = Field(alias="originChainId")
    origin_chain: str = Field(alias="originChain")
    destination_chain_id: int = Field(alias="destinationChainId")
    destination_chain: str = Field(alias="destinationChain")
    sell_token: str = Field(alias="sellToken")
    buy_token: str = Field(alias="buyToken")
    issues: Issues = Field(default_factory=Issues)
    request_id: str = Field(alias="zid")


class LiquidQuote(_LiquidResponse):
    """Best single route for a swap."""

    route: Route


class LiquidRoutes(_LiquidResponse):
    """Ranked candidate routes for a swap."""

    routes: list[Route] = Field(min_length=1)


QuoteResponse = LiquidQuote | NoLiquidity
RoutesResponse = LiquidRoutes | NoLiquidity

QUOTE_RESPONSE_ADAPTER: TypeAdapter[QuoteResponse] = TypeAdapter(QuoteResponse)
ROUTES_RESPONSE_ADAPTER: TypeAdapter[RoutesResponse] = TypeAdapter(RoutesResponse)


class StreamQuoteRequest(RequestModel):
    """Query parameters accepted by the quote stream endpoint."""

    origin_chain: str | int = Field(alias="originChain")
    destination_chain: str | int = Field(alias="destinationChain")
    sell_token: str = Field(alias="sellToken")
    buy_token: str = Field(alias="buyToken")
    sell_amount: str = Field(alias="sellAmount")
    origin_address: str = Field(alias="originAddress")
    destination_address: str | None = Field(default=None, alias="destinationAddress")


class QuoteRequest(StreamQuoteRequest):
    """Query parameters for the best-quote endpoint."""

    sort_routes_by: SortRoutesBy = Field(default=SortRoutesBy.PRICE, alias="sortRoutesBy")
    slippage_bps: int = Field(default=100, ge=0, le=10000, alias="slippageBps")
    excluded_bridges: str | None = Field(default=None, alias="excludedBridges")
    excluded_swap_sources: str | None = Field(default=None, alias="excludedSwapSources")
    fee_recipient: str | None = Field(default=None, alias="feeRecipient")
    fee_bps: int | None = Field(default=None, ge=0, le=10000, alias="feeBps")
    fee_token: str | None = Field(default=None, alias="feeToken")
    gas_payer: str | None = Field(default=None, alias="gasPayer")


class RoutesRequest(QuoteRequest):
    """Query parameters for the multi-route endpoint."""

    max_num_routes: int = Field(default=3, ge=1, le=10, alias="maxNumRoutes")


__all__ = [
    "AllowanceIssue",
    "BalanceIssue",
    "BridgeStep",
    "EvmGasCosts",
    "EvmTransaction",
    "EvmTransactionDetails",
    "Fee",
    "FeeType",
    "Fees",
    "GasCosts",
    "Issues",
    "LiquidQuote",
    "LiquidRoutes",
    "NoLiquidity",
    "QUOTE_RESPONSE_ADAPTER",
    "QuoteRequest",
    "QuoteResponse",
    "ROUTES_RESPONSE_ADAPTER",
    "Route",
    "RoutesRequest",
    "RoutesResponse",
    "SortRoutesBy",
    "Step",
    "StreamQuoteRequest",
    "SvmGasCosts",
    "SvmTransaction",
    "SvmTransactionDetails",
    "SwapStep",
    "Transaction",
]
