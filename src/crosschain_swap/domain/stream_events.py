"""Typed events decoded from the quote stream."""

from __future__ import annotations

from dataclasses import dataclass

from pydantic import BaseModel, ConfigDict, Field

from crosschain_swap.domain.quote_models import GasCosts


class StreamRoute(BaseModel):
    """Flattened route record carried by a `route` stream event.

    Only the fields shown to users are typed; everything else the API sends
    (steps, transaction, issues) is kept as extra data.
    """

    model_config = ConfigDict(extra="allow", populate_by_name=True, frozen=True)

    sell_amount: str = Field(alias="sellAmount")
    buy_amount: str = Field(alias="buyAmount")
    min_buy_amount: str = Field(alias="minBuyAmount")
    estimated_time_seconds: float = Field(alias="estimatedTimeSeconds")
    gas_costs: GasCosts = Field(alias="gasCosts")
    allowance_target: str | None = Field(default=None, alias="allowanceTarget")
    seq_num: int | None = Field(default=None, alias="seqNum")


@dataclass(slots=True, frozen=True)
class RouteFound:
    """A candidate route arrived on the stream."""

    route: StreamRoute
    sequence_number: int | None
    correlation_id: str
    display_index: int


@dataclass(slots=True, frozen=True)
class StreamResult:
    """Final result event; ends the stream successfully."""

    liquidity_available: bool
    correlation_id: str | None = None


@dataclass(slots=True, frozen=True)
class FatalError:
    """Remote-signaled fatal condition; ends the stream."""

    message: str
    code: str | None = None


StreamEvent = RouteFound | StreamResult | FatalError

TERMINAL_EVENT_TYPES = (StreamResult, FatalError)


__all__ = [
    "FatalError",
    "RouteFound",
    "StreamEvent",
    "StreamResult",
    "StreamRoute",
    "TERMINAL_EVENT_TYPES",
]
