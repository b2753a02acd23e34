"""Transfer status values and the status endpoint payload."""

from __future__ import annotations

from enum import StrEnum

from pydantic import BaseModel, ConfigDict, Field


class TransferStatusValue(StrEnum):
    """Lifecycle states reported by the status endpoint."""

    ORIGIN_TX_SUCCEEDED = "origin_tx_succeeded"
    ORIGIN_TX_CONFIRMED = "origin_tx_confirmed"
    ORIGIN_TX_REVERTED = "origin_tx_reverted"
    BRIDGE_PENDING = "bridge_pending"
    BRIDGE_DELAYED = "bridge_delayed"
    BRIDGE_FILLED = "bridge_filled"
    BRIDGE_FAILED = "bridge_failed"
    REFUND_PENDING = "refund_pending"
    REFUND_SUCCEEDED = "refund_succeeded"
    REFUND_FAILED = "refund_failed"
    DESTINATION_TX_PENDING = "destination_tx_pending"
    DESTINATION_TX_CONFIRMED = "destination_tx_confirmed"
    DESTINATION_TX_REVERTED = "destination_tx_reverted"
    DESTINATION_TX_SUCCEEDED = "destination_tx_succeeded"
    DESTINATION_TX_FAILED = "destination_tx_failed"
    NOT_FOUND = "not_found"
    UNKNOWN = "unknown"


class TransferSubStatus(StrEnum):
    """Optional refinement of a transfer status."""

    INSUFFICIENT_ALLOWANCE = "insufficient_allowance"
    INSUFFICIENT_BALANCE = "insufficient_balance"
    FAILED_SIMULATION = "failed_simulation"
    EXPIRED = "expired"
    INTERNAL = "internal"
    UNKNOWN = "unknown"


TERMINAL_STATUSES = frozenset(
    {
        TransferStatusValue.DESTINATION_TX_SUCCEEDED,
        TransferStatusValue.DESTINATION_TX_FAILED,
        TransferStatusValue.DESTINATION_TX_REVERTED,
        TransferStatusValue.BRIDGE_FAILED,
        TransferStatusValue.BRIDGE_FILLED,
        TransferStatusValue.REFUND_SUCCEEDED,
        TransferStatusValue.REFUND_FAILED,
        TransferStatusValue.ORIGIN_TX_REVERTED,
    }
)

SUCCESS_STATUSES = frozenset(
    {
        TransferStatusValue.DESTINATION_TX_SUCCEEDED,
        TransferStatusValue.BRIDGE_FILLED,
    }
)


class StatusModel(BaseModel):
    """Base model for status endpoint payloads."""

    model_config = ConfigDict(extra="ignore", populate_by_name=True, frozen=True)


class StatusRequest(StatusModel):
    """Identifies one cross-chain transfer by its origin leg."""

    origin_chain: str | int = Field(alias="originChain")
    origin_tx_hash: str = Field(alias="originTxHash")


class TransactionLeg(StatusModel):
    """One on-chain transaction belonging to a transfer."""

    chain_id: int = Field(alias="chainId")
    chain: str
    tx_hash: str = Field(alias="txHash")
    timestamp: int


class TransferStatus(StatusModel):
    """Current known state of one cross-chain transfer."""

    status: TransferStatusValue
    sub_status: TransferSubStatus | None = Field(default=None, alias="subStatus")
    bridge: str | None = None
    transactions: tuple[TransactionLeg, ...]
    request_id: str = Field(alias="zid")

    @property
    def is_terminal(self) -> bool:
        """Whether no further state transition is expected."""

        return self.status in TERMINAL_STATUSES

    @property
    def is_success(self) -> bool:
        """Whether the transfer settled on the destination chain."""

        return self.status in SUCCESS_STATUSES


__all__ = [
    "SUCCESS_STATUSES",
    "TERMINAL_STATUSES",
    "StatusRequest",
    "TransactionLeg",
    "TransferStatus",
    "TransferStatusValue",
    "TransferSubStatus",
]
