"""Well-known chains, tokens and block explorers used by the examples."""

from __future__ import annotations

from crosschain_swap.domain.transfer_status import TransactionLeg

CHAIN_IDS: dict[str, str | int] = {
    "ethereum": 1,
    "optimism": 10,
    "polygon": 137,
    "base": 8453,
    "arbitrum": 42161,
    "solana": "solana",
}

# Numeric id the status endpoint reports for Solana legs.
SOLANA_STATUS_CHAIN_ID = 999999999991

CHAIN_NAMES: dict[str, str] = {
    "1": "Ethereum",
    "10": "Optimism",
    "137": "Polygon",
    "8453": "Base",
    "42161": "Arbitrum",
    "solana": "Solana",
    str(SOLANA_STATUS_CHAIN_ID): "Solana",
}

TOKEN_ADDRESSES: dict[str, str] = {
    "ETH_BASE": "0xEeeeeEeeeEeEeeEeEeEeeEEEeeeeEeeeeeeeEEeE",
    "USDC_BASE": "0x833589fcd6edb6e08f4c7c32d4f71b54bda02913",
    "WETH_BASE": "0x4200000000000000000000000000000000000006",
    "ETH_ARB": "0xEeeeeEeeeEeEeeEeEeEeeEEEeeeeEeeeeeeeEEeE",
    "USDC_ARB": "0xaf88d065e77c8cc2239327c5edb3a432268e5831",
    "WETH_ARB": "0x82aF49447D8a07e3bd95BD0d56f35241523fBab1",
    "SOL": "So11111111111111111111111111111111111111112",
    "WSOL": "So11111111111111111111111111111111111111112",
    "USDC_SOL": "EPjFWdd5AufqSSqeM2qN1xzybapC8G4wEGGkZwyTDt1v",
}

# Quote-only placeholders used when no wallet is configured.
DEFAULT_EVM_ADDRESS = "0xABf40AADf960e20B4283dc5A06387A429Ba02456"
DEFAULT_SOLANA_ADDRESS = "9FzTJNUfMVSPPNEsUDfUHuE1gSE7uDBamcGHq1CseUUZ"

_EXPLORER_TX_URLS: dict[int, str] = {
    1: "https://etherscan.io/tx/",
    10: "https://optimistic.etherscan.io/tx/",
    137: "https://polygonscan.com/tx/",
    8453: "https://basescan.org/tx/",
    42161: "https://arbiscan.io/tx/",
    SOLANA_STATUS_CHAIN_ID: "https://solscan.io/tx/",
}


def resolve_chain(value: str | int) -> str | int:
    """Resolve a chain name or numeric id into the value the API expects."""

    if isinstance(value, int):
        return value
    normalized = value.strip()
    known = CHAIN_IDS.get(normalized.lower())
    if known is not None:
        return known
    if normalized.isdigit():
        return int(normalized)
    return normalized


def resolve_token(value: str) -> str:
    """Resolve a token alias such as `USDC_BASE`, or pass an address through."""

    normalized = value.strip()
    return TOKEN_ADDRESSES.get(normalized.upper(), normalized)


def chain_display_name(chain: str | int) -> str:
    """Return a human-readable chain name, falling back to the raw id."""

    key = str(chain).strip()
    return CHAIN_NAMES.get(key.lower(), CHAIN_NAMES.get(key, key))


def explorer_url(leg: TransactionLeg) -> str:
    """Return a block explorer link for one transfer leg, or its bare hash."""

    prefix = _EXPLORER_TX_URLS.get(leg.chain_id)
    if prefix is None:
        return leg.tx_hash
    return f"{prefix}{leg.tx_hash}"


def is_solana_chain(chain: str | int) -> bool:
    """Whether a chain identifier refers to Solana."""

    return str(chain).strip().lower() in {"solana", str(SOLANA_STATUS_CHAIN_ID)}


__all__ = [
    "CHAIN_IDS",
    "CHAIN_NAMES",
    "DEFAULT_EVM_ADDRESS",
    "DEFAULT_SOLANA_ADDRESS",
    "SOLANA_STATUS_CHAIN_ID",
    "TOKEN_ADDRESSES",
    "chain_display_name",
    "explorer_url",
    "is_solana_chain",
    "resolve_chain",
    "resolve_token",
]
