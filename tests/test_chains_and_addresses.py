from __future__ import annotations

import pytest

from crosschain_swap.domain.addresses import (
    ensure_address_for_chain,
    is_address_for_chain,
    is_evm_address,
    is_solana_address,
)
from crosschain_swap.domain.chains import (
    DEFAULT_EVM_ADDRESS,
    DEFAULT_SOLANA_ADDRESS,
    SOLANA_STATUS_CHAIN_ID,
    TOKEN_ADDRESSES,
    chain_display_name,
    explorer_url,
    is_solana_chain,
    resolve_chain,
    resolve_token,
)
from crosschain_swap.domain.transfer_status import TransactionLeg


@pytest.mark.parametrize(
    ("address", "expected"),
    [
        (DEFAULT_EVM_ADDRESS, True),
        (DEFAULT_EVM_ADDRESS.lower(), True),
        (TOKEN_ADDRESSES["USDC_BASE"], True),
        ("0x1234", False),
        ("4200000000000000000000000000000000000006", True),
        (DEFAULT_SOLANA_ADDRESS, False),
        ("", False),
    ],
)
def test_is_evm_address(address: str, expected: bool) -> None:
    assert is_evm_address(address) is expected


@pytest.mark.parametrize(
    ("address", "expected"),
    [
        (DEFAULT_SOLANA_ADDRESS, True),
        (TOKEN_ADDRESSES["USDC_SOL"], True),
        (TOKEN_ADDRESSES["WSOL"], True),
        (DEFAULT_EVM_ADDRESS, False),
        ("0OIl0OIl0OIl0OIl0OIl0OIl0OIl0OIl", False),
        ("abc", False),
        ("", False),
    ],
)
def test_is_solana_address(address: str, expected: bool) -> None:
    assert is_solana_address(address) is expected


def test_address_validation_follows_chain_family() -> None:
    assert is_address_for_chain("solana", DEFAULT_SOLANA_ADDRESS) is True
    assert is_address_for_chain(SOLANA_STATUS_CHAIN_ID, DEFAULT_SOLANA_ADDRESS) is True
    assert is_address_for_chain(8453, DEFAULT_EVM_ADDRESS) is True
    assert is_address_for_chain(8453, DEFAULT_SOLANA_ADDRESS) is False

    assert ensure_address_for_chain(8453, f"  {DEFAULT_EVM_ADDRESS} ", field="x") == (
        DEFAULT_EVM_ADDRESS
    )
    with pytest.raises(ValueError, match="destinationAddress is not a valid Solana address"):
        ensure_address_for_chain("solana", DEFAULT_EVM_ADDRESS, field="destinationAddress")


@pytest.mark.parametrize(
    ("value", "expected"),
    [
        ("base", 8453),
        ("Arbitrum", 42161),
        ("SOLANA", "solana"),
        ("8453", 8453),
        (137, 137),
        ("sepolia", "sepolia"),
    ],
)
def test_resolve_chain(value: str | int, expected: str | int) -> None:
    assert resolve_chain(value) == expected


def test_resolve_token_accepts_aliases_and_addresses() -> None:
    assert resolve_token("usdc_base") == TOKEN_ADDRESSES["USDC_BASE"]
    assert resolve_token(" 0xabc ") == "0xabc"


def test_chain_display_names() -> None:
    assert chain_display_name(8453) == "Base"
    assert chain_display_name("solana") == "Solana"
    assert chain_display_name(SOLANA_STATUS_CHAIN_ID) == "Solana"
    assert chain_display_name(56) == "56"
    assert is_solana_chain("Solana") is True
    assert is_solana_chain(8453) is False


@pytest.mark.parametrize(
    ("chain_id", "expected"),
    [
        (8453, "https://basescan.org/tx/0xhash"),
        (42161, "https://arbiscan.io/tx/0xhash"),
        (SOLANA_STATUS_CHAIN_ID, "https://solscan.io/tx/0xhash"),
        (56, "0xhash"),
    ],
)
def test_explorer_url(chain_id: int, expected: str) -> None:
    leg = TransactionLeg(chain_id=chain_id, chain="any", tx_hash="0xhash", timestamp=1)

    assert explorer_url(leg) == expected
