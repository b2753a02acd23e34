"""Address format checks for EVM and Solana chains."""

from __future__ import annotations

import base58
from eth_utils import is_hex_address

from crosschain_swap.domain.chains import is_solana_chain

_SOLANA_PUBLIC_KEY_LENGTH = 32


def is_evm_address(address: str) -> bool:
    """Return True for a 0x-prefixed 20-byte hex address; checksums are not enforced."""

    return bool(address) and is_hex_address(address.strip())


def is_solana_address(address: str) -> bool:
    """Return True for a base58 string that decodes to a 32-byte public key."""

    candidate = address.strip()
    if not candidate or candidate.lower().startswith("0x"):
        return False
    try:
        decoded = base58.b58decode(candidate)
    except ValueError:
        return False
    return len(decoded) == _SOLANA_PUBLIC_KEY_LENGTH


def is_address_for_chain(chain: str | int, address: str) -> bool:
    """Validate an address against the family of the given chain."""

    if is_solana_chain(chain):
        return is_solana_address(address)
    return is_evm_address(address)


def ensure_address_for_chain(chain: str | int, address: str, *, field: str) -> str:
    """Return the stripped address or raise `ValueError` naming the field."""

    if not is_address_for_chain(chain, address):
        family = "Solana" if is_solana_chain(chain) else "EVM"
        raise ValueError(f"{field} is not a valid {family} address: '{address}'.")
    return address.strip()


__all__ = [
    "ensure_address_for_chain",
    "is_address_for_chain",
    "is_evm_address",
    "is_solana_address",
]
