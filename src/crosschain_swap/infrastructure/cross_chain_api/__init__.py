"""Cross-chain API infrastructure adapters."""

from crosschain_swap.infrastructure.cross_chain_api.client import (
    DEFAULT_API_KEY_HEADER,
    DEFAULT_BASE_URL,
    CrossChainClient,
    query_params,
)

__all__ = ["CrossChainClient", "DEFAULT_API_KEY_HEADER", "DEFAULT_BASE_URL", "query_params"]
