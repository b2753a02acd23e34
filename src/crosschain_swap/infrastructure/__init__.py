"""Infrastructure layer public API."""

from crosschain_swap.infrastructure.cross_chain_api import CrossChainClient

__all__ = ["CrossChainClient"]
