"""Application bootstrap/wiring."""

import logging

from crosschain_swap.application.services import TransactionMonitor
from crosschain_swap.config import Settings
from crosschain_swap.domain.ports import StatusFetcher
from crosschain_swap.infrastructure.cross_chain_api import CrossChainClient

logger = logging.getLogger(__name__)


def configure_logging(settings: Settings) -> None:
    """Install the root handler at the configured level."""

    logging.basicConfig(
        level=settings.log_level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


def build_client(settings: Settings) -> CrossChainClient:
    """Create an API client from settings; requires `ZEROEX_API_KEY`."""

    client = CrossChainClient(
        api_key=settings.require_api_key(),
        base_url=settings.api_base_url,
        api_key_header=settings.api_key_header,
        timeout_seconds=settings.http_timeout_seconds,
    )
    logger.debug("Cross-chain API client targets '%s'.", settings.api_base_url)
    return client


def build_transaction_monitor(settings: Settings, fetcher: StatusFetcher) -> TransactionMonitor:
    """Create a monitor with the configured attempt budget and interval."""

    return TransactionMonitor(
        fetcher,
        max_attempts=settings.monitor_max_attempts,
        interval_seconds=settings.monitor_interval_seconds,
    )


__all__ = ["build_client", "build_transaction_monitor", "configure_logging"]
