"""Command line entrypoint for quotes, route streams and transfer monitoring."""

from __future__ import annotations

import argparse
import asyncio
import sys
from collections.abc import Callable, Sequence
from datetime import datetime
from typing import TextIO

from crosschain_swap.application.services import (
    StreamState,
    TransactionMonitor,
    discover_routes,
)
from crosschain_swap.bootstrap import build_client, build_transaction_monitor, configure_logging
from crosschain_swap.config import Settings, get_settings
from crosschain_swap.domain.addresses import ensure_address_for_chain
from crosschain_swap.domain.chains import (
    DEFAULT_EVM_ADDRESS,
    DEFAULT_SOLANA_ADDRESS,
    chain_display_name,
    explorer_url,
    is_solana_chain,
    resolve_chain,
    resolve_token,
)
from crosschain_swap.domain.errors import CrossChainClientError, CrossChainError
from crosschain_swap.domain.quote_models import (
    BridgeStep,
    EvmGasCosts,
    EvmTransaction,
    LiquidQuote,
    LiquidRoutes,
    QuoteRequest,
    Route,
    RoutesRequest,
    SortRoutesBy,
    StreamQuoteRequest,
)
from crosschain_swap.domain.stream_events import RouteFound
from crosschain_swap.domain.transfer_status import StatusRequest, TransferStatus
from crosschain_swap.infrastructure.cross_chain_api import CrossChainClient

ClientFactory = Callable[[Settings], CrossChainClient]

_EXIT_OK = 0
_EXIT_FAILED = 1
_EXIT_USAGE = 2
_EXIT_INTERRUPTED = 130


def _add_swap_arguments(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("--origin-chain", required=True, help="Chain name or id to sell on")
    parser.add_argument("--destination-chain", required=True, help="Chain name or id to buy on")
    parser.add_argument("--sell-token", required=True, help="Token address or alias")
    parser.add_argument("--buy-token", required=True, help="Token address or alias")
    parser.add_argument("--sell-amount", required=True, help="Amount in base units")
    parser.add_argument("--origin-address", help="Sender; defaults to a quote-only address")
    parser.add_argument(
        "--destination-address",
        help="Receiver; defaults to ZEROEX_EVM/SOLANA_RECEIVER_ADDRESS",
    )


def _add_quote_arguments(parser: argparse.ArgumentParser) -> None:
    _add_swap_arguments(parser)
    parser.add_argument(
        "--sort-routes-by",
        choices=[value.value for value in SortRoutesBy],
        default=SortRoutesBy.PRICE.value,
    )
    parser.add_argument("--slippage-bps", type=int, default=100)
    parser.add_argument("--gas-payer", help="Separate Solana fee payer")


def _add_transfer_arguments(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("--origin-chain", required=True, help="Chain name or id of the origin tx")
    parser.add_argument("--tx-hash", required=True, help="Origin transaction hash or signature")


def build_parser() -> argparse.ArgumentParser:
    """Build the argument parser with one subcommand per API operation."""

    parser = argparse.ArgumentParser(
        prog="crosschain-swap",
        description="Quote, stream and monitor cross-chain swaps.",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    quote = subparsers.add_parser("quote", help="Fetch the best route")
    _add_quote_arguments(quote)

    routes = subparsers.add_parser("routes", help="Fetch ranked candidate routes")
    _add_quote_arguments(routes)
    routes.add_argument("--max-num-routes", type=int, default=3)

    stream = subparsers.add_parser("stream", help="Print routes as the quote stream finds them")
    _add_swap_arguments(stream)

    status = subparsers.add_parser("status", help="Look up a transfer once")
    _add_transfer_arguments(status)

    monitor = subparsers.add_parser("monitor", help="Poll a transfer until it settles")
    _add_transfer_arguments(monitor)
    monitor.add_argument("--max-attempts", type=int, help="Overrides ZEROEX_MONITOR_MAX_ATTEMPTS")
    monitor.add_argument(
        "--interval",
        type=float,
        help="Seconds between attempts; overrides ZEROEX_MONITOR_INTERVAL_SECONDS",
    )
    return parser


def _swap_fields(args: argparse.Namespace, settings: Settings) -> dict[str, object]:
    origin_chain = resolve_chain(args.origin_chain)
    destination_chain = resolve_chain(args.destination_chain)

    origin_address = args.origin_address or (
        DEFAULT_SOLANA_ADDRESS if is_solana_chain(origin_chain) else DEFAULT_EVM_ADDRESS
    )
    destination_address = args.destination_address or (
        settings.solana_receiver_address
        if is_solana_chain(destination_chain)
        else settings.evm_receiver_address
    )
    return {
        "origin_chain": origin_chain,
        "destination_chain": destination_chain,
        "sell_token": resolve_token(args.sell_token),
        "buy_token": resolve_token(args.buy_token),
        "sell_amount": args.sell_amount,
        "origin_address": ensure_address_for_chain(
            origin_chain, origin_address, field="originAddress"
        ),
        "destination_address": ensure_address_for_chain(
            destination_chain, destination_address, field="destinationAddress"
        ),
    }


def _quote_fields(args: argparse.Namespace, settings: Settings) -> dict[str, object]:
    fields = _swap_fields(args, settings)
    fields["sort_routes_by"] = SortRoutesBy(args.sort_routes_by)
    fields["slippage_bps"] = args.slippage_bps
    if args.gas_payer:
        fields["gas_payer"] = ensure_address_for_chain(
            fields["origin_chain"], args.gas_payer, field="gasPayer"
        )
    return fields


def format_route(route: Route, out: TextIO) -> None:
    """Print the amounts, steps and pre-flight issues of one route."""

    print(f"  Send: {route.sell_amount}", file=out)
    print(f"  Receive: {route.buy_amount}", file=out)
    print(f"  Min receive: {route.min_buy_amount}", file=out)
    print(f"  Estimated time: {route.estimated_time_seconds:g}s", file=out)
    print(f"  Steps: {len(route.steps)}", file=out)
    if route.bridge_provider:
        print(f"  Bridge provider: {route.bridge_provider}", file=out)
    for index, step in enumerate(route.steps, start=1):
        if isinstance(step, BridgeStep):
            print(
                f"    {index}. Bridge via {step.provider} "
                f"({step.origin_chain_id} -> {step.destination_chain_id})",
                file=out,
            )
        else:
            print(f"    {index}. Swap on chain {step.chain_id}", file=out)

    if route.issues.balance is not None:
        balance = route.issues.balance
        print(
            f"  Insufficient balance of {balance.token}: "
            f"required {balance.expected}, available {balance.actual}",
            file=out,
        )
    if route.issues.allowance is not None:
        allowance = route.issues.allowance
        print(
            f"  Approval needed for spender {allowance.spender} "
            f"(current allowance {allowance.actual})",
            file=out,
        )

    if isinstance(route.transaction, EvmTransaction):
        details = route.transaction.details
        print(f"  Transaction to {details.to}, value {details.value} wei", file=out)
    else:
        serialized = route.transaction.details.serialized_transaction
        print(f"  Serialized Solana transaction ({len(serialized)} chars)", file=out)


def format_stream_route(event: RouteFound, out: TextIO) -> None:
    """Print one streamed route as a single line."""

    route = event.route
    if isinstance(route.gas_costs, EvmGasCosts):
        network_fee = route.gas_costs.total_network_fee
    else:
        network_fee = route.gas_costs.total
    print(
        f"#{event.display_index} buy {route.buy_amount} (min {route.min_buy_amount}), "
        f"~{route.estimated_time_seconds:g}s, network fee {network_fee or 'n/a'}",
        file=out,
    )


def format_legs(status: TransferStatus, out: TextIO, *, with_dates: bool = False) -> None:
    """Print every transaction leg with an explorer link."""

    for index, leg in enumerate(status.transactions, start=1):
        line = f"  {index}. {leg.chain}: {explorer_url(leg)}"
        if with_dates:
            line += f" ({datetime.fromtimestamp(leg.timestamp).isoformat(sep=' ')})"
        print(line, file=out)


class ConsoleMonitorObserver:
    """Print one line per monitoring attempt."""

    def __init__(self, out: TextIO) -> None:
        self._out = out

    def on_status(self, attempt: int, status: TransferStatus) -> None:
        timestamp = datetime.now().strftime("%H:%M:%S")
        sub_status = f" ({status.sub_status})" if status.sub_status else ""
        print(f"[{timestamp}] Status: {status.status}{sub_status}", file=self._out)
        if len(status.transactions) > 1:
            print(f"{len(status.transactions)} transactions found:", file=self._out)
            format_legs(status, self._out)

    def on_attempt_failed(self, attempt: int, error: CrossChainClientError) -> None:
        timestamp = datetime.now().strftime("%H:%M:%S")
        print(f"[{timestamp}] Attempt {attempt} failed: {error}", file=self._out)


async def _run_quote(client: CrossChainClient, request: QuoteRequest, out: TextIO) -> int:
    response = await client.get_quote(request)
    if not isinstance(response, LiquidQuote):
        print(f"No liquidity available (zid {response.request_id})", file=out)
        return _EXIT_FAILED
    print(
        f"Quote {chain_display_name(response.origin_chain_id)} -> "
        f"{chain_display_name(response.destination_chain_id)}:",
        file=out,
    )
    format_route(response.route, out)
    return _EXIT_OK


async def _run_routes(client: CrossChainClient, request: RoutesRequest, out: TextIO) -> int:
    response = await client.get_routes(request)
    if not isinstance(response, LiquidRoutes):
        print(f"No liquidity available (zid {response.request_id})", file=out)
        return _EXIT_FAILED
    for index, route in enumerate(response.routes, start=1):
        print(f"Route {index}:", file=out)
        format_route(route, out)
    return _EXIT_OK


async def _run_stream(
    client: CrossChainClient,
    request: StreamQuoteRequest,
    out: TextIO,
) -> int:
    result = await discover_routes(
        client,
        request,
        on_route=lambda event: format_stream_route(event, out),
    )
    if result.outcome is StreamState.COMPLETED:
        if result.liquidity_available:
            print(f"Stream complete: {len(result.routes)} route(s) found.", file=out)
            return _EXIT_OK
        print("Stream complete: no liquidity available.", file=out)
        return _EXIT_FAILED
    result.raise_for_outcome()
    return _EXIT_FAILED


async def _run_status(client: CrossChainClient, request: StatusRequest, out: TextIO) -> int:
    status = await client.get_status(request)
    sub_status = f" ({status.sub_status})" if status.sub_status else ""
    print(f"Status: {status.status}{sub_status}", file=out)
    if status.bridge:
        print(f"Bridge: {status.bridge}", file=out)
    format_legs(status, out, with_dates=True)
    return _EXIT_OK


async def _run_monitor(monitor: TransactionMonitor, request: StatusRequest, out: TextIO) -> int:
    print("Monitoring cross-chain transaction; this may take several minutes...", file=out)
    status = await monitor.monitor(request, observer=ConsoleMonitorObserver(out))
    print(f"Final status: {status.status}", file=out)
    if status.is_success:
        print("Cross-chain swap completed successfully.", file=out)
        format_legs(status, out, with_dates=True)
        return _EXIT_OK
    print("Cross-chain swap did not complete successfully.", file=out)
    if status.sub_status:
        print(f"Reason: {status.sub_status}", file=out)
    return _EXIT_FAILED


async def _dispatch(
    args: argparse.Namespace,
    settings: Settings,
    client_factory: ClientFactory,
    out: TextIO,
) -> int:
    if args.command in {"status", "monitor"}:
        request = StatusRequest(
            origin_chain=resolve_chain(args.origin_chain),
            origin_tx_hash=args.tx_hash.strip(),
        )
    elif args.command == "routes":
        request = RoutesRequest(
            **_quote_fields(args, settings),
            max_num_routes=args.max_num_routes,
        )
    elif args.command == "quote":
        request = QuoteRequest(**_quote_fields(args, settings))
    else:
        request = StreamQuoteRequest(**_swap_fields(args, settings))

    async with client_factory(settings) as client:
        if args.command == "quote":
            return await _run_quote(client, request, out)
        if args.command == "routes":
            return await _run_routes(client, request, out)
        if args.command == "stream":
            return await _run_stream(client, request, out)
        if args.command == "status":
            return await _run_status(client, request, out)

        monitor = build_transaction_monitor(settings, client)
        if args.max_attempts is not None or args.interval is not None:
            monitor = TransactionMonitor(
                client,
                max_attempts=(
                    args.max_attempts if args.max_attempts is not None else monitor.max_attempts
                ),
                interval_seconds=(
                    args.interval if args.interval is not None else monitor.interval_seconds
                ),
            )
        return await _run_monitor(monitor, request, out)


def main(
    argv: Sequence[str] | None = None,
    *,
    settings: Settings | None = None,
    client_factory: ClientFactory = build_client,
    out: TextIO | None = None,
    err: TextIO | None = None,
) -> int:
    """Run one subcommand and return its exit code."""

    args = build_parser().parse_args(argv)
    out = out or sys.stdout
    err = err or sys.stderr

    try:
        active_settings = settings or get_settings()
    except ValueError as exc:
        print(f"Configuration error: {exc}", file=err)
        return _EXIT_USAGE
    configure_logging(active_settings)

    try:
        return asyncio.run(_dispatch(args, active_settings, client_factory, out))
    except ValueError as exc:
        print(f"Error: {exc}", file=err)
        return _EXIT_USAGE
    except CrossChainError as exc:
        print(f"Error: {exc}", file=err)
        return _EXIT_FAILED
    except KeyboardInterrupt:
        print("Interrupted.", file=err)
        return _EXIT_INTERRUPTED


def run() -> None:
    """Console script entrypoint."""

    raise SystemExit(main())


__all__ = [
    "ConsoleMonitorObserver",
    "build_parser",
    "format_legs",
    "format_route",
    "format_stream_route",
    "main",
    "run",
]
