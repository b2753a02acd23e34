"""Demo backend that drives route discovery sessions and status lookups."""

from __future__ import annotations

import asyncio
import logging
from contextlib import asynccontextmanager

import uvicorn
from fastapi import FastAPI, HTTPException, Query, Request

from crosschain_swap import __version__
from crosschain_swap.application.services import RouteStreamSession
from crosschain_swap.bootstrap import build_client
from crosschain_swap.config import get_settings
from crosschain_swap.domain.chains import CHAIN_IDS, TOKEN_ADDRESSES, resolve_chain
from crosschain_swap.domain.errors import CrossChainClientError
from crosschain_swap.domain.transfer_status import StatusRequest
from crosschain_swap.infrastructure.cross_chain_api import CrossChainClient
from crosschain_swap_demo.models import (
    StartStreamRequest,
    StreamSnapshotResponse,
    TransferStatusResponse,
)

logger = logging.getLogger(__name__)


@asynccontextmanager
async def _lifespan(app: FastAPI):
    settings = get_settings()
    app.state.settings = settings
    app.state.api_client = build_client(settings)
    app.state.sessions: dict[str, RouteStreamSession] = {}
    try:
        yield
    finally:
        sessions: dict[str, RouteStreamSession] = app.state.sessions
        await asyncio.gather(*(session.close() for session in sessions.values()))
        sessions.clear()
        await app.state.api_client.close()


def _get_session(request: Request, session_id: str) -> RouteStreamSession:
    sessions: dict[str, RouteStreamSession] = request.app.state.sessions
    session = sessions.get(session_id)
    if session is None:
        raise HTTPException(status_code=404, detail=f"Unknown session '{session_id}'.")
    return session


def create_app() -> FastAPI:
    """Create demo FastAPI app."""

    app = FastAPI(title="Cross-Chain Route Discovery Demo", version=__version__, lifespan=_lifespan)

    @app.get("/healthz")
    async def healthz() -> dict[str, str]:
        """Liveness probe."""

        return {"status": "ok"}

    @app.get("/api/config")
    async def get_config(request: Request) -> dict[str, object]:
        settings = request.app.state.settings
        return {
            "chains": dict(CHAIN_IDS),
            "tokens": dict(TOKEN_ADDRESSES),
            "defaultEvmAddress": settings.evm_receiver_address,
            "defaultSolanaAddress": settings.solana_receiver_address,
        }

    @app.post(
        "/api/sessions/{session_id}/stream/start",
        response_model=StreamSnapshotResponse,
        status_code=200,
    )
    async def start_stream(
        session_id: str,
        body: StartStreamRequest,
        request: Request,
    ) -> StreamSnapshotResponse:
        sessions: dict[str, RouteStreamSession] = request.app.state.sessions
        session = sessions.get(session_id)
        if session is None:
            client: CrossChainClient = request.app.state.api_client
            session = RouteStreamSession(client)
            sessions[session_id] = session

        await session.start(body.to_stream_request())
        logger.info("Started route stream for session '%s'.", session_id)
        return StreamSnapshotResponse.from_snapshot(session_id, session.snapshot())

    @app.post(
        "/api/sessions/{session_id}/stream/stop",
        response_model=StreamSnapshotResponse,
        status_code=200,
    )
    async def stop_stream(session_id: str, request: Request) -> StreamSnapshotResponse:
        session = _get_session(request, session_id)
        await session.stop()
        return StreamSnapshotResponse.from_snapshot(session_id, session.snapshot())

    @app.get(
        "/api/sessions/{session_id}/stream",
        response_model=StreamSnapshotResponse,
        status_code=200,
    )
    async def get_stream(session_id: str, request: Request) -> StreamSnapshotResponse:
        session = _get_session(request, session_id)
        return StreamSnapshotResponse.from_snapshot(session_id, session.snapshot())

    @app.delete("/api/sessions/{session_id}", status_code=200)
    async def close_session(session_id: str, request: Request) -> dict[str, str]:
        session = _get_session(request, session_id)
        await session.close()
        del request.app.state.sessions[session_id]
        return {"status": "ok"}

    @app.get(
        "/api/transfers/status",
        response_model=TransferStatusResponse,
        status_code=200,
    )
    async def get_transfer_status(
        request: Request,
        origin_chain: str = Query(alias="originChain", min_length=1),
        origin_tx_hash: str = Query(alias="originTxHash", min_length=1),
    ) -> TransferStatusResponse:
        client: CrossChainClient = request.app.state.api_client
        try:
            status = await client.get_status(
                StatusRequest(
                    origin_chain=resolve_chain(origin_chain),
                    origin_tx_hash=origin_tx_hash.strip(),
                )
            )
        except CrossChainClientError as exc:
            raise HTTPException(status_code=502, detail=str(exc)) from exc
        return TransferStatusResponse.from_status(status)

    return app


app = create_app()


def run() -> None:
    """Run demo development server."""

    settings = get_settings()
    uvicorn.run(
        "crosschain_swap_demo.main:app",
        host=settings.demo_host,
        port=settings.demo_port,
        reload=False,
    )


__all__ = ["app", "create_app", "run"]
