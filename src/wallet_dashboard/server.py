"""
Dashboard server exposing the wallet session to a browser front end.

Run with: python -m wallet_dashboard.server
Then open http://localhost:8001/session or connect to ws://localhost:8001/ws
"""
import logging
from contextlib import asynccontextmanager
from typing import Any, Optional, Union

import uvicorn
from fastapi import FastAPI, WebSocket, WebSocketDisconnect
from pydantic import BaseModel

from .config import Settings, load_settings
from .history.selector import BackendSelector
from .providers import ProviderGateway, UserWalletProvider, Web3Provider
from .session import SessionAggregator
from .units import hex_to_int

logger = logging.getLogger(__name__)


class ConnectRequest(BaseModel):
    """Wallet details reported by the browser after the account prompt."""

    address: Optional[str] = None
    chainId: Optional[Union[int, str]] = None


def _parse_chain_id(value: Any) -> Optional[int]:
    if value is None:
        return None
    try:
        return hex_to_int(value)
    except ValueError:
        logger.warning(f"Ignoring malformed chain id: {value!r}")
        return None


def build_aggregator(settings: Settings) -> SessionAggregator:
    """Wire providers, backends and the session from settings."""
    upstream = None
    if settings.rpc_url:
        accounts = [settings.watch_address] if settings.watch_address else []
        upstream = Web3Provider(settings.rpc_url, accounts=accounts)
    wallet = UserWalletProvider(upstream=upstream)
    return SessionAggregator(
        ProviderGateway(wallet),
        BackendSelector(settings),
        transaction_limit=settings.transaction_limit,
        call_timeout=settings.request_timeout,
    )


def create_app(
    aggregator: Optional[SessionAggregator] = None,
    settings: Optional[Settings] = None,
) -> FastAPI:
    """
    Build the dashboard application.

    Parameters
    ----------
    aggregator : Optional[SessionAggregator]
        Session owner; built from ``settings`` when omitted.
    settings : Optional[Settings]
        Loaded from the environment when omitted.
    """
    if aggregator is None:
        aggregator = build_aggregator(settings or load_settings())

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        yield
        await aggregator.aclose()

    app = FastAPI(title="Wallet Dashboard", lifespan=lifespan)
    app.state.aggregator = aggregator
    app.state.active_connections = []

    def user_wallet() -> Optional[UserWalletProvider]:
        provider = aggregator.gateway.provider
        return provider if isinstance(provider, UserWalletProvider) else None

    async def broadcast_state() -> None:
        """Broadcast the session snapshot to all connected clients"""
        connections = app.state.active_connections
        if not connections:
            return

        disconnected = []
        snapshot = aggregator.snapshot()
        for connection in connections:
            try:
                await connection.send_json({"session": snapshot})
            except Exception as e:
                logger.error(f"Error broadcasting to client: {e}")
                disconnected.append(connection)

        for connection in disconnected:
            try:
                connections.remove(connection)
            except ValueError:
                pass

    async def handle_connect(address: Optional[str], chain_id: Any) -> None:
        wallet = user_wallet()
        if wallet is not None and address:
            wallet.set_wallet_info(address, _parse_chain_id(chain_id))
        await aggregator.connect()

    @app.get("/session")
    async def get_session():
        return aggregator.snapshot()

    @app.post("/connect")
    async def connect(request: Optional[ConnectRequest] = None):
        if request is not None:
            await handle_connect(request.address, request.chainId)
        else:
            await aggregator.connect()
        await broadcast_state()
        return aggregator.snapshot()

    @app.post("/transactions/refresh")
    async def refresh_transactions():
        await aggregator.refresh_transactions()
        await broadcast_state()
        return aggregator.snapshot()

    @app.post("/disconnect")
    async def disconnect():
        aggregator.disconnect()
        wallet = user_wallet()
        if wallet is not None:
            wallet.clear()
        await broadcast_state()
        return aggregator.snapshot()

    @app.get("/health")
    async def health_check():
        """Health check endpoint"""
        return {
            "status": "healthy",
            "connections": len(app.state.active_connections),
            "connected": aggregator.session.address is not None,
        }

    @app.websocket("/ws")
    async def websocket_endpoint(websocket: WebSocket):
        """Handle WebSocket connections for real-time session updates"""
        await websocket.accept()
        app.state.active_connections.append(websocket)
        logger.info(f"Client connected. Total connections: {len(app.state.active_connections)}")

        try:
            await websocket.send_json({"session": aggregator.snapshot()})

            while True:
                message = await websocket.receive_json()
                msg_type = message.get("type")

                if msg_type == "wallet_connect":
                    metadata = message.get("metadata") or {}
                    await handle_connect(message.get("address"), metadata.get("chainId"))
                elif msg_type == "wallet_rejected":
                    wallet = user_wallet()
                    if wallet is not None:
                        wallet.set_rejected()
                    await aggregator.connect()
                elif msg_type == "wallet_disconnect":
                    aggregator.disconnect()
                    wallet = user_wallet()
                    if wallet is not None:
                        wallet.clear()
                elif msg_type == "refresh":
                    await aggregator.refresh_transactions()
                else:
                    logger.warning(f"Unknown message type: {msg_type}")
                    continue

                await broadcast_state()
        except WebSocketDisconnect:
            pass
        except Exception as e:
            logger.error(f"WebSocket error: {e}")
        finally:
            if websocket in app.state.active_connections:
                app.state.active_connections.remove(websocket)
            logger.info(f"Client disconnected. Total connections: {len(app.state.active_connections)}")

    return app


def main() -> None:
    settings = load_settings()
    logging.basicConfig(
        level=settings.log_level,
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
    )
    logger.info(f"Wallet dashboard available at: http://localhost:{settings.port}")
    if not settings.etherscan_api_key:
        logger.warning("Etherscan API key not found. Transactions may use mock data.")

    uvicorn.run(
        create_app(settings=settings),
        host=settings.host,
        port=settings.port,
        log_level=settings.log_level.lower()
    )


if __name__ == "__main__":
    main()
