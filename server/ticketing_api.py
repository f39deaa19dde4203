"""FastAPI app for the ticketing service with the Socket.IO chat relay mounted."""

from __future__ import annotations

from typing import Any

import socketio
from fastapi import FastAPI

from chat.relay import create_chat_server
from fitlockr_app.client_log import ClientLogWriter
from fitlockr_app.config import AppConfig
from fitlockr_app.logging_config import configure_logging
from server.common import install_common
from server.routes import events, profiles, transactions
from storage.ticketing_store import TicketingStore


def create_ticketing_app(
    config: AppConfig | None = None,
    store: TicketingStore | None = None,
    client_log: ClientLogWriter | None = None,
) -> FastAPI:
    """Build the REST half of the ticketing service."""

    config = config or AppConfig.from_env()
    app = FastAPI(title="FitLockr Ticketing", version="0.1.0")
    app.state.config = config
    app.state.store = store or TicketingStore.sqlite(config.ticketing_db_path)
    app.state.client_log = client_log or ClientLogWriter(config.log_dir, config.client_log_prefix)

    install_common(app, config)
    app.include_router(events.router, prefix="/api/events", tags=["events"])
    app.include_router(profiles.router, prefix="/api/users", tags=["users"])
    app.include_router(transactions.router, prefix="/api/transactions", tags=["transactions"])
    return app


def create_ticketing_asgi(config: AppConfig | None = None, store: TicketingStore | None = None) -> Any:
    """Wrap the REST app so Socket.IO traffic on ``/socket.io`` reaches the chat relay."""

    config = config or AppConfig.from_env()
    app = create_ticketing_app(config, store=store)
    sio, relay = create_chat_server(config.cors_origins, default_room=config.chat_room)
    app.state.chat_relay = relay
    return socketio.ASGIApp(sio, other_asgi_app=app)


def get_app() -> Any:
    """Factory for ASGI servers (``uvicorn --factory server.ticketing_api:get_app``)."""

    configure_logging()
    return create_ticketing_asgi()


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(get_app(), host="0.0.0.0", port=AppConfig.from_env().ticketing_port, reload=False)
