"""FastAPI app for the wardrobe service: users, pieces, outfits and shelves."""

from __future__ import annotations

from fastapi import FastAPI

from fitlockr_app.client_log import ClientLogWriter
from fitlockr_app.config import AppConfig
from fitlockr_app.logging_config import configure_logging
from server.common import install_common
from server.routes import auth, outfits, pieces, shelves, users
from storage.wardrobe_store import WardrobeStore
from tools.image_host import ImageHost, build_image_host


def create_wardrobe_app(
    config: AppConfig | None = None,
    store: WardrobeStore | None = None,
    image_host: ImageHost | None = None,
    client_log: ClientLogWriter | None = None,
) -> FastAPI:
    """Build the wardrobe app. Collaborators default to the configured ones."""

    config = config or AppConfig.from_env()
    app = FastAPI(title="FitLockr Wardrobe", version="0.1.0")
    app.state.config = config
    app.state.store = store or WardrobeStore.sqlite(config.wardrobe_db_path)
    app.state.image_host = image_host or build_image_host(config)
    app.state.client_log = client_log or ClientLogWriter(config.log_dir, config.client_log_prefix)

    install_common(app, config)
    app.include_router(users.router, prefix="/api/users", tags=["users"])
    app.include_router(auth.router, prefix="/api/auth", tags=["auth"])
    app.include_router(pieces.router, prefix="/api/pieces", tags=["pieces"])
    app.include_router(outfits.router, prefix="/api/outfits", tags=["outfits"])
    app.include_router(shelves.router, prefix="/api/shelves", tags=["shelves"])
    return app


def get_app() -> FastAPI:
    """Factory for ASGI servers (``uvicorn --factory server.wardrobe_api:get_app``)."""

    configure_logging()
    return create_wardrobe_app()


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(get_app(), host="0.0.0.0", port=AppConfig.from_env().wardrobe_port, reload=False)
