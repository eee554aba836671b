"""Helper for running the Dinnerboard ASGI application."""

from __future__ import annotations

import os

import uvicorn

APP_FACTORY = "dinnerboard.server.app:create_app"


def main(host: str | None = None, port: int | None = None, reload: bool | None = None) -> None:
    """Serve the API; arguments fall back to DINNERBOARD_SERVER_* env vars."""

    host = host or os.environ.get("DINNERBOARD_SERVER_HOST", "127.0.0.1")
    port = port or int(os.environ.get("DINNERBOARD_SERVER_PORT", "8000"))
    reload_enabled = reload if reload is not None else os.environ.get("RELOAD") == "1"

    uvicorn.run(
        APP_FACTORY,
        host=host,
        port=port,
        reload=reload_enabled,
        factory=True,
    )


if __name__ == "__main__":
    main()
