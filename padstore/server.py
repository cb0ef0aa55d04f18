from __future__ import annotations

from typing import Optional

from fastapi import FastAPI

from padstore.api.routes import router as api_router
from padstore.core.config import get_settings, load_env_file
from padstore.core.keepalive import start_keep_alive
from padstore.core.logging import console, setup_logging
from padstore.services.bootstrap import resolve_server_config
from padstore.services.context import ServerConfig


def create_app(config: Optional[ServerConfig] = None, keep_alive: bool = True) -> FastAPI:
    app = FastAPI(title="padstore")
    app.include_router(api_router)
    app.state.server_config = config

    @app.on_event("startup")
    def on_startup():
        if app.state.server_config is None:
            # Served directly by uvicorn, without padstore.__main__
            load_env_file()
            settings = get_settings()
            setup_logging(settings.log_level, settings.log_file)
            console(f"Settings: {settings.as_dict()}")
            app.state.server_config = resolve_server_config(settings)
        # Independent of database availability
        if keep_alive:
            start_keep_alive(app.state.server_config.settings)
        console("padstore initialized and ready to handle requests")

    return app


app = create_app()
