from __future__ import annotations

import sys

import uvicorn

from padstore.core.config import Settings, load_env_file
from padstore.core.errors import ConfigParseError
from padstore.core.logging import console, setup_logging
from padstore.server import create_app
from padstore.services.bootstrap import resolve_server_config

BIND_ADDRESS = "0.0.0.0"
_UVICORN_LEVELS = {"critical", "error", "warning", "info", "debug"}


def main() -> int:
    load_env_file()
    try:
        settings = Settings.from_env()
    except ConfigParseError as e:
        print(f"padstore: {e}", file=sys.stderr)
        return 2

    setup_logging(settings.log_level, settings.log_file)
    console(f"Starting padstore on port {settings.port}")
    console(f"Settings: {settings.as_dict()}")

    config = resolve_server_config(settings)
    app = create_app(config)
    level = settings.log_level.lower() if settings.log_level.lower() in _UVICORN_LEVELS else "info"
    uvicorn.run(app, host=BIND_ADDRESS, port=settings.port, log_level=level)
    return 0


if __name__ == "__main__":
    sys.exit(main())
