"""Entry point for serving the Member Registry API.

Reads the configuration from the environment (see ``core.config``) and
starts Uvicorn on ``APP_HOST``/``APP_PORT``.  Intended to be executed
from the project root, for example under Docker, where only a single
Python file is specified.

Usage:
    python run.py
"""
import asyncio

from uvicorn import Config, Server

from member_registry_api.app.core.config import Settings
from member_registry_api.app.main import create_app


async def main() -> None:
    """Build the application and serve it until interrupted."""
    settings = Settings.from_env()
    config = Config(
        app=create_app(settings),
        host=settings.app_host,
        port=settings.app_port,
        reload=False,
        log_level=settings.log_level.lower(),
    )
    server = Server(config)
    await server.serve()


if __name__ == "__main__":
    try:
        asyncio.run(main())
    except (KeyboardInterrupt, SystemExit):
        pass
