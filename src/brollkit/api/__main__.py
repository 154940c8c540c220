"""API server entry point for ``python -m brollkit.api``."""

import uvicorn

from brollkit.api.app import create_app
from brollkit.config import get_settings

if __name__ == "__main__":
    settings = get_settings()
    uvicorn.run(
        create_app(settings),
        host=settings.server_host,
        port=settings.server_port,
        reload=False,
    )
