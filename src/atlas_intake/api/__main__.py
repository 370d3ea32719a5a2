"""
atlas_intake.api.__main__

Entrypoint for running the FastAPI application via `python -m atlas_intake.api`.

Responsibilities:
- Load settings.
- Create the app.
- Start uvicorn with structlog-compatible logging config.
"""

from __future__ import annotations

import uvicorn

from atlas_intake.api.app import create_app
from atlas_intake.settings import get_settings


def main() -> None:
    settings = get_settings()
    app = create_app(settings=settings)

    uvicorn.run(
        app,
        host=settings.api_host,
        port=settings.api_port,
        log_config=None,  # structlog
    )


if __name__ == "__main__":
    main()
