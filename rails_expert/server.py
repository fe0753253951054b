"""
Catalog server: a read-only HTTP view of the marketplace content.
"""

import logging

import uvicorn
from fastapi import FastAPI

from rails_expert import __version__
from rails_expert.api import api_router
from rails_expert.config import get_settings

logger = logging.getLogger(__name__)

app = FastAPI(
    title="Rails Expert Catalog",
    description="Browse and check the Rails Expert marketplace content",
    version=__version__,
)

app.include_router(api_router)


@app.get("/")
async def root():
    """Root endpoint - returns server info."""
    return {
        "name": "Rails Expert Catalog",
        "version": __version__,
        "status": "running",
    }


def main(host: str | None = None, port: int | None = None) -> None:
    """Run the catalog server with uvicorn."""
    settings = get_settings()
    host = host or settings.host
    port = port or settings.port

    logger.info(f"Serving {settings.repo_path} on http://{host}:{port}")
    uvicorn.run(
        app,
        host=host,
        port=port,
        log_level=settings.log_level.lower(),
    )


if __name__ == "__main__":
    main()
