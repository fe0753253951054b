"""
Health and log endpoints.
"""

import time
from typing import Any, Optional

from fastapi import APIRouter, Query

from rails_expert import __version__
from rails_expert.config import get_settings
from rails_expert.lib.logger import get_log_buffer

router = APIRouter()

_start_time = time.time()


@router.get("/health")
async def health_check() -> dict[str, Any]:
    settings = get_settings()
    return {
        "status": "ok",
        "timestamp": int(time.time() * 1000),
        "version": __version__,
        "uptime": int(time.time() - _start_time),
        "repoPath": str(settings.repo_path),
        "marketplace": settings.marketplace_path.exists(),
    }


@router.get("/logs")
async def recent_logs(
    limit: int = Query(100, ge=1, le=500, description="Number of entries"),
    check: Optional[str] = Query(None, description="Only entries logged by this check"),
) -> dict[str, Any]:
    """Most recent log entries captured since startup."""
    return {"entries": get_log_buffer().get_recent(limit, check=check)}
