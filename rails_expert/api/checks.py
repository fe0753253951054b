"""
Content check endpoint.
"""

from typing import Any, Optional

from fastapi import APIRouter, HTTPException, Query

from rails_expert.config import get_settings
from rails_expert.core.checks import run_checks

router = APIRouter()


@router.get("/checks")
async def get_checks(
    only: Optional[list[str]] = Query(None, description="Run only these checks"),
) -> dict[str, Any]:
    """Run the content checks against the served repository."""
    settings = get_settings()
    try:
        report = run_checks(
            settings.repo_path,
            only=only,
            skip=[] if only else settings.skip_checks,
            link_ignore=settings.link_ignore,
        )
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    return report.to_dict()
