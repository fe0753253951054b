"""
Read-only catalog of the marketplace's plugins.
"""

import logging
from typing import Any

from fastapi import APIRouter, HTTPException

from rails_expert.config import get_settings
from rails_expert.core.marketplace import discover_plugins
from rails_expert.lib.typed_errors import ManifestError
from rails_expert.models.plugin import LoadedPlugin

router = APIRouter()
logger = logging.getLogger(__name__)


def _discover() -> list[LoadedPlugin]:
    settings = get_settings()
    try:
        return discover_plugins(settings.repo_path)
    except ManifestError as e:
        logger.error(f"Cannot load marketplace: {e}")
        raise HTTPException(status_code=500, detail=str(e))


def _get_plugin(name: str) -> LoadedPlugin:
    for plugin in _discover():
        if plugin.name == name or plugin.slug == name:
            return plugin
    raise HTTPException(status_code=404, detail=f"Plugin '{name}' not found")


@router.get("/plugins")
async def list_plugins() -> dict[str, Any]:
    """List all plugins in the marketplace."""
    return {"plugins": [p.summary() for p in _discover()]}


@router.get("/plugins/{name}")
async def get_plugin(name: str) -> dict[str, Any]:
    """Get details for a specific plugin."""
    plugin = _get_plugin(name)
    return {
        **plugin.summary(),
        "manifest": plugin.manifest.model_dump(exclude_none=True),
    }


@router.get("/plugins/{name}/agents")
async def list_agents(name: str) -> dict[str, Any]:
    plugin = _get_plugin(name)
    return {
        "agents": [
            a.model_dump(by_alias=True, exclude={"system_prompt"}) for a in plugin.agents
        ]
    }


@router.get("/plugins/{name}/commands")
async def list_commands(name: str) -> dict[str, Any]:
    plugin = _get_plugin(name)
    return {
        "commands": [
            {**c.model_dump(by_alias=True, exclude={"body"}), "invocation": c.invocation}
            for c in plugin.commands
        ]
    }


@router.get("/plugins/{name}/skills")
async def list_skills(name: str) -> dict[str, Any]:
    plugin = _get_plugin(name)
    return {"skills": [s.to_dict() for s in plugin.skills]}


@router.get("/plugins/{name}/hooks")
async def get_hooks(name: str) -> dict[str, Any]:
    plugin = _get_plugin(name)
    return plugin.hooks.model_dump(exclude_none=True)
