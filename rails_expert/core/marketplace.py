"""
Marketplace and plugin discovery.

The repository root carries .claude-plugin/marketplace.json, which lists
plugins by relative `source` path. Each plugin directory must have
.claude-plugin/plugin.json to be recognized. Plugin contents (agents,
commands, skills, hooks) are indexed for listing and checks.
"""

import json
import logging
from pathlib import Path
from typing import Any, Optional

from pydantic import ValidationError

from rails_expert.core.agents import load_all_agents
from rails_expert.core.commands import load_all_commands
from rails_expert.core.hooks import load_hooks
from rails_expert.core.skills import discover_skills
from rails_expert.lib.typed_errors import ManifestError
from rails_expert.models.plugin import (
    LoadedPlugin,
    MarketplaceEntry,
    MarketplaceManifest,
    PluginManifest,
)

logger = logging.getLogger(__name__)


def marketplace_file(repo_path: Path) -> Path:
    return repo_path / ".claude-plugin" / "marketplace.json"


def plugin_manifest_file(plugin_path: Path) -> Path:
    return plugin_path / ".claude-plugin" / "plugin.json"


def read_json(path: Path) -> dict[str, Any]:
    """Read a JSON object from disk, raising ManifestError on any failure."""
    if not path.exists():
        raise ManifestError(f"Manifest not found: {path}", path)
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except (json.JSONDecodeError, OSError, UnicodeDecodeError) as e:
        raise ManifestError(f"Cannot read {path.name}: {e}", path) from e
    if not isinstance(data, dict):
        raise ManifestError(f"{path.name} must contain a JSON object", path)
    return data


def load_marketplace(repo_path: Path) -> MarketplaceManifest:
    """Load the marketplace manifest from the repository root."""
    path = marketplace_file(repo_path)
    data = read_json(path)
    try:
        return MarketplaceManifest(**data)
    except ValidationError as e:
        raise ManifestError(f"marketplace.json does not match schema: {e}", path) from e


def load_plugin_manifest(plugin_path: Path) -> PluginManifest:
    """Load a plugin's .claude-plugin/plugin.json."""
    path = plugin_manifest_file(plugin_path)
    data = read_json(path)
    try:
        return PluginManifest(**data)
    except ValidationError as e:
        raise ManifestError(f"plugin.json does not match schema: {e}", path) from e


def resolve_plugin_path(repo_path: Path, entry: MarketplaceEntry) -> Path:
    """Resolve a marketplace entry's relative source against the repo root."""
    return (repo_path / entry.source).resolve()


def index_plugin(plugin_path: Path) -> LoadedPlugin:
    """Index a single plugin directory.

    Reads the manifest and discovers agents, commands, skills, and hooks.
    """
    manifest = load_plugin_manifest(plugin_path)

    return LoadedPlugin(
        name=manifest.name or plugin_path.name,
        slug=plugin_path.name,
        version=manifest.version,
        description=manifest.description,
        author=manifest.author_name,
        path=str(plugin_path),
        manifest=manifest,
        agents=load_all_agents(plugin_path),
        commands=load_all_commands(plugin_path),
        skills=discover_skills(plugin_path),
        hooks=load_hooks(plugin_path),
    )


def discover_plugins(repo_path: Path) -> list[LoadedPlugin]:
    """Discover every plugin listed in the marketplace.

    Raises ManifestError only when the marketplace itself cannot be read;
    a single broken plugin is logged and skipped.
    """
    marketplace = load_marketplace(repo_path)
    plugins: list[LoadedPlugin] = []
    seen_paths: set[str] = set()

    for entry in marketplace.plugins:
        path = resolve_plugin_path(repo_path, entry)
        if str(path) in seen_paths:
            logger.warning(
                f"Plugin {entry.name} points at an already indexed path: {path}",
                extra={"path": str(path)},
            )
            continue
        if not path.is_dir():
            logger.warning(
                f"Plugin {entry.name} source does not exist: {path}",
                extra={"path": str(path)},
            )
            continue

        try:
            plugin = index_plugin(path)
        except ManifestError as e:
            logger.warning(
                f"Failed to load plugin {entry.name} at {path}: {e}",
                extra={"path": e.path or str(path)},
            )
            continue

        plugins.append(plugin)
        seen_paths.add(str(path))

    logger.info(f"Discovered {len(plugins)} plugins")
    return plugins


def find_plugin(repo_path: Path, name: str) -> Optional[LoadedPlugin]:
    """Find a plugin by manifest name or directory slug."""
    for plugin in discover_plugins(repo_path):
        if plugin.name == name or plugin.slug == name:
            return plugin
    return None
