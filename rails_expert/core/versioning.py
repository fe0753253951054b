"""
Release version helpers.

The plugin manifest and its marketplace entry must always carry the same
version; bump_version() writes both in one step.
"""

import json
import logging
import re
from pathlib import Path
from typing import Any, Optional

from rails_expert.core.marketplace import (
    marketplace_file,
    plugin_manifest_file,
    read_json,
)
from rails_expert.lib.typed_errors import ManifestError

logger = logging.getLogger(__name__)

SEMVER_RE = re.compile(
    r"^(0|[1-9]\d*)\.(0|[1-9]\d*)\.(0|[1-9]\d*)"
    r"(?:-([0-9A-Za-z-]+(?:\.[0-9A-Za-z-]+)*))?"
    r"(?:\+([0-9A-Za-z-]+(?:\.[0-9A-Za-z-]+)*))?$"
)

BUMP_PARTS = ("major", "minor", "patch")


def is_semver(version: Any) -> bool:
    return isinstance(version, str) and SEMVER_RE.match(version) is not None


def next_version(current: str, part: str) -> str:
    """Compute the next release version. Pre-release suffixes are dropped."""
    match = SEMVER_RE.match(current or "")
    if not match:
        raise ValueError(f"Not a semantic version: {current!r}")
    if part not in BUMP_PARTS:
        raise ValueError(f"Unknown version part: {part!r} (expected one of {', '.join(BUMP_PARTS)})")

    major, minor, patch = (int(match.group(i)) for i in range(1, 4))
    if part == "major":
        return f"{major + 1}.0.0"
    if part == "minor":
        return f"{major}.{minor + 1}.0"
    if match.group(4):
        # 1.2.3-rc.1 -> 1.2.3
        return f"{major}.{minor}.{patch}"
    return f"{major}.{minor}.{patch + 1}"


def _write_json(path: Path, data: dict[str, Any]) -> None:
    path.write_text(json.dumps(data, indent=2, ensure_ascii=False) + "\n", encoding="utf-8")


def _select_entry(entries: list[dict[str, Any]], plugin: Optional[str]) -> dict[str, Any]:
    if plugin is None:
        if len(entries) != 1:
            raise ValueError("Marketplace lists several plugins; name the one to bump")
        return entries[0]
    for entry in entries:
        if entry.get("name") == plugin:
            return entry
    raise ValueError(f"Plugin not in marketplace: {plugin}")


def bump_version(repo_path: Path, new_version: str, plugin: Optional[str] = None) -> list[Path]:
    """Write new_version into the plugin manifest and its marketplace entry.

    Returns the files written.
    """
    if not is_semver(new_version):
        raise ValueError(f"Not a semantic version: {new_version!r}")

    market_path = marketplace_file(repo_path)
    market = read_json(market_path)
    entries = market.get("plugins")
    if not isinstance(entries, list) or not all(isinstance(e, dict) for e in entries):
        raise ManifestError("marketplace.json has no plugin list", market_path)

    entry = _select_entry(entries, plugin)
    source = entry.get("source")
    if not isinstance(source, str):
        raise ManifestError(f"Plugin {entry.get('name')} has no source path", market_path)

    manifest_path = plugin_manifest_file((repo_path / source).resolve())
    manifest = read_json(manifest_path)

    old_version = manifest.get("version")
    manifest["version"] = new_version
    entry["version"] = new_version
    metadata = market.get("metadata")
    if isinstance(metadata, dict) and "version" in metadata:
        metadata["version"] = new_version

    _write_json(manifest_path, manifest)
    _write_json(market_path, market)
    logger.info(f"Bumped {entry.get('name')} from {old_version} to {new_version}")
    return [manifest_path, market_path]
