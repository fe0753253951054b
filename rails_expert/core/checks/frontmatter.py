"""
Frontmatter presence check.

Agents need name and description, skills need name and description, and
commands need description and allowed-tools. Agent model and color hints
must be values the host understands.
"""

from pathlib import Path
from typing import Any

import yaml

from rails_expert.core.checks.base import finding, plugin_dirs
from rails_expert.core.documents import load_document
from rails_expert.core.skills import find_skill_file
from rails_expert.lib.typed_errors import FindingCode
from rails_expert.models.agent import AGENT_COLORS, AGENT_MODELS
from rails_expert.models.findings import Finding

CHECK = "frontmatter"

REQUIRED_KEYS = {
    "agent": ("name", "description"),
    "command": ("description", "allowed-tools"),
    "skill": ("name", "description"),
}

# Snake-case spellings some authors use
KEY_ALIASES = {"allowed-tools": "allowed_tools"}


def is_blank(value: Any) -> bool:
    if value is None:
        return True
    if isinstance(value, str):
        return not value.strip()
    if isinstance(value, (list, tuple, dict)):
        return len(value) == 0
    return False


def missing_keys(metadata: dict[str, Any], kind: str) -> list[str]:
    """Required keys that are absent or empty for a document kind."""
    missing = []
    for key in REQUIRED_KEYS[kind]:
        value = metadata.get(key)
        if value is None and key in KEY_ALIASES:
            value = metadata.get(KEY_ALIASES[key])
        if is_blank(value):
            missing.append(key)
    return missing


def _documents(plugin_path: Path) -> list[tuple[str, Path]]:
    docs: list[tuple[str, Path]] = []
    agents_dir = plugin_path / "agents"
    if agents_dir.is_dir():
        docs += [("agent", p) for p in sorted(agents_dir.rglob("*.md"))]
    commands_dir = plugin_path / "commands"
    if commands_dir.is_dir():
        docs += [("command", p) for p in sorted(commands_dir.rglob("*.md"))]
    skills_dir = plugin_path / "skills"
    if skills_dir.is_dir():
        for item in sorted(skills_dir.iterdir()):
            if item.is_file() and item.suffix == ".md":
                docs.append(("skill", item))
            elif item.is_dir():
                skill_file = find_skill_file(item)
                if skill_file:
                    docs.append(("skill", skill_file))
    return docs


def check_document(kind: str, path: Path, repo_path: Path) -> list[Finding]:
    """Check one agent, command, or skill file."""
    try:
        doc = load_document(path)
    except (yaml.YAMLError, ValueError, OSError, UnicodeDecodeError) as e:
        return [finding(CHECK, FindingCode.FRONTMATTER_INVALID, path, repo_path,
                        f"Unreadable frontmatter: {e}")]

    if not doc.has_frontmatter:
        return [finding(CHECK, FindingCode.FRONTMATTER_INVALID, path, repo_path,
                        f"{kind.capitalize()} file has no frontmatter block")]

    findings = [
        finding(CHECK, FindingCode.FRONTMATTER_MISSING_KEY, path, repo_path,
                f"{kind.capitalize()} is missing required key '{key}'")
        for key in missing_keys(doc.metadata, kind)
    ]

    if kind == "agent":
        model = doc.metadata.get("model")
        if model is not None and model not in AGENT_MODELS:
            findings.append(finding(
                CHECK, FindingCode.FRONTMATTER_BAD_VALUE, path, repo_path,
                f"Unknown model '{model}' (expected one of {', '.join(AGENT_MODELS)})",
            ))
        color = doc.metadata.get("color")
        if color is not None and color not in AGENT_COLORS:
            findings.append(finding(
                CHECK, FindingCode.FRONTMATTER_BAD_VALUE, path, repo_path,
                f"Unknown color '{color}' (expected one of {', '.join(AGENT_COLORS)})",
            ))
    return findings


def check_frontmatter(repo_path: Path) -> list[Finding]:
    findings: list[Finding] = []
    for plugin_path in plugin_dirs(repo_path):
        for kind, path in _documents(plugin_path):
            findings.extend(check_document(kind, path, repo_path))
    return findings
