"""
Per-project user settings.

End users drop .claude/rails-expert.local.md into their Rails project. The
YAML frontmatter sets options, the body holds free-form notes:

    ---
    enabled: true
    verbosity: detailed
    dhh_mode: false
    enabled_specialists: [active-record, hotwire]
    excluded_paths: ["vendor/**", "lib/legacy/**"]
    ---

    Team prefers RSpec over Minitest.

Precedence: RAILS_EXPERT_<FIELD> env vars > settings file > defaults.
"""

import json
import logging
import os
from pathlib import Path
from typing import Any, Optional

import yaml
from pydantic import ValidationError

from rails_expert.core.documents import load_document
from rails_expert.lib.path_patterns import matches_patterns
from rails_expert.lib.typed_errors import FindingCode
from rails_expert.models.findings import Finding
from rails_expert.models.settings import SPECIALISTS, UserSettings

logger = logging.getLogger(__name__)

SETTINGS_RELATIVE_PATH = Path(".claude") / "rails-expert.local.md"
ENV_PREFIX = "RAILS_EXPERT_"

_LIST_FIELDS = {"enabled_specialists", "excluded_paths"}


def settings_file(project_path: Path) -> Path:
    return project_path / SETTINGS_RELATIVE_PATH


def _env_overrides(environ: Optional[dict[str, str]] = None) -> dict[str, Any]:
    """Collect RAILS_EXPERT_* overrides. Lists are JSON or comma-separated."""
    environ = os.environ if environ is None else environ
    overrides: dict[str, Any] = {}
    for field_name in UserSettings.model_fields:
        if field_name == "notes":
            continue
        raw = environ.get(f"{ENV_PREFIX}{field_name.upper()}")
        if raw is None:
            continue
        if field_name in _LIST_FIELDS:
            raw = raw.strip()
            if raw.startswith("["):
                try:
                    overrides[field_name] = json.loads(raw)
                    continue
                except json.JSONDecodeError:
                    logger.warning(f"Ignoring malformed {ENV_PREFIX}{field_name.upper()}")
                    continue
            overrides[field_name] = [item.strip() for item in raw.split(",") if item.strip()]
        else:
            overrides[field_name] = raw
    return overrides


def _read_file_values(path: Path) -> tuple[dict[str, Any], str]:
    """Read frontmatter and notes from the settings file, if present."""
    if not path.exists():
        return {}, ""
    doc = load_document(path)
    values = {k.replace("-", "_"): v for k, v in doc.metadata.items()}
    return values, doc.content.strip()


def load_user_settings(
    project_path: Path,
    environ: Optional[dict[str, str]] = None,
) -> UserSettings:
    """Resolve the effective settings for a project.

    Never raises: a missing file yields defaults, and an unreadable or
    invalid file is logged and ignored.
    """
    path = settings_file(project_path)
    try:
        values, notes = _read_file_values(path)
    except (yaml.YAMLError, ValueError, OSError, UnicodeDecodeError) as e:
        logger.warning(f"Ignoring unreadable settings file {path}: {e}")
        values, notes = {}, ""

    known = {k: v for k, v in values.items() if k in UserSettings.model_fields and k != "notes"}
    merged = {**known, **_env_overrides(environ), "notes": notes}

    try:
        return UserSettings(**merged)
    except ValidationError as e:
        logger.warning(f"Invalid settings in {path}, using defaults: {e}")
        return UserSettings(notes=notes)


def check_user_settings(project_path: Path) -> list[Finding]:
    """Validate a settings file without applying env overrides."""
    path = settings_file(project_path)
    findings: list[Finding] = []
    try:
        values, _ = _read_file_values(path)
    except (yaml.YAMLError, ValueError, OSError, UnicodeDecodeError) as e:
        return [Finding(
            check="settings", code=FindingCode.FRONTMATTER_INVALID.value,
            path=str(path), message=f"Unreadable settings frontmatter: {e}",
        )]

    for key in sorted(set(values) - set(UserSettings.model_fields)):
        findings.append(Finding(
            check="settings", code=FindingCode.FRONTMATTER_BAD_VALUE.value,
            path=str(path), message=f"Unknown setting '{key}'",
        ))

    known = {k: v for k, v in values.items() if k in UserSettings.model_fields}
    try:
        UserSettings(**known)
    except ValidationError as e:
        for error in e.errors():
            field = ".".join(str(part) for part in error["loc"])
            findings.append(Finding(
                check="settings", code=FindingCode.FRONTMATTER_BAD_VALUE.value,
                path=str(path), message=f"{field}: {error['msg']}",
            ))

    specialists = known.get("enabled_specialists")
    for name in specialists if isinstance(specialists, list) else []:
        if name not in SPECIALISTS:
            findings.append(Finding(
                check="settings", code=FindingCode.FRONTMATTER_BAD_VALUE.value,
                path=str(path), message=f"Unknown specialist '{name}'",
            ))
    return findings


def is_path_excluded(settings: UserSettings, path: str) -> bool:
    """Whether the plugin should stay quiet for a project-relative path."""
    return matches_patterns(path, settings.excluded_paths)


def is_specialist_enabled(settings: UserSettings, name: str) -> bool:
    return settings.enabled and name in settings.enabled_specialists
