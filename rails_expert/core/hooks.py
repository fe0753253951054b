"""
Hook configuration loading and trigger matching.

hooks/hooks.json declares which host events should wake the plugin. The
host owns the real matching; match_hooks() reproduces it locally so that
authors can check which triggers a given tool call would fire:

- `matcher` is a regex tested against the tool name ("" or "*" match all)
- `paths` globs are tested against the edited file_path
- `commands` regexes are tested against a Bash command
"""

import json
import logging
import re
from pathlib import Path, PurePosixPath
from typing import Any, Optional

from pydantic import ValidationError

from rails_expert.lib.path_patterns import matches_patterns
from rails_expert.lib.typed_errors import ManifestError
from rails_expert.models.hooks import HookEvent, HookMatcher, HooksConfig, TOOL_EVENTS

logger = logging.getLogger(__name__)


def hooks_file(plugin_path: Path) -> Path:
    return plugin_path / "hooks" / "hooks.json"


def read_hooks_json(plugin_path: Path) -> Optional[dict[str, Any]]:
    """Read hooks.json as raw data. Returns None when the plugin has none."""
    path = hooks_file(plugin_path)
    if not path.exists():
        return None
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except (json.JSONDecodeError, OSError, UnicodeDecodeError) as e:
        raise ManifestError(f"Cannot read hooks file: {e}", path) from e
    if not isinstance(data, dict):
        raise ManifestError("Hooks file must contain a JSON object", path)
    return data


def load_hooks(plugin_path: Path) -> HooksConfig:
    """Load a plugin's hooks. A plugin without hooks.json has none."""
    data = read_hooks_json(plugin_path)
    if data is None:
        return HooksConfig()
    try:
        config = HooksConfig(**data)
    except (ValidationError, TypeError) as e:
        raise ManifestError(f"Hooks file does not match schema: {e}", hooks_file(plugin_path)) from e

    count = sum(len(m) for m in config.hooks.values())
    logger.debug(f"Loaded {count} hook matchers from {hooks_file(plugin_path)}")
    return config


def matcher_applies(matcher: str, tool_name: Optional[str]) -> bool:
    """Test a matcher against a tool name the way the host does."""
    if not matcher or matcher == "*":
        return True
    if tool_name is None:
        return False
    try:
        return re.fullmatch(matcher, tool_name) is not None
    except re.error as e:
        logger.warning(f"Invalid hook matcher {matcher!r}: {e}")
        return False


def _candidate_paths(file_path: str, project_root: Optional[Path] = None) -> list[str]:
    """Project-relative forms of a tool call's file_path.

    The host sends absolute paths. Inside project_root the path is made
    relative to it; otherwise every trailing sub-path is tried, so that
    `db/migrate/*.rb` matches `/home/dev/shop/db/migrate/1_add.rb`.
    """
    path = PurePosixPath(file_path.replace("\\", "/"))
    if not path.is_absolute():
        return [str(path)]
    if project_root is not None:
        try:
            return [path.relative_to(PurePosixPath(project_root.as_posix())).as_posix()]
        except ValueError:
            pass
    parts = path.parts[1:]
    return ["/".join(parts[i:]) for i in range(len(parts))]


def _conditions_apply(
    entry: HookMatcher,
    tool_input: dict[str, Any],
    project_root: Optional[Path] = None,
) -> bool:
    """Apply the plugin's path/command trigger conditions."""
    if not entry.paths and not entry.commands:
        return True

    file_path = tool_input.get("file_path") or tool_input.get("notebook_path")
    if entry.paths and file_path:
        for candidate in _candidate_paths(str(file_path), project_root):
            if matches_patterns(candidate, entry.paths):
                return True

    command = tool_input.get("command")
    if entry.commands and command:
        for pattern in entry.commands:
            try:
                if re.search(pattern, str(command)):
                    return True
            except re.error as e:
                logger.warning(f"Invalid hook command pattern {pattern!r}: {e}")
    return False


def match_hooks(
    config: HooksConfig,
    event: str | HookEvent,
    tool_name: Optional[str] = None,
    tool_input: Optional[dict[str, Any]] = None,
    project_root: Optional[Path] = None,
) -> list[HookMatcher]:
    """Return the matchers an event would fire, in declaration order.

    project_root anchors absolute file paths; without it they match by suffix.
    """
    event_str = event.value if isinstance(event, HookEvent) else event
    tool_input = tool_input or {}

    matched = []
    is_tool_event = event_str in {e.value for e in TOOL_EVENTS}
    for entry in config.for_event(event_str):
        if is_tool_event and not matcher_applies(entry.matcher, tool_name):
            continue
        if not _conditions_apply(entry, tool_input, project_root):
            continue
        matched.append(entry)
    return matched
