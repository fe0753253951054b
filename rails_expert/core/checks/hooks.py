"""
Hook configuration check.
"""

import re
from pathlib import Path
from typing import Any

from rails_expert.core.checks.base import finding, plugin_dirs
from rails_expert.core.hooks import hooks_file, read_hooks_json
from rails_expert.lib.typed_errors import FindingCode, ManifestError
from rails_expert.models.hooks import HookEvent
from rails_expert.models.findings import Finding

CHECK = "hooks"

KNOWN_EVENTS = {e.value for e in HookEvent}
HANDLER_FIELDS = {"command": "command", "prompt": "prompt"}


def _compiles(pattern: str) -> str | None:
    try:
        re.compile(pattern)
    except re.error as e:
        return str(e)
    return None


def validate_hooks_data(data: dict[str, Any]) -> list[str]:
    """Problems with a parsed hooks.json, as messages."""
    problems: list[str] = []
    events = data.get("hooks")
    if not isinstance(events, dict):
        return ["Missing 'hooks' object"]

    for event, entries in events.items():
        if event not in KNOWN_EVENTS:
            problems.append(f"Unknown hook event '{event}'")
        if not isinstance(entries, list):
            problems.append(f"{event}: expected a list of matchers")
            continue

        for i, entry in enumerate(entries):
            where = f"{event}[{i}]"
            if not isinstance(entry, dict):
                problems.append(f"{where}: expected an object")
                continue

            matcher = entry.get("matcher", "")
            if not isinstance(matcher, str):
                problems.append(f"{where}: matcher must be a string")
            elif matcher and matcher != "*":
                error = _compiles(matcher)
                if error:
                    problems.append(f"{where}: matcher '{matcher}' is not a valid regex ({error})")

            for key in ("paths", "commands"):
                values = entry.get(key, [])
                if not isinstance(values, list) or not all(isinstance(v, str) for v in values):
                    problems.append(f"{where}: {key} must be a list of strings")
                    continue
                if key == "commands":
                    for pattern in values:
                        error = _compiles(pattern)
                        if error:
                            problems.append(f"{where}: command pattern '{pattern}' is not a valid regex ({error})")

            handlers = entry.get("hooks")
            if not isinstance(handlers, list) or not handlers:
                problems.append(f"{where}: needs a non-empty 'hooks' list")
                continue
            for j, handler in enumerate(handlers):
                problems.extend(_validate_handler(f"{where}.hooks[{j}]", handler))
    return problems


def _validate_handler(where: str, handler: Any) -> list[str]:
    if not isinstance(handler, dict):
        return [f"{where}: expected an object"]
    problems = []
    kind = handler.get("type")
    if kind not in HANDLER_FIELDS:
        problems.append(f"{where}: type must be 'command' or 'prompt'")
    else:
        field = HANDLER_FIELDS[kind]
        value = handler.get(field)
        if not isinstance(value, str) or not value.strip():
            problems.append(f"{where}: {kind} handler needs a non-empty '{field}'")
    timeout = handler.get("timeout")
    if timeout is not None and (
        isinstance(timeout, bool) or not isinstance(timeout, (int, float)) or timeout <= 0
    ):
        problems.append(f"{where}: timeout must be a positive number of seconds")
    return problems


def check_hooks(repo_path: Path) -> list[Finding]:
    findings: list[Finding] = []
    for plugin_path in plugin_dirs(repo_path):
        path = hooks_file(plugin_path)
        try:
            data = read_hooks_json(plugin_path)
        except ManifestError as e:
            findings.append(finding(CHECK, FindingCode.HOOKS_INVALID, path, repo_path, str(e)))
            continue
        if data is None:
            continue
        for problem in validate_hooks_data(data):
            findings.append(finding(CHECK, FindingCode.HOOKS_INVALID, path, repo_path, problem))
    return findings
