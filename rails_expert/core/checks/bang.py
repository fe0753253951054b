"""
Shell-trigger audit for skill documents.

The host's markdown loader treats an exclamation mark directly followed by a
backtick as a request to run the quoted shell command. Skills write
[BANG] in its place; any remaining occurrence is a finding. Code fences are
not exempt because the loader does not honor them.
"""

import logging
import re
from pathlib import Path

from rails_expert.core.checks.base import finding
from rails_expert.lib.typed_errors import FindingCode
from rails_expert.models.findings import Finding

logger = logging.getLogger(__name__)

CHECK = "bang"

BANG_RE = re.compile(r"!`")
BANG_PLACEHOLDER = "[BANG]"


def audit_text(text: str) -> list[int]:
    """1-based numbers of lines containing the shell-trigger pattern."""
    return [n for n, line in enumerate(text.splitlines(), start=1) if BANG_RE.search(line)]


def skill_documents(repo_path: Path) -> list[Path]:
    """Markdown files matching plugins/**/skills/**/*.md."""
    plugins_dir = repo_path / "plugins"
    if not plugins_dir.is_dir():
        return []
    return [
        path for path in sorted(plugins_dir.rglob("*.md"))
        if "skills" in path.relative_to(plugins_dir).parts[:-1]
    ]


def check_bang(repo_path: Path) -> list[Finding]:
    findings: list[Finding] = []
    for path in skill_documents(repo_path):
        try:
            text = path.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as e:
            logger.warning(f"Cannot read {path}: {e}")
            continue
        for line in audit_text(text):
            findings.append(finding(
                CHECK, FindingCode.BANG_PATTERN, path, repo_path,
                f"Shell-trigger pattern '!`' found; write {BANG_PLACEHOLDER}` instead",
                line=line,
            ))
    return findings
