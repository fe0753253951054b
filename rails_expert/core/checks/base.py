"""
Shared helpers for content checks.
"""

import logging
from pathlib import Path
from typing import Optional

from rails_expert.core.marketplace import load_marketplace, resolve_plugin_path
from rails_expert.lib.typed_errors import FindingCode
from rails_expert.models.findings import Finding

logger = logging.getLogger(__name__)


def relative(path: Path, repo_path: Path) -> str:
    """Repo-relative path for reporting; absolute when outside the repo."""
    try:
        return path.resolve().relative_to(repo_path.resolve()).as_posix()
    except ValueError:
        return str(path)


def plugin_dirs(repo_path: Path) -> list[Path]:
    """Existing plugin directories listed in the marketplace."""
    marketplace = load_marketplace(repo_path)
    dirs = []
    for entry in marketplace.plugins:
        path = resolve_plugin_path(repo_path, entry)
        if path.is_dir():
            dirs.append(path)
        else:
            logger.debug(f"Skipping missing plugin source: {path}")
    return dirs


def finding(
    check: str,
    code: FindingCode,
    path: Path,
    repo_path: Path,
    message: str,
    line: Optional[int] = None,
) -> Finding:
    return Finding(
        check=check,
        code=code.value,
        path=relative(path, repo_path),
        line=line,
        message=message,
    )
