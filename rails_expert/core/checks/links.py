"""
Internal link check.

Every relative link in the repository's markdown must point at an existing
file, and every #fragment at a heading anchor in its target. External URLs
are left to the external link checker.
"""

import logging
import re
from pathlib import Path
from typing import Iterable, Optional
from urllib.parse import unquote

from rails_expert.core.checks.base import finding
from rails_expert.core.markdown import extract_links, heading_anchors, is_external
from rails_expert.lib.typed_errors import FindingCode
from rails_expert.models.findings import Finding

logger = logging.getLogger(__name__)

CHECK = "links"

EXCLUDED_DIRS = {
    ".git", ".venv", "venv", "node_modules", "__pycache__",
    ".pytest_cache", ".mypy_cache", "tmp",
}


def markdown_files(repo_path: Path) -> list[Path]:
    files = []
    for path in sorted(repo_path.rglob("*.md")):
        parts = path.relative_to(repo_path).parts
        if any(part in EXCLUDED_DIRS for part in parts[:-1]):
            continue
        files.append(path)
    return files


class _AnchorCache:
    def __init__(self):
        self._anchors: dict[Path, set[str]] = {}

    def get(self, path: Path) -> set[str]:
        if path not in self._anchors:
            try:
                self._anchors[path] = heading_anchors(path.read_text(encoding="utf-8"))
            except (OSError, UnicodeDecodeError) as e:
                logger.warning(f"Cannot read {path}: {e}")
                self._anchors[path] = set()
        return self._anchors[path]


def _has_anchor(anchors: set[str], fragment: str) -> bool:
    return fragment in anchors or fragment.lower() in anchors


def check_file_links(
    path: Path,
    repo_path: Path,
    ignore: Iterable[re.Pattern] = (),
    cache: Optional[_AnchorCache] = None,
) -> list[Finding]:
    """Check the links of one markdown file."""
    cache = cache or _AnchorCache()
    ignore = list(ignore)
    findings: list[Finding] = []
    text = path.read_text(encoding="utf-8")

    for link in extract_links(text):
        target = link.target
        if is_external(target) or any(p.search(target) for p in ignore):
            continue

        raw_path, _, fragment = target.partition("#")
        raw_path = unquote(raw_path.split("?", 1)[0])
        fragment = unquote(fragment)

        if not raw_path:
            if fragment and not _has_anchor(cache.get(path), fragment):
                findings.append(finding(CHECK, FindingCode.ANCHOR_MISSING, path, repo_path,
                                        f"No heading for anchor '#{fragment}'", line=link.line))
            continue

        if raw_path.startswith("/"):
            resolved = repo_path / raw_path.lstrip("/")
        else:
            resolved = path.parent / raw_path

        if not resolved.exists():
            findings.append(finding(CHECK, FindingCode.LINK_BROKEN, path, repo_path,
                                    f"Link target does not exist: {target}", line=link.line))
            continue

        if fragment and resolved.is_file() and resolved.suffix == ".md":
            if not _has_anchor(cache.get(resolved), fragment):
                findings.append(finding(CHECK, FindingCode.ANCHOR_MISSING, path, repo_path,
                                        f"No heading for anchor '#{fragment}' in {raw_path}",
                                        line=link.line))
    return findings


def check_links(repo_path: Path, ignore: Iterable[str] = ()) -> list[Finding]:
    patterns = [re.compile(p) for p in ignore]
    cache = _AnchorCache()
    findings: list[Finding] = []
    for path in markdown_files(repo_path):
        try:
            findings.extend(check_file_links(path, repo_path, patterns, cache))
        except (OSError, UnicodeDecodeError) as e:
            logger.warning(f"Cannot read {path}: {e}")
    return findings
