"""
Typed errors for content checks.

Every finding carries a FindingCode; the definitions below map each code to
a user-facing title and the remedy to print next to it.
"""

from enum import Enum
from pathlib import Path
from typing import Any, Optional, Union

from pydantic import BaseModel, Field


class ManifestError(Exception):
    """A manifest or hook file could not be read or does not match its schema."""

    def __init__(self, message: str, path: Optional[Union[str, Path]] = None):
        super().__init__(message)
        self.path = str(path) if path is not None else None


class FindingCode(str, Enum):
    """Finding codes for programmatic handling."""

    # Frontmatter
    FRONTMATTER_INVALID = "frontmatter_invalid"
    FRONTMATTER_MISSING_KEY = "frontmatter_missing_key"
    FRONTMATTER_BAD_VALUE = "frontmatter_bad_value"

    # Versions
    VERSION_MISMATCH = "version_mismatch"
    VERSION_INVALID = "version_invalid"

    # Shell-trigger audit
    BANG_PATTERN = "bang_pattern"

    # Links
    LINK_BROKEN = "link_broken"
    ANCHOR_MISSING = "anchor_missing"

    # Hooks
    HOOKS_INVALID = "hooks_invalid"

    # Manifests
    MANIFEST_INVALID = "manifest_invalid"
    MANIFEST_MISMATCH = "manifest_mismatch"


class TypedFinding(BaseModel):
    """User-facing information about a finding code."""

    code: FindingCode
    title: str
    remedy: str
    details: list[str] = Field(default_factory=list)


_RERUN = "Fix the file, recommit, and rerun the checks."

FINDING_DEFINITIONS: dict[FindingCode, dict[str, Any]] = {
    FindingCode.FRONTMATTER_INVALID: {
        "title": "Unreadable Frontmatter",
        "remedy": f"Make the YAML block between the '---' lines valid. {_RERUN}",
    },
    FindingCode.FRONTMATTER_MISSING_KEY: {
        "title": "Missing Frontmatter Key",
        "remedy": f"Add the required key with a non-empty value. {_RERUN}",
    },
    FindingCode.FRONTMATTER_BAD_VALUE: {
        "title": "Unsupported Frontmatter Value",
        "remedy": f"Use one of the values the host accepts. {_RERUN}",
    },
    FindingCode.VERSION_MISMATCH: {
        "title": "Version Mismatch",
        "remedy": f"Run 'rails-expert version bump X.Y.Z' to write both manifests. {_RERUN}",
    },
    FindingCode.VERSION_INVALID: {
        "title": "Invalid Version",
        "remedy": f"Use MAJOR.MINOR.PATCH, optionally with a pre-release suffix. {_RERUN}",
    },
    FindingCode.BANG_PATTERN: {
        "title": "Shell Trigger In Skill",
        "remedy": f"Write [BANG] instead of '!' before the backtick. {_RERUN}",
    },
    FindingCode.LINK_BROKEN: {
        "title": "Broken Link",
        "remedy": f"Point the link at an existing file. {_RERUN}",
    },
    FindingCode.ANCHOR_MISSING: {
        "title": "Missing Anchor",
        "remedy": f"Point the link at an existing heading. {_RERUN}",
    },
    FindingCode.HOOKS_INVALID: {
        "title": "Invalid Hook Configuration",
        "remedy": f"Correct hooks/hooks.json. {_RERUN}",
    },
    FindingCode.MANIFEST_INVALID: {
        "title": "Invalid Manifest",
        "remedy": f"Correct the manifest JSON. {_RERUN}",
    },
    FindingCode.MANIFEST_MISMATCH: {
        "title": "Manifest Mismatch",
        "remedy": f"Make the marketplace entry agree with the plugin manifest. {_RERUN}",
    },
}


def describe(code: Union[FindingCode, str], details: Optional[list[str]] = None) -> TypedFinding:
    """Return the title and remedy for a finding code."""
    code = FindingCode(code)
    definition = FINDING_DEFINITIONS[code]
    return TypedFinding(
        code=code,
        title=definition["title"],
        remedy=definition["remedy"],
        details=details or [],
    )
