"""
Glob matching for project-relative paths.

Used by hook `paths` triggers and the `excluded_paths` user setting.
"""

import fnmatch
import re


def _glob_to_regex(pattern: str) -> str:
    """Convert a glob with ** support to a regex."""
    regex_pattern = ""
    i = 0
    while i < len(pattern):
        if pattern[i : i + 3] == "**/":
            # **/ matches zero or more directories
            regex_pattern += "(?:.*/)?"
            i += 3
        elif pattern[i : i + 2] == "**":
            regex_pattern += ".*"
            i += 2
        elif pattern[i] == "*":
            # * stays within a path segment
            regex_pattern += "[^/]*"
            i += 1
        elif pattern[i] == "?":
            regex_pattern += "[^/]"
            i += 1
        else:
            regex_pattern += re.escape(pattern[i])
            i += 1
    return regex_pattern


def matches_pattern(path: str, pattern: str) -> bool:
    """Check if a path matches a glob pattern.

    `*` and `?` stay within one path segment and `**` crosses segments.
    Patterns without a slash match the basename.
    """
    path = path.replace("\\", "/")
    while path.startswith("./"):
        path = path[2:]
    if "/" in pattern or "**" in pattern:
        return bool(re.fullmatch(_glob_to_regex(pattern), path))
    return fnmatch.fnmatchcase(path.rsplit("/", 1)[-1], pattern)


def matches_patterns(path: str, patterns: list[str]) -> bool:
    """Check if a path matches any of the patterns."""
    if "*" in patterns:
        return True
    return any(matches_pattern(path, pattern) for pattern in patterns)
