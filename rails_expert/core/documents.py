"""
Markdown documents with YAML frontmatter.

Agents, commands, skills and the user settings file all share this format.
"""

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import frontmatter
import yaml

logger = logging.getLogger(__name__)


@dataclass
class Document:
    """Raw frontmatter metadata plus the markdown body."""

    path: Path
    metadata: dict[str, Any] = field(default_factory=dict)
    content: str = ""
    has_frontmatter: bool = False


def load_document(path: Path) -> Document:
    """Read a markdown file and split its frontmatter.

    Raises yaml.YAMLError when the frontmatter block is not valid YAML, and
    ValueError when it is valid YAML but not a mapping.
    """
    text = path.read_text(encoding="utf-8")
    post = frontmatter.loads(text)
    if not isinstance(post.metadata, dict):
        raise ValueError(f"Frontmatter in {path} is not a mapping")
    return Document(
        path=path,
        metadata=dict(post.metadata),
        content=post.content,
        has_frontmatter=text.lstrip("\ufeff").startswith("---"),
    )


def try_load_document(path: Path) -> Document | None:
    """Load a document, logging and returning None on any parse failure."""
    try:
        return load_document(path)
    except yaml.YAMLError as e:
        logger.error(f"Invalid YAML frontmatter in {path}: {e}")
    except (OSError, UnicodeDecodeError, ValueError) as e:
        logger.error(f"Error reading {path}: {e}")
    return None


def parse_tool_list(value: Any) -> list[str]:
    """Normalize a tool allowlist.

    Accepts "Read, Grep, Glob", ["Read", "Grep"], or a single tool name.
    Bash restrictions such as "Bash(git:*)" keep their parentheses intact.
    """
    if value is None:
        return []
    if isinstance(value, (list, tuple)):
        return [str(v).strip() for v in value if str(v).strip()]

    tools: list[str] = []
    current = ""
    depth = 0
    for ch in str(value):
        if ch == "(":
            depth += 1
        elif ch == ")":
            depth = max(depth - 1, 0)
        if ch == "," and depth == 0:
            if current.strip():
                tools.append(current.strip())
            current = ""
        else:
            current += ch
    if current.strip():
        tools.append(current.strip())
    return tools


def opt_str(value: Any) -> str | None:
    """Frontmatter scalar as a string, keeping None."""
    return None if value is None else str(value)
