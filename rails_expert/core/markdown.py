"""
Markdown scanning helpers: code-fence tracking, heading anchors, links.
"""

import re
from dataclasses import dataclass
from typing import Iterator

FENCE_RE = re.compile(r"^\s{0,3}(`{3,}|~{3,})")
HEADING_RE = re.compile(r"^\s{0,3}(#{1,6})\s+(.*?)\s*#*\s*$")
SETEXT_RE = re.compile(r"^\s{0,3}(=+|-+)\s*$")
INLINE_CODE_RE = re.compile(r"(`+)(.+?)\1")
HTML_ANCHOR_RE = re.compile(r"<a\s+[^>]*(?:name|id)=[\"']([^\"']+)[\"']", re.IGNORECASE)
INLINE_LINK_RE = re.compile(
    r"!?\[(?:[^\[\]]|\[[^\]]*\])*\]\(\s*<?([^)\s>]+)>?(?:\s+[\"'(][^)]*[\"')])?\s*\)"
)
REFERENCE_DEF_RE = re.compile(r"^\s{0,3}\[[^\]]+\]:\s*<?(\S+?)>?(?:\s+.*)?$")
EXTERNAL_RE = re.compile(r"^[a-zA-Z][a-zA-Z0-9+.-]*:")


@dataclass
class Link:
    line: int
    target: str


def iter_prose_lines(text: str) -> Iterator[tuple[int, str]]:
    """Yield (1-based line number, line) for lines outside fenced code blocks."""
    fence: str | None = None
    for number, line in enumerate(text.splitlines(), start=1):
        match = FENCE_RE.match(line)
        if match:
            marker = match.group(1)
            if fence is None:
                fence = marker
                continue
            # Closing fences take no info string
            if (
                marker[0] == fence[0]
                and len(marker) >= len(fence)
                and not line[match.end():].strip()
            ):
                fence = None
                continue
        if fence is None:
            yield number, line


def frontmatter_end(text: str) -> int:
    """Line number of the closing `---` of a leading YAML block, or 0."""
    lines = text.lstrip("\ufeff").splitlines()
    if not lines or lines[0].rstrip() != "---":
        return 0
    for number, line in enumerate(lines[1:], start=2):
        if line.rstrip() in ("---", "..."):
            return number
    return 0


def strip_inline_code(line: str) -> str:
    return INLINE_CODE_RE.sub("", line)


def github_slug(heading: str) -> str:
    """Anchor GitHub generates for a heading text."""
    text = re.sub(r"\[([^\]]*)\]\([^)]*\)", r"\1", heading)  # [text](url) -> text
    text = re.sub(r"<[^>]+>", "", text)
    text = text.replace("`", "").lower()
    text = re.sub(r"[^\w\- ]", "", text)
    return text.replace(" ", "-")


def heading_anchors(text: str) -> set[str]:
    """All anchors a markdown document exposes, with -N suffixes for duplicates."""
    anchors: set[str] = set()
    counts: dict[str, int] = {}
    previous = ""
    body_start = frontmatter_end(text)

    def add(heading: str) -> None:
        slug = github_slug(heading)
        if slug in counts:
            counts[slug] += 1
            anchors.add(f"{slug}-{counts[slug]}")
        else:
            counts[slug] = 0
            anchors.add(slug)

    for number, line in iter_prose_lines(text):
        if number <= body_start:
            continue
        match = HEADING_RE.match(line)
        if match:
            add(match.group(2))
        elif previous.strip() and SETEXT_RE.match(line) and not HEADING_RE.match(previous):
            add(previous.strip())
        for anchor in HTML_ANCHOR_RE.findall(line):
            anchors.add(anchor)
        previous = line
    return anchors


def extract_links(text: str) -> list[Link]:
    """Inline links, images and reference definitions outside code."""
    links: list[Link] = []
    for number, line in iter_prose_lines(text):
        prose = strip_inline_code(line)
        for target in INLINE_LINK_RE.findall(prose):
            links.append(Link(line=number, target=target))
        match = REFERENCE_DEF_RE.match(prose)
        if match:
            links.append(Link(line=number, target=match.group(1)))
    return links


def is_external(target: str) -> bool:
    return EXTERNAL_RE.match(target) is not None
