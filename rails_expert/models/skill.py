"""
Skill models.

A skill is a directory holding SKILL.md plus optional examples/ and
references/ folders.
"""

from pathlib import Path
from typing import Any, Optional

from pydantic import BaseModel, Field

# Example file extension -> language label
EXAMPLE_LANGUAGES = {
    ".rb": "ruby",
    ".erb": "erb",
    ".js": "javascript",
    ".ts": "typescript",
    ".sh": "shell",
    ".yml": "yaml",
    ".yaml": "yaml",
    ".md": "markdown",
}


class SkillExample(BaseModel):
    """An example file shipped alongside a skill."""

    name: str
    path: str
    language: str = "text"

    @classmethod
    def from_path(cls, path: Path) -> "SkillExample":
        language = EXAMPLE_LANGUAGES.get(path.suffix.lower(), "text")
        # app/views/foo.html.erb style names
        if path.name.endswith(".html.erb"):
            language = "erb"
        return cls(name=path.name, path=str(path), language=language)


class SkillInfo(BaseModel):
    """Information about a discovered skill."""

    name: str
    description: str = ""
    version: Optional[str] = None
    path: str
    examples: list[SkillExample] = Field(default_factory=list)
    references: list[str] = Field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        return {
            "name": self.name,
            "description": self.description,
            "version": self.version,
            "path": self.path,
            "examples": [e.model_dump() for e in self.examples],
            "references": self.references,
        }
