"""
Slash command models.
"""

from typing import Optional

from pydantic import BaseModel, Field


class CommandDefinition(BaseModel):
    """A slash command read from commands/*.md."""

    name: str  # File stem, namespaced by subdirectory ("db:migrate")
    description: Optional[str] = None
    argument_hint: Optional[str] = Field(alias="argumentHint", default=None)
    allowed_tools: list[str] = Field(alias="allowedTools", default_factory=list)
    model: Optional[str] = None
    body: str = ""
    path: Optional[str] = None

    model_config = {"populate_by_name": True}

    @property
    def invocation(self) -> str:
        return f"/{self.name}"
