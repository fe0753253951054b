"""
Agent definition models.

Agents are defined in markdown files with YAML frontmatter. The body is the
persona prompt; the description carries the trigger text and <example> blocks.
"""

from typing import Optional

from pydantic import BaseModel, Field

# Model hints the host understands
AGENT_MODELS = ("inherit", "sonnet", "opus", "haiku")

# Colors the host can render for an agent badge
AGENT_COLORS = ("red", "blue", "green", "yellow", "purple", "orange", "pink", "cyan")


class AgentDefinition(BaseModel):
    """Complete agent definition."""

    name: str
    description: Optional[str] = None
    model: Optional[str] = None
    color: Optional[str] = None
    tools: list[str] = Field(default_factory=list)
    examples: list[str] = Field(
        default_factory=list,
        description="<example> blocks extracted from the description",
    )
    system_prompt: str = Field(
        alias="systemPrompt",
        default="",
        description="Persona prompt from markdown body",
    )
    path: Optional[str] = Field(default=None, description="Path to agent file")

    model_config = {"populate_by_name": True}
