"""
User settings model.

End users create .claude/rails-expert.local.md in their Rails project; its
YAML frontmatter overrides the defaults below.
"""

from enum import Enum

from pydantic import BaseModel, Field

# Specialists the coordinator can consult
SPECIALISTS = [
    "routing-controllers",
    "active-record",
    "hotwire",
    "action-cable",
    "testing",
    "performance",
    "security",
    "deployment",
]

DEFAULT_EXCLUDED_PATHS = ["vendor/**", "node_modules/**", "tmp/**", "log/**"]


class Verbosity(str, Enum):
    MINIMAL = "minimal"
    NORMAL = "normal"
    DETAILED = "detailed"


class UserSettings(BaseModel):
    """Effective settings for one project."""

    enabled: bool = True
    verbosity: Verbosity = Verbosity.NORMAL
    dhh_mode: bool = True
    auto_trigger: bool = True
    enabled_specialists: list[str] = Field(default_factory=lambda: list(SPECIALISTS))
    excluded_paths: list[str] = Field(default_factory=lambda: list(DEFAULT_EXCLUDED_PATHS))
    debate_rounds: int = Field(default=2, ge=1, le=5)
    notes: str = Field(default="", description="Markdown body of the settings file")

    model_config = {"use_enum_values": True, "validate_default": True}
