"""
Hook configuration models.

Mirrors hooks/hooks.json:

    {"hooks": {"PreToolUse": [{"matcher": "Write|Edit",
                               "paths": ["db/migrate/*.rb"],
                               "hooks": [{"type": "prompt", "prompt": "..."}]}]}}
"""

from enum import Enum
from typing import Literal, Optional

from pydantic import BaseModel, Field


class HookEvent(str, Enum):
    """Host events a hook may attach to."""

    PRE_TOOL_USE = "PreToolUse"
    POST_TOOL_USE = "PostToolUse"
    USER_PROMPT_SUBMIT = "UserPromptSubmit"
    STOP = "Stop"
    SUBAGENT_STOP = "SubagentStop"
    SESSION_START = "SessionStart"
    SESSION_END = "SessionEnd"
    PRE_COMPACT = "PreCompact"
    NOTIFICATION = "Notification"


# Events whose payload names a tool, so the matcher applies
TOOL_EVENTS = {HookEvent.PRE_TOOL_USE, HookEvent.POST_TOOL_USE}

# Tools whose input carries a file_path
FILE_TOOLS = ("Write", "Edit", "MultiEdit", "NotebookEdit", "Read")


class HookHandler(BaseModel):
    """What the host runs when a matcher fires."""

    type: Literal["command", "prompt"]
    command: Optional[str] = None
    prompt: Optional[str] = None
    timeout: Optional[float] = None


class HookMatcher(BaseModel):
    """One trigger condition and its handlers."""

    matcher: str = ""
    paths: list[str] = Field(default_factory=list)
    commands: list[str] = Field(default_factory=list)
    hooks: list[HookHandler] = Field(default_factory=list)


class HooksConfig(BaseModel):
    """Contents of hooks/hooks.json."""

    description: str = ""
    hooks: dict[str, list[HookMatcher]] = Field(default_factory=dict)

    def for_event(self, event: str | HookEvent) -> list[HookMatcher]:
        key = event.value if isinstance(event, HookEvent) else event
        return self.hooks.get(key, [])
