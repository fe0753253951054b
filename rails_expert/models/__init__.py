"""
Pydantic models for the Rails Expert content tree.
"""

from rails_expert.models.agent import AgentDefinition
from rails_expert.models.command import CommandDefinition
from rails_expert.models.findings import CheckReport, CheckResult, Finding
from rails_expert.models.hooks import HookEvent, HookHandler, HookMatcher, HooksConfig
from rails_expert.models.plugin import (
    LoadedPlugin,
    MarketplaceEntry,
    MarketplaceManifest,
    PluginManifest,
)
from rails_expert.models.settings import UserSettings
from rails_expert.models.skill import SkillExample, SkillInfo

__all__ = [
    # Manifests
    "MarketplaceManifest",
    "MarketplaceEntry",
    "PluginManifest",
    "LoadedPlugin",
    # Documents
    "AgentDefinition",
    "CommandDefinition",
    "SkillInfo",
    "SkillExample",
    # Hooks
    "HookEvent",
    "HookHandler",
    "HookMatcher",
    "HooksConfig",
    # Settings
    "UserSettings",
    # Checks
    "Finding",
    "CheckResult",
    "CheckReport",
]
