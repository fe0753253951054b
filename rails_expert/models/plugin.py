"""
Plugin and marketplace models.

Plugins follow the host's plugin format:
  .claude-plugin/marketplace.json        marketplace manifest (repo root)
  {plugin}/.claude-plugin/plugin.json    plugin manifest
  {plugin}/agents/                       agent definitions
  {plugin}/commands/                     slash commands
  {plugin}/skills/                       skill directories (SKILL.md)
  {plugin}/hooks/hooks.json              hook triggers
"""

from typing import Optional, Union

from pydantic import BaseModel, Field

from rails_expert.models.agent import AgentDefinition
from rails_expert.models.command import CommandDefinition
from rails_expert.models.hooks import HooksConfig
from rails_expert.models.skill import SkillInfo


class PluginAuthor(BaseModel):
    """Structured author block used by both manifests."""

    name: str = ""
    email: Optional[str] = None
    url: Optional[str] = None


class PluginManifest(BaseModel):
    """Contents of .claude-plugin/plugin.json."""

    name: str = ""
    version: str = "0.0.0"
    description: str = ""
    author: Optional[Union[str, PluginAuthor]] = None
    homepage: Optional[str] = None
    repository: Optional[str] = None
    license: Optional[str] = None
    keywords: list[str] = Field(default_factory=list)

    @property
    def author_name(self) -> Optional[str]:
        if isinstance(self.author, PluginAuthor):
            return self.author.name or None
        return self.author


class MarketplaceEntry(BaseModel):
    """A plugin listed in the marketplace manifest."""

    name: str
    source: str
    description: str = ""
    version: Optional[str] = None
    keywords: list[str] = Field(default_factory=list)
    category: Optional[str] = None
    author: Optional[Union[str, PluginAuthor]] = None


class MarketplaceMetadata(BaseModel):
    description: str = ""
    version: Optional[str] = None


class MarketplaceManifest(BaseModel):
    """Contents of .claude-plugin/marketplace.json."""

    name: str = ""
    owner: Optional[PluginAuthor] = None
    metadata: MarketplaceMetadata = Field(default_factory=MarketplaceMetadata)
    plugins: list[MarketplaceEntry] = Field(default_factory=list)

    def entry(self, name: str) -> Optional[MarketplaceEntry]:
        for plugin in self.plugins:
            if plugin.name == name:
                return plugin
        return None


class LoadedPlugin(BaseModel):
    """A marketplace plugin resolved on disk, with indexed contents."""

    name: str  # From plugin.json
    slug: str  # Directory name
    version: str = "0.0.0"
    description: str = ""
    author: Optional[str] = None
    path: str  # Absolute path on disk
    manifest: PluginManifest
    agents: list[AgentDefinition] = Field(default_factory=list)
    commands: list[CommandDefinition] = Field(default_factory=list)
    skills: list[SkillInfo] = Field(default_factory=list)
    hooks: HooksConfig = Field(default_factory=HooksConfig)

    def summary(self) -> dict:
        """Compact listing used by the CLI and the catalog API."""
        return {
            "name": self.name,
            "slug": self.slug,
            "version": self.version,
            "description": self.description,
            "author": self.author,
            "path": self.path,
            "agents": [a.name for a in self.agents],
            "commands": [c.invocation for c in self.commands],
            "skills": [s.name for s in self.skills],
            "hookEvents": sorted(self.hooks.hooks.keys()),
        }
