"""
Agent definition loader.

Agents are markdown files with YAML frontmatter in the plugin's agents/
directory. The description doubles as trigger text and usually embeds
<example> blocks showing when the host should dispatch the agent.
"""

import logging
import re
from pathlib import Path
from typing import Optional

from rails_expert.core.documents import opt_str, parse_tool_list, try_load_document
from rails_expert.models.agent import AgentDefinition

logger = logging.getLogger(__name__)

EXAMPLE_RE = re.compile(r"<example>(.*?)</example>", re.DOTALL)


def extract_examples(description: Optional[str]) -> list[str]:
    """Pull the <example> blocks out of an agent description."""
    if not description:
        return []
    return [m.strip() for m in EXAMPLE_RE.findall(description) if m.strip()]


def load_agent(agent_file: Path, plugin_path: Path) -> Optional[AgentDefinition]:
    """
    Load an agent definition from a markdown file.

    Args:
        agent_file: Path to the agent markdown file
        plugin_path: Root of the plugin, used to record a relative path

    Returns:
        AgentDefinition or None if not found/invalid
    """
    if not agent_file.exists():
        logger.warning(f"Agent file not found: {agent_file}")
        return None

    doc = try_load_document(agent_file)
    if doc is None:
        return None

    data = doc.metadata
    description = opt_str(data.get("description"))

    agent = AgentDefinition(
        name=str(data.get("name") or agent_file.stem),
        description=description,
        model=opt_str(data.get("model")),
        color=opt_str(data.get("color")),
        tools=parse_tool_list(data.get("tools")),
        examples=extract_examples(description),
        system_prompt=doc.content.strip(),
        path=str(agent_file.relative_to(plugin_path)),
    )

    logger.debug(f"Loaded agent: {agent.name} from {agent.path}")
    return agent


def load_all_agents(plugin_path: Path) -> list[AgentDefinition]:
    """Load all agent definitions from a plugin, including nested folders."""
    agents_dir = plugin_path / "agents"

    if not agents_dir.is_dir():
        return []

    agents = []
    for agent_file in sorted(agents_dir.rglob("*.md")):
        agent = load_agent(agent_file, plugin_path)
        if agent:
            agents.append(agent)

    logger.debug(f"Loaded {len(agents)} agents from {agents_dir}")
    return agents
