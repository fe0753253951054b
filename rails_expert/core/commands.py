"""
Slash command loader.

Each commands/*.md file becomes /<stem>. Files in subdirectories are
namespaced with a colon: commands/db/migrate.md -> /db:migrate.
"""

import logging
from pathlib import Path
from typing import Optional

from rails_expert.core.documents import opt_str, parse_tool_list, try_load_document
from rails_expert.models.command import CommandDefinition

logger = logging.getLogger(__name__)


def command_name(command_file: Path, commands_dir: Path) -> str:
    """Derive the invocation name from the file location."""
    relative = command_file.relative_to(commands_dir).with_suffix("")
    return ":".join(relative.parts)


def load_command(command_file: Path, plugin_path: Path) -> Optional[CommandDefinition]:
    """Load one slash command definition."""
    doc = try_load_document(command_file)
    if doc is None:
        return None

    data = doc.metadata
    hint = data.get("argument-hint", data.get("argument_hint"))
    return CommandDefinition(
        name=command_name(command_file, plugin_path / "commands"),
        description=opt_str(data.get("description")),
        argument_hint=opt_str(hint),
        allowed_tools=parse_tool_list(data.get("allowed-tools", data.get("allowed_tools"))),
        model=opt_str(data.get("model")),
        body=doc.content.strip(),
        path=str(command_file.relative_to(plugin_path)),
    )


def load_all_commands(plugin_path: Path) -> list[CommandDefinition]:
    """Load every slash command in a plugin."""
    commands_dir = plugin_path / "commands"
    if not commands_dir.is_dir():
        return []

    commands = []
    for command_file in sorted(commands_dir.rglob("*.md")):
        command = load_command(command_file, plugin_path)
        if command:
            commands.append(command)

    logger.debug(f"Loaded {len(commands)} commands from {commands_dir}")
    return commands
