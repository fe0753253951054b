"""
Pytest configuration and fixtures.

The `repo` fixture builds a small but complete marketplace tree that passes
every check; tests then break one thing at a time.
"""

import json
import logging
import os
from pathlib import Path

import pytest

from rails_expert.config import reset_settings
from rails_expert.lib import logger as log_setup

os.environ["LOG_LEVEL"] = "WARNING"

AGENT_MD = """---
name: rails-expert
description: |
  Lead Rails agent.

  <example>
  user: "Where should this callback live?"
  assistant: "Let me ask the rails-expert agent."
  </example>
model: inherit
color: red
tools: Read, Grep, Glob
---

# Rails Expert

Coordinate the specialists. See [routing](#dispatch).

## Dispatch

Pick the right specialist.
"""

SPECIALIST_MD = """---
name: active-record-specialist
description: Database and model questions
model: sonnet
color: blue
tools:
  - Read
  - Grep
---

Answer Active Record questions.
"""

COMMAND_MD = """---
description: Ask the Rails team
argument-hint: "<question>"
allowed-tools: Read, Grep, Task
---

Consult the team about $ARGUMENTS.
"""

DB_COMMAND_MD = """---
description: Review migrations
argument-hint: "[migrations|schema]"
allowed-tools: Read, Bash(bin/rails db:*)
---

Review $ARGUMENTS.
"""

SKILL_MD = """---
name: active-record
description: Models, associations and migrations
version: 1.0.0
---

# Active Record

## Associations

Current branch: [BANG]`git branch --show-current`

See [the reference](references/callbacks.md#when-to-use-callbacks).
"""

REFERENCE_MD = """# Callbacks

## When to use callbacks

Sparingly.
"""

HOOKS = {
    "description": "Rails review triggers",
    "hooks": {
        "PreToolUse": [
            {
                "matcher": "Write|Edit",
                "paths": ["db/migrate/*.rb", "app/**/*.rb"],
                "hooks": [{"type": "prompt", "prompt": "Review the Rails change.", "timeout": 30}],
            },
            {
                "matcher": "Bash",
                "commands": ["^(bin/)?rails db:"],
                "hooks": [{"type": "command", "command": "echo db task"}],
            },
        ]
    },
}


def write_json(path: Path, data: dict) -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(data, indent=2) + "\n")
    return path


def write_text(path: Path, text: str) -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(text)
    return path


def make_repo(root: Path, version: str = "0.3.0", market_version: str | None = None) -> Path:
    """Create a marketplace repository with one valid plugin."""
    market_version = version if market_version is None else market_version
    write_json(root / ".claude-plugin" / "marketplace.json", {
        "name": "rails-expert-marketplace",
        "owner": {"name": "Test Owner"},
        "metadata": {"description": "Test marketplace", "version": market_version},
        "plugins": [{
            "name": "rails-expert",
            "source": "./plugins/rails-expert",
            "description": "Rails specialists",
            "version": market_version,
        }],
    })

    plugin = root / "plugins" / "rails-expert"
    write_json(plugin / ".claude-plugin" / "plugin.json", {
        "name": "rails-expert",
        "version": version,
        "description": "Rails specialists",
        "author": {"name": "Test Owner"},
    })
    write_text(plugin / "agents" / "rails-expert.md", AGENT_MD)
    write_text(plugin / "agents" / "specialists" / "active-record-specialist.md", SPECIALIST_MD)
    write_text(plugin / "commands" / "rails-team.md", COMMAND_MD)
    write_text(plugin / "commands" / "db" / "review.md", DB_COMMAND_MD)
    write_text(plugin / "skills" / "active-record" / "SKILL.md", SKILL_MD)
    write_text(plugin / "skills" / "active-record" / "references" / "callbacks.md", REFERENCE_MD)
    write_text(plugin / "skills" / "active-record" / "examples" / "user.rb", "class User < ApplicationRecord\nend\n")
    write_text(plugin / "skills" / "active-record" / "examples" / "form.html.erb", "<%= form_with model: @user %>\n")
    write_json(plugin / "hooks" / "hooks.json", HOOKS)
    write_text(root / "README.md", "# Marketplace\n\nSee [the plugin agent](plugins/rails-expert/agents/rails-expert.md#dispatch).\n")
    return root


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch):
    """Keep the developer's environment and cached settings out of each test."""
    for key in list(os.environ):
        if key.startswith("RAILS_EXPERT_") or key in ("REPO_PATH", "HOST", "PORT", "SKIP_CHECKS", "LINK_IGNORE"):
            monkeypatch.delenv(key, raising=False)
    yield
    reset_settings()
    # CLI runs bind console handlers to the captured stderr of that test
    for handler in log_setup._handlers:
        logging.getLogger().removeHandler(handler)
    log_setup._handlers.clear()


@pytest.fixture
def repo(tmp_path: Path) -> Path:
    """A fresh, fully valid marketplace repository."""
    return make_repo(tmp_path / "repo")


@pytest.fixture
def plugin_path(repo: Path) -> Path:
    return repo / "plugins" / "rails-expert"
