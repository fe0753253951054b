"""
The plugin content shipped in this repository must pass every check.

This is the same gate the release workflow runs.
"""

from pathlib import Path

import pytest

from rails_expert.core.checks import CHECKS, run_check
from rails_expert.core.hooks import match_hooks
from rails_expert.core.marketplace import discover_plugins

REPO_ROOT = Path(__file__).resolve().parents[2]


@pytest.mark.parametrize("name", list(CHECKS))
def test_check_passes(name):
    result = run_check(name, REPO_ROOT)
    assert result.findings == []


def test_plugin_is_indexed():
    plugins = discover_plugins(REPO_ROOT)
    assert [p.name for p in plugins] == ["rails-expert"]
    plugin = plugins[0]
    assert [a.name for a in plugin.agents] == ["rails-expert"]
    assert [c.invocation for c in plugin.commands] == ["/rails-team"]
    assert [s.name for s in plugin.skills] == ["dhh-philosophy"]


def test_migration_edit_fires_review_hook():
    plugin = discover_plugins(REPO_ROOT)[0]
    fired = match_hooks(plugin.hooks, "PreToolUse", "Edit", {"file_path": "db/migrate/20240101_add_users.rb"})
    assert len(fired) == 1
    assert match_hooks(plugin.hooks, "PreToolUse", "Edit", {"file_path": "README.md"}) == []
