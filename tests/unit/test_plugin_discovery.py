"""
Tests for marketplace loading and plugin discovery.

Tests cover:
- Marketplace and plugin manifest parsing
- Resolving entry sources against the repo root
- Indexing agents, commands, skills and hooks
- Skipping broken plugins without failing discovery
"""

import json
import logging
from pathlib import Path

import pytest

from rails_expert.core.marketplace import (
    discover_plugins,
    find_plugin,
    load_marketplace,
    load_plugin_manifest,
    resolve_plugin_path,
)
from rails_expert.lib.typed_errors import ManifestError
from rails_expert.models.plugin import PluginManifest


class TestLoadMarketplace:
    def test_loads_entries(self, repo):
        marketplace = load_marketplace(repo)
        assert marketplace.name == "rails-expert-marketplace"
        assert [p.name for p in marketplace.plugins] == ["rails-expert"]
        assert marketplace.metadata.version == "0.3.0"
        assert marketplace.entry("rails-expert").source == "./plugins/rails-expert"
        assert marketplace.entry("missing") is None

    def test_missing_file_raises(self, tmp_path):
        with pytest.raises(ManifestError) as exc_info:
            load_marketplace(tmp_path)
        assert exc_info.value.path.endswith("marketplace.json")

    def test_invalid_json_raises(self, repo):
        (repo / ".claude-plugin" / "marketplace.json").write_text("{ not json")
        with pytest.raises(ManifestError):
            load_marketplace(repo)

    def test_non_object_raises(self, repo):
        (repo / ".claude-plugin" / "marketplace.json").write_text("[]")
        with pytest.raises(ManifestError):
            load_marketplace(repo)

    def test_schema_mismatch_raises(self, repo):
        (repo / ".claude-plugin" / "marketplace.json").write_text(
            json.dumps({"name": "m", "plugins": [{"description": "no name or source"}]})
        )
        with pytest.raises(ManifestError):
            load_marketplace(repo)


class TestPluginManifest:
    def test_loads_manifest(self, plugin_path):
        manifest = load_plugin_manifest(plugin_path)
        assert manifest.name == "rails-expert"
        assert manifest.version == "0.3.0"
        assert manifest.author_name == "Test Owner"

    def test_string_author(self):
        manifest = PluginManifest(name="x", author="Jane")
        assert manifest.author_name == "Jane"

    def test_defaults(self):
        manifest = PluginManifest()
        assert manifest.version == "0.0.0"
        assert manifest.author_name is None

    def test_resolve_plugin_path(self, repo):
        entry = load_marketplace(repo).plugins[0]
        assert resolve_plugin_path(repo, entry) == (repo / "plugins" / "rails-expert").resolve()


class TestDiscoverPlugins:
    def test_indexes_contents(self, repo):
        plugins = discover_plugins(repo)
        assert len(plugins) == 1

        plugin = plugins[0]
        assert plugin.name == "rails-expert"
        assert plugin.slug == "rails-expert"
        assert plugin.version == "0.3.0"
        assert {a.name for a in plugin.agents} == {"rails-expert", "active-record-specialist"}
        assert {c.invocation for c in plugin.commands} == {"/rails-team", "/db:review"}
        assert [s.name for s in plugin.skills] == ["active-record"]
        assert "PreToolUse" in plugin.hooks.hooks

    def test_summary(self, repo):
        summary = discover_plugins(repo)[0].summary()
        assert summary["name"] == "rails-expert"
        assert summary["hookEvents"] == ["PreToolUse"]
        assert "/rails-team" in summary["commands"]

    def test_skips_missing_source(self, repo, caplog):
        data = json.loads((repo / ".claude-plugin" / "marketplace.json").read_text())
        data["plugins"].append({"name": "ghost", "source": "./plugins/ghost"})
        (repo / ".claude-plugin" / "marketplace.json").write_text(json.dumps(data))

        with caplog.at_level(logging.WARNING):
            plugins = discover_plugins(repo)

        assert [p.name for p in plugins] == ["rails-expert"]
        assert "ghost" in caplog.text

    def test_skips_broken_manifest(self, repo, caplog):
        broken = repo / "plugins" / "broken"
        (broken / ".claude-plugin").mkdir(parents=True)
        (broken / ".claude-plugin" / "plugin.json").write_text("{ broken")
        data = json.loads((repo / ".claude-plugin" / "marketplace.json").read_text())
        data["plugins"].append({"name": "broken", "source": "./plugins/broken"})
        (repo / ".claude-plugin" / "marketplace.json").write_text(json.dumps(data))

        with caplog.at_level(logging.WARNING):
            plugins = discover_plugins(repo)

        assert [p.name for p in plugins] == ["rails-expert"]
        assert "Failed to load plugin broken" in caplog.text

    def test_deduplicates_paths(self, repo):
        data = json.loads((repo / ".claude-plugin" / "marketplace.json").read_text())
        data["plugins"].append({"name": "alias", "source": "plugins/rails-expert"})
        (repo / ".claude-plugin" / "marketplace.json").write_text(json.dumps(data))

        assert len(discover_plugins(repo)) == 1

    def test_plugin_without_optional_dirs(self, repo):
        bare = repo / "plugins" / "bare"
        (bare / ".claude-plugin").mkdir(parents=True)
        (bare / ".claude-plugin" / "plugin.json").write_text('{"name": "bare"}')
        data = json.loads((repo / ".claude-plugin" / "marketplace.json").read_text())
        data["plugins"].append({"name": "bare", "source": "./plugins/bare"})
        (repo / ".claude-plugin" / "marketplace.json").write_text(json.dumps(data))

        plugin = find_plugin(repo, "bare")
        assert plugin is not None
        assert plugin.agents == []
        assert plugin.commands == []
        assert plugin.skills == []
        assert plugin.hooks.hooks == {}

    def test_find_plugin(self, repo):
        assert find_plugin(repo, "rails-expert") is not None
        assert find_plugin(repo, "nope") is None
