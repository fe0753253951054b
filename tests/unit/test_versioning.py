"""
Tests for version parsing, bumping, and writing both manifests.
"""

import json

import pytest

from rails_expert.core.versioning import bump_version, is_semver, next_version
from rails_expert.lib.typed_errors import ManifestError

from tests.conftest import write_json


def read(path):
    return json.loads(path.read_text())


class TestSemver:
    @pytest.mark.parametrize("version", ["0.3.0", "1.0.0-rc.1", "2.10.3+build.7", "10.0.0-beta"])
    def test_valid(self, version):
        assert is_semver(version)

    @pytest.mark.parametrize("version", ["0.3", "v1.0.0", "01.0.0", "1.0.0-", "", None, 3])
    def test_invalid(self, version):
        assert not is_semver(version)


class TestNextVersion:
    def test_parts(self):
        assert next_version("0.3.0", "patch") == "0.3.1"
        assert next_version("0.3.7", "minor") == "0.4.0"
        assert next_version("0.3.7", "major") == "1.0.0"

    def test_prerelease_patch_releases_it(self):
        assert next_version("1.2.3-rc.1", "patch") == "1.2.3"

    def test_rejects_bad_input(self):
        with pytest.raises(ValueError):
            next_version("banana", "patch")
        with pytest.raises(ValueError):
            next_version("1.0.0", "micro")


class TestBumpVersion:
    def test_writes_both_manifests(self, repo, plugin_path):
        written = bump_version(repo, "0.4.0")

        manifest = read(plugin_path / ".claude-plugin" / "plugin.json")
        market = read(repo / ".claude-plugin" / "marketplace.json")
        assert manifest["version"] == "0.4.0"
        assert market["plugins"][0]["version"] == "0.4.0"
        assert market["metadata"]["version"] == "0.4.0"
        assert len(written) == 2

    def test_preserves_key_order_and_indent(self, repo):
        path = repo / ".claude-plugin" / "marketplace.json"
        keys_before = list(read(path))
        bump_version(repo, "0.3.1")
        text = path.read_text()
        assert list(json.loads(text)) == keys_before
        assert text.startswith('{\n  "name"')
        assert text.endswith("}\n")

    def test_leaves_absent_metadata_version(self, repo):
        path = repo / ".claude-plugin" / "marketplace.json"
        data = read(path)
        del data["metadata"]["version"]
        write_json(path, data)

        bump_version(repo, "0.5.0")
        assert "version" not in read(path)["metadata"]

    def test_rejects_non_semver(self, repo):
        with pytest.raises(ValueError):
            bump_version(repo, "next")

    def test_unknown_plugin(self, repo):
        with pytest.raises(ValueError):
            bump_version(repo, "1.0.0", plugin="other")

    def test_several_plugins_need_a_name(self, repo):
        path = repo / ".claude-plugin" / "marketplace.json"
        data = read(path)
        data["plugins"].append({"name": "second", "source": "./plugins/second"})
        write_json(path, data)

        with pytest.raises(ValueError):
            bump_version(repo, "1.0.0")
        bump_version(repo, "1.0.0", plugin="rails-expert")
        assert read(path)["plugins"][0]["version"] == "1.0.0"

    def test_missing_plugin_manifest(self, repo, plugin_path):
        (plugin_path / ".claude-plugin" / "plugin.json").unlink()
        with pytest.raises(ManifestError):
            bump_version(repo, "1.0.0")
