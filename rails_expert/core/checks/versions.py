"""
Version consistency check.

A plugin's version lives in two places: its own plugin.json and its entry in
the marketplace manifest. They must match for every release.
"""

from pathlib import Path
from typing import Optional

from rails_expert.core.checks.base import finding
from rails_expert.core.marketplace import (
    load_marketplace,
    load_plugin_manifest,
    marketplace_file,
    plugin_manifest_file,
    resolve_plugin_path,
)
from rails_expert.core.versioning import is_semver
from rails_expert.lib.typed_errors import FindingCode, ManifestError
from rails_expert.models.findings import Finding

CHECK = "versions"


def versions_match(plugin_version: Optional[str], marketplace_version: Optional[str]) -> bool:
    return plugin_version is not None and plugin_version == marketplace_version


def check_versions(repo_path: Path) -> list[Finding]:
    marketplace = load_marketplace(repo_path)
    market_path = marketplace_file(repo_path)
    findings: list[Finding] = []

    meta_version = marketplace.metadata.version
    if meta_version is not None and not is_semver(meta_version):
        findings.append(finding(CHECK, FindingCode.VERSION_INVALID, market_path, repo_path,
                                f"Marketplace metadata version '{meta_version}' is not semantic"))

    for entry in marketplace.plugins:
        plugin_path = resolve_plugin_path(repo_path, entry)
        try:
            manifest = load_plugin_manifest(plugin_path)
        except ManifestError:
            # Reported by the manifests check
            continue
        manifest_path = plugin_manifest_file(plugin_path)

        # The model defaults a missing version to 0.0.0
        if "version" not in manifest.model_fields_set:
            findings.append(finding(CHECK, FindingCode.VERSION_INVALID, manifest_path, repo_path,
                                    f"plugin.json of '{entry.name}' has no version"))
            continue

        if not is_semver(manifest.version):
            findings.append(finding(CHECK, FindingCode.VERSION_INVALID, manifest_path, repo_path,
                                    f"Plugin version '{manifest.version}' is not semantic"))

        if entry.version is None:
            findings.append(finding(CHECK, FindingCode.VERSION_MISMATCH, market_path, repo_path,
                                    f"Marketplace entry '{entry.name}' has no version "
                                    f"(plugin.json has {manifest.version})"))
        elif not versions_match(manifest.version, entry.version):
            findings.append(finding(CHECK, FindingCode.VERSION_MISMATCH, market_path, repo_path,
                                    f"Marketplace entry '{entry.name}' has version {entry.version} "
                                    f"but plugin.json has {manifest.version}"))

        if (
            meta_version is not None
            and len(marketplace.plugins) == 1
            and not versions_match(manifest.version, meta_version)
        ):
            findings.append(finding(CHECK, FindingCode.VERSION_MISMATCH, market_path, repo_path,
                                    f"Marketplace metadata version {meta_version} "
                                    f"does not match plugin version {manifest.version}"))
    return findings
