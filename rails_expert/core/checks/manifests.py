"""
Manifest structure check.
"""

from collections import Counter
from pathlib import Path

from rails_expert.core.checks.base import finding
from rails_expert.core.marketplace import (
    load_marketplace,
    load_plugin_manifest,
    marketplace_file,
    plugin_manifest_file,
    resolve_plugin_path,
)
from rails_expert.lib.typed_errors import FindingCode, ManifestError
from rails_expert.models.findings import Finding

CHECK = "manifests"


def check_manifests(repo_path: Path) -> list[Finding]:
    market_path = marketplace_file(repo_path)
    try:
        marketplace = load_marketplace(repo_path)
    except ManifestError as e:
        return [finding(CHECK, FindingCode.MANIFEST_INVALID, market_path, repo_path, str(e))]

    findings: list[Finding] = []
    if not marketplace.name.strip():
        findings.append(finding(CHECK, FindingCode.MANIFEST_INVALID, market_path, repo_path,
                                "Marketplace has no name"))
    if not marketplace.plugins:
        findings.append(finding(CHECK, FindingCode.MANIFEST_INVALID, market_path, repo_path,
                                "Marketplace lists no plugins"))

    for name, count in Counter(p.name for p in marketplace.plugins).items():
        if count > 1:
            findings.append(finding(CHECK, FindingCode.MANIFEST_INVALID, market_path, repo_path,
                                    f"Plugin '{name}' is listed {count} times"))

    for entry in marketplace.plugins:
        plugin_path = resolve_plugin_path(repo_path, entry)
        if not plugin_path.is_dir():
            findings.append(finding(CHECK, FindingCode.MANIFEST_INVALID, market_path, repo_path,
                                    f"Source of '{entry.name}' does not exist: {entry.source}"))
            continue
        try:
            manifest = load_plugin_manifest(plugin_path)
        except ManifestError as e:
            findings.append(finding(CHECK, FindingCode.MANIFEST_INVALID,
                                    plugin_manifest_file(plugin_path), repo_path, str(e)))
            continue
        if not manifest.name.strip():
            findings.append(finding(CHECK, FindingCode.MANIFEST_INVALID,
                                    plugin_manifest_file(plugin_path), repo_path,
                                    "Plugin manifest has no name"))
        elif manifest.name != entry.name:
            findings.append(finding(CHECK, FindingCode.MANIFEST_MISMATCH, market_path, repo_path,
                                    f"Marketplace entry '{entry.name}' points at plugin "
                                    f"'{manifest.name}'"))
    return findings
