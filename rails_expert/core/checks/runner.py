"""
Runs the content checks and collects their findings.
"""

import logging
from pathlib import Path
from typing import Callable, Iterable, Optional

from rails_expert.core.checks.bang import check_bang
from rails_expert.core.checks.base import relative
from rails_expert.core.checks.frontmatter import check_frontmatter
from rails_expert.core.checks.hooks import check_hooks
from rails_expert.core.checks.links import check_links
from rails_expert.core.checks.manifests import check_manifests
from rails_expert.core.checks.versions import check_versions
from rails_expert.core.marketplace import marketplace_file
from rails_expert.lib.typed_errors import FindingCode, ManifestError
from rails_expert.models.findings import CheckReport, CheckResult, Finding

logger = logging.getLogger(__name__)

# Run order
CHECKS: dict[str, Callable[..., list[Finding]]] = {
    "frontmatter": check_frontmatter,
    "versions": check_versions,
    "bang": check_bang,
    "links": check_links,
    "hooks": check_hooks,
    "manifests": check_manifests,
}


def select_checks(
    only: Optional[Iterable[str]] = None,
    skip: Iterable[str] = (),
) -> list[str]:
    """Resolve --only/--skip into an ordered list of check names."""
    only = list(only or [])
    skip = list(skip)
    unknown = sorted(set(only + skip) - set(CHECKS))
    if unknown:
        raise ValueError(f"Unknown check(s): {', '.join(unknown)}")
    if only:
        # An explicit --only wins over a configured skip
        return [name for name in CHECKS if name in only]
    return [name for name in CHECKS if name not in skip]


def run_check(name: str, repo_path: Path, link_ignore: Iterable[str] = ()) -> CheckResult:
    """Run one check, turning an unreadable manifest into a finding."""
    check = CHECKS[name]
    try:
        if name == "links":
            findings = check(repo_path, ignore=link_ignore)
        else:
            findings = check(repo_path)
    except ManifestError as e:
        path = e.path or str(marketplace_file(repo_path))
        findings = [Finding(
            check=name,
            code=FindingCode.MANIFEST_INVALID.value,
            path=relative(Path(path), repo_path),
            message=str(e),
        )]
    status = "ok" if not findings else f"{len(findings)} finding(s)"
    logger.info(f"Check {name}: {status}", extra={"check": name, "findings": len(findings)})
    return CheckResult(name=name, findings=findings)


def run_checks(
    repo_path: Path,
    only: Optional[Iterable[str]] = None,
    skip: Iterable[str] = (),
    link_ignore: Iterable[str] = (),
) -> CheckReport:
    """Run the selected checks in order."""
    names = select_checks(only, skip)
    report = CheckReport(repo_path=str(repo_path))
    for name in names:
        report.results.append(run_check(name, repo_path, link_ignore))
    return report
