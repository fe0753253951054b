"""
Check result models.
"""

from typing import Optional

from pydantic import BaseModel, Field


class Finding(BaseModel):
    """A single failed content assertion."""

    check: str
    code: str
    path: str
    line: Optional[int] = None
    message: str

    def location(self) -> str:
        return f"{self.path}:{self.line}" if self.line else self.path

    def __str__(self) -> str:
        return f"{self.location()}: [{self.check}] {self.message}"


class CheckResult(BaseModel):
    """Outcome of one named check."""

    name: str
    findings: list[Finding] = Field(default_factory=list)

    @property
    def passed(self) -> bool:
        return not self.findings


class CheckReport(BaseModel):
    """Outcome of a full check run."""

    repo_path: str
    results: list[CheckResult] = Field(default_factory=list)

    @property
    def findings(self) -> list[Finding]:
        return [f for r in self.results for f in r.findings]

    @property
    def ok(self) -> bool:
        return all(r.passed for r in self.results)

    def to_dict(self) -> dict:
        return {
            "repoPath": self.repo_path,
            "ok": self.ok,
            "checks": {r.name: r.passed for r in self.results},
            "findings": [f.model_dump() for f in self.findings],
        }
