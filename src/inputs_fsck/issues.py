"""Issue kinds and the per-recipe issue records handed to reporting."""

from __future__ import annotations

from collections.abc import Collection, Iterable
from dataclasses import dataclass
from enum import StrEnum


class IssueKind(StrEnum):
    INSECURE_SCHEME = "insecure-scheme"
    UNKNOWN_SCHEME = "unknown-scheme"
    WRONG_NUMBER_OF_CHECKSUMS = "wrong-number-of-checksums"
    GIT_COMMIT_INSECURE_PIN = "git-commit-insecure-pin"
    SVN_INSECURE_PIN = "svn-insecure-pin"
    HG_REVISION_INSECURE_PIN = "hg-revision-insecure-pin"
    BZR_INSECURE_PIN = "bzr-insecure-pin"
    URL_ARTIFACT_INSECURE_PIN = "url-artifact-insecure-pin"


ISSUE_KINDS: tuple[IssueKind, ...] = tuple(IssueKind)

_DESCRIPTIONS: dict[IssueKind, str] = {
    IssueKind.INSECURE_SCHEME: "Using insecure scheme",
    IssueKind.UNKNOWN_SCHEME: "Unknown scheme",
    IssueKind.WRONG_NUMBER_OF_CHECKSUMS: "Number of checksums doesn't match number of sources",
    IssueKind.GIT_COMMIT_INSECURE_PIN: "Git commit is not securely pinned",
    IssueKind.SVN_INSECURE_PIN: "svn is never a cryptographically secure pin",
    IssueKind.HG_REVISION_INSECURE_PIN: "Hg revision is not securely pinned",
    IssueKind.BZR_INSECURE_PIN: "bzr is never a cryptographically secure pin",
    IssueKind.URL_ARTIFACT_INSECURE_PIN: "Url artifact is not securely pinned by checksums",
}


@dataclass(frozen=True, slots=True)
class Issue:
    """One detected problem. Recipe-level issues have no source index."""

    kind: IssueKind
    source_index: int | None
    evidence: str

    def describe(self) -> str:
        return f"{_DESCRIPTIONS[self.kind]}: {self.evidence}"


@dataclass(frozen=True, slots=True)
class Finding:
    """An issue tagged with the identity of the package it was found in."""

    package: str
    issue: Issue

    @property
    def kind(self) -> IssueKind:
        return self.issue.kind

    @property
    def source_index(self) -> int | None:
        return self.issue.source_index

    @property
    def evidence(self) -> str:
        return self.issue.evidence


def supported_issues() -> tuple[str, ...]:
    return tuple(kind.value for kind in ISSUE_KINDS)


def collect_findings(
    package: str,
    recipe_issues: Iterable[Issue],
    source_issues: Iterable[Issue | None],
    *,
    kinds: Collection[IssueKind] | None = None,
) -> list[Finding]:
    """Tag recipe-level then per-source issues with `package`, keeping only `kinds`."""
    findings: list[Finding] = []
    for issue in (*recipe_issues, *source_issues):
        if issue is None:
            continue
        if kinds and issue.kind not in kinds:
            continue
        findings.append(Finding(package=package, issue=issue))
    return findings


__all__ = [
    "Finding",
    "ISSUE_KINDS",
    "Issue",
    "IssueKind",
    "collect_findings",
    "supported_issues",
]
