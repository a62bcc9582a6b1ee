"""Per-scheme pin rules, evaluated in priority order (first applicable rule wins)."""

from __future__ import annotations

import re
from collections.abc import Callable, Mapping, Sequence
from dataclasses import dataclass

from inputs_fsck.issues import Issue, IssueKind
from inputs_fsck.models import Bzr, ChecksumSet, Git, Hg, PlainUrl, RecipeSource, Svn, Unknown
from inputs_fsck.policy import DEFAULT_POLICY, ScanPolicy

GIT_OBJECT_PATTERN = re.compile(r"[0-9a-f]{40}|[0-9a-f]{64}")
HG_CHANGESET_PATTERN = re.compile(r"[0-9a-f]{40}")

# Plain transports without any authentication of the peer. `git://` is
# classified as a git source and handled by the git commit rule instead.
INSECURE_TRANSPORTS = frozenset({"rsync"})


@dataclass(frozen=True, slots=True)
class PinRule:
    name: str
    applies: Callable[[RecipeSource], bool]
    check: Callable[[RecipeSource, ChecksumSet], IssueKind | None]


def is_git_commit_pinned(source: RecipeSource) -> bool:
    commit = source.vcs_params.get("commit", "")
    return GIT_OBJECT_PATTERN.fullmatch(commit) is not None


def is_hg_revision_pinned(source: RecipeSource) -> bool:
    revision = source.vcs_params.get("revision", "")
    return HG_CHANGESET_PATTERN.fullmatch(revision) is not None


def _always(kind: IssueKind) -> Callable[[RecipeSource, ChecksumSet], IssueKind | None]:
    return lambda _source, _checks: kind


def _scheme_is(*types: type) -> Callable[[RecipeSource], bool]:
    return lambda source: isinstance(source.scheme, types)


def _insecure_transport(source: RecipeSource) -> bool:
    scheme = source.scheme
    return isinstance(scheme, PlainUrl) and scheme.protocol.lower() in INSECURE_TRANSPORTS


PIN_RULES: tuple[PinRule, ...] = (
    PinRule("unknown-scheme", _scheme_is(Unknown), _always(IssueKind.UNKNOWN_SCHEME)),
    PinRule(
        "git-commit",
        _scheme_is(Git),
        lambda source, _checks: (
            None if is_git_commit_pinned(source) else IssueKind.GIT_COMMIT_INSECURE_PIN
        ),
    ),
    PinRule("svn", _scheme_is(Svn), _always(IssueKind.SVN_INSECURE_PIN)),
    PinRule(
        "hg-revision",
        _scheme_is(Hg),
        lambda source, _checks: (
            None if is_hg_revision_pinned(source) else IssueKind.HG_REVISION_INSECURE_PIN
        ),
    ),
    PinRule("bzr", _scheme_is(Bzr), _always(IssueKind.BZR_INSECURE_PIN)),
    PinRule("insecure-transport", _insecure_transport, _always(IssueKind.INSECURE_SCHEME)),
    PinRule(
        "url-checksum",
        _scheme_is(PlainUrl),
        lambda _source, checks: None if checks.is_secure else IssueKind.URL_ARTIFACT_INSECURE_PIN,
    ),
)


def evaluate(source: RecipeSource, checks: ChecksumSet) -> Issue | None:
    """Classify one source against its aligned checksums; `None` means secure."""
    for rule in PIN_RULES:
        if not rule.applies(source):
            continue
        kind = rule.check(source, checks)
        if kind is None:
            return None
        return Issue(kind=kind, source_index=source.index, evidence=source.raw)
    return None


def evaluate_sources(
    sources: Sequence[RecipeSource],
    ledger: Mapping[int, ChecksumSet],
    *,
    policy: ScanPolicy = DEFAULT_POLICY,
) -> list[Issue | None]:
    """Evaluate every source in order, applying the recipe-wide policy relaxations."""
    pinned_git = any(
        isinstance(source.scheme, Git) and is_git_commit_pinned(source) for source in sources
    )
    results: list[Issue | None] = []
    for source in sources:
        checks = ledger.get(source.index) or ChecksumSet(index=source.index)
        issue = evaluate(source, checks)
        if issue is not None and _relaxed(issue, source, policy=policy, pinned_git=pinned_git):
            issue = None
        results.append(issue)
    return results


def _relaxed(issue: Issue, source: RecipeSource, *, policy: ScanPolicy, pinned_git: bool) -> bool:
    if issue.kind is IssueKind.URL_ARTIFACT_INSECURE_PIN:
        return policy.skip_signature_files and source.is_signature_file
    if issue.kind is IssueKind.GIT_COMMIT_INSECURE_PIN:
        # Submodules are listed unpinned next to the pinned primary repository.
        return policy.lenient_git_submodules and pinned_git
    if issue.kind is IssueKind.UNKNOWN_SCHEME:
        return policy.allow_local_files and source.scheme == Unknown("") and "$" not in source.url
    return False


__all__ = [
    "GIT_OBJECT_PATTERN",
    "HG_CHANGESET_PATTERN",
    "INSECURE_TRANSPORTS",
    "PIN_RULES",
    "PinRule",
    "evaluate",
    "evaluate_sources",
    "is_git_commit_pinned",
    "is_hg_revision_pinned",
]
