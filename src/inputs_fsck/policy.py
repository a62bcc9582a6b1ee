"""Scan policy configuration and issue filter helpers."""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass

from inputs_fsck.errors import ValidationError
from inputs_fsck.issues import ISSUE_KINDS, IssueKind


@dataclass(frozen=True, slots=True)
class ScanPolicy:
    issue_filter: frozenset[IssueKind] | None = None
    skip_signature_files: bool = False
    lenient_git_submodules: bool = False
    allow_local_files: bool = False
    discover_signed_tags: bool = False


DEFAULT_POLICY = ScanPolicy()


def parse_issue_filter(values: Iterable[str]) -> frozenset[IssueKind]:
    kinds: set[IssueKind] = set()
    for value in values:
        try:
            kinds.add(IssueKind(value))
        except ValueError:
            raise ValidationError(
                f"Unknown issue kind: {value!r}",
                hint="Run `inputs-fsck supported-issues` to list valid names.",
                context={"supported": ", ".join(ISSUE_KINDS)},
            ) from None
    return frozenset(kinds)


__all__ = ["DEFAULT_POLICY", "ScanPolicy", "parse_issue_filter"]
