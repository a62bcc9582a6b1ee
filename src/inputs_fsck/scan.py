"""Recipe scan pipeline: extract, align, evaluate, and tag findings."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field

from inputs_fsck.hints import detect_signed_tag_from_url
from inputs_fsck.issues import Finding, collect_findings
from inputs_fsck.ledger import align
from inputs_fsck.models import Algorithm, ChecksumEntry, PlainUrl, RecipeSource
from inputs_fsck.observability import Level, ScanLogger
from inputs_fsck.policy import DEFAULT_POLICY, ScanPolicy
from inputs_fsck.recipe import extract
from inputs_fsck.rules import evaluate_sources


@dataclass(frozen=True, slots=True)
class RecipeReport:
    package: str
    sources: tuple[RecipeSource, ...] = ()
    checksums: Mapping[Algorithm, tuple[ChecksumEntry, ...]] = field(default_factory=dict)
    findings: tuple[Finding, ...] = ()

    @property
    def has_findings(self) -> bool:
        return bool(self.findings)


def scan_recipe(
    text: str,
    *,
    package: str = "",
    policy: ScanPolicy | None = None,
    logger: ScanLogger | None = None,
) -> RecipeReport:
    """Scan one recipe's text. Pure apart from the optional `logger` records."""
    policy = policy or DEFAULT_POLICY

    sources, checksums = extract(text)
    _log(logger, package, "Found sources: " + repr([source.raw for source in sources]))
    for algorithm, entries in checksums.items():
        _log(
            logger,
            package,
            f"Found checksums ({algorithm.array_name}): "
            + repr([str(entry.value) for entry in entries]),
        )

    ledger = align(sources, checksums)
    source_issues = evaluate_sources(sources, ledger, policy=policy)

    if policy.discover_signed_tags:
        _discover_signed_tags(sources, package=package, logger=logger)

    findings = collect_findings(
        package,
        ledger.issues,
        source_issues,
        kinds=policy.issue_filter,
    )
    for finding in findings:
        _log(
            logger,
            package,
            finding.issue.describe(),
            extra={"kind": finding.kind.value, "source_index": finding.source_index},
        )

    return RecipeReport(
        package=package,
        sources=tuple(sources),
        checksums={algorithm: tuple(entries) for algorithm, entries in checksums.items()},
        findings=tuple(findings),
    )


def _discover_signed_tags(
    sources: list[RecipeSource],
    *,
    package: str,
    logger: ScanLogger | None,
) -> None:
    for source in sources:
        if not isinstance(source.scheme, PlainUrl):
            continue
        upstream = detect_signed_tag_from_url(source.url)
        if upstream is None:
            continue
        _log(
            logger,
            package,
            f"There's likely a signed tag here we could use: {upstream.git_source}",
            level="info",
            extra={"source_index": source.index},
        )


def _log(
    logger: ScanLogger | None,
    package: str,
    message: str,
    *,
    level: Level = "debug",
    extra: dict[str, object] | None = None,
) -> None:
    if logger is None:
        return
    logger.log(operation="scan", package=package, message=message, level=level, extra=extra)


__all__ = ["RecipeReport", "scan_recipe"]
