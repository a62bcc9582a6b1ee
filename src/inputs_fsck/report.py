"""Text rendering of scan reports."""

from __future__ import annotations

from collections.abc import Iterable

from inputs_fsck.issues import Finding
from inputs_fsck.scan import RecipeReport


def format_finding(finding: Finding) -> str:
    location = "recipe" if finding.source_index is None else f"#{finding.source_index}"
    return f"{finding.package}: [{finding.kind}] {location} {finding.issue.describe()}"


def format_report(reports: Iterable[RecipeReport], *, machine: bool = False) -> str:
    """Human mode lists every finding; machine mode lists each affected package once."""
    lines: list[str] = []
    for report in reports:
        if not report.has_findings:
            continue
        if machine:
            lines.append(report.package)
        else:
            lines.extend(format_finding(finding) for finding in report.findings)
    return "\n".join(lines)


__all__ = ["format_finding", "format_report"]
