"""Positional alignment of checksum arrays with source entries."""

from __future__ import annotations

from collections.abc import Iterator, Mapping, Sequence

from inputs_fsck.issues import Issue, IssueKind
from inputs_fsck.models import Algorithm, ChecksumEntry, ChecksumSet, RecipeSource


class Ledger(Mapping[int, ChecksumSet]):
    """Checksums per source index, plus the recipe-level count mismatches.

    Arrays whose length differs from the number of sources are reported once
    and left out of the alignment entirely. A recipe without sources has
    nothing to align and yields no issues.
    """

    __slots__ = ("_sets", "_issues")

    def __init__(self, sets: Mapping[int, ChecksumSet], issues: Sequence[Issue]) -> None:
        self._sets = dict(sets)
        self._issues = tuple(issues)

    @property
    def issues(self) -> tuple[Issue, ...]:
        return self._issues

    def __getitem__(self, index: int) -> ChecksumSet:
        return self._sets[index]

    def __iter__(self) -> Iterator[int]:
        return iter(self._sets)

    def __len__(self) -> int:
        return len(self._sets)

    def __repr__(self) -> str:
        return f"Ledger(sets={self._sets!r}, issues={self._issues!r})"


def align(
    sources: Sequence[RecipeSource],
    checksum_arrays: Mapping[Algorithm, Sequence[ChecksumEntry]],
) -> Ledger:
    entries: dict[int, list[ChecksumEntry]] = {source.index: [] for source in sources}
    issues: list[Issue] = []
    if not sources:
        return Ledger({}, issues)

    for algorithm, array in checksum_arrays.items():
        if len(array) != len(sources):
            issues.append(
                Issue(
                    kind=IssueKind.WRONG_NUMBER_OF_CHECKSUMS,
                    source_index=None,
                    evidence=f"sources={len(sources)}, {algorithm.array_name}={len(array)}",
                )
            )
            continue
        for source, entry in zip(sources, array):
            entries[source.index].append(entry)

    sets = {
        index: ChecksumSet(index=index, entries=tuple(found)) for index, found in entries.items()
    }
    return Ledger(sets, issues)


__all__ = ["Ledger", "align"]
