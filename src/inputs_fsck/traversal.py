"""Recipe discovery on disk and parallel scanning of the discovered targets."""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
from pathlib import Path

from inputs_fsck.errors import RecipeError, TraversalError
from inputs_fsck.observability import ScanLogger
from inputs_fsck.policy import DEFAULT_POLICY, ScanPolicy
from inputs_fsck.scan import RecipeReport, scan_recipe

RECIPE_FILENAME = "PKGBUILD"


@dataclass(frozen=True, slots=True)
class Target:
    package: str
    path: Path

    @property
    def recipe_path(self) -> Path:
        return self.path / RECIPE_FILENAME


def discover_targets(paths: Iterable[str | Path], *, recursive: bool = False) -> list[Target]:
    """Resolve input paths into recipe targets, sorted by path."""
    targets: dict[Path, Target] = {}
    for raw in paths:
        path = Path(raw)
        if not path.exists():
            raise TraversalError(
                "Input path does not exist.",
                context={"operation": "discover_targets", "path": str(path)},
            )
        if path.is_file():
            if path.name != RECIPE_FILENAME:
                raise RecipeError(
                    f"Expected a {RECIPE_FILENAME} file.",
                    context={"operation": "discover_targets", "path": str(path)},
                )
            targets[path.parent] = Target(package=str(path.parent), path=path.parent)
            continue
        if recursive:
            for recipe in path.rglob(RECIPE_FILENAME):
                if recipe.is_file():
                    targets[recipe.parent] = Target(package=str(recipe.parent), path=recipe.parent)
            continue
        if not (path / RECIPE_FILENAME).is_file():
            raise RecipeError(
                f"Missing {RECIPE_FILENAME}.",
                hint="Pass --all to search the directory tree for recipes.",
                context={"operation": "discover_targets", "path": str(path / RECIPE_FILENAME)},
            )
        targets[path] = Target(package=str(path), path=path)
    return [targets[key] for key in sorted(targets)]


def read_recipe(target: Target) -> str:
    try:
        payload = target.recipe_path.read_bytes()
    except OSError as exc:
        raise RecipeError(
            f"Unable to read {RECIPE_FILENAME}.",
            hint=str(exc),
            context={"operation": "read_recipe", "path": str(target.recipe_path)},
        ) from exc
    return payload.decode("utf-8", errors="replace")


def scan_target(
    target: Target,
    *,
    policy: ScanPolicy = DEFAULT_POLICY,
) -> tuple[RecipeReport, ScanLogger]:
    logger = ScanLogger()
    report = scan_recipe(read_recipe(target), package=target.package, policy=policy, logger=logger)
    return report, logger


def scan_targets(
    targets: Sequence[Target],
    *,
    policy: ScanPolicy = DEFAULT_POLICY,
    jobs: int | None = None,
    logger: ScanLogger | None = None,
) -> list[RecipeReport]:
    """Scan targets concurrently; reports and log records keep target order."""
    with ThreadPoolExecutor(max_workers=jobs) as executor:
        results = list(executor.map(lambda target: scan_target(target, policy=policy), targets))

    reports: list[RecipeReport] = []
    for report, target_logger in results:
        if logger is not None:
            logger.extend(target_logger.records)
        reports.append(report)
    return reports


__all__ = [
    "RECIPE_FILENAME",
    "Target",
    "discover_targets",
    "read_recipe",
    "scan_target",
    "scan_targets",
]
