"""Structured scan logging on top of the standard `logging` module."""

from __future__ import annotations

import json
import logging
import sys
from collections.abc import Iterable
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Literal

LOGGER_NAME = "inputs_fsck"
LOG_FORMAT = "[%(levelname)s] %(message)s"

Level = Literal["debug", "info", "warning", "error"]

_LEVELS: dict[str, int] = {
    "debug": logging.DEBUG,
    "info": logging.INFO,
    "warning": logging.WARNING,
    "error": logging.ERROR,
}


def get_logger(name: str | None = None) -> logging.Logger:
    if not name or name == LOGGER_NAME:
        return logging.getLogger(LOGGER_NAME)
    if name.startswith(f"{LOGGER_NAME}."):
        return logging.getLogger(name)
    return logging.getLogger(f"{LOGGER_NAME}.{name}")


def level_for(*, verbose: int = 0, quiet: int = 0) -> int:
    """Map -v/-q counts to a level: info by default, -v debug, -q warning, -qq error."""
    if quiet >= 2:
        return logging.ERROR
    if quiet == 1:
        return logging.WARNING
    if verbose:
        return logging.DEBUG
    return logging.INFO


def configure_logging(*, verbose: int = 0, quiet: int = 0) -> logging.Logger:
    logger = get_logger()
    if not logger.handlers:
        handler = logging.StreamHandler(sys.stderr)
        handler.setFormatter(logging.Formatter(LOG_FORMAT))
        logger.addHandler(handler)
    logger.setLevel(level_for(verbose=verbose, quiet=quiet))
    return logger


@dataclass(slots=True)
class ScanLogger:
    """Collects scan records in memory and mirrors them to the stdlib logger."""

    records: list[dict[str, Any]] = field(default_factory=list)
    name: str = f"{LOGGER_NAME}.scan"

    def log(
        self,
        *,
        operation: str,
        package: str | None,
        message: str,
        level: Level = "info",
        extra: dict[str, Any] | None = None,
    ) -> None:
        record: dict[str, Any] = {
            "level": level,
            "operation": operation,
            "package": package,
            "message": message,
        }
        if extra is not None:
            record["extra"] = extra
        self.records.append(record)
        get_logger(self.name).log(_LEVELS[level], "%s: %s", package or "-", message)

    def extend(self, records: Iterable[dict[str, Any]]) -> None:
        """Append records that were already emitted elsewhere, without re-logging them."""
        self.records.extend(records)

    def records_for_package(self, package: str) -> list[dict[str, Any]]:
        return [record for record in self.records if record.get("package") == package]

    def to_json_lines(self, path: str | Path) -> Path:
        output_path = Path(path)
        output_path.parent.mkdir(parents=True, exist_ok=True)
        lines = [json.dumps(record, sort_keys=True) for record in self.records]
        output_path.write_text("\n".join(lines) + "\n", encoding="utf-8")
        return output_path


__all__ = [
    "LOGGER_NAME",
    "ScanLogger",
    "configure_logging",
    "get_logger",
    "level_for",
]
