"""Shared test fixtures."""

from __future__ import annotations

from collections.abc import Callable
from pathlib import Path

import pytest


@pytest.fixture
def write_recipe(tmp_path: Path) -> Callable[[str, str], Path]:
    """Write a PKGBUILD into `tmp_path/<name>/` and return its directory."""

    def _write(name: str, text: str) -> Path:
        directory = tmp_path / name
        directory.mkdir(parents=True, exist_ok=True)
        (directory / "PKGBUILD").write_text(text, encoding="utf-8")
        return directory

    return _write
