import json
from collections.abc import Callable
from pathlib import Path

import pytest

from inputs_fsck.cli import EXIT_ERROR, EXIT_FINDINGS, EXIT_OK, main
from inputs_fsck.issues import ISSUE_KINDS

RecipeWriter = Callable[[str, str], Path]

DIGEST = "e3b0c44298fc1c149afbf4c8996fb92427ae41e4649b934ca495991b7852b855"


def test_supported_issues_lists_every_kind(capsys: pytest.CaptureFixture[str]) -> None:
    assert main(["-qq", "supported-issues"]) == EXIT_OK

    assert capsys.readouterr().out.splitlines() == [kind.value for kind in ISSUE_KINDS]


def test_check_reports_findings(write_recipe: RecipeWriter, capsys: pytest.CaptureFixture[str]) -> None:
    directory = write_recipe("pkg", 'source=("https://example.com/a.tar.gz")\nsha256sums=("SKIP")\n')

    assert main(["-qq", "check", str(directory)]) == EXIT_FINDINGS

    out = capsys.readouterr().out
    assert out == (
        f"{directory}: [url-artifact-insecure-pin] #0 "
        "Url artifact is not securely pinned by checksums: https://example.com/a.tar.gz\n"
    )


def test_check_clean_recipe_prints_nothing(write_recipe: RecipeWriter, capsys: pytest.CaptureFixture[str]) -> None:
    directory = write_recipe("pkg", f'source=("https://example.com/a.tar.gz")\nsha256sums=("{DIGEST}")\n')

    assert main(["-qq", "check", str(directory)]) == EXIT_OK
    assert capsys.readouterr().out == ""


def test_check_list_mode_and_filters(
    tmp_path: Path,
    write_recipe: RecipeWriter,
    capsys: pytest.CaptureFixture[str],
) -> None:
    write_recipe("repo/a", 'source=("svn+https://example.com/a" "https://example.com/a")\n')
    write_recipe("repo/b", 'source=("https://example.com/b")\n')

    code = main(["-qq", "check", "--all", "--list", "-f", "svn-insecure-pin", str(tmp_path / "repo")])

    assert code == EXIT_FINDINGS
    assert capsys.readouterr().out == f"{tmp_path / 'repo' / 'a'}\n"


def test_check_rejects_unknown_filter(write_recipe: RecipeWriter, capsys: pytest.CaptureFixture[str]) -> None:
    directory = write_recipe("pkg", "source=()\n")

    assert main(["-qq", "check", "-f", "bogus", str(directory)]) == EXIT_ERROR
    assert "Unknown issue kind: 'bogus'" in capsys.readouterr().err


def test_check_missing_recipe_is_an_error(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    assert main(["-qq", "check", str(tmp_path)]) == EXIT_ERROR
    assert "Missing PKGBUILD" in capsys.readouterr().err


def test_check_config_file_and_log_json(
    tmp_path: Path,
    write_recipe: RecipeWriter,
    capsys: pytest.CaptureFixture[str],
) -> None:
    directory = write_recipe(
        "pkg",
        f'source=("https://example.com/a.tar.gz" "https://example.com/a.tar.gz.sig")\n'
        f'sha256sums=("{DIGEST}" "SKIP")\n',
    )
    config = tmp_path / "fsck.json"
    config.write_text(json.dumps({"skip_signature_files": True}), encoding="utf-8")
    log_path = tmp_path / "logs" / "scan.jsonl"

    code = main(["-qq", "check", "--config", str(config), "--log-json", str(log_path), str(directory)])

    assert code == EXIT_OK
    assert capsys.readouterr().out == ""
    records = [json.loads(line) for line in log_path.read_text(encoding="utf-8").splitlines()]
    assert records
    assert all(record["package"] == str(directory) for record in records)


@pytest.mark.parametrize("jobs", ["0", "-2", "many"])
def test_check_rejects_non_positive_jobs(
    jobs: str, write_recipe: RecipeWriter, capsys: pytest.CaptureFixture[str]
) -> None:
    directory = write_recipe("pkg", "source=()\n")

    with pytest.raises(SystemExit) as excinfo:
        main(["-qq", "check", "-j", jobs, str(directory)])

    assert excinfo.value.code == EXIT_ERROR
    assert "--jobs" in capsys.readouterr().err
