import json
from pathlib import Path

import pytest

from inputs_fsck.config import load_config, parse_config
from inputs_fsck.errors import (
    ConfigError,
    ErrorCode,
    RecipeError,
    TraversalError,
    ValidationError,
)
from inputs_fsck.issues import IssueKind
from inputs_fsck.policy import ScanPolicy, parse_issue_filter


def test_error_codes_are_stable_and_machine_readable() -> None:
    errors = [
        ValidationError("bad input"),
        ConfigError("bad config"),
        RecipeError("missing recipe"),
        TraversalError("missing path"),
    ]
    assert [error.code for error in errors] == [
        ErrorCode.VALIDATION.value,
        ErrorCode.CONFIG.value,
        ErrorCode.RECIPE.value,
        ErrorCode.TRAVERSAL.value,
    ]


def test_error_rendering_includes_hint_and_context() -> None:
    error = RecipeError("Missing PKGBUILD.", hint="Pass --all.", context={"path": "/x", "empty": ""})

    assert str(error) == "Missing PKGBUILD.\nHint: Pass --all.\n  path: /x"
    assert error.to_dict() == {
        "code": "E_RECIPE",
        "message": str(error),
        "context": {"path": "/x", "empty": ""},
        "hint": "Pass --all.",
    }


def test_parse_issue_filter() -> None:
    assert parse_issue_filter(["svn-insecure-pin", "unknown-scheme"]) == frozenset(
        {IssueKind.SVN_INSECURE_PIN, IssueKind.UNKNOWN_SCHEME}
    )
    with pytest.raises(ValidationError):
        parse_issue_filter(["nope"])


def test_parse_config_builds_policy() -> None:
    policy = parse_config(
        json.dumps(
            {
                "filters": ["git-commit-insecure-pin"],
                "lenient_git_submodules": True,
                "allow_local_files": True,
            }
        )
    )

    assert policy == ScanPolicy(
        issue_filter=frozenset({IssueKind.GIT_COMMIT_INSECURE_PIN}),
        lenient_git_submodules=True,
        allow_local_files=True,
    )


@pytest.mark.parametrize(
    "raw",
    [
        "{not json",
        "[]",
        '{"unknown": 1}',
        '{"filters": "svn-insecure-pin"}',
        '{"filters": ["bogus"]}',
        '{"skip_signature_files": "yes"}',
    ],
)
def test_parse_config_rejects_invalid_payloads(raw: str) -> None:
    with pytest.raises(ConfigError):
        parse_config(raw)


def test_load_config_missing_file(tmp_path: Path) -> None:
    with pytest.raises(ConfigError) as excinfo:
        load_config(tmp_path / "missing.json")

    assert excinfo.value.code == ErrorCode.CONFIG.value
