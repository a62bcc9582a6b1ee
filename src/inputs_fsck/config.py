"""JSON policy file parser."""

from __future__ import annotations

import json
from dataclasses import replace
from pathlib import Path
from typing import Any

from inputs_fsck.errors import ConfigError, ValidationError
from inputs_fsck.issues import IssueKind
from inputs_fsck.policy import ScanPolicy, parse_issue_filter

BOOLEAN_KEYS = (
    "skip_signature_files",
    "lenient_git_submodules",
    "allow_local_files",
    "discover_signed_tags",
)
KNOWN_KEYS = frozenset({"filters", *BOOLEAN_KEYS})


def parse_config(raw: str) -> ScanPolicy:
    try:
        payload = json.loads(raw)
    except json.JSONDecodeError as exc:
        raise ConfigError("Invalid config JSON.", hint=str(exc)) from exc

    if not isinstance(payload, dict):
        raise ConfigError("Invalid config payload type.", hint="Expected a JSON object.")

    unknown = sorted(set(payload) - KNOWN_KEYS)
    if unknown:
        raise ConfigError(
            "Unknown config keys.",
            context={"keys": ", ".join(unknown), "supported": ", ".join(sorted(KNOWN_KEYS))},
        )

    policy = ScanPolicy()
    if "filters" in payload:
        policy = replace(policy, issue_filter=_filters(payload["filters"]))
    for key in BOOLEAN_KEYS:
        if key in payload:
            policy = replace(policy, **{key: _required_bool(payload, key)})
    return policy


def load_config(path: str | Path) -> ScanPolicy:
    config_path = Path(path)
    try:
        raw = config_path.read_text(encoding="utf-8")
    except FileNotFoundError as exc:
        raise ConfigError(
            "Config file does not exist.",
            hint="Check the --config path.",
            context={"path": str(config_path)},
        ) from exc
    return parse_config(raw)


def _filters(value: Any) -> frozenset[IssueKind]:
    if not isinstance(value, list) or not all(isinstance(item, str) for item in value):
        raise ConfigError("Invalid config `filters` value.", hint="Expected a list of issue kinds.")
    try:
        return parse_issue_filter(value)
    except ValidationError as exc:
        raise ConfigError(
            "Invalid config `filters` value.",
            hint=str(exc.args[0]),
            context=exc.context,
        ) from exc


def _required_bool(payload: dict[str, Any], key: str) -> bool:
    value = payload.get(key)
    if not isinstance(value, bool):
        raise ConfigError(f"Invalid config `{key}` value.", hint="Expected true or false.")
    return value


__all__ = ["load_config", "parse_config"]
