"""Classification of raw `source=` entries into typed descriptors."""

from __future__ import annotations

import re

from inputs_fsck.models import Bzr, Git, Hg, PlainUrl, RecipeSource, SchemeTag, Svn, Unknown

SCHEME_PATTERN = re.compile(r"^([A-Za-z0-9][A-Za-z0-9+.\-]*)://")

PLAIN_TRANSPORTS = frozenset({"http", "https", "ftp", "ftps", "file", "rsync", "source"})

VCS_SCHEMES: dict[str, type[Git | Svn | Hg | Bzr]] = {
    "git": Git,
    "svn": Svn,
    "hg": Hg,
    "bzr": Bzr,
}

VCS_PARAMS: dict[type[Git | Svn | Hg | Bzr], frozenset[str]] = {
    Git: frozenset({"commit", "tag", "branch"}),
    Svn: frozenset({"revision"}),
    Hg: frozenset({"revision", "tag", "branch"}),
    Bzr: frozenset({"revision"}),
}

SIGNED_MARKER = "?signed"


def classify(raw: str, index: int) -> RecipeSource:
    """Parse one source entry. Total over all strings; worst case is `Unknown`."""
    filename_override, locator = split_filename(raw)
    scheme = detect_scheme(locator)

    allowed = VCS_PARAMS.get(type(scheme))
    if allowed is None:
        return RecipeSource(
            raw=raw,
            index=index,
            scheme=scheme,
            filename_override=filename_override,
            url=locator,
        )

    url, params, signed = split_fragment(locator, allowed=allowed)
    return RecipeSource(
        raw=raw,
        index=index,
        scheme=scheme,
        filename_override=filename_override,
        vcs_params=params,
        url=url,
        signed=signed,
    )


def split_filename(raw: str) -> tuple[str | None, str]:
    """Split an optional `name::` local filename prefix from the locator."""
    head, sep, tail = raw.partition("::")
    if not sep or "/" in head:
        return None, raw
    return head or None, tail


def detect_scheme(locator: str) -> SchemeTag:
    match = SCHEME_PATTERN.match(locator)
    if match is None:
        return Unknown("")

    token = match.group(1)
    lowered = token.lower()
    vcs = lowered.partition("+")[0]
    if vcs in VCS_SCHEMES:
        return VCS_SCHEMES[vcs]()
    if lowered in PLAIN_TRANSPORTS:
        return PlainUrl(token)
    return Unknown(token)


def split_fragment(locator: str, *, allowed: frozenset[str]) -> tuple[str, dict[str, str], bool]:
    """Split `url#key=value&...` into the url, recognised params, and signed flag."""
    signed = False
    base, _, fragment = locator.partition("#")

    if base.endswith(SIGNED_MARKER):
        base = base[: -len(SIGNED_MARKER)]
        signed = True
    if fragment.endswith(SIGNED_MARKER):
        fragment = fragment[: -len(SIGNED_MARKER)]
        signed = True

    params: dict[str, str] = {}
    for pair in fragment.split("&"):
        key, sep, value = pair.partition("=")
        if sep and key in allowed:
            params[key] = value
    return base, params, signed


__all__ = [
    "PLAIN_TRANSPORTS",
    "VCS_PARAMS",
    "classify",
    "detect_scheme",
    "split_filename",
    "split_fragment",
]
