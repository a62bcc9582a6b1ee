"""Offline detection of upstream tags behind GitHub archive URLs.

A tarball fetched from a tag archive URL can often be replaced by a
`git+https://...#tag=...?signed` source verified against the tag signature.
"""

from __future__ import annotations

import re
from dataclasses import dataclass

GITHUB_ARCHIVE_PATTERNS = (
    re.compile(r"^https://github\.com/([^/]+)/([^/]+)/archive/refs/tags/(.+)\.tar\.gz$"),
    re.compile(r"^https://github\.com/([^/]+)/([^/]+)/archive/(.+)/.+\.tar\.gz$"),
    re.compile(r"^https://github\.com/([^/]+)/([^/]+)/archive/(.+)\.tar\.gz$"),
)


@dataclass(frozen=True, slots=True)
class TagUrl:
    owner: str
    name: str
    tag: str

    @property
    def git_source(self) -> str:
        return f"git+https://github.com/{self.owner}/{self.name}.git#tag={self.tag}?signed"


def detect_signed_tag_from_url(url: str) -> TagUrl | None:
    for pattern in GITHUB_ARCHIVE_PATTERNS:
        match = pattern.match(url)
        if match is not None:
            owner, name, tag = match.groups()
            return TagUrl(owner=owner, name=name, tag=tag)
    return None


__all__ = ["TagUrl", "detect_signed_tag_from_url"]
