"""Core typed values derived from a recipe: sources, schemes, and checksums."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from enum import Enum, StrEnum
from types import MappingProxyType

SIGNATURE_EXTENSIONS = (".sig", ".asc", ".sign")


@dataclass(frozen=True, slots=True)
class PlainUrl:
    protocol: str


@dataclass(frozen=True, slots=True)
class Git:
    pass


@dataclass(frozen=True, slots=True)
class Svn:
    pass


@dataclass(frozen=True, slots=True)
class Hg:
    pass


@dataclass(frozen=True, slots=True)
class Bzr:
    pass


@dataclass(frozen=True, slots=True)
class Unknown:
    protocol: str = ""


SchemeTag = PlainUrl | Git | Svn | Hg | Bzr | Unknown
VcsScheme = Git | Svn | Hg | Bzr


class Algorithm(StrEnum):
    """Checksum algorithms makepkg understands, in `<algo>sums` form."""

    MD5 = "md5"
    SHA1 = "sha1"
    SHA224 = "sha224"
    SHA256 = "sha256"
    SHA384 = "sha384"
    SHA512 = "sha512"
    B2 = "b2"

    @property
    def array_name(self) -> str:
        return f"{self.value}sums"

    @property
    def is_strong(self) -> bool:
        return self in STRONG_ALGORITHMS

    @classmethod
    def from_array_name(cls, name: str) -> Algorithm | None:
        if not name.endswith("sums"):
            return None
        try:
            return cls(name[: -len("sums")])
        except ValueError:
            return None


STRONG_ALGORITHMS = frozenset(
    {Algorithm.SHA224, Algorithm.SHA256, Algorithm.SHA384, Algorithm.SHA512, Algorithm.B2}
)


class Skip(Enum):
    """Checksum sentinel meaning verification is disabled for an entry."""

    SKIP = "SKIP"

    def __str__(self) -> str:
        return self.value


SKIP = Skip.SKIP


@dataclass(frozen=True, slots=True)
class ChecksumEntry:
    algorithm: Algorithm
    value: str | Skip
    index: int

    @property
    def is_skip(self) -> bool:
        return self.value is SKIP

    @property
    def is_strong(self) -> bool:
        return self.algorithm.is_strong and not self.is_skip and bool(self.value)


@dataclass(frozen=True, slots=True)
class ChecksumSet:
    """All checksums declared for the source at one index."""

    index: int
    entries: tuple[ChecksumEntry, ...] = ()

    @property
    def is_secure(self) -> bool:
        return any(entry.is_strong for entry in self.entries)

    @property
    def algorithms(self) -> tuple[Algorithm, ...]:
        return tuple(entry.algorithm for entry in self.entries)


@dataclass(frozen=True, slots=True)
class RecipeSource:
    raw: str
    index: int
    scheme: SchemeTag
    filename_override: str | None = None
    vcs_params: Mapping[str, str] = field(default_factory=dict, hash=False)
    url: str = ""
    signed: bool = False

    def __post_init__(self) -> None:
        object.__setattr__(self, "vcs_params", MappingProxyType(dict(self.vcs_params)))

    @property
    def filename(self) -> str:
        """Name makepkg stores the download under."""
        if self.filename_override:
            return self.filename_override
        return self.url.rstrip("/").rsplit("/", 1)[-1]

    @property
    def is_signature_file(self) -> bool:
        name = self.filename_override or self.url
        return name.endswith(SIGNATURE_EXTENSIONS)


__all__ = [
    "Algorithm",
    "Bzr",
    "ChecksumEntry",
    "ChecksumSet",
    "Git",
    "Hg",
    "PlainUrl",
    "RecipeSource",
    "SIGNATURE_EXTENSIONS",
    "SKIP",
    "STRONG_ALGORITHMS",
    "SchemeTag",
    "Skip",
    "Svn",
    "Unknown",
    "VcsScheme",
]
