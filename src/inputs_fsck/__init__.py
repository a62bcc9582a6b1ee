"""Audit PKGBUILD recipes for cryptographically unpinned inputs."""

from .errors import (
    ConfigError,
    FsckError,
    RecipeError,
    TraversalError,
    ValidationError,
)
from .issues import ISSUE_KINDS, Finding, Issue, IssueKind, supported_issues
from .ledger import Ledger, align
from .models import (
    Algorithm,
    Bzr,
    ChecksumEntry,
    ChecksumSet,
    Git,
    Hg,
    PlainUrl,
    RecipeSource,
    SKIP,
    Svn,
    Unknown,
)
from .policy import ScanPolicy
from .recipe import extract
from .rules import evaluate
from .scan import RecipeReport, scan_recipe
from .sources import classify

__all__ = [
    "Algorithm",
    "Bzr",
    "ChecksumEntry",
    "ChecksumSet",
    "ConfigError",
    "Finding",
    "FsckError",
    "Git",
    "Hg",
    "ISSUE_KINDS",
    "Issue",
    "IssueKind",
    "Ledger",
    "PlainUrl",
    "RecipeError",
    "RecipeReport",
    "RecipeSource",
    "SKIP",
    "ScanPolicy",
    "Svn",
    "TraversalError",
    "Unknown",
    "ValidationError",
    "align",
    "classify",
    "evaluate",
    "extract",
    "scan_recipe",
    "supported_issues",
]
