"""Command line entrypoint.

Usage:
    inputs-fsck check [PATH ...] [--all] [-f KIND] [--list]
    inputs-fsck supported-issues
"""

from __future__ import annotations

import argparse
import sys
from collections.abc import Sequence
from dataclasses import replace

from inputs_fsck.config import load_config
from inputs_fsck.errors import FsckError
from inputs_fsck.issues import supported_issues
from inputs_fsck.observability import ScanLogger, configure_logging, get_logger
from inputs_fsck.policy import ScanPolicy, parse_issue_filter
from inputs_fsck.report import format_report
from inputs_fsck.traversal import discover_targets, scan_targets

EXIT_OK = 0
EXIT_FINDINGS = 1
EXIT_ERROR = 2

_log = get_logger(__name__)


def _positive_int(value: str) -> int:
    try:
        number = int(value)
    except ValueError:
        raise argparse.ArgumentTypeError(f"invalid int value: {value!r}") from None
    if number < 1:
        raise argparse.ArgumentTypeError(f"must be at least 1, got {number}")
    return number


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="inputs-fsck",
        description="Verify that PKGBUILD source= inputs are cryptographically pinned",
    )
    parser.add_argument("-v", "--verbose", action="count", default=0, help="More logging")
    parser.add_argument("-q", "--quiet", action="count", default=0, help="Less logging")
    sub = parser.add_subparsers(dest="command", required=True)

    check_p = sub.add_parser("check", help="Check recipes for insecurely pinned inputs")
    check_p.add_argument("paths", nargs="*", default=["."], help="Recipe directories")
    check_p.add_argument(
        "--all",
        action="store_true",
        help="Search the given directories recursively for PKGBUILD files",
    )
    check_p.add_argument(
        "-f",
        "--filter",
        dest="filters",
        action="append",
        default=[],
        metavar="KIND",
        help="Only report issues of this kind (repeatable)",
    )
    check_p.add_argument("--config", help="JSON policy file")
    check_p.add_argument(
        "-j", "--jobs", type=_positive_int, default=None, help="Parallel scan workers"
    )
    check_p.add_argument(
        "--list",
        action="store_true",
        help="Print only the packages with findings, one per line",
    )
    check_p.add_argument(
        "--skip-signatures",
        action="store_true",
        help="Do not require checksums for detached signature files",
    )
    check_p.add_argument(
        "--lenient-submodules",
        action="store_true",
        help="Tolerate unpinned git sources when another git source is pinned",
    )
    check_p.add_argument(
        "--allow-local-files",
        action="store_true",
        help="Do not report sources shipped next to the PKGBUILD",
    )
    check_p.add_argument(
        "--discover-signed-tags",
        action="store_true",
        help="Suggest signed upstream tags for GitHub archive URLs",
    )
    check_p.add_argument("--log-json", help="Write structured scan records to this file")

    sub.add_parser("supported-issues", help="List every issue kind")
    return parser


def policy_from_args(args: argparse.Namespace) -> ScanPolicy:
    policy = load_config(args.config) if args.config else ScanPolicy()
    if args.filters:
        policy = replace(policy, issue_filter=parse_issue_filter(args.filters))
    if args.skip_signatures:
        policy = replace(policy, skip_signature_files=True)
    if args.lenient_submodules:
        policy = replace(policy, lenient_git_submodules=True)
    if args.allow_local_files:
        policy = replace(policy, allow_local_files=True)
    if args.discover_signed_tags:
        policy = replace(policy, discover_signed_tags=True)
    return policy


def cmd_check(args: argparse.Namespace) -> int:
    policy = policy_from_args(args)
    targets = discover_targets(args.paths, recursive=args.all)
    _log.debug("Discovered %d recipe(s)", len(targets))

    logger = ScanLogger()
    reports = scan_targets(targets, policy=policy, jobs=args.jobs, logger=logger)
    if args.log_json:
        logger.to_json_lines(args.log_json)

    output = format_report(reports, machine=args.list)
    if output:
        print(output)
    return EXIT_FINDINGS if any(report.has_findings for report in reports) else EXIT_OK


def cmd_supported_issues(_args: argparse.Namespace) -> int:
    for kind in supported_issues():
        print(kind)
    return EXIT_OK


def main(argv: Sequence[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    configure_logging(verbose=args.verbose, quiet=args.quiet)

    try:
        if args.command == "check":
            return cmd_check(args)
        return cmd_supported_issues(args)
    except FsckError as exc:
        print(f"error: {exc}", file=sys.stderr)
        return EXIT_ERROR


if __name__ == "__main__":
    raise SystemExit(main())
