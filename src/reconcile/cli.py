#!/usr/bin/env python3
"""CLI for policy list reconciliation."""

import argparse
import sys
from dataclasses import replace
from pathlib import Path

from common.logger import error, get_logger, setup_logging, success, warning
from derive import DepartmentResolver
from sharepoint import StoreConfig, SyncError

from .main import RunConfig, load_whitelist, run_sync
from .models import SyncMode, SyncOptions, UpsertPolicy

logger = get_logger(__name__)


def build_config(args) -> RunConfig:
    """Apply command-line overrides on top of the environment configuration."""
    config = RunConfig.from_env()

    if args.site_url:
        config.site_url = args.site_url.rstrip("/")
    if args.list_name:
        config.list_name = args.list_name
    if args.query:
        config.search_query = args.query
    if args.whitelist:
        config.whitelist_path = args.whitelist
    if args.no_whitelist:
        config.whitelist_path = None

    options = config.options
    config.options = SyncOptions(
        upsert_policy=args.policy or options.upsert_policy,
        mode=args.mode or options.mode,
        allowed_extensions=options.allowed_extensions,
        dry_run=args.dry_run,
    )

    if args.store_path:
        config.store = StoreConfig(store_type="sqlite", db_path=args.store_path)
    elif args.store:
        config.store = replace(config.store, store_type=args.store)

    return config


def cmd_run(args):
    """Run one reconciliation.

    Returns:
        Exit code (0 for success, 1 for aborted runs or row errors)
    """
    setup_logging(level="DEBUG" if args.verbose else "INFO", log_file=args.log_file)

    try:
        config = build_config(args)
    except ValueError as e:
        error(f"Invalid configuration: {e}")
        return 1

    if not config.site_url:
        error("No site URL configured (set SHAREPOINT_SITE_URL or pass --site-url)")
        return 1

    try:
        report = run_sync(config)
    except FileNotFoundError as e:
        error(str(e))
        return 1
    except SyncError as e:
        logger.error(f"Reconciliation aborted: {e}")
        return 1

    if report.has_errors:
        error(f"Completed with {len(report.errors)} row error(s)")
        return 1

    if report.dry_run:
        warning("Dry run: no changes were written to the list")

    success(
        f"{report.upserts} upserted, {report.deletions} deleted, {report.skipped} skipped"
    )
    return 0


def cmd_check_url(args):
    """Show how a document URL resolves to a department."""
    setup_logging(level="WARNING")

    try:
        whitelist = load_whitelist(args.whitelist)
    except FileNotFoundError as e:
        error(str(e))
        return 1

    resolver = DepartmentResolver(whitelist)
    for url in args.urls:
        resolution = resolver.explain(url)
        if resolution.resolved:
            success(f"{url} -> {resolution.department}")
        else:
            error(f"{url} -> {resolution.department} (rejected: {resolution.reason})")
    return 0


def main():
    """Main entry point for the CLI."""
    parser = argparse.ArgumentParser(
        description="Keep the policy/procedure tracking list in sync with search",
    )

    subparsers = parser.add_subparsers(dest="command", required=True)

    run_parser = subparsers.add_parser(
        "run",
        help="Reconcile the tracking list with current search results",
        description=(
            "Reconcile the tracking list with current search results.\n\n"
            "Settings come from the environment (.env supported); flags override them."
        ),
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    run_parser.add_argument("--site-url", help="Site hosting the list (SHAREPOINT_SITE_URL)")
    run_parser.add_argument("--list-name", "-l", help="Target list title (SYNC_LIST_NAME)")
    run_parser.add_argument("--query", "-q", help="Search query text (SYNC_SEARCH_QUERY)")
    whitelist_group = run_parser.add_mutually_exclusive_group()
    whitelist_group.add_argument(
        "--whitelist",
        "-w",
        type=Path,
        help="Department whitelist file (SYNC_WHITELIST_PATH)",
    )
    whitelist_group.add_argument(
        "--no-whitelist",
        action="store_true",
        help="Ignore any configured whitelist",
    )
    run_parser.add_argument(
        "--policy",
        choices=[p.value for p in UpsertPolicy],
        help="Upsert policy (SYNC_UPSERT_POLICY, default: change_gated)",
    )
    run_parser.add_argument(
        "--mode",
        choices=[m.value for m in SyncMode],
        help="Reconciliation mode (SYNC_MODE, default: patch)",
    )
    run_parser.add_argument(
        "--store",
        choices=["sharepoint", "sqlite"],
        help="List store backend (LIST_STORE_TYPE)",
    )
    run_parser.add_argument(
        "--store-path",
        type=Path,
        help="Write to a local SQLite list at this path instead of the remote list",
    )
    run_parser.add_argument(
        "--dry-run",
        action="store_true",
        help="Report what would change without writing to the list",
    )
    run_parser.add_argument("--log-file", help="Also write logs to this file")
    run_parser.add_argument("--verbose", "-v", action="store_true", help="Debug logging")
    run_parser.set_defaults(func=cmd_run)

    check_parser = subparsers.add_parser(
        "check-url", help="Show the department a document URL resolves to"
    )
    check_parser.add_argument("urls", nargs="+", help="Document URL(s)")
    check_parser.add_argument("--whitelist", "-w", type=Path, help="Department whitelist file")
    check_parser.set_defaults(func=cmd_check_url)

    args = parser.parse_args()
    return args.func(args)


if __name__ == "__main__":
    sys.exit(main())
