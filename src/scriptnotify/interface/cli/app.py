from __future__ import annotations

"""
Command Line Interface (CLI) Application Controller.

Orchestrates a single process run: logging bootstrap, configuration
resolution (defaults, environment, CLI overrides), command execution and
exit code mapping. Designed to be driven by CI workflows: one 'sync' run
refreshes the author index, one 'notify' run handles one comment event.
"""

import argparse
import json
import os
import sys
from dataclasses import asdict
from typing import List, Mapping, Optional

import requests

from scriptnotify.core.services.dispatcher import NotificationDispatcher
from scriptnotify.core.services.index_builder import build_author_mapping, summarize_index
from scriptnotify.core.validator import load_config
from scriptnotify.domain.config import NotifierConfig
from scriptnotify.domain.event_models import NotificationEvent
from scriptnotify.infra.fs import (
    EventPayloadError,
    load_author_index,
    load_event_payload,
    save_author_index,
)
from scriptnotify.infra.logging import LoggingConfig, configure_logging, get_logger
from scriptnotify.infra.network import GitHubGraphQLClient, RepoFetchError, fetch_repo_index
from scriptnotify.interface.cli import args as cli_args
from scriptnotify.utils.i18n import i18n

logger = get_logger(__name__)

EXIT_OK = 0
EXIT_FAILURE = 1
EXIT_INTERRUPTED = 130

# -----------------------------------------------------------------------------
# ENTRYPOINT ORCHESTRATOR
# -----------------------------------------------------------------------------

def main(argv: Optional[List[str]] = None, environ: Optional[Mapping[str, str]] = None) -> int:
    """
    Execute the CLI workflow.

    Args:
        argv: Command line arguments. Defaults to sys.argv.
        environ: Environment mapping. Defaults to os.environ.

    Returns:
        int: Process exit code.
    """
    parser = cli_args.build_parser()
    args = parser.parse_args(argv)

    log_level = "DEBUG" if args.debug else "INFO"
    configure_logging(LoggingConfig(level=log_level, console=True, log_file=args.log_file))

    cfg, warnings = load_config(
        os.environ if environ is None else environ,
        cli_args.args_to_overrides(args),
    )
    for w in warnings:
        logger.warning(f"Configuration Constraint: {w}")

    try:
        if args.command == cli_args.CMD_DUMP_CONFIG:
            print(json.dumps(cfg.redacted(), ensure_ascii=False, indent=2))
            return EXIT_OK
        if args.command == cli_args.CMD_SYNC:
            return _run_sync(cfg, args)
        return _run_notify(cfg)

    except KeyboardInterrupt:
        msg = i18n.t("cli.status.interrupted", default="Operation interrupted")
        logger.warning(msg)
        print(msg, file=sys.stderr)
        return EXIT_INTERRUPTED

# -----------------------------------------------------------------------------
# COMMANDS
# -----------------------------------------------------------------------------

def _run_sync(cfg: NotifierConfig, args: argparse.Namespace) -> int:
    """Download the upstream tree, rebuild the index and persist it."""
    logger.info("Sync: Starting author index synchronization...")
    try:
        repo_data = fetch_repo_index(cfg.repo_index_url, timeout=cfg.timeout)
    except (requests.exceptions.RequestException, RepoFetchError) as e:
        msg = i18n.t("cli.errors.sync_failed", default="Sync failed: {error}", error=str(e))
        logger.error(msg)
        print(f"ERROR: {msg}", file=sys.stderr)
        return EXIT_FAILURE

    entries = build_author_mapping(repo_data)
    summary = summarize_index(entries)

    written = ""
    if not args.dry_run:
        try:
            written = save_author_index(cfg.index_path, entries)
        except OSError as e:
            msg = i18n.t("cli.errors.sync_failed", default="Sync failed: {error}", error=str(e))
            logger.error(msg)
            print(f"ERROR: {msg}", file=sys.stderr)
            return EXIT_FAILURE

    if args.json_output:
        report = asdict(summary)
        report["output"] = written
        print(json.dumps(report, ensure_ascii=False, indent=2))
        return EXIT_OK

    if written:
        print(i18n.t("cli.status.sync_done", default="Author mapping written to {path}", path=written))
    else:
        print(i18n.t("cli.status.sync_dry_run", default="Dry run: index file not written"))
    print(i18n.t("cli.status.stats_title", default="Statistics:"))
    print(i18n.t("cli.status.stats_with", default="- With authors: {count}", count=summary.with_authors))
    print(i18n.t("cli.status.stats_without", default="- Without authors: {count}", count=summary.without_authors))
    print(i18n.t("cli.status.stats_total", default="- Total: {count}", count=summary.total))
    return EXIT_OK


def _run_notify(cfg: NotifierConfig) -> int:
    """Route one comment event to the authors of the commented script."""
    if not cfg.token:
        msg = i18n.t("cli.errors.missing_token", default="GITHUB_TOKEN is not set")
        logger.error(msg)
        print(f"ERROR: {msg}", file=sys.stderr)
        return EXIT_FAILURE

    try:
        payload = load_event_payload(cfg.event_path)
    except EventPayloadError as e:
        msg = i18n.t("cli.errors.event_unreadable", default="Could not read event payload: {error}", error=str(e))
        logger.error(msg)
        print(f"ERROR: {msg}", file=sys.stderr)
        return EXIT_FAILURE

    event = NotificationEvent.from_payload(payload)

    index = load_author_index(cfg.index_path)
    if index is None:
        logger.info("Notify: Author index unavailable, nothing to notify.")
        return EXIT_OK

    client = GitHubGraphQLClient(cfg.token, endpoint=cfg.graphql_url, timeout=cfg.timeout)
    try:
        report = NotificationDispatcher(client, cfg).dispatch(event, index)
    finally:
        client.close()

    if report.reason:
        logger.info(f"Notify: Event skipped ({report.reason}).")
    return EXIT_OK

# -----------------------------------------------------------------------------
# CLI ENTRYPOINT
# -----------------------------------------------------------------------------

if __name__ == "__main__":
    sys.exit(main())
