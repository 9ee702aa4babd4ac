from __future__ import annotations

"""
CLI Argument Definition and Mapping.

Defines the command-line schema (global flags plus the 'sync', 'notify' and
'dump-config' commands) and translates parsed namespaces into configuration
overrides understood by the validator.
"""

import argparse
from typing import Any, Dict

from scriptnotify.domain.constants import SUPPORTED_LOCALES
from scriptnotify.utils.i18n import i18n

CMD_SYNC = "sync"
CMD_NOTIFY = "notify"
CMD_DUMP_CONFIG = "dump-config"

# -----------------------------------------------------------------------------
# ARGUMENT DEFINITION
# -----------------------------------------------------------------------------

def build_parser() -> argparse.ArgumentParser:
    """
    Construct the argument parser for the scriptnotify CLI.

    Returns:
        argparse.ArgumentParser: Configured parser instance.
    """
    p = argparse.ArgumentParser(
        prog="scriptnotify",
        description=i18n.t("app.description", default="Script author index and notifier."),
    )
    p.add_argument(
        "--debug",
        action="store_true",
        help=i18n.t("cli.args.debug", default="Elevate logging verbosity to DEBUG."),
    )
    p.add_argument(
        "--log-file",
        dest="log_file",
        default=None,
        help=i18n.t("cli.args.log_file", default="Additional log file path."),
    )

    sub = p.add_subparsers(dest="command", metavar="COMMAND")
    sub.required = True

    # --- Index synchronization ---
    sync = sub.add_parser(CMD_SYNC, help=i18n.t("cli.args.sync", default="Rebuild the author index."))
    sync.add_argument(
        "--url",
        dest="repo_index_url",
        default=None,
        help=i18n.t("cli.args.url", default="URL of the upstream repo.json.gz."),
    )
    sync.add_argument(
        "-o", "--output",
        dest="index_path",
        default=None,
        help=i18n.t("cli.args.output", default="Author index output path."),
    )
    sync.add_argument(
        "--dry-run",
        action="store_true",
        help=i18n.t("cli.args.dry_run", default="Do not write the index."),
    )
    sync.add_argument(
        "--json",
        dest="json_output",
        action="store_true",
        help=i18n.t("cli.args.json", default="Print statistics as JSON."),
    )

    # --- Comment notification ---
    notify = sub.add_parser(CMD_NOTIFY, help=i18n.t("cli.args.notify", default="Notify script authors."))
    notify.add_argument(
        "--event",
        dest="event_path",
        default=None,
        help=i18n.t("cli.args.event", default="Event payload JSON path."),
    )
    notify.add_argument(
        "--index",
        dest="index_path",
        default=None,
        help=i18n.t("cli.args.index", default="Author index path."),
    )
    notify.add_argument(
        "--delay",
        dest="post_delay_seconds",
        type=float,
        default=None,
        help=i18n.t("cli.args.delay", default="Seconds to wait after every post."),
    )
    notify.add_argument(
        "--locale",
        choices=SUPPORTED_LOCALES,
        default=None,
        help=i18n.t("cli.args.locale", default="Locale of the notification templates."),
    )

    sub.add_parser(
        CMD_DUMP_CONFIG,
        help=i18n.t("cli.args.dump_config", default="Print the effective configuration."),
    )

    return p

# -----------------------------------------------------------------------------
# ARGUMENT MAPPING
# -----------------------------------------------------------------------------

def args_to_overrides(args: argparse.Namespace) -> Dict[str, Any]:
    """
    Translate the argparse Namespace into configuration overrides.

    Options not defined by the selected command are reported as None, which
    the configuration loader ignores.
    """
    return {
        "repo_index_url": getattr(args, "repo_index_url", None),
        "index_path": getattr(args, "index_path", None),
        "event_path": getattr(args, "event_path", None),
        "post_delay_seconds": getattr(args, "post_delay_seconds", None),
        "locale": getattr(args, "locale", None),
    }
