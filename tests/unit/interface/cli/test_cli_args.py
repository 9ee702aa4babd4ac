from __future__ import annotations

"""
Unit tests for the CLI argument schema and override mapping.
"""

import pytest

from scriptnotify.interface.cli.args import (
    CMD_DUMP_CONFIG,
    CMD_NOTIFY,
    CMD_SYNC,
    args_to_overrides,
    build_parser,
)


def test_command_is_required() -> None:
    with pytest.raises(SystemExit) as exc:
        build_parser().parse_args([])

    assert exc.value.code == 2


def test_sync_flags() -> None:
    args = build_parser().parse_args(
        ["--debug", CMD_SYNC, "--url", "https://h/repo.json.gz", "-o", "out.json", "--dry-run", "--json"]
    )

    assert args.debug is True
    assert args.command == CMD_SYNC
    assert args.dry_run is True
    assert args.json_output is True

    overrides = args_to_overrides(args)
    assert overrides["repo_index_url"] == "https://h/repo.json.gz"
    assert overrides["index_path"] == "out.json"
    assert overrides["event_path"] is None


def test_notify_flags() -> None:
    args = build_parser().parse_args(
        [CMD_NOTIFY, "--event", "e.json", "--index", "i.json", "--delay", "0.25", "--locale", "en"]
    )

    overrides = args_to_overrides(args)

    assert overrides == {
        "repo_index_url": None,
        "index_path": "i.json",
        "event_path": "e.json",
        "post_delay_seconds": 0.25,
        "locale": "en",
    }


def test_notify_rejects_unknown_locale() -> None:
    with pytest.raises(SystemExit):
        build_parser().parse_args([CMD_NOTIFY, "--locale", "fr"])


def test_dump_config_has_no_overrides() -> None:
    args = build_parser().parse_args(["--log-file", "run.log", CMD_DUMP_CONFIG])

    assert args.log_file == "run.log"
    assert all(v is None for v in args_to_overrides(args).values())
