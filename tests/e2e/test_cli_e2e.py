from __future__ import annotations

"""
End-to-End (E2E) CLI Tests.

Verifies the application's external behavior: argument parsing, exit codes,
stream output (stdout/stderr), and file system side effects (the author
index). Process-level checks invoke the entry point script via subprocess;
flows that would reach the network run in-process with the HTTP
collaborators patched out.
"""

import json
import os
import subprocess
import sys
from pathlib import Path
from typing import Any, Dict, List
from unittest.mock import patch

import pytest
import requests

from scriptnotify.domain.tree_models import PathAuthorEntry
from scriptnotify.infra.fs import save_author_index
from scriptnotify.infra.network import RepoFetchError
from scriptnotify.interface.cli.app import main

PROJECT_ROOT = Path(__file__).resolve().parent.parent.parent
SRC_DIR = PROJECT_ROOT / "src"
ENTRY_POINT = SRC_DIR / "scriptnotify" / "main.py"

pytestmark = pytest.mark.usefixtures("clean_root_logger")


def run_cli(args: List[str], extra_env: Dict[str, str] | None = None) -> subprocess.CompletedProcess[str]:
    """
    Execute the CLI in a separate process.

    Injects the 'src' directory into PYTHONPATH and strips credentials from
    the inherited environment so that no real API call can happen.
    """
    env = {k: v for k, v in os.environ.items() if k != "GITHUB_TOKEN" and not k.startswith("SCRIPTNOTIFY_")}
    env["PYTHONPATH"] = str(SRC_DIR) + os.pathsep + env.get("PYTHONPATH", "")
    env.update(extra_env or {})

    cmd = [sys.executable, str(ENTRY_POINT)] + args

    return subprocess.run(
        cmd,
        env=env,
        capture_output=True,
        text=True,
        encoding="utf-8",
    )


@pytest.fixture
def notify_env(tmp_path: Path, comment_payload: Dict[str, Any]) -> Dict[str, str]:
    """Write an event payload and an author index; return the matching environment."""
    event_file = tmp_path / "event.json"
    event_file.write_text(json.dumps(comment_payload), encoding="utf-8")

    index_file = tmp_path / "author_mapping.json"
    save_author_index(
        str(index_file),
        [PathAuthorEntry("scripts/foo.js", ["https://github.com/alice", "https://github.com/carol"])],
    )

    return {
        "GITHUB_TOKEN": "test-token",
        "GITHUB_EVENT_PATH": str(event_file),
        "SCRIPTNOTIFY_INDEX_PATH": str(index_file),
        "SCRIPTNOTIFY_REPOSITORY": "octo/discussions",
        "SCRIPTNOTIFY_POST_DELAY": "0",
        "SCRIPTNOTIFY_LOCALE": "en",
    }


def _channel_exists(variables: Dict[str, Any]) -> Dict[str, Any]:
    author = variables["searchQuery"].rsplit(": ", 1)[1].rstrip('"')
    return {"search": {"nodes": [{"id": f"D_{author}", "title": f"Author notice: {author}", "number": 1}]}}


# -----------------------------------------------------------------------------
# PROCESS LEVEL
# -----------------------------------------------------------------------------

def test_cli_dump_config_subprocess() -> None:
    """TC-01: dump-config prints the effective configuration as JSON."""
    result = run_cli(["dump-config"], {"GITHUB_TOKEN": "secret", "SCRIPTNOTIFY_POST_DELAY": "3"})

    assert result.returncode == 0, f"CLI failed: {result.stderr}"
    data = json.loads(result.stdout)
    assert data["token"] == "***"
    assert data["post_delay_seconds"] == 3.0
    assert "secret" not in result.stdout


def test_cli_notify_without_token_subprocess(tmp_path: Path) -> None:
    """TC-02: notify refuses to run without a credential."""
    result = run_cli(["notify", "--event", str(tmp_path / "event.json")])

    assert result.returncode == 1
    assert "GITHUB_TOKEN" in result.stderr


def test_cli_requires_command_subprocess() -> None:
    result = run_cli([])

    assert result.returncode == 2


# -----------------------------------------------------------------------------
# NOTIFY
# -----------------------------------------------------------------------------

def test_notify_dispatches_to_every_author(notify_env, graphql_client) -> None:
    """TC-03: A comment event reaches each author's channel."""
    graphql_client.on("SearchDiscussions", _channel_exists)
    graphql_client.on(
        "AddDiscussionComment",
        lambda v: {"addDiscussionComment": {"comment": {"id": "C", "url": "https://x/c"}}},
    )

    with patch("scriptnotify.interface.cli.app.GitHubGraphQLClient", return_value=graphql_client) as factory:
        code = main(["notify"], environ=notify_env)

    assert code == 0
    factory.assert_called_once()
    assert factory.call_args.args[0] == "test-token"

    posts = graphql_client.calls_for("AddDiscussionComment")
    assert [p["input"]["discussionId"] for p in posts] == ["D_alice", "D_carol"]
    assert "nice!" in posts[0]["input"]["body"]


def test_notify_bad_event_payload(notify_env, tmp_path: Path, capsys) -> None:
    bad = tmp_path / "broken.json"
    bad.write_text("{oops", encoding="utf-8")

    with patch("scriptnotify.interface.cli.app.GitHubGraphQLClient") as factory:
        code = main(["notify", "--event", str(bad)], environ=notify_env)

    assert code == 1
    factory.assert_not_called()
    assert "ERROR" in capsys.readouterr().err


def test_notify_without_index_is_a_soft_exit(notify_env, tmp_path: Path) -> None:
    with patch("scriptnotify.interface.cli.app.GitHubGraphQLClient") as factory:
        code = main(["notify", "--index", str(tmp_path / "absent.json")], environ=notify_env)

    assert code == 0
    factory.assert_not_called()


def test_notify_bot_comment_sends_nothing(notify_env, graphql_client, comment_payload) -> None:
    comment_payload["comment"]["user"]["type"] = "Bot"
    Path(notify_env["GITHUB_EVENT_PATH"]).write_text(json.dumps(comment_payload), encoding="utf-8")

    with patch("scriptnotify.interface.cli.app.GitHubGraphQLClient", return_value=graphql_client):
        code = main(["notify"], environ=notify_env)

    assert code == 0
    assert graphql_client.calls == []


# -----------------------------------------------------------------------------
# SYNC
# -----------------------------------------------------------------------------

def test_sync_writes_index(tmp_path: Path, repo_document, capsys) -> None:
    """TC-04: sync downloads the tree, writes the index and reports statistics."""
    out = tmp_path / "assets" / "author_mapping.json"

    with patch("scriptnotify.interface.cli.app.fetch_repo_index", return_value=repo_document):
        code = main(["sync", "-o", str(out), "--json"], environ={"SCRIPTNOTIFY_LOCALE": "en"})

    assert code == 0
    report = json.loads(capsys.readouterr().out)
    assert report["output"] == os.path.abspath(out)
    assert report["total"] == report["with_authors"] + report["without_authors"]

    rows = {r["path"]: r["authorLinks"] for r in json.loads(out.read_text(encoding="utf-8"))}
    assert "js/AutoFish/main.js" in rows
    assert "pathing/mining" in rows
    assert "pathing/mining/route1.json" not in rows


def test_sync_dry_run_writes_nothing(tmp_path: Path, repo_document, capsys) -> None:
    out = tmp_path / "author_mapping.json"

    with patch("scriptnotify.interface.cli.app.fetch_repo_index", return_value=repo_document):
        code = main(["sync", "-o", str(out), "--dry-run"], environ={})

    assert code == 0
    assert not out.exists()
    assert capsys.readouterr().out.strip()


@pytest.mark.parametrize(
    "error",
    [requests.exceptions.ConnectionError("offline"), RepoFetchError("not gzip")],
)
def test_sync_download_failure(tmp_path: Path, error: Exception) -> None:
    out = tmp_path / "author_mapping.json"

    with patch("scriptnotify.interface.cli.app.fetch_repo_index", side_effect=error):
        code = main(["sync", "-o", str(out)], environ={})

    assert code == 1
    assert not out.exists()


def test_sync_unwritable_output(tmp_path: Path, repo_document, capsys) -> None:
    out = tmp_path / "author_mapping.json"

    with patch("scriptnotify.interface.cli.app.fetch_repo_index", return_value=repo_document), \
            patch("scriptnotify.interface.cli.app.save_author_index", side_effect=OSError("read-only")):
        code = main(["sync", "-o", str(out)], environ={})

    assert code == 1
    assert not out.exists()
    assert "read-only" in capsys.readouterr().err


# -----------------------------------------------------------------------------
# SUPERVISOR
# -----------------------------------------------------------------------------

def test_interrupt_exits_130(notify_env, capsys) -> None:
    with patch("scriptnotify.interface.cli.app._run_notify", side_effect=KeyboardInterrupt):
        code = main(["notify"], environ=notify_env)

    assert code == 130
    assert capsys.readouterr().err.strip()


def test_supervisor_turns_crashes_into_exit_code_1(capsys) -> None:
    from scriptnotify import main as supervisor

    with patch.object(sys, "excepthook"), \
            patch("scriptnotify.interface.cli.app.main", side_effect=RuntimeError("boom")):
        with pytest.raises(SystemExit) as exc:
            supervisor.main()

    assert exc.value.code == 1
    assert "boom" in capsys.readouterr().err
