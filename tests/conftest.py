from __future__ import annotations

"""
Global Pytest Configuration and Fixtures.

This module sets up the testing environment, including:
1. Path manipulation to ensure the 'src' directory is importable.
2. Shared fixtures: a validated configuration, a scripted GraphQL client
   double, and sample upstream tree / webhook payloads.
"""

import logging
import os
import sys
from logging.handlers import QueueListener
from typing import Any, Callable, Dict, Iterator, List, Optional, Tuple

import pytest

# -----------------------------------------------------------------------------
# Path Configuration
# -----------------------------------------------------------------------------
_SRC_PATH = os.path.abspath(os.path.join(os.path.dirname(__file__), "..", "src"))
if _SRC_PATH not in sys.path:
    sys.path.insert(0, _SRC_PATH)

from scriptnotify.domain.config import NotifierConfig  # noqa: E402
from scriptnotify.infra.logging import (  # noqa: E402
    _CONFIGURED_FLAG_ATTR,
    _HANDLER_TAG_ATTR,
    _QUEUE_LISTENER_ATTR,
)


# -----------------------------------------------------------------------------
# Test Doubles
# -----------------------------------------------------------------------------
class ScriptedGraphQLClient:
    """
    Stand-in for GitHubGraphQLClient.

    Each call is recorded as (operation, variables). Responses are produced
    by a handler keyed on the GraphQL operation name; a handler may return a
    data dict or raise.
    """

    def __init__(self) -> None:
        self.calls: List[Tuple[str, Dict[str, Any]]] = []
        self.handlers: Dict[str, Callable[[Dict[str, Any]], Dict[str, Any]]] = {}

    def on(self, operation: str, handler: Callable[[Dict[str, Any]], Dict[str, Any]]) -> None:
        self.handlers[operation] = handler

    def execute(self, query: str, variables: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
        operation = _operation_name(query)
        variables = variables or {}
        self.calls.append((operation, variables))
        return self.handlers[operation](variables)

    def calls_for(self, operation: str) -> List[Dict[str, Any]]:
        return [v for op, v in self.calls if op == operation]

    def close(self) -> None:
        pass


def _operation_name(query: str) -> str:
    for token in ("SearchDiscussions", "CreateDiscussion", "AddDiscussionComment"):
        if token in query:
            return token
    raise AssertionError(f"Unexpected GraphQL document: {query[:40]}")


# -----------------------------------------------------------------------------
# Shared Fixtures
# -----------------------------------------------------------------------------
@pytest.fixture
def notifier_config() -> NotifierConfig:
    """Return a configuration with no pacing delay and the 'en' templates."""
    return NotifierConfig(
        token="test-token",
        event_path="",
        index_path="assets/author_mapping.json",
        repository_owner="octo",
        repository_name="discussions",
        repository_id="R_test",
        category_id="DIC_test",
        hub_discussion_id="2",
        search_page_size=10,
        post_delay_seconds=0.0,
        locale="en",
    )


@pytest.fixture
def clean_root_logger() -> Iterator[None]:
    """Tear down handlers and the queue listener installed by configure_logging."""
    _reset_root_logger()
    yield
    _reset_root_logger()


def _reset_root_logger() -> None:
    root = logging.getLogger()

    listener = getattr(root, _QUEUE_LISTENER_ATTR, None)
    if isinstance(listener, QueueListener):
        if getattr(listener, "_thread", None) is not None:
            listener.stop()
        setattr(root, _QUEUE_LISTENER_ATTR, None)

    for h in list(root.handlers):
        if getattr(h, _HANDLER_TAG_ATTR, False):
            root.removeHandler(h)
            h.close()

    if hasattr(root, _CONFIGURED_FLAG_ATTR):
        delattr(root, _CONFIGURED_FLAG_ATTR)


@pytest.fixture
def graphql_client() -> ScriptedGraphQLClient:
    return ScriptedGraphQLClient()


@pytest.fixture
def comment_payload() -> Dict[str, Any]:
    """Return a webhook payload for a user comment on 'scripts/foo.js'."""
    return {
        "action": "created",
        "discussion": {
            "id": 99,
            "number": 5,
            "title": "scripts/foo.js",
            "html_url": "https://x/5",
        },
        "comment": {
            "body": "nice!",
            "user": {"login": "bob", "type": "User"},
        },
    }


@pytest.fixture
def repo_document() -> Dict[str, Any]:
    """Return a small upstream repository document."""
    return {
        "time": "20250101000000",
        "indexes": [
            {
                "name": "js",
                "type": "directory",
                "children": [
                    {
                        "name": "AutoFish",
                        "type": "directory",
                        "children": [
                            {
                                "name": "main.js",
                                "type": "file",
                                "authors": [{"name": "Alice", "link": "https://github.com/alice"}],
                            },
                            {
                                "name": "manifest.json",
                                "type": "file",
                                "authors": [
                                    {"name": "Bob", "link": "https://github.com/bob"},
                                    {"name": "Nobody", "link": "  "},
                                ],
                            },
                        ],
                    },
                ],
            },
            {
                "name": "pathing",
                "type": "directory",
                "children": [
                    {
                        "name": "mining",
                        "type": "directory",
                        "authors": [{"name": "Carol", "link": "https://github.com/carol"}],
                        "children": [
                            {
                                "name": "route1.json",
                                "type": "file",
                                "authors": [{"name": "Dave", "link": "https://github.com/dave"}],
                            },
                        ],
                    },
                ],
            },
        ],
    }
