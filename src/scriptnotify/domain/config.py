from __future__ import annotations

"""
Configuration Domain Model.

Defines the immutable runtime configuration injected into the channel
resolver and the dispatcher, together with the default values and the
environment variable mapping used to populate it.
"""

import logging
from dataclasses import asdict, dataclass
from typing import Any, Dict, Mapping

from scriptnotify.domain import constants as c

logger = logging.getLogger(__name__)

# -----------------------------------------------------------------------------
# ENVIRONMENT MAPPING
# -----------------------------------------------------------------------------

ENV_KEYS: Dict[str, str] = {
    "token": "GITHUB_TOKEN",
    "event_path": "GITHUB_EVENT_PATH",
    "graphql_url": "GITHUB_GRAPHQL_URL",
    "index_path": "SCRIPTNOTIFY_INDEX_PATH",
    "repo_index_url": "SCRIPTNOTIFY_REPO_INDEX_URL",
    "repository": "SCRIPTNOTIFY_REPOSITORY",
    "repository_id": "SCRIPTNOTIFY_REPOSITORY_ID",
    "category_id": "SCRIPTNOTIFY_CATEGORY_ID",
    "hub_discussion_id": "SCRIPTNOTIFY_HUB_DISCUSSION_ID",
    "search_page_size": "SCRIPTNOTIFY_SEARCH_PAGE_SIZE",
    "post_delay_seconds": "SCRIPTNOTIFY_POST_DELAY",
    "locale": "SCRIPTNOTIFY_LOCALE",
}

# -----------------------------------------------------------------------------
# CONFIGURATION MODEL
# -----------------------------------------------------------------------------

@dataclass(frozen=True)
class NotifierConfig:
    """
    Validated process-wide configuration.

    Attributes:
        token: GitHub credential used for GraphQL calls.
        event_path: Location of the webhook event payload.
        index_path: Location of the persisted author index.
        repo_index_url: URL of the gzipped upstream script tree.
        repository_owner: Owner of the repository hosting author channels.
        repository_name: Name of the repository hosting author channels.
        repository_id: GraphQL node id of that repository.
        category_id: GraphQL node id of the channel discussion category.
        hub_discussion_id: Discussion id whose comments are never forwarded.
        search_page_size: Upper bound of channel search results.
        post_delay_seconds: Pause after every comment post attempt.
        locale: Locale of the channel and notice templates.
        graphql_url: GraphQL endpoint.
        timeout: HTTP timeout in seconds.
    """
    token: str = ""
    event_path: str = ""
    index_path: str = c.DEFAULT_INDEX_PATH
    repo_index_url: str = c.REPO_INDEX_URL
    repository_owner: str = c.REPOSITORY_OWNER
    repository_name: str = c.REPOSITORY_NAME
    repository_id: str = c.REPOSITORY_ID
    category_id: str = c.CATEGORY_ID
    hub_discussion_id: str = c.HUB_DISCUSSION_ID
    search_page_size: int = c.SEARCH_PAGE_SIZE
    post_delay_seconds: float = c.POST_DELAY_SECONDS
    locale: str = c.DEFAULT_LOCALE
    graphql_url: str = c.GRAPHQL_URL
    timeout: int = c.DEFAULT_TIMEOUT

    @property
    def repository(self) -> str:
        return f"{self.repository_owner}/{self.repository_name}"

    def redacted(self) -> Dict[str, Any]:
        """Return a JSON-friendly view with the credential masked."""
        data = asdict(self)
        data["token"] = "***" if self.token else ""
        return data


def get_default_config() -> Dict[str, Any]:
    """
    Generate the default raw configuration dictionary.

    Returns:
        Dict[str, Any]: Default values keyed like the validator input.
    """
    defaults = asdict(NotifierConfig())
    defaults["repository"] = f"{c.REPOSITORY_OWNER}/{c.REPOSITORY_NAME}"
    del defaults["repository_owner"]
    del defaults["repository_name"]
    return defaults


def config_from_environ(environ: Mapping[str, str]) -> Dict[str, Any]:
    """
    Extract raw configuration values from process environment variables.

    Only variables that are present are returned, so that absent ones fall
    back to defaults during validation.
    """
    raw: Dict[str, Any] = {}
    for key, env_name in ENV_KEYS.items():
        if env_name in environ:
            raw[key] = environ[env_name]
    logger.debug(f"Config: {len(raw)} value(s) sourced from environment.")
    return raw
