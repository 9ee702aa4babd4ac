from __future__ import annotations

"""
Author Channel Resolution Service.

Maps an author login to the node id of that author's dedicated notification
discussion, creating the discussion on first use. The localized channel
title acts as the natural key: it is used both to search for an existing
channel and to name a new one.

Search-then-create is not atomic. Two runs racing on a brand new author may
each create a channel; later searches simply pick the first match.
"""

import logging
from typing import Any, Dict, List, Optional

import requests

from scriptnotify.domain.config import NotifierConfig
from scriptnotify.infra.network.graphql_client import (
    CREATE_DISCUSSION_MUTATION,
    SEARCH_DISCUSSIONS_QUERY,
    GitHubGraphQLClient,
    GraphQLError,
)
from scriptnotify.utils.i18n import I18n

logger = logging.getLogger(__name__)

# Malformed GraphQL payloads surface as lookup/type errors while unpacking
_RESPONSE_ERRORS = (KeyError, TypeError, ValueError)


class ChannelResolver:
    """
    Get-or-create resolver for per-author notification channels.
    """

    def __init__(
            self,
            client: GitHubGraphQLClient,
            config: NotifierConfig,
            i18n: Optional[I18n] = None,
    ) -> None:
        self._client = client
        self._config = config
        self._i18n = i18n or I18n(config.locale)

    def channel_title(self, author: str) -> str:
        """Render the marker title that identifies an author's channel."""
        return self._i18n.t("channel.title", default="Author notice: {author}", author=author)

    def resolve(self, author: str) -> Optional[str]:
        """
        Return the node id of the author's channel, creating it if needed.

        Args:
            author: Author login (final segment of the profile link).

        Returns:
            Optional[str]: Discussion node id, or None when the lookup or the
                           creation failed. Never raises.
        """
        title = self.channel_title(author)
        try:
            existing = self._search(title)
            if existing is not None:
                logger.info(
                    f"Resolver: Found channel for '{author}': #{existing.get('number')}"
                )
                return str(existing["id"])

            logger.info(f"Resolver: Creating channel for '{author}'...")
            created = self._create(author, title)
            logger.info(
                f"Resolver: Channel for '{author}' created: "
                f"#{created.get('number')} - {created.get('url')}"
            )
            return str(created["id"])

        except GraphQLError as e:
            logger.error(f"Resolver: Failed to get or create channel for '{author}': {e}")
            if e.errors:
                logger.error(f"Resolver: GraphQL errors: {e.errors}")
        except requests.exceptions.RequestException as e:
            logger.error(f"Resolver: Transport failure for '{author}': {e}")
        except _RESPONSE_ERRORS as e:
            logger.error(f"Resolver: Unexpected response shape for '{author}': {e!r}")

        return None

    # ------------------------------------------------------------------
    # GraphQL operations
    # ------------------------------------------------------------------

    def _search(self, title: str) -> Optional[Dict[str, Any]]:
        """Return the first discussion whose title equals the marker."""
        query = f'repo:{self._config.repository} in:title "{title}"'
        data = self._client.execute(
            SEARCH_DISCUSSIONS_QUERY,
            {"searchQuery": query, "first": self._config.search_page_size},
        )
        nodes: List[Any] = data["search"]["nodes"] or []
        for node in nodes:
            if isinstance(node, dict) and node.get("title") == title and node.get("id"):
                return node
        return None

    def _create(self, author: str, title: str) -> Dict[str, Any]:
        body = self._i18n.t(
            "channel.body",
            default="Dedicated notification thread of @{author}.",
            author=author,
        )
        data = self._client.execute(
            CREATE_DISCUSSION_MUTATION,
            {
                "input": {
                    "repositoryId": self._config.repository_id,
                    "categoryId": self._config.category_id,
                    "title": title,
                    "body": body,
                }
            },
        )
        discussion = data["createDiscussion"]["discussion"]
        if not isinstance(discussion, dict) or not discussion.get("id"):
            raise GraphQLError("createDiscussion returned no discussion")
        return discussion
