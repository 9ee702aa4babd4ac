from __future__ import annotations

"""
Notification Dispatcher.

Routes one discussion comment event to the authors of the commented script.
Each author is handled in sequence: resolve (or create) the author's channel,
post the notice, then pause before the next author to stay under the API
abuse-detection thresholds. A failure for one author never stops the loop.
"""

import logging
import time
from typing import Any, Callable, Iterable, Mapping, Optional, Union

import requests

from scriptnotify.core.services.channel_resolver import ChannelResolver
from scriptnotify.domain import dispatch_models as dm
from scriptnotify.domain.config import NotifierConfig
from scriptnotify.domain.dispatch_models import DispatchReport
from scriptnotify.domain.event_models import NotificationEvent
from scriptnotify.domain.tree_models import PathAuthorEntry
from scriptnotify.infra.network.graphql_client import (
    ADD_DISCUSSION_COMMENT_MUTATION,
    GitHubGraphQLClient,
    GraphQLError,
)
from scriptnotify.utils.i18n import I18n

logger = logging.getLogger(__name__)

AuthorIndex = Union[Iterable[PathAuthorEntry], Mapping[str, PathAuthorEntry]]

_DEFAULT_NOTICE = (
    "🔔 **Script comment notice**\n\n@{author}\n\n"
    "📁 **Script path:** \n`{script_path}`\n\n"
    "💬 **Comment:**\n{comment_body}\n\n"
    "👤 **Commenter:** {commenter}\n\n"
    "🔗 **Discussion:** [#{number}]({url})"
)


# ==============================================================================
# PUBLIC API
# ==============================================================================

def author_from_link(link: str) -> str:
    """Return the author login, i.e. the final segment of a profile link."""
    return link.rstrip("/").split("/")[-1]


def compose_notice(author: str, script_path: str, event: NotificationEvent, i18n: I18n) -> str:
    """
    Render the notice posted to an author's channel.

    The comment body is embedded verbatim.
    """
    discussion = event.discussion
    comment = event.comment
    return i18n.t(
        "notice.body",
        default=_DEFAULT_NOTICE,
        author=author,
        script_path=script_path,
        comment_body=comment.body if comment else "",
        commenter=comment.user.login if comment and comment.user else "",
        number=discussion.number if discussion else "",
        url=discussion.html_url if discussion else "",
    )


class NotificationDispatcher:
    """
    Fans a comment event out to the dedicated channels of the script's authors.
    """

    def __init__(
            self,
            client: GitHubGraphQLClient,
            config: NotifierConfig,
            resolver: Optional[ChannelResolver] = None,
            sleep: Callable[[float], None] = time.sleep,
            i18n: Optional[I18n] = None,
    ) -> None:
        self._client = client
        self._config = config
        self._i18n = i18n or I18n(config.locale)
        self._resolver = resolver or ChannelResolver(client, config, self._i18n)
        self._sleep = sleep

    def dispatch(self, event: NotificationEvent, index: AuthorIndex) -> DispatchReport:
        """
        Notify every author of the script the event's discussion belongs to.

        Args:
            event: Parsed inbound comment event.
            index: Author index rows, or a path-keyed mapping of them.

        Returns:
            DispatchReport: What was filtered, notified, skipped or failed.
        """
        discussion = event.discussion
        comment = event.comment

        if discussion is None:
            logger.info("Dispatch: Event has no discussion data.")
            return dm.skipped_report(dm.REASON_NO_DISCUSSION)
        if comment is None:
            logger.info("Dispatch: Event has no comment data.")
            return dm.skipped_report(dm.REASON_NO_COMMENT)
        if comment.user is None:
            logger.info("Dispatch: Event comment has no user data.")
            return dm.skipped_report(dm.REASON_NO_USER)
        if comment.user.is_bot:
            logger.info("Dispatch: Skipping bot comment.")
            return dm.skipped_report(dm.REASON_BOT)
        if _same_id(discussion.id, self._config.hub_discussion_id):
            logger.debug("Dispatch: Comment on the hub discussion, ignored.")
            return dm.skipped_report(dm.REASON_HUB)

        script_path = discussion.title
        if not script_path:
            logger.info("Dispatch: Discussion has no title.")
            return dm.skipped_report(dm.REASON_NO_TITLE)

        entry = _lookup(index, script_path)
        if entry is None:
            logger.info(f"Dispatch: No author information for script '{script_path}'.")
            return dm.skipped_report(dm.REASON_UNKNOWN_PATH, script_path)
        if not entry.author_links:
            logger.info(f"Dispatch: Script '{script_path}' has no authors.")
            return dm.skipped_report(dm.REASON_NO_AUTHORS, script_path)

        report = DispatchReport(status=dm.STATUS_DISPATCHED, script_path=script_path)
        for link in entry.author_links:
            self._notify_author(author_from_link(link), script_path, event, report)

        logger.info(
            f"Dispatch: '{script_path}' done. notified={len(report.notified)} "
            f"failed={len(report.failed)} skipped={len(report.skipped)}"
        )
        return report

    # ------------------------------------------------------------------
    # Per-author fan-out
    # ------------------------------------------------------------------

    def _notify_author(
            self,
            author: str,
            script_path: str,
            event: NotificationEvent,
            report: DispatchReport,
    ) -> None:
        logger.info(f"Dispatch: Sending notice to '{author}'...")

        channel_id = self._resolver.resolve(author)
        if not channel_id:
            logger.warning(f"Dispatch: No channel available for '{author}', skipping.")
            report.skipped.append(author)
            return

        body = compose_notice(author, script_path, event, self._i18n)
        try:
            data = self._client.execute(
                ADD_DISCUSSION_COMMENT_MUTATION,
                {"input": {"discussionId": channel_id, "body": body}},
            )
            url = data["addDiscussionComment"]["comment"]["url"]
            logger.info(f"Dispatch: Notice for '{author}' posted: {url}")
            report.notified.append(author)
        except GraphQLError as e:
            logger.error(f"Dispatch: Failed to notify '{author}': {e}")
            if e.errors:
                logger.error(f"Dispatch: GraphQL errors: {e.errors}")
            report.failed.append(author)
        except requests.exceptions.RequestException as e:
            logger.error(f"Dispatch: Transport failure while notifying '{author}': {e}")
            report.failed.append(author)
        except (KeyError, TypeError) as e:
            logger.error(f"Dispatch: Unexpected response while notifying '{author}': {e!r}")
            report.failed.append(author)

        self._sleep(self._config.post_delay_seconds)


# ==============================================================================
# PRIVATE HELPERS
# ==============================================================================

def _same_id(value: Any, sentinel: str) -> bool:
    """Compare webhook ids loosely, so that 2 and '2' are equal."""
    if value is None or not sentinel:
        return False
    return str(value).strip() == str(sentinel).strip()


def _lookup(index: AuthorIndex, script_path: str) -> Optional[PathAuthorEntry]:
    """Find the index row for a path; the first matching row wins."""
    if isinstance(index, Mapping):
        return index.get(script_path)
    for entry in index:
        if entry.path == script_path:
            return entry
    return None
