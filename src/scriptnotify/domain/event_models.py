from __future__ import annotations

"""
Notification Event Data Models.

Defines the read-only view of the inbound discussion comment webhook payload.
Only the fields consumed by the dispatcher are modelled.
"""

from dataclasses import dataclass
from typing import Any, Optional

from scriptnotify.domain.constants import BOT_USER_TYPE


@dataclass(frozen=True)
class CommentUser:
    login: str
    type: str

    @property
    def is_bot(self) -> bool:
        return self.type == BOT_USER_TYPE


@dataclass(frozen=True)
class Comment:
    body: str
    user: Optional[CommentUser]


@dataclass(frozen=True)
class Discussion:
    """
    The discussion the comment was posted on.

    Attributes:
        id: Identifier as delivered by the webhook (numeric or string).
        number: Discussion number used in links.
        title: Script path the discussion belongs to.
        html_url: Browser URL of the discussion.
    """
    id: Any
    number: Any
    title: str
    html_url: str


@dataclass(frozen=True)
class NotificationEvent:
    """
    A single 'discussion_comment' event.

    Attributes:
        discussion: Parsed discussion section, None when absent.
        comment: Parsed comment section, None when absent.
    """
    discussion: Optional[Discussion]
    comment: Optional[Comment]

    @classmethod
    def from_payload(cls, payload: Any) -> "NotificationEvent":
        """
        Parse a decoded webhook payload.

        Missing or malformed sections become None so that the dispatcher's
        filter chain can decide what to do with them.
        """
        if not isinstance(payload, dict):
            return cls(discussion=None, comment=None)
        return cls(
            discussion=_parse_discussion(payload.get("discussion")),
            comment=_parse_comment(payload.get("comment")),
        )


def _parse_discussion(raw: Any) -> Optional[Discussion]:
    if not isinstance(raw, dict):
        return None
    return Discussion(
        id=raw.get("id"),
        number=raw.get("number"),
        title=_as_text(raw.get("title")),
        html_url=_as_text(raw.get("html_url")),
    )


def _parse_comment(raw: Any) -> Optional[Comment]:
    if not isinstance(raw, dict):
        return None
    user_raw = raw.get("user")
    user = None
    if isinstance(user_raw, dict):
        user = CommentUser(
            login=_as_text(user_raw.get("login")),
            type=_as_text(user_raw.get("type")),
        )
    return Comment(body=_as_text(raw.get("body")), user=user)


def _as_text(value: Any) -> str:
    return value if isinstance(value, str) else ""
