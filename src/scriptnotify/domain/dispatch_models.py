from __future__ import annotations

"""
Dispatch Domain Data Models.

Defines the result object returned by the notification dispatcher so that
interface layers and tests can observe what happened to a single event
without parsing log output.
"""

from dataclasses import dataclass, field
from typing import List

STATUS_SKIPPED = "skipped"
STATUS_DISPATCHED = "dispatched"

# Reasons for events that were dropped before fan-out
REASON_NO_DISCUSSION = "no_discussion"
REASON_NO_COMMENT = "no_comment"
REASON_NO_USER = "no_user"
REASON_BOT = "bot_comment"
REASON_HUB = "hub_discussion"
REASON_NO_TITLE = "no_title"
REASON_UNKNOWN_PATH = "unknown_path"
REASON_NO_AUTHORS = "no_authors"


@dataclass
class DispatchReport:
    """
    Outcome of dispatching one notification event.

    Attributes:
        status: 'skipped' when the event was filtered out, 'dispatched'
                when the fan-out loop ran.
        reason: Filter reason for skipped events.
        script_path: Script path taken from the discussion title.
        notified: Authors whose notice was posted.
        failed: Authors whose notice could not be posted.
        skipped: Authors whose channel could not be resolved.
    """
    status: str
    reason: str = ""
    script_path: str = ""
    notified: List[str] = field(default_factory=list)
    failed: List[str] = field(default_factory=list)
    skipped: List[str] = field(default_factory=list)

    @property
    def attempted(self) -> int:
        return len(self.notified) + len(self.failed)


def skipped_report(reason: str, script_path: str = "") -> DispatchReport:
    return DispatchReport(status=STATUS_SKIPPED, reason=reason, script_path=script_path)
