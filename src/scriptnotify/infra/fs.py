from __future__ import annotations

"""
FileSystem Infrastructure Layer.

Reads and writes the JSON artifacts exchanged between process runs: the
persisted author index and the webhook event payload handed over by the
automation host.
"""

import json
import logging
import os
import tempfile
from typing import Any, Dict, Iterable, List, Optional

from scriptnotify.domain.tree_models import PathAuthorEntry

logger = logging.getLogger(__name__)


class EventPayloadError(Exception):
    """Raised when the event payload cannot be located, read or decoded."""


# -----------------------------------------------------------------------------
# AUTHOR INDEX PERSISTENCE
# -----------------------------------------------------------------------------

def save_author_index(path: str, entries: Iterable[PathAuthorEntry]) -> str:
    """
    Persist the author index as a pretty-printed JSON array.

    The document is written to a sibling temporary file first and then moved
    into place, so readers never observe a half-written index.

    Args:
        path: Destination file path.
        entries: Index rows to serialize.

    Returns:
        str: Absolute path of the written file.

    Raises:
        OSError: The destination could not be written.
    """
    target = os.path.abspath(path)
    parent = os.path.dirname(target)
    os.makedirs(parent, exist_ok=True)

    payload = [e.to_dict() for e in entries]
    fd, tmp_path = tempfile.mkstemp(prefix=".author_index.", suffix=".tmp", dir=parent)
    try:
        with os.fdopen(fd, "w", encoding="utf-8") as f:
            json.dump(payload, f, ensure_ascii=False, indent=2)
        os.replace(tmp_path, target)
    except OSError:
        if os.path.exists(tmp_path):
            os.remove(tmp_path)
        raise

    logger.debug(f"FS: Author index with {len(payload)} rows saved to {target}")
    return target


def load_author_index(path: str) -> Optional[List[PathAuthorEntry]]:
    """
    Load the persisted author index.

    Args:
        path: Index file path.

    Returns:
        Optional[List[PathAuthorEntry]]: Parsed rows, or None when the file is
                                         missing, unreadable or malformed.
    """
    if not os.path.exists(path):
        logger.warning(f"FS: Author index not found at '{path}'.")
        return None

    try:
        with open(path, "r", encoding="utf-8") as f:
            data = json.load(f)
    except (OSError, ValueError) as e:
        logger.warning(f"FS: Failed to read author index '{path}': {e}")
        return None

    if not isinstance(data, list):
        logger.warning(f"FS: Author index '{path}' is not a JSON array.")
        return None

    entries: List[PathAuthorEntry] = []
    dropped = 0
    for raw in data:
        entry = PathAuthorEntry.from_dict(raw)
        if entry is None:
            dropped += 1
            continue
        entries.append(entry)

    if dropped:
        logger.debug(f"FS: Dropped {dropped} malformed index row(s).")
    return entries


# -----------------------------------------------------------------------------
# EVENT PAYLOAD
# -----------------------------------------------------------------------------

def load_event_payload(path: Optional[str]) -> Dict[str, Any]:
    """
    Read the webhook event payload supplied by the automation host.

    Raises:
        EventPayloadError: Missing path, unreadable file, invalid JSON, or a
                           root that is not an object.
    """
    if not path:
        raise EventPayloadError("No event payload path was provided.")

    try:
        with open(path, "r", encoding="utf-8") as f:
            data = json.load(f)
    except OSError as e:
        raise EventPayloadError(f"Cannot read '{path}': {e}") from e
    except ValueError as e:
        raise EventPayloadError(f"Invalid JSON in '{path}': {e}") from e

    if not isinstance(data, dict):
        raise EventPayloadError(f"Event payload '{path}' is not a JSON object.")
    return data
