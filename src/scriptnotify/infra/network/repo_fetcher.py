from __future__ import annotations

import gzip
import json
import logging
from typing import Any, Dict

import requests

from scriptnotify.infra.network.common import DEFAULT_TIMEOUT, USER_AGENT

logger = logging.getLogger(__name__)


class RepoFetchError(Exception):
    """Raised when the upstream document cannot be decompressed or decoded."""


def fetch_repo_index(url: str, timeout: int = DEFAULT_TIMEOUT) -> Dict[str, Any]:
    """
    Download and decode the gzipped upstream script repository document.

    Raises:
        requests.exceptions.RequestException: Transport failure or non-200 status.
        RepoFetchError: Payload is not gzip or not a JSON object.
    """
    headers = {"User-Agent": USER_AGENT}
    logger.info(f"Network: Downloading repository index from {url}")

    response = requests.get(url, headers=headers, timeout=timeout)
    response.raise_for_status()

    try:
        raw = gzip.decompress(response.content)
        data = json.loads(raw.decode("utf-8"))
    except (OSError, EOFError, UnicodeDecodeError, ValueError) as e:
        raise RepoFetchError(f"Could not decode repository index: {e}") from e

    if not isinstance(data, dict):
        raise RepoFetchError("Repository index root is not an object.")

    size_kb = len(response.content) / 1024
    logger.info(f"Network: Repository index downloaded ({size_kb:.1f} KB compressed).")
    return data
