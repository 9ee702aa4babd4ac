from __future__ import annotations

"""
Configuration Validation Service.

Acts as the gatekeeper between untrusted configuration sources (environment
variables, CLI flags) and the immutable NotifierConfig consumed by the core.
Handles type coercion, range checks and default injection, collecting
human-readable warnings instead of failing whenever possible.
"""

import logging
from typing import Any, Dict, List, Mapping, Optional, Tuple

from scriptnotify.domain.config import (
    NotifierConfig,
    config_from_environ,
    get_default_config,
)
from scriptnotify.domain.constants import SUPPORTED_LOCALES

logger = logging.getLogger(__name__)


# -----------------------------------------------------------------------------
# PUBLIC API
# -----------------------------------------------------------------------------

def validate_config(
        config: Any,
        *,
        strict: bool = False,
) -> Tuple[NotifierConfig, List[str]]:
    """
    Validate and normalize a raw configuration dictionary.

    Args:
        config: Raw configuration data (usually a dictionary).
        strict: If True, raises exceptions on invalid values instead of
                falling back to defaults.

    Returns:
        Tuple[NotifierConfig, List[str]]: The validated configuration and a
                                          list of warnings.
    """
    warnings: List[str] = []
    defaults = get_default_config()

    if not isinstance(config, dict):
        msg = f"Invalid config type: expected dict, received {type(config).__name__}."
        if strict:
            raise TypeError(msg)
        warnings.append(f"{msg} Using defaults.")
        logger.warning(msg)
        config = {}

    merged: Dict[str, Any] = dict(defaults)
    merged.update({k: v for k, v in config.items() if v is not None})

    string_fields = [
        "token", "event_path", "index_path", "repo_index_url",
        "repository_id", "category_id", "hub_discussion_id", "graphql_url",
    ]
    for field in string_fields:
        # Blank credentials and paths are meaningful, keep them verbatim
        allow_empty = field in ("token", "event_path")
        merged[field] = _as_str(
            merged.get(field), defaults[field], field, warnings, strict, allow_empty
        )

    merged["search_page_size"] = _as_int(
        merged.get("search_page_size"), defaults["search_page_size"],
        "search_page_size", warnings, strict, minimum=1, maximum=100,
    )
    merged["timeout"] = _as_int(
        merged.get("timeout"), defaults["timeout"], "timeout", warnings, strict, minimum=1,
    )
    merged["post_delay_seconds"] = _as_float(
        merged.get("post_delay_seconds"), defaults["post_delay_seconds"],
        "post_delay_seconds", warnings, strict, minimum=0.0,
    )

    owner, name = _split_repository(merged.get("repository"), defaults["repository"], warnings, strict)
    locale = _normalize_locale(merged.get("locale"), defaults["locale"], warnings, strict)

    cfg = NotifierConfig(
        token=merged["token"],
        event_path=merged["event_path"],
        index_path=merged["index_path"],
        repo_index_url=merged["repo_index_url"],
        repository_owner=owner,
        repository_name=name,
        repository_id=merged["repository_id"],
        category_id=merged["category_id"],
        hub_discussion_id=merged["hub_discussion_id"],
        search_page_size=merged["search_page_size"],
        post_delay_seconds=merged["post_delay_seconds"],
        locale=locale,
        graphql_url=merged["graphql_url"],
        timeout=merged["timeout"],
    )
    return cfg, warnings


def load_config(
        environ: Mapping[str, str],
        overrides: Optional[Dict[str, Any]] = None,
        *,
        strict: bool = False,
) -> Tuple[NotifierConfig, List[str]]:
    """
    Resolve the configuration hierarchy: defaults, environment, CLI overrides.

    Args:
        environ: Process environment mapping.
        overrides: Explicit values (None entries are ignored).
        strict: Forwarded to validate_config.

    Returns:
        Tuple[NotifierConfig, List[str]]: Validated configuration and warnings.
    """
    raw = config_from_environ(environ)
    for k, v in (overrides or {}).items():
        if v is not None:
            raw[k] = v
    return validate_config(raw, strict=strict)


# -----------------------------------------------------------------------------
# PRIVATE HELPERS: TYPE COERCION
# -----------------------------------------------------------------------------

def _as_str(
        value: Any,
        fallback: str,
        field: str,
        warnings: List[str],
        strict: bool,
        allow_empty: bool = False,
) -> str:
    """Validate and sanitize string inputs."""
    if value is None:
        return fallback
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        return str(value)
    if isinstance(value, str):
        v = value.strip()
        if v or allow_empty:
            return v
        return fallback

    msg = f"Invalid field '{field}': expected str, received {type(value).__name__}."
    if strict:
        raise TypeError(msg)
    warnings.append(f"{msg} Using fallback.")
    return fallback


def _as_int(
        value: Any,
        fallback: int,
        field: str,
        warnings: List[str],
        strict: bool,
        minimum: Optional[int] = None,
        maximum: Optional[int] = None,
) -> int:
    """Coerce numeric strings into bounded integers."""
    if value is None:
        return fallback
    try:
        if isinstance(value, bool):
            raise ValueError(value)
        number = int(str(value).strip()) if isinstance(value, str) else int(value)
    except (TypeError, ValueError):
        msg = f"Invalid field '{field}': expected int, received {value!r}."
        if strict:
            raise ValueError(msg)
        warnings.append(f"{msg} Using fallback.")
        return fallback

    if (minimum is not None and number < minimum) or (maximum is not None and number > maximum):
        msg = f"Field '{field}' out of range: {number}."
        if strict:
            raise ValueError(msg)
        warnings.append(f"{msg} Using fallback.")
        return fallback
    return number


def _as_float(
        value: Any,
        fallback: float,
        field: str,
        warnings: List[str],
        strict: bool,
        minimum: Optional[float] = None,
) -> float:
    """Coerce numeric strings into non-negative floats."""
    if value is None:
        return fallback
    try:
        if isinstance(value, bool):
            raise ValueError(value)
        number = float(str(value).strip()) if isinstance(value, str) else float(value)
    except (TypeError, ValueError):
        msg = f"Invalid field '{field}': expected number, received {value!r}."
        if strict:
            raise ValueError(msg)
        warnings.append(f"{msg} Using fallback.")
        return fallback

    if minimum is not None and number < minimum:
        msg = f"Field '{field}' out of range: {number}."
        if strict:
            raise ValueError(msg)
        warnings.append(f"{msg} Using fallback.")
        return fallback
    return number


# -----------------------------------------------------------------------------
# PRIVATE HELPERS: DOMAIN NORMALIZATION
# -----------------------------------------------------------------------------

def _split_repository(
        value: Any,
        fallback: str,
        warnings: List[str],
        strict: bool,
) -> Tuple[str, str]:
    """Split an 'owner/name' slug."""
    raw = value.strip() if isinstance(value, str) else ""
    parts = [p for p in raw.split("/") if p]
    if len(parts) == 2:
        return parts[0], parts[1]

    if value is not None and raw != fallback:
        msg = f"Invalid repository slug '{value}': expected 'owner/name'."
        if strict:
            raise ValueError(msg)
        warnings.append(f"{msg} Using fallback.")
    owner, name = fallback.split("/", 1)
    return owner, name


def _normalize_locale(value: Any, fallback: str, warnings: List[str], strict: bool) -> str:
    """Restrict the template locale to the shipped locale files."""
    raw = value.strip().lower() if isinstance(value, str) else ""
    if raw in SUPPORTED_LOCALES:
        return raw

    msg = f"Unsupported locale '{value}'."
    if strict:
        raise ValueError(msg)
    warnings.append(f"{msg} Using '{fallback}'.")
    return fallback
