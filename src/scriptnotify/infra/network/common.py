from __future__ import annotations

from scriptnotify.domain.constants import APP_NAME, APP_VERSION, DEFAULT_TIMEOUT

# Identifies the bot to GitHub and to the upstream release host
USER_AGENT = f"{APP_NAME}/{APP_VERSION}"

__all__ = ["USER_AGENT", "DEFAULT_TIMEOUT"]
