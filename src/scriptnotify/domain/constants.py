from __future__ import annotations

"""
Domain Constants.

Centralizes the fixed identifiers of the notification system: upstream data
locations, the discussion repository that hosts author channels, and the
pacing parameters used while fanning notifications out.
"""

APP_NAME = "scriptnotify"
APP_VERSION = "1.0.0"

# -----------------------------------------------------------------------------
# UPSTREAM SCRIPT REPOSITORY
# -----------------------------------------------------------------------------
REPO_INDEX_URL = (
    "https://raw.githubusercontent.com/babalae/bettergi-scripts-list/"
    "refs/heads/release/repo.json.gz"
)
DEFAULT_INDEX_PATH = "assets/author_mapping.json"

# Root-level subtree whose individual files are not indexed
DESIGNATED_SUBTREE = "pathing"

# -----------------------------------------------------------------------------
# DISCUSSION REPOSITORY (AUTHOR CHANNELS)
# -----------------------------------------------------------------------------
GRAPHQL_URL = "https://api.github.com/graphql"
REPOSITORY_OWNER = "babalae"
REPOSITORY_NAME = "bettergi-script-web-giscus"
REPOSITORY_ID = "R_kgDOPbW19A"
CATEGORY_ID = "DIC_kwDOPbW19M4Ct_3t"

# Comments on the hub discussion itself never trigger notifications
HUB_DISCUSSION_ID = "2"

# -----------------------------------------------------------------------------
# FAN-OUT PACING
# -----------------------------------------------------------------------------
SEARCH_PAGE_SIZE = 10
POST_DELAY_SECONDS = 1.0
DEFAULT_TIMEOUT = 10
DEFAULT_LOCALE = "zh"
SUPPORTED_LOCALES = ("zh", "en")

BOT_USER_TYPE = "Bot"
