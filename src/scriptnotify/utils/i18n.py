from __future__ import annotations

"""
Internationalization (i18n) Utility.

Resolves dot-notation keys against nested JSON locale files and interpolates
variables. Author channel titles, channel bodies and notification notices
are all rendered through this manager so that their wording lives in data
files rather than in code.
"""

import json
import logging
import os
from typing import Any, Dict, Optional

from scriptnotify.domain.constants import DEFAULT_LOCALE

logger = logging.getLogger(__name__)

LOCALES_REL_PATH = os.path.join("..", "interface", "locales")

# -----------------------------------------------------------------------------
# I18N MANAGER SERVICE
# -----------------------------------------------------------------------------

class I18n:
    """
    Resource manager for locale-specific strings.

    Loads one JSON resource file from the locale directory and provides
    safe, non-raising access to its keys.
    """

    def __init__(self, locale: str = DEFAULT_LOCALE, locales_path: Optional[str] = None):
        """
        Initialize the manager and load the requested locale.

        Args:
            locale: Locale identifier (e.g., 'zh', 'en').
            locales_path: Directory holding '<locale>.json' files. Defaults
                          to the packaged locale directory.
        """
        self._locale = locale
        self._translations: Dict[str, Any] = {}
        self.is_loaded = False

        if locales_path is None:
            base_dir = os.path.dirname(os.path.abspath(__file__))
            locales_path = os.path.join(base_dir, LOCALES_REL_PATH)
        self._locales_path = os.path.abspath(locales_path)

        self.load_locale(locale)

    @property
    def locale(self) -> str:
        return self._locale

    def load_locale(self, locale: str) -> None:
        """
        Load a translation dictionary from the filesystem.

        Args:
            locale: Identifier of the target language.
        """
        file_path = os.path.join(self._locales_path, f"{locale}.json")

        if not os.path.exists(file_path):
            logger.warning(f"I18n: Locale resource missing at '{file_path}'. Fallback active.")
            self._translations = {}
            self.is_loaded = False
            return

        try:
            with open(file_path, "r", encoding="utf-8") as f:
                self._translations = json.load(f)
            self._locale = locale
            self.is_loaded = True
            logger.debug(f"I18n: Loaded locale dictionary: {locale}")
        except (OSError, ValueError) as e:
            logger.error(f"I18n: Corruption in locale file {file_path}: {e}")
            self._translations = {}
            self.is_loaded = False

    def t(self, key: str, default: Optional[str] = None, **kwargs: Any) -> str:
        """
        Resolve and format a string using dot-notation.

        Args:
            key: Hierarchical identifier (e.g., 'notice.body').
            default: Template used when the key cannot be resolved.
            **kwargs: Variables for str.format interpolation.

        Returns:
            str: The formatted string, the formatted default, or the key
                 itself when neither resolves.
        """
        current_val: Any = self._translations
        for k in key.split("."):
            if not isinstance(current_val, dict):
                current_val = None
                break
            current_val = current_val.get(k)

        template = current_val if isinstance(current_val, str) else default
        if template is None:
            return key

        try:
            return template.format(**kwargs) if kwargs else template
        except (KeyError, IndexError, ValueError) as e:
            logger.debug(f"I18n: Interpolation error for '{key}': {e}")
            return template

# -----------------------------------------------------------------------------
# SERVICE INITIALIZATION
# -----------------------------------------------------------------------------

# Shared instance for interface strings
i18n = I18n(DEFAULT_LOCALE)
