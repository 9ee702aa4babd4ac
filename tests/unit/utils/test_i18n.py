from __future__ import annotations

"""
Unit tests for the i18n resource manager.

Verifies key resolution, interpolation, fallbacks and that all shipped
locales expose the same keys.
"""

import json
import os
from typing import Any, Dict, Set

import pytest

from scriptnotify.utils.i18n import I18n

_LOCALES_DIR = os.path.abspath(
    os.path.join(os.path.dirname(__file__), "..", "..", "..", "src", "scriptnotify", "interface", "locales")
)


def _flatten(tree: Dict[str, Any], prefix: str = "") -> Set[str]:
    keys: Set[str] = set()
    for k, v in tree.items():
        path = f"{prefix}.{k}" if prefix else k
        if isinstance(v, dict):
            keys |= _flatten(v, path)
        else:
            keys.add(path)
    return keys


def _load(locale: str) -> Dict[str, Any]:
    with open(os.path.join(_LOCALES_DIR, f"{locale}.json"), "r", encoding="utf-8") as f:
        return json.load(f)


def test_locales_share_the_same_keys() -> None:
    assert _flatten(_load("zh")) == _flatten(_load("en"))


@pytest.mark.parametrize("locale", ["zh", "en"])
def test_packaged_locales_load(locale: str) -> None:
    manager = I18n(locale)

    assert manager.is_loaded
    assert manager.locale == locale
    assert "alice" in manager.t("channel.title", author="alice")


def test_chinese_marker_title() -> None:
    assert I18n("zh").t("channel.title", author="alice") == "作者通知: alice"


def test_unknown_key_falls_back_to_default_then_key() -> None:
    manager = I18n("en")

    assert manager.t("missing.key", default="Hi {name}", name="x") == "Hi x"
    assert manager.t("missing.key") == "missing.key"
    assert manager.t("channel.title.deeper") == "channel.title.deeper"


def test_missing_interpolation_variable_returns_template() -> None:
    assert I18n("en").t("channel.title") == "Author notice: {author}"
    assert I18n("en").t("channel.title", other="x") == "Author notice: {author}"


def test_missing_locale_file(tmp_path) -> None:
    manager = I18n("xx", locales_path=str(tmp_path))

    assert not manager.is_loaded
    assert manager.t("channel.title", default="fallback") == "fallback"


def test_corrupt_locale_file(tmp_path) -> None:
    (tmp_path / "en.json").write_text("{not json", encoding="utf-8")

    manager = I18n("en", locales_path=str(tmp_path))

    assert not manager.is_loaded
    assert manager.t("app.description") == "app.description"
