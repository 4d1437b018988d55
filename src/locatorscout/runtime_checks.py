from __future__ import annotations

import re
from typing import Any

_MISSING_BROWSER_ERROR_HINTS = (
    "executable doesn't exist",
    "executable does not exist",
    "download new browsers",
    "playwright install",
    "could not find browser",
    "failed to launch chromium because executable",
)

_CLOSED_TARGET_ERROR_HINTS = (
    "has been closed",
    "target page, context or browser has been closed",
    "browser has been closed",
    "target closed",
    "connection closed",
)

_CSS_SAFE_ID_PATTERN = re.compile(r"^-?[A-Za-z_][A-Za-z0-9_-]*$")


def _is_missing_browser_error(exc: BaseException) -> bool:
    message = str(exc).lower()
    return any(hint in message for hint in _MISSING_BROWSER_ERROR_HINTS)


def _is_closed_target_error(exc: BaseException) -> bool:
    message = str(exc).lower()
    return any(hint in message for hint in _CLOSED_TARGET_ERROR_HINTS)


def describe_launch_failure(exc: BaseException) -> str:
    if _is_missing_browser_error(exc):
        return "Chromium not installed. Run: python -m playwright install chromium"
    return f"Failed to launch Chromium: {exc}"


def is_css_safe_id(value: str) -> bool:
    return bool(_CSS_SAFE_ID_PATTERN.fullmatch(value.strip()))


def escape_css_attribute_value(value: str) -> str:
    return value.replace("\\", "\\\\").replace('"', '\\"')


def build_id_selector(raw_id: Any) -> str | None:
    if raw_id is None:
        return None

    id_value = str(raw_id).strip()
    if not id_value:
        return None
    if is_css_safe_id(id_value):
        return f"#{id_value}"
    return f'[id="{escape_css_attribute_value(id_value)}"]'
