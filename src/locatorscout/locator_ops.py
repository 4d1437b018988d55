from __future__ import annotations

import re
from typing import TYPE_CHECKING

from .models import (
    AltTextOp,
    LabelOp,
    LocatorOp,
    PlaceholderOp,
    RoleOp,
    SelectorOp,
    TestIdOp,
    TextOp,
)
from .selector_rules import unescape_locator_text

if TYPE_CHECKING:
    from playwright.sync_api import Locator, Page

# Single- or double-quoted literal with backslash escapes; exactly one of the
# two capture groups is populated.
_LITERAL = r"""(?:'((?:[^'\\]|\\.)*)'|"((?:[^"\\]|\\.)*)")"""

_SINGLE_ARG_CALLS: tuple[tuple[str, str], ...] = (
    ("testId", r"getByTestId|get_by_test_id"),
    ("text", r"getByText|get_by_text"),
    ("role", r"getByRole|get_by_role"),
    ("placeholder", r"getByPlaceholder|get_by_placeholder"),
    ("label", r"getByLabel|get_by_label"),
    ("altText", r"getByAltText|get_by_alt_text"),
    ("locator", r"locator"),
)

_ROLE_PATTERN = re.compile(
    r"(?:getByRole|get_by_role)\(\s*"
    + _LITERAL
    + r"\s*(?:,\s*(?:\{\s*name\s*:\s*"
    + _LITERAL
    + r"\s*\}|name\s*=\s*"
    + _LITERAL
    + r"))?\s*\)",
    re.DOTALL,
)

_CALL_PATTERNS = {
    kind: re.compile(rf"(?:{names})\(\s*{_LITERAL}\s*\)", re.DOTALL)
    for kind, names in _SINGLE_ARG_CALLS
    if kind != "role"
}


def render_expression(op: LocatorOp) -> str:
    """Render an op in the JavaScript call style used in tool responses."""
    if isinstance(op, TestIdOp):
        return f"getByTestId({single_quoted(op.test_id)})"
    if isinstance(op, RoleOp):
        if op.name:
            return f"getByRole({single_quoted(op.role)}, {{ name: {single_quoted(op.name)} }})"
        return f"getByRole({single_quoted(op.role)})"
    if isinstance(op, LabelOp):
        return f"getByLabel({single_quoted(op.text)})"
    if isinstance(op, PlaceholderOp):
        return f"getByPlaceholder({single_quoted(op.text)})"
    if isinstance(op, TextOp):
        return f"getByText({single_quoted(op.text)})"
    if isinstance(op, AltTextOp):
        return f"getByAltText({single_quoted(op.text)})"
    if isinstance(op, SelectorOp):
        return f"locator({single_quoted(op.selector)})" if op.wrapped else op.selector
    raise TypeError(f"Unsupported locator op: {op!r}")


def render_python(op: LocatorOp) -> str:
    """Render an op as a Playwright-for-Python call chained off ``page``."""
    if isinstance(op, TestIdOp):
        return f"get_by_test_id({double_quoted(op.test_id)})"
    if isinstance(op, RoleOp):
        if op.name:
            return f"get_by_role({double_quoted(op.role)}, name={double_quoted(op.name)})"
        return f"get_by_role({double_quoted(op.role)})"
    if isinstance(op, LabelOp):
        return f"get_by_label({double_quoted(op.text)})"
    if isinstance(op, PlaceholderOp):
        return f"get_by_placeholder({double_quoted(op.text)})"
    if isinstance(op, TextOp):
        return f"get_by_text({double_quoted(op.text)})"
    if isinstance(op, AltTextOp):
        return f"get_by_alt_text({double_quoted(op.text)})"
    if isinstance(op, SelectorOp):
        return f"locator({double_quoted(op.selector)})"
    raise TypeError(f"Unsupported locator op: {op!r}")


def parse_locator(expression: str) -> LocatorOp:
    """Read the leading locator call; chained calls such as ``.first()`` are ignored."""
    text = (expression or "").strip()
    if text.startswith("page."):
        text = text[len("page."):]
    if not text:
        raise ValueError("Locator expression is empty.")

    for kind, _names in _SINGLE_ARG_CALLS:
        if kind == "role":
            match = _ROLE_PATTERN.match(text)
            if match:
                role = _literal_value(match, 1)
                name = _literal_value(match, 3) or _literal_value(match, 5)
                return RoleOp(role=role, name=name or None)
            continue

        match = _CALL_PATTERNS[kind].match(text)
        if not match:
            continue
        value = _literal_value(match, 1) or ""
        if kind == "testId":
            return TestIdOp(value)
        if kind == "text":
            return TextOp(value)
        if kind == "placeholder":
            return PlaceholderOp(value)
        if kind == "label":
            return LabelOp(value)
        if kind == "altText":
            return AltTextOp(value)
        return SelectorOp(value)

    return SelectorOp(text, wrapped=False)


def resolve_locator(page: Page, op: LocatorOp) -> Locator:
    if isinstance(op, TestIdOp):
        return page.get_by_test_id(op.test_id)
    if isinstance(op, RoleOp):
        if op.name:
            return page.get_by_role(op.role, name=op.name)  # type: ignore[arg-type]
        return page.get_by_role(op.role)  # type: ignore[arg-type]
    if isinstance(op, LabelOp):
        return page.get_by_label(op.text)
    if isinstance(op, PlaceholderOp):
        return page.get_by_placeholder(op.text)
    if isinstance(op, TextOp):
        return page.get_by_text(op.text)
    if isinstance(op, AltTextOp):
        return page.get_by_alt_text(op.text)
    if isinstance(op, SelectorOp):
        return page.locator(op.selector)
    raise TypeError(f"Unsupported locator op: {op!r}")


def _literal_value(match: re.Match[str], first_group: int) -> str | None:
    single = match.group(first_group)
    double = match.group(first_group + 1)
    raw = single if single is not None else double
    if raw is None:
        return None
    return unescape_locator_text(raw)


def single_quoted(value: str) -> str:
    return "'" + value.replace("\\", "\\\\").replace("'", "\\'") + "'"


def double_quoted(value: str) -> str:
    return '"' + value.replace("\\", "\\\\").replace('"', '\\"') + '"'
