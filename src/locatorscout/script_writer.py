from __future__ import annotations

import re
from typing import Sequence

from .locator_ops import double_quoted, parse_locator, render_expression, render_python, single_quoted
from .models import SelectorOp, TestStep
from .selector_rules import normalize_space

SCRIPT_LANGUAGES: tuple[str, ...] = ("typescript", "javascript", "python")

_LOCATOR_ACTIONS = frozenset(
    {
        "click",
        "fill",
        "clear",
        "check",
        "uncheck",
        "select",
        "hover",
        "press",
        "assert_visible",
        "assert_hidden",
        "assert_text",
        "assert_value",
        "wait_for_element",
    }
)


def generate_test_script(test_name: str, steps: Sequence[TestStep], language: str = "typescript") -> str:
    normalized = (language or "").strip().lower()
    if normalized == "python":
        return _python_script(test_name, steps)
    if normalized == "javascript":
        header = "const { test, expect } = require('@playwright/test');"
    elif normalized == "typescript":
        header = "import { test, expect } from '@playwright/test';"
    else:
        raise ValueError(f"Unsupported script language {language!r}; expected one of {', '.join(SCRIPT_LANGUAGES)}")

    blocks = [_js_step(step) for step in steps]
    lines = [header, "", f"test({single_quoted(test_name)}, async ({{ page }}) => {{"]
    lines.append("\n\n".join(blocks))
    lines.append("});")
    return "\n".join(lines) + "\n"


def python_test_function_name(test_name: str) -> str:
    slug = re.sub(r"[^a-z0-9]+", "_", (test_name or "").lower()).strip("_")
    return f"test_{slug or 'generated'}"


def _python_script(test_name: str, steps: Sequence[TestStep]) -> str:
    needs_re = any(step.action in {"assert_url", "assert_title"} for step in steps)
    lines: list[str] = []
    if needs_re:
        lines.append("import re")
        lines.append("")
    lines += [
        "from playwright.sync_api import Page, expect",
        "",
        "",
        f"def {python_test_function_name(test_name)}(page: Page) -> None:",
        f'    """{_docstring_text(test_name)}"""',
    ]
    blocks = [_python_step(step) for step in steps]
    if blocks:
        lines.append("\n\n".join(blocks))
    else:
        lines.append("    pass")
    return "\n".join(lines) + "\n"


def _js_step(step: TestStep) -> str:
    indent = "  "
    comment = f"{indent}// {_comment_text(step)}"
    action = step.action
    value = step.value or ""
    locator = _js_locator(step) if action in _LOCATOR_ACTIONS else ""

    if action == "navigate":
        code = f"await page.goto({single_quoted(value)});"
    elif action == "click":
        code = f"await {locator}.click();"
    elif action == "fill":
        code = f"await {locator}.fill({single_quoted(value)});"
    elif action == "clear":
        code = f"await {locator}.clear();"
    elif action == "check":
        code = f"await {locator}.check();"
    elif action == "uncheck":
        code = f"await {locator}.uncheck();"
    elif action == "select":
        code = f"await {locator}.selectOption({single_quoted(value)});"
    elif action == "hover":
        code = f"await {locator}.hover();"
    elif action == "press":
        code = f"await {locator}.press({single_quoted(value)});"
    elif action == "assert_visible":
        code = f"await expect({locator}).toBeVisible();"
    elif action == "assert_hidden":
        code = f"await expect({locator}).toBeHidden();"
    elif action == "assert_text":
        code = f"await expect({locator}).toContainText({single_quoted(value)});"
    elif action == "assert_value":
        code = f"await expect({locator}).toHaveValue({single_quoted(value)});"
    elif action == "assert_url":
        code = f"await expect(page).toHaveURL(new RegExp({single_quoted(re.escape(value))}));"
    elif action == "assert_title":
        code = f"await expect(page).toHaveTitle(new RegExp({single_quoted(re.escape(value))}));"
    elif action == "wait":
        code = f"await page.waitForTimeout({_wait_ms(step)});"
    elif action == "wait_for_element":
        code = f"await {locator}.waitFor({{ state: 'visible' }});"
    elif action == "screenshot":
        code = f"await page.screenshot({{ path: {single_quoted((value or 'screenshot') + '.png')} }});"
    else:
        return f"{indent}// {_comment_text(step)} ({action})"
    return f"{comment}\n{indent}{code}"


def _python_step(step: TestStep) -> str:
    indent = "    "
    comment = f"{indent}# {_comment_text(step)}"
    action = step.action
    value = step.value or ""
    locator = _python_locator(step) if action in _LOCATOR_ACTIONS else ""

    if action == "navigate":
        code = f"page.goto({double_quoted(value)})"
    elif action == "click":
        code = f"{locator}.click()"
    elif action == "fill":
        code = f"{locator}.fill({double_quoted(value)})"
    elif action == "clear":
        code = f"{locator}.clear()"
    elif action == "check":
        code = f"{locator}.check()"
    elif action == "uncheck":
        code = f"{locator}.uncheck()"
    elif action == "select":
        code = f"{locator}.select_option({double_quoted(value)})"
    elif action == "hover":
        code = f"{locator}.hover()"
    elif action == "press":
        code = f"{locator}.press({double_quoted(value)})"
    elif action == "assert_visible":
        code = f"expect({locator}).to_be_visible()"
    elif action == "assert_hidden":
        code = f"expect({locator}).to_be_hidden()"
    elif action == "assert_text":
        code = f"expect({locator}).to_contain_text({double_quoted(value)})"
    elif action == "assert_value":
        code = f"expect({locator}).to_have_value({double_quoted(value)})"
    elif action == "assert_url":
        code = f"expect(page).to_have_url(re.compile({double_quoted(re.escape(value))}))"
    elif action == "assert_title":
        code = f"expect(page).to_have_title(re.compile({double_quoted(re.escape(value))}))"
    elif action == "wait":
        code = f"page.wait_for_timeout({_wait_ms(step)})"
    elif action == "wait_for_element":
        code = f'{locator}.wait_for(state="visible")'
    elif action == "screenshot":
        code = f"page.screenshot(path={double_quoted((value or 'screenshot') + '.png')})"
    else:
        return f"{indent}# {_comment_text(step)} ({action})"
    return f"{comment}\n{indent}{code}"


def _js_locator(step: TestStep) -> str:
    op = parse_locator(_require_locator(step))
    if isinstance(op, SelectorOp) and not op.wrapped:
        op = SelectorOp(op.selector)
    return f"page.{render_expression(op)}"


def _python_locator(step: TestStep) -> str:
    return f"page.{render_python(parse_locator(_require_locator(step)))}"


def _require_locator(step: TestStep) -> str:
    if not step.locator:
        raise ValueError(f"Step {step.description!r} ({step.action}) requires a locator.")
    return step.locator


def _wait_ms(step: TestStep) -> int:
    if not step.value:
        return 1000
    try:
        return int(step.value)
    except ValueError as exc:
        raise ValueError(f"Wait duration must be milliseconds; got {step.value!r}") from exc


def _comment_text(step: TestStep) -> str:
    return normalize_space(step.description, limit=200) or step.action


def _docstring_text(value: str) -> str:
    return normalize_space(value, limit=200).replace("\\", "\\\\").replace('"', '\\"')
