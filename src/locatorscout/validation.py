from __future__ import annotations

from typing import TYPE_CHECKING

from playwright.sync_api import Error as PlaywrightError

from .locator_ops import parse_locator, resolve_locator
from .models import ValidationResult

if TYPE_CHECKING:
    from playwright.sync_api import Page

NOT_FOUND_SUGGESTIONS = (
    "Element not found. Check if the page has loaded completely.",
    "Verify the locator syntax is correct.",
)


def count_locator_matches(page: Page, expression: str) -> int:
    """Count elements matched by a caller-supplied locator expression.

    Raises ``ValueError`` for an empty expression and lets Playwright errors
    from malformed selectors propagate.
    """
    op = parse_locator(expression)
    return resolve_locator(page, op).count()


def validate_locator(page: Page, expression: str) -> ValidationResult:
    try:
        match_count = count_locator_matches(page, expression)
    except (PlaywrightError, ValueError) as exc:
        return ValidationResult(0, (f"Invalid locator syntax: {_first_line(exc)}",))

    if match_count == 0:
        return ValidationResult(0, NOT_FOUND_SUGGESTIONS)
    if match_count > 1:
        return ValidationResult(
            match_count,
            (
                f"Found {match_count} elements. Consider adding more specificity.",
                "Try using getByRole with name option for uniqueness.",
            ),
        )
    return ValidationResult(1)


def _first_line(exc: BaseException) -> str:
    message = str(exc).strip()
    return message.splitlines()[0] if message else exc.__class__.__name__
