from __future__ import annotations

import asyncio
from functools import partial
import logging
from typing import TYPE_CHECKING, Any, Sequence

from .config import Settings
from .dom_extractor import extract_elements
from .element_matcher import describe_element, match_elements
from .locator_generator import effective_role, generate_locators, generate_selenium_locators
from .models import ElementRecord
from .page_object import build_page_elements, normalize_class_name, normalize_language, render_page_object
from .scoring import rank_candidates
from .validation import validate_locator

if TYPE_CHECKING:
    from .browser_manager import BrowserManager

NO_MATCH_MESSAGE = "No matching elements found. Try a different description."


def build_locator_report(
    url: str,
    element_description: str,
    elements: Sequence[ElementRecord],
    settings: Settings,
) -> dict[str, Any]:
    matches = match_elements(elements, element_description)
    if not matches:
        return {
            "url": url,
            "elementDescription": element_description,
            "matchedElementCount": 0,
            "rankedLocators": [],
            "recommended": NO_MATCH_MESSAGE,
            "playwright": {"recommended": "", "all": []},
            "selenium": {"recommended": {"java": "", "python": "", "csharp": ""}, "all": []},
            "alternativeSelectors": {"css": "", "xpath": ""},
        }

    best = matches[0]
    ranked = rank_candidates(generate_locators(best, settings.max_text_length))[: settings.max_locators]
    selenium = [item.to_payload() for item in generate_selenium_locators(best, settings.max_text_length)]
    return {
        "url": url,
        "elementDescription": element_description,
        "matchedElementCount": len(matches),
        "rankedLocators": [candidate.to_payload() for candidate in ranked],
        "recommended": ranked[0].expression,
        "playwright": {
            "recommended": ranked[0].expression,
            "all": [candidate.expression for candidate in ranked],
        },
        "selenium": {"recommended": selenium[0], "all": selenium},
        "alternativeSelectors": {"css": best.fallback_selector, "xpath": best.structural_path},
    }


def filter_elements(
    elements: Sequence[ElementRecord], element_types: Sequence[str] | None
) -> list[ElementRecord]:
    wanted = [value.strip().lower() for value in (element_types or []) if value and value.strip()]
    if not wanted:
        return list(elements)

    def matches(record: ElementRecord) -> bool:
        fields = (record.tag, record.type or "", effective_role(record) or "")
        return any(term in field_value.lower() for term in wanted for field_value in fields)

    return [record for record in elements if matches(record)]


def build_page_analysis(
    url: str,
    elements: Sequence[ElementRecord],
    settings: Settings,
    element_types: Sequence[str] | None = None,
) -> dict[str, Any]:
    filtered = filter_elements(elements, element_types)
    limited = filtered[: settings.max_elements]

    entries: list[dict[str, Any]] = []
    for record in limited:
        ranked = rank_candidates(generate_locators(record, settings.max_text_length))
        top = ranked[: settings.top_locators_per_element]
        entries.append(
            {
                "description": describe_element(record),
                "type": record.tag,
                "topLocators": [candidate.to_payload() for candidate in top],
                "recommended": top[0].expression,
            }
        )

    return {
        "url": url,
        "totalElements": len(filtered),
        "returnedElements": len(entries),
        "truncated": len(filtered) > settings.max_elements,
        "elements": entries,
    }


def build_page_object_report(
    url: str,
    class_name: str,
    language: str,
    elements: Sequence[ElementRecord],
    settings: Settings,
) -> dict[str, Any]:
    page_elements = build_page_elements(
        elements,
        max_elements=settings.max_page_object_elements,
        max_text_length=settings.max_text_length,
    )
    normalized_language = normalize_language(language)
    return {
        "url": url,
        "className": normalize_class_name(class_name),
        "language": normalized_language,
        "elementsFound": len(page_elements),
        "code": render_page_object(class_name, page_elements, url, normalized_language),
    }


class LocatorService:
    """Inspection tools backed by the shared browser session."""

    def __init__(self, browser: BrowserManager, settings: Settings | None = None) -> None:
        self.browser = browser
        self.settings = settings or browser.settings
        self.logger = logging.getLogger("locatorscout.service")

    async def get_locators(self, url: str, element_description: str) -> dict[str, Any]:
        elements = await self._scan(url)
        report = build_locator_report(url, element_description, elements, self.settings)
        self.logger.info(
            "get_locators: url=%s query=%r scanned=%s matched=%s",
            url,
            element_description,
            len(elements),
            report["matchedElementCount"],
        )
        return report

    async def analyze_page(self, url: str, element_types: Sequence[str] | None = None) -> dict[str, Any]:
        elements = await self._scan(url)
        analysis = build_page_analysis(url, elements, self.settings, element_types)
        self.logger.info(
            "analyze_page: url=%s total=%s returned=%s",
            url,
            analysis["totalElements"],
            analysis["returnedElements"],
        )
        return analysis

    async def generate_page_object(
        self, url: str, class_name: str, language: str = "typescript"
    ) -> dict[str, Any]:
        normalize_class_name(class_name)
        normalize_language(language)
        elements = await self._scan(url)
        return build_page_object_report(url, class_name, language, elements, self.settings)

    async def validate_locator(self, url: str, expression: str) -> dict[str, Any]:
        future = self.browser.submit(url, partial(validate_locator, expression=expression))
        result = await asyncio.wrap_future(future)
        self.logger.info("validate_locator: url=%s locator=%r matches=%s", url, expression, result.match_count)
        return result.to_payload()

    async def _scan(self, url: str) -> list[ElementRecord]:
        future = self.browser.submit(url, partial(extract_elements, max_text_length=self.settings.max_text_length))
        return await asyncio.wrap_future(future)
