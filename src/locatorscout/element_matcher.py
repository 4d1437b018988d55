from __future__ import annotations

from typing import Iterable, Sequence

from .models import ElementRecord, MatchScore

MATCH_WEIGHTS: dict[str, int] = {
    "keyword": 1,
    "id_exact": 3,
    "test_id": 3,
    "aria_label": 2,
    "visible_text": 2,
    "placeholder": 2,
}

_SEARCH_FIELDS = (
    "id",
    "name",
    "class_name",
    "visible_text",
    "placeholder",
    "aria_label",
    "type",
    "title",
    "tag",
    "role",
    "test_id",
)


def search_text(element: ElementRecord) -> str:
    values = (getattr(element, field_name) for field_name in _SEARCH_FIELDS)
    return " ".join(value for value in values if value).lower()


def score_element(element: ElementRecord, keywords: Sequence[str]) -> int:
    blob = search_text(element)
    element_id = (element.id or "").lower()
    test_id = (element.test_id or "").lower()
    aria_label = (element.aria_label or "").lower()
    text = (element.visible_text or "").lower()
    placeholder = (element.placeholder or "").lower()

    score = 0
    for keyword in keywords:
        if keyword not in blob:
            continue
        score += MATCH_WEIGHTS["keyword"]
        if element_id and element_id == keyword:
            score += MATCH_WEIGHTS["id_exact"]
        if keyword in test_id:
            score += MATCH_WEIGHTS["test_id"]
        if keyword in aria_label:
            score += MATCH_WEIGHTS["aria_label"]
        if keyword in text:
            score += MATCH_WEIGHTS["visible_text"]
        if keyword in placeholder:
            score += MATCH_WEIGHTS["placeholder"]
    return score


def score_elements(elements: Iterable[ElementRecord], query: str) -> list[MatchScore]:
    keywords = (query or "").lower().split()
    scored = [MatchScore(element, score_element(element, keywords)) for element in elements]
    matched = [item for item in scored if item.score > 0]
    matched.sort(key=lambda item: -item.score)
    return matched


def match_elements(elements: Iterable[ElementRecord], query: str) -> list[ElementRecord]:
    return [item.element for item in score_elements(elements, query)]


def describe_element(element: ElementRecord) -> str:
    parts: list[str] = []
    if element.visible_text:
        parts.append(f'"{element.visible_text[:30]}"')
    if element.placeholder:
        parts.append(f'placeholder="{element.placeholder}"')
    if element.aria_label:
        parts.append(f'aria-label="{element.aria_label}"')
    if element.type and element.type != element.tag:
        parts.append(f"type={element.type}")
    if element.name:
        parts.append(f'name="{element.name}"')
    parts.append(f"<{element.tag}>")
    return " ".join(parts)
