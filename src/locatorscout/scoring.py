from __future__ import annotations

from typing import Iterable

from .locator_ops import render_expression
from .models import LocatorCandidate, LocatorKind, LocatorOp

RELIABILITY: dict[LocatorKind, int] = {
    "testId": 98,
    "role": 95,
    "label": 90,
    "id": 90,
    "placeholder": 85,
    "name": 80,
    "text": 75,
    "bareRole": 70,
    "css": 60,
    "xpath": 40,
}

RATIONALES: dict[LocatorKind, str] = {
    "testId": "Best - explicitly set for testing",
    "role": "Playwright recommended - accessible and stable",
    "bareRole": "Role without name - may match multiple elements",
    "label": "Accessible label-based locator",
    "placeholder": "Good for form inputs",
    "text": "Text content - may break if text changes",
    "id": "ID selector - stable if ID is meaningful",
    "name": "Name attribute selector",
    "css": "CSS selector - may be brittle",
    "xpath": "XPath - avoid unless necessary",
}


def build_candidate(kind: LocatorKind, op: LocatorOp) -> LocatorCandidate:
    return LocatorCandidate(
        kind=kind,
        op=op,
        expression=render_expression(op),
        reliability=RELIABILITY[kind],
        rationale=RATIONALES[kind],
    )


def rank_candidates(candidates: Iterable[LocatorCandidate]) -> list[LocatorCandidate]:
    # sorted() is stable, so equal scores keep emission order.
    return sorted(candidates, key=lambda item: -item.reliability)
