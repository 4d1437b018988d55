from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Literal, Union

LocatorKind = Literal[
    "testId",
    "role",
    "bareRole",
    "label",
    "placeholder",
    "text",
    "id",
    "name",
    "css",
    "xpath",
]
SeleniumKind = Literal["id", "name", "css", "xpath", "linkText", "className", "tagName"]
StepStatus = Literal["passed", "failed", "skipped"]
TestStatus = Literal["passed", "failed"]


@dataclass(frozen=True, slots=True)
class ElementRecord:
    tag: str
    structural_path: str
    fallback_selector: str
    id: str | None = None
    name: str | None = None
    class_name: str | None = None
    type: str | None = None
    placeholder: str | None = None
    visible_text: str | None = None
    aria_label: str | None = None
    role: str | None = None
    test_id: str | None = None
    href: str | None = None
    title: str | None = None
    current_value: str | None = None

    @property
    def class_names(self) -> list[str]:
        return (self.class_name or "").split()


@dataclass(frozen=True, slots=True)
class TestIdOp:
    test_id: str


@dataclass(frozen=True, slots=True)
class RoleOp:
    role: str
    name: str | None = None


@dataclass(frozen=True, slots=True)
class LabelOp:
    text: str


@dataclass(frozen=True, slots=True)
class PlaceholderOp:
    text: str


@dataclass(frozen=True, slots=True)
class TextOp:
    text: str


@dataclass(frozen=True, slots=True)
class AltTextOp:
    text: str


@dataclass(frozen=True, slots=True)
class SelectorOp:
    selector: str
    # False when the caller passed a raw css/xpath string instead of locator('...').
    wrapped: bool = True


LocatorOp = Union[TestIdOp, RoleOp, LabelOp, PlaceholderOp, TextOp, AltTextOp, SelectorOp]


@dataclass(frozen=True, slots=True)
class LocatorCandidate:
    kind: LocatorKind
    op: LocatorOp
    expression: str
    reliability: int
    rationale: str

    def to_payload(self) -> dict[str, Any]:
        return {
            "type": self.kind,
            "locator": self.expression,
            "reliability": self.reliability,
            "description": self.rationale,
        }


@dataclass(frozen=True, slots=True)
class SeleniumLocator:
    kind: SeleniumKind
    value: str

    @property
    def java(self) -> str:
        return f'By.{_SELENIUM_JAVA_METHODS[self.kind]}("{_escape_double_quoted(self.value)}")'

    @property
    def python(self) -> str:
        return f'By.{_SELENIUM_PYTHON_CONSTANTS[self.kind]}, "{_escape_double_quoted(self.value)}"'

    @property
    def csharp(self) -> str:
        return f'By.{_SELENIUM_CSHARP_METHODS[self.kind]}("{_escape_double_quoted(self.value)}")'

    def to_payload(self) -> dict[str, str]:
        return {"java": self.java, "python": self.python, "csharp": self.csharp}


@dataclass(frozen=True, slots=True)
class MatchScore:
    element: ElementRecord
    score: int


@dataclass(frozen=True, slots=True)
class ValidationResult:
    match_count: int
    suggestions: tuple[str, ...] = ()

    @property
    def is_valid(self) -> bool:
        return self.match_count > 0

    @property
    def is_unique(self) -> bool:
        return self.match_count == 1

    def to_payload(self) -> dict[str, Any]:
        return {
            "isValid": self.is_valid,
            "matchCount": self.match_count,
            "isUnique": self.is_unique,
            "suggestions": list(self.suggestions),
        }


@dataclass(slots=True)
class TestStep:
    __test__ = False

    action: str
    description: str
    locator: str | None = None
    value: str | None = None

    @classmethod
    def from_payload(cls, payload: dict[str, Any]) -> TestStep:
        locator = payload.get("locator")
        value = payload.get("value")
        return cls(
            action=str(payload.get("action", "")).strip(),
            description=str(payload.get("description", "")).strip(),
            locator=str(locator) if locator not in (None, "") else None,
            value=str(value) if value is not None else None,
        )


@dataclass(slots=True)
class StepResult:
    step: str
    action: str
    status: StepStatus
    duration_ms: int
    error: str | None = None

    def to_payload(self) -> dict[str, Any]:
        payload: dict[str, Any] = {
            "step": self.step,
            "action": self.action,
            "status": self.status,
            "duration": self.duration_ms,
        }
        if self.error:
            payload["error"] = self.error
        return payload


@dataclass(slots=True)
class TestResult:
    __test__ = False

    test_name: str
    status: TestStatus
    duration_ms: int
    steps: list[StepResult] = field(default_factory=list)
    screenshot_path: str | None = None
    final_url: str | None = None
    error: str | None = None

    @property
    def passed_steps(self) -> int:
        return sum(1 for step in self.steps if step.status == "passed")

    @property
    def failed_steps(self) -> int:
        return sum(1 for step in self.steps if step.status == "failed")

    def to_payload(self) -> dict[str, Any]:
        return {
            "testName": self.test_name,
            "status": self.status,
            "duration": self.duration_ms,
            "steps": [step.to_payload() for step in self.steps],
            "totalSteps": len(self.steps),
            "passedSteps": self.passed_steps,
            "failedSteps": self.failed_steps,
            "screenshotPath": self.screenshot_path,
            "finalUrl": self.final_url,
            "error": self.error,
        }


_SELENIUM_JAVA_METHODS: dict[str, str] = {
    "id": "id",
    "name": "name",
    "css": "cssSelector",
    "xpath": "xpath",
    "linkText": "linkText",
    "className": "className",
    "tagName": "tagName",
}

_SELENIUM_PYTHON_CONSTANTS: dict[str, str] = {
    "id": "ID",
    "name": "NAME",
    "css": "CSS_SELECTOR",
    "xpath": "XPATH",
    "linkText": "LINK_TEXT",
    "className": "CLASS_NAME",
    "tagName": "TAG_NAME",
}

_SELENIUM_CSHARP_METHODS: dict[str, str] = {
    "id": "Id",
    "name": "Name",
    "css": "CssSelector",
    "xpath": "XPath",
    "linkText": "LinkText",
    "className": "ClassName",
    "tagName": "TagName",
}


def _escape_double_quoted(value: str) -> str:
    return value.replace("\\", "\\\\").replace('"', '\\"')
