from __future__ import annotations

from .models import (
    ElementRecord,
    LabelOp,
    LocatorCandidate,
    PlaceholderOp,
    RoleOp,
    SelectorOp,
    SeleniumLocator,
    TestIdOp,
    TextOp,
)
from .runtime_checks import build_id_selector, escape_css_attribute_value
from .scoring import build_candidate

_TAG_ROLES: dict[str, str] = {
    "button": "button",
    "a": "link",
    "select": "combobox",
    "textarea": "textbox",
    "img": "img",
}

_INPUT_TYPE_ROLES: dict[str, str] = {
    "submit": "button",
    "button": "button",
    "checkbox": "checkbox",
    "radio": "radio",
    "search": "searchbox",
    "number": "spinbutton",
}

_TEXTLESS_TAGS = frozenset({"input", "textarea"})


def infer_role(record: ElementRecord) -> str | None:
    tag = record.tag.lower()
    if tag in _TAG_ROLES:
        return _TAG_ROLES[tag]
    if tag == "input":
        input_type = (record.type or "text").strip().lower()
        return _INPUT_TYPE_ROLES.get(input_type, "textbox")
    return None


def effective_role(record: ElementRecord) -> str | None:
    explicit = (record.role or "").strip()
    return explicit or infer_role(record)


def accessible_name(record: ElementRecord) -> str | None:
    for value in (record.aria_label, record.visible_text, record.title):
        if value and value.strip():
            return value
    return None


def generate_locators(record: ElementRecord, max_text_length: int = 100) -> list[LocatorCandidate]:
    """Emit every applicable locator for ``record`` in fixed emission order.

    The xpath candidate is always present, so the result is never empty.
    """

    def clip(value: str) -> str:
        return value[:max_text_length]

    candidates: list[LocatorCandidate] = []

    if record.test_id:
        candidates.append(build_candidate("testId", TestIdOp(clip(record.test_id))))

    role = effective_role(record)
    if role:
        name = accessible_name(record)
        if name:
            candidates.append(build_candidate("role", RoleOp(role, clip(name))))
        else:
            candidates.append(build_candidate("bareRole", RoleOp(role)))

    if record.aria_label:
        candidates.append(build_candidate("label", LabelOp(clip(record.aria_label))))

    if record.placeholder:
        candidates.append(build_candidate("placeholder", PlaceholderOp(clip(record.placeholder))))

    if record.visible_text and record.tag.lower() not in _TEXTLESS_TAGS:
        candidates.append(build_candidate("text", TextOp(clip(record.visible_text))))

    id_selector = build_id_selector(record.id)
    if id_selector:
        candidates.append(build_candidate("id", SelectorOp(id_selector)))

    if record.name:
        selector = f'[name="{escape_css_attribute_value(clip(record.name))}"]'
        candidates.append(build_candidate("name", SelectorOp(selector)))

    if record.fallback_selector and record.fallback_selector != record.tag:
        candidates.append(build_candidate("css", SelectorOp(record.fallback_selector)))

    candidates.append(build_candidate("xpath", SelectorOp(record.structural_path)))
    return candidates


def generate_selenium_locators(record: ElementRecord, max_text_length: int = 100) -> list[SeleniumLocator]:
    locators: list[SeleniumLocator] = []

    if record.id:
        locators.append(SeleniumLocator("id", record.id))
    if record.name:
        locators.append(SeleniumLocator("name", record.name))
    if record.fallback_selector:
        locators.append(SeleniumLocator("css", record.fallback_selector))
    if record.structural_path:
        locators.append(SeleniumLocator("xpath", record.structural_path))
    if record.tag.lower() == "a" and record.visible_text:
        locators.append(SeleniumLocator("linkText", record.visible_text[:max_text_length]))

    classes = record.class_names
    if classes and ":" not in classes[0]:
        locators.append(SeleniumLocator("className", classes[0]))

    locators.append(SeleniumLocator("tagName", record.tag))
    return locators
