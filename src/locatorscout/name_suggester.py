from __future__ import annotations

import re
from typing import Iterable

from .models import ElementRecord

_MAX_NAME_WORDS = 4


def suggest_property_name(record: ElementRecord) -> str:
    source = _best_name_source(record)
    base = to_camel_case(source) or to_camel_case(record.tag)
    suffix = element_suffix(record)
    if not base:
        return "element"
    if suffix and base.lower().endswith(suffix.lower()):
        return base
    return f"{base}{suffix}"


def suggest_property_names(records: Iterable[ElementRecord]) -> list[str]:
    return dedupe_names(suggest_property_name(record) for record in records)


def dedupe_names(names: Iterable[str]) -> list[str]:
    used: set[str] = set()
    unique: list[str] = []
    for name in names:
        candidate = name
        count = 1
        while candidate in used:
            count += 1
            candidate = f"{name}{count}"
        used.add(candidate)
        unique.append(candidate)
    return unique


def element_suffix(record: ElementRecord) -> str:
    tag = record.tag.lower()
    input_type = (record.type or "").lower()

    if tag == "button" or input_type in {"submit", "button"}:
        return "Button"
    if tag == "a":
        return "Link"
    if tag == "select":
        return "Select"
    if tag == "textarea":
        return "Textarea"
    if input_type == "checkbox":
        return "Checkbox"
    if input_type == "radio":
        return "Radio"
    if tag == "input":
        return "Input"
    return ""


def to_camel_case(value: str, max_words: int = _MAX_NAME_WORDS) -> str:
    words = re.sub(r"[^A-Za-z0-9]+", " ", value).split()[:max_words]
    if not words:
        return ""
    camel = words[0].lower() + "".join(word[:1].upper() + word[1:].lower() for word in words[1:])
    if camel[0].isdigit():
        camel = f"element{camel[:1].upper()}{camel[1:]}"
    return camel


def to_snake_case(value: str) -> str:
    return re.sub(r"([A-Z])", r"_\1", value).lower().lstrip("_")


def to_upper_snake(value: str) -> str:
    return to_snake_case(value).upper()


def capitalize(value: str) -> str:
    return value[:1].upper() + value[1:]


def _best_name_source(record: ElementRecord) -> str:
    for value in (
        record.test_id,
        record.id,
        record.name,
        record.aria_label,
        record.visible_text,
        record.placeholder,
    ):
        if value and value.strip():
            return value.strip()
    return record.tag
