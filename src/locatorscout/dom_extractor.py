from __future__ import annotations

from typing import TYPE_CHECKING, Any, Iterable, Mapping, Sequence

from .models import ElementRecord
from .runtime_checks import build_id_selector
from .selector_rules import (
    MAX_FALLBACK_CLASSES,
    css_escape_identifier,
    is_noise_class,
    normalize_space,
    xpath_literal,
)

if TYPE_CHECKING:
    from playwright.sync_api import Page

INTERACTIVE_SELECTORS: tuple[str, ...] = (
    "button",
    "a[href]",
    "input",
    "select",
    "textarea",
    "[role='button']",
    "[role='link']",
    "[role='textbox']",
    "[role='checkbox']",
    "[role='radio']",
    "[role='combobox']",
    "[role='menuitem']",
    "[role='tab']",
    "[onclick]",
    "[tabindex]:not([tabindex^='-'])",
)

TEST_ID_ATTRIBUTES: tuple[str, ...] = ("data-testid", "data-test-id", "data-cy")

_SCAN_SCRIPT = """
({ selectors, testIdAttributes, maxTextLength }) => {
  const seen = new Set();
  const results = [];
  const clean = (value) => (value || '').replace(/\\s+/g, ' ').trim();

  const pathSegments = (el) => {
    const segments = [];
    let current = el;
    while (current && current.nodeType === Node.ELEMENT_NODE) {
      let index = 1;
      let sibling = current.previousElementSibling;
      while (sibling) {
        if (sibling.tagName === current.tagName) index += 1;
        sibling = sibling.previousElementSibling;
      }
      segments.unshift([current.tagName.toLowerCase(), index]);
      current = current.parentElement;
    }
    return segments;
  };

  for (const selector of selectors) {
    for (const el of document.querySelectorAll(selector)) {
      if (seen.has(el)) continue;
      seen.add(el);

      const rect = el.getBoundingClientRect();
      const style = window.getComputedStyle(el);
      let testId = null;
      for (const attr of testIdAttributes) {
        const value = el.getAttribute(attr);
        if (value) {
          testId = value;
          break;
        }
      }

      results.push({
        tag: el.tagName.toLowerCase(),
        id: el.id || null,
        name: el.getAttribute('name') || null,
        class_name: el.getAttribute('class') || null,
        classes: Array.from(el.classList || []),
        type: (typeof el.type === 'string' && el.type) ? el.type : (el.getAttribute('type') || null),
        placeholder: el.getAttribute('placeholder') || null,
        text: clean(el.innerText).slice(0, maxTextLength) || null,
        aria_label: el.getAttribute('aria-label') || null,
        role: el.getAttribute('role') || null,
        test_id: testId,
        href: (typeof el.href === 'string' && el.href) ? el.href : (el.getAttribute('href') || null),
        title: el.getAttribute('title') || null,
        value: (typeof el.value === 'string' && el.value) ? el.value : null,
        width: rect.width,
        height: rect.height,
        display: style.display,
        visibility: style.visibility,
        path: pathSegments(el),
      });
    }
  }
  return results;
}
"""


def extract_elements(page: Page, max_text_length: int = 100) -> list[ElementRecord]:
    payload: list[dict[str, Any]] = page.evaluate(
        _SCAN_SCRIPT,
        {
            "selectors": list(INTERACTIVE_SELECTORS),
            "testIdAttributes": list(TEST_ID_ATTRIBUTES),
            "maxTextLength": max_text_length,
        },
    )
    return build_element_records(payload or [], max_text_length=max_text_length)


def build_element_records(
    payload: Iterable[Mapping[str, Any]], max_text_length: int = 100
) -> list[ElementRecord]:
    return [
        build_element_record(item, max_text_length=max_text_length)
        for item in payload
        if isinstance(item, Mapping) and is_rendered(item)
    ]


def is_rendered(item: Mapping[str, Any]) -> bool:
    width = _to_float(item.get("width"))
    height = _to_float(item.get("height"))
    if width == 0 or height == 0:
        return False
    if str(item.get("display") or "").strip().lower() == "none":
        return False
    if str(item.get("visibility") or "").strip().lower() == "hidden":
        return False
    return True


def build_element_record(item: Mapping[str, Any], max_text_length: int = 100) -> ElementRecord:
    tag = str(item.get("tag") or "").strip().lower() or "*"
    element_id = _optional(item.get("id"))
    classes = item.get("classes")
    if not isinstance(classes, list):
        classes = str(item.get("class_name") or "").split()

    return ElementRecord(
        tag=tag,
        structural_path=build_structural_path(element_id, item.get("path") or []),
        fallback_selector=build_fallback_selector(tag, element_id, [str(token) for token in classes]),
        id=element_id,
        name=_optional(item.get("name")),
        class_name=_optional(item.get("class_name")),
        type=_optional(item.get("type")),
        placeholder=_optional(item.get("placeholder")),
        visible_text=normalize_space(item.get("text"), limit=max_text_length) or None,
        aria_label=_optional(item.get("aria_label")),
        role=_optional(item.get("role")),
        test_id=_optional(item.get("test_id")),
        href=_optional(item.get("href")),
        title=_optional(item.get("title")),
        current_value=_optional(item.get("value")),
    )


def build_structural_path(element_id: str | None, segments: Sequence[Sequence[Any]]) -> str:
    if element_id:
        return f"//*[@id={xpath_literal(element_id)}]"

    parts: list[str] = []
    for segment in segments:
        if len(segment) < 2:
            continue
        tag = str(segment[0]).strip().lower()
        if not tag:
            continue
        parts.append(f"{tag}[{int(segment[1])}]")
    return "/" + "/".join(parts)


def build_fallback_selector(tag: str, element_id: str | None, classes: Iterable[str]) -> str:
    id_selector = build_id_selector(element_id)
    if id_selector:
        return id_selector

    kept = [css_escape_identifier(token) for token in classes if token and not is_noise_class(token)]
    kept = kept[:MAX_FALLBACK_CLASSES]
    if kept:
        return f"{tag}." + ".".join(kept)
    return tag


def _optional(value: Any) -> str | None:
    if value is None:
        return None
    text = str(value)
    return text if text.strip() else None


def _to_float(value: Any) -> float:
    try:
        return float(value)
    except (TypeError, ValueError):
        return 0.0
