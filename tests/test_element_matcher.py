from locatorscout.element_matcher import (
    MATCH_WEIGHTS,
    describe_element,
    match_elements,
    score_element,
    score_elements,
)
from locatorscout.models import ElementRecord


def _record(tag: str, **fields) -> ElementRecord:
    fields.setdefault("structural_path", f"/html[1]/body[1]/{tag}[1]")
    fields.setdefault("fallback_selector", tag)
    return ElementRecord(tag=tag, **fields)


def test_submit_button_outscores_unrelated_elements() -> None:
    submit = _record("button", id="submit-btn", visible_text="Submit")
    search = _record("input", type="text", placeholder="Search")

    scored = score_elements([search, submit], "submit button")

    assert [item.element for item in scored] == [submit]
    # "submit": keyword + visible text; "button": keyword via tag.
    assert scored[0].score == 4


def test_exact_id_and_test_id_bonuses() -> None:
    element = _record("input", id="email", test_id="email-field")
    assert score_element(element, ["email"]) == (
        MATCH_WEIGHTS["keyword"] + MATCH_WEIGHTS["id_exact"] + MATCH_WEIGHTS["test_id"]
    )
    assert score_element(_record("input", id="email-address"), ["email"]) == MATCH_WEIGHTS["keyword"]


def test_zero_scores_are_dropped_and_ties_keep_document_order() -> None:
    first = _record("a", visible_text="Pricing")
    second = _record("a", visible_text="Pricing plans")
    unrelated = _record("div", class_name="footer")

    assert match_elements([first, unrelated, second], "pricing") == [first, second]


def test_empty_query_matches_nothing() -> None:
    assert match_elements([_record("button", visible_text="Save")], "   ") == []


def test_match_is_case_insensitive() -> None:
    element = _record("input", aria_label="Email Address")
    assert score_element(element, ["email"]) == MATCH_WEIGHTS["keyword"] + MATCH_WEIGHTS["aria_label"]
    assert match_elements([element], "EMAIL") == [element]


def test_describe_element() -> None:
    element = _record(
        "input",
        type="email",
        name="email",
        placeholder="you@example.com",
        aria_label="Email",
    )
    assert describe_element(element) == (
        'placeholder="you@example.com" aria-label="Email" type=email name="email" <input>'
    )
    assert describe_element(_record("button", visible_text="x" * 40, type="button")) == (
        f'"{"x" * 30}" <button>'
    )
