from locatorscout.models import SelectorOp, TextOp
from locatorscout.scoring import RATIONALES, RELIABILITY, build_candidate, rank_candidates


def test_reliability_table_matches_locator_strategy_order() -> None:
    assert RELIABILITY == {
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
    assert set(RATIONALES) == set(RELIABILITY)


def test_build_candidate_renders_expression_and_payload() -> None:
    candidate = build_candidate("text", TextOp("Sign in"))

    assert candidate.expression == "getByText('Sign in')"
    assert candidate.to_payload() == {
        "type": "text",
        "locator": "getByText('Sign in')",
        "reliability": 75,
        "description": "Text content - may break if text changes",
    }


def test_rank_is_non_increasing_and_stable_on_ties() -> None:
    label = build_candidate("label", TextOp("Email"))
    xpath = build_candidate("xpath", SelectorOp("//input"))
    element_id = build_candidate("id", SelectorOp("#email"))
    css = build_candidate("css", SelectorOp("input.field"))

    ranked = rank_candidates([xpath, label, css, element_id])

    assert [item.kind for item in ranked] == ["label", "id", "css", "xpath"]
    scores = [item.reliability for item in ranked]
    assert scores == sorted(scores, reverse=True)

    reversed_tie = rank_candidates([element_id, label])
    assert [item.kind for item in reversed_tie] == ["id", "label"]
