from locatorscout.models import ElementRecord
from locatorscout.name_suggester import (
    dedupe_names,
    element_suffix,
    suggest_property_name,
    suggest_property_names,
    to_camel_case,
    to_snake_case,
    to_upper_snake,
)


def _record(tag: str, **fields) -> ElementRecord:
    fields.setdefault("structural_path", f"/html[1]/body[1]/{tag}[1]")
    fields.setdefault("fallback_selector", tag)
    return ElementRecord(tag=tag, **fields)


def test_name_prefers_test_id_then_id_then_text() -> None:
    assert suggest_property_name(_record("button", test_id="checkout-btn", id="b1")) == "checkoutBtnButton"
    assert suggest_property_name(_record("input", id="user_email", type="email")) == "userEmailInput"
    assert suggest_property_name(_record("a", visible_text="Forgot your password?")) == "forgotYourPasswordLink"


def test_suffix_is_not_repeated() -> None:
    assert suggest_property_name(_record("button", visible_text="Submit button")) == "submitButton"
    assert suggest_property_name(_record("input", name="search-input")) == "searchInput"


def test_fallback_to_tag_and_digit_prefix() -> None:
    assert suggest_property_name(_record("div")) == "div"
    assert suggest_property_name(_record("select")) == "select"
    assert suggest_property_name(_record("textarea", placeholder="2nd address line")) == "element2ndAddressLineTextarea"


def test_element_suffix_by_tag_and_type() -> None:
    assert element_suffix(_record("input", type="checkbox")) == "Checkbox"
    assert element_suffix(_record("input", type="radio")) == "Radio"
    assert element_suffix(_record("input", type="submit")) == "Button"
    assert element_suffix(_record("div", role="button")) == ""


def test_duplicate_names_get_numbered() -> None:
    assert dedupe_names(["saveButton", "saveButton", "cancelButton", "saveButton"]) == [
        "saveButton",
        "saveButton2",
        "cancelButton",
        "saveButton3",
    ]
    records = [_record("a", visible_text="Docs"), _record("a", visible_text="Docs")]
    assert suggest_property_names(records) == ["docsLink", "docsLink2"]


def test_case_helpers() -> None:
    assert to_camel_case("Sign up for the newsletter today") == "signUpForThe"
    assert to_camel_case("!!!") == ""
    assert to_snake_case("emailInput") == "email_input"
    assert to_upper_snake("loginButton2") == "LOGIN_BUTTON2"


def test_numbered_names_never_collide_with_existing_ones() -> None:
    assert dedupe_names(["menu", "menu", "menu2"]) == ["menu", "menu2", "menu22"]
    records = [
        _record("div", role="tab", visible_text="Menu"),
        _record("div", role="tab", visible_text="Menu"),
        _record("div", role="tab", visible_text="Menu 2"),
    ]
    names = suggest_property_names(records)

    assert names[:2] == ["menu", "menu2"]
    assert len(set(names)) == 3
