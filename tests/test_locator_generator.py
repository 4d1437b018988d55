from locatorscout.locator_generator import (
    accessible_name,
    effective_role,
    generate_locators,
    generate_selenium_locators,
    infer_role,
)
from locatorscout.models import ElementRecord, RoleOp, SelectorOp
from locatorscout.scoring import rank_candidates


def _record(tag: str, **fields) -> ElementRecord:
    fields.setdefault("structural_path", f"/html[1]/body[1]/{tag}[1]")
    fields.setdefault("fallback_selector", tag)
    return ElementRecord(tag=tag, **fields)


def test_test_id_button_ranks_test_id_role_then_label() -> None:
    record = _record(
        "button",
        test_id="login-btn",
        aria_label="Login",
        visible_text="Login",
        structural_path="/html[1]/body[1]/form[1]/button[1]",
    )

    ranked = rank_candidates(generate_locators(record))

    assert [(item.kind, item.reliability) for item in ranked[:3]] == [
        ("testId", 98),
        ("role", 95),
        ("label", 90),
    ]
    assert ranked[0].expression == "getByTestId('login-btn')"
    assert ranked[1].expression == "getByRole('button', { name: 'Login' })"
    assert ranked[2].expression == "getByLabel('Login')"
    assert ranked[-1].kind == "xpath"
    assert ranked[-1].expression == "locator('/html[1]/body[1]/form[1]/button[1]')"


def test_bare_div_only_gets_structural_xpath() -> None:
    record = _record("div")
    candidates = generate_locators(record)

    assert [item.kind for item in candidates] == ["xpath"]
    assert candidates[0].expression == "locator('/html[1]/body[1]/div[1]')"
    assert candidates[0].reliability == 40


def test_unnamed_checkbox_gets_bare_role() -> None:
    record = _record("input", type="checkbox", id="terms", structural_path='//*[@id="terms"]', fallback_selector="#terms")
    candidates = generate_locators(record)

    bare = [item for item in candidates if item.kind == "bareRole"]
    assert len(bare) == 1
    assert bare[0].op == RoleOp("checkbox")
    assert bare[0].expression == "getByRole('checkbox')"
    assert bare[0].reliability == 70
    assert "role" not in [item.kind for item in candidates]


def test_inputs_and_textareas_never_get_text_locator() -> None:
    textarea = _record("textarea", visible_text="Draft message", placeholder="Message")
    kinds = [item.kind for item in generate_locators(textarea)]

    assert "text" not in kinds
    assert "placeholder" in kinds


def test_emission_order_is_fixed() -> None:
    record = _record(
        "input",
        id="email",
        name="email",
        type="email",
        placeholder="Email address",
        aria_label="Email",
        test_id="email-input",
        fallback_selector="#email",
        structural_path='//*[@id="email"]',
    )
    kinds = [item.kind for item in generate_locators(record)]

    assert kinds == ["testId", "role", "label", "placeholder", "id", "name", "css", "xpath"]


def test_id_and_name_candidates_are_css_selectors() -> None:
    record = _record("input", id="user name", name='q"x', type="search")
    by_kind = {item.kind: item for item in generate_locators(record)}

    assert by_kind["id"].expression == "locator('[id=\"user name\"]')"
    assert by_kind["name"].expression == "locator('[name=\"q\\\\\"x\"]')"
    assert by_kind["name"].reliability == 80


def test_quotes_in_text_are_escaped() -> None:
    record = _record("a", visible_text="Don't stop")
    by_kind = {item.kind: item for item in generate_locators(record)}

    assert by_kind["text"].expression == "getByText('Don\\'t stop')"
    assert by_kind["role"].expression == "getByRole('link', { name: 'Don\\'t stop' })"


def test_text_is_truncated_before_escaping() -> None:
    text = "a" * 9 + "'" + "b" * 20
    record = _record("span", role="note", visible_text=text)
    by_kind = {item.kind: item for item in generate_locators(record, max_text_length=10)}

    assert by_kind["text"].op.text == "a" * 9 + "'"
    assert by_kind["text"].expression == "getByText('" + "a" * 9 + "\\'')"


def test_role_name_prefers_aria_label_then_text_then_title() -> None:
    assert accessible_name(_record("button", aria_label="Close", visible_text="X")) == "Close"
    assert accessible_name(_record("button", visible_text="Save", title="Save draft")) == "Save"
    assert accessible_name(_record("button", title="Settings")) == "Settings"
    assert accessible_name(_record("button")) is None


def test_role_inference() -> None:
    assert infer_role(_record("a")) == "link"
    assert infer_role(_record("select")) == "combobox"
    assert infer_role(_record("input")) == "textbox"
    assert infer_role(_record("input", type="submit")) == "button"
    assert infer_role(_record("input", type="radio")) == "radio"
    assert infer_role(_record("div")) is None
    assert effective_role(_record("div", role="tab")) == "tab"


def test_generation_is_deterministic() -> None:
    record = _record("button", id="go", visible_text="Go", class_name="btn", fallback_selector="#go")
    first = [item.expression for item in generate_locators(record)]
    second = [item.expression for item in generate_locators(record)]
    assert first == second


def test_selenium_locators_end_with_tag_name() -> None:
    record = _record(
        "a",
        id="home",
        name="home-link",
        class_name="nav-link active",
        visible_text="Home",
        fallback_selector="#home",
        structural_path='//*[@id="home"]',
    )
    locators = generate_selenium_locators(record)

    assert [item.kind for item in locators] == ["id", "name", "css", "xpath", "linkText", "className", "tagName"]
    assert locators[0].to_payload() == {
        "java": 'By.id("home")',
        "python": 'By.ID, "home"',
        "csharp": 'By.Id("home")',
    }
    assert locators[3].java == 'By.xpath("//*[@id=\\"home\\"]")'
    assert locators[-1].python == 'By.TAG_NAME, "a"'


def test_selenium_skips_variant_class_names() -> None:
    record = _record("button", class_name="hover:bg-blue btn")
    kinds = [item.kind for item in generate_selenium_locators(record)]

    assert "className" not in kinds
    assert kinds[-1] == "tagName"


def test_name_attribute_is_truncated() -> None:
    record = _record("input", name="n" * 150)
    by_kind = {item.kind: item for item in generate_locators(record, max_text_length=100)}

    assert by_kind["name"].op == SelectorOp('[name="' + "n" * 100 + '"]')
