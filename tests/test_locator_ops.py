import pytest

from locatorscout.locator_ops import (
    double_quoted,
    parse_locator,
    render_expression,
    render_python,
    resolve_locator,
    single_quoted,
)
from locatorscout.models import (
    AltTextOp,
    LabelOp,
    PlaceholderOp,
    RoleOp,
    SelectorOp,
    TestIdOp,
    TextOp,
)


@pytest.mark.parametrize(
    ("expression", "expected"),
    [
        ("getByTestId('login-btn')", TestIdOp("login-btn")),
        ("page.getByRole('button', { name: 'Sign in' })", RoleOp("button", "Sign in")),
        ("getByRole(\"checkbox\")", RoleOp("checkbox")),
        ('get_by_role("link", name="Home")', RoleOp("link", "Home")),
        ("getByLabel('Email')", LabelOp("Email")),
        ("get_by_placeholder('Search')", PlaceholderOp("Search")),
        ("getByText('Don\\'t stop')", TextOp("Don't stop")),
        ("getByAltText('Logo')", AltTextOp("Logo")),
        ("locator('#email')", SelectorOp("#email")),
        ("getByRole('button', { name: 'Login' }).first()", RoleOp("button", "Login")),
        ("page.getByTestId('x').nth(0)", TestIdOp("x")),
        ("locator('ul > li').last()", SelectorOp("ul > li")),
        ("//form/button[1]", SelectorOp("//form/button[1]", wrapped=False)),
        ("button.primary", SelectorOp("button.primary", wrapped=False)),
    ],
)
def test_parse_locator(expression: str, expected) -> None:
    assert parse_locator(expression) == expected


def test_parse_rejects_empty_expression() -> None:
    with pytest.raises(ValueError):
        parse_locator("page.")


def test_render_expression_and_python_forms() -> None:
    op = RoleOp("button", 'Say "hi"')
    assert render_expression(op) == "getByRole('button', { name: 'Say \"hi\"' })"
    assert render_python(op) == 'get_by_role("button", name="Say \\"hi\\"")'
    assert render_expression(SelectorOp("div > a", wrapped=False)) == "div > a"
    assert render_python(SelectorOp("div > a", wrapped=False)) == 'locator("div > a")'


def test_rendered_expressions_parse_back() -> None:
    ops = [
        TestIdOp("a'b"),
        RoleOp("button", "Log in"),
        LabelOp("C:\\path"),
        TextOp("Total: 5"),
        SelectorOp("//*[@id=\"x\"]"),
    ]
    assert [parse_locator(render_expression(op)) for op in ops] == ops


def test_quoting_helpers() -> None:
    assert single_quoted("it's") == "'it\\'s'"
    assert double_quoted('a "b"') == '"a \\"b\\""'


class RecordingPage:
    def __init__(self) -> None:
        self.calls: list[tuple] = []

    def __getattr__(self, name: str):
        def method(*args, **kwargs):
            self.calls.append((name, args, kwargs))
            return name

        return method


def test_resolve_locator_dispatches_to_page_methods() -> None:
    page = RecordingPage()
    resolve_locator(page, RoleOp("button", "Save"))
    resolve_locator(page, RoleOp("checkbox"))
    resolve_locator(page, SelectorOp("#id", wrapped=False))
    resolve_locator(page, AltTextOp("Logo"))

    assert page.calls == [
        ("get_by_role", ("button",), {"name": "Save"}),
        ("get_by_role", ("checkbox",), {}),
        ("locator", ("#id",), {}),
        ("get_by_alt_text", ("Logo",), {}),
    ]
