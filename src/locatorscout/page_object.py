from __future__ import annotations

from dataclasses import dataclass
import re
from typing import Callable, Iterable, Sequence

from .element_matcher import describe_element
from .locator_generator import generate_locators
from .locator_ops import double_quoted, render_expression, render_python, single_quoted
from .models import ElementRecord, LocatorOp
from .name_suggester import capitalize, suggest_property_names, to_snake_case, to_upper_snake
from .scoring import rank_candidates

PAGE_OBJECT_LANGUAGES: tuple[str, ...] = (
    "typescript",
    "javascript",
    "python",
    "java-selenium",
    "python-selenium",
    "csharp-selenium",
)

_NON_FILLABLE_INPUT_TYPES = frozenset(
    {"checkbox", "radio", "submit", "button", "reset", "file", "hidden", "image"}
)
_SUBMIT_NAME_HINTS = ("submit", "login", "signin", "signup")

_JAVA_FIND_BY = {"id": "id", "name": "name", "css": "css"}
_PYTHON_BY = {"id": "By.ID", "name": "By.NAME", "css": "By.CSS_SELECTOR"}
_CSHARP_HOW = {"id": "How.Id", "name": "How.Name", "css": "How.CssSelector"}


@dataclass(frozen=True, slots=True)
class PageElement:
    property_name: str
    record: ElementRecord
    op: LocatorOp
    description: str

    @property
    def snake_name(self) -> str:
        return to_snake_case(self.property_name)

    @property
    def is_fillable(self) -> bool:
        tag = self.record.tag.lower()
        if tag == "textarea":
            return True
        return tag == "input" and (self.record.type or "text").lower() not in _NON_FILLABLE_INPUT_TYPES

    @property
    def selenium_target(self) -> tuple[str, str]:
        if self.record.id:
            return "id", self.record.id
        if self.record.name:
            return "name", self.record.name
        return "css", self.record.fallback_selector or self.record.tag


def build_page_elements(
    records: Iterable[ElementRecord],
    max_elements: int = 30,
    max_text_length: int = 100,
) -> list[PageElement]:
    selected = list(records)[:max_elements]
    names = suggest_property_names(selected)
    elements: list[PageElement] = []
    for name, record in zip(names, selected):
        best = rank_candidates(generate_locators(record, max_text_length=max_text_length))[0]
        elements.append(PageElement(name, record, best.op, describe_element(record)))
    return elements


def normalize_class_name(raw_value: str) -> str:
    parts = [part for part in re.split(r"[^A-Za-z0-9]+", raw_value or "") if part]
    if not parts:
        raise ValueError("className must contain letters or digits.")
    class_name = "".join(part[:1].upper() + part[1:] for part in parts)
    if not class_name[:1].isalpha():
        raise ValueError("className must start with a letter.")
    return class_name


def render_page_object(
    class_name: str,
    elements: Sequence[PageElement],
    url: str,
    language: str = "typescript",
) -> str:
    renderer = _RENDERERS[normalize_language(language)]
    return renderer(normalize_class_name(class_name), list(elements), url)


def normalize_language(language: str) -> str:
    normalized = (language or "").strip().lower()
    if normalized not in PAGE_OBJECT_LANGUAGES:
        raise ValueError(
            f"Unsupported page object language {language!r}; expected one of {', '.join(PAGE_OBJECT_LANGUAGES)}"
        )
    return normalized


def find_submit_element(elements: Sequence[PageElement]) -> PageElement | None:
    for element in elements:
        lowered = element.property_name.lower()
        if any(hint in lowered for hint in _SUBMIT_NAME_HINTS):
            return element
    return None


def _header_lines(url: str, count: int, prefix: str) -> list[str]:
    return [
        f"{prefix}Page Object Model for: {url}",
        f"{prefix}Generated by locatorscout",
        f"{prefix}Elements: {count}",
    ]


def _render_typescript(class_name: str, elements: list[PageElement], url: str) -> str:
    lines = ["import { Page, Locator } from '@playwright/test';", "", "/**"]
    lines += _header_lines(url, len(elements), " * ")
    lines += [" */", f"export class {class_name} {{", "  readonly page: Page;"]
    lines += [f"  readonly {item.property_name}: Locator; // {item.description}" for item in elements]
    lines += ["", "  constructor(page: Page) {", "    this.page = page;"]
    lines += [f"    this.{item.property_name} = page.{render_expression(item.op)};" for item in elements]
    lines += [
        "  }",
        "",
        "  async navigate(): Promise<void> {",
        f"    await this.page.goto({single_quoted(url)});",
        "  }",
        "",
        "  async waitForPageLoad(): Promise<void> {",
        "    await this.page.waitForLoadState('networkidle');",
        "  }",
    ]
    lines += _script_actions(elements, typed=True)
    lines.append("}")
    return "\n".join(lines) + "\n"


def _render_javascript(class_name: str, elements: list[PageElement], url: str) -> str:
    lines = ["/**"]
    lines += _header_lines(url, len(elements), " * ")
    lines += [
        " */",
        f"class {class_name} {{",
        "  /**",
        "   * @param {import('@playwright/test').Page} page",
        "   */",
        "  constructor(page) {",
        "    this.page = page;",
    ]
    lines += [
        f"    this.{item.property_name} = page.{render_expression(item.op)}; // {item.description}"
        for item in elements
    ]
    lines += [
        "  }",
        "",
        "  async navigate() {",
        f"    await this.page.goto({single_quoted(url)});",
        "  }",
        "",
        "  async waitForPageLoad() {",
        "    await this.page.waitForLoadState('networkidle');",
        "  }",
    ]
    lines += _script_actions(elements, typed=False)
    lines += ["}", "", f"module.exports = {{ {class_name} }};"]
    return "\n".join(lines) + "\n"


def _script_actions(elements: list[PageElement], typed: bool) -> list[str]:
    lines: list[str] = []
    fillable = [item for item in elements if item.is_fillable]
    returns = ": Promise<void>" if typed else ""
    if fillable:
        params = ", ".join(f"{item.property_name}: string" if typed else item.property_name for item in fillable)
        lines += ["", f"  async fillForm({params}){returns} {{"]
        lines += [f"    await this.{item.property_name}.fill({item.property_name});" for item in fillable]
        lines.append("  }")

    submit = find_submit_element(elements)
    if submit:
        lines += [
            "",
            f"  async submit(){returns} {{",
            f"    await this.{submit.property_name}.click();",
            "  }",
        ]
    return lines


def _render_python(class_name: str, elements: list[PageElement], url: str) -> str:
    lines = ['"""']
    lines += _header_lines(url, len(elements), "")
    lines += [
        '"""',
        "from playwright.sync_api import Page",
        "",
        "",
        f"class {class_name}:",
        f'    """Page object for {class_name}."""',
        "",
        "    def __init__(self, page: Page) -> None:",
        "        self.page = page",
    ]
    lines += [
        f"        self.{item.snake_name} = page.{render_python(item.op)}  # {item.description}"
        for item in elements
    ]
    lines += [
        "",
        "    def navigate(self) -> None:",
        f"        self.page.goto({double_quoted(url)})",
        "",
        "    def wait_for_page_load(self) -> None:",
        '        self.page.wait_for_load_state("networkidle")',
    ]

    fillable = [item for item in elements if item.is_fillable]
    if fillable:
        params = ", ".join(f"{item.snake_name}: str" for item in fillable)
        lines += ["", f"    def fill_form(self, {params}) -> None:"]
        lines += [f"        self.{item.snake_name}.fill({item.snake_name})" for item in fillable]

    submit = find_submit_element(elements)
    if submit:
        lines += ["", "    def submit(self) -> None:", f"        self.{submit.snake_name}.click()"]
    return "\n".join(lines) + "\n"


def _render_java_selenium(class_name: str, elements: list[PageElement], url: str) -> str:
    lines = [
        "package pages;",
        "",
        "import org.openqa.selenium.WebDriver;",
        "import org.openqa.selenium.WebElement;",
        "import org.openqa.selenium.support.FindBy;",
        "import org.openqa.selenium.support.PageFactory;",
        "",
        "/**",
    ]
    lines += _header_lines(url, len(elements), " * ")
    lines += [" */", f"public class {class_name} {{", "", "    private WebDriver driver;"]
    for item in elements:
        kind, value = item.selenium_target
        lines += [
            "",
            f"    @FindBy({_JAVA_FIND_BY[kind]} = {double_quoted(value)})",
            f"    private WebElement {item.property_name}; // {item.description}",
        ]
    lines += [
        "",
        f"    public {class_name}(WebDriver driver) {{",
        "        this.driver = driver;",
        "        PageFactory.initElements(driver, this);",
        "    }",
        "",
        "    public void navigate() {",
        f"        driver.get({double_quoted(url)});",
        "    }",
    ]
    for item in elements:
        lines += [
            "",
            f"    public WebElement get{capitalize(item.property_name)}() {{",
            f"        return {item.property_name};",
            "    }",
        ]

    fillable = [item for item in elements if item.is_fillable]
    if fillable:
        params = ", ".join(f"String {item.property_name}" for item in fillable)
        lines += ["", f"    public void fillForm({params}) {{"]
        lines += [f"        this.{item.property_name}.sendKeys({item.property_name});" for item in fillable]
        lines.append("    }")

    submit = find_submit_element(elements)
    if submit:
        lines += ["", "    public void submit() {", f"        {submit.property_name}.click();", "    }"]
    lines.append("}")
    return "\n".join(lines) + "\n"


def _render_python_selenium(class_name: str, elements: list[PageElement], url: str) -> str:
    lines = ['"""']
    lines += _header_lines(url, len(elements), "")
    lines += [
        '"""',
        "from selenium.webdriver.common.by import By",
        "from selenium.webdriver.remote.webdriver import WebDriver",
        "from selenium.webdriver.remote.webelement import WebElement",
        "from selenium.webdriver.support.ui import WebDriverWait",
        "",
        "",
        f"class {class_name}:",
        f'    """Page object for {class_name}."""',
        "",
        f"    URL = {double_quoted(url)}",
        "",
    ]
    for item in elements:
        kind, value = item.selenium_target
        lines.append(
            f"    {to_upper_snake(item.property_name)} = ({_PYTHON_BY[kind]}, {double_quoted(value)})"
            f"  # {item.description}"
        )
    lines += [
        "",
        "    def __init__(self, driver: WebDriver) -> None:",
        "        self.driver = driver",
        "        self.wait = WebDriverWait(driver, 10)",
        "",
        "    def navigate(self) -> None:",
        "        self.driver.get(self.URL)",
    ]
    for item in elements:
        lines += [
            "",
            f"    def get_{item.snake_name}(self) -> WebElement:",
            f"        return self.driver.find_element(*self.{to_upper_snake(item.property_name)})",
        ]

    fillable = [item for item in elements if item.is_fillable]
    if fillable:
        params = ", ".join(f"{item.snake_name}: str" for item in fillable)
        lines += ["", f"    def fill_form(self, {params}) -> None:"]
        lines += [f"        self.get_{item.snake_name}().send_keys({item.snake_name})" for item in fillable]

    submit = find_submit_element(elements)
    if submit:
        lines += ["", "    def submit(self) -> None:", f"        self.get_{submit.snake_name}().click()"]
    return "\n".join(lines) + "\n"


def _render_csharp_selenium(class_name: str, elements: list[PageElement], url: str) -> str:
    lines = [
        "using System;",
        "using OpenQA.Selenium;",
        "using OpenQA.Selenium.Support.UI;",
        "using SeleniumExtras.PageObjects;",
        "",
        "namespace Pages",
        "{",
        "    /// <summary>",
    ]
    lines += _header_lines(url, len(elements), "    /// ")
    lines += [
        "    /// </summary>",
        f"    public class {class_name}",
        "    {",
        "        private readonly IWebDriver _driver;",
        "        private readonly WebDriverWait _wait;",
    ]
    for item in elements:
        kind, value = item.selenium_target
        lines += [
            "",
            f"        [FindsBy(How = {_CSHARP_HOW[kind]}, Using = {double_quoted(value)})]",
            f"        private IWebElement {capitalize(item.property_name)}; // {item.description}",
        ]
    lines += [
        "",
        f"        public {class_name}(IWebDriver driver)",
        "        {",
        "            _driver = driver;",
        "            _wait = new WebDriverWait(driver, TimeSpan.FromSeconds(10));",
        "            PageFactory.InitElements(driver, this);",
        "        }",
        "",
        "        public void Navigate()",
        "        {",
        f"            _driver.Navigate().GoToUrl({double_quoted(url)});",
        "        }",
    ]
    for item in elements:
        field_name = capitalize(item.property_name)
        lines += ["", f"        public IWebElement Get{field_name}() => {field_name};"]

    fillable = [item for item in elements if item.is_fillable]
    if fillable:
        params = ", ".join(f"string {item.property_name}" for item in fillable)
        lines += ["", f"        public void FillForm({params})", "        {"]
        lines += [
            f"            {capitalize(item.property_name)}.SendKeys({item.property_name});" for item in fillable
        ]
        lines.append("        }")

    submit = find_submit_element(elements)
    if submit:
        lines += [
            "",
            "        public void Submit()",
            "        {",
            f"            {capitalize(submit.property_name)}.Click();",
            "        }",
        ]
    lines += ["    }", "}"]
    return "\n".join(lines) + "\n"


_RENDERERS: dict[str, Callable[[str, list[PageElement], str], str]] = {
    "typescript": _render_typescript,
    "javascript": _render_javascript,
    "python": _render_python,
    "java-selenium": _render_java_selenium,
    "python-selenium": _render_python_selenium,
    "csharp-selenium": _render_csharp_selenium,
}
