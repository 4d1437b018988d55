import pytest

from locatorscout.models import TestStep
from locatorscout.script_writer import generate_test_script, python_test_function_name


def _steps() -> list[TestStep]:
    return [
        TestStep("navigate", "Open login page", value="https://example.com/login"),
        TestStep("fill", "Enter email", "getByLabel('Email')", "ada@example.com"),
        TestStep("click", "Submit", "getByRole('button', { name: 'Sign in' })"),
        TestStep("assert_url", "Lands on dashboard", value="/dashboard?tab=1"),
        TestStep("assert_visible", "Greeting shown", "#greeting"),
    ]


def test_typescript_script() -> None:
    code = generate_test_script("login works", _steps(), "typescript")

    assert code.startswith("import { test, expect } from '@playwright/test';\n")
    assert "test('login works', async ({ page }) => {" in code
    assert "  // Open login page\n  await page.goto('https://example.com/login');" in code
    assert "  await page.getByLabel('Email').fill('ada@example.com');" in code
    assert "  await page.getByRole('button', { name: 'Sign in' }).click();" in code
    assert "  await expect(page).toHaveURL(new RegExp('/dashboard\\\\?tab=1'));" in code
    assert "  await expect(page.locator('#greeting')).toBeVisible();" in code
    assert code.rstrip().endswith("});")


def test_javascript_script_uses_require() -> None:
    code = generate_test_script("login works", _steps(), "JavaScript")
    assert code.startswith("const { test, expect } = require('@playwright/test');")


def test_python_script() -> None:
    code = generate_test_script("Login works!", _steps(), "python")

    assert code.startswith("import re\n\nfrom playwright.sync_api import Page, expect\n")
    assert "def test_login_works(page: Page) -> None:" in code
    assert '    page.goto("https://example.com/login")' in code
    assert '    page.get_by_label("Email").fill("ada@example.com")' in code
    assert '    page.get_by_role("button", name="Sign in").click()' in code
    assert '    expect(page).to_have_url(re.compile("/dashboard\\\\?tab=1"))' in code
    assert '    expect(page.locator("#greeting")).to_be_visible()' in code


def test_python_script_skips_re_import_when_unused() -> None:
    code = generate_test_script("click", [TestStep("click", "Go", "#go")], "python")
    assert "import re" not in code
    assert '    page.locator("#go").click()' in code


def test_wait_defaults_to_one_second() -> None:
    code = generate_test_script("wait", [TestStep("wait", "Pause")], "typescript")
    assert "await page.waitForTimeout(1000);" in code


def test_locator_actions_require_a_locator() -> None:
    with pytest.raises(ValueError, match="requires a locator"):
        generate_test_script("broken", [TestStep("click", "Click nothing")], "typescript")


def test_unknown_language_is_rejected() -> None:
    with pytest.raises(ValueError, match="Unsupported script language"):
        generate_test_script("x", _steps(), "ruby")


def test_python_test_function_name() -> None:
    assert python_test_function_name("Checkout: happy path") == "test_checkout_happy_path"
    assert python_test_function_name("!!!") == "test_generated"
