from __future__ import annotations

import asyncio
import logging
from typing import Any

from mcp.server.fastmcp import FastMCP

from .config import Settings
from .locator_service import LocatorService
from .models import TestStep
from .runner import RunOptions, TestRunner
from .script_writer import generate_test_script

LOG_FORMAT = "%(asctime)s %(levelname)s %(message)s"


def build_logger(settings: Settings) -> logging.Logger:
    """Configure the package logger once; stdout stays reserved for the stdio transport."""
    logger = logging.getLogger("locatorscout")
    if logger.handlers:
        return logger

    logger.setLevel(logging.INFO)
    logger.propagate = False
    try:
        settings.log_dir.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(settings.log_dir / "server.log", encoding="utf-8")
        file_handler.setFormatter(logging.Formatter(LOG_FORMAT))
        logger.addHandler(file_handler)
    except OSError:
        # stderr is safe alongside the stdio transport.
        stream_handler = logging.StreamHandler()
        stream_handler.setFormatter(logging.Formatter(LOG_FORMAT))
        logger.addHandler(stream_handler)
    return logger


def build_server(service: LocatorService, runner: TestRunner) -> FastMCP:
    mcp = FastMCP("locatorscout")
    logger = logging.getLogger("locatorscout.server")

    @mcp.tool()
    async def get_locators(url: str, element_description: str) -> dict[str, Any]:
        """Find the element best matching a plain-language description and return ranked locators.

        Playwright locators are ranked by reliability (test id, role, label, placeholder,
        text, id, name, css, xpath); Selenium equivalents are returned for Java, Python and C#.
        """
        return await service.get_locators(url, element_description)

    @mcp.tool()
    async def analyze_page(url: str, element_types: list[str] | None = None) -> dict[str, Any]:
        """List the interactive elements on a page with their top three locators.

        element_types optionally filters by tag, input type or ARIA role (e.g. ["button", "input"]).
        """
        return await service.analyze_page(url, element_types)

    @mcp.tool()
    async def generate_page_object(url: str, class_name: str, language: str = "typescript") -> dict[str, Any]:
        """Generate a page object class for a page.

        language: typescript, javascript, python, java-selenium, python-selenium or csharp-selenium.
        """
        return await service.generate_page_object(url, class_name, language)

    @mcp.tool()
    async def validate_locator(url: str, locator: str) -> dict[str, Any]:
        """Check how many elements a Playwright locator matches on a page."""
        return await service.validate_locator(url, locator)

    @mcp.tool()
    async def run_test(
        test_name: str,
        steps: list[dict[str, Any]],
        options: dict[str, Any] | None = None,
    ) -> dict[str, Any]:
        """Run test steps in a fresh Chromium and report pass/fail per step.

        Each step has action, description and optional locator and value. Actions: navigate,
        click, fill, clear, check, uncheck, select, hover, press, assert_visible, assert_hidden,
        assert_text, assert_value, assert_url, assert_title, wait, wait_for_element, screenshot.
        options: headless (true), slowMo (0), timeout in ms (30000), viewport {width, height}.
        """
        parsed_steps = [TestStep.from_payload(step) for step in steps]
        run_options = RunOptions.from_payload(options)
        logger.info("run_test: name=%s steps=%s", test_name, len(parsed_steps))
        result = await asyncio.to_thread(runner.run_test, test_name, parsed_steps, run_options)
        return result.to_payload()

    @mcp.tool()
    async def generate_test(
        test_name: str, steps: list[dict[str, Any]], language: str = "typescript"
    ) -> dict[str, Any]:
        """Turn test steps into a Playwright test script (typescript, javascript or python)."""
        parsed_steps = [TestStep.from_payload(step) for step in steps]
        code = generate_test_script(test_name, parsed_steps, language)
        return {"testName": test_name, "language": language.strip().lower(), "code": code}

    return mcp
