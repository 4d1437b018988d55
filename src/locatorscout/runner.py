from __future__ import annotations

from dataclasses import dataclass
import logging
from pathlib import Path
import re
import tempfile
import time
from typing import TYPE_CHECKING, Any, Callable, Mapping, Sequence

from playwright.sync_api import Error as PlaywrightError
from playwright.sync_api import sync_playwright

from .config import Settings
from .errors import StepFailure
from .locator_ops import parse_locator, resolve_locator
from .models import StepResult, TestResult, TestStatus, TestStep
from .runtime_checks import describe_launch_failure

if TYPE_CHECKING:
    from playwright.sync_api import Browser, Locator, Page, Playwright

TEST_ACTIONS: tuple[str, ...] = (
    "navigate",
    "click",
    "fill",
    "clear",
    "check",
    "uncheck",
    "select",
    "hover",
    "press",
    "assert_visible",
    "assert_hidden",
    "assert_text",
    "assert_value",
    "assert_url",
    "assert_title",
    "wait",
    "wait_for_element",
    "screenshot",
)

_DEFAULT_WAIT_MS = 1000


@dataclass(frozen=True, slots=True)
class RunOptions:
    headless: bool = True
    slow_mo: int = 0
    timeout_ms: int = 30_000
    viewport: tuple[int, int] = (1280, 720)

    @classmethod
    def from_payload(cls, payload: Mapping[str, Any] | None) -> RunOptions:
        data = dict(payload or {})
        defaults = cls()
        viewport = data.get("viewport")
        if isinstance(viewport, Mapping):
            parsed_viewport = (int(viewport.get("width", 1280)), int(viewport.get("height", 720)))
        else:
            parsed_viewport = defaults.viewport
        return cls(
            headless=bool(data.get("headless", defaults.headless)),
            slow_mo=int(data.get("slowMo", data.get("slow_mo", defaults.slow_mo))),
            timeout_ms=int(data.get("timeout", data.get("timeout_ms", defaults.timeout_ms))),
            viewport=parsed_viewport,
        )


def _start_playwright() -> Playwright:
    return sync_playwright().start()


class TestRunner:
    """Runs a list of test steps in a fresh Chromium and reports per-step results.

    Each run owns its own Playwright instance, so runs never share state with
    the inspection session. The first failing step stops the run and the
    remaining steps are reported as skipped.
    """

    __test__ = False

    def __init__(
        self,
        settings: Settings | None = None,
        playwright_factory: Callable[[], Playwright] | None = None,
        screenshot_dir: Path | None = None,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self.settings = settings or Settings()
        self._playwright_factory = playwright_factory or _start_playwright
        self.screenshot_dir = screenshot_dir or Path(tempfile.gettempdir())
        self._clock = clock
        self.logger = logging.getLogger("locatorscout.runner")

    def run_test(
        self,
        test_name: str,
        steps: Sequence[TestStep],
        options: RunOptions | None = None,
    ) -> TestResult:
        opts = options or RunOptions()
        started = self._clock()
        results: list[StepResult] = []
        self.logger.info("Test started: name=%s steps=%s", test_name, len(steps))

        try:
            playwright = self._playwright_factory()
        except Exception as exc:
            self.logger.error("Playwright failed to start: %s", exc)
            return self._build_result(test_name, "failed", started, results, error=describe_launch_failure(exc))

        browser: Browser | None = None
        page: Page | None = None
        try:
            try:
                browser = playwright.chromium.launch(headless=opts.headless, slow_mo=opts.slow_mo)
                width, height = opts.viewport
                context = browser.new_context(
                    viewport={"width": width, "height": height},
                    user_agent=self.settings.user_agent,
                )
                page = context.new_page()
                page.set_default_timeout(opts.timeout_ms)
            except Exception as exc:
                self.logger.error("Chromium failed to launch for test %s: %s", test_name, exc)
                return self._build_result(
                    test_name, "failed", started, results, error=describe_launch_failure(exc)
                )

            for index, step in enumerate(steps):
                step_started = self._clock()
                try:
                    self._execute_step(page, step)
                except (PlaywrightError, StepFailure, ValueError) as exc:
                    message = str(exc)
                    self.logger.warning("Step failed: test=%s step=%s error=%s", test_name, step.description, message)
                    results.append(
                        StepResult(step.description, step.action, "failed", self._elapsed_ms(step_started), message)
                    )
                    results.extend(
                        StepResult(skipped.description, skipped.action, "skipped", 0) for skipped in steps[index + 1 :]
                    )
                    screenshot = self._safe_screenshot(page, "failure")
                    return self._build_result(
                        test_name, "failed", started, results, page=page, screenshot=screenshot, error=message
                    )
                results.append(StepResult(step.description, step.action, "passed", self._elapsed_ms(step_started)))

            screenshot = self._safe_screenshot(page, "success")
            return self._build_result(test_name, "passed", started, results, page=page, screenshot=screenshot)
        finally:
            self._close(browser, playwright)

    def _execute_step(self, page: Page, step: TestStep) -> None:
        action = step.action

        if action == "navigate":
            page.goto(_require_value(step, "URL is required for navigate action"), wait_until="domcontentloaded")
            return
        if action == "click":
            self._locate(page, step).click()
            return
        if action == "fill":
            self._locate(page, step).fill(_require_value(step, "Value is required for fill action"))
            return
        if action == "clear":
            self._locate(page, step).clear()
            return
        if action == "check":
            self._locate(page, step).check()
            return
        if action == "uncheck":
            self._locate(page, step).uncheck()
            return
        if action == "select":
            self._locate(page, step).select_option(_require_value(step, "Value is required for select action"))
            return
        if action == "hover":
            self._locate(page, step).hover()
            return
        if action == "press":
            self._locate(page, step).press(_require_value(step, "Key is required for press action"))
            return
        if action in {"assert_visible", "wait_for_element"}:
            self._locate(page, step).wait_for(state="visible")
            return
        if action == "assert_hidden":
            self._locate(page, step).wait_for(state="hidden")
            return
        if action == "assert_text":
            expected = _require_value(step, "Expected text is required")
            actual = self._locate(page, step).text_content()
            if actual is None or expected not in actual:
                raise StepFailure(f'Expected text "{expected}" not found. Actual: "{actual}"')
            return
        if action == "assert_value":
            expected = _require_value(step, "Expected value is required")
            actual = self._locate(page, step).input_value()
            if actual != expected:
                raise StepFailure(f'Expected value "{expected}" but got "{actual}"')
            return
        if action == "assert_url":
            expected = _require_value(step, "Expected URL pattern is required")
            if expected not in page.url:
                raise StepFailure(f'URL "{page.url}" does not contain "{expected}"')
            return
        if action == "assert_title":
            expected = _require_value(step, "Expected title is required")
            title = page.title()
            if expected not in title:
                raise StepFailure(f'Title "{title}" does not contain "{expected}"')
            return
        if action == "wait":
            page.wait_for_timeout(_parse_wait_ms(step.value))
            return
        if action == "screenshot":
            self._take_screenshot(page, step.value or "step")
            return
        raise StepFailure(f"Unknown action: {action}")

    def _locate(self, page: Page, step: TestStep) -> Locator:
        if not step.locator:
            raise StepFailure(f"Locator is required for {step.action} action")
        return resolve_locator(page, parse_locator(step.locator))

    def _take_screenshot(self, page: Page, name: str) -> str:
        safe_name = re.sub(r"[^A-Za-z0-9_-]+", "-", name).strip("-") or "step"
        path = self.screenshot_dir / f"locatorscout-{safe_name}-{int(time.time() * 1000)}.png"
        page.screenshot(path=str(path), full_page=False)
        return str(path)

    def _safe_screenshot(self, page: Page, name: str) -> str | None:
        try:
            return self._take_screenshot(page, name)
        except PlaywrightError as exc:
            self.logger.warning("Screenshot failed: %s", exc)
            return None

    def _build_result(
        self,
        test_name: str,
        status: TestStatus,
        started: float,
        steps: list[StepResult],
        *,
        page: Page | None = None,
        screenshot: str | None = None,
        error: str | None = None,
    ) -> TestResult:
        final_url: str | None = None
        if page is not None:
            try:
                final_url = page.url
            except PlaywrightError as exc:
                self.logger.debug("Could not read final url: %s", exc)
        result = TestResult(
            test_name=test_name,
            status=status,
            duration_ms=self._elapsed_ms(started),
            steps=steps,
            screenshot_path=screenshot,
            final_url=final_url,
            error=error,
        )
        self.logger.info(
            "Test finished: name=%s status=%s passed=%s failed=%s",
            test_name,
            status,
            result.passed_steps,
            result.failed_steps,
        )
        return result

    def _elapsed_ms(self, started: float) -> int:
        return max(0, int((self._clock() - started) * 1000))

    def _close(self, browser: Browser | None, playwright: Playwright) -> None:
        if browser is not None:
            try:
                browser.close()
            except Exception as exc:
                self.logger.debug("Ignoring browser close failure: %s", exc)
        try:
            playwright.stop()
        except Exception as exc:
            self.logger.debug("Ignoring Playwright stop failure: %s", exc)


def _require_value(step: TestStep, message: str) -> str:
    if not step.value:
        raise StepFailure(message)
    return step.value


def _parse_wait_ms(value: str | None) -> int:
    if not value:
        return _DEFAULT_WAIT_MS
    try:
        return int(value)
    except ValueError as exc:
        raise StepFailure(f"Wait duration must be milliseconds; got {value!r}") from exc
