from __future__ import annotations

from concurrent.futures import Future
import logging
import queue
import threading
from typing import TYPE_CHECKING, Any, Callable, TypeVar

from playwright.sync_api import Error as PlaywrightError
from playwright.sync_api import sync_playwright

from .config import Settings
from .errors import DriverUnavailableError, LocatorScoutError, NavigationError
from .runtime_checks import _is_closed_target_error, describe_launch_failure

if TYPE_CHECKING:
    from playwright.sync_api import Browser, BrowserContext, Page, Playwright

T = TypeVar("T")
PageOperation = Callable[["Page"], T]
PlaywrightFactory = Callable[[], "Playwright"]


def _start_playwright() -> Playwright:
    return sync_playwright().start()


class BrowserManager:
    """Owns the shared Chromium session used by the inspection tools.

    Every navigation and page query runs on one worker thread fed by a command
    queue, so concurrent callers are served one at a time and the Playwright
    sync API never leaves the thread that started it. Chromium is launched on
    the first visit and relaunched after it crashes or is closed.
    """

    def __init__(
        self,
        settings: Settings | None = None,
        playwright_factory: PlaywrightFactory | None = None,
    ) -> None:
        self.settings = settings or Settings()
        self._playwright_factory = playwright_factory or _start_playwright
        self.logger = logging.getLogger("locatorscout.browser")

        self._commands: queue.Queue[tuple[str, Any]] = queue.Queue()
        self._thread = threading.Thread(target=self._run, name="locatorscout-browser", daemon=True)
        self._start_lock = threading.Lock()
        self._submit_lock = threading.Lock()
        self._started = False
        self._running = True

        self._playwright: Playwright | None = None
        self._browser: Browser | None = None
        self._context: BrowserContext | None = None
        self._page: Page | None = None

    @property
    def is_running(self) -> bool:
        return self._running

    def start(self) -> None:
        with self._start_lock:
            if self._started:
                return
            self._started = True
            self._thread.start()

    def submit(self, url: str, operation: PageOperation[T]) -> Future[T]:
        """Queue a visit: navigate to ``url`` then run ``operation`` on the page."""
        future: Future[T] = Future()
        with self._submit_lock:
            if not self._running:
                future.set_exception(DriverUnavailableError("Browser session has been shut down."))
                return future
            self.start()
            self._commands.put(("visit", (url, operation, future)))
        return future

    def visit(self, url: str, operation: PageOperation[T]) -> T:
        return self.submit(url, operation).result()

    def shutdown(self, timeout: float = 5.0) -> None:
        with self._submit_lock:
            self._running = False
            if not self._started:
                return
            self._commands.put(("shutdown", None))
        self._thread.join(timeout=timeout)

    def _run(self) -> None:
        try:
            while True:
                command, payload = self._commands.get()
                if command == "shutdown":
                    break
                if command == "visit":
                    self._handle_visit(*payload)
        finally:
            # Holding the lock keeps submit from queueing behind the final drain.
            with self._submit_lock:
                self._running = False
                self._fail_pending()
            self._cleanup()

    def _handle_visit(self, url: str, operation: PageOperation[Any], future: Future[Any]) -> None:
        if not future.set_running_or_notify_cancel():
            return
        try:
            result = self._visit(url, operation)
        except (LocatorScoutError, PlaywrightError, ValueError) as exc:
            future.set_exception(exc)
        except Exception as exc:
            self.logger.exception("Page operation failed unexpectedly", exc_info=exc)
            future.set_exception(exc)
        else:
            future.set_result(result)

    def _visit(self, raw_url: str, operation: PageOperation[T]) -> T:
        url = self._normalize_url((raw_url or "").strip())
        if not url:
            raise NavigationError(raw_url or "", "URL is empty.")

        page = self._ensure_page()
        self.logger.info("Navigating to %s", url)
        try:
            page.goto(
                url,
                wait_until=self.settings.wait_until,  # type: ignore[arg-type]
                timeout=self.settings.navigation_timeout_ms,
            )
        except PlaywrightError as exc:
            if _is_closed_target_error(exc):
                raise self._session_closed(exc) from exc
            self.logger.warning("Navigation failed: url=%s error=%s", url, exc)
            raise NavigationError(url, str(exc)) from exc

        try:
            return operation(page)
        except PlaywrightError as exc:
            if _is_closed_target_error(exc):
                raise self._session_closed(exc) from exc
            raise

    def _session_closed(self, exc: PlaywrightError) -> DriverUnavailableError:
        self.logger.warning("Managed Chromium was closed; relaunching on next visit: %s", exc)
        self._reset_session()
        return DriverUnavailableError(f"Browser session was closed: {exc}")

    def _ensure_page(self) -> Page:
        if self._page is not None and self._is_browser_connected():
            return self._page

        self._reset_session()
        try:
            if self._playwright is None:
                self._playwright = self._playwright_factory()
            self._browser = self._playwright.chromium.launch(headless=self.settings.headless)
            width, height = self.settings.viewport
            self._context = self._browser.new_context(
                viewport={"width": width, "height": height},
                user_agent=self.settings.user_agent,
            )
            self._page = self._context.new_page()
        except Exception as exc:
            self.logger.error("Failed to launch managed Chromium: %s", exc)
            self._reset_session()
            raise DriverUnavailableError(describe_launch_failure(exc)) from exc

        self.logger.info("Managed Chromium launched: headless=%s", self.settings.headless)
        return self._page

    def _is_browser_connected(self) -> bool:
        if not self._browser:
            return False
        try:
            return bool(self._browser.is_connected())
        except PlaywrightError:
            return False

    def _fail_pending(self) -> None:
        while True:
            try:
                command, payload = self._commands.get_nowait()
            except queue.Empty:
                return
            if command != "visit":
                continue
            future = payload[2]
            if future.set_running_or_notify_cancel():
                future.set_exception(DriverUnavailableError("Browser session has been shut down."))

    def _reset_session(self) -> None:
        self._close_quietly(self._page, "page")
        self._page = None
        self._close_quietly(self._context, "context")
        self._context = None
        self._close_quietly(self._browser, "browser")
        self._browser = None

    def _cleanup(self) -> None:
        self._reset_session()
        if self._playwright is not None:
            try:
                self._playwright.stop()
            except Exception as exc:
                self.logger.debug("Ignoring Playwright stop failure: %s", exc)
            self._playwright = None

    def _close_quietly(self, resource: Any, label: str) -> None:
        if resource is None:
            return
        try:
            resource.close()
        except Exception as exc:
            self.logger.debug("Ignoring %s close failure: %s", label, exc)

    @staticmethod
    def _normalize_url(raw_url: str) -> str:
        if not raw_url:
            return ""
        if "://" in raw_url or raw_url.startswith(("about:", "data:")):
            return raw_url
        return f"https://{raw_url}"
