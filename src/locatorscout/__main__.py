from __future__ import annotations

import sys

from .browser_manager import BrowserManager
from .config import load_settings
from .locator_service import LocatorService
from .runner import TestRunner
from .server import build_logger, build_server


def main() -> int:
    if sys.version_info < (3, 10):
        raise SystemExit(
            "locatorscout requires Python 3.10+. "
            f"Current interpreter: {sys.executable} (Python {sys.version.split()[0]})"
        )
    try:
        settings = load_settings()
    except ValueError as exc:
        raise SystemExit(f"Invalid locatorscout configuration: {exc}") from exc

    logger = build_logger(settings)
    browser = BrowserManager(settings)
    server = build_server(LocatorService(browser, settings), TestRunner(settings))
    logger.info("locatorscout server starting: headless=%s wait_until=%s", settings.headless, settings.wait_until)
    try:
        server.run(transport="stdio")
    finally:
        browser.shutdown()
        logger.info("locatorscout server stopped.")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
