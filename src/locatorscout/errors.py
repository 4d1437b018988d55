from __future__ import annotations


class LocatorScoutError(Exception):
    """Base class for failures surfaced to tool callers."""


class NavigationError(LocatorScoutError):
    def __init__(self, url: str, message: str) -> None:
        super().__init__(f"Failed to load {url or '<empty url>'}: {message}")
        self.url = url


class DriverUnavailableError(LocatorScoutError):
    pass


class StepFailure(LocatorScoutError):
    """A test step ran but its expectation did not hold."""
