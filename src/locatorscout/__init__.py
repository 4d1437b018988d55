"""Locator ranking and page inspection tools for AI test assistants."""

__version__ = "0.1.0"
