from __future__ import annotations

from dataclasses import dataclass, field
import os
from pathlib import Path
from typing import Literal, Mapping

WaitUntil = Literal["load", "domcontentloaded", "networkidle", "commit"]

_WAIT_UNTIL_STATES = ("load", "domcontentloaded", "networkidle", "commit")
_TRUE_VALUES = {"1", "true", "yes", "on"}
_FALSE_VALUES = {"0", "false", "no", "off"}

DEFAULT_USER_AGENT = (
    "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 "
    "(KHTML, like Gecko) Chrome/120.0.0.0 Safari/537.36"
)


@dataclass(frozen=True, slots=True)
class Settings:
    headless: bool = True
    navigation_timeout_ms: int = 30_000
    wait_until: WaitUntil = "networkidle"
    viewport: tuple[int, int] = (1920, 1080)
    user_agent: str = DEFAULT_USER_AGENT
    max_text_length: int = 100
    max_elements: int = 50
    max_locators: int = 10
    top_locators_per_element: int = 3
    max_page_object_elements: int = 30
    log_dir: Path = field(default_factory=lambda: Path.home() / ".locatorscout")


def load_settings(environ: Mapping[str, str] | None = None) -> Settings:
    env = os.environ if environ is None else environ
    defaults = Settings()

    wait_until = env.get("LOCATORSCOUT_WAIT_UNTIL", defaults.wait_until).strip().lower()
    if wait_until not in _WAIT_UNTIL_STATES:
        raise ValueError(
            f"LOCATORSCOUT_WAIT_UNTIL must be one of {', '.join(_WAIT_UNTIL_STATES)}; got {wait_until!r}"
        )

    log_dir_raw = env.get("LOCATORSCOUT_LOG_DIR", "").strip()

    return Settings(
        headless=_parse_bool(env, "LOCATORSCOUT_HEADLESS", defaults.headless),
        navigation_timeout_ms=_parse_positive_int(
            env, "LOCATORSCOUT_NAV_TIMEOUT_MS", defaults.navigation_timeout_ms
        ),
        wait_until=wait_until,  # type: ignore[arg-type]
        viewport=_parse_viewport(env, "LOCATORSCOUT_VIEWPORT", defaults.viewport),
        user_agent=env.get("LOCATORSCOUT_USER_AGENT", "").strip() or defaults.user_agent,
        max_elements=_parse_positive_int(env, "LOCATORSCOUT_MAX_ELEMENTS", defaults.max_elements),
        log_dir=Path(log_dir_raw).expanduser() if log_dir_raw else defaults.log_dir,
    )


def _parse_bool(env: Mapping[str, str], key: str, default: bool) -> bool:
    raw = env.get(key)
    if raw is None or not raw.strip():
        return default
    lowered = raw.strip().lower()
    if lowered in _TRUE_VALUES:
        return True
    if lowered in _FALSE_VALUES:
        return False
    raise ValueError(f"{key} must be a boolean flag; got {raw!r}")


def _parse_positive_int(env: Mapping[str, str], key: str, default: int) -> int:
    raw = env.get(key)
    if raw is None or not raw.strip():
        return default
    value = raw.strip()
    if not value.isdigit() or int(value) <= 0:
        raise ValueError(f"{key} must be a positive integer; got {raw!r}")
    return int(value)


def _parse_viewport(env: Mapping[str, str], key: str, default: tuple[int, int]) -> tuple[int, int]:
    raw = env.get(key)
    if raw is None or not raw.strip():
        return default
    parts = raw.lower().replace(" ", "").split("x")
    if len(parts) != 2 or not all(part.isdigit() and int(part) > 0 for part in parts):
        raise ValueError(f"{key} must look like 1280x720; got {raw!r}")
    return int(parts[0]), int(parts[1])
