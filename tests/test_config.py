from pathlib import Path

import pytest

from locatorscout.config import Settings, load_settings


def test_defaults_without_environment() -> None:
    settings = load_settings({})

    assert settings.headless is True
    assert settings.wait_until == "networkidle"
    assert settings.navigation_timeout_ms == 30_000
    assert settings.viewport == (1920, 1080)
    assert settings.max_elements == 50
    assert settings.log_dir == Settings().log_dir


def test_environment_overrides(tmp_path) -> None:
    settings = load_settings(
        {
            "LOCATORSCOUT_HEADLESS": "false",
            "LOCATORSCOUT_WAIT_UNTIL": "DOMContentLoaded",
            "LOCATORSCOUT_NAV_TIMEOUT_MS": "15000",
            "LOCATORSCOUT_VIEWPORT": "1280 x 720",
            "LOCATORSCOUT_USER_AGENT": "scout/1.0",
            "LOCATORSCOUT_MAX_ELEMENTS": "20",
            "LOCATORSCOUT_LOG_DIR": str(tmp_path),
        }
    )

    assert settings.headless is False
    assert settings.wait_until == "domcontentloaded"
    assert settings.navigation_timeout_ms == 15000
    assert settings.viewport == (1280, 720)
    assert settings.user_agent == "scout/1.0"
    assert settings.max_elements == 20
    assert settings.log_dir == Path(tmp_path)


@pytest.mark.parametrize(
    "environ",
    [
        {"LOCATORSCOUT_HEADLESS": "maybe"},
        {"LOCATORSCOUT_WAIT_UNTIL": "idle"},
        {"LOCATORSCOUT_NAV_TIMEOUT_MS": "0"},
        {"LOCATORSCOUT_NAV_TIMEOUT_MS": "-5"},
        {"LOCATORSCOUT_VIEWPORT": "wide"},
    ],
)
def test_invalid_values_are_rejected(environ) -> None:
    with pytest.raises(ValueError):
        load_settings(environ)
