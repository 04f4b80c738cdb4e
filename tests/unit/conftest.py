"""Pytest configuration and fixtures for bddbrowser tests."""

import os
import sys
from collections.abc import Callable, Generator
from pathlib import Path
from typing import Any

import pytest

tests_root = Path(__file__).parent.parent.parent
if str(tests_root) not in sys.path:
    sys.path.insert(0, str(tests_root))

from bddbrowser.core.config import HooksConfig  # noqa: E402
from bddbrowser.lifecycle import ScenarioLifecycle  # noqa: E402
from tests.unit.fakes.fake_browser import FakePlaywright  # noqa: E402

CONFIG_ENV_VARS = (
    "BROWSER",
    "RUN_ID",
    "LT_USERNAME",
    "LT_ACCESS_KEY",
    "PWDEBUG",
    "PWVIDEO",
    "HEADLESS",
    "BDDBROWSER_CONFIG",
)


@pytest.fixture(autouse=True)
def isolate_config_env() -> Generator[None, None, None]:
    """Remove configuration variables so each test starts from defaults.

    Yields
    ------
    None
        Control back to test after clearing the variables
    """
    saved = {name: os.environ.pop(name) for name in CONFIG_ENV_VARS if name in os.environ}

    yield

    for name in CONFIG_ENV_VARS:
        os.environ.pop(name, None)
    os.environ.update(saved)


@pytest.fixture
def make_config(tmp_path: Path) -> Callable[..., HooksConfig]:
    """Build a HooksConfig writing artifacts under tmp_path.

    Returns
    -------
    callable
        Function taking HooksConfig field overrides
    """

    def _make(**overrides: Any) -> HooksConfig:
        settings: dict[str, Any] = {
            "run_id": "run-1",
            "traces_dir": str(tmp_path / "traces"),
            "temp_dir": str(tmp_path / "temp"),
        }
        settings.update(overrides)
        return HooksConfig(**settings)

    return _make


@pytest.fixture
def fake_playwright() -> FakePlaywright:
    return FakePlaywright()


@pytest.fixture
def make_lifecycle(
    make_config: Callable[..., HooksConfig],
) -> Callable[..., tuple[ScenarioLifecycle, FakePlaywright]]:
    """Build a started ScenarioLifecycle backed by a FakePlaywright.

    Returns
    -------
    callable
        Function taking (playwright=None, **config overrides)
    """

    def _make(
        playwright: FakePlaywright | None = None, **overrides: Any
    ) -> tuple[ScenarioLifecycle, FakePlaywright]:
        driver = playwright or FakePlaywright()
        lifecycle = ScenarioLifecycle(make_config(**overrides), playwright_factory=lambda: driver)
        lifecycle.start_run()
        return lifecycle, driver

    return _make
