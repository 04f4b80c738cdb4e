"""Process-wide state of one test run."""

from __future__ import annotations

import logging
import uuid
from collections.abc import Callable
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

from playwright.sync_api import Error as PlaywrightError
from playwright.sync_api import sync_playwright

from bddbrowser.core.config import HooksConfig
from bddbrowser.core.exceptions import ResourceAcquisitionError, RunStateError
from bddbrowser.core.models import RunReport
from bddbrowser.services.artifacts import ArtifactManager

if TYPE_CHECKING:
    from bddbrowser.targets.base import ExecutionTarget

logger = logging.getLogger(__name__)


def start_playwright() -> Any:
    return sync_playwright().start()


@dataclass
class RunState:
    """State living for the whole run.

    Attributes
    ----------
    run_id : str
        Identifier namespacing every artifact of the run
    report : RunReport
        Report accumulating scenario records
    artifacts : ArtifactManager
        Resolves artifact paths for this run
    playwright : Any
        Started Playwright driver
    shared_browser : Any
        Browser shared by all scenarios, None for the remote grid
    """

    run_id: str
    report: RunReport
    artifacts: ArtifactManager
    playwright: Any = None
    shared_browser: Any = None


class RunRegistry:
    """Owns the run identifier, the shared browser and the run report.

    Parameters
    ----------
    config : HooksConfig
        Resolved run configuration
    target : ExecutionTarget
        Strategy that opens the shared browser
    playwright_factory : Callable[[], Any] | None
        Starts the Playwright driver; defaults to sync_playwright().start()
    """

    def __init__(
        self,
        config: HooksConfig,
        target: ExecutionTarget,
        playwright_factory: Callable[[], Any] | None = None,
    ) -> None:
        self.config = config
        self.target = target
        self._playwright_factory = playwright_factory or start_playwright
        self._state: RunState | None = None

    @property
    def is_initialized(self) -> bool:
        return self._state is not None

    @property
    def state(self) -> RunState:
        if self._state is None:
            raise RunStateError("Run has not been initialized")
        return self._state

    def initialize_run(self) -> RunState:
        """Prepare the run before any scenario hook fires.

        Returns
        -------
        RunState
            Ready run state

        Raises
        ------
        RunStateError
            If the run was already initialized
        ResourceAcquisitionError
            If the shared browser cannot be launched
        """
        if self._state is not None:
            raise RunStateError("Run already initialized")

        run_id = self.config.run_id or str(uuid.uuid4())
        artifacts = ArtifactManager(
            run_id=run_id,
            traces_dir=self.config.traces_dir,
            temp_dir=self.config.temp_dir,
        )
        artifacts.ensure_traces_dir()

        playwright = self._playwright_factory()

        try:
            shared_browser = self.target.open_run(playwright)
        except PlaywrightError as e:
            self._stop_playwright(playwright)
            raise ResourceAcquisitionError(
                f"Failed to launch {self.target.name} browser: {e}"
            ) from e

        self._state = RunState(
            run_id=run_id,
            report=RunReport(build_name=self.config.build_name),
            artifacts=artifacts,
            playwright=playwright,
            shared_browser=shared_browser,
        )
        logger.info(f"Initialized test run {run_id} on target {self.target.name}")
        return self._state

    def close_shared_browser(self) -> None:
        """Close the shared browser if it is still open. Safe to repeat."""
        if self._state is None or self._state.shared_browser is None:
            return

        browser = self._state.shared_browser
        self._state.shared_browser = None

        try:
            browser.close()
            logger.debug("Closed shared browser")
        except Exception as e:
            logger.warning(f"Error closing shared browser: {e}")

    def shutdown_run(self) -> None:
        """Close the shared browser and stop Playwright.

        Idempotent, and safe when nothing was opened.
        """
        if self._state is None:
            return

        self.close_shared_browser()

        if self._state.playwright is not None:
            self._stop_playwright(self._state.playwright)
            self._state.playwright = None

    def _stop_playwright(self, playwright: Any) -> None:
        try:
            playwright.stop()
        except Exception as e:
            logger.warning(f"Error stopping Playwright: {e}")
