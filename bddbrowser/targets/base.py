"""Common contract for execution targets."""

from __future__ import annotations

from abc import ABC, abstractmethod
from pathlib import Path
from typing import Any

from bddbrowser.constants import STANDARD_VIEWPORT, USER_AGENT
from bddbrowser.core.config import HooksConfig
from bddbrowser.services.resource_registry import ResourceRegistry


class ExecutionTarget(ABC):
    """Strategy deciding where scenarios get their browser.

    Callers acquire and release a browser per scenario without knowing
    whether it is a shared local browser or a fresh remote connection.

    Parameters
    ----------
    config : HooksConfig
        Resolved run configuration
    """

    name: str = ""
    viewport: dict[str, int] = STANDARD_VIEWPORT
    supports_video: bool = True

    def __init__(self, config: HooksConfig) -> None:
        self.config = config

    @abstractmethod
    def open_run(self, playwright: Any) -> Any | None:
        """Open the browser shared by the whole run, or None if there is none."""

    @abstractmethod
    def acquire_browser(
        self, playwright: Any, shared_browser: Any | None, scenario_name: str
    ) -> Any:
        """Return a ready browser for one scenario."""

    @abstractmethod
    def release_browser(self, browser: Any) -> None:
        """Release a browser returned by acquire_browser."""

    @abstractmethod
    def prepare_page(self, page: Any, registry: ResourceRegistry) -> dict[str, str]:
        """Apply target specific page setup.

        Parameters
        ----------
        page : Any
            Freshly opened page
        registry : ResourceRegistry
            Scenario registry receiving any subscription to undo at teardown

        Returns
        -------
        dict[str, str]
            Grid metadata such as ``build_id`` and ``test_id``; empty locally
        """

    def context_options(self, recordings_dir: Path | None) -> dict[str, Any]:
        """Keyword arguments for ``browser.new_context``.

        Parameters
        ----------
        recordings_dir : Path | None
            Video directory when recording was requested

        Returns
        -------
        dict[str, Any]
            Context options for this target
        """
        options: dict[str, Any] = {
            "user_agent": USER_AGENT,
            "accept_downloads": True,
            "viewport": dict(self.viewport),
        }
        if recordings_dir is not None and self.supports_video:
            options["record_video_dir"] = str(recordings_dir)
        return options

    def build_url(self, build_id: str | None) -> str | None:
        """Dashboard link of a build, None when there is no dashboard."""
        return None

    def test_url(self, test_id: str | None) -> str | None:
        """Dashboard link of one scenario, None when there is no dashboard."""
        return None
