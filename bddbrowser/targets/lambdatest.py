"""LambdaTest remote execution grid."""

import json
import logging
from typing import Any
from urllib.parse import quote

from bddbrowser.constants import (
    GRID_PLATFORM,
    GRID_TEST_DETAILS_ACTION,
    GRID_WS_ENDPOINT,
    TargetKind,
    WIDE_VIEWPORT,
)
from bddbrowser.core.exceptions import ResourceAcquisitionError
from bddbrowser.services.resource_registry import ResourceRegistry
from bddbrowser.targets.base import ExecutionTarget

logger = logging.getLogger(__name__)


class RemoteGridTarget(ExecutionTarget):
    """Connects a fresh remote browser for every scenario.

    The grid names each session after its scenario, so no browser is shared
    across scenarios and every connection is closed at scenario end.
    """

    name = TargetKind.REMOTE_GRID.value
    viewport = WIDE_VIEWPORT
    supports_video = False

    def capabilities(self, scenario_name: str) -> dict[str, Any]:
        """Capability payload sent to the grid when connecting.

        Parameters
        ----------
        scenario_name : str
            Session name shown on the grid dashboard

        Returns
        -------
        dict[str, Any]
            Capabilities including platform, build and credentials
        """
        return {
            "browserName": "Chrome",
            "browserVersion": "latest",
            "LT:Options": {
                "platform": GRID_PLATFORM,
                "build": self.config.build_name,
                "name": scenario_name,
                "user": self.config.grid_username,
                "accessKey": self.config.grid_access_key,
                "network": True,
                "video": True,
                "console": True,
                "tunnel": False,
            },
        }

    def ws_endpoint(self, scenario_name: str) -> str:
        payload = json.dumps(self.capabilities(scenario_name), separators=(",", ":"))
        return f"{GRID_WS_ENDPOINT}?capabilities={quote(payload, safe='')}"

    def open_run(self, playwright: Any) -> None:
        logger.info("Remote grid selected, browsers connect per scenario")
        return None

    def acquire_browser(
        self, playwright: Any, shared_browser: Any | None, scenario_name: str
    ) -> Any:
        if not self.config.grid_username or not self.config.grid_access_key:
            raise ResourceAcquisitionError(
                "Remote grid requires LT_USERNAME and LT_ACCESS_KEY to be set"
            )

        browser = playwright.chromium.connect(self.ws_endpoint(scenario_name))
        logger.info(f"Connected remote grid browser for scenario: {scenario_name}")
        return browser

    def release_browser(self, browser: Any) -> None:
        browser.close()
        logger.debug("Closed remote grid browser")

    def prepare_page(self, page: Any, registry: ResourceRegistry) -> dict[str, str]:
        """Ask the grid instrumentation for the build and test identifiers."""
        action = json.dumps(GRID_TEST_DETAILS_ACTION, separators=(",", ":"))
        raw_response = page.evaluate("_ => {}", f"lambdatest_action: {action}")

        try:
            data = json.loads(raw_response)["data"]
        except (TypeError, ValueError, KeyError) as e:
            logger.warning(f"Unexpected test details reply from grid: {e}")
            return {}

        metadata = {}
        for key in ("build_id", "test_id"):
            if data.get(key) is not None:
                metadata[key] = str(data[key])
        return metadata

    def build_url(self, build_id: str | None) -> str | None:
        if not build_id:
            return None
        return self.config.grid_build_url_template.format(build_id=build_id)

    def test_url(self, test_id: str | None) -> str | None:
        if not test_id:
            return None
        return self.config.grid_test_url_template.format(test_id=test_id)
