"""Locally launched browser engines."""

import logging
import re
from typing import Any

from bddbrowser.constants import (
    BLOCKED_DOMAINS,
    CHROMIUM_MEDIA_ARGS,
    FIREFOX_MEDIA_PREFS,
    TargetKind,
)
from bddbrowser.core.config import HooksConfig
from bddbrowser.services.resource_registry import ResourceRegistry
from bddbrowser.targets.base import ExecutionTarget

logger = logging.getLogger(__name__)


def blocked_request_pattern(domains: tuple[str, ...] = BLOCKED_DOMAINS) -> re.Pattern:
    """Compile one pattern matching https requests to any denylisted domain."""
    alternatives = [f"^https://{re.escape(domain)}.*" for domain in domains]
    return re.compile("|".join(alternatives))


class LocalBrowserTarget(ExecutionTarget):
    """Launches one local browser per run and shares it across scenarios.

    Parameters
    ----------
    config : HooksConfig
        Resolved run configuration
    engine : str
        Playwright engine attribute: chromium, firefox or webkit
    """

    def __init__(self, config: HooksConfig, engine: str) -> None:
        super().__init__(config)
        self.engine = engine
        self.name = engine
        self.blocked_pattern = blocked_request_pattern()

    def launch_options(self) -> dict[str, Any]:
        options: dict[str, Any] = {
            "headless": self.config.headless,
            "slow_mo": 0,
        }
        if self.engine == TargetKind.CHROMIUM.value:
            options["args"] = list(CHROMIUM_MEDIA_ARGS)
        elif self.engine == TargetKind.FIREFOX.value:
            options["firefox_user_prefs"] = dict(FIREFOX_MEDIA_PREFS)
        return options

    def open_run(self, playwright: Any) -> Any:
        browser_type = getattr(playwright, self.engine)
        browser = browser_type.launch(**self.launch_options())
        logger.info(f"Launched local {self.engine} browser")
        return browser

    def acquire_browser(
        self, playwright: Any, shared_browser: Any | None, scenario_name: str
    ) -> Any:
        if shared_browser is None:
            raise RuntimeError(f"Local {self.engine} browser was not launched")
        return shared_browser

    def release_browser(self, browser: Any) -> None:
        # Shared browser stays open until the run ends.
        return None

    def prepare_page(self, page: Any, registry: ResourceRegistry) -> dict[str, str]:
        """Abort analytics and font CDN requests to cut latency and flakiness."""
        pattern = self.blocked_pattern

        def _abort(route: Any) -> None:
            route.abort()

        page.route(pattern, _abort)
        registry.register(
            "route",
            page,
            lambda p: p.unroute(pattern, _abort),
            label="blocked-domains",
        )
        return {}
