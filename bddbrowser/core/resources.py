"""Acquisition and release of per-scenario browser resources."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import TYPE_CHECKING, Any

from playwright.sync_api import Error as PlaywrightError

from bddbrowser.core.config import HooksConfig
from bddbrowser.core.exceptions import ResourceAcquisitionError
from bddbrowser.core.models import AttachmentSink, ScenarioContext
from bddbrowser.core.registry import RunState
from bddbrowser.logging import RESPONSE_LOGGER_NAME, configure_response_logging
from bddbrowser.services.resource_registry import ResourceRegistry
from bddbrowser.utils import slugify_scenario_name

if TYPE_CHECKING:
    from bddbrowser.targets.base import ExecutionTarget

logger = logging.getLogger(__name__)
response_logger = logging.getLogger(RESPONSE_LOGGER_NAME)


class ResourceLifecycleManager:
    """Opens an isolated browser context and page for each scenario.

    Every resource and listener is registered in a scenario-scoped
    ResourceRegistry, so teardown removes listeners and closes the page,
    then the context, then releases the browser, whatever state an earlier
    failure left them in.

    Parameters
    ----------
    config : HooksConfig
        Resolved run configuration
    target : ExecutionTarget
        Strategy providing browsers and target specific page setup
    """

    def __init__(self, config: HooksConfig, target: ExecutionTarget) -> None:
        self.config = config
        self.target = target

    def acquire_scenario_context(
        self,
        run_state: RunState,
        scenario_name: str,
        feature_name: str = "",
        debug: bool = False,
        attachment_sink: AttachmentSink | None = None,
    ) -> ScenarioContext:
        """Acquire browser, context and page for a scenario.

        Parameters
        ----------
        run_state : RunState
            State of the current run
        scenario_name : str
            Scenario name, used for the slug and the grid session name
        feature_name : str
            Name of the feature owning the scenario
        debug : bool
            Log every network response of the page
        attachment_sink : AttachmentSink | None
            Runner attachment channel receiving console messages

        Returns
        -------
        ScenarioContext
            Context holding the open browser context and page

        Raises
        ------
        ResourceAcquisitionError
            If any resource cannot be created; partial resources are released
        """
        slug = slugify_scenario_name(scenario_name)
        registry = ResourceRegistry()
        ctx = ScenarioContext(
            scenario_name=scenario_name,
            feature_name=feature_name,
            scenario_slug=slug,
            debug=debug,
            attachment_sink=attachment_sink,
            resources=registry,
        )
        ctx.trace_path = run_state.artifacts.trace_path(slug, ctx.start_time)

        try:
            self._open(run_state, ctx, registry)
        except ResourceAcquisitionError:
            registry.cleanup_all()
            raise
        except (PlaywrightError, RuntimeError) as e:
            registry.cleanup_all()
            raise ResourceAcquisitionError(
                f"Failed to acquire browser resources for '{scenario_name}': {e}"
            ) from e

        logger.info(f"Acquired browser context for scenario: {scenario_name}")
        return ctx

    def _open(
        self, run_state: RunState, ctx: ScenarioContext, registry: ResourceRegistry
    ) -> None:
        browser = self.target.acquire_browser(
            run_state.playwright, run_state.shared_browser, ctx.scenario_name
        )
        ctx.browser = browser
        registry.register(
            "browser", browser, self.target.release_browser, label=self.target.name
        )

        if self.config.video and self.target.supports_video:
            ctx.recordings_dir = run_state.artifacts.recordings_dir(ctx.scenario_slug)

        browser_context = browser.new_context(
            **self.target.context_options(ctx.recordings_dir)
        )
        ctx.browser_context = browser_context
        registry.register(
            "context", browser_context, lambda c: c.close(), label=ctx.scenario_slug
        )

        browser_context.tracing.start(screenshots=True, snapshots=True)
        ctx.tracing_active = True
        registry.register("tracing", ctx, self._discard_trace, label=ctx.scenario_slug)

        timeout = self.config.effective_action_timeout_ms
        if timeout is not None:
            browser_context.set_default_timeout(timeout)

        page = browser_context.new_page()
        ctx.page = page
        registry.register("page", page, lambda p: p.close(), label=ctx.scenario_slug)

        def _on_console(message: Any) -> None:
            if message.type == "log":
                ctx.attach("console", message.text)

        self._subscribe(page, "console", _on_console, registry)

        if ctx.debug or self.config.debug:
            configure_response_logging(True)

            def _on_response(response: Any) -> None:
                response_logger.info(response.url, extra={"status": response.status})

            self._subscribe(page, "response", _on_response, registry)

        metadata = self.target.prepare_page(page, registry)
        ctx.test_id = metadata.get("test_id")
        if metadata.get("build_id"):
            run_state.report.build_id = metadata["build_id"]

    def _subscribe(
        self, page: Any, event: str, handler: Any, registry: ResourceRegistry
    ) -> None:
        page.on(event, handler)
        registry.register(
            "listener",
            page,
            lambda p: p.remove_listener(event, handler),
            label=event,
        )

    def _discard_trace(self, ctx: ScenarioContext) -> None:
        if not ctx.tracing_active:
            return
        ctx.tracing_active = False
        ctx.browser_context.tracing.stop()

    def capture_screenshot(self, ctx: ScenarioContext) -> bytes | None:
        """Take a full-page screenshot, None if the page is gone."""
        if ctx.page is None:
            return None

        try:
            return ctx.page.screenshot(full_page=True)
        except PlaywrightError as e:
            logger.warning(f"Failed to capture screenshot for {ctx.scenario_slug}: {e}")
            return None

    def persist_trace(self, ctx: ScenarioContext) -> Path | None:
        """Stop tracing and keep the archive.

        Returns
        -------
        Path | None
            Archive path, None when tracing was not running or stopping failed
        """
        if not ctx.tracing_active or ctx.trace_path is None:
            return None

        path = ctx.trace_path
        ctx.tracing_active = False

        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            ctx.browser_context.tracing.stop(path=str(path))
        except (PlaywrightError, OSError) as e:
            logger.warning(f"Failed to save trace for {ctx.scenario_slug}: {e}")
            return None

        logger.info(f"Saved trace: {path}")
        return path

    def release_scenario_context(self, ctx: ScenarioContext) -> None:
        """Release everything acquired for the scenario.

        Safe to call more than once and after an upstream failure already
        closed the page or context.
        """
        if ctx.resources is None:
            return

        errors = ctx.resources.cleanup_all()
        if errors:
            logger.debug(
                f"Teardown of {ctx.scenario_slug} tolerated {len(errors)} errors"
            )
