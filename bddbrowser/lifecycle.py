from __future__ import annotations

import logging
from collections.abc import Callable
from pathlib import Path
from typing import Any

from bddbrowser.core.config import HooksConfig
from bddbrowser.core.exceptions import ResourceAcquisitionError, ScenarioStateError
from bddbrowser.core.models import AttachmentSink, ScenarioContext, ScenarioRecord
from bddbrowser.core.recorder import ScenarioOutcomeRecorder, ScenarioPhase
from bddbrowser.core.registry import RunRegistry, RunState
from bddbrowser.core.report import ReportEmitter
from bddbrowser.core.resources import ResourceLifecycleManager
from bddbrowser.targets import ExecutionTarget, create_target
from bddbrowser.utils import slugify_scenario_name

logger = logging.getLogger(__name__)


class ScenarioLifecycle:
    """Drives one worker's run: run start, each scenario, run end.

    Holds every piece of per-worker mutable state, so independent workers
    each build their own lifecycle and share nothing.

    Parameters
    ----------
    config : HooksConfig
        Resolved run configuration
    target : ExecutionTarget | None
        Execution target, selected from config.browser when None
    playwright_factory : Callable[[], Any] | None
        Starts the Playwright driver, injectable for tests
    """

    def __init__(
        self,
        config: HooksConfig,
        target: ExecutionTarget | None = None,
        playwright_factory: Callable[[], Any] | None = None,
    ) -> None:
        self.config = config
        self.target = target or create_target(config)
        self.registry = RunRegistry(config, self.target, playwright_factory)
        self.resources = ResourceLifecycleManager(config, self.target)
        self.emitter = ReportEmitter(self.registry, self.target)
        self._recorder: ScenarioOutcomeRecorder | None = None

    @property
    def recorder(self) -> ScenarioOutcomeRecorder:
        if self._recorder is None:
            raise ScenarioStateError("Run not started; call start_run() first")
        return self._recorder

    @property
    def in_scenario(self) -> bool:
        return (
            self._recorder is not None
            and self._recorder.phase is ScenarioPhase.RUNNING
        )

    @property
    def current(self) -> ScenarioContext | None:
        if self._recorder is None:
            return None
        return self._recorder.current

    def start_run(self) -> RunState:
        state = self.registry.initialize_run()
        self._recorder = ScenarioOutcomeRecorder(state.report, self.resources, self.target)
        return state

    def start_scenario(
        self,
        scenario_name: str,
        feature_name: str = "",
        debug: bool = False,
        attachment_sink: AttachmentSink | None = None,
        acquire: bool = True,
    ) -> ScenarioContext:
        """Open resources for a scenario and begin recording it.

        Parameters
        ----------
        scenario_name : str
            Scenario name
        feature_name : str
            Feature name
        debug : bool
            Per-scenario debug flag
        attachment_sink : AttachmentSink | None
            Runner attachment channel
        acquire : bool
            False records the scenario without opening a browser (skipped scenarios)

        Returns
        -------
        ScenarioContext
            The in-flight scenario

        Raises
        ------
        ScenarioStateError
            If another scenario is still running
        ResourceAcquisitionError
            If browser resources cannot be opened; the scenario is still
            recorded so its end event produces a report entry
        """
        recorder = self.recorder
        if recorder.phase is ScenarioPhase.RUNNING:
            raise ScenarioStateError(
                f"Cannot start '{scenario_name}': "
                f"'{recorder.current.scenario_name}' is still running"
            )

        if not acquire:
            ctx = self._bare_context(scenario_name, feature_name, debug, attachment_sink)
            recorder.start(ctx)
            return ctx

        try:
            ctx = self.resources.acquire_scenario_context(
                self.registry.state,
                scenario_name,
                feature_name=feature_name,
                debug=debug or self.config.debug,
                attachment_sink=attachment_sink,
            )
        except ResourceAcquisitionError:
            recorder.start(
                self._bare_context(scenario_name, feature_name, debug, attachment_sink)
            )
            raise

        recorder.start(ctx)
        return ctx

    def record_step(self, name: str, status: Any) -> None:
        self.recorder.record_step(name, status)

    def finish_scenario(self, status: Any, duration: float | None = None) -> ScenarioRecord:
        """Record the running scenario and release its resources.

        Resources are released even if recording fails.
        """
        ctx = self.recorder.current
        try:
            return self.recorder.finalize(status, duration)
        finally:
            if ctx is not None:
                self.resources.release_scenario_context(ctx)

    def end_run(self) -> Path | None:
        """Persist the report, then shut the run down."""
        if not self.registry.is_initialized:
            logger.warning("Run was never initialized, no report to write")
            return None

        if self.in_scenario:
            ctx = self.recorder.current
            self.recorder.abandon()
            self.resources.release_scenario_context(ctx)

        try:
            return self.emitter.emit()
        finally:
            self.registry.shutdown_run()

    def _bare_context(
        self,
        scenario_name: str,
        feature_name: str,
        debug: bool,
        attachment_sink: AttachmentSink | None,
    ) -> ScenarioContext:
        return ScenarioContext(
            scenario_name=scenario_name,
            feature_name=feature_name,
            scenario_slug=slugify_scenario_name(scenario_name),
            debug=debug,
            attachment_sink=attachment_sink,
        )
