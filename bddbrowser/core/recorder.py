"""Scenario outcome recording."""

from __future__ import annotations

import base64
import logging
from enum import Enum
from typing import TYPE_CHECKING, Any

from bddbrowser.constants import FAILURE_IMAGE_MIME
from bddbrowser.core.exceptions import ScenarioStateError
from bddbrowser.core.models import (
    RunReport,
    ScenarioContext,
    ScenarioRecord,
    StepRecord,
    StepStatus,
)
from bddbrowser.utils import format_duration

if TYPE_CHECKING:
    from bddbrowser.core.resources import ResourceLifecycleManager
    from bddbrowser.targets.base import ExecutionTarget

logger = logging.getLogger(__name__)


class ScenarioPhase(Enum):
    NOT_STARTED = "not_started"
    RUNNING = "running"
    FINALIZING = "finalizing"
    RECORDED = "recorded"
    RESET = "reset"


_STARTABLE = (ScenarioPhase.NOT_STARTED, ScenarioPhase.RESET)


class ScenarioOutcomeRecorder:
    """Accumulates step outcomes and turns each finished scenario into a record.

    One recorder serves one worker; scenarios pass through it strictly one at
    a time::

        NOT_STARTED -> RUNNING -> FINALIZING -> RECORDED -> RESET -> RUNNING ...

    Parameters
    ----------
    report : RunReport
        Run report receiving finalized records
    evidence : ResourceLifecycleManager
        Captures screenshots and persists traces of non-passed scenarios
    target : ExecutionTarget
        Resolves dashboard links for scenarios
    """

    def __init__(
        self,
        report: RunReport,
        evidence: ResourceLifecycleManager,
        target: ExecutionTarget,
    ) -> None:
        self.report = report
        self.evidence = evidence
        self.target = target
        self.phase = ScenarioPhase.NOT_STARTED
        self.scenarios_recorded = 0
        self._current: ScenarioContext | None = None

    @property
    def current(self) -> ScenarioContext | None:
        return self._current

    @property
    def step_log(self) -> list[StepRecord]:
        """Steps of the in-flight scenario, empty between scenarios."""
        if self._current is None:
            return []
        return list(self._current.step_log)

    def start(self, ctx: ScenarioContext) -> None:
        """Bind a freshly acquired scenario context.

        Raises
        ------
        ScenarioStateError
            If another scenario is still in flight
        """
        if self.phase not in _STARTABLE:
            raise ScenarioStateError(
                f"Cannot start '{ctx.scenario_name}' while in phase {self.phase.value}"
            )

        ctx.step_log.clear()
        self._current = ctx
        self.phase = ScenarioPhase.RUNNING
        logger.debug(f"Recording scenario: {ctx.scenario_name}")

    def record_step(self, name: str, status: Any) -> StepRecord:
        """Append a completed step, whatever its status.

        Raises
        ------
        ScenarioStateError
            If no scenario is running
        """
        if self.phase is not ScenarioPhase.RUNNING or self._current is None:
            raise ScenarioStateError(
                f"Cannot record step '{name}' in phase {self.phase.value}"
            )

        record = StepRecord(name=name, status=StepStatus.coerce(status))
        self._current.step_log.append(record)
        return record

    def finalize(self, status: Any, duration: float | None = None) -> ScenarioRecord:
        """Close the running scenario and append its record to the report.

        Non-passed scenarios get a full-page screenshot, attached and embedded
        as base64, and keep their trace archive. The screenshot is taken
        before tracing stops.

        Parameters
        ----------
        status : Any
            Final scenario status (string or runner status)
        duration : float | None
            Scenario duration in seconds

        Returns
        -------
        ScenarioRecord
            Record appended to the run report

        Raises
        ------
        ScenarioStateError
            If no scenario is running
        """
        if self.phase is not ScenarioPhase.RUNNING or self._current is None:
            raise ScenarioStateError(
                f"Cannot finalize a scenario in phase {self.phase.value}"
            )

        self.phase = ScenarioPhase.FINALIZING
        ctx = self._current
        status_text = getattr(status, "name", str(status)).lower()

        ctx.attach(
            "status", f"Status: {status_text}. Duration:{format_duration(duration)}"
        )

        image_string = None
        if status_text != StepStatus.PASSED.value:
            image = self.evidence.capture_screenshot(ctx)
            if image is not None:
                image_string = base64.b64encode(image).decode("ascii")
                ctx.forward_attachment(FAILURE_IMAGE_MIME, image)
            self.evidence.persist_trace(ctx)

        record = ScenarioRecord(
            status=status_text,
            name=ctx.display_name,
            attachments=dict(ctx.attachments),
            step_log=tuple(ctx.step_log),
            image_string=image_string,
            url=self.target.test_url(ctx.test_id),
        )
        self.report.append(record)
        self.scenarios_recorded += 1
        self.phase = ScenarioPhase.RECORDED
        logger.info(f"Recorded scenario '{record.name}': {status_text}")

        self.reset()
        return record

    def reset(self) -> None:
        """Clear per-scenario accumulators so the next scenario starts clean."""
        if self._current is not None:
            self._current.attachments = {}
            self._current.step_log = []
        self._current = None
        self.phase = ScenarioPhase.RESET

    def abandon(self) -> None:
        """Drop an in-flight scenario that will never be finalized."""
        if self.phase is ScenarioPhase.RUNNING:
            logger.warning(
                f"Abandoning scenario without a record: {self._current.scenario_name}"
            )
        self.reset()
