"""Data model for scenario state and the run report."""

from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from pathlib import Path
from typing import Any

logger = logging.getLogger(__name__)

AttachmentSink = Callable[[str, Any], None]


class StepStatus(str, Enum):
    """Outcome of a single step."""

    PASSED = "passed"
    FAILED = "failed"
    SKIPPED = "skipped"
    PENDING = "pending"
    UNDEFINED = "undefined"
    AMBIGUOUS = "ambiguous"

    @classmethod
    def coerce(cls, value: Any) -> StepStatus:
        """Convert a runner status into a StepStatus.

        Unrecognized statuses are logged and recorded as skipped, so a step
        is never dropped from the step log.

        Parameters
        ----------
        value : Any
            A StepStatus, a string, or a behave Status enum member

        Returns
        -------
        StepStatus
            Matching status
        """
        if isinstance(value, cls):
            return value

        name = getattr(value, "name", value)
        key = str(name).strip().lower()

        if key in _RUNNER_ALIASES:
            return _RUNNER_ALIASES[key]

        try:
            return cls(key)
        except ValueError:
            logger.warning(f"Unrecognized step status '{key}', recording as skipped")
            return cls.SKIPPED


_RUNNER_ALIASES = {
    "untested": StepStatus.SKIPPED,
    "untested_pending": StepStatus.PENDING,
    "untested_undefined": StepStatus.UNDEFINED,
    "unknown": StepStatus.SKIPPED,
    "executing": StepStatus.PENDING,
    "pending_warn": StepStatus.PENDING,
    "xfailed": StepStatus.FAILED,
    "xpassed": StepStatus.PASSED,
    "hook_error": StepStatus.FAILED,
    "error": StepStatus.FAILED,
    "cleanup_error": StepStatus.FAILED,
}


@dataclass(frozen=True)
class StepRecord:
    name: str
    status: StepStatus

    def to_dict(self) -> dict[str, str]:
        return {"name": self.name, "status": self.status.value}


@dataclass
class ScenarioContext:
    """Per-scenario state, created in before_scenario and dropped after it ends.

    Attributes
    ----------
    scenario_name : str
        Scenario name from the feature file
    feature_name : str
        Name of the feature owning the scenario
    scenario_slug : str
        Scenario name with non-word characters replaced
    start_time : datetime
        UTC time the scenario started
    browser : Any
        Browser the context was opened on, owned by the run or by the scenario
    browser_context : Any
        Isolated browser context owned by this scenario
    page : Any
        The single page opened on browser_context
    debug : bool
        Whether debug logging is active for this scenario
    attachments : dict[str, Any]
        Free-form evidence keyed by attachment name
    step_log : list[StepRecord]
        Step outcomes in execution order
    test_id : str | None
        Test identifier assigned by the remote grid
    recordings_dir : Path | None
        Video directory when recording is enabled
    trace_path : Path | None
        Where the trace archive goes if the scenario does not pass
    tracing_active : bool
        Whether tracing is still running on browser_context
    """

    scenario_name: str
    feature_name: str
    scenario_slug: str
    start_time: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    browser: Any = None
    browser_context: Any = None
    page: Any = None
    debug: bool = False
    attachments: dict[str, Any] = field(default_factory=dict)
    step_log: list[StepRecord] = field(default_factory=list)
    test_id: str | None = None
    recordings_dir: Path | None = None
    trace_path: Path | None = None
    tracing_active: bool = False
    attachment_sink: AttachmentSink | None = field(default=None, repr=False)
    resources: Any = field(default=None, repr=False)

    @property
    def display_name(self) -> str:
        return f"{self.feature_name} | {self.scenario_name}"

    def attach(self, key: str, content: Any, mime_type: str = "text/plain") -> str:
        """Record an attachment and forward it to the runner.

        Parameters
        ----------
        key : str
            Attachment name; a numeric suffix is added when already used
        content : Any
            Attachment payload
        mime_type : str
            Media type passed to the runner's attachment channel

        Returns
        -------
        str
            Key under which the attachment was stored
        """
        unique_key = key
        counter = 1
        while unique_key in self.attachments:
            counter += 1
            unique_key = f"{key}-{counter}"

        self.attachments[unique_key] = content
        self.forward_attachment(mime_type, content)
        return unique_key

    def forward_attachment(self, mime_type: str, content: Any) -> None:
        """Send evidence to the runner's attachment channel only."""
        if self.attachment_sink is None:
            return

        try:
            self.attachment_sink(mime_type, content)
        except Exception as e:
            logger.debug(f"Runner rejected {mime_type} attachment: {e}")


@dataclass(frozen=True)
class ScenarioRecord:
    status: str
    name: str
    attachments: dict[str, Any]
    step_log: tuple[StepRecord, ...]
    image_string: str | None = None
    url: str | None = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "status": self.status,
            "name": self.name,
            "attachments": dict(self.attachments),
            "stepLog": [step.to_dict() for step in self.step_log],
            "imageString": self.image_string,
            "url": self.url,
        }


@dataclass
class RunReport:
    """Report accumulated over every scenario of one run."""

    build_name: str
    scenarios: list[ScenarioRecord] = field(default_factory=list)
    build_id: str | None = None
    url: str | None = None

    def append(self, record: ScenarioRecord) -> None:
        self.scenarios.append(record)

    def to_dict(self) -> dict[str, Any]:
        payload: dict[str, Any] = {
            "buildName": self.build_name,
            "scenarios": [scenario.to_dict() for scenario in self.scenarios],
        }
        if self.build_id is not None:
            payload["buildId"] = self.build_id
        if self.url is not None:
            payload["url"] = self.url
        return payload
