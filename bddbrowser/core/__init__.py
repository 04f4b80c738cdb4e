"""Core scenario lifecycle functionality."""

from __future__ import annotations

from bddbrowser.core.config import ConfigLoader, HooksConfig
from bddbrowser.core.exceptions import (
    BddBrowserError,
    ReportPersistenceError,
    ResourceAcquisitionError,
    RunStateError,
    ScenarioStateError,
)
from bddbrowser.core.models import (
    RunReport,
    ScenarioContext,
    ScenarioRecord,
    StepRecord,
    StepStatus,
)

__all__ = [
    "BddBrowserError",
    "ConfigLoader",
    "HooksConfig",
    "ReportPersistenceError",
    "ResourceAcquisitionError",
    "RunReport",
    "RunStateError",
    "ScenarioContext",
    "ScenarioRecord",
    "ScenarioStateError",
    "StepRecord",
    "StepStatus",
]
