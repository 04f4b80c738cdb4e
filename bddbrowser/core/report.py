"""Persisting the run report at run end."""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import TYPE_CHECKING, Any

from bddbrowser.core.exceptions import ReportPersistenceError
from bddbrowser.core.registry import RunRegistry

if TYPE_CHECKING:
    from bddbrowser.targets.base import ExecutionTarget

logger = logging.getLogger(__name__)


class ReportEmitter:
    """Writes the accumulated run report and closes the shared browser.

    Parameters
    ----------
    registry : RunRegistry
        Registry holding the run state and the shared browser
    target : ExecutionTarget
        Resolves the build dashboard link
    """

    def __init__(self, registry: RunRegistry, target: ExecutionTarget) -> None:
        self.registry = registry
        self.target = target

    def write(self) -> Path:
        """Resolve the build link and write the report.

        Returns
        -------
        Path
            Location of the written report

        Raises
        ------
        ReportPersistenceError
            If the report cannot be serialized or written
        """
        state = self.registry.state
        report = state.report
        report.url = self.target.build_url(report.build_id)
        path = state.artifacts.report_path

        try:
            state.artifacts.save_json(path, report.to_dict())
        except (OSError, TypeError, ValueError) as e:
            raise ReportPersistenceError(f"Failed to write report {path}: {e}") from e

        logger.info(
            f"Saved report with {len(report.scenarios)} scenarios to {path}"
        )
        return path

    def emit(self) -> Path | None:
        """Persist the report, then close the shared browser.

        A persistence failure is logged and never prevents the browser
        from closing.

        Returns
        -------
        Path | None
            Report path, None if writing failed
        """
        path = None

        try:
            path = self.write()
        except ReportPersistenceError as e:
            logger.error(str(e))
        finally:
            self.registry.close_shared_browser()

        return path


def load_report(path: Path | str) -> dict[str, Any]:
    """Read a persisted run report.

    Raises
    ------
    FileNotFoundError
        If no report exists at path
    ValueError
        If the file is not valid JSON
    """
    with open(path, encoding="utf-8") as f:
        return json.load(f)
