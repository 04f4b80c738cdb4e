"""Artifact locations and persistence for a test run."""

import json
import logging
from datetime import datetime
from pathlib import Path
from typing import Any

from bddbrowser.constants import REPORT_FILENAME, TRACE_SUFFIX
from bddbrowser.utils import filesystem_timestamp

logger = logging.getLogger(__name__)


class ArtifactManager:
    """Resolves where run artifacts live and writes them.

    Layout::

        <temp_dir>/<run_id>/recordings/<slug>/   videos per scenario
        <temp_dir>/<run_id>/report.json          run report
        <traces_dir>/<slug>-<timestamp>trace.zip trace per non-passed scenario

    Attributes
    ----------
    run_id : str
        Identifier of the current run
    traces_dir : Path
        Directory receiving trace archives
    temp_dir : Path
        Base directory for per-run artifacts
    """

    def __init__(
        self,
        run_id: str,
        traces_dir: Path | str = "traces",
        temp_dir: Path | str = "temp",
    ) -> None:
        self.run_id = run_id
        self.traces_dir = Path(traces_dir)
        self.temp_dir = Path(temp_dir)

    @property
    def run_dir(self) -> Path:
        return self.temp_dir / self.run_id

    @property
    def report_path(self) -> Path:
        return self.run_dir / REPORT_FILENAME

    def ensure_traces_dir(self) -> Path:
        """Create the traces directory if it does not exist."""
        self.traces_dir.mkdir(parents=True, exist_ok=True)
        logger.debug(f"Traces directory ready: {self.traces_dir}")
        return self.traces_dir

    def recordings_dir(self, scenario_slug: str) -> Path:
        """Video directory for a scenario. Playwright creates it on first write."""
        return self.run_dir / "recordings" / scenario_slug

    def trace_path(self, scenario_slug: str, start_time: datetime) -> Path:
        """Trace archive path for a scenario.

        Parameters
        ----------
        scenario_slug : str
            Slug of the scenario name
        start_time : datetime
            Scenario start time

        Returns
        -------
        Path
            <traces_dir>/<slug>-<YYYY-MM-DDTHH_MM_SS>trace.zip
        """
        time_part = filesystem_timestamp(start_time)
        return self.traces_dir / f"{scenario_slug}-{time_part}{TRACE_SUFFIX}"

    def save_json(self, path: Path, payload: dict[str, Any]) -> Path:
        """Write a JSON document, creating parent directories.

        Raises
        ------
        OSError
            If the file cannot be written
        TypeError
            If the payload is not JSON serializable
        """
        path.parent.mkdir(parents=True, exist_ok=True)
        text = json.dumps(payload, indent=2)

        with open(path, "w", encoding="utf-8") as f:
            f.write(text)

        logger.debug(f"Wrote {path}")
        return path
