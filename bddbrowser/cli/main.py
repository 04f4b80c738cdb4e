"""CLI entry point for bddbrowser."""

from __future__ import annotations

import logging
import os
import sys
from collections import Counter
from pathlib import Path
from typing import Any

import fire
import yaml

from bddbrowser.constants import REPORT_FILENAME
from bddbrowser.core.config import ConfigLoader
from bddbrowser.core.report import load_report
from bddbrowser.logging import StreamFormatter, StreamRoutingFilter
from bddbrowser.targets import list_targets


class BddBrowserCLI:
    """Inspect configuration and run reports produced by the behave hooks."""

    def __init__(self, config_loader: ConfigLoader | None = None) -> None:
        self._config_loader = config_loader or ConfigLoader()

    def config(self, config_path: str | None = None) -> None:
        """Print the resolved configuration as YAML.

        Parameters
        ----------
        config_path : str | None
            YAML config file, defaults to BDDBROWSER_CONFIG or bddbrowser.yaml
        """
        settings = self._config_loader.build(config_path).to_dict()

        if settings.get("grid_access_key"):
            settings["grid_access_key"] = "********"

        print(yaml.safe_dump(settings, sort_keys=False), end="")

    def targets(self) -> None:
        """List the execution targets BROWSER may name."""
        for name in list_targets():
            print(name)

    def summary(self, run_id: str, temp_dir: str | None = None) -> None:
        """Print scenario counts and non-passed scenarios of a run.

        Parameters
        ----------
        run_id : str
            Run identifier the report was written under
        temp_dir : str | None
            Base directory of run artifacts, defaults to the configured temp_dir
        """
        base_dir = temp_dir or self._config_loader.build().temp_dir
        report_path = Path(base_dir) / str(run_id) / REPORT_FILENAME

        try:
            report = load_report(report_path)
        except FileNotFoundError:
            print(f"No report found at {report_path}", file=sys.stderr)
            sys.exit(1)
        except ValueError as e:
            print(f"Report {report_path} is not valid JSON: {e}", file=sys.stderr)
            sys.exit(1)

        for line in format_summary(report):
            print(line)


def format_summary(report: dict[str, Any]) -> list[str]:
    """Render a run report as plain text lines.

    Parameters
    ----------
    report : dict[str, Any]
        Parsed report.json

    Returns
    -------
    list[str]
        Build line, status counts, then one line per non-passed scenario
    """
    scenarios = report.get("scenarios", [])
    counts = Counter(scenario.get("status", "unknown") for scenario in scenarios)

    lines = [f"Build: {report.get('buildName', '')}"]
    if report.get("url"):
        lines.append(f"Dashboard: {report['url']}")

    lines.append(f"Scenarios: {len(scenarios)}")
    for status, count in sorted(counts.items()):
        lines.append(f"  {status}: {count}")

    failing = [s for s in scenarios if s.get("status") != "passed"]
    if failing:
        lines.append("Not passed:")
        for scenario in failing:
            line = f"  [{scenario.get('status')}] {scenario.get('name')}"
            if scenario.get("url"):
                line += f" ({scenario['url']})"
            lines.append(line)

    return lines


def main() -> None:
    """Entry point for Fire CLI."""
    stdout_handler = logging.StreamHandler(sys.stdout)
    stdout_handler.setFormatter(StreamFormatter("%(message)s"))
    stdout_handler.addFilter(StreamRoutingFilter("stdout"))

    stderr_handler = logging.StreamHandler(sys.stderr)
    stderr_handler.setFormatter(StreamFormatter("%(message)s"))
    stderr_handler.addFilter(StreamRoutingFilter("stderr"))

    logging.basicConfig(
        level=logging.INFO,
        handlers=[stdout_handler, stderr_handler],
    )

    debug_mode = os.environ.get("BDDBROWSER_DEBUG") == "1"

    try:
        fire.Fire(BddBrowserCLI())
    except ValueError as e:
        if debug_mode:
            raise
        print(f"Configuration error: {e}", file=sys.stderr)
        sys.exit(1)
