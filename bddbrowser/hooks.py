"""behave hooks wiring the scenario lifecycle into a test run.

Import these from ``features/environment.py``::

    from bddbrowser.hooks import (
        after_all,
        after_scenario,
        after_step,
        before_all,
        before_scenario,
    )
"""

import logging
from typing import Any

from behave.model import Scenario, Step
from behave.runner import Context

from bddbrowser.constants import DEBUG_TAG, IGNORE_TAG
from bddbrowser.core.config import ConfigLoader
from bddbrowser.core.models import AttachmentSink
from bddbrowser.lifecycle import ScenarioLifecycle
from bddbrowser.logging import configure_logging

logger = logging.getLogger(__name__)

LIFECYCLE_ATTR = "bddbrowser"


def attachment_sink(context: Context) -> AttachmentSink | None:
    """Adapt behave's ``context.attach`` when the installed behave has it."""
    attach = getattr(context, "attach", None)
    if not callable(attach):
        return None

    def _sink(mime_type: str, content: Any) -> None:
        data = content.encode("utf-8") if isinstance(content, str) else content
        attach(mime_type, data)

    return _sink


def get_lifecycle(context: Context) -> ScenarioLifecycle:
    lifecycle = getattr(context, LIFECYCLE_ATTR, None)
    if lifecycle is None:
        raise RuntimeError("bddbrowser before_all hook did not run")
    return lifecycle


def scenario_tags(scenario: Scenario) -> set[str]:
    tags = getattr(scenario, "effective_tags", None) or scenario.tags
    return set(tags)


def before_all(context: Context, lifecycle: ScenarioLifecycle | None = None) -> None:
    """Load configuration, launch the run's browser and prepare the report."""
    if lifecycle is None:
        config = ConfigLoader().build()
        configure_logging(config.debug)
        lifecycle = ScenarioLifecycle(config)

    state = lifecycle.start_run()
    setattr(context, LIFECYCLE_ATTR, lifecycle)
    context.run_id = state.run_id


def before_scenario(context: Context, scenario: Scenario) -> None:
    """Open an isolated browser context and page for the scenario."""
    lifecycle = get_lifecycle(context)
    tags = scenario_tags(scenario)
    feature_name = scenario.feature.name if scenario.feature else ""
    sink = attachment_sink(context)

    if IGNORE_TAG in tags:
        logger.info(f"Skipping @{IGNORE_TAG} scenario: {scenario.name}")
        scenario.skip(reason=f"Marked with @{IGNORE_TAG}")
        lifecycle.start_scenario(
            scenario.name, feature_name, attachment_sink=sink, acquire=False
        )
        return

    ctx = lifecycle.start_scenario(
        scenario.name,
        feature_name,
        debug=DEBUG_TAG in tags,
        attachment_sink=sink,
    )
    context.scenario_context = ctx
    context.browser_context = ctx.browser_context
    context.page = ctx.page
    context.debug = ctx.debug


def after_step(context: Context, step: Step) -> None:
    lifecycle = get_lifecycle(context)
    if lifecycle.in_scenario:
        lifecycle.record_step(step.name, step.status)


def after_scenario(context: Context, scenario: Scenario) -> None:
    """Record the scenario outcome and release its browser resources."""
    lifecycle = get_lifecycle(context)
    if not lifecycle.in_scenario:
        logger.warning(f"No recorded start for scenario: {scenario.name}")
        return

    lifecycle.finish_scenario(scenario.status, getattr(scenario, "duration", None))


def after_all(context: Context) -> None:
    """Write the run report and close the browser."""
    lifecycle = getattr(context, LIFECYCLE_ATTR, None)
    if lifecycle is None:
        return

    path = lifecycle.end_run()
    if path is not None:
        logger.info(f"Run report: {path}")
