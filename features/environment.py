"""Behave environment configuration for the bddbrowser example suite."""

from bddbrowser.hooks import (  # noqa: F401
    after_all,
    after_scenario,
    after_step,
    before_all,
    before_scenario,
)
