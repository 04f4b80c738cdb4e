"""Execution target registry.

Targets are registered by name so the BROWSER setting selects a strategy
without callers branching on it.
"""

from __future__ import annotations

from collections.abc import Callable

from bddbrowser.constants import TargetKind
from bddbrowser.core.config import HooksConfig
from bddbrowser.targets.base import ExecutionTarget
from bddbrowser.targets.lambdatest import RemoteGridTarget
from bddbrowser.targets.local import LocalBrowserTarget, blocked_request_pattern

TargetFactory = Callable[[HooksConfig], ExecutionTarget]

_TARGETS: dict[str, TargetFactory] = {}


def register_target(name: str, factory: TargetFactory) -> None:
    """Register an execution target factory.

    Parameters
    ----------
    name : str
        Target name matched against the BROWSER setting
    factory : Callable[[HooksConfig], ExecutionTarget]
        Builds the target from the run configuration
    """
    _TARGETS[name] = factory


def get_target(name: str) -> TargetFactory:
    """Get a registered target factory by name.

    Raises
    ------
    ValueError
        If no target is registered under that name
    """
    if name not in _TARGETS:
        raise ValueError(
            f"Unknown execution target: {name}. Valid targets: {', '.join(list_targets())}"
        )
    return _TARGETS[name]


def list_targets() -> list[str]:
    return list(_TARGETS.keys())


def create_target(config: HooksConfig) -> ExecutionTarget:
    """Build the target selected by the configuration."""
    return get_target(config.browser)(config)


for _engine in (TargetKind.CHROMIUM, TargetKind.FIREFOX, TargetKind.WEBKIT):
    register_target(
        _engine.value,
        lambda config, engine=_engine.value: LocalBrowserTarget(config, engine),
    )
register_target(TargetKind.REMOTE_GRID.value, RemoteGridTarget)

__all__ = [
    "ExecutionTarget",
    "LocalBrowserTarget",
    "RemoteGridTarget",
    "blocked_request_pattern",
    "create_target",
    "get_target",
    "list_targets",
    "register_target",
]
