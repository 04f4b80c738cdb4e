"""Utility functions for bddbrowser."""

import os
import re
from datetime import datetime

FALSE_VALUES = ("", "0", "false", "no", "off")


def slugify_scenario_name(name: str) -> str:
    """Replace every non-word character of a scenario name with a dash.

    Parameters
    ----------
    name : str
        Scenario name as written in the feature file

    Returns
    -------
    str
        URL and filesystem safe slug, same length as the name
    """
    return re.sub(r"\W", "-", name, flags=re.ASCII)


def filesystem_timestamp(moment: datetime) -> str:
    """Format a timestamp to the second with colons replaced by underscores.

    Colons are not allowed in Windows paths.
    """
    return moment.strftime("%Y-%m-%dT%H_%M_%S")


def env_flag(name: str, environ: dict[str, str] | None = None) -> bool | None:
    """Read a boolean flag from the environment.

    Parameters
    ----------
    name : str
        Environment variable name
    environ : dict[str, str] | None
        Environment mapping, defaults to os.environ

    Returns
    -------
    bool | None
        None when unset, False for empty or falsy spellings, True otherwise
    """
    source = os.environ if environ is None else environ

    if name not in source:
        return None

    return source[name].strip().lower() not in FALSE_VALUES


def format_duration(seconds: float | None) -> str:
    """Render a duration as whole seconds for status notes."""
    if seconds is None:
        return "0s"
    return f"{int(seconds)}s"
