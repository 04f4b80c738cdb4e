import copy
import logging
import os
from dataclasses import asdict, dataclass
from pathlib import Path
from typing import Any

import yaml
from omegaconf import OmegaConf
from omegaconf.errors import InterpolationResolutionError

from bddbrowser.constants import (
    DEBUG_ACTION_TIMEOUT_MS,
    DEFAULT_BROWSER,
    DEFAULT_BUILD_NAME,
    DEFAULT_CONFIG_FILENAME,
    DEFAULT_TEMP_DIR,
    DEFAULT_TRACES_DIR,
    GRID_BUILD_URL_TEMPLATE,
    GRID_TEST_URL_TEMPLATE,
    REMOTE_GRID_ALIASES,
    TargetKind,
)
from bddbrowser.utils import env_flag

logger = logging.getLogger(__name__)

ENV_OVERRIDES = {
    "browser": "BROWSER",
    "run_id": "RUN_ID",
    "grid_username": "LT_USERNAME",
    "grid_access_key": "LT_ACCESS_KEY",
}
ENV_FLAG_OVERRIDES = {
    "debug": "PWDEBUG",
    "video": "PWVIDEO",
    "headless": "HEADLESS",
}


@dataclass(frozen=True)
class HooksConfig:
    """Resolved settings for one test run.

    Attributes
    ----------
    browser : str
        Execution target name (chromium, firefox, webkit or remote-grid)
    run_id : str | None
        Externally supplied run identifier, generated at run start when None
    grid_username : str | None
        Remote grid user name
    grid_access_key : str | None
        Remote grid access key
    debug : bool
        Disables Playwright action timeouts and logs every network response
    video : bool
        Records a video per scenario on local targets
    headless : bool
        Launch local browsers without a window
    build_name : str
        Build name reported to the grid and written to the run report
    traces_dir : str
        Directory receiving trace archives of non-passed scenarios
    temp_dir : str
        Directory holding per-run recordings and the run report
    action_timeout_ms : int | None
        Playwright action timeout for every scenario context, None keeps
        Playwright's own default
    grid_build_url_template : str
        Dashboard link template for a grid build, formatted with build_id
    grid_test_url_template : str
        Dashboard link template for a grid test, formatted with test_id
    """

    browser: str = DEFAULT_BROWSER
    run_id: str | None = None
    grid_username: str | None = None
    grid_access_key: str | None = None
    debug: bool = False
    video: bool = False
    headless: bool = True
    build_name: str = DEFAULT_BUILD_NAME
    traces_dir: str = DEFAULT_TRACES_DIR
    temp_dir: str = DEFAULT_TEMP_DIR
    action_timeout_ms: int | None = None
    grid_build_url_template: str = GRID_BUILD_URL_TEMPLATE
    grid_test_url_template: str = GRID_TEST_URL_TEMPLATE

    @property
    def effective_action_timeout_ms(self) -> int | None:
        """Action timeout in milliseconds, 0 (disabled) in debug mode."""
        if self.debug:
            return DEBUG_ACTION_TIMEOUT_MS
        return self.action_timeout_ms

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


def normalize_browser(value: str) -> str:
    """Map a BROWSER value onto a target name.

    Parameters
    ----------
    value : str
        Raw setting, case-insensitive for local engines

    Returns
    -------
    str
        Canonical target name

    Raises
    ------
    ValueError
        If the value names no known target
    """
    if value in REMOTE_GRID_ALIASES:
        return TargetKind.REMOTE_GRID.value

    normalized = value.strip().lower()
    known = [kind.value for kind in TargetKind]

    if normalized not in known:
        raise ValueError(
            f"Unknown browser target '{value}'. Valid targets: {', '.join(known)}"
        )

    return normalized


class ConfigLoader:
    """Load YAML configuration, merge it over defaults and apply env overrides."""

    def __init__(self) -> None:
        self.BUILT_IN_DEFAULTS = HooksConfig().to_dict()

    def load_config(self, config_path: str | None = None) -> dict[str, Any]:
        """Load configuration from YAML file.

        Parameters
        ----------
        config_path : str | None
            Path to YAML config file. If None, checks BDDBROWSER_CONFIG env var,
            then falls back to bddbrowser.yaml

        Returns
        -------
        dict[str, Any]
            Parsed configuration with all variable interpolations resolved,
            empty when the file does not exist

        Raises
        ------
        ValueError
            If the file is not valid YAML or interpolation fails
        """
        if config_path is None:
            config_path = os.environ.get("BDDBROWSER_CONFIG", DEFAULT_CONFIG_FILENAME)

        config_file = Path(config_path)

        if not config_file.exists():
            return {}

        try:
            cfg = OmegaConf.load(config_file)
        except yaml.YAMLError as e:
            logger.error("Failed to parse YAML config file %s: %s", config_file, e)
            raise ValueError(f"Invalid YAML in {config_file}: {e}") from e
        except OSError as e:
            logger.error("Failed to read config file %s: %s", config_file, e)
            raise RuntimeError(f"Failed to read config file {config_file}: {e}") from e

        if cfg is None:
            return {}

        try:
            config = OmegaConf.to_container(cfg, resolve=True, throw_on_missing=True)
        except InterpolationResolutionError as e:
            logger.error("Failed to resolve configuration variables: %s", e)
            raise ValueError(f"Configuration variable resolution error: {e}") from e

        if not isinstance(config, dict):
            raise ValueError(f"Config file {config_file} must contain a mapping")

        return config

    def merge(
        self, config: dict[str, Any], environ: dict[str, str] | None = None
    ) -> dict[str, Any]:
        """Merge file settings over built-in defaults, then apply env overrides.

        Parameters
        ----------
        config : dict[str, Any]
            Settings loaded from YAML
        environ : dict[str, str] | None
            Environment mapping, defaults to os.environ

        Returns
        -------
        dict[str, Any]
            Merged settings (built-in defaults + YAML + environment)
        """
        source = os.environ if environ is None else environ
        merged = copy.deepcopy(self.BUILT_IN_DEFAULTS)

        for key, value in config.items():
            if key not in merged:
                logger.warning("Ignoring unknown config key '%s'", key)
                continue
            merged[key] = value

        for key, env_name in ENV_OVERRIDES.items():
            value = source.get(env_name)
            if value:
                merged[key] = value

        for key, env_name in ENV_FLAG_OVERRIDES.items():
            flag = env_flag(env_name, source)
            if flag is not None:
                merged[key] = flag

        merged["browser"] = normalize_browser(str(merged["browser"]))
        if merged["action_timeout_ms"] is not None:
            merged["action_timeout_ms"] = int(merged["action_timeout_ms"])

        return merged

    def build(
        self, config_path: str | None = None, environ: dict[str, str] | None = None
    ) -> HooksConfig:
        """Load, merge and freeze the run configuration."""
        merged = self.merge(self.load_config(config_path), environ)
        logger.debug("Resolved configuration: browser=%s", merged["browser"])
        return HooksConfig(**merged)
