"""Configuration models and loading.

Settings come from up to two ``.lazymake.yaml`` files: a global one in the
home directory and a project one in the current directory (or the file named
by ``LAZYMAKE_CONFIG`` / ``--config``). The project file wins for scalar
values; lists are combined.

Models:
    - LazymakeSettings: Root configuration model

Functions:
    - expand_env_vars: Expand ${VAR} patterns in strings
    - expand_env_vars_in_dict: Recursively expand env vars in nested dicts
    - load_settings: Load and validate settings from a YAML file
    - merge_settings: Combine global and project settings
    - find_config_paths: Locate the global and project files
    - load_merged_settings: Find, load and merge in one call
"""

from __future__ import annotations

import os
import re
from pathlib import Path
from typing import Any

import structlog
import yaml
from pydantic import BaseModel, Field, ValidationError

from lazymake.errors import ConfigError, ErrorCode
from lazymake.safety.config import SafetyConfig

logger = structlog.get_logger()

CONFIG_FILENAME = ".lazymake.yaml"
CONFIG_ENV_VAR = "LAZYMAKE_CONFIG"

DEFAULT_CONFIG_TEMPLATE = """\
# lazymake configuration
#
# Global settings live in ~/.lazymake.yaml, project settings in
# ./.lazymake.yaml. Project values override global ones; lists are combined.
# String values may reference environment variables as ${VAR}.

# Makefile analyzed when no path is given on the command line
makefile: Makefile

safety:
  # Set to false to disable dangerous command detection
  enabled: true

  # Built-in rule IDs to use (empty = all). See `lazymake rules`.
  enabled_rules: []

  # Targets that are never checked
  exclude_targets: []

  # Additional rules
  custom_rules: []
  #  - id: prod-deploy
  #    severity: critical   # critical, warning or info
  #    patterns:
  #      - "deploy.*--env=prod"
  #    description: Deploys to the production environment.
  #    suggestion: Deploy to staging first.
"""


class LazymakeSettings(BaseModel):
    """Root configuration model.

    Attributes:
        makefile: Makefile path used when none is given on the command line.
        safety: Dangerous command detection settings.
    """

    makefile: str = "Makefile"
    safety: SafetyConfig = Field(default_factory=SafetyConfig)


# Environment variable expansion pattern: ${VAR_NAME}
_ENV_VAR_PATTERN = re.compile(r"\$\{([^}]+)\}")


def expand_env_vars(value: str) -> str:
    """Expand ${VAR} patterns with environment variables.

    Args:
        value: String potentially containing ${VAR} patterns.

    Returns:
        String with all ${VAR} patterns replaced with environment variable values.

    Raises:
        ConfigError: If a referenced environment variable is not set.

    Example:
        >>> os.environ["PROJECT"] = "api"
        >>> expand_env_vars("${PROJECT}/Makefile")
        "api/Makefile"
    """

    def replacer(match: re.Match[str]) -> str:
        var_name = match.group(1)
        env_value = os.environ.get(var_name)
        if env_value is None:
            raise ConfigError(f"Environment variable '{var_name}' not set")
        return env_value

    return _ENV_VAR_PATTERN.sub(replacer, value)


def _expand_value(value: Any) -> Any:
    if isinstance(value, str):
        return expand_env_vars(value)
    if isinstance(value, dict):
        return expand_env_vars_in_dict(value)
    if isinstance(value, list):
        return [_expand_value(item) for item in value]
    return value


def expand_env_vars_in_dict(data: dict[str, Any]) -> dict[str, Any]:
    """Recursively expand environment variables in a nested dictionary.

    Lists are expanded element-wise, including dictionaries inside lists
    (custom rules are a list of mappings).

    Raises:
        ConfigError: If a referenced environment variable is not set.
    """
    return {key: _expand_value(value) for key, value in data.items()}


def load_settings(path: str | Path) -> LazymakeSettings:
    """Load and validate settings from a YAML file.

    Performs environment variable expansion on all string values before
    validation.

    Args:
        path: Path to a .lazymake.yaml file.

    Returns:
        Validated LazymakeSettings instance.

    Raises:
        ConfigError: If the file is missing (CONFIG_MISSING), unreadable,
            not valid YAML, not a mapping, references an unset environment
            variable, or fails validation (CONFIG_INVALID).
    """
    path = Path(path)

    if not path.exists():
        raise ConfigError(
            "configuration file not found",
            path=str(path),
            code=ErrorCode.CONFIG_MISSING,
        )

    try:
        with path.open(encoding="utf-8") as f:
            data = yaml.safe_load(f)
    except (OSError, yaml.YAMLError) as e:
        raise ConfigError(f"cannot read configuration: {e}", path=str(path), cause=e) from e

    # Handle empty file
    if data is None:
        data = {}

    if not isinstance(data, dict):
        raise ConfigError("configuration must be a mapping", path=str(path))

    try:
        data = expand_env_vars_in_dict(data)
    except ConfigError as e:
        raise ConfigError(e.message, path=str(path), cause=e) from e

    try:
        settings = LazymakeSettings.model_validate(data)
    except ValidationError as e:
        raise ConfigError(f"invalid configuration: {e}", path=str(path), cause=e) from e

    logger.debug("config_loaded", path=str(path))
    return settings


def _union(first: list[str], second: list[str]) -> list[str]:
    return list(dict.fromkeys([*first, *second]))


def merge_settings(
    global_settings: LazymakeSettings | None,
    project_settings: LazymakeSettings | None,
) -> LazymakeSettings:
    """Combine global and project settings.

    Scalars explicitly set in the project file override the global file,
    which overrides the defaults. String lists are unioned with global
    entries first. Custom rules are appended, global then project.

    Args:
        global_settings: Settings from the home directory, if any.
        project_settings: Settings from the project, if any.

    Returns:
        The merged settings. Neither input is modified.
    """
    if global_settings is None and project_settings is None:
        return LazymakeSettings()
    if global_settings is None:
        return project_settings.model_copy(deep=True)
    if project_settings is None:
        return global_settings.model_copy(deep=True)

    gs, ps = global_settings.safety, project_settings.safety

    makefile = (
        project_settings.makefile
        if "makefile" in project_settings.model_fields_set
        else global_settings.makefile
    )
    enabled = ps.enabled if "enabled" in ps.model_fields_set else gs.enabled

    safety = SafetyConfig(
        enabled=enabled,
        enabled_rules=_union(gs.enabled_rules, ps.enabled_rules),
        exclude_targets=_union(gs.exclude_targets, ps.exclude_targets),
        custom_rules=[
            rule.model_copy(deep=True) for rule in [*gs.custom_rules, *ps.custom_rules]
        ],
    )
    return LazymakeSettings(makefile=makefile, safety=safety)


def find_config_paths(explicit_path: str | Path | None = None) -> tuple[Path | None, Path | None]:
    """Locate the global and project configuration files.

    Args:
        explicit_path: A project file chosen by the user. Falls back to the
            ``LAZYMAKE_CONFIG`` environment variable, then ``./.lazymake.yaml``.

    Returns:
        Tuple of (global_path, project_path); each is None when no file
        applies. An explicit path is returned even if it does not exist so
        that loading reports it.
    """
    global_path: Path | None = Path.home() / CONFIG_FILENAME
    if not global_path.is_file():
        global_path = None

    chosen = explicit_path or os.environ.get(CONFIG_ENV_VAR)
    if chosen:
        project_path: Path | None = Path(chosen).expanduser()
    else:
        project_path = Path.cwd() / CONFIG_FILENAME
        if not project_path.is_file():
            project_path = None

    if global_path is not None and project_path is not None:
        if global_path.resolve() == project_path.resolve():
            project_path = None

    return global_path, project_path


def load_merged_settings(explicit_path: str | Path | None = None) -> LazymakeSettings:
    """Find, load and merge the global and project configuration files.

    Raises:
        ConfigError: If either file cannot be loaded.
    """
    global_path, project_path = find_config_paths(explicit_path)

    global_settings = load_settings(global_path) if global_path else None
    project_settings = load_settings(project_path) if project_path else None

    logger.debug(
        "config_resolved",
        global_path=str(global_path) if global_path else None,
        project_path=str(project_path) if project_path else None,
    )
    return merge_settings(global_settings, project_settings)
