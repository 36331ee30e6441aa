"""Load run configuration from YAML files and command-line overrides."""

import asyncio
import logging
from collections.abc import Mapping
from pathlib import Path
from typing import Any

import yaml
from pydantic import ValidationError

from batch_judge.errors import ConfigError
from batch_judge.models.config import RunConfig

log = logging.getLogger(__name__)


async def load_config_file(config_path: Path) -> Mapping[str, Any]:
    """Load run configuration defaults from a YAML file.

    Args:
        config_path: Path to the YAML file

    Returns:
        Mapping of RunConfig field names to values

    Raises:
        ConfigError: If the file is missing, empty, not valid YAML or not a
            mapping

    """
    if not config_path.is_file():
        raise ConfigError(f"Config file not found: {config_path}")

    content = await asyncio.to_thread(config_path.read_text, encoding="utf-8")

    try:
        data = yaml.safe_load(content)
    except yaml.YAMLError as e:
        raise ConfigError(f"Invalid YAML in {config_path}: {e}") from e

    if data is None:
        raise ConfigError(f"Empty config file: {config_path}")

    if not isinstance(data, dict):
        raise ConfigError(
            f"Invalid run configuration in {config_path}: expected a mapping"
        )

    log.debug("Loaded config file %s with keys: %s", config_path, sorted(data))
    return data


def build_run_config(
    defaults: Mapping[str, Any], overrides: Mapping[str, Any]
) -> RunConfig:
    """Merge file defaults with explicit overrides and validate the result.

    Overrides whose value is ``None`` were not given and do not replace a
    default.
    """
    values = dict(defaults)
    values.update({k: v for k, v in overrides.items() if v is not None})

    try:
        return RunConfig.model_validate(values)
    except ValidationError as e:
        raise ConfigError(f"Invalid run configuration: {e}") from e
