"""Config loader for YAML control definitions."""

import logging
from pathlib import Path
from typing import Any

import yaml
from pydantic import ValidationError

from parley.config.models import ControlsConfig
from parley.core.errors import ConfigError

logger = logging.getLogger(__name__)


class ConfigLoader:
    """Load ControlsConfig from YAML files."""

    @staticmethod
    def load(path: Path | str) -> ControlsConfig:
        """Load configuration from a YAML file, or every ``*.yaml`` file in a directory.

        Args:
            path: Path to a YAML file or a directory of them

        Returns:
            Parsed ControlsConfig instance

        Raises:
            FileNotFoundError: If nothing can be read at ``path``
            ConfigError: If the YAML or its contents are invalid
        """
        config_path = Path(path)

        if config_path.is_dir():
            files = sorted(config_path.glob("*.yaml"))
            if not files:
                raise FileNotFoundError(f"No config files found in {config_path}")
        else:
            if not config_path.exists():
                raise FileNotFoundError(f"Config file not found: {config_path}")
            files = [config_path]

        data: dict[str, Any] = {"controls": []}
        for fpath in files:
            chunk = ConfigLoader._read(fpath)
            data["controls"].extend(chunk.get("controls") or [])
            for k, v in chunk.items():
                if k != "controls":
                    data[k] = v

        for entry in data["controls"]:
            if isinstance(entry, dict):
                entry.setdefault("kind", "list")

        try:
            config = ControlsConfig.model_validate(data)
        except (ValidationError, ValueError) as e:
            raise ConfigError(f"Invalid control configuration in {config_path}: {e}") from e

        logger.debug(
            f"Loaded {len(config.controls)} controls from {config_path}",
            extra={"path": str(config_path), "controls": [c.id for c in config.controls]},
        )
        return config

    @staticmethod
    def _read(path: Path) -> dict[str, Any]:
        try:
            with open(path, encoding="utf-8") as f:
                chunk = yaml.safe_load(f) or {}
        except yaml.YAMLError as e:
            raise ConfigError(f"Cannot parse {path}: {e}") from e
        if not isinstance(chunk, dict):
            raise ConfigError(f"{path} must contain a mapping at the top level")
        return chunk
