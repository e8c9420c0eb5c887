"""Configuration management for schemadoc."""

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional

import yaml

from schemadoc.exceptions import ConfigError

CONFIG_FILE_NAME = ".schemadoc.yml"

VALID_CONFIG_FIELDS = {"schema", "additionalData", "output", "atomic"}

TRUE_VALUES = {"1", "true", "yes", "on"}


def load_config_file(path: Optional[Path] = None) -> dict:
    """Load settings from the project config file.

    Args:
        path: Config file to read (default: ./.schemadoc.yml)

    Returns:
        Dict with any of schema, additionalData, output, atomic. Empty if the
        file does not exist.

    Raises:
        ConfigError: If the file is not valid YAML or has unknown keys
    """
    cfg_path = path or Path.cwd() / CONFIG_FILE_NAME
    if not cfg_path.exists():
        return {}

    try:
        with open(cfg_path) as f:
            data = yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise ConfigError(f"Invalid YAML in {cfg_path}: {e}") from e

    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ConfigError(f"{cfg_path} must contain a mapping")

    unknown_fields = set(data.keys()) - VALID_CONFIG_FIELDS
    if unknown_fields:
        raise ConfigError(
            f"Unknown field(s) in {cfg_path}: {', '.join(sorted(unknown_fields))}"
        )

    additional = data.get("additionalData")
    if isinstance(additional, str):
        data["additionalData"] = [additional]
    elif additional is not None and not isinstance(additional, list):
        raise ConfigError(f"'additionalData' in {cfg_path} must be a string or list")

    return data


@dataclass
class Config:
    """Configuration for schemadoc."""

    schema_path: str = "schema.json"
    additional_data_paths: list[str] = field(default_factory=list)
    output_path: Optional[str] = None
    atomic_merge: bool = False

    @classmethod
    def from_env(
        cls,
        *,
        schema_path: Optional[str] = None,
        additional_data_paths: Optional[list[str]] = None,
        output_path: Optional[str] = None,
        atomic_merge: Optional[bool] = None,
        config_file: Optional[Path] = None,
    ) -> "Config":
        """Load configuration from .schemadoc.yml, env vars, with CLI overrides.

        Priority (highest to lowest):
        1. Explicit parameters (CLI args)
        2. Environment variables
        3. .schemadoc.yml in the working directory
        """
        file_cfg = load_config_file(config_file)

        def resolve(explicit, env_key, cfg_key):
            if explicit is not None:
                return explicit
            env_val = os.environ.get(env_key)
            if env_val is not None:
                return env_val
            return file_cfg.get(cfg_key)

        if additional_data_paths is None:
            env_val = os.environ.get("SCHEMADOC_ADDITIONAL_DATA")
            if env_val is not None:
                additional_data_paths = [p for p in env_val.split(os.pathsep) if p]
            else:
                additional_data_paths = list(file_cfg.get("additionalData") or [])

        atomic = resolve(atomic_merge, "SCHEMADOC_ATOMIC", "atomic")
        if isinstance(atomic, str):
            atomic = atomic.strip().lower() in TRUE_VALUES

        return cls(
            schema_path=resolve(schema_path, "SCHEMADOC_SCHEMA", "schema")
            or "schema.json",
            additional_data_paths=additional_data_paths,
            output_path=resolve(output_path, "SCHEMADOC_OUTPUT", "output"),
            atomic_merge=bool(atomic),
        )

    def validate(self) -> None:
        """Validate that the configuration can drive a build.

        Raises:
            ConfigError: If the schema path is empty or an additional data path is blank.
        """
        missing = []
        if not self.schema_path:
            missing.append("schema_path (use --schema or SCHEMADOC_SCHEMA)")
        if any(not p for p in self.additional_data_paths):
            missing.append("additional_data_paths contains an empty path")

        if missing:
            raise ConfigError(
                "Missing required configuration:\n  - " + "\n  - ".join(missing)
            )
