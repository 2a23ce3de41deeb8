from __future__ import annotations

import json
import os
from dataclasses import dataclass, replace
from pathlib import Path
from typing import Any

import jsonschema
import yaml
from jsonschema.exceptions import ValidationError

from ..services.area_joiner import JoinKey
from ..services.localization import ENTERED_AREA_IDS

"""Build configuration loader.

Responsibilities:
- Load YAML config (default ``config/datamine.yml``)
- Validate against datamine/contracts/config_schema.json (unknown keys rejected)
- Apply defaults for every missing key
- Apply environment overrides (DATAMINE_INPUT_DIRECTORY / DATAMINE_OUTPUT_PATH)
"""

__all__ = [
    "ConfigError",
    "BuildConfig",
    "DEFAULT_CONFIG_PATH",
    "SCHEMA_PATH",
    "load_config",
    "apply_env_overrides",
]

# datamine/config/loader.py -> datamine/config -> datamine
SCHEMA_PATH = Path(__file__).parent.parent / "contracts" / "config_schema.json"
DEFAULT_CONFIG_PATH = Path("config/datamine.yml")

ENV_INPUT_DIRECTORY = "DATAMINE_INPUT_DIRECTORY"
ENV_OUTPUT_PATH = "DATAMINE_OUTPUT_PATH"


class ConfigError(Exception):
    pass


@dataclass(frozen=True)
class BuildConfig:
    input_directory: str = "./dist"
    export_file: str = "all.json"
    lang_directory: str = "lang"
    output_path: str | None = None  # None -> stdout
    indent: int | None = 2
    area_join_key: JoinKey = JoinKey.WORLD_AREAS_KEY
    backend_error_ids: tuple[str, ...] = ENTERED_AREA_IDS
    error_log_directory: str = "./logs"


def _validate_config_schema(data: dict[str, Any]) -> None:
    """Validate config data against the JSON schema.

    Raises:
        ConfigError: If the schema file is missing or not valid JSON, or the config
            data fails validation (unknown keys, wrong types, bad enum values).
    """
    if not SCHEMA_PATH.exists():
        raise ConfigError(f"config schema not found: {SCHEMA_PATH}")
    try:
        schema = json.loads(SCHEMA_PATH.read_text(encoding="utf-8"))
        jsonschema.validate(data, schema)
    except json.JSONDecodeError as e:
        raise ConfigError(f"invalid schema file: {e}") from e
    except ValidationError as e:
        raise ConfigError(f"config validation failed: {e.message}") from e


def load_config(path: Path | None = None) -> BuildConfig:
    """Load config from ``path``; ``None`` returns the built-in defaults."""
    if path is None:
        return BuildConfig()
    if not path.exists():
        raise ConfigError(f"config file not found: {path}")
    try:
        data = yaml.safe_load(path.read_text(encoding="utf-8")) or {}
    except yaml.YAMLError as e:
        raise ConfigError(f"invalid yaml: {e}") from e
    if not isinstance(data, dict):
        raise ConfigError(f"config root must be a mapping: {path}")

    _validate_config_schema(data)

    defaults = BuildConfig()
    return BuildConfig(
        input_directory=data.get("input_directory", defaults.input_directory),
        export_file=data.get("export_file", defaults.export_file),
        lang_directory=data.get("lang_directory", defaults.lang_directory),
        output_path=data.get("output_path", defaults.output_path),
        indent=data.get("indent", defaults.indent),
        area_join_key=JoinKey(data.get("area_join_key", defaults.area_join_key.value)),
        backend_error_ids=tuple(data.get("backend_error_ids", defaults.backend_error_ids)),
        error_log_directory=data.get("error_log_directory", defaults.error_log_directory),
    )


def apply_env_overrides(cfg: BuildConfig) -> BuildConfig:
    """Environment (incl. values loaded from .env) takes precedence over the YAML file."""
    overrides: dict[str, Any] = {}
    if os.getenv(ENV_INPUT_DIRECTORY):
        overrides["input_directory"] = os.environ[ENV_INPUT_DIRECTORY]
    if os.getenv(ENV_OUTPUT_PATH):
        overrides["output_path"] = os.environ[ENV_OUTPUT_PATH]
    return replace(cfg, **overrides) if overrides else cfg
