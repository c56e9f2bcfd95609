"""Configuration loading from an optional YAML file and environment variables.

Precedence: dataclass defaults < YAML file (explicit path, else CONFIG_PATH) < environment.
"""

import logging
import os
from dataclasses import dataclass, fields

import yaml

logger = logging.getLogger(__name__)

VALID_LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR")

# env var → Config field
_ENV_VARS = {
    "LOG_FILE": "log_file",
    "LOG_OUTPUT_DIR": "output_dir",
    "LOG_NORMALIZER_HOST": "host",
    "LOG_NORMALIZER_PORT": "port",
    "LOG_LEVEL": "log_level",
    "USE_POLLING": "use_polling",
    "POLL_INTERVAL": "poll_interval",
}


def _parse_bool(value: str) -> bool:
    return value.strip().lower() in ("true", "1", "yes")


@dataclass(frozen=True)
class Config:
    log_file: str | None = None
    output_dir: str = "./parsed_logs"
    host: str = "0.0.0.0"
    port: int = 3000
    log_level: str = "INFO"
    use_polling: bool = True
    poll_interval: float = 1.0


def load_yaml_config(path: str | None) -> dict:
    """Load settings from a YAML file. Returns empty dict if no path or unusable file."""
    if not path:
        return {}
    try:
        with open(path, "r", encoding="utf-8") as f:
            data = yaml.safe_load(f) or {}
    except FileNotFoundError:
        logger.warning("Config file %s not found, using defaults", path)
        return {}
    except yaml.YAMLError:
        logger.warning("Invalid YAML in %s, using defaults", path)
        return {}
    if not isinstance(data, dict):
        logger.warning("Config file %s is not a mapping, using defaults", path)
        return {}
    logger.info("Loaded YAML config from %s", path)
    return data


def _coerce(name: str, value, default):
    """Convert a raw YAML/env value to the type of the field's default."""
    if value is None or value == "":
        return default
    try:
        if isinstance(default, bool):
            return value if isinstance(value, bool) else _parse_bool(str(value))
        if isinstance(default, int):
            return int(value)
        if isinstance(default, float):
            return float(value)
    except (TypeError, ValueError):
        logger.warning("Invalid value %r for %s, using default %r", value, name, default)
        return default
    return str(value)


def load_config(config_path: str | None = None) -> Config:
    """Build Config from YAML (if any) then environment variables."""
    path = config_path or os.environ.get("CONFIG_PATH")
    raw = load_yaml_config(path)

    for env_name, field_name in _ENV_VARS.items():
        if env_name in os.environ:
            raw[field_name] = os.environ[env_name]

    values = {}
    for f in fields(Config):
        values[f.name] = _coerce(f.name, raw.get(f.name), f.default)

    level = values["log_level"].upper()
    if level not in VALID_LOG_LEVELS:
        logger.warning("Invalid LOG_LEVEL '%s', falling back to 'INFO'", level)
        level = "INFO"
    values["log_level"] = level

    return Config(**values)
