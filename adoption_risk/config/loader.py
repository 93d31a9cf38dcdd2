# adoption_risk/config/loader.py
"""
Locate, create and validate the adoption-risk config file.

The file lives in the platform config dir (platformdirs) unless a path is
given explicitly, e.g. via `--config` or ADOPTION_RISK_CONFIG. The alert
database defaults to the same directory.
"""

import logging
from pathlib import Path

import yaml
from platformdirs import user_config_path

from adoption_risk.errors import ConfigError

from .schema import RiskCoreConfig

logger = logging.getLogger(__name__)

APP_NAME = "adoption-risk"
DB_FILENAME = "alerts.db"


def get_config_dir() -> Path:
    """Platform config directory for adoption-risk (created on demand)."""
    return user_config_path(APP_NAME, ensure_exists=True)


def get_config_path() -> Path:
    return get_config_dir() / "config.yaml"


def _write_defaults(config_path: Path) -> RiskCoreConfig:
    """Write a fully populated default config so every threshold is editable."""
    config = RiskCoreConfig()
    config_path.parent.mkdir(parents=True, exist_ok=True)
    with config_path.open("w") as f:
        yaml.safe_dump(config.model_dump(mode="json"), f, default_flow_style=False, sort_keys=False)

    logger.info(f"Created default config at {config_path}")
    return config


def load_config(config_path: Path | None = None) -> RiskCoreConfig:
    """
    Load the KRI, scoring, monitoring, storage and output settings.

    A missing file is created with defaults; an empty one yields defaults.

    Args:
        config_path: Explicit config file (defaults to the user config dir)

    Raises:
        ConfigError: If the file is not a YAML mapping
        ValidationError: If a setting is out of range
    """
    config_path = config_path or get_config_path()
    if not config_path.exists():
        return _write_defaults(config_path)

    with config_path.open("r") as f:
        try:
            data = yaml.safe_load(f)
        except yaml.YAMLError as e:
            raise ConfigError(f"{config_path}: invalid YAML ({e})") from e

    if data is None:
        data = {}
    if not isinstance(data, dict):
        raise ConfigError(f"{config_path}: expected a mapping, got {type(data).__name__}")

    config = RiskCoreConfig.model_validate(data)
    logger.debug(f"Loaded config from {config_path}")
    return config


def resolve_db_path(config: RiskCoreConfig) -> str:
    """Alert database path: storage.db_path if set, else alerts.db beside the config."""
    if config.storage.db_path:
        return str(Path(config.storage.db_path).expanduser())
    return str(get_config_dir() / DB_FILENAME)
