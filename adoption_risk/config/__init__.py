# adoption_risk/config/__init__.py
"""Configuration system for adoption-risk."""

from .loader import get_config_path, load_config, resolve_db_path
from .schema import (
    KRIConfig,
    MonitoringConfig,
    OutputConfig,
    RiskCoreConfig,
    ScoringConfig,
    StorageConfig,
)

__all__ = [
    "RiskCoreConfig",
    "ScoringConfig",
    "KRIConfig",
    "MonitoringConfig",
    "StorageConfig",
    "OutputConfig",
    "load_config",
    "get_config_path",
    "resolve_db_path",
]
