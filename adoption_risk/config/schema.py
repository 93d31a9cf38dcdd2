# adoption_risk/config/schema.py
"""
Pydantic configuration models for adoption-risk.

All models use extra="ignore" to allow unknown YAML keys without crashing.
"""

from typing import Literal

from pydantic import BaseModel, ConfigDict, Field


class ScoringConfig(BaseModel):
    """Risk analysis presentation settings."""

    model_config = ConfigDict(extra="ignore")

    heat_map_top: int = Field(
        default=10, ge=1, description="Default number of heat map rows shown"
    )


class KRIConfig(BaseModel):
    """Key risk indicator thresholds and warning bands."""

    model_config = ConfigDict(extra="ignore")

    above_warning_ratio: float = Field(
        default=0.8,
        gt=0.0,
        le=1.0,
        description="Fraction of threshold still counted as warning for above-is-healthy KRIs",
    )
    below_warning_ratio: float = Field(
        default=1.2,
        ge=1.0,
        description="Multiple of threshold still counted as warning for below-is-healthy KRIs",
    )
    progress_threshold: float = Field(default=80, description="Implementation progress target (%)")
    avg_risk_threshold: float = Field(default=60, description="Average alert risk score ceiling")
    high_severity_threshold: float = Field(
        default=3, description="Maximum open high/critical alerts"
    )
    compliance_threshold: float = Field(default=90, description="Compliance readiness target (%)")
    compliance_penalty: int = Field(
        default=10, ge=0, description="Readiness points lost per open compliance alert"
    )
    budget_variance: float = Field(default=5, description="Current budget variance (%)")
    budget_variance_threshold: float = Field(default=10, description="Budget variance ceiling (%)")
    team_velocity: float = Field(default=85, description="Current sprint completion rate (%)")
    team_velocity_threshold: float = Field(default=75, description="Sprint completion target (%)")


class MonitoringConfig(BaseModel):
    """Alert lifecycle and mitigation step policy."""

    model_config = ConfigDict(extra="ignore")

    allow_step_reset: bool = Field(
        default=False,
        description="Allow mitigation steps to move backward (e.g. completed -> pending)",
    )


class StorageConfig(BaseModel):
    """Alert store configuration."""

    model_config = ConfigDict(extra="ignore")

    backend: Literal["sqlite", "memory"] = Field(
        default="sqlite", description="Alert store backend"
    )
    db_path: str | None = Field(
        default=None, description="SQLite database path (None = user config dir)"
    )


class OutputConfig(BaseModel):
    """Output configuration."""

    model_config = ConfigDict(extra="ignore")

    verbosity: Literal["quiet", "normal", "verbose"] = Field(
        default="normal", description="Logging verbosity level"
    )


class RiskCoreConfig(BaseModel):
    """Root configuration for adoption-risk."""

    model_config = ConfigDict(extra="ignore")

    scoring: ScoringConfig = Field(default_factory=ScoringConfig)
    kri: KRIConfig = Field(default_factory=KRIConfig)
    monitoring: MonitoringConfig = Field(default_factory=MonitoringConfig)
    storage: StorageConfig = Field(default_factory=StorageConfig)
    output: OutputConfig = Field(default_factory=OutputConfig)
