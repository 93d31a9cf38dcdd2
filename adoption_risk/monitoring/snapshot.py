# adoption_risk/monitoring/snapshot.py
"""Read-only strategy/assessment context used for KRI computation."""

from typing import Any

from pydantic import Field, field_validator

from adoption_risk.scoring.schemas import ContractModel


class ProgressTracking(ContractModel):
    """Strategy progress as stored by the dashboard."""

    overall_progress: float = Field(default=0.0, description="Percent of milestones completed")

    @field_validator("overall_progress", mode="before")
    @classmethod
    def _coerce_progress(cls, value: Any) -> float:
        try:
            return float(value)
        except (TypeError, ValueError):
            return 0.0


class Milestone(ContractModel):
    name: str = ""
    status: str = Field(default="pending", description="pending, in_progress, completed or delayed")


class StrategySnapshot(ContractModel):
    """
    Strategy state merged with its assessment's compliance requirements.

    Fetched fresh before every evaluation; never written back.
    """

    id: str = ""
    organization_name: str = ""
    progress_tracking: ProgressTracking = Field(default_factory=ProgressTracking)
    milestones: list[Milestone] = Field(default_factory=list)
    compliance_requirements: list[Any] = Field(default_factory=list)
    business_goals: list[str] = Field(default_factory=list)
    pain_points: list[str] = Field(default_factory=list)

    @property
    def overall_progress(self) -> float:
        return self.progress_tracking.overall_progress

    def milestone_count(self, status: str) -> int:
        return sum(1 for milestone in self.milestones if milestone.status == status)
