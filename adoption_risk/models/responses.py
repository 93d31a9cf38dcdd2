# adoption_risk/models/responses.py
"""
Pydantic response models for service-layer outputs.

All tools return structured responses using these models for consistency.
"""

from pydantic import BaseModel, Field

from adoption_risk.monitoring.alerts import RiskAlert
from adoption_risk.monitoring.kri import KeyRiskIndicator
from adoption_risk.scoring.schemas import HeatMapEntry, RiskSummary


class MitigationStepView(BaseModel):
    index: int = Field(description="Zero-based position within the alert's plan")
    step: str
    owner: str = ""
    timeline: str = ""
    priority: str = "medium"
    status: str


class AlertView(BaseModel):
    """Single alert as shown on the dashboard."""

    id: str = Field(description="Alert identifier")
    risk_category: str
    risk_description: str
    trigger_reason: str = ""
    potential_impact: str = ""
    risk_score: int = Field(ge=0, le=100)
    severity: str
    status: str = Field(description="new/acknowledged/in_progress/resolved/dismissed")
    progress: int = Field(ge=0, le=100, description="Mitigation progress (%)")
    mitigation_steps: list[MitigationStepView] = Field(default_factory=list)
    source_type: str | None = None
    source_id: str | None = None
    source_name: str | None = None
    acknowledged_by: str | None = None
    resolved_at: str | None = Field(default=None, description="Resolution timestamp (ISO format)")
    created_at: str = Field(description="Creation timestamp (ISO format)")

    @classmethod
    def from_alert(cls, alert: RiskAlert) -> "AlertView":
        return cls(
            id=alert.id,
            risk_category=alert.risk_category,
            risk_description=alert.risk_description,
            trigger_reason=alert.trigger_reason,
            potential_impact=alert.potential_impact,
            risk_score=alert.risk_score,
            severity=alert.severity.value,
            status=alert.status.value,
            progress=alert.progress,
            mitigation_steps=[
                MitigationStepView(index=i, **step.to_dict())
                for i, step in enumerate(alert.mitigation_steps)
            ],
            source_type=alert.source_type,
            source_id=alert.source_id,
            source_name=alert.source_name,
            acknowledged_by=alert.acknowledged_by,
            resolved_at=alert.resolved_at.isoformat() if alert.resolved_at else None,
            created_at=alert.created_at.isoformat(),
        )


class AlertCounts(BaseModel):
    """Overview card counts."""

    total: int = 0
    active: int = 0
    new: int = 0
    in_flight: int = 0
    resolved: int = 0
    dismissed: int = 0
    new_critical: int = 0
    new_high: int = 0
    active_critical: int = 0
    active_high: int = 0


class ListAlertsResponse(BaseModel):
    """Response from list_alerts tool."""

    alerts: list[AlertView] = Field(default_factory=list)
    total: int = Field(description="Number of alerts returned")


class IndustryProfileView(BaseModel):
    industry: str
    critical_areas: list[str] = Field(default_factory=list)
    high_risk_factors: list[str] = Field(default_factory=list)
    compliance_standards: list[str] = Field(default_factory=list)


class AnalysisResponse(BaseModel):
    """Response from analyze_risks tool."""

    summary: RiskSummary
    heat_map: list[HeatMapEntry] = Field(
        default_factory=list, description="Risks ranked by RPN, highest first"
    )
    categories: dict[str, str] = Field(
        default_factory=dict, description="Category -> category risk level"
    )
    industry: IndustryProfileView | None = None
    key_concerns: list[str] = Field(default_factory=list)
    recommendation: str = ""


class DashboardResponse(BaseModel):
    """Response from get_monitoring_dashboard tool."""

    source_id: str
    health_score: int = Field(ge=0, le=100)
    health_label: str
    indicators: list[KeyRiskIndicator] = Field(default_factory=list)
    counts: AlertCounts
    active_alerts: list[AlertView] = Field(default_factory=list)
    recently_resolved: list[AlertView] = Field(default_factory=list)
    generated_at: str = Field(description="Evaluation timestamp (ISO format)")
