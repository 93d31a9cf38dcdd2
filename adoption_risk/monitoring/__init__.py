# adoption_risk/monitoring/__init__.py
"""
Alert lifecycle, mitigation progress and key risk indicators.

Operates on alert records read from the store immediately before each use.
"""

from .alerts import (
    AlertSeverity,
    AlertStatus,
    AlertSummary,
    RiskAlert,
    acknowledge,
    active_alerts,
    default_risk_score,
    dismiss,
    generate_alert_id,
    partition_alerts,
    resolve,
    start,
    summarize_alerts,
)
from .health import health_label, project_health_score
from .kri import (
    KeyRiskIndicator,
    KRIDirection,
    KRIStatus,
    KRITrend,
    build_kri_panel,
    evaluate_kri,
    evaluate_kri_status,
)
from .mitigation import MitigationStep, StepStatus, mitigation_progress, update_step_status
from .snapshot import StrategySnapshot

__all__ = [
    "AlertStatus",
    "AlertSeverity",
    "AlertSummary",
    "RiskAlert",
    "generate_alert_id",
    "default_risk_score",
    "acknowledge",
    "start",
    "resolve",
    "dismiss",
    "active_alerts",
    "partition_alerts",
    "summarize_alerts",
    "MitigationStep",
    "StepStatus",
    "mitigation_progress",
    "update_step_status",
    "KeyRiskIndicator",
    "KRIDirection",
    "KRIStatus",
    "KRITrend",
    "evaluate_kri_status",
    "evaluate_kri",
    "build_kri_panel",
    "StrategySnapshot",
    "project_health_score",
    "health_label",
]
