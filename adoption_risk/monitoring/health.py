# adoption_risk/monitoring/health.py
"""Project health score shown above the monitoring panels."""

from collections.abc import Iterable

from adoption_risk.monitoring.alerts import RiskAlert, active_alerts
from adoption_risk.monitoring.kri import high_severity_count
from adoption_risk.monitoring.snapshot import StrategySnapshot

# (lower bound, label), highest first
HEALTH_LABELS = (
    (80, "Excellent"),
    (60, "Good"),
    (40, "At Risk"),
)


def project_health_score(snapshot: StrategySnapshot, alerts: Iterable[RiskAlert]) -> int:
    """
    Score a strategy's health on 0-100.

    Starts at 100; -10 per active high/critical alert, +10 for progress of
    at least 80%, -10 for progress under 40%, -5 per delayed milestone.
    """
    score = 100
    score -= high_severity_count(active_alerts(alerts)) * 10

    progress = snapshot.overall_progress
    if progress >= 80:
        score += 10
    elif progress < 40:
        score -= 10

    score -= snapshot.milestone_count("delayed") * 5
    return max(0, min(100, score))


def health_label(score: int) -> str:
    for lower_bound, label in HEALTH_LABELS:
        if score >= lower_bound:
            return label
    return "Critical"
