# adoption_risk/monitoring/kri.py
"""
Key risk indicator (KRI) evaluation.

A KRI compares a current value with a threshold in a "direction of
goodness". Above-is-healthy indicators warn down to 80% of the threshold;
below-is-healthy indicators warn up to 120% of it. Past the band they are
critical.

The monitoring panel is rebuilt from the snapshot and alerts on every call.
Nothing is cached.
"""

import logging
from collections.abc import Iterable
from enum import Enum

from pydantic import BaseModel, Field, computed_field

from adoption_risk.config.schema import KRIConfig
from adoption_risk.monitoring.alerts import AlertSeverity, RiskAlert, active_alerts
from adoption_risk.monitoring.snapshot import StrategySnapshot
from adoption_risk.scoring.priority import round_half_up

logger = logging.getLogger(__name__)


class KRIDirection(Enum):
    ABOVE_IS_HEALTHY = "above_is_healthy"
    BELOW_IS_HEALTHY = "below_is_healthy"


class KRIStatus(Enum):
    HEALTHY = "healthy"
    WARNING = "warning"
    CRITICAL = "critical"


class KRITrend(Enum):
    UP = "up"
    DOWN = "down"
    STABLE = "stable"


SEVERITY_WEIGHTS = {
    AlertSeverity.LOW: 25,
    AlertSeverity.MEDIUM: 50,
    AlertSeverity.HIGH: 75,
    AlertSeverity.CRITICAL: 100,
}
UNKNOWN_SEVERITY_WEIGHT = 50

HIGH_SEVERITIES = frozenset({AlertSeverity.HIGH, AlertSeverity.CRITICAL})


class KeyRiskIndicator(BaseModel):
    """An evaluated indicator, ready for display."""

    indicator: str = Field(description="Indicator name")
    current_value: float
    threshold: float
    direction: KRIDirection
    status: KRIStatus
    trend: KRITrend = KRITrend.STABLE
    unit: str = ""
    measurement: str = Field(default="", description="What the value measures")
    monitoring_frequency: str = ""

    @computed_field
    @property
    def progress(self) -> float:
        """Value as a percentage of threshold, capped at 100."""
        return kri_progress(self.current_value, self.threshold)


def evaluate_kri_status(
    value: float,
    threshold: float,
    direction: KRIDirection,
    above_warning_ratio: float = 0.8,
    below_warning_ratio: float = 1.2,
) -> KRIStatus:
    """
    Classify a value against its threshold.

    Args:
        value: Current measurement
        threshold: Healthy boundary (inclusive)
        direction: Which side of the threshold is healthy
        above_warning_ratio: Warning floor for above-is-healthy, as a fraction of threshold
        below_warning_ratio: Warning ceiling for below-is-healthy, as a multiple of threshold

    Returns:
        healthy, warning or critical
    """
    if direction is KRIDirection.ABOVE_IS_HEALTHY:
        if value >= threshold:
            return KRIStatus.HEALTHY
        if value >= threshold * above_warning_ratio:
            return KRIStatus.WARNING
        return KRIStatus.CRITICAL

    if value <= threshold:
        return KRIStatus.HEALTHY
    if value <= threshold * below_warning_ratio:
        return KRIStatus.WARNING
    return KRIStatus.CRITICAL


def kri_progress(value: float, threshold: float) -> float:
    """min(100, value / threshold * 100); 0 for a zero threshold."""
    if threshold == 0:
        return 0.0
    return min(100.0, value / threshold * 100)


def evaluate_kri(
    indicator: str,
    value: float,
    threshold: float,
    direction: KRIDirection,
    trend: KRITrend = KRITrend.STABLE,
    config: KRIConfig | None = None,
    **details: str,
) -> KeyRiskIndicator:
    """
    Build an evaluated KRI.

    The trend is supplied by the caller; deriving it is not this function's job.

    Args:
        details: unit, measurement, monitoring_frequency
    """
    config = config or KRIConfig()
    status = evaluate_kri_status(
        value,
        threshold,
        direction,
        above_warning_ratio=config.above_warning_ratio,
        below_warning_ratio=config.below_warning_ratio,
    )
    return KeyRiskIndicator(
        indicator=indicator,
        current_value=value,
        threshold=threshold,
        direction=direction,
        status=status,
        trend=trend,
        **details,
    )


def average_alert_risk_score(alerts: Iterable[RiskAlert]) -> int:
    """Mean severity weight (low 25 ... critical 100), rounded; 0 for no alerts."""
    weights = [SEVERITY_WEIGHTS.get(alert.severity, UNKNOWN_SEVERITY_WEIGHT) for alert in alerts]
    if not weights:
        return 0
    return round_half_up(sum(weights) / len(weights))


def high_severity_count(alerts: Iterable[RiskAlert]) -> int:
    return sum(1 for alert in alerts if alert.severity in HIGH_SEVERITIES)


def compliance_readiness(alerts: Iterable[RiskAlert], penalty: int = 10) -> int:
    """100 minus `penalty` per open compliance alert, floored at 0."""
    open_compliance = sum(1 for alert in alerts if alert.risk_category == "compliance")
    return max(0, 100 - open_compliance * penalty)


def build_kri_panel(
    snapshot: StrategySnapshot,
    alerts: Iterable[RiskAlert],
    config: KRIConfig | None = None,
) -> list[KeyRiskIndicator]:
    """
    Evaluate the per-strategy monitoring panel.

    Only active alerts count. The compliance indicator appears only when the
    snapshot lists compliance requirements.

    Args:
        snapshot: Strategy/assessment context
        alerts: The strategy's alerts (any status)
        config: Thresholds and policy values

    Returns:
        Indicators in display order
    """
    config = config or KRIConfig()
    live = active_alerts(alerts)
    panel: list[KeyRiskIndicator] = []

    panel.append(
        evaluate_kri(
            "Implementation Progress",
            snapshot.overall_progress,
            config.progress_threshold,
            KRIDirection.ABOVE_IS_HEALTHY,
            KRITrend.UP,
            config,
            unit="%",
            measurement="Percentage of milestones completed",
            monitoring_frequency="Weekly",
        )
    )

    avg_score = average_alert_risk_score(live)
    panel.append(
        evaluate_kri(
            "Average Risk Score",
            avg_score,
            config.avg_risk_threshold,
            KRIDirection.BELOW_IS_HEALTHY,
            KRITrend.DOWN if avg_score > config.avg_risk_threshold else KRITrend.STABLE,
            config,
            unit="/100",
            measurement="Weighted average of all identified risks",
            monitoring_frequency="Daily",
        )
    )

    high_count = high_severity_count(live)
    panel.append(
        evaluate_kri(
            "High-Severity Open Risks",
            high_count,
            config.high_severity_threshold,
            KRIDirection.BELOW_IS_HEALTHY,
            KRITrend.UP if high_count > config.high_severity_threshold else KRITrend.DOWN,
            config,
            unit="risks",
            measurement="Count of high/critical severity unresolved risks",
            monitoring_frequency="Daily",
        )
    )

    if snapshot.compliance_requirements:
        readiness = compliance_readiness(live, penalty=config.compliance_penalty)
        panel.append(
            evaluate_kri(
                "Compliance Readiness",
                readiness,
                config.compliance_threshold,
                KRIDirection.ABOVE_IS_HEALTHY,
                KRITrend.STABLE if readiness >= config.compliance_threshold else KRITrend.UP,
                config,
                unit="%",
                measurement="Percentage of compliance requirements addressed",
                monitoring_frequency="Weekly",
            )
        )

    panel.append(
        evaluate_kri(
            "Budget Variance",
            config.budget_variance,
            config.budget_variance_threshold,
            KRIDirection.BELOW_IS_HEALTHY,
            KRITrend.STABLE,
            config,
            unit="%",
            measurement="Deviation from planned budget",
            monitoring_frequency="Monthly",
        )
    )

    panel.append(
        evaluate_kri(
            "Team Velocity",
            config.team_velocity,
            config.team_velocity_threshold,
            KRIDirection.ABOVE_IS_HEALTHY,
            KRITrend.UP,
            config,
            unit="%",
            measurement="Sprint completion rate",
            monitoring_frequency="Weekly",
        )
    )

    critical = [kri.indicator for kri in panel if kri.status is KRIStatus.CRITICAL]
    if critical:
        logger.info(f"KRI panel for '{snapshot.id}': critical indicators {critical}")
    return panel
