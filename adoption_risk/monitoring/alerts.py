# adoption_risk/monitoring/alerts.py
"""
Risk alert records and their lifecycle state machine.

An alert starts as NEW and ends as RESOLVED or DISMISSED; both are terminal.
Transition functions never mutate their input. They return an updated copy
that the caller persists.
"""

import logging
from collections.abc import Iterable
from dataclasses import dataclass, field, replace
from datetime import datetime, timezone
from enum import Enum
from uuid import uuid4

from adoption_risk.errors import InvalidTransition
from adoption_risk.monitoring.mitigation import MitigationStep, mitigation_progress

logger = logging.getLogger(__name__)


class AlertStatus(Enum):
    """Alert lifecycle states."""

    NEW = "new"
    ACKNOWLEDGED = "acknowledged"
    IN_PROGRESS = "in_progress"
    RESOLVED = "resolved"
    DISMISSED = "dismissed"


class AlertSeverity(Enum):
    """Alert severity as reported by monitoring."""

    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    CRITICAL = "critical"


TERMINAL_STATUSES = frozenset({AlertStatus.RESOLVED, AlertStatus.DISMISSED})

ALLOWED_TRANSITIONS: dict[AlertStatus, frozenset[AlertStatus]] = {
    AlertStatus.NEW: frozenset(
        {
            AlertStatus.ACKNOWLEDGED,
            AlertStatus.IN_PROGRESS,
            AlertStatus.RESOLVED,
            AlertStatus.DISMISSED,
        }
    ),
    AlertStatus.ACKNOWLEDGED: frozenset(
        {AlertStatus.IN_PROGRESS, AlertStatus.RESOLVED, AlertStatus.DISMISSED}
    ),
    AlertStatus.IN_PROGRESS: frozenset({AlertStatus.RESOLVED, AlertStatus.DISMISSED}),
    AlertStatus.RESOLVED: frozenset(),
    AlertStatus.DISMISSED: frozenset(),
}

# Risk score assigned when monitoring creates an alert without one
_DEFAULT_RISK_SCORES = {
    AlertSeverity.CRITICAL: 90,
    AlertSeverity.HIGH: 70,
}


@dataclass
class RiskAlert:
    """
    Persisted monitoring alert.

    Internal record (dataclass, not Pydantic); responses are built from it.
    """

    id: str
    risk_category: str
    risk_description: str
    severity: AlertSeverity
    risk_score: int
    created_at: datetime
    trigger_reason: str = ""
    potential_impact: str = ""
    status: AlertStatus = AlertStatus.NEW
    mitigation_steps: list[MitigationStep] = field(default_factory=list)
    source_type: str | None = None  # "strategy" or "assessment"
    source_id: str | None = None
    source_name: str | None = None
    acknowledged_by: str | None = None
    resolved_at: datetime | None = None
    updated_at: datetime | None = None

    @property
    def is_active(self) -> bool:
        return self.status not in TERMINAL_STATUSES

    @property
    def progress(self) -> int:
        """Mitigation progress percentage."""
        return mitigation_progress(self.mitigation_steps)


@dataclass
class AlertSummary:
    """Counts behind the monitoring overview cards."""

    total: int = 0
    active: int = 0
    new: int = 0
    in_flight: int = 0  # acknowledged or in_progress
    resolved: int = 0
    dismissed: int = 0
    new_critical: int = 0
    new_high: int = 0
    active_critical: int = 0
    active_high: int = 0


def generate_alert_id() -> str:
    """
    Generate a unique alert ID.

    Returns:
        12-character hex string (UUID4 truncated)
    """
    return uuid4().hex[:12]


def default_risk_score(severity: AlertSeverity) -> int:
    """0-100 risk score implied by a severity: critical 90, high 70, otherwise 50."""
    return _DEFAULT_RISK_SCORES.get(severity, 50)


def can_transition(current: AlertStatus, target: AlertStatus) -> bool:
    return target in ALLOWED_TRANSITIONS[current]


def check_transition(current: AlertStatus, target: AlertStatus) -> None:
    """
    Validate an alert status change.

    Raises:
        InvalidTransition: If the transition table does not allow it
    """
    if not can_transition(current, target):
        logger.warning(f"Rejected alert transition {current.value} -> {target.value}")
        raise InvalidTransition(current.value, target.value)


def acknowledge(alert: RiskAlert, acknowledged_by: str) -> RiskAlert:
    """NEW -> ACKNOWLEDGED, recording who acknowledged it."""
    check_transition(alert.status, AlertStatus.ACKNOWLEDGED)
    return replace(alert, status=AlertStatus.ACKNOWLEDGED, acknowledged_by=acknowledged_by)


def start(alert: RiskAlert) -> RiskAlert:
    """Mark mitigation as under way."""
    check_transition(alert.status, AlertStatus.IN_PROGRESS)
    return replace(alert, status=AlertStatus.IN_PROGRESS)


def resolve(alert: RiskAlert, now: datetime | None = None) -> RiskAlert:
    """Close the alert as resolved, stamping resolved_at."""
    check_transition(alert.status, AlertStatus.RESOLVED)
    return replace(
        alert,
        status=AlertStatus.RESOLVED,
        resolved_at=now or datetime.now(timezone.utc),
    )


def dismiss(alert: RiskAlert) -> RiskAlert:
    """Close the alert without resolving it."""
    check_transition(alert.status, AlertStatus.DISMISSED)
    return replace(alert, status=AlertStatus.DISMISSED)


def active_alerts(alerts: Iterable[RiskAlert]) -> list[RiskAlert]:
    """Alerts that are neither resolved nor dismissed."""
    return [alert for alert in alerts if alert.is_active]


def partition_alerts(alerts: Iterable[RiskAlert]) -> tuple[list[RiskAlert], list[RiskAlert]]:
    """
    Split alerts into (active, closed).

    Closed alerts (resolved or dismissed) are kept for history only and must
    not feed live aggregates.
    """
    active: list[RiskAlert] = []
    closed: list[RiskAlert] = []
    for alert in alerts:
        (active if alert.is_active else closed).append(alert)
    return active, closed


def summarize_alerts(alerts: Iterable[RiskAlert]) -> AlertSummary:
    """Count alerts by status and severity."""
    summary = AlertSummary()
    for alert in alerts:
        summary.total += 1
        status, severity = alert.status, alert.severity
        if status is AlertStatus.NEW:
            summary.new += 1
            if severity is AlertSeverity.CRITICAL:
                summary.new_critical += 1
            elif severity is AlertSeverity.HIGH:
                summary.new_high += 1
        elif status in (AlertStatus.ACKNOWLEDGED, AlertStatus.IN_PROGRESS):
            summary.in_flight += 1
        elif status is AlertStatus.RESOLVED:
            summary.resolved += 1
        else:
            summary.dismissed += 1

        if alert.is_active:
            summary.active += 1
            if severity is AlertSeverity.CRITICAL:
                summary.active_critical += 1
            elif severity is AlertSeverity.HIGH:
                summary.active_high += 1
    return summary
