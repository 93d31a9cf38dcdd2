# tests/unit/test_alerts.py
"""Tests for the alert lifecycle state machine."""

from datetime import datetime, timezone

import pytest

from adoption_risk.errors import InvalidTransition
from adoption_risk.monitoring.alerts import (
    AlertSeverity,
    AlertStatus,
    RiskAlert,
    acknowledge,
    can_transition,
    default_risk_score,
    dismiss,
    generate_alert_id,
    partition_alerts,
    resolve,
    start,
    summarize_alerts,
)
from adoption_risk.monitoring.mitigation import MitigationStep, StepStatus


def _alert(alert_id="abc123def456", severity="high", status="new"):
    return RiskAlert(
        id=alert_id,
        risk_category="compliance",
        risk_description="Consent records incomplete",
        severity=AlertSeverity(severity),
        risk_score=70,
        created_at=datetime(2026, 1, 1, tzinfo=timezone.utc),
        status=AlertStatus(status),
    )


class TestLifecycle:
    """Tests for transition functions."""

    def test_full_lifecycle(self):
        alert = acknowledge(_alert(), "dana")
        assert alert.status is AlertStatus.ACKNOWLEDGED
        assert alert.acknowledged_by == "dana"

        alert = start(alert)
        assert alert.status is AlertStatus.IN_PROGRESS

        now = datetime(2026, 2, 1, tzinfo=timezone.utc)
        alert = resolve(alert, now=now)
        assert alert.status is AlertStatus.RESOLVED
        assert alert.resolved_at == now
        assert not alert.is_active

    def test_does_not_mutate_input(self):
        alert = _alert()
        acknowledge(alert, "dana")
        assert alert.status is AlertStatus.NEW
        assert alert.acknowledged_by is None

    def test_resolve_directly_from_new(self):
        assert resolve(_alert()).resolved_at is not None

    def test_start_from_new(self):
        assert start(_alert()).status is AlertStatus.IN_PROGRESS

    def test_dismiss(self):
        alert = dismiss(_alert())
        assert alert.status is AlertStatus.DISMISSED
        assert alert.resolved_at is None

    @pytest.mark.parametrize("status", ["resolved", "dismissed"])
    def test_terminal_states_reject_everything(self, status):
        alert = _alert(status=status)
        for transition in (start, resolve, dismiss):
            with pytest.raises(InvalidTransition):
                transition(alert)
        with pytest.raises(InvalidTransition):
            acknowledge(alert, "dana")

    def test_acknowledge_twice_rejected(self):
        with pytest.raises(InvalidTransition, match="acknowledged"):
            acknowledge(_alert(status="acknowledged"), "sam")

    def test_no_backward_moves(self):
        assert not can_transition(AlertStatus.IN_PROGRESS, AlertStatus.ACKNOWLEDGED)
        assert not can_transition(AlertStatus.IN_PROGRESS, AlertStatus.NEW)

    def test_error_carries_states(self):
        with pytest.raises(InvalidTransition) as exc_info:
            resolve(_alert(status="resolved"))
        assert exc_info.value.current == "resolved"
        assert exc_info.value.target == "resolved"


class TestAlertHelpers:
    @pytest.mark.parametrize("severity,score", [("critical", 90), ("high", 70), ("medium", 50), ("low", 50)])
    def test_default_risk_score(self, severity, score):
        assert default_risk_score(AlertSeverity(severity)) == score

    def test_generate_alert_id(self):
        alert_id = generate_alert_id()
        assert len(alert_id) == 12
        int(alert_id, 16)
        assert generate_alert_id() != alert_id

    def test_progress(self):
        alert = _alert()
        alert.mitigation_steps = [
            MitigationStep(step="a", status=StepStatus.COMPLETED),
            MitigationStep(step="b"),
        ]
        assert alert.progress == 50

    def test_partition(self):
        alerts = [_alert("a"), _alert("b", status="resolved"), _alert("c", status="dismissed"), _alert("d", status="in_progress")]
        active, closed = partition_alerts(alerts)
        assert [a.id for a in active] == ["a", "d"]
        assert [a.id for a in closed] == ["b", "c"]


class TestSummarizeAlerts:
    def test_counts(self):
        alerts = [
            _alert("a", "critical"),
            _alert("b", "high"),
            _alert("c", "low"),
            _alert("d", "critical", status="acknowledged"),
            _alert("e", "high", status="in_progress"),
            _alert("f", "critical", status="resolved"),
            _alert("g", "high", status="dismissed"),
        ]
        summary = summarize_alerts(alerts)
        assert summary.total == 7
        assert summary.new == 3
        assert summary.new_critical == 1
        assert summary.new_high == 1
        assert summary.in_flight == 2
        assert summary.resolved == 1
        assert summary.dismissed == 1
        assert summary.active == 5
        assert summary.active_critical == 2
        assert summary.active_high == 2

    def test_empty(self):
        assert summarize_alerts([]).total == 0
