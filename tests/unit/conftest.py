# tests/unit/conftest.py
"""Shared fixtures for unit tests."""

import logging
from datetime import datetime, timedelta, timezone

import pytest

from adoption_risk.monitoring.alerts import AlertSeverity, AlertStatus, RiskAlert
from adoption_risk.monitoring.mitigation import MitigationStep, StepStatus

BASE_TIME = datetime(2026, 3, 1, 9, 0, tzinfo=timezone.utc)


def make_alert(
    alert_id="abc123def456",
    severity=AlertSeverity.HIGH,
    status=AlertStatus.NEW,
    source_id="strat-1",
    minutes=0,
    category="compliance",
):
    return RiskAlert(
        id=alert_id,
        risk_category=category,
        risk_description="Consent records incomplete",
        severity=severity,
        risk_score=70,
        created_at=BASE_TIME + timedelta(minutes=minutes),
        trigger_reason="Audit sample failed",
        potential_impact="Regulatory fine",
        status=status,
        mitigation_steps=[
            MitigationStep(step="Backfill consent", owner="legal", timeline="2 weeks"),
            MitigationStep(step="Add consent check", owner="eng", status=StepStatus.IN_PROGRESS),
        ],
        source_type="strategy",
        source_id=source_id,
        source_name="Claims automation",
    )


@pytest.fixture
def sample_alert() -> RiskAlert:
    return make_alert()


@pytest.fixture
def alert_factory():
    """Build alerts with overridable id, severity, status, source and age."""
    return make_alert


@pytest.fixture(autouse=True)
def restore_root_logging():
    """CLI commands reconfigure the root logger; put it back after each test."""
    root = logging.getLogger()
    handlers, level = list(root.handlers), root.level
    yield
    root.handlers[:] = handlers
    root.setLevel(level)
