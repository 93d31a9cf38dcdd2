# adoption_risk/tools/alerts.py
"""
Alert tool implementations.

Each mutation reads the alert, applies the lifecycle rules, and writes the
changed fields back as a whole-field update.
"""

import logging
from collections.abc import Iterable
from datetime import datetime, timezone
from typing import Any

from adoption_risk.errors import AlertNotFound
from adoption_risk.models.responses import AlertView, ListAlertsResponse
from adoption_risk.models.store import AlertStore
from adoption_risk.monitoring.alerts import (
    AlertSeverity,
    AlertStatus,
    RiskAlert,
    acknowledge,
    default_risk_score,
    dismiss,
    generate_alert_id,
    resolve,
    start,
)
from adoption_risk.monitoring.mitigation import (
    MitigationStep,
    StepStatus,
    update_step_status,
)

logger = logging.getLogger(__name__)


async def _load(alert_id: str, store: AlertStore) -> RiskAlert:
    alert = await store.get(alert_id)
    if alert is None:
        raise AlertNotFound(alert_id)
    return alert


def _new_steps(steps: Iterable[MitigationStep | dict[str, Any]] | None) -> list[MitigationStep]:
    """Normalize incoming steps; every step of a new alert starts pending."""
    result = []
    for step in steps or []:
        if isinstance(step, dict):
            step = MitigationStep.from_dict({**step, "status": StepStatus.PENDING.value})
        else:
            step = MitigationStep(
                step=step.step,
                owner=step.owner,
                timeline=step.timeline,
                priority=step.priority,
            )
        result.append(step)
    return result


async def create_alert(
    risk_category: str,
    risk_description: str,
    severity: str | AlertSeverity,
    store: AlertStore,
    risk_score: int | None = None,
    trigger_reason: str = "",
    potential_impact: str = "",
    mitigation_steps: Iterable[MitigationStep | dict[str, Any]] | None = None,
    source_type: str | None = None,
    source_id: str | None = None,
    source_name: str | None = None,
) -> dict:
    """
    Record a new alert raised by monitoring.

    Args:
        risk_category: Category the trigger belongs to (e.g. compliance)
        risk_description: What was detected
        severity: low, medium, high or critical
        store: Alert storage instance
        risk_score: 0-100; derived from severity when omitted

    Returns:
        AlertView as dict

    Raises:
        ValueError: If severity is unknown or risk_score is outside 0-100
    """
    severity = AlertSeverity(severity.value if isinstance(severity, AlertSeverity) else severity)
    if risk_score is None:
        risk_score = default_risk_score(severity)
    if not 0 <= risk_score <= 100:
        raise ValueError(f"risk_score must be between 0 and 100, got {risk_score}")

    alert = RiskAlert(
        id=generate_alert_id(),
        risk_category=risk_category,
        risk_description=risk_description,
        severity=severity,
        risk_score=risk_score,
        created_at=datetime.now(timezone.utc),
        trigger_reason=trigger_reason,
        potential_impact=potential_impact,
        status=AlertStatus.NEW,
        mitigation_steps=_new_steps(mitigation_steps),
        source_type=source_type,
        source_id=source_id,
        source_name=source_name,
    )
    await store.add(alert)

    logger.info(
        f"Created {severity.value} alert {alert.id} ({risk_category})",
        extra={"alert_id": alert.id, "source_id": source_id},
    )
    return AlertView.from_alert(alert).model_dump()


async def acknowledge_alert(alert_id: str, acknowledged_by: str, store: AlertStore) -> dict:
    """
    Acknowledge a new alert.

    Raises:
        AlertNotFound: If the alert doesn't exist
        InvalidTransition: If the alert is not new
    """
    updated = acknowledge(await _load(alert_id, store), acknowledged_by)
    await store.update(
        alert_id, status=updated.status, acknowledged_by=updated.acknowledged_by
    )
    logger.info(f"Alert {alert_id} acknowledged by {acknowledged_by}", extra={"alert_id": alert_id})
    return AlertView.from_alert(updated).model_dump()


async def start_alert(alert_id: str, store: AlertStore) -> dict:
    """Move an open alert to in_progress."""
    updated = start(await _load(alert_id, store))
    await store.update(alert_id, status=updated.status)
    logger.info(f"Alert {alert_id} in progress", extra={"alert_id": alert_id})
    return AlertView.from_alert(updated).model_dump()


async def resolve_alert(alert_id: str, store: AlertStore) -> dict:
    """
    Resolve an alert, stamping resolved_at.

    Raises:
        AlertNotFound: If the alert doesn't exist
        InvalidTransition: If the alert is already resolved or dismissed
    """
    updated = resolve(await _load(alert_id, store))
    await store.update(alert_id, status=updated.status, resolved_at=updated.resolved_at)
    logger.info(f"Alert {alert_id} resolved", extra={"alert_id": alert_id})
    return AlertView.from_alert(updated).model_dump()


async def dismiss_alert(alert_id: str, store: AlertStore) -> dict:
    """Dismiss an open alert without resolving it."""
    updated = dismiss(await _load(alert_id, store))
    await store.update(alert_id, status=updated.status)
    logger.info(f"Alert {alert_id} dismissed", extra={"alert_id": alert_id})
    return AlertView.from_alert(updated).model_dump()


async def update_mitigation_step(
    alert_id: str,
    step_index: int,
    status: str | StepStatus,
    store: AlertStore,
    allow_reset: bool = False,
) -> dict:
    """
    Change one mitigation step's status.

    The whole step list is written back, so a concurrent update to another
    step of the same alert can be overwritten.

    Raises:
        AlertNotFound: If the alert doesn't exist
        IndexError: If step_index is out of range
        InvalidTransition: If the move goes backward and resets are not allowed
        ValueError: If status is unknown
    """
    status = StepStatus(status.value if isinstance(status, StepStatus) else status)
    alert = await _load(alert_id, store)

    steps = update_step_status(alert.mitigation_steps, step_index, status, allow_reset=allow_reset)
    await store.update(alert_id, mitigation_steps=steps)

    alert.mitigation_steps = steps
    logger.info(
        f"Alert {alert_id} step {step_index} -> {status.value} ({alert.progress}%)",
        extra={"alert_id": alert_id, "source_id": alert.source_id},
    )
    return AlertView.from_alert(alert).model_dump()


async def get_alert(alert_id: str, store: AlertStore) -> dict:
    """Fetch one alert as an AlertView dict."""
    return AlertView.from_alert(await _load(alert_id, store)).model_dump()


async def list_alerts(
    store: AlertStore,
    source_id: str | None = None,
    active_only: bool = False,
) -> dict:
    """
    List alerts, newest first.

    Args:
        store: Alert storage instance
        source_id: Only alerts raised for this strategy/assessment
        active_only: Exclude resolved and dismissed alerts

    Returns:
        ListAlertsResponse as dict
    """
    if source_id is not None:
        alerts = await store.filter(source_id=source_id)
    else:
        alerts = await store.list_all()

    if active_only:
        alerts = [alert for alert in alerts if alert.is_active]

    views = [AlertView.from_alert(alert) for alert in alerts]
    response = ListAlertsResponse(alerts=views, total=len(views))

    logger.info(f"Listed {len(views)} alerts")
    return response.model_dump()
