# adoption_risk/tools/dashboard.py
"""
Monitoring dashboard tool implementation.

Every call re-reads the store and recomputes every panel from scratch, so
the result is never staler than the last read.
"""

import logging
from dataclasses import asdict
from datetime import datetime, timezone

from adoption_risk.config.schema import KRIConfig
from adoption_risk.models.responses import AlertCounts, AlertView, DashboardResponse
from adoption_risk.models.store import AlertStore
from adoption_risk.monitoring.alerts import AlertStatus, partition_alerts, summarize_alerts
from adoption_risk.monitoring.health import health_label, project_health_score
from adoption_risk.monitoring.kri import build_kri_panel
from adoption_risk.monitoring.snapshot import StrategySnapshot

logger = logging.getLogger(__name__)

_EPOCH = datetime.min.replace(tzinfo=timezone.utc)


async def get_monitoring_dashboard(
    snapshot: StrategySnapshot,
    store: AlertStore,
    config: KRIConfig | None = None,
    resolved_limit: int = 5,
) -> dict:
    """
    Build the monitoring view for one strategy.

    Args:
        snapshot: Strategy/assessment context fetched by the caller
        store: Alert storage instance
        config: KRI thresholds and policy values
        resolved_limit: How many recently resolved alerts to include

    Returns:
        DashboardResponse as dict
    """
    if snapshot.id:
        alerts = await store.filter(source_id=snapshot.id)
    else:
        alerts = await store.list_all()

    active, closed = partition_alerts(alerts)
    resolved = sorted(
        (alert for alert in closed if alert.status is AlertStatus.RESOLVED),
        key=lambda alert: alert.resolved_at or _EPOCH,
        reverse=True,
    )

    health = project_health_score(snapshot, active)
    response = DashboardResponse(
        source_id=snapshot.id,
        health_score=health,
        health_label=health_label(health),
        indicators=build_kri_panel(snapshot, active, config),
        counts=AlertCounts(**asdict(summarize_alerts(alerts))),
        active_alerts=[AlertView.from_alert(alert) for alert in active],
        recently_resolved=[AlertView.from_alert(alert) for alert in resolved[:resolved_limit]],
        generated_at=datetime.now(timezone.utc).isoformat(),
    )

    logger.info(
        f"Dashboard for '{snapshot.id}': {len(active)} active alerts, health {health}"
    )
    return response.model_dump(mode="json")
