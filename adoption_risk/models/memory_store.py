# adoption_risk/models/memory_store.py
"""In-memory alert storage for tests and one-off CLI runs."""

import logging
from dataclasses import replace
from datetime import datetime, timezone
from enum import Enum
from typing import Any

from adoption_risk.errors import AlertNotFound
from adoption_risk.models.store import (
    FILTERABLE_FIELDS,
    UPDATABLE_FIELDS,
    AlertStore,
    check_fields,
)
from adoption_risk.monitoring.alerts import AlertSeverity, AlertStatus, RiskAlert

logger = logging.getLogger(__name__)


def _plain(value: Any) -> Any:
    return value.value if isinstance(value, Enum) else value


class InMemoryAlertStore(AlertStore):
    """
    Simple in-memory alert storage.

    Single-process only. Records are copied in and out so callers cannot
    mutate stored state without going through update().
    """

    def __init__(self) -> None:
        """Initialize empty alert store."""
        self._alerts: dict[str, RiskAlert] = {}
        logger.info("Initialized InMemoryAlertStore")

    async def add(self, alert: RiskAlert) -> None:
        if alert.id in self._alerts:
            raise ValueError(f"Alert {alert.id} already exists")

        stored = replace(
            alert,
            mitigation_steps=list(alert.mitigation_steps),
            updated_at=alert.updated_at or datetime.now(timezone.utc),
        )
        self._alerts[alert.id] = stored
        logger.info(f"Added alert {alert.id} to store")

    async def get(self, alert_id: str) -> RiskAlert | None:
        alert = self._alerts.get(alert_id)
        return replace(alert, mitigation_steps=list(alert.mitigation_steps)) if alert else None

    async def list_all(self) -> list[RiskAlert]:
        return sorted(
            (replace(a, mitigation_steps=list(a.mitigation_steps)) for a in self._alerts.values()),
            key=lambda a: a.created_at,
            reverse=True,
        )

    async def update(self, alert_id: str, **fields: Any) -> None:
        check_fields(fields, UPDATABLE_FIELDS, "update")

        alert = self._alerts.get(alert_id)
        if alert is None:
            raise AlertNotFound(alert_id)

        if not fields:
            return

        if "status" in fields:
            fields["status"] = AlertStatus(_plain(fields["status"]))
        if "severity" in fields:
            fields["severity"] = AlertSeverity(_plain(fields["severity"]))
        if "mitigation_steps" in fields:
            fields["mitigation_steps"] = list(fields["mitigation_steps"])
        fields.setdefault("updated_at", datetime.now(timezone.utc))

        self._alerts[alert_id] = replace(alert, **fields)
        logger.info(f"Updated alert {alert_id}: {sorted(fields)}")

    async def filter(self, **predicates: Any) -> list[RiskAlert]:
        check_fields(predicates, FILTERABLE_FIELDS, "filter")
        wanted = {key: _plain(value) for key, value in predicates.items()}
        return [
            alert
            for alert in await self.list_all()
            if all(_plain(getattr(alert, key)) == value for key, value in wanted.items())
        ]
