# adoption_risk/models/store.py
"""
Alert store protocol definition.

Defines the abstract interface that both InMemoryAlertStore and SQLiteAlertStore implement.
Updates overwrite whole fields: when two callers update the same alert the
last write wins.
"""

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from adoption_risk.monitoring.alerts import RiskAlert

# Fields callers may change after creation
UPDATABLE_FIELDS = frozenset(
    {
        "risk_category",
        "risk_description",
        "trigger_reason",
        "potential_impact",
        "risk_score",
        "severity",
        "status",
        "mitigation_steps",
        "source_type",
        "source_id",
        "source_name",
        "acknowledged_by",
        "resolved_at",
        "updated_at",
    }
)

# Fields usable as equality predicates in filter()
FILTERABLE_FIELDS = frozenset(
    {
        "id",
        "risk_category",
        "severity",
        "status",
        "source_type",
        "source_id",
        "acknowledged_by",
    }
)


class AlertStore(ABC):
    """
    Abstract base class for alert storage implementations.

    Both in-memory and persistent (SQLite) stores implement this protocol.
    """

    @abstractmethod
    async def add(self, alert: "RiskAlert") -> None:
        """
        Add an alert to the store.

        Raises:
            ValueError: If the alert id already exists
        """

    @abstractmethod
    async def get(self, alert_id: str) -> "RiskAlert | None":
        """
        Get an alert by ID.

        Returns:
            RiskAlert if found, None otherwise
        """

    @abstractmethod
    async def list_all(self) -> "list[RiskAlert]":
        """
        List all alerts.

        Returns:
            All alerts, newest first
        """

    @abstractmethod
    async def update(self, alert_id: str, **fields: Any) -> None:
        """
        Overwrite fields on an existing alert.

        Raises:
            AlertNotFound: If alert_id doesn't exist
            ValueError: If a field name is not updatable
        """

    @abstractmethod
    async def filter(self, **predicates: Any) -> "list[RiskAlert]":
        """
        List alerts whose fields equal all given values, newest first.

        Enum predicates may be given as members or their string values.

        Raises:
            ValueError: If a field is not filterable
        """

    async def close(self) -> None:
        """Release resources (no-op by default)."""


def check_fields(fields: dict[str, Any], allowed: frozenset[str], action: str) -> None:
    """Raise ValueError for field names outside `allowed`."""
    invalid = set(fields) - allowed
    if invalid:
        raise ValueError(f"Invalid field names for {action}: {sorted(invalid)}")
