# adoption_risk/models/__init__.py
"""
Persistence and response models for adoption-risk.

Provides the alert store protocol, its in-memory and SQLite implementations,
and Pydantic response models.
"""

from adoption_risk.models.memory_store import InMemoryAlertStore
from adoption_risk.models.responses import (
    AlertCounts,
    AlertView,
    AnalysisResponse,
    DashboardResponse,
    ListAlertsResponse,
)
from adoption_risk.models.sqlite_store import SQLiteAlertStore
from adoption_risk.models.store import AlertStore

__all__ = [
    "AlertStore",
    "InMemoryAlertStore",
    "SQLiteAlertStore",
    "AlertView",
    "AlertCounts",
    "ListAlertsResponse",
    "AnalysisResponse",
    "DashboardResponse",
]
