# adoption_risk/errors.py
"""
Exceptions raised by the risk core.

Empty inputs and missing scores are never errors; these cover the
conditions a caller has to handle explicitly.
"""


class RiskCoreError(Exception):
    """Base class for all adoption-risk errors."""


class AnalysisUnavailable(RiskCoreError):
    """The upstream risk analysis could not be obtained or parsed."""


class InvalidTransition(RiskCoreError):
    """A status change not allowed by the alert or step state machine."""

    def __init__(self, current: str, target: str, subject: str = "alert") -> None:
        self.current = current
        self.target = target
        self.subject = subject
        super().__init__(f"Cannot move {subject} from '{current}' to '{target}'")


class AlertNotFound(RiskCoreError, LookupError):
    """No alert with the given id exists in the store."""

    def __init__(self, alert_id: str) -> None:
        self.alert_id = alert_id
        super().__init__(f"Alert {alert_id} not found")


class ConfigError(RiskCoreError):
    """The config file exists but cannot be read as settings."""
