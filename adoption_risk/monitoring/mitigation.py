# adoption_risk/monitoring/mitigation.py
"""
Mitigation step progress and step status transitions.

Steps move forward only: pending -> in_progress -> completed, with
pending -> completed allowed for steps finished without being started.
Updates replace the whole step list, keyed by alert id and step index.
"""

import logging
from collections.abc import Sequence
from dataclasses import dataclass, replace
from enum import Enum
from typing import Any

from adoption_risk.errors import InvalidTransition
from adoption_risk.scoring.priority import round_half_up

logger = logging.getLogger(__name__)


class StepStatus(Enum):
    """Mitigation step states."""

    PENDING = "pending"
    IN_PROGRESS = "in_progress"
    COMPLETED = "completed"


_STEP_ORDER = {
    StepStatus.PENDING: 0,
    StepStatus.IN_PROGRESS: 1,
    StepStatus.COMPLETED: 2,
}


@dataclass
class MitigationStep:
    """One actionable item in an alert's remediation plan."""

    step: str
    owner: str = ""
    timeline: str = ""
    priority: str = "medium"
    status: StepStatus = StepStatus.PENDING

    def to_dict(self) -> dict[str, Any]:
        return {
            "step": self.step,
            "owner": self.owner,
            "timeline": self.timeline,
            "priority": self.priority,
            "status": self.status.value,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "MitigationStep":
        """Build a step from stored or service-supplied data (status defaults to pending)."""
        return cls(
            step=data.get("step") or data.get("action") or "",
            owner=data.get("owner") or "",
            timeline=data.get("timeline") or "",
            priority=data.get("priority") or "medium",
            status=StepStatus(data.get("status") or StepStatus.PENDING.value),
        )


def completed_count(steps: Sequence[MitigationStep]) -> int:
    return sum(1 for step in steps if step.status is StepStatus.COMPLETED)


def mitigation_progress(steps: Sequence[MitigationStep]) -> int:
    """
    Percent of steps completed, rounded half-up.

    Returns:
        0-100; 0 for an empty plan
    """
    if not steps:
        return 0
    return round_half_up(completed_count(steps) / len(steps) * 100)


def check_step_transition(
    current: StepStatus, target: StepStatus, allow_reset: bool = False
) -> None:
    """
    Validate a step status change.

    Raises:
        InvalidTransition: If the move goes backward and resets are not allowed
    """
    if allow_reset or _STEP_ORDER[target] >= _STEP_ORDER[current]:
        return
    raise InvalidTransition(current.value, target.value, subject="mitigation step")


def update_step_status(
    steps: Sequence[MitigationStep],
    index: int,
    status: StepStatus,
    allow_reset: bool = False,
) -> list[MitigationStep]:
    """
    Return a new step list with one step's status changed.

    Args:
        steps: Current steps (not modified)
        index: Zero-based step position
        status: Target status
        allow_reset: Permit backward moves

    Returns:
        Replacement step list for the whole-array update

    Raises:
        IndexError: If index is outside the list
        InvalidTransition: If the move is not allowed
    """
    if not 0 <= index < len(steps):
        raise IndexError(f"Step index {index} out of range (0-{len(steps) - 1})")

    current = steps[index].status
    check_step_transition(current, status, allow_reset=allow_reset)

    updated = list(steps)
    updated[index] = replace(steps[index], status=status)
    logger.debug(f"Step {index}: {current.value} -> {status.value}")
    return updated
