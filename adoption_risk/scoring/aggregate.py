# adoption_risk/scoring/aggregate.py
"""
Heat map ranking and organization-wide risk aggregation.

Everything here is a pure function of an already-scored RiskAnalysis.
"""

import logging
from collections.abc import Iterable

from adoption_risk.scoring.priority import (
    MAX_RPN,
    RiskLevel,
    classify_rpn,
    highest_level,
    round_half_up,
)
from adoption_risk.scoring.schemas import (
    HeatMapEntry,
    RiskAnalysis,
    RiskRecord,
    RiskSummary,
)

logger = logging.getLogger(__name__)


def build_heat_map(analysis: RiskAnalysis, top: int | None = None) -> list[HeatMapEntry]:
    """
    Flatten all risks and rank them by RPN, highest first.

    The sort is stable, so risks with equal RPN keep their document order.

    Args:
        analysis: Scored risk analysis
        top: Return only the first N rows (None for the full audit list)

    Returns:
        Ranked heat map rows
    """
    entries = [
        HeatMapEntry(
            risk_id=risk.risk_id,
            name=risk.name,
            category=category,
            likelihood=risk.likelihood.effective,
            impact=risk.impact.effective,
            detectability=risk.detectability.effective,
            rpn=risk.rpn,
            risk_level=risk.risk_level,
        )
        for category, risk in analysis.iter_risks()
    ]
    entries.sort(key=lambda entry: entry.rpn, reverse=True)

    if top is not None:
        return entries[: max(top, 0)]
    return entries


def mean_rpn(records: Iterable[RiskRecord]) -> float:
    """Mean RPN, 0.0 for no records."""
    rpns = [record.rpn for record in records]
    if not rpns:
        return 0.0
    return sum(rpns) / len(rpns)


def normalize_rpn(value: float) -> int:
    """Scale an RPN (or mean RPN) onto 0-100, capped at 100."""
    return min(100, round_half_up(value / MAX_RPN * 100))


def overall_risk_score(records: Iterable[RiskRecord]) -> int:
    """
    Organization-wide risk exposure on a 0-100 scale.

    Mean RPN across every record normalized against the maximum RPN of 125.
    Returns 0 when there are no records.
    """
    records = list(records)
    if not records:
        return 0
    return normalize_rpn(mean_rpn(records))


def risk_level_distribution(records: Iterable[RiskRecord]) -> dict[str, int]:
    """Count records per severity tier (every tier present, zero-filled)."""
    distribution = {level.value: 0 for level in RiskLevel}
    for record in records:
        distribution[record.risk_level.value] += 1
    return distribution


def summarize_analysis(analysis: RiskAnalysis) -> RiskSummary:
    """
    Compute totals for an analysis.

    The overall level is the tier of the mean RPN, so it moves together
    with the overall score.
    """
    records = analysis.all_risks()
    distribution = risk_level_distribution(records)
    summary = RiskSummary(
        total_risks=len(records),
        critical_risk_count=distribution[RiskLevel.CRITICAL.value],
        overall_score=overall_risk_score(records),
        overall_risk_level=classify_rpn(mean_rpn(records)) if records else RiskLevel.LOW,
        level_distribution=distribution,
    )
    logger.debug(
        f"Summarized {summary.total_risks} risks: score={summary.overall_score}, "
        f"level={summary.overall_risk_level.value}"
    )
    return summary


def category_levels(analysis: RiskAnalysis) -> dict[str, RiskLevel]:
    """
    Most severe level per category.

    Categories sharing a name (repeated, or coerced to "technical" from an
    unknown name) are merged, so every risk counts toward its category.
    """
    levels: dict[str, RiskLevel] = {}
    for category in analysis.risk_categories:
        current = levels.get(category.category)
        candidates = [category.category_risk_level]
        if current is not None:
            candidates.append(current)
        levels[category.category] = highest_level(candidates)
    return levels
