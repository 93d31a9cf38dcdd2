# adoption_risk/tools/analyze.py
"""
analyze_risks tool implementation.

Scores a generation-service response and ranks its risks. The service call
itself happens before this runs; a failed or unusable response surfaces
as AnalysisUnavailable.
"""

import logging
from collections.abc import Iterable
from dataclasses import asdict

from adoption_risk.models.responses import AnalysisResponse, IndustryProfileView
from adoption_risk.scoring.aggregate import build_heat_map, category_levels, summarize_analysis
from adoption_risk.scoring.analysis import parse_risk_analysis
from adoption_risk.scoring.industry import (
    INDUSTRY_PROFILES,
    classify_industry,
    get_industry_profile,
    infer_industry,
)
from adoption_risk.scoring.schemas import RiskAnalysis

logger = logging.getLogger(__name__)


def _context_industry(context: str | None) -> str | None:
    """Map the service's free-text industry context onto a known tag."""
    if not context or not context.strip():
        return None
    tag = context.strip().lower()
    if tag in INDUSTRY_PROFILES:
        return tag
    return classify_industry(tag)


def analyze_risks(
    payload: RiskAnalysis | str | bytes | dict,
    business_goals: Iterable[str] | None = None,
    pain_points: Iterable[str] | None = None,
    top: int | None = None,
) -> dict:
    """
    Score a risk analysis and build its heat map and summary.

    Args:
        payload: Parsed analysis, raw response text, or decoded dict
        business_goals: Organization goals for industry inference
        pain_points: Organization pain points for industry inference
        top: Limit the heat map to N rows (None for all)

    Returns:
        AnalysisResponse as dict

    Raises:
        AnalysisUnavailable: If the payload cannot be parsed
    """
    analysis = payload if isinstance(payload, RiskAnalysis) else parse_risk_analysis(payload)

    if business_goals or pain_points:
        industry = infer_industry(business_goals, pain_points)
    else:
        industry = _context_industry(analysis.industry_context)

    profile = None
    if industry:
        profile = IndustryProfileView(**{**asdict(get_industry_profile(industry)), "industry": industry})

    summary = summarize_analysis(analysis)
    response = AnalysisResponse(
        summary=summary,
        heat_map=build_heat_map(analysis, top=top),
        categories={
            name: level.value for name, level in category_levels(analysis).items()
        },
        industry=profile,
        key_concerns=analysis.executive_summary.key_concerns,
        recommendation=analysis.executive_summary.recommendation,
    )

    logger.info(
        f"Analyzed {summary.total_risks} risks: overall score {summary.overall_score}"
    )
    return response.model_dump(mode="json")
