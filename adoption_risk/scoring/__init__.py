# adoption_risk/scoring/__init__.py
"""
Risk scoring: RPN, severity tiers, heat maps and industry profiles.

Pure functions over risk analyses that have already been fetched.
"""

from adoption_risk.scoring.aggregate import (
    build_heat_map,
    overall_risk_score,
    risk_level_distribution,
    summarize_analysis,
)
from adoption_risk.scoring.analysis import (
    load_risk_analysis,
    parse_risk_analysis,
    score_risk_record,
)
from adoption_risk.scoring.industry import (
    IndustryProfile,
    classify_industry,
    get_industry_profile,
    infer_industry,
)
from adoption_risk.scoring.priority import RiskLevel, classify_rpn, compute_rpn
from adoption_risk.scoring.schemas import (
    HeatMapEntry,
    RiskAnalysis,
    RiskCategory,
    RiskRecord,
    RiskSummary,
)

__all__ = [
    "RiskLevel",
    "compute_rpn",
    "classify_rpn",
    "RiskRecord",
    "RiskCategory",
    "RiskAnalysis",
    "HeatMapEntry",
    "RiskSummary",
    "build_heat_map",
    "overall_risk_score",
    "risk_level_distribution",
    "summarize_analysis",
    "parse_risk_analysis",
    "load_risk_analysis",
    "score_risk_record",
    "IndustryProfile",
    "classify_industry",
    "infer_industry",
    "get_industry_profile",
]
