# adoption_risk/scoring/industry.py
"""
Industry inference from an organization's goals and pain points.

Rules are checked in order and the first match wins, so a text that
mentions both patients and payments is classified as healthcare. Add an
industry by appending a rule and a profile.
"""

import re
from collections.abc import Iterable
from dataclasses import dataclass, field

GENERAL = "general"


@dataclass(frozen=True)
class IndustryRule:
    """Keyword pattern that selects an industry."""

    industry: str
    pattern: re.Pattern

    def matches(self, text: str) -> bool:
        return self.pattern.search(text) is not None


@dataclass(frozen=True)
class IndustryProfile:
    """Static risk profile for an industry."""

    industry: str
    critical_areas: list[str] = field(default_factory=list)
    high_risk_factors: list[str] = field(default_factory=list)
    compliance_standards: list[str] = field(default_factory=list)


def _rule(industry: str, *keywords: str) -> IndustryRule:
    return IndustryRule(industry, re.compile("|".join(keywords), re.IGNORECASE))


# Priority order
INDUSTRY_RULES: tuple[IndustryRule, ...] = (
    _rule("healthcare", "patient", "healthcare", "medical", "clinical", "hospital", "hipaa"),
    _rule("finance", "financial", "banking", "trading", "payment", "transaction", "fintech"),
    _rule("retail", "retail", "ecommerce", "customer", "shopping", "inventory"),
    _rule("manufacturing", "manufacturing", "production", "supply chain", "iot", "factory"),
    _rule("education", "education", "student", "academic", "learning", "research"),
)

INDUSTRY_PROFILES: dict[str, IndustryProfile] = {
    "healthcare": IndustryProfile(
        industry="healthcare",
        critical_areas=["data_privacy", "regulatory_compliance", "patient_safety", "clinical_integration"],
        high_risk_factors=["HIPAA violations", "medical device integration", "clinical decision support"],
        compliance_standards=["HIPAA", "HITECH", "FDA", "HL7"],
    ),
    "finance": IndustryProfile(
        industry="finance",
        critical_areas=["data_security", "regulatory_compliance", "fraud_prevention", "audit_trails"],
        high_risk_factors=["PCI-DSS compliance", "financial reporting accuracy", "transaction integrity"],
        compliance_standards=["PCI-DSS", "SOX", "GDPR", "SOC2"],
    ),
    "retail": IndustryProfile(
        industry="retail",
        critical_areas=["customer_data", "payment_security", "inventory_systems", "customer_experience"],
        high_risk_factors=["PCI compliance", "supply chain integration", "customer PII protection"],
        compliance_standards=["PCI-DSS", "GDPR", "CCPA"],
    ),
    "manufacturing": IndustryProfile(
        industry="manufacturing",
        critical_areas=["operational_technology", "supply_chain", "iot_security", "production_continuity"],
        high_risk_factors=["production downtime", "OT/IT convergence", "supplier dependencies"],
        compliance_standards=["ISO27001", "ISO9001", "NIST"],
    ),
    "education": IndustryProfile(
        industry="education",
        critical_areas=["student_privacy", "accessibility", "research_data", "academic_integrity"],
        high_risk_factors=["FERPA compliance", "research data protection", "accessibility standards"],
        compliance_standards=["FERPA", "COPPA", "WCAG"],
    ),
}

# Unmatched organizations get the retail profile
FALLBACK_PROFILE = "retail"


def classify_industry(text: str, rules: Iterable[IndustryRule] = INDUSTRY_RULES) -> str:
    """
    Classify free text into an industry tag.

    Args:
        text: Organization signals (any case)
        rules: Ordered rules to evaluate

    Returns:
        First matching industry, or "general"
    """
    lowered = (text or "").lower()
    for rule in rules:
        if rule.matches(lowered):
            return rule.industry
    return GENERAL


def infer_industry(
    business_goals: Iterable[str] | None = None,
    pain_points: Iterable[str] | None = None,
) -> str:
    """Classify an organization from its stated goals and pain points."""
    goals = " ".join(business_goals or []).lower()
    pains = " ".join(pain_points or []).lower()
    return classify_industry(f"{goals} {pains}")


def get_industry_profile(industry: str) -> IndustryProfile:
    """Return the profile for an industry, falling back for general/unknown tags."""
    return INDUSTRY_PROFILES.get(industry, INDUSTRY_PROFILES[FALLBACK_PROFILE])
