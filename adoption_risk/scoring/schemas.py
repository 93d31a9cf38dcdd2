# adoption_risk/scoring/schemas.py
"""
Schemas for the risk analysis returned by the generation service.

The service is an LLM, so inputs arrive with camelCase or snake_case keys,
missing objects and out-of-range scores. Everything here is lenient:
unusable scores become None (scored as the neutral 3), missing arrays
become empty lists, and RPN / risk level are always derived from the raw
scores rather than read from the payload.
"""

import re
from datetime import datetime
from typing import Any, Literal, get_args

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    computed_field,
    field_validator,
    model_validator,
)

from adoption_risk.scoring.priority import (
    RiskLevel,
    classify_rpn,
    compute_rpn,
    effective_score,
    highest_level,
    normalize_score,
)

CategoryName = Literal[
    "technical",
    "compliance",
    "operational",
    "financial",
    "organizational",
    "security",
    "vendor",
]

CATEGORY_NAMES: frozenset[str] = frozenset(get_args(CategoryName))

_CAMEL_BOUNDARY = re.compile(r"(?<!^)(?=[A-Z])")


def to_snake_case(key: str) -> str:
    """riskId -> risk_id, earlyWarningIndicators -> early_warning_indicators."""
    return _CAMEL_BOUNDARY.sub("_", key).lower()


def normalize_keys(data: dict) -> dict:
    """Snake-case string keys and drop null values so field defaults apply."""
    return {
        (to_snake_case(k) if isinstance(k, str) else k): v
        for k, v in data.items()
        if v is not None
    }


def stringify_scalar(value: Any) -> Any:
    """Turn a bare number into text; leave everything else to validation."""
    if isinstance(value, (int, float)):
        return str(value)
    return value


class ContractModel(BaseModel):
    """Base for all generation-service payload models."""

    model_config = ConfigDict(extra="ignore")

    @model_validator(mode="before")
    @classmethod
    def _normalize_keys(cls, data: Any) -> Any:
        if not isinstance(data, dict):
            return data
        return normalize_keys(data)


class ScoreDimension(ContractModel):
    """A 1-5 judgment with its rationale."""

    score: int | None = Field(
        default=None,
        description="Raw 1-5 score (None when missing or invalid)",
    )
    rationale: str = Field(default="", description="Why this score was given")

    @model_validator(mode="before")
    @classmethod
    def _accept_bare_score(cls, data: Any) -> Any:
        """Accept `"likelihood": 4` as shorthand for `{"score": 4}`."""
        if isinstance(data, (int, float, str)) and not isinstance(data, bool):
            return {"score": data}
        return data

    @field_validator("score", mode="before")
    @classmethod
    def _coerce_score(cls, value: Any) -> int | None:
        return normalize_score(value)

    @field_validator("rationale", mode="before")
    @classmethod
    def _stringify_rationale(cls, value: Any) -> Any:
        return stringify_scalar(value)

    @property
    def effective(self) -> int:
        """Score used in arithmetic (neutral 3 when missing)."""
        return effective_score(self.score)


class ImpactDimension(ScoreDimension):
    """Impact judgment, also naming the areas it would hit."""

    affected_areas: list[str] = Field(default_factory=list)


class MitigationStrategy(ContractModel):
    """Advisory mitigation text attached to a risk (not an alert step)."""

    strategy: str = ""
    type: str = Field(default="", description="preventive, detective or corrective")
    effort: str = Field(default="", description="low, medium or high")
    effectiveness: str = Field(default="", description="low, medium or high")
    timeline: str = ""
    owner: str = ""
    implementation_steps: list[str] = Field(default_factory=list)


class RiskRecord(ContractModel):
    """One scored risk inside a category."""

    risk_id: str = ""
    name: str = ""
    description: str = ""
    likelihood: ScoreDimension = Field(default_factory=ScoreDimension)
    impact: ImpactDimension = Field(default_factory=ImpactDimension)
    detectability: ScoreDimension = Field(default_factory=ScoreDimension)
    triggers: list[str] = Field(default_factory=list)
    early_warning_indicators: list[str] = Field(default_factory=list)
    mitigation_strategies: list[MitigationStrategy] = Field(default_factory=list)
    contingency_plans: list[str] = Field(default_factory=list)
    related_risks: list[str] = Field(default_factory=list)
    industry_specific: bool = False

    @model_validator(mode="before")
    @classmethod
    def _normalize_field_names(cls, data: Any) -> Any:
        """Handle LLM field name variations."""
        if not isinstance(data, dict):
            return data
        data = normalize_keys(data)
        if "risk_name" in data and "name" not in data:
            data["name"] = data.pop("risk_name")
        if "id" in data and "risk_id" not in data:
            data["risk_id"] = data.pop("id")
        return data

    @field_validator("risk_id", "name", "description", mode="before")
    @classmethod
    def _stringify_text(cls, value: Any) -> Any:
        return stringify_scalar(value)

    @field_validator("related_risks", mode="before")
    @classmethod
    def _stringify_related(cls, value: Any) -> Any:
        if isinstance(value, list):
            return [stringify_scalar(item) for item in value]
        return value

    @computed_field
    @property
    def rpn(self) -> int:
        """likelihood * impact * detectability (1-125)."""
        return compute_rpn(
            self.likelihood.score, self.impact.score, self.detectability.score
        )

    @computed_field
    @property
    def risk_level(self) -> RiskLevel:
        return classify_rpn(self.rpn)


class RiskCategory(ContractModel):
    """A group of risks sharing a category."""

    category: CategoryName = "technical"
    risks: list[RiskRecord] = Field(default_factory=list)

    @field_validator("category", mode="before")
    @classmethod
    def _coerce_category(cls, value: Any) -> str:
        if isinstance(value, str) and value.strip().lower() in CATEGORY_NAMES:
            return value.strip().lower()
        return "technical"

    @computed_field
    @property
    def category_risk_level(self) -> RiskLevel:
        """Most severe level among the category's risks."""
        return highest_level(risk.risk_level for risk in self.risks)


class ExecutiveSummary(ContractModel):
    """Narrative summary supplied by the generation service."""

    key_concerns: list[str] = Field(default_factory=list)
    recommendation: str = ""


class RiskInterdependency(ContractModel):
    """How two or more risks compound each other."""

    risk_ids: list[str] = Field(default_factory=list)
    relationship: str = ""
    cascading_effect: str = ""
    combined_impact: str = ""


class KRIDefinition(ContractModel):
    """A suggested indicator; thresholds are free text from the service."""

    indicator: str = ""
    measurement: str = ""
    threshold: str = ""
    monitoring_frequency: str = ""

    @field_validator("threshold", mode="before")
    @classmethod
    def _stringify_threshold(cls, value: Any) -> str:
        return str(value)


class MonitoringFramework(ContractModel):
    """Suggested monitoring cadence and indicators."""

    key_risk_indicators: list[KRIDefinition] = Field(default_factory=list)
    reporting_cadence: str = ""
    escalation_criteria: list[str] = Field(default_factory=list)


class RiskAnalysis(ContractModel):
    """Full response from the generation service."""

    risk_categories: list[RiskCategory] = Field(default_factory=list)
    executive_summary: ExecutiveSummary = Field(default_factory=ExecutiveSummary)
    risk_interdependencies: list[RiskInterdependency] = Field(default_factory=list)
    monitoring_framework: MonitoringFramework = Field(default_factory=MonitoringFramework)
    industry_context: str | None = None
    analysis_date: datetime | None = None

    def iter_risks(self) -> list[tuple[str, RiskRecord]]:
        """Flatten to (category, record) pairs in document order."""
        return [
            (category.category, risk)
            for category in self.risk_categories
            for risk in category.risks
        ]

    def all_risks(self) -> list[RiskRecord]:
        return [risk for _, risk in self.iter_risks()]


class HeatMapEntry(BaseModel):
    """One row of the ranked heat map."""

    risk_id: str
    name: str
    category: str
    likelihood: int
    impact: int
    detectability: int
    rpn: int
    risk_level: RiskLevel


class RiskSummary(BaseModel):
    """Organization-wide totals for a scored analysis."""

    total_risks: int = 0
    critical_risk_count: int = 0
    overall_score: int = Field(default=0, ge=0, le=100)
    overall_risk_level: RiskLevel = RiskLevel.LOW
    level_distribution: dict[str, int] = Field(default_factory=dict)
