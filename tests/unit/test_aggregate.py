# tests/unit/test_aggregate.py
"""Tests for heat map ranking and overall risk aggregation."""

import pytest

from adoption_risk.scoring.aggregate import (
    build_heat_map,
    category_levels,
    overall_risk_score,
    risk_level_distribution,
    summarize_analysis,
)
from adoption_risk.scoring.priority import RiskLevel
from adoption_risk.scoring.schemas import RiskAnalysis, RiskRecord


def _risk(risk_id, l, i, d):
    return {
        "riskId": risk_id,
        "riskName": f"Risk {risk_id}",
        "likelihood": {"score": l},
        "impact": {"score": i},
        "detectability": {"score": d},
    }


@pytest.fixture
def analysis() -> RiskAnalysis:
    """Three risks across two categories."""
    return RiskAnalysis.model_validate(
        {
            "riskCategories": [
                {"category": "technical", "risks": [_risk("T1", 3, 2, 2), _risk("T2", 1, 1, 1)]},
                {"category": "compliance", "risks": [_risk("C1", 5, 5, 5)]},
            ]
        }
    )


class TestBuildHeatMap:
    """Tests for build_heat_map."""

    def test_sorted_by_rpn_descending(self, analysis):
        rows = build_heat_map(analysis)
        assert [row.risk_id for row in rows] == ["C1", "T1", "T2"]
        assert [row.rpn for row in rows] == [125, 12, 1]
        assert [row.risk_level for row in rows] == [
            RiskLevel.CRITICAL,
            RiskLevel.LOW,
            RiskLevel.LOW,
        ]

    def test_row_carries_category(self, analysis):
        rows = build_heat_map(analysis)
        assert rows[0].category == "compliance"
        assert rows[1].category == "technical"

    def test_ties_keep_document_order(self):
        analysis = RiskAnalysis.model_validate(
            {
                "riskCategories": [
                    {"category": "technical", "risks": [_risk("A", 2, 2, 2), _risk("B", 1, 2, 4)]},
                    {"category": "vendor", "risks": [_risk("C", 4, 2, 1)]},
                ]
            }
        )
        assert [row.risk_id for row in build_heat_map(analysis)] == ["A", "B", "C"]

    def test_top_n(self, analysis):
        rows = build_heat_map(analysis, top=2)
        assert [row.risk_id for row in rows] == ["C1", "T1"]

    def test_missing_scores_shown_as_neutral(self):
        analysis = RiskAnalysis.model_validate(
            {"riskCategories": [{"category": "financial", "risks": [{"riskId": "F1"}]}]}
        )
        row = build_heat_map(analysis)[0]
        assert (row.likelihood, row.impact, row.detectability) == (3, 3, 3)
        assert row.rpn == 27

    def test_empty_analysis(self):
        assert build_heat_map(RiskAnalysis()) == []


class TestOverallRiskScore:
    """Tests for overall_risk_score."""

    def test_empty_is_zero(self):
        assert overall_risk_score([]) == 0

    def test_max_is_100(self):
        records = [RiskRecord.model_validate(_risk("X", 5, 5, 5))] * 3
        assert overall_risk_score(records) == 100

    def test_mean_normalized(self, analysis):
        # mean RPN (125 + 12 + 1) / 3 = 46 -> 36.8
        assert overall_risk_score(analysis.all_risks()) == 37

    def test_never_decreases_as_mean_rises(self):
        triples = sorted(
            ((l, i, d) for l in range(1, 6) for i in range(1, 6) for d in range(1, 6)),
            key=lambda t: t[0] * t[1] * t[2],
        )
        scores = [
            overall_risk_score([RiskRecord.model_validate(_risk("X", *triple))])
            for triple in triples
        ]
        assert scores == sorted(scores)
        assert 0 <= scores[0] and scores[-1] == 100

    def test_raising_one_record_never_lowers_score(self):
        scores = [[1, 1, 1], [1, 1, 1], [1, 1, 1]]
        previous = overall_risk_score([RiskRecord.model_validate(_risk("X", *s)) for s in scores])
        for record in scores:
            for dim in range(3):
                while record[dim] < 5:
                    record[dim] += 1
                    current = overall_risk_score(
                        [RiskRecord.model_validate(_risk("X", *s)) for s in scores]
                    )
                    assert current >= previous
                    previous = current
        assert previous == 100


class TestSummarizeAnalysis:
    def test_summary(self, analysis):
        summary = summarize_analysis(analysis)
        assert summary.total_risks == 3
        assert summary.critical_risk_count == 1
        assert summary.overall_score == 37
        assert summary.overall_risk_level is RiskLevel.HIGH
        assert summary.level_distribution == {"low": 2, "moderate": 0, "high": 0, "critical": 1}

    def test_empty_summary(self):
        summary = summarize_analysis(RiskAnalysis())
        assert summary.total_risks == 0
        assert summary.overall_score == 0
        assert summary.overall_risk_level is RiskLevel.LOW

    def test_distribution_zero_filled(self):
        assert risk_level_distribution([]) == {"low": 0, "moderate": 0, "high": 0, "critical": 0}


class TestCategoryLevels:
    def test_one_level_per_category(self, analysis):
        assert category_levels(analysis) == {
            "technical": RiskLevel.LOW,
            "compliance": RiskLevel.CRITICAL,
        }

    def test_repeated_category_keeps_most_severe(self):
        analysis = RiskAnalysis.model_validate(
            {
                "riskCategories": [
                    {"category": "vendor", "risks": [_risk("V1", 5, 5, 5)]},
                    {"category": "vendor", "risks": [_risk("V2", 1, 1, 1)]},
                ]
            }
        )
        assert category_levels(analysis) == {"vendor": RiskLevel.CRITICAL}

    def test_unknown_category_merges_into_technical(self):
        analysis = RiskAnalysis.model_validate(
            {
                "riskCategories": [
                    {"category": "technical", "risks": [_risk("A", 5, 5, 5)]},
                    {"category": "ethical", "risks": [_risk("B", 1, 1, 1)]},
                ]
            }
        )
        levels = category_levels(analysis)
        assert levels == {"technical": RiskLevel.CRITICAL}
        assert [row.category for row in build_heat_map(analysis)] == ["technical", "technical"]
