# tests/unit/test_analysis.py
"""Tests for parsing generation-service responses."""

import json

import pytest

from adoption_risk.errors import AnalysisUnavailable
from adoption_risk.scoring.analysis import extract_json, load_risk_analysis, parse_risk_analysis

PAYLOAD = {
    "riskCategories": [
        {
            "category": "compliance",
            "risks": [
                {
                    "riskId": "C1",
                    "riskName": "GDPR exposure",
                    "likelihood": {"score": 4},
                    "impact": {"score": 5},
                    "detectability": {"score": 4},
                }
            ],
        }
    ],
    "executiveSummary": {"keyConcerns": ["Data residency"], "recommendation": "Proceed"},
}


class TestExtractJson:
    """Tests for extract_json."""

    def test_pure_json(self):
        assert extract_json('{"a": 1}') == {"a": 1}

    def test_code_fence(self):
        raw = 'Here is the analysis:\n```json\n{"a": 1}\n```\nDone.'
        assert extract_json(raw) == {"a": 1}

    def test_embedded_object(self):
        assert extract_json('Sure! {"a": {"b": 2}} Hope that helps.') == {"a": {"b": 2}}

    def test_no_json(self):
        with pytest.raises(ValueError, match="Could not extract"):
            extract_json("no json here")

    def test_truncated_not_repaired(self):
        with pytest.raises(ValueError):
            extract_json('{"riskCategories": [{"category": "technical"')


class TestParseRiskAnalysis:
    """Tests for parse_risk_analysis."""

    def test_from_dict(self):
        analysis = parse_risk_analysis(PAYLOAD)
        risk = analysis.all_risks()[0]
        assert risk.rpn == 80
        assert analysis.executive_summary.key_concerns == ["Data residency"]

    def test_from_fenced_text(self):
        raw = f"```json\n{json.dumps(PAYLOAD)}\n```"
        assert parse_risk_analysis(raw).all_risks()[0].risk_id == "C1"

    def test_from_bytes(self):
        assert parse_risk_analysis(json.dumps(PAYLOAD).encode()).all_risks()[0].name == "GDPR exposure"

    @pytest.mark.parametrize("payload", [None, "", "   ", "not json at all"])
    def test_unavailable(self, payload):
        with pytest.raises(AnalysisUnavailable):
            parse_risk_analysis(payload)

    def test_non_object(self):
        with pytest.raises(AnalysisUnavailable, match="JSON object"):
            parse_risk_analysis([1, 2, 3])

    def test_wrong_shape(self):
        with pytest.raises(AnalysisUnavailable, match="validation"):
            parse_risk_analysis({"riskCategories": "oops"})

    def test_numeric_risk_id_keeps_other_records(self):
        payload = {
            "riskCategories": [
                {
                    "category": "technical",
                    "risks": [
                        {"riskId": 1, "likelihood": {"score": 2}},
                        {"riskId": "T2", "likelihood": {"score": 5}},
                    ],
                }
            ]
        }
        risks = parse_risk_analysis(payload).all_risks()
        assert [risk.risk_id for risk in risks] == ["1", "T2"]


class TestLoadRiskAnalysis:
    def test_load_file(self, tmp_path):
        path = tmp_path / "analysis.json"
        path.write_text(json.dumps(PAYLOAD))
        assert len(load_risk_analysis(path).all_risks()) == 1

    def test_missing_file(self, tmp_path):
        with pytest.raises(AnalysisUnavailable, match="Cannot read"):
            load_risk_analysis(tmp_path / "missing.json")
