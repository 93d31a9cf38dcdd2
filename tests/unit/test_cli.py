# tests/unit/test_cli.py
"""
CLI unit tests.

Tests each command via typer's CliRunner, using an in-memory alert store
to avoid filesystem side effects.
"""

import json
import re
from unittest.mock import patch

import pytest
from typer.testing import CliRunner

from adoption_risk.cli import app
from adoption_risk.models.memory_store import InMemoryAlertStore

runner = CliRunner()

ANALYSIS = {
    "riskCategories": [
        {
            "category": "compliance",
            "risks": [
                {"riskId": "C1", "riskName": "GDPR", "likelihood": {"score": 5}, "impact": {"score": 5}, "detectability": {"score": 4}},
                {"riskId": "C2", "riskName": "Audit", "likelihood": {"score": 1}, "impact": {"score": 2}, "detectability": {"score": 2}},
            ],
        }
    ],
    "executiveSummary": {"keyConcerns": ["Consent tracking"]},
}


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------

@pytest.fixture
def store() -> InMemoryAlertStore:
    return InMemoryAlertStore()


@pytest.fixture
def invoke(tmp_path, store):
    """Run the CLI with a temp config file and the in-memory store."""
    config_path = tmp_path / "config.yaml"
    config_path.write_text("output:\n  verbosity: quiet\n")

    async def _fake_store(config):
        return store

    def _invoke(*args):
        with patch("adoption_risk.cli._get_store", _fake_store):
            return runner.invoke(app, ["--config", str(config_path), *args])

    return _invoke


def _create(invoke, *extra):
    result = invoke(
        "create-alert",
        "--category", "compliance",
        "--description", "Consent records incomplete",
        "--severity", "high",
        "--source-id", "strat-1",
        *extra,
    )
    assert result.exit_code == 0, result.output
    return re.search(r"Created alert ([0-9a-f]{12})", result.output).group(1)


# ---------------------------------------------------------------------------
# analyze / industry
# ---------------------------------------------------------------------------

class TestAnalyze:
    def test_json_output(self, invoke, tmp_path):
        path = tmp_path / "analysis.json"
        path.write_text(json.dumps(ANALYSIS))

        result = invoke("analyze", str(path), "--json")

        assert result.exit_code == 0, result.output
        data = json.loads(result.output)
        assert [row["risk_id"] for row in data["heat_map"]] == ["C1", "C2"]
        assert data["heat_map"][0]["rpn"] == 100

    def test_table_output(self, invoke, tmp_path):
        path = tmp_path / "analysis.json"
        path.write_text("```json\n" + json.dumps(ANALYSIS) + "\n```")

        result = invoke("analyze", str(path))

        assert result.exit_code == 0, result.output
        assert "Overall risk score" in result.output
        assert "C1" in result.output

    def test_unusable_analysis(self, invoke, tmp_path):
        path = tmp_path / "analysis.json"
        path.write_text("the service timed out")

        result = invoke("analyze", str(path))
        assert result.exit_code == 1

    def _many_risks(self, tmp_path, count=12):
        risks = [
            {"riskId": f"R{n}", "likelihood": {"score": 1 + n % 5}, "impact": {"score": 2}, "detectability": {"score": 2}}
            for n in range(count)
        ]
        path = tmp_path / "many.json"
        path.write_text(json.dumps({"riskCategories": [{"category": "technical", "risks": risks}]}))
        return path

    def test_json_has_complete_heat_map(self, invoke, tmp_path):
        result = invoke("analyze", str(self._many_risks(tmp_path)), "--json")

        assert result.exit_code == 0, result.output
        data = json.loads(result.output)
        assert len(data["heat_map"]) == data["summary"]["total_risks"] == 12
        rpns = [row["rpn"] for row in data["heat_map"]]
        assert rpns == sorted(rpns, reverse=True)

    def test_table_limited_to_default_rows(self, invoke, tmp_path):
        result = invoke("analyze", str(self._many_risks(tmp_path)))
        assert result.exit_code == 0, result.output
        assert "Showing 10 of 12 risks" in result.output

    def test_table_all_rows(self, invoke, tmp_path):
        result = invoke("analyze", str(self._many_risks(tmp_path)), "--all")
        assert result.exit_code == 0, result.output
        assert "Showing 12 of 12 risks" in result.output

    def test_table_top(self, invoke, tmp_path):
        result = invoke("analyze", str(self._many_risks(tmp_path)), "--top", "3")
        assert result.exit_code == 0, result.output
        assert "Showing 3 of 12 risks" in result.output

    def test_top_zero_rejected(self, invoke, tmp_path):
        result = invoke("analyze", str(self._many_risks(tmp_path)), "--top", "0")
        assert result.exit_code == 2


class TestIndustry:
    def test_industry(self, invoke):
        result = invoke("industry", "Reduce claim fraud in our banking unit")
        assert result.exit_code == 0
        assert "finance" in result.output
        assert "SOX" in result.output


# ---------------------------------------------------------------------------
# alert commands
# ---------------------------------------------------------------------------

class TestAlertCommands:
    def test_create_and_list(self, invoke, store):
        alert_id = _create(invoke, "--step", "Backfill consent", "--step", "Add check")

        result = invoke("alerts")
        assert result.exit_code == 0
        assert alert_id in result.output
        assert "high" in result.output

    def test_list_empty(self, invoke):
        result = invoke("alerts")
        assert result.exit_code == 0
        assert "No alerts found." in result.output

    def test_lifecycle(self, invoke, store):
        alert_id = _create(invoke)

        assert invoke("ack", alert_id, "--by", "dana").exit_code == 0
        assert invoke("start", alert_id).exit_code == 0
        result = invoke("resolve", alert_id)
        assert result.exit_code == 0
        assert "resolved" in result.output

        alerts = invoke("alerts", "--active")
        assert "No alerts found." in alerts.output

    def test_invalid_transition(self, invoke):
        alert_id = _create(invoke)
        invoke("dismiss", alert_id)

        result = invoke("resolve", alert_id)
        assert result.exit_code == 1
        assert "Cannot move alert" in result.output

    def test_unknown_alert(self, invoke):
        result = invoke("ack", "missing", "--by", "dana")
        assert result.exit_code == 1
        assert "not found" in result.output

    def test_step(self, invoke):
        alert_id = _create(invoke, "--step", "a", "--step", "b")

        result = invoke("step", alert_id, "0", "completed")
        assert result.exit_code == 0
        assert "50%" in result.output

        backward = invoke("step", alert_id, "0", "pending")
        assert backward.exit_code == 1

        out_of_range = invoke("step", alert_id, "5", "completed")
        assert out_of_range.exit_code == 1

    def test_bad_severity(self, invoke):
        result = invoke("create-alert", "--category", "x", "--description", "y", "--severity", "severe")
        assert result.exit_code == 1


# ---------------------------------------------------------------------------
# dashboard / config
# ---------------------------------------------------------------------------

class TestDashboard:
    def test_dashboard_json(self, invoke, store, tmp_path):
        alert_id = _create(invoke)
        snapshot = tmp_path / "strategy.yaml"
        snapshot.write_text(
            "id: strat-1\nprogressTracking:\n  overallProgress: 50\ncomplianceRequirements: [GDPR]\n"
        )

        result = invoke("dashboard", str(snapshot), "--json")

        assert result.exit_code == 0, result.output
        data = json.loads(result.output)
        assert data["active_alerts"][0]["id"] == alert_id
        assert len(data["indicators"]) == 6

    def test_dashboard_table(self, invoke, tmp_path):
        snapshot = tmp_path / "strategy.json"
        snapshot.write_text(json.dumps({"id": "strat-1"}))

        result = invoke("dashboard", str(snapshot))
        assert result.exit_code == 0, result.output
        assert "Project health" in result.output

    def test_missing_snapshot(self, invoke, tmp_path):
        result = invoke("dashboard", str(tmp_path / "missing.json"))
        assert result.exit_code == 1


class TestConfigCommand:
    def test_shows_config(self, invoke, tmp_path):
        result = invoke("config")
        assert result.exit_code == 0
        assert "heat_map_top: 10" in result.output
        assert (tmp_path / "config.yaml").exists()

    @pytest.mark.parametrize("content", ["- a\n- b\n", "output:\n  verbosity: loud\n"])
    def test_unusable_config(self, tmp_path, content):
        path = tmp_path / "bad.yaml"
        path.write_text(content)

        result = runner.invoke(app, ["--config", str(path), "config"])
        assert result.exit_code == 1
