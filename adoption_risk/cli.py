# adoption_risk/cli.py
"""
CLI interface for adoption-risk.

Thin presentation layer over the tools/ service layer.
"""

import asyncio
import json
from pathlib import Path

import typer
import yaml

from adoption_risk.config import RiskCoreConfig, load_config, resolve_db_path
from adoption_risk.errors import RiskCoreError
from adoption_risk.logging_config import configure_logging

app = typer.Typer(
    name="adoption-risk",
    help="Risk scoring, classification and monitoring for AI adoption strategies.",
    no_args_is_help=True,
)

_LEVEL_COLORS = {
    "critical": "red",
    "high": "yellow",
    "moderate": "cyan",
    "low": "green",
}

_STATUS_COLORS = {
    "new": typer.colors.CYAN,
    "acknowledged": typer.colors.MAGENTA,
    "in_progress": typer.colors.YELLOW,
    "resolved": typer.colors.GREEN,
    "dismissed": typer.colors.BRIGHT_BLACK,
}

_KRI_COLORS = {"healthy": "green", "warning": "yellow", "critical": "red"}


def _run(coro):
    """Run async function from sync CLI context."""
    return asyncio.run(coro)


async def _get_store(config: RiskCoreConfig):
    """Open the configured alert store."""
    if config.storage.backend == "memory":
        from adoption_risk.models.memory_store import InMemoryAlertStore

        return InMemoryAlertStore()

    from adoption_risk.models.sqlite_store import SQLiteAlertStore

    store = SQLiteAlertStore(resolve_db_path(config))
    await store.initialize()
    return store


async def _with_store(config: RiskCoreConfig, call):
    """Open a store, run `call(store)`, and always close it."""
    store = await _get_store(config)
    try:
        return await call(store)
    finally:
        await store.close()


def _fail(error: Exception) -> None:
    typer.echo(typer.style(f"Error: {error}", fg=typer.colors.RED), err=True)
    raise typer.Exit(1)


def _read_document(path: Path):
    """Load a JSON or YAML document."""
    try:
        with path.open("r") as f:
            return yaml.safe_load(f)
    except (OSError, yaml.YAMLError) as e:
        _fail(e)


def _print_alert(alert: dict) -> None:
    status = alert["status"]
    typer.echo(
        typer.style(f"{alert['id']:<14}", fg=_STATUS_COLORS.get(status, typer.colors.WHITE))
        + typer.style(f"{status:<14}", fg=_STATUS_COLORS.get(status, typer.colors.WHITE))
        + f"{alert['severity']:<10}{alert['risk_score']:>5}  {alert['progress']:>3}%  "
        + f"{alert['risk_category']}: {alert['risk_description']}"
    )


@app.callback()
def main(
    ctx: typer.Context,
    config_path: Path = typer.Option(
        None, "--config", envvar="ADOPTION_RISK_CONFIG", help="Config file (YAML)"
    ),
):
    """Load configuration and set up logging for every command."""
    from pydantic import ValidationError

    try:
        config = load_config(config_path)
    except (RiskCoreError, ValidationError) as e:
        _fail(e)
    configure_logging(config.output.verbosity)
    ctx.obj = config


@app.command()
def analyze(
    ctx: typer.Context,
    file: Path = typer.Argument(..., help="Risk analysis JSON (raw generation output is accepted)"),
    top: int = typer.Option(None, "--top", "-n", min=1, help="Heat map rows to show in the table"),
    show_all: bool = typer.Option(False, "--all", help="Show every heat map row in the table"),
    goal: list[str] = typer.Option([], "--goal", help="Business goal (repeatable)"),
    pain: list[str] = typer.Option([], "--pain", help="Pain point (repeatable)"),
    as_json: bool = typer.Option(
        False, "--json", help="Print the full result as JSON (complete heat map)"
    ),
):
    """Score a risk analysis and show its heat map."""
    from rich.console import Console
    from rich.table import Table

    from adoption_risk.tools.analyze import analyze_risks

    config: RiskCoreConfig = ctx.obj
    try:
        payload = file.read_text(encoding="utf-8")
        result = analyze_risks(
            payload,
            business_goals=goal,
            pain_points=pain,
        )
    except (OSError, RiskCoreError) as e:
        _fail(e)

    if as_json:
        typer.echo(json.dumps(result, indent=2))
        return

    summary = result["summary"]
    level = summary["overall_risk_level"]
    console = Console()
    console.print(
        f"Overall risk score: [bold]{summary['overall_score']}[/bold] "
        f"([{_LEVEL_COLORS[level]}]{level}[/]), "
        f"{summary['total_risks']} risks, {summary['critical_risk_count']} critical"
    )
    if result["industry"]:
        console.print(f"Industry: {result['industry']['industry']}")

    rows = result["heat_map"]
    if not show_all:
        rows = rows[: top or config.scoring.heat_map_top]

    table = Table(
        title="Risk heat map",
        caption=f"Showing {len(rows)} of {len(result['heat_map'])} risks",
    )
    table.add_column("ID")
    table.add_column("Risk")
    table.add_column("Category")
    table.add_column("L", justify="right")
    table.add_column("I", justify="right")
    table.add_column("D", justify="right")
    table.add_column("RPN", justify="right")
    table.add_column("Level")
    for row in rows:
        table.add_row(
            row["risk_id"],
            row["name"],
            row["category"],
            str(row["likelihood"]),
            str(row["impact"]),
            str(row["detectability"]),
            str(row["rpn"]),
            f"[{_LEVEL_COLORS[row['risk_level']]}]{row['risk_level']}[/]",
        )
    console.print(table)

    for concern in result["key_concerns"]:
        console.print(f"- {concern}")


@app.command()
def industry(
    text: list[str] = typer.Argument(..., help="Business goals and pain points"),
):
    """Infer the industry from free text and show its risk profile."""
    from adoption_risk.scoring.industry import get_industry_profile, infer_industry

    name = infer_industry(text)
    profile = get_industry_profile(name)

    typer.echo(f"Industry:   {name}")
    typer.echo(f"Critical:   {', '.join(profile.critical_areas)}")
    typer.echo(f"High risk:  {', '.join(profile.high_risk_factors)}")
    typer.echo(f"Standards:  {', '.join(profile.compliance_standards)}")


@app.command("alerts")
def list_alerts_cmd(
    ctx: typer.Context,
    source: str = typer.Option(None, "--source", help="Only alerts for this strategy"),
    active: bool = typer.Option(False, "--active", help="Hide resolved and dismissed alerts"),
):
    """List alerts, newest first."""
    from adoption_risk.tools.alerts import list_alerts

    result = _run(
        _with_store(ctx.obj, lambda store: list_alerts(store, source_id=source, active_only=active))
    )
    if not result["alerts"]:
        typer.echo("No alerts found.")
        return

    typer.echo(f"{'ALERT ID':<14}{'STATUS':<14}{'SEVERITY':<10}{'SCORE':>5}  PROG  DESCRIPTION")
    typer.echo("-" * 80)
    for alert in result["alerts"]:
        _print_alert(alert)


@app.command("create-alert")
def create_alert_cmd(
    ctx: typer.Context,
    category: str = typer.Option(..., "--category", help="Risk category (e.g. compliance)"),
    description: str = typer.Option(..., "--description", help="What was detected"),
    severity: str = typer.Option("medium", "--severity", help="low, medium, high or critical"),
    score: int = typer.Option(None, "--score", help="Risk score 0-100"),
    trigger: str = typer.Option("", "--trigger", help="Why the alert was raised"),
    impact: str = typer.Option("", "--impact", help="Potential impact"),
    step: list[str] = typer.Option([], "--step", help="Mitigation step (repeatable)"),
    source_type: str = typer.Option(None, "--source-type"),
    source_id: str = typer.Option(None, "--source-id"),
    source_name: str = typer.Option(None, "--source-name"),
):
    """Raise a new alert."""
    from adoption_risk.tools.alerts import create_alert

    try:
        result = _run(
            _with_store(
                ctx.obj,
                lambda store: create_alert(
                    category,
                    description,
                    severity,
                    store,
                    risk_score=score,
                    trigger_reason=trigger,
                    potential_impact=impact,
                    mitigation_steps=[{"step": text} for text in step],
                    source_type=source_type,
                    source_id=source_id,
                    source_name=source_name,
                ),
            )
        )
    except (RiskCoreError, ValueError) as e:
        _fail(e)

    typer.echo(f"Created alert {result['id']} ({result['severity']}, score {result['risk_score']})")


def _transition(ctx: typer.Context, call) -> dict:
    try:
        return _run(_with_store(ctx.obj, call))
    except (RiskCoreError, ValueError, IndexError) as e:
        _fail(e)


@app.command()
def ack(
    ctx: typer.Context,
    alert_id: str = typer.Argument(..., help="Alert ID"),
    by: str = typer.Option(..., "--by", help="Who is acknowledging"),
):
    """Acknowledge a new alert."""
    from adoption_risk.tools.alerts import acknowledge_alert

    result = _transition(ctx, lambda store: acknowledge_alert(alert_id, by, store))
    typer.echo(f"Alert {result['id']} acknowledged by {result['acknowledged_by']}.")


@app.command()
def start(ctx: typer.Context, alert_id: str = typer.Argument(..., help="Alert ID")):
    """Mark an alert as in progress."""
    from adoption_risk.tools.alerts import start_alert

    result = _transition(ctx, lambda store: start_alert(alert_id, store))
    typer.echo(f"Alert {result['id']} in progress.")


@app.command()
def resolve(ctx: typer.Context, alert_id: str = typer.Argument(..., help="Alert ID")):
    """Resolve an alert."""
    from adoption_risk.tools.alerts import resolve_alert

    result = _transition(ctx, lambda store: resolve_alert(alert_id, store))
    typer.echo(f"Alert {result['id']} resolved at {result['resolved_at']}.")


@app.command()
def dismiss(ctx: typer.Context, alert_id: str = typer.Argument(..., help="Alert ID")):
    """Dismiss an alert without resolving it."""
    from adoption_risk.tools.alerts import dismiss_alert

    result = _transition(ctx, lambda store: dismiss_alert(alert_id, store))
    typer.echo(f"Alert {result['id']} dismissed.")


@app.command()
def step(
    ctx: typer.Context,
    alert_id: str = typer.Argument(..., help="Alert ID"),
    index: int = typer.Argument(..., help="Zero-based step index"),
    status: str = typer.Argument(..., help="pending, in_progress or completed"),
):
    """Update a mitigation step's status."""
    from adoption_risk.tools.alerts import update_mitigation_step

    config: RiskCoreConfig = ctx.obj
    result = _transition(
        ctx,
        lambda store: update_mitigation_step(
            alert_id, index, status, store, allow_reset=config.monitoring.allow_step_reset
        ),
    )
    typer.echo(f"Alert {result['id']} step {index} -> {status} (progress {result['progress']}%)")


@app.command()
def dashboard(
    ctx: typer.Context,
    snapshot_file: Path = typer.Argument(..., help="Strategy snapshot (JSON or YAML)"),
    as_json: bool = typer.Option(False, "--json", help="Print the full result as JSON"),
):
    """Evaluate key risk indicators and alert counts for a strategy."""
    from pydantic import ValidationError
    from rich.console import Console
    from rich.table import Table

    from adoption_risk.monitoring.snapshot import StrategySnapshot
    from adoption_risk.tools.dashboard import get_monitoring_dashboard

    config: RiskCoreConfig = ctx.obj
    try:
        snapshot = StrategySnapshot.model_validate(_read_document(snapshot_file) or {})
    except ValidationError as e:
        _fail(e)

    result = _run(
        _with_store(config, lambda store: get_monitoring_dashboard(snapshot, store, config.kri))
    )

    if as_json:
        typer.echo(json.dumps(result, indent=2))
        return

    console = Console()
    console.print(f"Project health: [bold]{result['health_score']}[/bold] ({result['health_label']})")

    table = Table(title="Key risk indicators")
    table.add_column("Indicator")
    table.add_column("Value", justify="right")
    table.add_column("Threshold", justify="right")
    table.add_column("Status")
    table.add_column("Trend")
    for kri in result["indicators"]:
        color = _KRI_COLORS.get(kri["status"], "white")
        table.add_row(
            kri["indicator"],
            f"{kri['current_value']:g}{kri['unit']}",
            f"{kri['threshold']:g}{kri['unit']}",
            f"[{color}]{kri['status']}[/]",
            kri["trend"],
        )
    console.print(table)

    counts = result["counts"]
    console.print(
        f"Alerts: {counts['active']} active ({counts['active_critical']} critical, "
        f"{counts['active_high']} high), {counts['resolved']} resolved, "
        f"{counts['dismissed']} dismissed"
    )


@app.command("config")
def show_config(ctx: typer.Context):
    """Show the effective configuration."""
    config: RiskCoreConfig = ctx.obj
    typer.echo(yaml.safe_dump(config.model_dump(mode="json"), sort_keys=False))


if __name__ == "__main__":
    app()
