"""Click-based CLI entry point for asset analytics."""

from __future__ import annotations

import json
import logging
from datetime import datetime
from pathlib import Path

import click

from asset_analytics import __version__
from asset_analytics.analysis.presets import AnalyticsPreset, format_analytics_preset, get_date_range_for_preset


@click.group()
@click.version_option(version=__version__)
@click.option("-v", "--verbose", is_flag=True, help="Enable debug logging.")
def cli(verbose: bool):
    """Asset uptime/downtime analytics from maintenance activity logs."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )


def _resolve_range(preset: str | None, start: datetime | None, end: datetime | None) -> tuple[datetime, datetime]:
    if preset and preset != AnalyticsPreset.CUSTOM.value:
        return get_date_range_for_preset(preset)
    if start and end:
        if start > end:
            raise click.BadParameter("Start date must be before end date", param_hint="--start/--end")
        return start, end
    if start or end:
        raise click.BadParameter("Both --start and --end are required for a custom range", param_hint="--start/--end")
    return get_date_range_for_preset(AnalyticsPreset.LAST_30_DAYS)


@cli.command()
@click.argument("activities_file", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option("--asset-id", required=True, help="Asset to analyze.")
@click.option("--asset-name", help="Display name (defaults to the name on the activity records).")
@click.option("--department", help="Owning department (defaults to the department on the activity records).")
@click.option("--preset", type=click.Choice([p.value for p in AnalyticsPreset]), help="Named date range.")
@click.option("--start", type=click.DateTime(formats=["%Y-%m-%d"]), help="Range start (YYYY-MM-DD).")
@click.option("--end", type=click.DateTime(formats=["%Y-%m-%d"]), help="Range end (YYYY-MM-DD).")
@click.option("--config", "config_path", type=click.Path(exists=True, dir_okay=False, path_type=Path), help="YAML config.")
@click.option("--json", "as_json", is_flag=True, help="Print the full analytics document as JSON.")
@click.option("--trends-csv", type=click.Path(dir_okay=False, path_type=Path), help="Write daily trends to CSV.")
@click.option("--plots-dir", type=click.Path(file_okay=False, path_type=Path), help="Write PNG charts here.")
def analyze(
    activities_file: Path,
    asset_id: str,
    asset_name: str | None,
    department: str | None,
    preset: str | None,
    start: datetime | None,
    end: datetime | None,
    config_path: Path | None,
    as_json: bool,
    trends_csv: Path | None,
    plots_dir: Path | None,
):
    """Compute uptime/downtime analytics for one asset."""
    from asset_analytics.analysis.availability import calculate_asset_analytics
    from asset_analytics.analysis.downtime import format_downtime
    from asset_analytics.config import load_config
    from asset_analytics.parsers.activity_parser import load_activities

    start_date, end_date = _resolve_range(preset, start, end)

    try:
        config = load_config(config_path) if config_path else None
        activities = load_activities(activities_file)
    except ValueError as e:
        raise click.ClickException(str(e)) from e

    own = [a for a in activities if a.asset_id == asset_id]
    if asset_name is None:
        asset_name = next((a.asset_name for a in own if a.asset_name), asset_id)
    if department is None:
        department = next((a.department for a in own if a.department), "")

    analytics = calculate_asset_analytics(asset_id, asset_name, department, activities, start_date, end_date, config)

    if trends_csv:
        trends_csv.parent.mkdir(parents=True, exist_ok=True)
        analytics.trends_frame().to_csv(trends_csv)

    if plots_dir:
        from asset_analytics.analysis.plots import plot_availability_trend, plot_downtime_breakdown

        plot_availability_trend(analytics, plots_dir / f"{asset_id}_availability.png")
        plot_downtime_breakdown(analytics, plots_dir / f"{asset_id}_breakdown.png")

    if as_json:
        click.echo(json.dumps(analytics.to_dict(), indent=2))
        return

    period = analytics.analysis_period
    summary = analytics.summary
    breakdown = analytics.downtime_breakdown

    click.echo(f"Asset Analytics: {analytics.asset_name} ({analytics.asset_id})")
    click.echo("=" * 80)
    if analytics.department:
        click.echo(f"  Department: {analytics.department}")
    click.echo(f"  Period: {period.start_date} to {period.end_date} ({period.total_days} days)")
    click.echo(f"  Availability: {summary.overall_availability:.2f}%")
    click.echo(f"  Uptime: {summary.total_uptime_hours:.2f} h / {summary.total_operational_hours:.2f} h")
    click.echo(f"  Downtime: {summary.total_downtime_hours:.2f} h "
               f"(planned {summary.planned_downtime_hours:.2f} h, unplanned {summary.unplanned_downtime_hours:.2f} h)")
    click.echo(f"  Incidents: {summary.total_incidents}")
    click.echo(f"  MTBF: {summary.mtbf:.2f} h   MTTR: {summary.mttr:.2f} h")
    click.echo(f"  Planned share: {breakdown.planned.percentage:.2f}%   "
               f"Unplanned share: {breakdown.unplanned.percentage:.2f}%")

    click.echo("\n  By period:")
    for p in analytics.performance_by_period:
        click.echo(
            f"    {p.period:<18} availability {p.availability:6.2f}%  "
            f"downtime {format_downtime(p.total_downtime):<12} incidents {p.number_of_incidents}"
        )

    if analytics.incidents:
        click.echo("\n  Incidents:")
        for inc in analytics.incidents:
            click.echo(
                f"    {inc.date} {inc.start_time or '--:--'}-{inc.end_time:<7} "
                f"{format_downtime(inc.duration):<12} {inc.type.value:<9} {inc.severity.value:<8} {inc.description}"
            )


@cli.command()
def presets():
    """List the named date-range presets and their current ranges."""
    for preset in AnalyticsPreset:
        start, end = get_date_range_for_preset(preset)
        click.echo(f"  {preset.value:<14} {format_analytics_preset(preset):<14} {start.date()} to {end.date()}")


@cli.command()
@click.argument("start_time")
@click.argument("end_time", required=False)
def duration(start_time: str, end_time: str | None):
    """Show the downtime between two HH:MM clock times."""
    from asset_analytics.analysis.downtime import calculate_downtime, format_downtime, get_downtime_severity

    minutes = calculate_downtime(start_time, end_time)
    click.echo(f"{format_downtime(minutes)} ({get_downtime_severity(minutes).value})")


if __name__ == "__main__":
    cli()
