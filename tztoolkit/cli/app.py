"""
Main CLI application using Typer.
"""

from pathlib import Path
from typing import Any, Callable, Dict, List, Optional, Annotated

import typer
from rich.console import Console
from rich.table import Table

from ..config import AppConfig
from ..domain.exceptions import ConfigError, ToolkitError
from ..domain.models import SlotFit
from ..logging_setup import configure_logging
from ..adapters.astral_ephemeris import AstralEphemeris
from ..services.astronomy import AstronomyService
from ..services.toolkit import TimezoneToolkitService

app = typer.Typer(
    name="tztoolkit",
    help="Timezone conversion, business days and meeting scheduling across timezones",
    add_completion=False
)

console = Console()

ConfigOption = Annotated[
    Optional[Path],
    typer.Option("--config", "-c", help="Path to config file. Defaults to ./config.yaml")
]


@app.callback()
def main(
    verbose: Annotated[bool, typer.Option("--verbose", "-v", help="Enable debug logging.")] = False,
):
    """
    Timezone toolkit command-line interface.
    """
    configure_logging(verbose=verbose)


def _load_config(config_file: Optional[Path]) -> AppConfig:
    try:
        return AppConfig.load(config_file)
    except (FileNotFoundError, ValueError) as exc:
        raise ConfigError(str(exc)) from exc


def _build_service(config: AppConfig, slot_fit: Optional[SlotFit] = None) -> TimezoneToolkitService:
    return TimezoneToolkitService(
        holiday_store=config.build_holiday_store(),
        slot_fit=slot_fit or config.defaults.slot_fit,
        default_timezone=config.timezone,
        locale=config.locale,
    )


def _emit(build: Callable[[], Dict[str, Any]]) -> None:
    """Run a command body and print its result as JSON, or fail with a message."""
    try:
        result = build()
    except ToolkitError as e:
        console.print(f"[bold red]Error:[/bold red] {e}")
        raise typer.Exit(1)

    console.print_json(data=result)


def _parse_team(text: str, config: AppConfig) -> Dict[str, Any]:
    """
    Parse ``name@Zone=HH:MM-HH:MM``; the hours part defaults to the configured window.
    """
    head, _, hours = text.partition("=")
    name, _, zone = head.partition("@")
    if not name or not zone:
        raise typer.BadParameter(f"Expected NAME@TIMEZONE[=HH:MM-HH:MM], got '{text}'")

    if hours:
        start, _, end = hours.partition("-")
    else:
        start = f"{config.defaults.start_hour:02d}:00"
        end = f"{config.defaults.end_hour:02d}:00"

    return {"name": name, "timezone": zone, "working_hours": {"start": start, "end": end}}


def _parse_participant(text: str) -> Dict[str, str]:
    name, _, zone = text.partition("@")
    if not name or not zone:
        raise typer.BadParameter(f"Expected NAME@TIMEZONE, got '{text}'")
    return {"name": name, "timezone": zone}


@app.command()
def now(
    timezone: Annotated[Optional[str], typer.Argument(help="IANA timezone. Defaults to the configured timezone.")] = None,
    fmt: Annotated[Optional[str], typer.Option("--format", "-f", help="short, medium, full, drive or appointment")] = None,
    config_file: ConfigOption = None,
):
    """
    Show the current time in a timezone.
    """
    def build():
        config = _load_config(config_file)
        return _build_service(config).current_time(timezone, fmt or config.format.value)

    _emit(build)


@app.command()
def convert(
    time: Annotated[Optional[str], typer.Argument(help="Time to convert. Defaults to now.")] = None,
    from_timezone: Annotated[str, typer.Option("--from", help="Source IANA timezone")] = "UTC",
    to_timezone: Annotated[str, typer.Option("--to", help="Target IANA timezone")] = "UTC",
    fmt: Annotated[Optional[str], typer.Option("--format", "-f", help="short, medium, full, drive or appointment")] = None,
    config_file: ConfigOption = None,
):
    """
    Convert a time from one timezone to another.

    Examples:

        tztoolkit convert "2025-10-31 22:30:00" --from UTC --to America/New_York
        tztoolkit convert tomorrow --from Europe/Berlin --to Asia/Tokyo --format drive
    """
    def build():
        config = _load_config(config_file)
        return _build_service(config).convert_time(
            time, from_timezone, to_timezone, fmt or config.format.value
        )

    _emit(build)


@app.command()
def diff(
    from_timezone: Annotated[str, typer.Argument(help="Source IANA timezone")],
    to_timezone: Annotated[str, typer.Argument(help="Target IANA timezone")],
    config_file: ConfigOption = None,
):
    """
    Show the current offset difference between two timezones.
    """
    _emit(lambda: _build_service(_load_config(config_file)).timezone_difference(from_timezone, to_timezone))


@app.command()
def timezones(
    region: Annotated[Optional[str], typer.Option("--region", "-r", help="Filter by region, e.g. Europe")] = None,
    config_file: ConfigOption = None,
):
    """
    List common IANA timezones with their current time.
    """
    try:
        result = _build_service(_load_config(config_file)).list_timezones(region)
    except ToolkitError as e:
        console.print(f"[bold red]Error:[/bold red] {e}")
        raise typer.Exit(1)

    table = Table(
        title=f"Timezones ({result['region']})",
        show_header=True,
        header_style="bold cyan"
    )
    table.add_column("Timezone", style="bold yellow")
    table.add_column("Current time")
    table.add_column("Offset", style="dim")

    for entry in result["timezones"]:
        table.add_row(entry["timezone"], entry["current_time"], entry["offset"])

    console.print()
    console.print(table)
    console.print()


@app.command()
def countdown(
    target: Annotated[str, typer.Argument(help="Target date/time")],
    timezone: Annotated[Optional[str], typer.Option("--timezone", "-t", help="IANA timezone")] = None,
    title: Annotated[Optional[str], typer.Option("--title", help="Event name")] = None,
    config_file: ConfigOption = None,
):
    """
    Show the time remaining until a date.
    """
    _emit(lambda: _build_service(_load_config(config_file)).countdown(target, timezone, title))


@app.command("format-date")
def format_date(
    date: Annotated[str, typer.Argument(help="Date to format")],
    timezone: Annotated[Optional[str], typer.Option("--timezone", "-t", help="IANA timezone")] = None,
    style: Annotated[str, typer.Option("--style", "-s", help="short, medium, full, iso or relative")] = "medium",
    locale: Annotated[Optional[str], typer.Option("--locale", "-l", help="Locale, e.g. en-US, fr, de")] = None,
    config_file: ConfigOption = None,
):
    """
    Format a date in various styles.
    """
    _emit(lambda: _build_service(_load_config(config_file)).format_date(date, timezone, style, locale))


@app.command("business-days")
def business_days(
    start: Annotated[str, typer.Argument(help="Start date")],
    end: Annotated[str, typer.Argument(help="End date")],
    timezone: Annotated[Optional[str], typer.Option("--timezone", "-t", help="IANA timezone")] = None,
    exclude_holidays: Annotated[bool, typer.Option("--exclude-holidays", help="Skip common US holidays.")] = False,
    config_file: ConfigOption = None,
):
    """
    Count business days between two dates (both inclusive).
    """
    _emit(lambda: _build_service(_load_config(config_file)).business_days(start, end, timezone, exclude_holidays))


@app.command()
def overlap(
    teams: Annotated[List[str], typer.Argument(help="Teams as NAME@TIMEZONE[=HH:MM-HH:MM]")],
    reference_timezone: Annotated[Optional[str], typer.Option("--reference-timezone", "-r", help="Timezone for the results")] = None,
    date: Annotated[Optional[str], typer.Option("--date", help="Reference date. Defaults to today.")] = None,
    config_file: ConfigOption = None,
):
    """
    Calculate working-hours overlap between teams in different timezones.

    Examples:

        tztoolkit overlap nyc@America/New_York=09:00-17:00 ldn@Europe/London
    """
    def build():
        config = _load_config(config_file)
        parsed = [_parse_team(team, config) for team in teams]
        return _build_service(config).working_hours_overlap(parsed, reference_timezone, date)

    _emit(build)


@app.command()
def slots(
    participants: Annotated[List[str], typer.Argument(help="Participants as NAME@TIMEZONE")],
    date: Annotated[Optional[str], typer.Option("--date", help="Meeting date. Defaults to today.")] = None,
    duration: Annotated[Optional[int], typer.Option("--duration", "-d", help="Meeting duration in minutes")] = None,
    start_hour: Annotated[Optional[int], typer.Option("--start-hour", help="Earliest local hour")] = None,
    end_hour: Annotated[Optional[int], typer.Option("--end-hour", help="Latest local hour")] = None,
    fit: Annotated[Optional[SlotFit], typer.Option("--fit", help="contain or overlap")] = None,
    config_file: ConfigOption = None,
):
    """
    Find meeting slots that work for every participant.

    Examples:

        tztoolkit slots alice@America/New_York bob@Europe/Berlin --duration 30
    """
    def build():
        config = _load_config(config_file)
        defaults = config.defaults
        return _build_service(config, fit).find_meeting_times(
            [_parse_participant(p) for p in participants],
            date=date,
            duration=duration if duration is not None else defaults.duration_minutes,
            start_hour=start_hour if start_hour is not None else defaults.start_hour,
            end_hour=end_hour if end_hour is not None else defaults.end_hour,
        )

    _emit(build)


@app.command()
def holiday(
    date: Annotated[str, typer.Argument(help="Date to check")],
    timezone: Annotated[Optional[str], typer.Option("--timezone", "-t", help="IANA timezone")] = None,
    config_file: ConfigOption = None,
):
    """
    Check a date against US holidays and configured custom holidays.
    """
    _emit(lambda: _build_service(_load_config(config_file)).check_holiday(date, timezone))


@app.command()
def holidays(
    start: Annotated[str, typer.Argument(help="Start date")],
    end: Annotated[str, typer.Argument(help="End date")],
    timezone: Annotated[Optional[str], typer.Option("--timezone", "-t", help="IANA timezone")] = None,
    config_file: ConfigOption = None,
):
    """
    List US and custom holidays between two dates.
    """
    _emit(lambda: _build_service(_load_config(config_file)).holidays_in_range(start, end, timezone))


@app.command()
def sun(
    latitude: Annotated[float, typer.Option("--lat", help="Latitude in degrees north")],
    longitude: Annotated[float, typer.Option("--lon", help="Longitude in degrees east")],
    date: Annotated[Optional[str], typer.Option("--date", help="Date. Defaults to today.")] = None,
    timezone: Annotated[Optional[str], typer.Option("--timezone", "-t", help="IANA timezone for the times")] = None,
    config_file: ConfigOption = None,
):
    """
    Show sunrise, sunset and twilight times for a location.

    Examples:

        tztoolkit sun --lat 52.52 --lon 13.40 --date 2025-06-21 -t Europe/Berlin
    """
    def build():
        config = _load_config(config_file)
        return AstronomyService(AstralEphemeris()).sunrise_sunset(
            date, latitude, longitude, timezone or config.timezone
        )

    _emit(build)


@app.command()
def moon(
    date: Annotated[Optional[str], typer.Option("--date", help="Date. Defaults to today.")] = None,
    timezone: Annotated[Optional[str], typer.Option("--timezone", "-t", help="IANA timezone")] = None,
    config_file: ConfigOption = None,
):
    """
    Show the moon phase and illuminated fraction for a date.
    """
    def build():
        config = _load_config(config_file)
        return AstronomyService(AstralEphemeris()).moon_phase(date, timezone or config.timezone)

    _emit(build)


@app.command()
def version():
    """
    Show version information.
    """
    from .. import __version__
    console.print(f"\n[bold cyan]tztoolkit[/bold cyan] version [bold]{__version__}[/bold]\n")


if __name__ == "__main__":
    app()
