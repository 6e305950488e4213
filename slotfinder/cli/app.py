"""
Main CLI application using Typer.
"""

import logging
import re
from pathlib import Path
from typing import Annotated, Optional

import pendulum
import typer
from pendulum import DateTime
from rich.console import Console
from rich.logging import RichHandler
from rich.table import Table

from ..adapters.json_calendar import JsonCalendarSource
from ..config import TimeSlotsConfiguration, get_default_config_path
from ..domain.availability import validate_configuration
from ..domain.exceptions import TimeSlotsFinderError
from ..services.timeslot_finder import TimeSlotsFinderService

app = typer.Typer(
    name="slotfinder",
    help="Find bookable appointment slots from weekly availability and busy periods",
    add_completion=False
)

console = Console()

DATE_FORMAT = "YYYY-MM-DD"
DATE_PATTERN = re.compile(r"\d{4}-\d{2}-\d{2}")


def _configure_logging(verbose: bool) -> None:
    if verbose:
        logging.basicConfig(
            level=logging.DEBUG,
            format="%(message)s",
            handlers=[RichHandler(console=console, show_path=False)],
        )


def _load_configuration(config_file: Optional[Path]) -> TimeSlotsConfiguration:
    config_path = config_file or get_default_config_path()
    return TimeSlotsConfiguration.load_from_yaml(config_path)


def _parse_moment(value: str, tz: str, *, end_of_day: bool = False) -> DateTime:
    """
    Parse a command line date.

    Plain dates (YYYY-MM-DD) expand to the start of the day, or to its end
    for the upper bound; anything else is read as an ISO 8601 datetime.
    """
    if not DATE_PATTERN.fullmatch(value):
        return pendulum.parse(value, tz=tz)
    day = pendulum.from_format(value, DATE_FORMAT, tz=tz)
    return day.end_of("day") if end_of_day else day.start_of("day")


@app.command()
def find(
    config_file: Annotated[Optional[Path], typer.Option("--config", "-c", help="Path to config file. Defaults to ./slotfinder.yaml")] = None,
    start: Annotated[Optional[str], typer.Option("--from", help="Start of the search (YYYY-MM-DD or ISO datetime). Defaults to now.")] = None,
    end: Annotated[Optional[str], typer.Option("--to", help="End of the search (YYYY-MM-DD or ISO datetime). Defaults to 7 days after the start.")] = None,
    busy_file: Annotated[Optional[Path], typer.Option("--busy", "-b", help="JSON file with additional busy periods")] = None,
    now_option: Annotated[Optional[str], typer.Option("--now", help="Pretend the current time is this ISO datetime")] = None,
    verbose: Annotated[bool, typer.Option("--verbose", "-v", help="Show debug logging")] = False,
):
    """
    Find bookable slots.

    Examples:

        slotfinder find --from 2020-10-16 --to 2020-10-17

        slotfinder find -c slotfinder.yaml --busy busy.json --from 2020-10-16
    """
    _configure_logging(verbose)

    try:
        config = _load_configuration(config_file)
        tz = config.time_zone

        now = _parse_moment(now_option, tz) if now_option else pendulum.now(tz)
        search_start = _parse_moment(start, tz) if start else now
        search_end = (
            _parse_moment(end, tz, end_of_day=True)
            if end
            else search_start.add(days=7).end_of("day")
        )

        calendar_source = JsonCalendarSource(busy_file) if busy_file else None
        service = TimeSlotsFinderService(calendar_source=calendar_source)

        result = service.find_slots(
            configuration=config,
            from_=search_start,
            to=search_end,
            now=now,
        )
    except (FileNotFoundError, TimeSlotsFinderError, ValueError) as e:
        console.print(f"[bold red]Error:[/bold red] {e}")
        raise typer.Exit(1)

    boundaries = result.boundaries
    console.print(
        f"[bold cyan]Search window:[/bold cyan] "
        f"{boundaries.first_from.format('YYYY-MM-DD HH:mm')} - "
        f"{boundaries.last_to.format('YYYY-MM-DD HH:mm')} ({tz})"
    )
    if result.index.dropped:
        console.print(
            f"[yellow]Ignored {result.index.dropped} busy period(s) "
            f"({result.index.malformed} malformed, {result.index.out_of_window} outside the window)[/yellow]"
        )

    if not result.slots:
        console.print("[yellow]No bookable slots found.[/yellow]")
        return

    table = Table(
        title=f"{len(result.slots)} bookable slot(s)",
        show_header=True,
        header_style="bold cyan"
    )
    table.add_column("Day", style="bold yellow")
    table.add_column("Start")
    table.add_column("End")
    table.add_column("Minutes", justify="right", style="dim")

    for slot in result.slots:
        table.add_row(
            slot.start_at.format("ddd YYYY-MM-DD"),
            slot.start_at.format("HH:mm"),
            slot.end_at.format("HH:mm"),
            str(slot.duration),
        )

    console.print(table)


@app.command()
def validate(
    config_file: Optional[Path] = typer.Option(
        None,
        "--config", "-c",
        help="Path to config file"
    )
):
    """
    Validate a configuration file.
    """
    try:
        config = _load_configuration(config_file)
        validate_configuration(config)
    except (FileNotFoundError, TimeSlotsFinderError, ValueError) as e:
        console.print(f"[bold red]✗ Invalid:[/bold red] {e}")
        raise typer.Exit(1)

    console.print("[green]✓ Configuration is valid.[/green]")


@app.command()
def version():
    """
    Show version information.
    """
    from .. import __version__
    console.print(f"\n[bold cyan]slotfinder[/bold cyan] version [bold]{__version__}[/bold]\n")


if __name__ == "__main__":
    app()
