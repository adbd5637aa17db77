"""Command-line interface for groupslots."""

from __future__ import annotations

import json
import logging
import sys
from pathlib import Path
from typing import Any

import click
from rich.console import Console
from rich.logging import RichHandler
from rich.table import Table

from groupslots import __version__
from groupslots.constants import (
    DAY_END,
    DAY_START,
    DEFAULT_MIN_DURATION,
    DEFAULT_PERSON_NAME_PREFIX,
    SCHEDULE_FILE_SUFFIXES,
)
from groupslots.models import Interval, Person, ScheduleResult
from groupslots.pipeline import GroupScheduler, SchedulerConfig
from groupslots.schedule_file import load_group_request
from groupslots.timefmt import TimeFormatError, format_hhmm, format_interval, parse_interval

DEFAULT_OUTPUT_WIDTH = 120
MIN_OUTPUT_WIDTH = 60
NO_SLOTS_MESSAGE = "No common free slots."

console = Console(width=DEFAULT_OUTPUT_WIDTH)
error_console = console


class _GroupslotsLogFilter(logging.Filter):
    """Filter log records so non-groupslots INFO chatter is hidden by default."""

    def __init__(self, *, include_external_info: bool) -> None:
        """Create a log filter configured for CLI verbosity.

        :param include_external_info: Allow external INFO logs through.
        """
        super().__init__()
        self.include_external_info = include_external_info

    def filter(self, record: logging.LogRecord) -> bool:
        """Decide whether a log record should be emitted.

        :param record: Candidate log record.
        :return: ``False`` for INFO messages from non-groupslots modules.
        """
        if record.name.startswith("groupslots"):
            return True
        if self.include_external_info:
            return True
        return record.levelno >= logging.WARNING


def _set_console(output_width: int, *, machine_output: bool = False) -> None:
    """Set global consoles used by all rich output helpers.

    :param output_width: Width used for rich rendering.
    :param machine_output: Send error messages to stderr so stdout stays parseable.
    """
    global console, error_console
    console = Console(width=output_width)
    error_console = Console(stderr=True, soft_wrap=True) if machine_output else console


def setup_logging(verbose: bool = False, *, quiet: bool = False) -> None:
    """Configure logging with rich handler.

    :param verbose: Emit debug records.
    :param quiet: Only emit warnings, on stderr, so stdout stays machine readable.
    """
    if verbose:
        level = logging.DEBUG
    else:
        level = logging.WARNING if quiet else logging.INFO
    target = Console(stderr=True) if quiet else console
    handler = RichHandler(console=target, show_time=False, show_path=False)
    handler.addFilter(_GroupslotsLogFilter(include_external_info=verbose))
    logging.basicConfig(
        level=level,
        format="%(message)s",
        handlers=[handler],
        force=True,
    )


class TimeRangeParamType(click.ParamType):
    """Click parameter type for ``HH:MM-HH:MM`` ranges."""

    name = "time_range"

    def convert(
        self, value: Any, param: click.Parameter | None, ctx: click.Context | None
    ) -> Interval:
        if isinstance(value, Interval):
            return value
        try:
            return parse_interval(value)
        except TimeFormatError as exc:
            self.fail(str(exc), param, ctx)


TIME_RANGE = TimeRangeParamType()


def _validate_duration(
    _ctx: click.Context, _param: click.Parameter, value: int | None
) -> int | None:
    """Validate an optional minimum duration.

    :param _ctx: Click callback context (unused).
    :param _param: Click callback parameter metadata (unused).
    :param value: Candidate duration in minutes.
    :return: Value if it is ``None`` or ``>= 0``.
    :raises click.BadParameter: When value is negative.
    """
    if value is None:
        return None
    if value < 0:
        raise click.BadParameter("must be >= 0")
    return value


def _validate_output_width(_ctx: click.Context, _param: click.Parameter, value: int) -> int:
    """Validate output width for rich table rendering.

    :param _ctx: Click callback context (unused).
    :param _param: Click callback parameter metadata (unused).
    :param value: Desired output width.
    :return: Value if it meets the minimum width.
    :raises click.BadParameter: When value is below the minimum width.
    """
    if value < MIN_OUTPUT_WIDTH:
        raise click.BadParameter(f"must be >= {MIN_OUTPUT_WIDTH}")
    return value


def _resolve_duration(option_value: int | None, file_value: int | None) -> int:
    """Pick the minimum duration: command line, then schedule file, then default."""
    if option_value is not None:
        return option_value
    if file_value is not None:
        return file_value
    return DEFAULT_MIN_DURATION


def _person_label(person: Person, index: int) -> str:
    """Return a display name for a person.

    :param person: Group member.
    :param index: Zero-based position in the group.
    :return: The person's name, or ``person-<n>`` when unnamed.
    """
    return person.name or f"{DEFAULT_PERSON_NAME_PREFIX}-{index + 1}"


def _format_timeline(timeline: tuple[Interval, ...]) -> str:
    """Render a timeline as comma-separated ``[HH:MM, HH:MM]`` ranges.

    :param timeline: Sorted intervals.
    :return: Rendered ranges, or ``-`` for an empty timeline.
    """
    if not timeline:
        return "-"
    return ", ".join(format_interval(interval) for interval in timeline)


def print_summary(result: ScheduleResult) -> None:
    """Print a short summary of the scheduling request.

    :param result: Complete scheduling result.
    :return: ``None``.
    """
    console.print()

    summary = Table(title="Schedule Summary", show_header=False, box=None)
    summary.add_column(style="bold cyan", no_wrap=True)
    summary.add_column(style="white", no_wrap=True)

    summary.add_row("People", str(len(result.people)))
    summary.add_row("Minimum duration", f"{result.min_duration} min")
    if result.shared_window is None:
        summary.add_row("Shared active window", "none")
    else:
        summary.add_row("Shared active window", format_interval(result.shared_window))
    summary.add_row("Unavailable blocks", str(len(result.global_unavailable)))
    summary.add_row("Free slots", str(len(result.free_slots)))
    summary.add_row("Matching slots", str(len(result.slots)))

    console.print(summary)
    console.print()


def print_timelines(result: ScheduleResult) -> None:
    """Print each person's active window and unavailable timeline."""
    table = Table(title="Unavailable Time", show_header=True, header_style="bold")
    table.add_column("Person", style="cyan", no_wrap=True)
    table.add_column("Active", style="dim", no_wrap=True)
    table.add_column("Unavailable")

    for index, (person, timeline) in enumerate(zip(result.people, result.unavailable)):
        table.add_row(
            _person_label(person, index),
            format_interval(person.active),
            _format_timeline(timeline),
        )
    table.add_row("[bold]everyone[/bold]", "", _format_timeline(result.global_unavailable))

    console.print(table)
    console.print(f"[dim]Free before filtering: {_format_timeline(result.free_slots)}[/dim]")


def print_slots(result: ScheduleResult) -> None:
    """Print the matching slots as a table.

    :param result: Complete scheduling result.
    :return: ``None``.
    """
    if not result.has_slots:
        console.print(f"[yellow]{NO_SLOTS_MESSAGE}[/yellow]")
        return

    console.print(f"[bold yellow]Common free slots[/bold yellow] (>= {result.min_duration} min)")
    table = Table(show_header=True, header_style="bold")
    table.add_column("#", justify="right", no_wrap=True)
    table.add_column("Start", style="green", no_wrap=True)
    table.add_column("End", style="green", no_wrap=True)
    table.add_column("Minutes", justify="right", style="dim", no_wrap=True)

    for idx, slot in enumerate(result.slots, start=1):
        table.add_row(str(idx), format_hhmm(slot.start), format_hhmm(slot.end), str(slot.minutes))

    console.print(table)


def print_plain(result: ScheduleResult) -> None:
    """Print one ``[HH:MM, HH:MM]`` line per slot."""
    if not result.has_slots:
        click.echo(NO_SLOTS_MESSAGE)
        return
    for slot in result.slots:
        click.echo(format_interval(slot))


def _interval_to_dict(interval: Interval) -> dict[str, Any]:
    """Convert an interval to a JSON-serializable mapping.

    :param interval: Interval to convert.
    :return: Dictionary with text and minute bounds.
    """
    return {
        "start": format_hhmm(interval.start),
        "end": format_hhmm(interval.end),
        "start_minutes": interval.start,
        "end_minutes": interval.end,
        "minutes": interval.minutes,
    }


def print_result_json(result: ScheduleResult, *, show_all: bool) -> None:
    """Output a scheduling result as JSON.

    :param result: Complete scheduling result.
    :param show_all: Include per-person timelines and unfiltered free slots.
    :return: ``None``.
    """
    window = result.shared_window
    output: dict[str, Any] = {
        "summary": {
            "people": len(result.people),
            "min_duration": result.min_duration,
            "shared_window": None if window is None else _interval_to_dict(window),
            "free_slots": len(result.free_slots),
            "slots": len(result.slots),
            "total_minutes": result.total_free_minutes,
        },
        "slots": [_interval_to_dict(slot) for slot in result.slots],
    }
    if show_all:
        output["people"] = [
            {
                "name": _person_label(person, index),
                "active": _interval_to_dict(person.active),
                "unavailable": [_interval_to_dict(interval) for interval in timeline],
            }
            for index, (person, timeline) in enumerate(zip(result.people, result.unavailable))
        ]
        output["global_unavailable"] = [
            _interval_to_dict(interval) for interval in result.global_unavailable
        ]
        output["free_slots"] = [_interval_to_dict(interval) for interval in result.free_slots]

    print(json.dumps(output, indent=2, sort_keys=True))


def render_result(result: ScheduleResult, *, as_json: bool, plain: bool, show_all: bool) -> None:
    """Render a result in the requested output mode."""
    if as_json:
        print_result_json(result, show_all=show_all)
    elif plain:
        print_plain(result)
    else:
        print_summary(result)
        if show_all:
            print_timelines(result)
        print_slots(result)


def _schedule(people: tuple[Person, ...], min_duration: int, *, verbose: bool) -> ScheduleResult:
    """Run the scheduler, turning input errors into a CLI exit.

    :param people: Group members.
    :param min_duration: Minimum slot length in minutes.
    :param verbose: Print the traceback on failure.
    :return: Complete scheduling result.
    """
    try:
        scheduler = GroupScheduler(SchedulerConfig(min_duration=min_duration))
        return scheduler.find(people)
    except ValueError as exc:
        error_console.print(f"[red]Error during scheduling:[/red] {exc}")
        if verbose:
            error_console.print_exception()
        raise click.exceptions.Exit(1) from exc


@click.group(context_settings={"help_option_names": ["-h", "--help"]})
@click.version_option(__version__, prog_name="groupslots")
def cli() -> None:
    """Find the time slots in which everyone in a group is free."""


_output_options = [
    click.option(
        "-d",
        "--duration",
        type=int,
        default=None,
        callback=_validate_duration,
        help="Minimum slot length in minutes (overrides the schedule file)",
    ),
    click.option("--json", "as_json", is_flag=True, help="Output JSON instead of rich tables"),
    click.option("--plain", is_flag=True, help="Print one [HH:MM, HH:MM] line per slot"),
    click.option(
        "--show-all",
        is_flag=True,
        help="Also show per-person unavailable time and unfiltered free slots",
    ),
    click.option("--verbose", "-v", is_flag=True, help="Verbose logging"),
    click.option(
        "--output-width",
        type=int,
        default=DEFAULT_OUTPUT_WIDTH,
        show_default=True,
        callback=_validate_output_width,
        help="Width used for rich terminal rendering",
    ),
]


def _add_output_options(func: Any) -> Any:
    """Attach shared output options to scheduling commands."""
    for option in reversed(_output_options):
        func = option(func)
    return func


@cli.command("find", help="Find common free slots for the group in a schedule file")
@click.argument("path", type=click.Path(path_type=Path))
@_add_output_options
def find_command(
    path: Path,
    duration: int | None,
    as_json: bool,
    plain: bool,
    show_all: bool,
    verbose: bool,
    output_width: int,
) -> None:
    """Load a schedule file and print the common free slots.

    :param path: ``.toml`` or ``.json`` schedule file.
    :param duration: Minimum slot length override.
    :param as_json: Output JSON instead of tables.
    :param plain: Output one line per slot.
    :param show_all: Include intermediate timelines.
    :param verbose: Enable debug-level logging.
    :param output_width: Width used for rich output.
    :return: ``None``.
    """
    if as_json and plain:
        raise click.UsageError("Cannot use both --json and --plain.")

    _set_console(output_width, machine_output=as_json or plain)
    setup_logging(verbose, quiet=as_json or plain)

    try:
        request = load_group_request(path)
    except FileNotFoundError as exc:
        error_console.print(f"[red]Error:[/red] {exc}")
        raise click.exceptions.Exit(1) from exc
    except (ValueError, OSError) as exc:
        error_console.print(f"[red]Error reading schedule:[/red] {exc}")
        if verbose:
            error_console.print_exception()
        raise click.exceptions.Exit(1) from exc

    result = _schedule(
        request.people,
        _resolve_duration(duration, request.min_duration),
        verbose=verbose,
    )
    render_result(result, as_json=as_json, plain=plain, show_all=show_all)


@cli.command("prompt", help="Enter the group's schedules interactively")
@_add_output_options
def prompt_command(
    duration: int | None,
    as_json: bool,
    plain: bool,
    show_all: bool,
    verbose: bool,
    output_width: int,
) -> None:
    """Ask for each person's active window and busy times, then print the slots.

    Ranges are entered as ``HH:MM-HH:MM``; invalid entries are asked again.
    """
    if as_json and plain:
        raise click.UsageError("Cannot use both --json and --plain.")

    _set_console(output_width, machine_output=as_json or plain)
    setup_logging(verbose, quiet=as_json or plain)

    count = click.prompt("Number of people", type=click.IntRange(min=0), err=as_json)
    people: list[Person] = []
    for index in range(count):
        label = f"{DEFAULT_PERSON_NAME_PREFIX}-{index + 1}"
        name = click.prompt(f"Name of {label}", default=label, err=as_json)
        active = click.prompt(f"Active window for {name}", type=TIME_RANGE, err=as_json)
        busy_count = click.prompt(
            f"Number of busy intervals for {name}",
            type=click.IntRange(min=0),
            default=0,
            err=as_json,
        )
        busy = tuple(
            click.prompt(f"  Busy interval {busy_index}", type=TIME_RANGE, err=as_json)
            for busy_index in range(1, busy_count + 1)
        )
        people.append(Person(active=active, busy=busy, name=name))

    if duration is None:
        duration = click.prompt(
            "Minimum duration (minutes)",
            type=click.IntRange(min=0),
            default=DEFAULT_MIN_DURATION,
            err=as_json,
        )

    result = _schedule(tuple(people), duration, verbose=verbose)
    render_result(result, as_json=as_json, plain=plain, show_all=show_all)


@cli.command("info", help="Print tool defaults")
def info_command() -> None:
    """Print version and default settings."""
    click.echo(f"groupslots {__version__}")
    click.echo(f"Day: {format_hhmm(DAY_START)}-{format_hhmm(DAY_END)}")
    click.echo(f"Default minimum duration: {DEFAULT_MIN_DURATION} min")
    click.echo(f"Schedule file types: {', '.join(SCHEDULE_FILE_SUFFIXES)}")
    click.echo(f"Default output width: {DEFAULT_OUTPUT_WIDTH}")
    click.echo("Run with --help for CLI usage")


def main() -> int:
    """CLI program entrypoint.

    :return: Process exit code from click dispatch.
    """
    argv = sys.argv[1:]

    try:
        result = cli.main(args=argv, prog_name="groupslots", standalone_mode=False)
        if isinstance(result, int):
            return result
    except click.exceptions.Exit as exc:
        return int(exc.exit_code)
    except click.ClickException as exc:
        exc.show()
        return exc.exit_code
    except click.Abort:
        click.echo("Aborted!", err=True)
        return 1

    return 0


if __name__ == "__main__":
    sys.exit(main())
