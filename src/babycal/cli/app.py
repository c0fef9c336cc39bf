"""Command-line interface for babycal."""

import logging
import sys
from collections.abc import Callable
from pathlib import Path
from typing import Any, NoReturn, TypeVar

import click
import questionary
import yaml
from pydantic import ValidationError
from rich.console import Console

from babycal.age_service import compute_age_info
from babycal.cli import elements
from babycal.config import (
    ConfigError,
    create_default_config,
    get_config_path,
)
from babycal.config import (
    load_settings as config_load_settings,
)
from babycal.dates import InvalidDateFormat, anchor_month, parse_strict, today
from babycal.graph import GraphPeriod, build_buckets
from babycal.grid import build_month_view
from babycal.models import Achievement, Settings
from babycal.storage import AchievementStore, StoreError, export_json
from babycal.utils.env import get_cache_dir
from babycal.utils.logging import level_from_env, setup_logging

logger = logging.getLogger(__name__)

F = TypeVar("F", bound=Callable[..., Any])

LOG_FILE_NAME = "babycal.log"


def date_option(f: F) -> F:
    """Shared --date option decorator."""
    return click.option(
        "--date", "day", help="Day to use (YYYY-MM-DD, default: today)"
    )(f)


def output_format_option(*choices: str) -> Callable[[F], F]:
    """Shared --format option decorator (first choice is the default)."""

    def decorator(f: F) -> F:
        return click.option(
            "--format",
            "output_format",
            type=click.Choice(list(choices), case_sensitive=False),
            default=choices[0],
            help=f"Output format (default: {choices[0]})",
        )(f)

    return decorator


def _get_log_file() -> Path:
    """Get the path to the log file."""
    return get_cache_dir() / LOG_FILE_NAME


def _setup_logging() -> None:
    """Setup logging to user's cache directory.

    Truncates log file on each run to keep it manageable.
    """
    log_file = _get_log_file()
    log_file.parent.mkdir(parents=True, exist_ok=True)
    setup_logging(log_file, level=level_from_env())


def _fail(message: str, hint: str | None = None) -> NoReturn:
    click.secho(message, fg="red", err=True)
    if hint:
        click.echo(hint, err=True)
    sys.exit(1)


def _open_store(settings: Settings) -> AchievementStore:
    store = AchievementStore(settings.storage.get_achievements_path())
    store.load()
    return store


@click.group()
@click.version_option(package_name="babycal")
def cli() -> None:
    """babycal - baby age calendar with corrected age and achievement log."""


@cli.command()
@date_option
@output_format_option("text", "json")
def age(day: str | None, output_format: str) -> None:
    """Show the age (and corrected age) on a day."""
    try:
        settings = config_load_settings()
        target = parse_strict(day) if day else today()
        info = compute_age_info(settings.to_age_settings(), target)
    except ConfigError as e:
        _fail(f"Configuration error: {e}")
    except InvalidDateFormat as e:
        _fail(f"Error: {e}")

    if output_format == "json":
        click.echo(elements.format_age_info_json(target, info))
        return
    elements.display_age_info(
        Console(),
        target,
        info,
        show_days_since_birth=settings.display.show_days_since_birth,
    )


@cli.command()
@click.option("--month", help="Month to display (YYYY-MM, default: current month)")
def calendar(month: str | None) -> None:
    """Show a month calendar with ages and achievement counts."""
    try:
        settings = config_load_settings()
        current = today()
        anchor = anchor_month(month, current)
        store = _open_store(settings)
        view = build_month_view(
            anchor,
            settings.to_age_settings(),
            store.counts_by_day(f"{anchor:%Y-%m}"),
            today=current,
        )
    except ConfigError as e:
        _fail(f"Configuration error: {e}")
    except StoreError as e:
        _fail(f"Store error: {e}")
    except InvalidDateFormat as e:
        _fail(f"Error: {e}")

    elements.display_calendar(Console(), view, title=settings.profile.name)


@cli.command()
@click.option(
    "--period",
    type=click.Choice([p.value for p in GraphPeriod], case_sensitive=False),
    default=GraphPeriod.ONE_YEAR.value,
    help="Range of the graph (default: 1y)",
)
@output_format_option("table", "json")
def graph(period: str, output_format: str) -> None:
    """Show cumulative achievements by month (or year) of age."""
    try:
        settings = config_load_settings()
        profile = settings.profile
        if profile.birth_date is None:
            _fail(
                "No birth date configured.",
                "Run 'babycal config' to set the birth date.",
            )
        store = _open_store(settings)
        result = build_buckets(
            period,
            profile.birth_date,
            profile.due_date,
            settings.display.enable_premature_display,
            store.graph_records(),
        )
    except ConfigError as e:
        _fail(f"Configuration error: {e}")
    except StoreError as e:
        _fail(f"Store error: {e}")

    if output_format == "json":
        click.echo(elements.format_graph_json(result))
        return
    elements.display_graph(Console(), result, period)


@cli.command()
@date_option
@click.option(
    "--type",
    "achievement_type",
    type=click.Choice(["did", "tried"]),
    default="did",
    help="'did' for accomplished, 'tried' for attempted (default: did)",
)
@click.option("--title", required=True, help="Short description")
@click.option("--memo", help="Optional note")
def add(day: str | None, achievement_type: str, title: str, memo: str | None) -> None:
    """Record an achievement."""
    try:
        settings = config_load_settings()
        store = _open_store(settings)
        achievement = Achievement(
            date=parse_strict(day) if day else today(),
            type=achievement_type,
            title=title,
            memo=memo or None,
        )
        stored = store.upsert(achievement)
        store.save()
    except ConfigError as e:
        _fail(f"Configuration error: {e}")
    except StoreError as e:
        _fail(f"Store error: {e}")
    except InvalidDateFormat as e:
        _fail(f"Error: {e}")
    except ValidationError as e:
        _fail(f"Invalid achievement: {e}")

    click.secho(
        f"✓ Recorded '{stored.title}' on {stored.date.isoformat()} ({stored.id})",
        fg="green",
    )


@cli.command(name="list")
@click.option("--date", "day", help="Show a single day (YYYY-MM-DD)")
@click.option("--month", help="Show a single month (YYYY-MM)")
@output_format_option("table", "json", "yaml")
def list_cmd(day: str | None, month: str | None, output_format: str) -> None:
    """List recorded achievements."""
    if day and month:
        _fail("Use either --date or --month, not both.")

    try:
        settings = config_load_settings()
        store = _open_store(settings)
        achievements = store.get_all()
        if day:
            key = parse_strict(day).isoformat()
            achievements = {key: achievements[key]} if key in achievements else {}
        elif month:
            keys = store.counts_by_day(month)
            achievements = {key: achievements[key] for key in keys}
    except ConfigError as e:
        _fail(f"Configuration error: {e}")
    except StoreError as e:
        _fail(f"Store error: {e}")
    except InvalidDateFormat as e:
        _fail(f"Error: {e}")

    if not achievements:
        click.secho("No achievements found.", fg="yellow")
        return

    if output_format == "json":
        click.echo(elements.format_achievements_json(achievements))
    elif output_format == "yaml":
        click.echo(elements.format_achievements_yaml(achievements))
    else:  # table
        elements.display_achievements_table(Console(), achievements)


@cli.command()
@click.argument("achievement_id")
@click.option("--date", "day", help="Day of the achievement (default: looked up)")
def remove(achievement_id: str, day: str | None) -> None:
    """Remove an achievement by id."""
    try:
        settings = config_load_settings()
        store = _open_store(settings)
        if day is None:
            found = store.find(achievement_id)
            if found is None:
                _fail(f"No achievement found with id {achievement_id}")
            target = found.date
        else:
            target = parse_strict(day)

        if not store.delete(achievement_id, target):
            _fail(f"No achievement {achievement_id} on {target.isoformat()}")
        store.save()
    except ConfigError as e:
        _fail(f"Configuration error: {e}")
    except StoreError as e:
        _fail(f"Store error: {e}")
    except InvalidDateFormat as e:
        _fail(f"Error: {e}")

    click.secho(f"✓ Removed {achievement_id}", fg="green")


@cli.command()
@click.option(
    "--output-dir",
    type=click.Path(file_okay=False),
    default=".",
    help="Directory to write the export to (default: current directory)",
)
def export(output_dir: str) -> None:
    """Export the profile and all achievements to a JSON file."""
    try:
        settings = config_load_settings()
        store = _open_store(settings)
        output_path = export_json(settings, store, Path(output_dir))
    except ConfigError as e:
        _fail(f"Configuration error: {e}")
    except StoreError as e:
        _fail(f"Store error: {e}")

    click.secho(f"✓ Exported to {output_path}", fg="green")


@cli.command()
@click.option("--path", is_flag=True, help="Show path to the achievements file")
def store(path: bool) -> None:
    """Show achievement store statistics."""
    try:
        settings = config_load_settings()
        store_path = settings.storage.get_achievements_path()
        if path:
            click.echo(str(store_path))
            return
        achievement_store = AchievementStore(store_path)
        achievement_store.load()
        stats = achievement_store.stats()
    except ConfigError as e:
        _fail(f"Configuration error: {e}")
    except StoreError as e:
        _fail(f"Store error: {e}")

    elements.display_store_stats(Console(), stats)


@cli.command()
@click.option("--show", is_flag=True, help="Display current configuration")
@click.option("--validate", is_flag=True, help="Validate current configuration")
@click.option("--path", is_flag=True, help="Show path to configuration file")
def config(show: bool, validate: bool, path: bool) -> None:
    """Configure babycal settings interactively."""
    config_path = get_config_path()

    # Handle --path flag
    if path:
        click.echo(str(config_path))
        return

    # Handle --show flag
    if show:
        try:
            settings = config_load_settings()
            yaml_str = yaml.safe_dump(
                settings.model_dump(mode="json"),
                default_flow_style=False,
                sort_keys=False,
                indent=2,
                allow_unicode=True,
            )
            click.echo(yaml_str)
        except ConfigError as e:
            _fail(f"Error: {e}")
        return

    # Handle --validate flag
    if validate:
        try:
            config_load_settings()
            click.secho("✓ Configuration is valid", fg="green")
            click.echo(f"Configuration file: {config_path}")
        except ConfigError as e:
            click.secho("✗ Configuration is invalid", fg="red", err=True)
            _fail(f"Error: {e}")
        return

    # No flags - run interactive configuration wizard
    try:
        if config_path.exists():
            click.echo(f"Configuration file already exists at: {config_path}")
            overwrite = questionary.confirm(
                "Do you want to update it?",
                default=True,
            ).unsafe_ask()
            if not overwrite:
                click.echo("Configuration not changed.")
                return

        create_default_config(interactive=True)
        click.secho("\n✓ Configuration created successfully!", fg="green")
    except ConfigError as e:
        _fail(f"Error: {e}")
    except KeyboardInterrupt:
        click.echo("\n\nConfiguration cancelled.")
        sys.exit(1)


def main() -> None:
    """Main entry point for the CLI.

    Sets up logging and provides a generic catch-all error handler
    for unexpected errors.
    """
    _setup_logging()
    try:
        cli()
    except Exception:
        # Log the full traceback to the log file (details only in log)
        logger.exception("Fatal error occurred")

        click.secho(
            "\nFatal error occurred.",
            fg="red",
            err=True,
        )
        click.secho(
            f"Check logs for details: {_get_log_file()}",
            fg="yellow",
            err=True,
        )

        sys.exit(1)


if __name__ == "__main__":
    main()
