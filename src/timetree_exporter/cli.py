"""Command line interface for TimeTree exporter."""

import logging
import sys

import click

from timetree_exporter import __version__
from timetree_exporter.config.constants import DEFAULT_PROD_VERSION
from timetree_exporter.config.settings import APIConfig, load_export_job, read_environment
from timetree_exporter.core.api_client import TimeTreeClient
from timetree_exporter.core.calendar_resolver import select_calendar
from timetree_exporter.core.exporter import run_export
from timetree_exporter.exceptions.errors import TimeTreeError
from timetree_exporter.storage.credentials import save_password

logger = logging.getLogger(__name__)


@click.group()
@click.version_option(__version__, prog_name="timetree-exporter")
@click.option("--verbose", "-v", is_flag=True, default=False, help="Enable debug logging")
def main(verbose: bool):
    """Export TimeTree calendars as iCalendar feeds."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
    )


@main.command("export")
@click.option("--email", default=None, help="TimeTree account email (or TIMETREE_EMAIL)")
@click.option("--calendar-code", default=None, help="Alias code of the calendar to export")
@click.option("--output", "output_path", default=None, type=click.Path(dir_okay=False), help="Main feed path")
@click.option("--birthdays-output", default=None, type=click.Path(dir_okay=False), help="Write a birthdays-only feed here")
@click.option("--memos-output", default=None, type=click.Path(dir_okay=False), help="Write a memos-only feed here")
@click.option("--include-birthdays/--no-include-birthdays", default=None, help="Keep birthday events in the main feed")
@click.option("--include-memos/--no-include-memos", default=None, help="Keep memo events in the main feed")
@click.option("--env-file", default=None, type=click.Path(exists=True, dir_okay=False), help="Read settings from this .env file")
@click.option("--prod-version", default=DEFAULT_PROD_VERSION, show_default=True, help="Version string for the PRODID line")
def export_command(email, calendar_code, output_path, birthdays_output, memos_output,
                   include_birthdays, include_memos, env_file, prod_version):
    """Fetch a calendar and write its feed(s)."""
    try:
        job = load_export_job(
            env_file=env_file,
            email=email,
            calendar_code=calendar_code,
            output_path=output_path,
            birthdays_output=birthdays_output,
            memos_output=memos_output,
            include_birthdays=include_birthdays,
            include_memos=include_memos,
        )
        with TimeTreeClient(APIConfig.from_env(read_environment(env_file))) as client:
            result = run_export(job, client=client, prod_version=prod_version)
    except TimeTreeError as e:
        click.echo(f"Export failed: {e}", err=True)
        sys.exit(1)

    click.echo(
        f"Exported {result.event_count} event(s) from '{result.calendar.calendar_name}' "
        f"({result.birthday_count} birthdays, {result.memo_count} memos)"
    )
    for kind, path in result.written.items():
        click.echo(f"  {kind}: {path}")


@main.command("calendars")
@click.option("--email", default=None, help="TimeTree account email (or TIMETREE_EMAIL)")
@click.option("--calendar-code", default=None, help="Alias code to mark as selected")
@click.option("--env-file", default=None, type=click.Path(exists=True, dir_okay=False), help="Read settings from this .env file")
def calendars_command(email, calendar_code, env_file):
    """List active calendars; '*' marks the one an export would use."""
    try:
        job = load_export_job(env_file=env_file, email=email, calendar_code=calendar_code)
        with TimeTreeClient(APIConfig.from_env(read_environment(env_file))) as client:
            session_id = client.login(job.email, job.password)
            calendars = client.fetch_calendars(session_id)
        selected = select_calendar(calendars, job.calendar_code)
    except TimeTreeError as e:
        click.echo(f"Could not list calendars: {e}", err=True)
        sys.exit(1)

    for calendar in calendars:
        marker = "*" if calendar.id == selected.calendar_id else " "
        click.echo(f"{marker} {calendar.alias_code}\t{calendar.id}\t{calendar.name}")


@main.command("set-password")
@click.option("--email", required=True, help="TimeTree account email")
@click.password_option("--password", help="TimeTree account password")
def set_password_command(email, password):
    """Store the account password in the OS keyring (or the user config .env)."""
    location = save_password(email, password)
    click.echo(f"Password saved to {location}")


if __name__ == "__main__":
    main()
