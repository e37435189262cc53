"""Run an export job end to end and write the resulting feeds."""

import logging
import os
import stat
import tempfile
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, List, Optional, Union

from timetree_exporter.config.constants import DEFAULT_PROD_VERSION
from timetree_exporter.config.settings import ExportJob
from timetree_exporter.core.api_client import TimeTreeClient
from timetree_exporter.core.calendar_resolver import ResolvedCalendar, resolve_calendar
from timetree_exporter.core.event_model import TimeTreeEvent
from timetree_exporter.core.ics_builder import build_ics

logger = logging.getLogger(__name__)


@dataclass
class ExportResult:
    """Outcome of a successful export."""
    job_id: str
    calendar: ResolvedCalendar
    event_count: int
    birthday_count: int
    memo_count: int
    written: Dict[str, Path] = field(default_factory=dict)


def _published_mode(target: Path) -> int:
    """Mode for a feed file: keep an existing file's mode, else honour the umask."""
    try:
        return stat.S_IMODE(target.stat().st_mode)
    except FileNotFoundError:
        umask = os.umask(0)
        os.umask(umask)
        return 0o666 & ~umask


def write_feed(path: Union[str, Path], content: str) -> Path:
    """Atomically write feed text to ``path``.

    The content goes to a temporary file in the target directory which then
    replaces the destination, so readers never see a partial feed. The file
    gets regular publish permissions rather than mkstemp's private 0600.
    Characters that cannot be encoded as UTF-8 are replaced.

    Args:
        path: Destination file.
        content: Feed text; line endings are written as-is.

    Returns:
        The destination path.
    """
    target = Path(path)
    target.parent.mkdir(parents=True, exist_ok=True)
    mode = _published_mode(target)

    fd, tmp_name = tempfile.mkstemp(dir=str(target.parent), prefix=f".{target.name}.", suffix=".tmp")
    try:
        with os.fdopen(fd, "w", encoding="utf-8", errors="replace", newline="") as handle:
            handle.write(content)
        os.chmod(tmp_name, mode)
        os.replace(tmp_name, target)
    except BaseException:
        try:
            os.unlink(tmp_name)
        except OSError:
            pass
        raise

    logger.info("Wrote %s (%d characters)", target, len(content))
    return target


def _is_memo_only(event: TimeTreeEvent) -> bool:
    return event.is_memo and not event.is_birthday


def build_feeds(
    events: List[TimeTreeEvent],
    job: ExportJob,
    prod_version: str = DEFAULT_PROD_VERSION,
) -> Dict[str, str]:
    """Build the main feed plus any birthday-only or memo-only feeds the job asks for.

    Returns:
        Mapping of feed kind (``"main"``, ``"birthdays"``, ``"memos"``) to text.
    """
    feeds = {
        "main": build_ics(
            events,
            prod_version,
            include_birthdays=job.include_birthdays,
            include_memos=job.include_memos,
        )
    }

    if job.birthdays_output:
        birthdays = [event for event in events if event.is_birthday]
        feeds["birthdays"] = build_ics(birthdays, prod_version, include_birthdays=True, include_memos=True)

    if job.memos_output:
        memos = [event for event in events if _is_memo_only(event)]
        feeds["memos"] = build_ics(memos, prod_version, include_memos=True)

    return feeds


def run_export(
    job: ExportJob,
    client: Optional[TimeTreeClient] = None,
    prod_version: str = DEFAULT_PROD_VERSION,
) -> ExportResult:
    """Sign in, fetch the chosen calendar and write its feeds.

    Args:
        job: What to export and where.
        client: Optional API client; one is created (and closed) if omitted.
        prod_version: Version string for the PRODID line.

    Returns:
        An ExportResult describing what was written.

    Raises:
        TimeTreeError: Any API failure; nothing is written in that case.
    """
    owns_client = client is None
    client = client or TimeTreeClient()
    try:
        session_id = client.login(job.email, job.password)
        calendar = resolve_calendar(client, session_id, job.calendar_code)
        logger.info(
            "Exporting calendar '%s' (%s) for job '%s'",
            calendar.calendar_name, calendar.alias_code, job.job_id,
        )
        events = client.fetch_events(session_id, calendar.calendar_id, calendar.calendar_name)
    finally:
        if owns_client:
            client.close()

    feeds = build_feeds(events, job, prod_version)
    targets = {
        "main": job.output_path,
        "birthdays": job.birthdays_output,
        "memos": job.memos_output,
    }
    written = {kind: write_feed(targets[kind], text) for kind, text in feeds.items()}

    return ExportResult(
        job_id=job.job_id,
        calendar=calendar,
        event_count=len(events),
        birthday_count=sum(1 for event in events if event.is_birthday),
        memo_count=sum(1 for event in events if _is_memo_only(event)),
        written=written,
    )
