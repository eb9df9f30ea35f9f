"""
jcal - manage schedules and to-do lists from the command line.

Usage:
    jcal init
    jcal add "Title" ["Another title" ...] [-d -t "YYYY-MM-DD HH:mm" -c "content"]
    jcal list [--done | --all] [--date YYYY-MM-DD | --today | --tomorrow |
              --this-week | --next-week | --this-month | --next-month]
    jcal done <id>
    jcal remove <id>
    jcal update <id> [-T title] [-t "YYYY-MM-DD HH:mm"] [-c content]

Global options (before the command): --file PATH, --no-color, -v/--verbose, --version
"""

from __future__ import annotations

import argparse
import logging
from dataclasses import dataclass
from datetime import datetime
from typing import Callable, List, Optional

from . import __version__
from .errors import NotFoundError, ScheduleError
from .filters import ListQuery, filter_schedules, status_filter
from .models import ScheduleKind
from .render import Renderer
from .repositories import ScheduleRepository
from .schemas import build_update
from .settings import get_settings
from .store import JsonScheduleStore
from .utils import utc_now
from .windows import select_date_filter

logger = logging.getLogger(__name__)


@dataclass
class CommandContext:
    store: JsonScheduleStore
    renderer: Renderer
    clock: Callable[[], datetime]

    def repository(self) -> ScheduleRepository:
        return ScheduleRepository(self.store.load(), clock=self.clock)

    def persist(self, repo: ScheduleRepository) -> None:
        self.store.save(repo.to_document())


def cmd_init(args: argparse.Namespace, ctx: CommandContext) -> int:
    """Create an empty store unless one with schedules exists."""
    if ctx.store.init():
        ctx.renderer.success(f"{ctx.store.path.name} created successfully.")
    else:
        ctx.renderer.warning(f"{ctx.store.path.name} already exists and is not empty.")
    return 0


def cmd_add(args: argparse.Namespace, ctx: CommandContext) -> int:
    """Add one schedule per title; invalid titles are skipped."""
    kind = ScheduleKind.DETAILED if args.detailed else ScheduleKind.TODO
    time, content = args.time, args.content
    if kind == ScheduleKind.TODO and (time or content):
        ctx.renderer.warning("--time and --content only apply to detailed schedules (-d); ignoring them.")
        time = content = None

    repo = ctx.repository()
    result = repo.add_many(args.titles, kind=kind, time=time, content=content)

    for skipped in result.skipped:
        ctx.renderer.error(f"{skipped.error}. Skipping \"{skipped.title}\".")

    if not result.added:
        ctx.renderer.info("No schedules were added.", style="yellow")
        return 1

    ctx.persist(repo)
    ctx.renderer.success("Schedules added successfully!")
    for record in result.added:
        ctx.renderer.info(f"  - \"{record.title}\" (ID: {record.id})", style="green")
    return 0


def cmd_list(args: argparse.Namespace, ctx: CommandContext) -> int:
    """Print schedules matching the status and date filters, newest first."""
    query = ListQuery(
        status=status_filter(done=args.done, all_=args.all),
        date_filter=select_date_filter(
            date=args.date,
            today=args.today,
            tomorrow=args.tomorrow,
            this_week=args.this_week,
            next_week=args.next_week,
            this_month=args.this_month,
            next_month=args.next_month,
        ),
    )
    logger.debug("List query: %s", query)
    records = filter_schedules(ctx.store.load().schedules, query, now=ctx.clock())
    ctx.renderer.schedules(records)
    return 0


def cmd_done(args: argparse.Namespace, ctx: CommandContext) -> int:
    repo = ctx.repository()
    if not repo.set_status(args.id):
        raise NotFoundError(args.id)
    ctx.persist(repo)
    ctx.renderer.success("Schedule marked as done.")
    return 0


def cmd_remove(args: argparse.Namespace, ctx: CommandContext) -> int:
    repo = ctx.repository()
    if not repo.remove(args.id):
        raise NotFoundError(args.id)
    ctx.persist(repo)
    ctx.renderer.success("Schedule removed successfully.")
    return 0


def cmd_update(args: argparse.Namespace, ctx: CommandContext) -> int:
    """Update title/time/content; time and content on a todo only warn."""
    repo = ctx.repository()
    repo.get(args.id)
    changes = build_update(title=args.title, time=args.time, content=args.content)
    if changes.is_empty:
        ctx.renderer.warning("Nothing to update. Pass --title, --time or --content.")
        return 0

    result = repo.update(args.id, changes)
    if not result:
        raise NotFoundError(args.id)
    for warning in result.warnings:
        ctx.renderer.warning(str(warning))
    ctx.persist(repo)
    ctx.renderer.success("Schedule updated successfully.")
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="jcal",
        description="A CLI tool to manage schedules and to-do lists.",
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    parser.add_argument("--file", help="Schedule file (default: $JCAL_FILE or ./schedule.json)")
    parser.add_argument("--no-color", action="store_true", help="Disable colored output")
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")

    subparsers = parser.add_subparsers(dest="command", required=True)

    init_parser = subparsers.add_parser("init", help="Create an empty schedule file if it doesn't exist")
    init_parser.set_defaults(func=cmd_init)

    add_parser = subparsers.add_parser(
        "add", help="Add one or more schedules (todo by default, -d for detailed)"
    )
    add_parser.add_argument("titles", nargs="+", help="Schedule titles")
    add_parser.add_argument("-d", "--detailed", action="store_true", help="Create detailed schedules")
    add_parser.add_argument("-t", "--time", help='Time for detailed schedules, UTC (e.g. "2025-02-01 15:00")')
    add_parser.add_argument("-c", "--content", help="Content for detailed schedules")
    add_parser.set_defaults(func=cmd_add)

    list_parser = subparsers.add_parser("list", aliases=["ls"], help="List schedules")
    list_parser.add_argument("--done", action="store_true", help="Show only done items")
    list_parser.add_argument("--all", action="store_true", help="Show all items (pending and done)")
    list_parser.add_argument("--date", help="Show schedules for a specific date (YYYY-MM-DD)")
    list_parser.add_argument("--today", action="store_true", help="Show schedules for today")
    list_parser.add_argument("--tomorrow", action="store_true", help="Show schedules for tomorrow")
    list_parser.add_argument("--this-week", action="store_true", help="Show schedules for this week")
    list_parser.add_argument("--next-week", action="store_true", help="Show schedules for next week")
    list_parser.add_argument("--this-month", action="store_true", help="Show schedules for this month")
    list_parser.add_argument("--next-month", action="store_true", help="Show schedules for next month")
    list_parser.set_defaults(func=cmd_list)

    done_parser = subparsers.add_parser("done", help="Mark the schedule with the given id as done")
    done_parser.add_argument("id", help="Schedule id")
    done_parser.set_defaults(func=cmd_done)

    remove_parser = subparsers.add_parser("remove", aliases=["rm"], help="Delete the schedule with the given id")
    remove_parser.add_argument("id", help="Schedule id")
    remove_parser.set_defaults(func=cmd_remove)

    update_parser = subparsers.add_parser("update", help="Update an existing schedule")
    update_parser.add_argument("id", help="Schedule id")
    update_parser.add_argument("-T", "--title", help="Update the title")
    update_parser.add_argument("-t", "--time", help='Update the time, UTC (e.g. "2025-02-01 15:00")')
    update_parser.add_argument("-c", "--content", help="Update the content")
    update_parser.set_defaults(func=cmd_update)

    return parser


def configure_logging(level: str) -> None:
    logging.basicConfig(
        level=level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


# PUBLIC_INTERFACE
def main(argv: Optional[List[str]] = None, clock: Callable[[], datetime] = utc_now) -> int:
    """
    Run one jcal command and return the process exit status.

    Not-found, validation and store errors are printed and yield 1; so do
    OS errors other than a missing schedule file.
    """
    parser = build_parser()
    args = parser.parse_args(argv)

    settings = get_settings()
    configure_logging("DEBUG" if args.verbose else settings.log_level)

    ctx = CommandContext(
        store=JsonScheduleStore(args.file or settings.store_path),
        renderer=Renderer(color=settings.color and not args.no_color),
        clock=clock,
    )
    logger.debug("Running %s against %s", args.command, ctx.store.path)

    try:
        return args.func(args, ctx)
    except NotFoundError:
        ctx.renderer.error("Schedule with that ID not found.")
        return 1
    except ScheduleError as e:
        ctx.renderer.error(str(e))
        return 1
    except OSError as e:
        logger.debug("I/O failure", exc_info=True)
        ctx.renderer.error(f"{e.strerror or e} ({e.filename or ctx.store.path})")
        return 1
