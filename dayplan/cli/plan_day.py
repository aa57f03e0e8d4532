#!/usr/bin/env python3
"""
CLI for printing a compiled day plan.

Reads the working configuration from the local YAML settings file (or uses
defaults with --demo), fetches the day's events from Google Calendar or the
mock provider, runs the day-timeline pipeline and prints the blocks. The
plan can also be written out as an org-mode agenda.
"""

import asyncio
import logging
import sys
from datetime import date, datetime
from pathlib import Path
from typing import Optional

import click

from dayplan.classifier import resolve_color
from dayplan.domain import BlockKind, DayPlan
from dayplan.errors import DayPlanError
from dayplan.org import generate_org_content
from dayplan.repos.memory import (
    MemoryAssignmentRepository,
    MemorySettingsRepository,
    MockCalendarRepository,
)
from dayplan.repos.tokens import SettingsTokenRepository
from dayplan.repositories import CalendarRepository, SettingsRepository
from dayplan.timeline import block_height_px
from dayplan.usecase import BuildDayPlanUseCase, ConnectCalendarUseCase

logger = logging.getLogger(__name__)

KIND_LABELS = {
    BlockKind.FREE: "Free",
    BlockKind.POMODORO: "Pomodoro",
    BlockKind.REST: "Rest",
    BlockKind.LUNCH: "Lunch",
}


def format_plan(plan: DayPlan) -> str:
    """Render a plan as plain text lines, one per block."""
    lines = [
        f"Day plan for {plan.day.isoformat()} "
        f"({plan.configuration.work_start}-{plan.configuration.work_end})",
        "=" * 50,
    ]
    for block in plan.blocks:
        span = (
            f"{block.start_time.strftime('%H:%M')}-"
            f"{block.end_time.strftime('%H:%M')}"
        )
        minutes = int(block.duration_minutes)
        if block.kind == BlockKind.EVENT:
            event = block.event
            color = event.color or resolve_color(event.color_id, event.title)
            label = f"{event.title} [{event.type.value}] {color}"
        elif block.kind == BlockKind.POMODORO and block.assigned_task:
            label = f"Pomodoro: {block.assigned_task}"
        else:
            label = KIND_LABELS[block.kind]
        lines.append(f"{span}  {minutes:>4}m  {label}")
    if not plan.lunch_inserted:
        lines.append("")
        lines.append(
            f"Lunch at {plan.configuration.lunch_start} skipped: "
            f"it does not fit in free time."
        )
    return "\n".join(lines)


async def _main(
    day: date,
    settings_repo: SettingsRepository,
    calendar_repo: CalendarRepository,
    auth_code: Optional[str],
    org_output: Optional[str],
    px_per_minute: Optional[float],
) -> None:
    token_repo = SettingsTokenRepository(settings_repo)

    if auth_code:
        click.echo("Connecting calendar...")
        await ConnectCalendarUseCase(
            settings_repo=settings_repo,
            token_repo=token_repo,
            calendar_repo=calendar_repo,
        ).execute(auth_code)

    use_case = BuildDayPlanUseCase(
        settings_repo=settings_repo,
        token_repo=token_repo,
        calendar_repo=calendar_repo,
        assignment_repo=MemoryAssignmentRepository(),
    )
    plan = await use_case.execute(day)

    click.echo(format_plan(plan))

    if px_per_minute is not None:
        total = sum(
            block_height_px(b.start_time, b.end_time, px_per_minute)
            for b in plan.blocks
        )
        click.echo(f"\nTimeline height at {px_per_minute} px/min: {total}px")

    if org_output:
        output_file = Path(org_output)
        with open(str(output_file), "w") as f:
            f.write(generate_org_content(plan))
        click.echo(f"\nOrg-mode output written to: {output_file.absolute()}")


@click.command()
@click.option(
    "--date",
    "day",
    default=None,
    help="Day to plan as YYYY-MM-DD (defaults to today).",
)
@click.option(
    "--settings",
    "settings_path",
    default=None,
    type=click.Path(dir_okay=False),
    help="YAML settings file (defaults to $DAYPLAN_SETTINGS_PATH or "
    "~/.config/dayplan/settings.yaml).",
)
@click.option(
    "--demo",
    is_flag=True,
    help="Use default settings and mock calendar events.",
)
@click.option(
    "--auth-code",
    default=None,
    help="Google authorization code to connect the calendar first.",
)
@click.option(
    "--org-output",
    default=None,
    type=click.Path(),
    help="Also write the plan as an org-mode file.",
)
@click.option(
    "--px-per-minute",
    type=float,
    default=None,
    help="Print the rendered timeline height at this scale.",
)
@click.option("--verbose", "-v", is_flag=True, help="Enable debug logging.")
def main(
    day: Optional[str],
    settings_path: Optional[str],
    demo: bool,
    auth_code: Optional[str],
    org_output: Optional[str],
    px_per_minute: Optional[float],
    verbose: bool,
) -> None:
    """Compile and print the plan for one working day."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )
    # Suppress noisy Google API cache warnings
    logging.getLogger("googleapiclient.discovery_cache").setLevel(
        logging.ERROR
    )

    try:
        plan_day = (
            datetime.strptime(day, "%Y-%m-%d").date() if day else date.today()
        )
    except ValueError:
        raise click.BadParameter(
            f"expected YYYY-MM-DD, got {day!r}", param_hint="--date"
        )

    settings_repo: SettingsRepository
    calendar_repo: CalendarRepository
    if demo:
        settings_repo = MemorySettingsRepository()
        calendar_repo = MockCalendarRepository()
        # The mock provider only serves events to a connected calendar
        auth_code = auth_code or "demo"
    else:
        from dayplan.repos.google import GoogleCalendarRepository
        from dayplan.repos.local import LocalSettingsRepository

        settings_repo = LocalSettingsRepository(settings_path)
        calendar_repo = GoogleCalendarRepository()

    try:
        asyncio.run(
            _main(
                plan_day,
                settings_repo,
                calendar_repo,
                auth_code,
                org_output,
                px_per_minute,
            )
        )
    except DayPlanError as e:
        logger.error(f"Planning failed: {str(e)}", exc_info=verbose)
        click.echo(f"Planning failed: {str(e)}", err=True)
        sys.exit(1)


if __name__ == "__main__":
    main()
