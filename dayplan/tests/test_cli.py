"""
Tests for the plan CLI.

These focus on CLI-specific concerns: argument parsing, output formatting,
error handling and the org file export. The demo mode runs the real
pipeline against the mock calendar.
"""

from unittest.mock import AsyncMock, patch

from click.testing import CliRunner

from dayplan.cli.plan_day import format_plan, main
from dayplan.errors import CalendarSyncError
from dayplan.pipeline import compile_day
from dayplan.repositories import CalendarRepository
from dayplan.tests.factories import (
    DAY,
    at,
    minimal_calendar_event,
    minimal_configuration,
)


class TestPlanDayCLI:
    def test_demo_prints_sample_day(self) -> None:
        runner = CliRunner()

        result = runner.invoke(main, ["--demo", "--date", "2024-07-22"])

        assert result.exit_code == 0, result.output
        assert "Day plan for 2024-07-22 (09:00-17:00)" in result.output
        assert "09:30-09:45" in result.output
        assert "Daily Standup [meeting]" in result.output
        assert "12:00-13:00    60m  Lunch" in result.output

    def test_org_output(self, tmp_path) -> None:
        runner = CliRunner()
        output = tmp_path / "plan.org"

        result = runner.invoke(
            main,
            ["--demo", "--date", "2024-07-22", "--org-output", str(output)],
        )

        assert result.exit_code == 0, result.output
        assert "Org-mode output written to" in result.output
        content = output.read_text()
        assert "** Daily Standup :meeting:" in content
        assert "<2024-07-22 Mon 09:30-09:45>" in content

    def test_timeline_height(self) -> None:
        runner = CliRunner()

        result = runner.invoke(
            main, ["--demo", "--date", "2024-07-22", "--px-per-minute", "2"]
        )

        # 09:00-17:00 is 480 minutes
        assert "Timeline height at 2.0 px/min: 960px" in result.output

    def test_invalid_date(self) -> None:
        runner = CliRunner()

        result = runner.invoke(main, ["--demo", "--date", "22/07/2024"])

        assert result.exit_code == 2
        assert "expected YYYY-MM-DD" in result.output

    def test_settings_file(self, tmp_path) -> None:
        settings = tmp_path / "settings.yaml"
        settings.write_text("work_start: '08:00'\nwork_end: '12:00'\n")
        runner = CliRunner()

        with patch(
            "dayplan.repos.google.GoogleCalendarRepository"
        ) as repo_class:
            repo_class.return_value = AsyncMock(spec=CalendarRepository)
            result = runner.invoke(
                main, ["--date", "2024-07-22", "--settings", str(settings)]
            )

        # No stored tokens, so the day is planned without events
        assert result.exit_code == 0, result.output
        assert "Day plan for 2024-07-22 (08:00-12:00)" in result.output
        assert "Lunch at 12:00 skipped" in result.output

    def test_planning_failure_exits_nonzero(self) -> None:
        runner = CliRunner()

        with patch(
            "dayplan.cli.plan_day.BuildDayPlanUseCase"
        ) as use_case_class:
            use_case = AsyncMock()
            use_case.execute.side_effect = CalendarSyncError("offline")
            use_case_class.return_value = use_case

            result = runner.invoke(main, ["--demo", "--date", "2024-07-22"])

        assert result.exit_code == 1
        assert "Planning failed: offline" in result.output


def test_format_plan_assigned_pomodoro() -> None:
    event = minimal_calendar_event(
        title="Review", start_time=at(16), end_time=at(17), color="#123456"
    )
    plan = compile_day(
        [event], DAY, minimal_configuration(), {0: "Write report"}
    )

    text = format_plan(plan)

    assert "09:00-09:30    30m  Pomodoro: Write report" in text
    assert "16:00-17:00    60m  Review [other] #123456" in text
