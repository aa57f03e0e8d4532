"""
Org-mode export of a compiled day.

Each block becomes a second-level heading with an active timestamp, so the
day shows up in the org agenda next to the calendar it was built from.
"""

from pathlib import Path
from typing import Dict

from jinja2 import Environment, FileSystemLoader, select_autoescape

from dayplan.domain import BlockKind, DayPlan

TEMPLATE_DIR = Path(__file__).parent / "templates"
TEMPLATE_NAME = "day_plan.org.j2"


def _environment() -> Environment:
    if not TEMPLATE_DIR.exists():
        raise FileNotFoundError(f"Template directory not found: {TEMPLATE_DIR}")
    return Environment(
        loader=FileSystemLoader(str(TEMPLATE_DIR)),
        autoescape=select_autoescape(["html", "xml"]),
        trim_blocks=True,
        lstrip_blocks=True,
    )


def minutes_by_kind(plan: DayPlan) -> Dict[str, int]:
    """Total whole minutes spent in each block kind, in kind order."""
    totals = {kind.value: 0 for kind in BlockKind}
    for block in plan.blocks:
        totals[block.kind.value] += int(block.duration_minutes)
    return {kind: minutes for kind, minutes in totals.items() if minutes}


def generate_org_content(plan: DayPlan, title: str = "Day Plan") -> str:
    """
    Render a DayPlan as an org-mode document.

    Args:
        plan: The compiled day plan
        title: Value of the #+TITLE keyword

    Returns:
        The org-mode text
    """
    template = _environment().get_template(TEMPLATE_NAME)
    return template.render(
        title=title,
        day=plan.day,
        configuration=plan.configuration,
        blocks=plan.blocks,
        totals=minutes_by_kind(plan),
    )
