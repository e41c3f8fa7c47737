"""Project plan document (``project-plan.md``)."""

from __future__ import annotations

import math
from datetime import date
from typing import Optional

from src.planner.models import PMOutput, Task, TeamMember

from .templates import default_renderer

OVER_ALLOCATED = 80
WELL_BALANCED = 60
LOW_BUFFER_DAYS = 5


def member_status(member: TeamMember) -> str:
    if member.utilization > OVER_ALLOCATED:
        return "Over-allocated"
    if member.utilization > WELL_BALANCED:
        return "Well-balanced"
    return "Under-utilized"


def _group_by_type(tasks: list[Task]) -> list[tuple[str, list[Task]]]:
    groups: dict[str, list[Task]] = {}
    for task in tasks:
        groups.setdefault(task.type.value, []).append(task)
    return list(groups.items())


def render_project_plan(
    pm: PMOutput, project_name: str, generated_on: Optional[date] = None
) -> str:
    """Render the sprint plan, team allocation and timeline as Markdown."""
    by_id = {t.id: t for t in pm.tasks}
    tasks_by_sprint: dict[int, list[Task]] = {}
    for task in pm.tasks:
        if task.sprint:
            tasks_by_sprint.setdefault(task.sprint, []).append(task)

    cp = pm.critical_path
    sprint_weeks = 0
    if pm.sprints:
        first = pm.sprints[0]
        sprint_weeks = math.ceil(((first.end_date - first.start_date).days + 1) / 7)
    total_days = cp.total_duration_days + cp.buffer_days
    members = [(m, member_status(m)) for m in pm.team_allocation.members]

    context = {
        "project_name": project_name,
        "generated_on": generated_on or date.today(),
        "pm": pm,
        "total_weeks": len(pm.sprints) * sprint_weeks,
        "duration_weeks": math.ceil(cp.total_duration_days / 7),
        "over_allocated": any(m.utilization > OVER_ALLOCATED for m, _ in members),
        "tasks_by_sprint": tasks_by_sprint,
        "tasks_by_type": _group_by_type(pm.tasks),
        "members": members,
        "critical_tasks": [by_id[i] for i in cp.critical_tasks if i in by_id],
        "slack_percent": round(100 * cp.buffer_days / total_days) if total_days else 0,
        "low_buffer": cp.buffer_days < LOW_BUFFER_DAYS,
    }
    return default_renderer().render("project_plan.md.j2", context)
