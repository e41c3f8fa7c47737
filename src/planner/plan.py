"""PM phase entry point."""

from __future__ import annotations

from datetime import date

from src.designer.models import Feature
from src.security.models import Threat

from .models import PMOutput
from .risks import generate_risk_register
from .schedule import analyze_critical_path, generate_gantt_chart, pack_sprints
from .tasks import estimate_task_effort, generate_task_breakdown
from .team import allocate_team


def generate_project_plan(
    features: list[Feature],
    threats: list[Threat],
    team_size: int = 3,
    sprint_weeks: int = 2,
    start_date: date | None = None,
) -> PMOutput:
    """Break features and threats into tasks and schedule them.

    Raises:
        SchedulingError: If task dependencies form a cycle.
    """
    start = start_date or date.today()
    tasks = estimate_task_effort(generate_task_breakdown(features, threats))
    critical_path = analyze_critical_path(tasks)
    tasks, sprints = pack_sprints(tasks, team_size, sprint_weeks, start)
    team = allocate_team(tasks, sprints, team_size, sprint_weeks)

    return PMOutput(
        tasks=tasks,
        sprints=sprints,
        team_allocation=team,
        critical_path=critical_path,
        risk_register=generate_risk_register(features, threats, critical_path, team),
        gantt_chart=generate_gantt_chart(sprints, tasks, critical_path.critical_tasks),
    )
