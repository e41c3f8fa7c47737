"""Sprint packing, critical-path analysis and the Gantt chart.

Sprints are packed greedily in task-list order; dependencies do not reorder
tasks, so a task can land in an earlier sprint than a dependency declared
after it.
"""

from __future__ import annotations

import math
from datetime import date, timedelta
from typing import Optional

from src.utils import IdSequence

from .errors import SchedulingError
from .models import CriticalPathAnalysis, Milestone, SprintPlan, Task, TaskGroup

WORKDAYS_PER_WEEK = 5
FOCUS_HOURS_PER_DAY = 6
POINTS_PER_HOUR = 0.3
HOURS_PER_DAY = 8
BUFFER_FRACTION = 0.2

MAX_GANTT_TASKS = 10
GANTT_TITLE_WIDTH = 30


def sprint_capacity(team_size: int, sprint_weeks: int) -> int:
    """Story points one sprint can absorb."""
    hours = team_size * sprint_weeks * WORKDAYS_PER_WEEK * FOCUS_HOURS_PER_DAY
    return math.floor(hours * POINTS_PER_HOUR)


def available_hours(sprint_count: int, sprint_weeks: int) -> int:
    """Focus hours one person has across *sprint_count* sprints."""
    return sprint_count * sprint_weeks * WORKDAYS_PER_WEEK * FOCUS_HOURS_PER_DAY


# ---------------------------------------------------------------------------
# Sprint packing
# ---------------------------------------------------------------------------

def _sprint_plan(number: int, tasks: list[Task], start: date, sprint_weeks: int) -> SprintPlan:
    sprint_start = start + timedelta(days=(number - 1) * sprint_weeks * 7)
    sprint_end = sprint_start + timedelta(days=sprint_weeks * 7 - 1)
    return SprintPlan(
        number=number,
        start_date=sprint_start,
        end_date=sprint_end,
        goal=f"Sprint {number} - Complete {len(tasks)} tasks",
        tasks=[t.id for t in tasks],
        story_points=sum(t.story_points for t in tasks),
        milestones=[Milestone(
            name=f"Sprint {number} Review",
            description="Demo completed features to stakeholders",
            due_date=sprint_end,
            deliverables=[f"{len(tasks)} tasks completed", "Demo presentation"],
        )],
    )


def pack_sprints(
    tasks: list[Task], team_size: int, sprint_weeks: int, start: date
) -> tuple[list[Task], list[SprintPlan]]:
    """Greedy first-fit packing in input order.

    A sprint closes when the next task would exceed capacity; an empty
    sprint never closes, so an oversized task gets a sprint to itself.

    Returns:
        The tasks with ``sprint`` set, and the sprint plans.
    """
    capacity = sprint_capacity(team_size, sprint_weeks)
    groups: list[list[Task]] = []
    current: list[Task] = []
    points = 0

    for task in tasks:
        if current and points + task.story_points > capacity:
            groups.append(current)
            current, points = [], 0
        current.append(task)
        points += task.story_points
    if current:
        groups.append(current)

    packed: list[Task] = []
    sprints: list[SprintPlan] = []
    for number, group in enumerate(groups, start=1):
        packed.extend(t.model_copy(update={"sprint": number}) for t in group)
        sprints.append(_sprint_plan(number, group, start, sprint_weeks))
    return packed, sprints


# ---------------------------------------------------------------------------
# Critical path
# ---------------------------------------------------------------------------

def finish_times(tasks: list[Task]) -> tuple[dict[str, int], dict[str, Optional[str]]]:
    """Earliest finish (hours) of every task and the dependency that bounds it.

    Unknown dependency ids are ignored.

    Raises:
        SchedulingError: If the dependencies contain a cycle.
    """
    by_id = {t.id: t for t in tasks}
    finish: dict[str, int] = {}
    bound_by: dict[str, Optional[str]] = {}
    visiting: set[str] = set()

    def visit(task_id: str) -> int:
        if task_id in finish:
            return finish[task_id]
        if task_id in visiting:
            raise SchedulingError(task_id)
        visiting.add(task_id)
        start, previous = 0, None
        for dep in by_id[task_id].dependencies:
            if dep not in by_id:
                continue
            end = visit(dep)
            if end > start:
                start, previous = end, dep
        visiting.discard(task_id)
        finish[task_id] = start + by_id[task_id].estimated_hours
        bound_by[task_id] = previous
        return finish[task_id]

    for task in tasks:
        visit(task.id)
    return finish, bound_by


def parallel_groups(tasks: list[Task], finish: dict[str, int]) -> list[TaskGroup]:
    """Tasks sharing an earliest start time; singletons are dropped."""
    by_start: dict[int, list[Task]] = {}
    for task in tasks:
        by_start.setdefault(finish[task.id] - task.estimated_hours, []).append(task)

    ids = IdSequence("GROUP")
    return [
        TaskGroup(
            group_id=ids.next(),
            tasks=[t.id for t in group],
            earliest_start_hours=start,
            estimated_hours=max(t.estimated_hours for t in group),
        )
        for start, group in sorted(by_start.items())
        if len(group) >= 2
    ]


def analyze_critical_path(tasks: list[Task]) -> CriticalPathAnalysis:
    """Longest dependency chain by hours, converted to days, plus slack."""
    if not tasks:
        return CriticalPathAnalysis()

    finish, bound_by = finish_times(tasks)
    last = max(tasks, key=lambda t: finish[t.id])

    chain: list[str] = []
    cursor: Optional[str] = last.id
    while cursor is not None:
        chain.append(cursor)
        cursor = bound_by[cursor]
    chain.reverse()

    days = math.ceil(finish[last.id] / HOURS_PER_DAY)
    return CriticalPathAnalysis(
        total_duration_days=days,
        critical_tasks=chain,
        buffer_days=math.ceil(days * BUFFER_FRACTION),
        parallel_groups=parallel_groups(tasks, finish),
    )


# ---------------------------------------------------------------------------
# Gantt chart
# ---------------------------------------------------------------------------

def _gantt_label(text: str) -> str:
    # Mermaid gantt uses ':' as the label/metadata separator.
    return text.replace(":", " -").replace("#", "")[:GANTT_TITLE_WIDTH].strip()


def generate_gantt_chart(
    sprints: list[SprintPlan], tasks: list[Task], critical_tasks: list[str]
) -> str:
    lines = [
        "```mermaid",
        "gantt",
        "    title Project Timeline",
        "    dateFormat YYYY-MM-DD",
        "    section Sprints",
    ]
    for sprint in sprints:
        lines.append(
            f"    Sprint {sprint.number} :sprint{sprint.number}, "
            f"{sprint.start_date.isoformat()}, {sprint.end_date.isoformat()}"
        )

    starts = {s.number: s.start_date for s in sprints}
    by_id = {t.id: t for t in tasks}
    lines.append("    section Critical Path")
    for task_id in critical_tasks[:MAX_GANTT_TASKS]:
        task = by_id.get(task_id)
        if task is None or task.sprint not in starts:
            continue
        days = max(1, math.ceil(task.estimated_hours / HOURS_PER_DAY))
        lines.append(
            f"    {_gantt_label(task.title)} :{task.id.replace('-', '').lower()}, "
            f"{starts[task.sprint].isoformat()}, {days}d"
        )

    lines.append("    section Milestones")
    for sprint in sprints:
        for milestone in sprint.milestones:
            lines.append(
                f"    {_gantt_label(milestone.name)} :milestone, m{sprint.number}, "
                f"{milestone.due_date.isoformat()}, 0d"
            )

    lines.append("```")
    return "\n".join(lines)
