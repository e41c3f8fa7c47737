"""Project planning (PM phase).

Usage::

    from src.planner import generate_project_plan

    plan = generate_project_plan(design.features, model.threats, team_size=4)
    print(len(plan.sprints), plan.critical_path.total_duration_days)
"""

from src.planner.errors import SchedulingError
from src.planner.models import (
    CriticalPathAnalysis,
    Milestone,
    PMOutput,
    RiskCategory,
    RiskItem,
    RiskStatus,
    SprintPlan,
    Task,
    TaskGroup,
    TaskStatus,
    TaskType,
    TeamAllocation,
    TeamMember,
    WorkloadDistribution,
)
from src.planner.plan import generate_project_plan
from src.planner.schedule import analyze_critical_path, pack_sprints, sprint_capacity
from src.planner.tasks import estimate_task_effort, generate_task_breakdown, story_points_for

__all__ = [
    "generate_project_plan",
    "generate_task_breakdown",
    "estimate_task_effort",
    "story_points_for",
    "analyze_critical_path",
    "pack_sprints",
    "sprint_capacity",
    "SchedulingError",
    "CriticalPathAnalysis",
    "Milestone",
    "PMOutput",
    "RiskCategory",
    "RiskItem",
    "RiskStatus",
    "SprintPlan",
    "Task",
    "TaskGroup",
    "TaskStatus",
    "TaskType",
    "TeamAllocation",
    "TeamMember",
    "WorkloadDistribution",
]
