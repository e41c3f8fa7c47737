"""Team composition and task assignment."""

from __future__ import annotations

from .models import SprintPlan, Task, TeamAllocation, TeamMember, WorkloadDistribution
from .schedule import available_hours

# (role, role family used for matching, skills)
TEAM_ROLES: list[tuple[str, str, list[str]]] = [
    ("Tech Lead", "Tech Lead", ["architecture", "design", "code_review"]),
    ("Backend Dev #1", "Backend Dev", ["backend", "api", "database"]),
    ("Backend Dev #2", "Backend Dev", ["backend", "api", "database"]),
    ("Security Engineer", "Security Engineer", ["security", "threat_modeling", "code_review"]),
    ("QA Engineer", "QA Engineer", ["testing", "automation", "security_testing"]),
    ("DevOps Engineer", "DevOps Engineer", ["ci_cd", "infrastructure", "monitoring"]),
]


def build_team(team_size: int) -> list[TeamMember]:
    """The first *team_size* roles; a team always has at least one member."""
    size = max(1, team_size)
    return [TeamMember(role=role, skills=list(skills)) for role, _, skills in TEAM_ROLES[:size]]


def _family(member: TeamMember) -> str:
    for role, family, _ in TEAM_ROLES:
        if role == member.role:
            return family
    return member.role


def allocate_team(
    tasks: list[Task], sprints: list[SprintPlan], team_size: int, sprint_weeks: int
) -> TeamAllocation:
    """Give each task to the least-loaded member of its role, else the least-loaded member.

    Utilisation is hours over the focus hours available across all sprints;
    it is 0 when there are no sprints.
    """
    members = build_team(team_size)
    owner: dict[str, str] = {}

    for task in tasks:
        candidates = [m for m in members if _family(m) == task.assigned_role] or members
        chosen = min(candidates, key=lambda m: m.total_hours)
        chosen.assigned_tasks.append(task.id)
        chosen.total_hours += task.estimated_hours
        owner[task.id] = chosen.role

    capacity = available_hours(len(sprints), sprint_weeks)
    for member in members:
        member.utilization = round(100 * member.total_hours / capacity) if capacity else 0

    workload = []
    for sprint in sprints:
        hours = {m.role: 0 for m in members}
        for task in tasks:
            if task.sprint == sprint.number:
                hours[owner[task.id]] += task.estimated_hours
        workload.append(WorkloadDistribution(sprint=sprint.number, role_hours=hours))

    return TeamAllocation(members=members, workload=workload)
