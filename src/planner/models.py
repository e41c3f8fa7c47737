"""Pydantic v2 models for the project-planning (PM) phase."""

from __future__ import annotations

from datetime import date
from enum import Enum
from typing import Optional

from pydantic import BaseModel, Field

from src.analyst.models import Priority
from src.domains.models import Impact, Likelihood


class TaskType(str, Enum):
    DESIGN = "design"
    DEVELOPMENT = "development"
    TESTING = "testing"
    SECURITY = "security"
    DOCUMENTATION = "documentation"
    DEVOPS = "devops"


class TaskStatus(str, Enum):
    NOT_STARTED = "not_started"
    IN_PROGRESS = "in_progress"
    BLOCKED = "blocked"
    REVIEW = "review"
    DONE = "done"


class RiskCategory(str, Enum):
    TECHNICAL = "technical"
    RESOURCE = "resource"
    SCHEDULE = "schedule"
    EXTERNAL = "external"
    SECURITY = "security"


class RiskStatus(str, Enum):
    IDENTIFIED = "identified"
    MITIGATING = "mitigating"
    RESOLVED = "resolved"
    ACCEPTED = "accepted"


# ---------------------------------------------------------------------------
# Tasks & sprints
# ---------------------------------------------------------------------------

class Task(BaseModel):
    """A unit of schedulable work."""
    id: str = Field(..., description="Task id, e.g. 'TASK-001'")
    title: str = Field(...)
    description: str = Field(default="")
    type: TaskType = Field(...)
    assigned_role: str = Field(..., description="Role family, e.g. 'Backend Dev'")
    estimated_hours: int = Field(..., ge=0)
    story_points: int = Field(default=0, ge=0)
    dependencies: list[str] = Field(default_factory=list, description="Task ids")
    priority: Priority = Field(default=Priority.P2)
    status: TaskStatus = Field(default=TaskStatus.NOT_STARTED)
    acceptance_criteria: list[str] = Field(default_factory=list)
    related_feature: str = Field(..., description="Feature id, threat target or 'Infrastructure'")
    sprint: int = Field(default=0, ge=0, description="0 until packed into a sprint")


class Milestone(BaseModel):
    name: str = Field(...)
    description: str = Field(default="")
    due_date: date = Field(...)
    deliverables: list[str] = Field(default_factory=list)


class SprintPlan(BaseModel):
    number: int = Field(..., ge=1)
    start_date: date = Field(...)
    end_date: date = Field(...)
    goal: str = Field(default="")
    tasks: list[str] = Field(default_factory=list, description="Task ids")
    story_points: int = Field(default=0, ge=0)
    milestones: list[Milestone] = Field(default_factory=list)


# ---------------------------------------------------------------------------
# Team & schedule analysis
# ---------------------------------------------------------------------------

class TeamMember(BaseModel):
    role: str = Field(..., description="e.g. 'Backend Dev #1'")
    skills: list[str] = Field(default_factory=list)
    assigned_tasks: list[str] = Field(default_factory=list)
    total_hours: int = Field(default=0, ge=0)
    utilization: int = Field(default=0, ge=0, description="Percent; above 80 is over-allocated")


class WorkloadDistribution(BaseModel):
    sprint: int = Field(...)
    role_hours: dict[str, int] = Field(default_factory=dict)


class TeamAllocation(BaseModel):
    members: list[TeamMember] = Field(default_factory=list)
    workload: list[WorkloadDistribution] = Field(default_factory=list)


class TaskGroup(BaseModel):
    """Tasks sharing an earliest start, so they can run in parallel."""
    group_id: str = Field(...)
    tasks: list[str] = Field(default_factory=list)
    earliest_start_hours: int = Field(default=0, ge=0)
    estimated_hours: int = Field(default=0, ge=0, description="Longest task in the group")


class CriticalPathAnalysis(BaseModel):
    total_duration_days: int = Field(default=0, ge=0)
    critical_tasks: list[str] = Field(default_factory=list, description="Longest chain, in order")
    buffer_days: int = Field(default=0, ge=0)
    parallel_groups: list[TaskGroup] = Field(default_factory=list)


class RiskItem(BaseModel):
    id: str = Field(..., description="Risk id, e.g. 'RISK-001'")
    category: RiskCategory = Field(...)
    description: str = Field(...)
    probability: Likelihood = Field(...)
    impact: Impact = Field(...)
    score: int = Field(..., ge=1, le=12, description="Probability weight x impact weight")
    mitigation: str = Field(default="")
    contingency: str = Field(default="")
    owner: str = Field(default="Tech Lead")
    status: RiskStatus = Field(default=RiskStatus.IDENTIFIED)


class PMOutput(BaseModel):
    """Everything the project-planning phase produces."""
    tasks: list[Task] = Field(default_factory=list)
    sprints: list[SprintPlan] = Field(default_factory=list)
    team_allocation: TeamAllocation = Field(default_factory=TeamAllocation)
    critical_path: CriticalPathAnalysis = Field(default_factory=CriticalPathAnalysis)
    risk_register: list[RiskItem] = Field(default_factory=list)
    gantt_chart: str = Field(default="", description="Mermaid gantt source in a fenced block")

    @property
    def total_story_points(self) -> int:
        return sum(t.story_points for t in self.tasks)

    @property
    def end_date(self) -> Optional[date]:
        return self.sprints[-1].end_date if self.sprints else None
