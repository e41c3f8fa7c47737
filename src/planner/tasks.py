"""Task breakdown and effort estimation."""

from __future__ import annotations

import math

from src.analyst.models import Priority
from src.designer.models import Feature
from src.domains.models import Impact
from src.security.models import Threat
from src.utils import IdSequence

from .models import Task, TaskType

INFRASTRUCTURE = "Infrastructure"
REMEDIATION_SCORE = 8.0

# Base hours before estimation multipliers.
DESIGN_HOURS = 8
IMPLEMENTATION_HOURS = 16
UNIT_TEST_HOURS = 6
SECURITY_REVIEW_HOURS = 8
INTEGRATION_TEST_HOURS = 12
REMEDIATION_HOURS = 12
CICD_HOURS = 16
MONITORING_HOURS = 12

PRIORITY_MULTIPLIERS = {Priority.P0: 1.2, Priority.P2: 0.8}
DEPENDENCY_OVERHEAD = 1.2
DEPENDENCY_OVERHEAD_THRESHOLD = 2

# (upper bound in hours, story points)
STORY_POINT_SCALE = [(4, 1), (8, 2), (12, 3), (20, 5), (40, 8)]
MAX_STORY_POINTS = 13


def _feature_tasks(feature: Feature, ids: IdSequence) -> list[Task]:
    tasks: list[Task] = []
    design = Task(
        id=ids.next(),
        title=f"Design architecture for {feature.name}",
        description=f"High-level design, data models and API contracts for {feature.name}",
        type=TaskType.DESIGN,
        assigned_role="Tech Lead",
        estimated_hours=DESIGN_HOURS,
        priority=feature.priority,
        acceptance_criteria=[
            "Architecture diagram approved",
            "Data model documented",
            "API contracts defined",
        ],
        related_feature=feature.id,
    )
    tasks.append(design)

    implementation_ids: list[str] = []
    for sub in feature.sub_features:
        implementation = Task(
            id=ids.next(),
            title=f"Implement {sub.name} - Backend",
            description=f"Backend logic, database operations and business rules for {sub.name}",
            type=TaskType.DEVELOPMENT,
            assigned_role="Backend Dev",
            estimated_hours=IMPLEMENTATION_HOURS,
            dependencies=[design.id],
            priority=feature.priority,
            acceptance_criteria=[
                "Business logic implemented",
                "Database queries optimized",
                "Unit tests pass (>80% coverage)",
                "Code review approved",
            ],
            related_feature=feature.id,
        )
        implementation_ids.append(implementation.id)
        tasks.append(implementation)
        tasks.append(Task(
            id=ids.next(),
            title=f"Unit tests for {sub.name}",
            description="Unit tests including edge cases",
            type=TaskType.TESTING,
            assigned_role="QA Engineer",
            estimated_hours=UNIT_TEST_HOURS,
            dependencies=[implementation.id],
            priority=feature.priority,
            acceptance_criteria=["Code coverage >80%", "Edge cases tested", "Mocks in place"],
            related_feature=feature.id,
        ))

    tasks.append(Task(
        id=ids.next(),
        title=f"Security review for {feature.name}",
        description="Code review focused on OWASP Top 10 weaknesses",
        type=TaskType.SECURITY,
        assigned_role="Security Engineer",
        estimated_hours=SECURITY_REVIEW_HOURS,
        dependencies=list(implementation_ids),
        priority=Priority.P0,
        acceptance_criteria=[
            "No critical vulnerabilities",
            "Input validation verified",
            "Authentication/authorization checked",
            "Secrets management verified",
        ],
        related_feature=feature.id,
    ))
    tasks.append(Task(
        id=ids.next(),
        title=f"Integration tests for {feature.name}",
        description="End-to-end tests across database, API and external dependencies",
        type=TaskType.TESTING,
        assigned_role="QA Engineer",
        estimated_hours=INTEGRATION_TEST_HOURS,
        dependencies=list(implementation_ids),
        priority=feature.priority,
        acceptance_criteria=[
            "All user flows tested",
            "Database transactions verified",
            "API error handling tested",
            "Performance benchmarks met",
        ],
        related_feature=feature.id,
    ))
    return tasks


def needs_remediation(threat: Threat) -> bool:
    return threat.impact == Impact.CRITICAL or threat.risk_score >= REMEDIATION_SCORE


def generate_task_breakdown(features: list[Feature], threats: list[Threat]) -> list[Task]:
    """Feature tasks, then threat remediation tasks, then infrastructure tasks."""
    ids = IdSequence("TASK")
    tasks = [task for feature in features for task in _feature_tasks(feature, ids)]

    for threat in threats:
        if not needs_remediation(threat):
            continue
        tasks.append(Task(
            id=ids.next(),
            title=f"Mitigate threat: {threat.name}",
            description=f"Implement controls for the {threat.category} threat {threat.id}",
            type=TaskType.SECURITY,
            assigned_role="Security Engineer",
            estimated_hours=REMEDIATION_HOURS,
            priority=Priority.P0,
            acceptance_criteria=list(threat.mitigations),
            related_feature=threat.target,
        ))

    tasks.append(Task(
        id=ids.next(),
        title="Setup CI/CD pipeline",
        description="CI with SAST, DAST and dependency scanning",
        type=TaskType.DEVOPS,
        assigned_role="DevOps Engineer",
        estimated_hours=CICD_HOURS,
        priority=Priority.P0,
        acceptance_criteria=[
            "CI pipeline runs on every PR",
            "SAST scan integrated",
            "Deployment pipeline to staging",
            "Rollback mechanism tested",
        ],
        related_feature=INFRASTRUCTURE,
    ))
    tasks.append(Task(
        id=ids.next(),
        title="Setup monitoring & logging",
        description="APM, log aggregation and alerting",
        type=TaskType.DEVOPS,
        assigned_role="DevOps Engineer",
        estimated_hours=MONITORING_HOURS,
        priority=Priority.P1,
        acceptance_criteria=[
            "APM dashboard configured",
            "Log aggregation working",
            "Alerts for critical errors",
            "Performance metrics tracked",
        ],
        related_feature=INFRASTRUCTURE,
    ))
    return tasks


# ---------------------------------------------------------------------------
# Estimation
# ---------------------------------------------------------------------------

def story_points_for(hours: float) -> int:
    """Fibonacci story points for an hour estimate."""
    for bound, points in STORY_POINT_SCALE:
        if hours <= bound:
            return points
    return MAX_STORY_POINTS


def adjusted_hours(task: Task) -> float:
    hours = task.estimated_hours * PRIORITY_MULTIPLIERS.get(task.priority, 1.0)
    if len(task.dependencies) > DEPENDENCY_OVERHEAD_THRESHOLD:
        hours *= DEPENDENCY_OVERHEAD
    return hours


def estimate_task_effort(tasks: list[Task]) -> list[Task]:
    """Apply priority and coordination multipliers, then assign story points.

    Returns new task records; the inputs are left untouched.
    """
    estimated = []
    for task in tasks:
        hours = adjusted_hours(task)
        estimated.append(task.model_copy(update={
            # Half-up rounding so 9.6 -> 10 and 7.5 -> 8.
            "estimated_hours": int(math.floor(hours + 0.5)),
            "story_points": story_points_for(hours),
        }))
    return estimated
