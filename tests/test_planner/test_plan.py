"""Unit tests for the risk register and the PM phase (src.planner.risks, src.planner.plan).

Tests cover:
- Risk ordering: technical, security, resource, schedule, over-allocation, external
- Conditional schedule and over-allocation risks
- Probability x impact scoring
- generate_project_plan on three features and two threats
"""

from __future__ import annotations

import pytest

from conftest import PROJECT_START, make_feature
from src.analyst import Priority
from src.domains import Impact, Likelihood
from src.planner import (
    CriticalPathAnalysis,
    PMOutput,
    RiskCategory,
    RiskStatus,
    TeamAllocation,
    TeamMember,
    generate_project_plan,
)
from src.planner.risks import generate_risk_register, risk_score

pytestmark = pytest.mark.unit


# ---------------------------------------------------------------------------
# Risk register
# ---------------------------------------------------------------------------

class TestRiskRegister:
    def test_full_ordering(self, three_features, two_threats):
        risks = generate_risk_register(
            three_features,
            two_threats,
            CriticalPathAnalysis(buffer_days=2),
            TeamAllocation(members=[TeamMember(role="Tech Lead", utilization=95)]),
        )
        assert [(r.id, r.category) for r in risks] == [
            ("RISK-001", RiskCategory.TECHNICAL),
            ("RISK-002", RiskCategory.SECURITY),
            ("RISK-003", RiskCategory.RESOURCE),
            ("RISK-004", RiskCategory.SCHEDULE),
            ("RISK-005", RiskCategory.RESOURCE),
            ("RISK-006", RiskCategory.EXTERNAL),
        ]
        assert risks[4].description == "Over-allocated team members: Tech Lead (95%)"

    def test_minimal_register(self):
        risks = generate_risk_register(
            [make_feature("F-001", "Search", Priority.P1)],
            [],
            CriticalPathAnalysis(buffer_days=5),
            TeamAllocation(members=[TeamMember(role="Tech Lead", utilization=80)]),
        )
        assert [r.category for r in risks] == [RiskCategory.RESOURCE, RiskCategory.EXTERNAL]
        assert all(r.status == RiskStatus.MITIGATING for r in risks)

    def test_security_risk_copies_threat(self, two_threats):
        risks = generate_risk_register(
            [], two_threats, CriticalPathAnalysis(buffer_days=10), TeamAllocation()
        )
        security = risks[0]
        assert security.category == RiskCategory.SECURITY
        assert security.probability == Likelihood.HIGH
        assert security.impact == Impact.CRITICAL
        assert security.score == 12
        assert security.mitigation == "Mitigation A; Mitigation B"
        assert security.owner == "Security Engineer"

    @pytest.mark.parametrize("probability, impact, expected", [
        (Likelihood.LOW, Impact.LOW, 1),
        (Likelihood.MEDIUM, Impact.HIGH, 6),
        (Likelihood.HIGH, Impact.CRITICAL, 12),
    ])
    def test_score(self, probability, impact, expected: int):
        assert risk_score(probability, impact) == expected


# ---------------------------------------------------------------------------
# generate_project_plan
# ---------------------------------------------------------------------------

@pytest.fixture
def plan(three_features, two_threats) -> PMOutput:
    return generate_project_plan(three_features, two_threats, start_date=PROJECT_START)


class TestGenerateProjectPlan:
    def test_task_count_and_estimates(self, plan: PMOutput):
        assert len(plan.tasks) == 18
        assert [t.estimated_hours for t in plan.tasks[:5]] == [10, 19, 7, 10, 14]
        assert [t.story_points for t in plan.tasks[:5]] == [3, 5, 2, 3, 5]

    def test_sprints_pack_to_capacity(self, plan: PMOutput):
        assert [len(s.tasks) for s in plan.sprints] == [16, 2]
        assert [s.story_points for s in plan.sprints] == [53, 8]
        assert all(t.sprint in (1, 2) for t in plan.tasks)

    def test_critical_path(self, plan: PMOutput):
        assert plan.critical_path.critical_tasks == ["TASK-001", "TASK-002", "TASK-005"]
        assert plan.critical_path.total_duration_days == 6
        assert plan.critical_path.buffer_days == 2
        assert len(plan.critical_path.parallel_groups) == 4

    def test_every_task_assigned_once(self, plan: PMOutput):
        members = plan.team_allocation.members
        assigned = [task_id for m in members for task_id in m.assigned_tasks]
        assert sorted(assigned) == sorted(t.id for t in plan.tasks)
        assert sum(m.total_hours for m in members) == sum(t.estimated_hours for t in plan.tasks)
        assert members[0].assigned_tasks[:2] == ["TASK-001", "TASK-005"]

    def test_risks(self, plan: PMOutput):
        assert [r.category for r in plan.risk_register] == [
            RiskCategory.TECHNICAL,
            RiskCategory.SECURITY,
            RiskCategory.RESOURCE,
            RiskCategory.SCHEDULE,
            RiskCategory.EXTERNAL,
        ]

    def test_gantt(self, plan: PMOutput):
        assert plan.gantt_chart.startswith("```mermaid\ngantt")
        assert ":task005, 2025-01-06, 2d" in plan.gantt_chart

    def test_no_features_no_threats(self):
        plan = generate_project_plan([], [], start_date=PROJECT_START)
        assert [t.title for t in plan.tasks] == ["Setup CI/CD pipeline", "Setup monitoring & logging"]
        assert len(plan.sprints) == 1
