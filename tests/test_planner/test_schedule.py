"""Unit tests for scheduling (src.planner.schedule and src.planner.team).

Tests cover:
- Sprint capacity and greedy input-order packing
- Oversized tasks, sprint dates and milestones
- Critical path: longest chain, days, buffer, parallel groups, cycles
- Gantt chart output
- Team composition and least-loaded assignment
"""

from __future__ import annotations

from datetime import date

import pytest

from conftest import PROJECT_START, make_task
from src.planner import SchedulingError, analyze_critical_path, pack_sprints, sprint_capacity
from src.planner.schedule import available_hours, generate_gantt_chart
from src.planner.team import allocate_team, build_team

pytestmark = pytest.mark.unit


# ---------------------------------------------------------------------------
# Sprint packing
# ---------------------------------------------------------------------------

class TestSprintCapacity:
    @pytest.mark.parametrize("team, weeks, expected", [(3, 2, 54), (1, 1, 9), (6, 3, 162)])
    def test_capacity(self, team: int, weeks: int, expected: int):
        assert sprint_capacity(team, weeks) == expected

    def test_available_hours(self):
        assert available_hours(2, 2) == 120
        assert available_hours(0, 2) == 0


class TestPackSprints:
    def test_packs_in_input_order(self):
        tasks = [make_task("A", 8, points=5), make_task("B", 8, points=5), make_task("C", 2, points=1)]
        packed, sprints = pack_sprints(tasks, 1, 1, PROJECT_START)
        assert [s.tasks for s in sprints] == [["A"], ["B", "C"]]
        assert [t.sprint for t in packed] == [1, 2, 2]

    def test_oversized_task_gets_its_own_sprint(self):
        tasks = [make_task("A", 60, points=13), make_task("B", 8, points=2)]
        _, sprints = pack_sprints(tasks, 1, 1, PROJECT_START)
        assert [s.tasks for s in sprints] == [["A"], ["B"]]
        assert sprints[0].story_points == 13

    def test_dependencies_do_not_reorder(self):
        tasks = [make_task("A", 8, deps=["B"], points=5), make_task("B", 8, points=5)]
        packed, _ = pack_sprints(tasks, 1, 1, PROJECT_START)
        assert [(t.id, t.sprint) for t in packed] == [("A", 1), ("B", 2)]

    def test_sprint_dates_and_milestone(self):
        tasks = [make_task("A", 8, points=10), make_task("B", 8, points=10)]
        _, sprints = pack_sprints(tasks, 1, 2, PROJECT_START)
        second = sprints[1]
        assert second.start_date == date(2025, 1, 20)
        assert second.end_date == date(2025, 2, 2)
        assert second.goal == "Sprint 2 - Complete 1 tasks"
        assert second.milestones[0].name == "Sprint 2 Review"
        assert second.milestones[0].due_date == second.end_date

    def test_no_tasks_no_sprints(self):
        assert pack_sprints([], 3, 2, PROJECT_START) == ([], [])

    def test_inputs_untouched(self):
        task = make_task("A", 8)
        pack_sprints([task], 3, 2, PROJECT_START)
        assert task.sprint == 0


# ---------------------------------------------------------------------------
# Critical path
# ---------------------------------------------------------------------------

class TestCriticalPath:
    def test_longest_chain(self):
        tasks = [
            make_task("A", 10),
            make_task("B", 20, deps=["A"]),
            make_task("C", 5, deps=["A"]),
            make_task("D", 4, deps=["B", "C"]),
        ]
        analysis = analyze_critical_path(tasks)
        assert analysis.critical_tasks == ["A", "B", "D"]
        assert analysis.total_duration_days == 5
        assert analysis.buffer_days == 1

    def test_parallel_groups(self):
        tasks = [
            make_task("A", 8),
            make_task("B", 16),
            make_task("C", 4, deps=["A"]),
            make_task("D", 6, deps=["A"]),
            make_task("E", 2, deps=["B"]),
        ]
        groups = analyze_critical_path(tasks).parallel_groups
        assert [(g.group_id, g.tasks, g.earliest_start_hours, g.estimated_hours) for g in groups] == [
            ("GROUP-001", ["A", "B"], 0, 16),
            ("GROUP-002", ["C", "D"], 8, 6),
        ]

    def test_unknown_dependency_ignored(self):
        analysis = analyze_critical_path([make_task("A", 8, deps=["GHOST"])])
        assert analysis.critical_tasks == ["A"]
        assert analysis.total_duration_days == 1

    def test_cycle_raises(self):
        tasks = [make_task("A", 8, deps=["B"]), make_task("B", 8, deps=["A"])]
        with pytest.raises(SchedulingError) as exc_info:
            analyze_critical_path(tasks)
        assert exc_info.value.task_id == "A"
        assert "dependency cycle" in str(exc_info.value)

    def test_empty(self):
        analysis = analyze_critical_path([])
        assert analysis.critical_tasks == []
        assert analysis.total_duration_days == 0


class TestGanttChart:
    def test_sections(self):
        tasks = [make_task("TASK-001", 10), make_task("TASK-002", 3, deps=["TASK-001"])]
        packed, sprints = pack_sprints(tasks, 3, 2, PROJECT_START)
        chart = generate_gantt_chart(sprints, packed, ["TASK-001", "TASK-002"])
        lines = chart.splitlines()
        assert lines[0] == "```mermaid"
        assert lines[-1] == "```"
        assert "    Sprint 1 :sprint1, 2025-01-06, 2025-01-19" in lines
        assert "    Task TASK-001 :task001, 2025-01-06, 2d" in lines
        assert "    Task TASK-002 :task002, 2025-01-06, 1d" in lines
        assert "    Sprint 1 Review :milestone, m1, 2025-01-19, 0d" in lines

    def test_unpacked_tasks_are_skipped(self):
        chart = generate_gantt_chart([], [make_task("TASK-001", 8)], ["TASK-001"])
        assert "task001" not in chart


# ---------------------------------------------------------------------------
# Team
# ---------------------------------------------------------------------------

class TestTeam:
    def test_build_team_truncates(self):
        assert [m.role for m in build_team(3)] == ["Tech Lead", "Backend Dev #1", "Backend Dev #2"]
        assert len(build_team(10)) == 6

    def test_team_has_at_least_one_member(self):
        assert [m.role for m in build_team(0)] == ["Tech Lead"]

    def test_least_loaded_member_of_role(self):
        tasks = [make_task("A", 10), make_task("B", 6), make_task("C", 4)]
        packed, sprints = pack_sprints(tasks, 3, 2, PROJECT_START)
        team = allocate_team(packed, sprints, 3, 2)
        by_role = {m.role: m for m in team.members}
        assert by_role["Backend Dev #1"].assigned_tasks == ["A"]
        assert by_role["Backend Dev #2"].assigned_tasks == ["B", "C"]
        assert by_role["Tech Lead"].total_hours == 0
        assert by_role["Backend Dev #2"].utilization == 17
        assert team.workload[0].role_hours == {
            "Tech Lead": 0, "Backend Dev #1": 10, "Backend Dev #2": 10,
        }

    def test_missing_role_falls_back_to_least_loaded(self):
        task = make_task("A", 8).model_copy(update={"assigned_role": "DevOps Engineer"})
        team = allocate_team([task], [], 2, 2)
        assert team.members[0].assigned_tasks == ["A"]

    def test_no_sprints_means_zero_utilization(self):
        team = allocate_team([make_task("A", 8)], [], 3, 2)
        assert all(m.utilization == 0 for m in team.members)
        assert team.workload == []
