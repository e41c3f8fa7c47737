"""Unit tests for the requirements document (src.reporter.srs).

Tests cover:
- tree_lines connectors, directory suffixes and descriptions
- stories_by_priority bucketing
- render_srs over a full healthcare pipeline run
"""

from __future__ import annotations

from datetime import date

import pytest

from conftest import HEALTHCARE_DESCRIPTION, HEALTHCARE_GOALS
from src.analyst import Priority, UserStory
from src.designer import FileNode, NodeType
from src.pipeline import Pipeline, PipelineInput, PipelineResult
from src.reporter.srs import MAX_PSEUDOCODE_FILES, render_srs, stories_by_priority, tree_lines

pytestmark = pytest.mark.unit


def _story(story_id: str, priority: Priority) -> UserStory:
    return UserStory(
        id=story_id, title=story_id, as_a="User", i_want="x", so_that="y", priority=priority,
    )


class TestTreeLines:
    def test_connectors(self):
        nodes = [
            FileNode(name="src", type=NodeType.DIRECTORY, children=[
                FileNode(name="main.py", description="Entry point"),
                FileNode(name="util.py"),
            ]),
            FileNode(name="README.md"),
        ]
        assert tree_lines(nodes) == [
            "├── src/",
            "│   ├── main.py  # Entry point",
            "│   └── util.py",
            "└── README.md",
        ]

    def test_last_directory_children_are_indented_with_spaces(self):
        nodes = [FileNode(name="docs", type=NodeType.DIRECTORY, children=[FileNode(name="a.md")])]
        assert tree_lines(nodes) == ["└── docs/", "    └── a.md"]

    def test_empty(self):
        assert tree_lines([]) == []


class TestStoriesByPriority:
    def test_buckets_in_priority_order(self):
        stories = [_story("US-001", Priority.P2), _story("US-002", Priority.P0), _story("US-003", Priority.P2)]
        grouped = stories_by_priority(stories)
        assert [(p, [s.id for s in bucket]) for p, bucket in grouped] == [
            ("P0", ["US-002"]),
            ("P2", ["US-001", "US-003"]),
        ]


@pytest.fixture
def result(tmp_config) -> PipelineResult:
    request = PipelineInput(project_description=HEALTHCARE_DESCRIPTION, business_goals=HEALTHCARE_GOALS)
    return Pipeline(tmp_config).run(request)


class TestRenderSrs:
    def test_sections(self, result: PipelineResult):
        text = render_srs(result, date(2025, 1, 6))
        assert text.startswith(f"# SOFTWARE REQUIREMENTS SPECIFICATION: {result.project_name.upper()}\n")
        assert "**Generated Date**: 2025-01-06" in text
        assert "**Domain**: HEALTHCARE" in text
        for number in range(1, 11):
            assert f"\n## {number}. " in text
        assert text.rstrip().endswith("# End of Specification")

    def test_stakeholders_and_compliance(self, result: PipelineResult):
        text = render_srs(result)
        assert "| **Patient** |" in text
        assert "- Pass HIPAA compliance review." in text
        assert "- Pass HITECH compliance review." in text

    def test_pseudocode_is_capped(self, result: PipelineResult):
        text = render_srs(result)
        files = result.phases.tech_lead.pseudocode
        assert text.count("#### [FILE] ") == min(len(files), MAX_PSEUDOCODE_FILES)
        if len(files) > MAX_PSEUDOCODE_FILES:
            assert f"*({len(files) - MAX_PSEUDOCODE_FILES} additional files omitted)*" in text

    def test_every_adr_listed(self, result: PipelineResult):
        text = render_srs(result)
        for adr in result.phases.architecture.decisions:
            assert f"| {adr.id} | " in text
