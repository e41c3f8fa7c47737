"""Unit tests for phase output export (src.reporter.exporters).

Tests cover:
- to_data on models, mappings and sequences
- JSON and YAML text
- Markdown headings and bullets
- export_all writing three files
"""

from __future__ import annotations

import json
from datetime import date
from pathlib import Path

import pytest
import yaml

from src.planner import Milestone
from src.reporter.exporters import export_all, to_data, to_json, to_markdown, to_yaml

pytestmark = pytest.mark.unit


@pytest.fixture
def milestone() -> Milestone:
    return Milestone(
        name="Sprint 1 Review",
        due_date=date(2025, 1, 19),
        description="Review completed work",
        deliverables=["Demo"],
    )


class TestToData:
    def test_models_dump_in_json_mode(self, milestone: Milestone):
        data = to_data({"items": (milestone,), 1: "one"})
        assert data["items"][0]["due_date"] == "2025-01-19"
        assert data["1"] == "one"

    def test_scalars_pass_through(self):
        assert to_data(3) == 3
        assert to_data(None) is None


class TestTextFormats:
    def test_json(self, milestone: Milestone):
        assert json.loads(to_json(milestone))["name"] == "Sprint 1 Review"

    def test_yaml_keeps_field_order(self, milestone: Milestone):
        text = to_yaml(milestone)
        assert text.startswith("name: Sprint 1 Review\n")
        assert yaml.safe_load(text)["deliverables"] == ["Demo"]

    def test_markdown(self):
        text = to_markdown(
            {"project_name": "Demo", "risk_register": [{"id": "RISK-001"}], "tags": ["a", "b"]},
            "Plan",
        )
        lines = text.splitlines()
        assert lines[0] == "# Plan"
        assert "- **Project Name**: Demo" in lines
        assert "## Risk Register" in lines
        assert "- **Id**: RISK-001" in lines
        assert "- a" in lines
        assert text.endswith("\n") and not text.endswith("\n\n")

    def test_markdown_scalar(self):
        assert to_markdown("hello", "Title") == "# Title\n\nhello\n"


class TestExportAll:
    def test_writes_three_files(self, tmp_path: Path, milestone: Milestone):
        written = export_all(milestone, tmp_path / "exports", "milestone", "Milestone")
        assert set(written) == {"json", "yaml", "markdown"}
        assert written["json"].name == "milestone.json"
        assert all(path.is_file() for path in written.values())
        assert written["markdown"].read_text(encoding="utf-8").startswith("# Milestone\n")
