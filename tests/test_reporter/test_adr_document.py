"""Unit tests for ADR documents (src.reporter.adr).

Tests cover:
- File naming
- Required sections for every generated ADR
- Option metrics, compliance impact and related decisions
- Placeholder ADRs without options or consequences
"""

from __future__ import annotations

from datetime import date

import pytest

from src.architecture import ArchitectureDecision, default_constraints, generate_adrs
from src.architecture.adr import generic_adr
from src.designer import Module, ModuleType
from src.reporter.adr import DEFAULT_DECIDERS, adr_filename, render_adr

pytestmark = pytest.mark.unit

DECIDED_ON = date(2025, 1, 6)


@pytest.fixture
def decisions(healthcare) -> list[ArchitectureDecision]:
    modules = [Module(name="UserController", type=ModuleType.CONTROLLER), Module(name="AuthService")]
    output = generate_adrs(
        modules, ["python"], healthcare, constraints=default_constraints(4), decided_on=DECIDED_ON,
    )
    return output.decisions


class TestAdrFilename:
    def test_slugged_title(self, decisions):
        assert adr_filename(decisions[0]) == "ADR-001-database-technology-selection.md"

    def test_punctuation_collapses(self):
        adr = generic_adr("ADR-010", "x", "Auth / Session (Tokens)", DECIDED_ON)
        assert adr_filename(adr) == "ADR-010-auth-session-tokens.md"


class TestRenderAdr:
    def test_every_adr_has_required_sections(self, decisions):
        for adr in decisions:
            text = render_adr(adr)
            assert text.startswith(f"# {adr.id}: {adr.title}\n")
            for heading in ("## Context", "## Decision Drivers", "## Considered Options",
                            "## Decision", "## Consequences"):
                assert heading in text

    def test_header_fields(self, decisions):
        text = render_adr(decisions[0])
        assert "**Status**: ACCEPTED" in text
        assert "**Date**: 2025-01-06" in text
        assert f"**Deciders**: {DEFAULT_DECIDERS}" in text
        assert text.rstrip().endswith("*Last updated: 2025-01-06*")

    def test_options_and_metrics(self, decisions):
        text = render_adr(decisions[0])
        assert "### PostgreSQL" in text
        assert "Score: 90/100" in text

    def test_compliance_impact(self, decisions):
        text = render_adr(decisions[0])
        assert "## Compliance Impact\n\n- HIPAA 164.312(c)(1): Integrity" in text

    def test_related_decisions(self, decisions):
        adr = next(d for d in decisions if d.related_decisions)
        text = render_adr(adr)
        assert "## Related Decisions" in text
        assert f"- {adr.related_decisions[0]}" in text

    def test_custom_deciders(self, decisions):
        assert "**Deciders**: Architecture Board" in render_adr(decisions[0], "Architecture Board")


class TestPlaceholderAdr:
    def test_placeholder_text(self):
        adr = generic_adr("ADR-009", "key_exchange", "Key Exchange Mechanism", DECIDED_ON)
        text = render_adr(adr)
        assert "**Status**: PROPOSED" in text
        assert "No options evaluated yet." in text
        assert "- To be assessed once the decision is made" in text
        assert "## Compliance Impact" not in text
        assert "## Related Decisions" not in text
