"""Unit tests for the test strategy (src.qa.strategy).

Tests cover:
- Test case ids across features, threats and compliance requirements
- Functional, security and compliance case content
- Manual vs automated security cases, non-STRIDE fallback
- Five-phase penetration test plan with threat-driven exploitation
- Automation coverage, including the empty case
"""

from __future__ import annotations

import pytest

from conftest import make_threat
from src.analyst import Severity
from src.domains import Impact
from src.qa import calculate_coverage, design_test_strategy, generate_pen_test_plan, generate_test_cases

pytestmark = pytest.mark.unit


# ---------------------------------------------------------------------------
# Test cases
# ---------------------------------------------------------------------------

class TestGenerateTestCases:
    def test_ids_run_features_then_threats_then_compliance(self, three_features, two_threats):
        cases = generate_test_cases(three_features, two_threats, ["HIPAA"])
        assert [(c.id, c.related_to) for c in cases] == [
            ("TC-001", "F-001"),
            ("TC-002", "F-002"),
            ("TC-003", "F-003"),
            ("TC-004", "T-001"),
            ("TC-005", "T-002"),
            ("TC-006", "HIPAA"),
        ]

    def test_functional_priority_follows_feature_priority(self, three_features):
        cases = generate_test_cases(three_features, [], [])
        assert [c.priority for c in cases] == [Severity.CRITICAL, Severity.HIGH, Severity.MEDIUM]
        assert all(c.category == "Functional" and c.automated for c in cases)
        assert cases[0].title == "Verify Authentication & Authorization functionality"

    def test_security_case_content(self, two_threats):
        spoofing = generate_test_cases([], two_threats, [])[0]
        assert spoofing.category == "Authentication"
        assert spoofing.priority == Severity.CRITICAL
        assert spoofing.automated is True
        assert "Burp Suite" in spoofing.tools
        assert spoofing.expected_result == "System is protected against Spoofing"

    def test_repudiation_is_manual(self, two_threats):
        repudiation = generate_test_cases([], two_threats, [])[1]
        assert repudiation.category == "Audit"
        assert repudiation.automated is False
        assert repudiation.priority == Severity.MEDIUM

    def test_non_stride_category_falls_back(self):
        injection = make_threat("T-009", "Injection", Impact.LOW)
        case = generate_test_cases([], [injection], [])[0]
        assert case.category == "Security"
        assert case.steps == ["Manual security review"]
        assert case.automated is True
        assert case.priority == Severity.LOW

    def test_compliance_cases_are_manual_and_critical(self):
        cases = generate_test_cases([], [], ["HIPAA", "HITECH"])
        assert [c.title for c in cases] == ["Verify HIPAA compliance", "Verify HITECH compliance"]
        assert all(c.category == "Compliance" for c in cases)
        assert all(c.priority == Severity.CRITICAL and not c.automated for c in cases)


# ---------------------------------------------------------------------------
# Penetration test plan
# ---------------------------------------------------------------------------

class TestPenTestPlan:
    def test_five_fixed_phases(self):
        plan = generate_pen_test_plan([])
        assert [p.phase for p in plan] == [
            "Reconnaissance",
            "Scanning & Vulnerability Assessment",
            "Exploitation",
            "Post-Exploitation",
            "Reporting",
        ]
        assert len(plan[2].activities) == 4

    def test_exploitation_targets_first_three_threats(self):
        threats = [make_threat(f"T-00{n}") for n in range(1, 6)]
        activities = generate_pen_test_plan(threats)[2].activities
        assert len(activities) == 7
        assert activities[4] == "Test for Spoofing: Spoofing threat T-001"
        assert activities[-1] == "Test for Spoofing: Spoofing threat T-003"


# ---------------------------------------------------------------------------
# Coverage and strategy
# ---------------------------------------------------------------------------

class TestCoverage:
    def test_empty(self):
        coverage = calculate_coverage([])
        assert (coverage.total, coverage.automated, coverage.manual, coverage.percentage) == (0, 0, 0, 0)

    def test_rounded_percentage(self, three_features, two_threats):
        cases = generate_test_cases(three_features, two_threats, ["HIPAA"])
        coverage = calculate_coverage(cases)
        assert coverage.total == 6
        assert coverage.automated == 4
        assert coverage.manual == 2
        assert coverage.percentage == 67


class TestDesignTestStrategy:
    def test_compliance_defaults_to_none(self, three_features):
        qa = design_test_strategy(three_features, [])
        assert len(qa.test_cases) == 3
        assert qa.automation_coverage.percentage == 100
        assert len(qa.penetration_test_plan) == 5

    def test_healthcare(self, healthcare_design, healthcare_threats):
        qa = design_test_strategy(
            healthcare_design.features, healthcare_threats.threats, ["HIPAA", "HITECH"]
        )
        expected = len(healthcare_design.features) + len(healthcare_threats.threats) + 2
        assert len(qa.test_cases) == expected
        assert qa.test_cases[-1].id == f"TC-{expected:03d}"
