"""Unit tests for the requirements analyzer (src.analyst.requirements).

Tests cover:
- User stories: one per goal plus the fixed authentication / audit stories
- Actor, priority and security-consideration keyword rules
- Standard security requirements, compliance mapping, regulation clauses
- Abuse cases from the standard set and the domain's threats
- analyze_requirements: project name, data classification, frameworks
"""

from __future__ import annotations

import pytest

from src.analyst import Effort, Priority, Severity, analyze_requirements
from src.analyst.requirements import (
    DEFAULT_DATA_CLASSIFICATION,
    ENCRYPTION_AT_REST,
    extract_project_name,
    generate_abuse_cases,
    generate_security_requirements,
    generate_user_stories,
)

pytestmark = pytest.mark.unit


# ---------------------------------------------------------------------------
# User stories
# ---------------------------------------------------------------------------

class TestUserStories:
    def test_one_story_per_goal_plus_two_fixed(self):
        stories = generate_user_stories(["Users upload photos", "Users share albums"])
        assert [s.id for s in stories] == ["US-001", "US-002", "US-003", "US-004"]
        assert stories[2].title == "Secure Authentication"
        assert stories[3].title == "Audit Logging"

    def test_no_goals_still_yields_fixed_stories(self):
        stories = generate_user_stories([])
        assert [s.title for s in stories] == ["Secure Authentication", "Audit Logging"]
        assert all(s.priority == Priority.P0 for s in stories)

    def test_title_is_first_five_words(self):
        story = generate_user_stories(["Users can export their data as CSV files"])[0]
        assert story.title == "Users can export their data..."

    def test_short_title_has_no_ellipsis(self):
        story = generate_user_stories(["Upload photos"])[0]
        assert story.title == "Upload photos"

    @pytest.mark.parametrize("goal, actor", [
        ("Admin can manage users", "admin"),
        ("Keep an audit trail", "compliance officer"),
        ("Improve security posture", "security team"),
        ("Browse the catalogue", "user"),
    ])
    def test_actor_rules(self, goal: str, actor: str):
        assert generate_user_stories([goal])[0].as_a == actor

    def test_actor_falls_back_to_first_stakeholder(self, healthcare):
        story = generate_user_stories(["Book an appointment"], healthcare)[0]
        assert story.as_a == "patient"

    @pytest.mark.parametrize("goal, priority", [
        ("Critical uptime for ordering", Priority.P0),
        ("Core search experience", Priority.P1),
        ("Nice dashboard colours", Priority.P2),
    ])
    def test_priority_rules(self, goal: str, priority: Priority):
        assert generate_user_stories([goal])[0].priority == priority

    def test_acceptance_criteria_follow_given_when_then(self):
        story = generate_user_stories(["Upload Photos"])[0]
        assert story.acceptance_criteria == [
            "Given I am authenticated",
            "When I upload photos",
            "Then the action completes successfully",
            "And an audit log is created",
        ]

    def test_considerations_accumulate_across_rules(self):
        story = generate_user_stories(["User pays with financial data"])[0]
        assert story.security_considerations == [
            "Data encryption required",
            "Access control validation",
            "Authentication required",
            "Session management",
            "PCI-DSS compliance",
            "Transaction integrity",
        ]

    def test_default_considerations(self):
        story = generate_user_stories(["Browse the catalogue"])[0]
        assert story.security_considerations == ["Input validation", "Audit logging"]

    def test_effort(self):
        stories = generate_user_stories(["Browse"])
        assert stories[0].estimated_effort == Effort.MEDIUM
        assert stories[1].estimated_effort == Effort.LARGE


# ---------------------------------------------------------------------------
# Security requirements
# ---------------------------------------------------------------------------

class TestSecurityRequirements:
    def test_standard_set_without_domain(self):
        requirements = generate_security_requirements()
        assert len(requirements) == 7
        assert requirements[0].id == "SR-001"
        assert requirements[-1].id == "SR-007"
        assert requirements[0].compliance_mapping == ["OWASP-A07"]
        assert requirements[4].compliance_mapping == []

    def test_encryption_at_rest_present_for_critical_data(self, healthcare):
        requirements = generate_security_requirements(healthcare)
        assert any(r.requirement == ENCRYPTION_AT_REST for r in requirements)

    def test_domain_regulations_prefix_mapping(self, healthcare):
        encryption = generate_security_requirements(healthcare)[2]
        assert encryption.compliance_mapping == ["HIPAA", "HITECH", "OWASP-A02"]

    def test_first_three_clauses_per_regulation(self, healthcare):
        requirements = generate_security_requirements(healthcare)
        clauses = requirements[7:]
        hipaa = [r for r in clauses if r.category == "HIPAA"]
        hitech = [r for r in clauses if r.category == "HITECH"]
        assert len(hipaa) == 3
        assert 1 <= len(hitech) <= 3
        assert all(r.priority == Severity.CRITICAL for r in clauses)
        assert hipaa[0].requirement.startswith("Access Control: ")

    def test_ids_are_sequential(self, healthcare):
        requirements = generate_security_requirements(healthcare)
        assert [r.id for r in requirements] == [f"SR-{n:03d}" for n in range(1, len(requirements) + 1)]


# ---------------------------------------------------------------------------
# Abuse cases
# ---------------------------------------------------------------------------

class TestAbuseCases:
    def test_standard_cases(self):
        cases = generate_abuse_cases()
        assert [c.id for c in cases] == ["AC-001", "AC-002", "AC-003", "AC-004"]
        assert cases[0].title == "Credential Stuffing Attack"

    def test_domain_threats_appended(self, healthcare):
        cases = generate_abuse_cases(healthcare)
        assert len(cases) == 7
        assert cases[4].title == "Unauthorized PHI Access"
        assert cases[4].as_a == "attacker"


# ---------------------------------------------------------------------------
# analyze_requirements
# ---------------------------------------------------------------------------

class TestAnalyzeRequirements:
    def test_project_name(self):
        assert extract_project_name("Patient health records management with HIPAA compliance") == (
            "Patient health records management with"
        )

    def test_healthcare_output(self, healthcare_ba):
        assert healthcare_ba.domain == "healthcare"
        assert healthcare_ba.compliance_frameworks == ["HIPAA", "HITECH"]
        assert len(healthcare_ba.user_stories) == 6
        assert healthcare_ba.stakeholders[0].name == "Patient"
        assert "Diagnoses" in healthcare_ba.data_classification.critical

    def test_without_domain(self):
        ba = analyze_requirements("A recipe website", ["Share recipes"])
        assert ba.domain == "generic"
        assert ba.stakeholders == []
        assert ba.compliance_frameworks == []
        assert ba.data_classification == DEFAULT_DATA_CLASSIFICATION

    def test_default_classification_not_shared_between_runs(self):
        first = analyze_requirements("A recipe website", [])
        first.data_classification.critical.append("Recipes")
        second = analyze_requirements("A recipe website", [])
        assert second.data_classification.critical == ["Passwords", "API Keys"]
        assert DEFAULT_DATA_CLASSIFICATION.critical == ["Passwords", "API Keys"]

    def test_domain_classification_not_shared_with_domain(self, healthcare):
        ba = analyze_requirements("Patient portal", [], healthcare)
        ba.data_classification.critical.append("Recipes")
        assert "Recipes" not in healthcare.domain.data_classification.critical
