"""Test strategy: test cases, penetration-test plan and automation coverage.

Test case ids run ``TC-001`` upwards across features, then threats, then
compliance requirements.  Security test content is looked up by the
threat's category.
"""

from __future__ import annotations

from src.analyst.models import Priority, Severity
from src.designer.models import Feature
from src.domains.models import Impact
from src.security.models import StrideCategory, Threat
from src.utils import IdSequence

from .models import AutomationCoverage, PenTestPhase, QAOutput, TestCase

FEATURE_PRIORITY_TO_SEVERITY = {
    Priority.P0: Severity.CRITICAL,
    Priority.P1: Severity.HIGH,
    Priority.P2: Severity.MEDIUM,
    Priority.P3: Severity.LOW,
}

IMPACT_TO_SEVERITY = {
    Impact.CRITICAL: Severity.CRITICAL,
    Impact.HIGH: Severity.HIGH,
    Impact.MEDIUM: Severity.MEDIUM,
    Impact.LOW: Severity.LOW,
}

# category -> (test category, steps, tools)
SECURITY_TESTS: dict[StrideCategory, tuple[str, list[str], list[str]]] = {
    StrideCategory.SPOOFING: (
        "Authentication",
        ["Attempt authentication bypass", "Test for weak credentials",
         "Verify MFA enforcement", "Check session management"],
        ["Burp Suite", "OWASP ZAP", "Selenium"],
    ),
    StrideCategory.TAMPERING: (
        "Authorization",
        ["Attempt unauthorized data modification", "Test integrity checks",
         "Verify RBAC enforcement", "Check audit logging"],
        ["Postman", "Burp Suite", "Custom scripts"],
    ),
    StrideCategory.REPUDIATION: (
        "Audit",
        ["Perform a sensitive action and attempt to deny it",
         "Verify the audit trail records actor, action and timestamp",
         "Check that audit logs are tamper-evident", "Verify log retention period"],
        ["Manual review", "SIEM queries"],
    ),
    StrideCategory.INFORMATION_DISCLOSURE: (
        "Cryptography",
        ["Test for data leakage", "Verify encryption at rest",
         "Check TLS configuration", "Review error messages"],
        ["SSLyze", "testssl.sh", "Burp Suite"],
    ),
    StrideCategory.DENIAL_OF_SERVICE: (
        "Availability",
        ["Load testing", "Verify rate limiting", "Test resource quotas", "Check auto-scaling"],
        ["JMeter", "Locust", "Artillery"],
    ),
    StrideCategory.ELEVATION_OF_PRIVILEGE: (
        "Authorization",
        ["Test vertical privilege escalation", "Test horizontal privilege escalation",
         "Verify permission boundaries", "Check admin function access"],
        ["Burp Suite", "Custom scripts"],
    ),
}
FALLBACK_SECURITY_TEST = ("Security", ["Manual security review"], ["Manual testing"])

# Only audit-trail checks need a human in the loop.
MANUAL_CATEGORIES = {StrideCategory.REPUDIATION}

MAX_EXPLOIT_TARGETS = 3


def _security_test(threat: Threat) -> tuple[str, list[str], list[str]]:
    category = threat.stride
    if category is None:
        return FALLBACK_SECURITY_TEST
    return SECURITY_TESTS[category]


def can_automate(threat: Threat) -> bool:
    return threat.stride not in MANUAL_CATEGORIES


# ---------------------------------------------------------------------------
# Test cases
# ---------------------------------------------------------------------------

def generate_test_cases(
    features: list[Feature], threats: list[Threat], compliance_requirements: list[str]
) -> list[TestCase]:
    ids = IdSequence("TC")
    cases: list[TestCase] = []

    for feature in features:
        cases.append(TestCase(
            id=ids.next(),
            category="Functional",
            title=f"Verify {feature.name} functionality",
            related_to=feature.id,
            priority=FEATURE_PRIORITY_TO_SEVERITY.get(feature.priority, Severity.LOW),
            steps=[
                f"Navigate to {feature.name} feature",
                "Verify all UI elements are present",
                "Test happy path scenario",
                "Verify expected outcome",
            ],
            expected_result=f"{feature.name} works as specified",
            automated=True,
            tools=["Selenium", "Jest"],
        ))

    for threat in threats:
        category, steps, tools = _security_test(threat)
        cases.append(TestCase(
            id=ids.next(),
            category=category,
            title=f"Verify protection against {threat.name}",
            related_to=threat.id,
            priority=IMPACT_TO_SEVERITY[threat.impact],
            steps=list(steps),
            expected_result=f"System is protected against {threat.category}",
            automated=can_automate(threat),
            tools=list(tools),
        ))

    for requirement in compliance_requirements:
        cases.append(TestCase(
            id=ids.next(),
            category="Compliance",
            title=f"Verify {requirement} compliance",
            related_to=requirement,
            priority=Severity.CRITICAL,
            steps=[
                f"Review {requirement} requirements",
                "Map requirements to controls",
                "Verify controls are implemented",
                "Document evidence",
            ],
            expected_result=f"{requirement} requirements are met",
            automated=False,
            tools=["Manual audit", "Compliance checklist"],
        ))

    return cases


# ---------------------------------------------------------------------------
# Penetration test plan & coverage
# ---------------------------------------------------------------------------

def generate_pen_test_plan(threats: list[Threat]) -> list[PenTestPhase]:
    """Five fixed phases; Exploitation also targets the first three threats."""
    exploitation = [
        "OWASP Top 10 testing",
        "Authentication bypass attempts",
        "Privilege escalation testing",
        "Business logic testing",
    ]
    exploitation += [f"Test for {t.category}: {t.name}" for t in threats[:MAX_EXPLOIT_TARGETS]]

    return [
        PenTestPhase(phase="Reconnaissance", duration="2 days", activities=[
            "OSINT gathering", "Network enumeration",
            "Technology stack identification", "Attack surface mapping",
        ]),
        PenTestPhase(phase="Scanning & Vulnerability Assessment", duration="3 days", activities=[
            "Port scanning (Nmap)", "Vulnerability scanning (Nessus)",
            "Web application scanning (OWASP ZAP)", "API endpoint discovery",
        ]),
        PenTestPhase(phase="Exploitation", duration="5 days", activities=exploitation),
        PenTestPhase(phase="Post-Exploitation", duration="2 days", activities=[
            "Lateral movement assessment", "Data exfiltration simulation",
            "Persistence testing", "Clean-up verification",
        ]),
        PenTestPhase(phase="Reporting", duration="2 days", activities=[
            "Finding documentation", "Risk assessment",
            "Remediation recommendations", "Executive summary",
        ]),
    ]


def calculate_coverage(cases: list[TestCase]) -> AutomationCoverage:
    """Automated share of all test cases; 0% when there are none."""
    total = len(cases)
    automated = sum(1 for case in cases if case.automated)
    percentage = round(100 * automated / total) if total else 0
    return AutomationCoverage(
        total=total,
        automated=automated,
        manual=total - automated,
        percentage=percentage,
    )


def design_test_strategy(
    features: list[Feature],
    threats: list[Threat],
    compliance_requirements: list[str] | None = None,
) -> QAOutput:
    cases = generate_test_cases(features, threats, compliance_requirements or [])
    return QAOutput(
        test_cases=cases,
        penetration_test_plan=generate_pen_test_plan(threats),
        automation_coverage=calculate_coverage(cases),
    )
