"""Requirements analyzer for the business-analysis phase.

Turns a project description and a list of business goals into user stories,
security requirements and abuse cases, tailored by the resolved domain's
stakeholders, regulations and known threats.  Every rule is a keyword or
table lookup, so the same input always yields the same output.
"""

from __future__ import annotations

from typing import Optional

from src.domains.models import DataClassification, Impact, Likelihood, LoadedDomain
from src.utils import IdSequence, contains_any, first_words

from .models import (
    AbuseCase,
    BAOutput,
    Effort,
    Priority,
    SecurityRequirement,
    Severity,
    UserStory,
)

# Regulation clauses copied into the requirement list, per regulation.
REQUIREMENTS_PER_REGULATION = 3

# Domain threats promoted to abuse cases.
DOMAIN_ABUSE_CASES = 3

DEFAULT_DATA_CLASSIFICATION = DataClassification(
    critical=["Passwords", "API Keys"],
    high=["PII", "Email"],
    medium=["Preferences"],
    low=["Public data"],
)

ENCRYPTION_AT_REST = "Encrypt sensitive data at rest (AES-256)"

STANDARD_REQUIREMENTS: list[tuple[str, str, Severity]] = [
    ("Authentication", "Implement multi-factor authentication", Severity.CRITICAL),
    ("Authorization", "Implement role-based access control (RBAC)", Severity.CRITICAL),
    ("Encryption", ENCRYPTION_AT_REST, Severity.CRITICAL),
    ("Encryption", "Use TLS 1.3 for data in transit", Severity.CRITICAL),
    ("Input Validation", "Validate and sanitize all user input", Severity.HIGH),
    ("Logging", "Implement comprehensive audit logging", Severity.HIGH),
    ("Session", "Secure session management with timeout", Severity.HIGH),
]

OWASP_BY_CATEGORY: dict[str, str] = {
    "Authentication": "OWASP-A07",
    "Authorization": "OWASP-A07",
    "Encryption": "OWASP-A02",
}

STANDARD_ABUSE_CASES: list[dict] = [
    {
        "title": "Credential Stuffing Attack",
        "as_a": "attacker",
        "i_want": "to use stolen credentials",
        "so_that": "I can access user accounts",
        "likelihood": Likelihood.HIGH,
        "impact": Impact.CRITICAL,
        "mitigation": "MFA, rate limiting, credential monitoring",
    },
    {
        "title": "Privilege Escalation",
        "as_a": "malicious user",
        "i_want": "to gain admin access",
        "so_that": "I can access all data",
        "likelihood": Likelihood.MEDIUM,
        "impact": Impact.CRITICAL,
        "mitigation": "Strict RBAC, principle of least privilege",
    },
    {
        "title": "Data Exfiltration",
        "as_a": "insider threat",
        "i_want": "to export sensitive data",
        "so_that": "I can sell or leak it",
        "likelihood": Likelihood.MEDIUM,
        "impact": Impact.CRITICAL,
        "mitigation": "DLP, audit logging, data access monitoring",
    },
    {
        "title": "Injection Attack",
        "as_a": "attacker",
        "i_want": "to inject malicious code",
        "so_that": "I can execute unauthorized operations",
        "likelihood": Likelihood.HIGH,
        "impact": Impact.HIGH,
        "mitigation": "Input validation, parameterized queries, WAF",
    },
]

# (keywords, considerations); every matching row contributes.
CONSIDERATION_RULES: list[tuple[tuple[str, ...], tuple[str, ...]]] = [
    (("data", "record"), ("Data encryption required", "Access control validation")),
    (("user", "access"), ("Authentication required", "Session management")),
    (("payment", "financial"), ("PCI-DSS compliance", "Transaction integrity")),
]

DEFAULT_CONSIDERATIONS = ("Input validation", "Audit logging")


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

def extract_project_name(description: str) -> str:
    """The first five words of the description."""
    return first_words(description, 5, ellipsis=False)


def _story_title(goal: str) -> str:
    return first_words(goal, 5)


def _actor_for(goal: str, domain: Optional[LoadedDomain]) -> str:
    if contains_any(goal, ("admin", "manage")):
        return "admin"
    if contains_any(goal, ("compliance", "audit")):
        return "compliance officer"
    if contains_any(goal, ("security",)):
        return "security team"
    if domain is not None and domain.domain.stakeholders:
        return domain.domain.stakeholders[0].name.lower()
    return "user"


def _priority_for(goal: str) -> Priority:
    if contains_any(goal, ("security", "compliance", "critical")):
        return Priority.P0
    if contains_any(goal, ("important", "core")):
        return Priority.P1
    return Priority.P2


def _considerations_for(goal: str) -> list[str]:
    considerations: list[str] = []
    for keywords, items in CONSIDERATION_RULES:
        if contains_any(goal, keywords):
            considerations.extend(items)
    return considerations or list(DEFAULT_CONSIDERATIONS)


def _compliance_mapping(category: str, domain: Optional[LoadedDomain]) -> list[str]:
    mapping = list(domain.regulation_names) if domain is not None else []
    if category in OWASP_BY_CATEGORY:
        mapping.append(OWASP_BY_CATEGORY[category])
    return mapping


# ---------------------------------------------------------------------------
# Generators
# ---------------------------------------------------------------------------

def generate_user_stories(
    goals: list[str], domain: Optional[LoadedDomain] = None
) -> list[UserStory]:
    """One story per business goal, then the authentication and audit stories."""
    ids = IdSequence("US")
    stories: list[UserStory] = []

    for goal in goals:
        stories.append(UserStory(
            id=ids.next(),
            title=_story_title(goal),
            as_a=_actor_for(goal, domain),
            i_want=goal,
            so_that="the system meets business requirements",
            priority=_priority_for(goal),
            acceptance_criteria=[
                "Given I am authenticated",
                f"When I {goal.lower()}",
                "Then the action completes successfully",
                "And an audit log is created",
            ],
            security_considerations=_considerations_for(goal),
            estimated_effort=Effort.MEDIUM,
        ))

    stories.append(UserStory(
        id=ids.next(),
        title="Secure Authentication",
        as_a="user",
        i_want="to authenticate securely with MFA",
        so_that="my account is protected",
        priority=Priority.P0,
        acceptance_criteria=[
            "MFA is required for all users",
            "Password meets complexity requirements",
            "Session expires after inactivity",
            "Failed attempts are rate-limited",
        ],
        security_considerations=["Brute force protection", "Session management"],
        estimated_effort=Effort.LARGE,
    ))
    stories.append(UserStory(
        id=ids.next(),
        title="Audit Logging",
        as_a="compliance officer",
        i_want="comprehensive audit logs",
        so_that="I can investigate security incidents",
        priority=Priority.P0,
        acceptance_criteria=[
            "All data access is logged",
            "Logs are tamper-proof",
            "Logs include user, timestamp, action",
            "Log retention meets compliance requirements",
        ],
        security_considerations=["Log integrity", "PII in logs"],
        estimated_effort=Effort.MEDIUM,
    ))
    return stories


def generate_security_requirements(
    domain: Optional[LoadedDomain] = None,
) -> list[SecurityRequirement]:
    """The standard control set followed by the leading clauses of each regulation.

    The standard set always contains the encryption-at-rest requirement, which
    is what domains declaring ``critical`` sensitive data rely on.
    """
    ids = IdSequence("SR")
    requirements = [
        SecurityRequirement(
            id=ids.next(),
            category=category,
            requirement=text,
            priority=priority,
            compliance_mapping=_compliance_mapping(category, domain),
        )
        for category, text, priority in STANDARD_REQUIREMENTS
    ]

    if domain is not None and domain.compliance is not None:
        for regulation in domain.compliance.regulations:
            for clause in regulation.requirements[:REQUIREMENTS_PER_REGULATION]:
                requirements.append(SecurityRequirement(
                    id=ids.next(),
                    category=regulation.name,
                    requirement=f"{clause.name}: {clause.description}",
                    priority=Severity.CRITICAL,
                    compliance_mapping=[regulation.name],
                ))
    return requirements


def generate_abuse_cases(domain: Optional[LoadedDomain] = None) -> list[AbuseCase]:
    """The standard attacker stories plus the domain's first known threats."""
    ids = IdSequence("AC")
    cases = [AbuseCase(id=ids.next(), **template) for template in STANDARD_ABUSE_CASES]

    if domain is not None:
        for threat in domain.threats[:DOMAIN_ABUSE_CASES]:
            cases.append(AbuseCase(
                id=ids.next(),
                title=threat.name,
                as_a="attacker",
                i_want=f"to exploit {threat.category.lower()}",
                so_that=threat.description,
                likelihood=threat.likelihood,
                impact=threat.impact,
                mitigation=threat.mitigation,
            ))
    return cases


def analyze_requirements(
    project_description: str,
    business_goals: list[str],
    domain: Optional[LoadedDomain] = None,
) -> BAOutput:
    """Run the business-analysis phase.

    Args:
        project_description: Free-text description of the project.
        business_goals: One line per business goal; each becomes a user story.
        domain: The resolved domain, or ``None`` for domain-agnostic output.

    Returns:
        A ``BAOutput`` with stories, requirements, abuse cases and the data
        classification (the domain's, or a default table when it has none).
    """
    classification = DEFAULT_DATA_CLASSIFICATION
    if domain is not None and not domain.domain.data_classification.is_empty():
        classification = domain.domain.data_classification

    return BAOutput(
        project_name=extract_project_name(project_description),
        domain=domain.name if domain is not None else "generic",
        stakeholders=list(domain.domain.stakeholders) if domain is not None else [],
        user_stories=generate_user_stories(business_goals, domain),
        security_requirements=generate_security_requirements(domain),
        abuse_cases=generate_abuse_cases(domain),
        data_classification=classification.model_copy(deep=True),
        compliance_frameworks=domain.regulation_names if domain is not None else [],
    )
