"""STRIDE threat modelling over the module breakdown.

Module threats come from substring heuristics on the module name; domain
threats are appended from the catalog with a likelihood x impact score.
All tags and mitigations are static lookups keyed by category.
"""

from __future__ import annotations

from typing import Optional

from src.analyst.models import Severity
from src.designer.models import Module
from src.domains.models import Impact, Likelihood, LoadedDomain
from src.utils import IdSequence

from .models import RiskMatrixEntry, SecurityOutput, StrideCategory, Threat, ThreatSource

LIKELIHOOD_WEIGHTS = {Likelihood.LOW: 1, Likelihood.MEDIUM: 2, Likelihood.HIGH: 3}
IMPACT_WEIGHTS = {Impact.LOW: 1, Impact.MEDIUM: 2, Impact.HIGH: 3, Impact.CRITICAL: 4}
DOMAIN_RISK_FACTOR = 1.1

CWE_BY_CATEGORY = {
    StrideCategory.SPOOFING: "CWE-287",
    StrideCategory.TAMPERING: "CWE-284",
    StrideCategory.REPUDIATION: "CWE-778",
    StrideCategory.INFORMATION_DISCLOSURE: "CWE-200",
    StrideCategory.DENIAL_OF_SERVICE: "CWE-770",
    StrideCategory.ELEVATION_OF_PRIVILEGE: "CWE-269",
}
OWASP_BY_CATEGORY = {
    StrideCategory.SPOOFING: "A07:2021",
    StrideCategory.TAMPERING: "A01:2021",
    StrideCategory.INFORMATION_DISCLOSURE: "A01:2021",
    StrideCategory.DENIAL_OF_SERVICE: "A04:2021",
    StrideCategory.ELEVATION_OF_PRIVILEGE: "A01:2021",
}
FALLBACK_CWE = "CWE-1000"
FALLBACK_OWASP = "A00:2021"

MITIGATIONS = {
    StrideCategory.SPOOFING: [
        "Implement multi-factor authentication",
        "Use secure session management",
        "Monitor for suspicious login patterns",
    ],
    StrideCategory.TAMPERING: [
        "Implement integrity checks (HMAC)",
        "Enable audit logging",
        "Use role-based access control",
    ],
    StrideCategory.INFORMATION_DISCLOSURE: [
        "Encrypt sensitive data at rest",
        "Use TLS for data in transit",
        "Implement data masking in logs",
    ],
    StrideCategory.DENIAL_OF_SERVICE: [
        "Implement rate limiting",
        "Use resource quotas",
        "Enable auto-scaling",
    ],
    StrideCategory.ELEVATION_OF_PRIVILEGE: [
        "Implement strict RBAC",
        "Apply principle of least privilege",
        "Regular permission audits",
    ],
}

DOMAIN_TARGET = "System"


# ---------------------------------------------------------------------------
# Scoring
# ---------------------------------------------------------------------------

def calculate_risk(likelihood: Likelihood | str, impact: Impact | str) -> float:
    """``likelihood weight x impact weight x 1.1``, rounded to one decimal."""
    score = LIKELIHOOD_WEIGHTS[Likelihood(likelihood)] * IMPACT_WEIGHTS[Impact(impact)]
    return round(score * DOMAIN_RISK_FACTOR, 1)


def categorize_risk(score: float) -> Severity:
    """Bucket a numeric score: >=8 critical, >=6 high, >=4 medium, else low."""
    if score >= 8:
        return Severity.CRITICAL
    if score >= 6:
        return Severity.HIGH
    if score >= 4:
        return Severity.MEDIUM
    return Severity.LOW


def cwe_for(category: str) -> str:
    try:
        return CWE_BY_CATEGORY[StrideCategory(category)]
    except ValueError:
        return FALLBACK_CWE


def owasp_for(category: str) -> str:
    try:
        return OWASP_BY_CATEGORY.get(StrideCategory(category), FALLBACK_OWASP)
    except ValueError:
        return FALLBACK_OWASP


# ---------------------------------------------------------------------------
# Threat generation
# ---------------------------------------------------------------------------

def _threat(
    ids: IdSequence,
    category: StrideCategory,
    name: str,
    description: str,
    target: str,
    likelihood: Likelihood,
    impact: Impact,
    score: float,
) -> Threat:
    return Threat(
        id=ids.next(),
        category=category.value,
        name=name,
        description=description,
        target=target,
        likelihood=likelihood,
        impact=impact,
        risk_score=score,
        cwe=CWE_BY_CATEGORY[category],
        owasp=OWASP_BY_CATEGORY.get(category, FALLBACK_OWASP),
        mitigations=list(MITIGATIONS[category]),
    )


def analyze_module_threats(module: Module, ids: IdSequence) -> list[Threat]:
    """STRIDE threats for one module, in Spoofing/Tampering/Disclosure/DoS/EoP order."""
    name = module.name
    lowered = name.lower()
    is_auth = "auth" in lowered
    is_data = "data" in lowered or "repository" in lowered
    is_controller = "controller" in lowered

    threats: list[Threat] = []
    if is_auth or is_controller:
        threats.append(_threat(
            ids, StrideCategory.SPOOFING,
            f"Identity Spoofing on {name}",
            f"Attacker impersonates a legitimate user to access {name}",
            name, Likelihood.HIGH, Impact.CRITICAL, 9.0,
        ))
    if is_data:
        threats.append(_threat(
            ids, StrideCategory.TAMPERING,
            f"Data Tampering in {name}",
            f"Unauthorized modification of data in {name}",
            name, Likelihood.MEDIUM, Impact.HIGH, 7.0,
        ))
    threats.append(_threat(
        ids, StrideCategory.INFORMATION_DISCLOSURE,
        f"Data Leakage from {name}",
        f"Sensitive information exposed from {name}",
        name, Likelihood.MEDIUM,
        Impact.CRITICAL if is_data else Impact.HIGH,
        8.0 if is_data else 6.5,
    ))
    if is_controller:
        threats.append(_threat(
            ids, StrideCategory.DENIAL_OF_SERVICE,
            f"DoS Attack on {name}",
            f"Resource exhaustion attack targeting {name}",
            name, Likelihood.MEDIUM, Impact.MEDIUM, 5.5,
        ))
    if is_auth:
        threats.append(_threat(
            ids, StrideCategory.ELEVATION_OF_PRIVILEGE,
            f"Privilege Escalation via {name}",
            f"Attacker gains unauthorized elevated access through {name}",
            name, Likelihood.MEDIUM, Impact.CRITICAL, 8.5,
        ))
    return threats


def domain_threats(domain: LoadedDomain, ids: IdSequence) -> list[Threat]:
    """Catalog threats against the whole system, rescored from likelihood x impact."""
    return [
        Threat(
            id=ids.next(),
            category=entry.category,
            name=entry.name,
            description=entry.description,
            target=DOMAIN_TARGET,
            likelihood=entry.likelihood,
            impact=entry.impact,
            risk_score=calculate_risk(entry.likelihood, entry.impact),
            cwe=cwe_for(entry.category),
            owasp=owasp_for(entry.category),
            mitigations=[entry.mitigation] if entry.mitigation else [],
            compliance_impact=entry.compliance_impact,
            source=ThreatSource.DOMAIN,
        )
        for entry in domain.threats
    ]


def generate_risk_matrix(threats: list[Threat]) -> list[RiskMatrixEntry]:
    return [
        RiskMatrixEntry(
            threat_id=t.id,
            likelihood=t.likelihood,
            impact=t.impact,
            risk_score=t.risk_score,
            risk=categorize_risk(t.risk_score),
        )
        for t in threats
    ]


def generate_recommendations(
    threats: list[Threat], domain: Optional[LoadedDomain] = None
) -> list[str]:
    """Summary lines from threat counts plus one per domain regulation."""
    critical = sum(1 for t in threats if t.impact == Impact.CRITICAL)
    high = sum(1 for t in threats if t.impact == Impact.HIGH)
    recommendations = [
        f"{critical} critical threats require immediate attention",
        f"{high} high-priority threats need mitigation planning",
        "Implement defense-in-depth: multiple layers of security",
        "Use this threat model as input for security testing",
    ]
    if domain is not None:
        for regulation in domain.regulation_names:
            recommendations.append(f"Ensure {regulation} compliance controls are implemented")
    return recommendations


def generate_threat_model(
    modules: list[Module], domain: Optional[LoadedDomain] = None
) -> SecurityOutput:
    """Threats for every module, then the domain's catalog threats.

    Ids run ``T-001``, ``T-002``, ... across both groups in emission order.
    """
    ids = IdSequence("T")
    threats = [t for module in modules for t in analyze_module_threats(module, ids)]
    if domain is not None:
        threats.extend(domain_threats(domain, ids))

    return SecurityOutput(
        threats=threats,
        risk_matrix=generate_risk_matrix(threats),
        recommendations=generate_recommendations(threats, domain),
    )
