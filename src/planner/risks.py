"""Risk register synthesised from features, threats and the schedule."""

from __future__ import annotations

from src.analyst.models import Priority
from src.designer.models import Feature
from src.domains.models import Impact, Likelihood
from src.security.models import Threat
from src.utils import IdSequence

from .models import CriticalPathAnalysis, RiskCategory, RiskItem, RiskStatus, TeamAllocation

PROBABILITY_WEIGHTS = {Likelihood.LOW: 1, Likelihood.MEDIUM: 2, Likelihood.HIGH: 3}
IMPACT_WEIGHTS = {Impact.LOW: 1, Impact.MEDIUM: 2, Impact.HIGH: 3, Impact.CRITICAL: 4}

MIN_BUFFER_DAYS = 5
MAX_UTILIZATION = 80


def risk_score(probability: Likelihood, impact: Impact) -> int:
    return PROBABILITY_WEIGHTS[probability] * IMPACT_WEIGHTS[impact]


def _risk(
    ids: IdSequence,
    category: RiskCategory,
    description: str,
    probability: Likelihood,
    impact: Impact,
    mitigation: str,
    contingency: str,
    owner: str,
    status: RiskStatus = RiskStatus.IDENTIFIED,
) -> RiskItem:
    return RiskItem(
        id=ids.next(),
        category=category,
        description=description,
        probability=probability,
        impact=impact,
        score=risk_score(probability, impact),
        mitigation=mitigation,
        contingency=contingency,
        owner=owner,
        status=status,
    )


def generate_risk_register(
    features: list[Feature],
    threats: list[Threat],
    critical_path: CriticalPathAnalysis,
    team: TeamAllocation,
) -> list[RiskItem]:
    ids = IdSequence("RISK")
    risks: list[RiskItem] = []

    for feature in features:
        if feature.priority == Priority.P0:
            risks.append(_risk(
                ids, RiskCategory.TECHNICAL,
                f'Feature "{feature.name}" may hide technical complexity',
                Likelihood.MEDIUM, Impact.HIGH,
                "Build a proof of concept first and reserve buffer time",
                "Reduce the feature to its MVP scope",
                "Tech Lead",
            ))

    for threat in threats:
        if threat.impact == Impact.CRITICAL:
            risks.append(_risk(
                ids, RiskCategory.SECURITY,
                f"Critical threat: {threat.name} - {threat.description}",
                threat.likelihood, threat.impact,
                "; ".join(threat.mitigations),
                "Apply compensating controls and escalate to the security lead",
                "Security Engineer",
            ))

    risks.append(_risk(
        ids, RiskCategory.RESOURCE,
        "Key team member leaves during the project",
        Likelihood.LOW, Impact.HIGH,
        "Knowledge-sharing sessions, documentation and pair programming",
        "Cross-train team members",
        "Tech Lead", RiskStatus.MITIGATING,
    ))

    if critical_path.buffer_days < MIN_BUFFER_DAYS:
        risks.append(_risk(
            ids, RiskCategory.SCHEDULE,
            f"Critical path has only {critical_path.buffer_days} buffer days",
            Likelihood.HIGH, Impact.HIGH,
            "Parallelise work where possible and trim scope early",
            "Negotiate a deadline extension or ship P0 features only",
            "Tech Lead", RiskStatus.MITIGATING,
        ))

    overloaded = [m for m in team.members if m.utilization > MAX_UTILIZATION]
    if overloaded:
        names = ", ".join(f"{m.role} ({m.utilization}%)" for m in overloaded)
        risks.append(_risk(
            ids, RiskCategory.RESOURCE,
            f"Over-allocated team members: {names}",
            Likelihood.HIGH, Impact.MEDIUM,
            "Rebalance tasks or add capacity",
            "Move P2/P3 work to a later release",
            "Tech Lead",
        ))

    risks.append(_risk(
        ids, RiskCategory.EXTERNAL,
        "Third-party API or service dependency fails",
        Likelihood.MEDIUM, Impact.MEDIUM,
        "Fallbacks, response caching and SLA monitoring",
        "Switch provider or degrade to offline mode",
        "Backend Dev", RiskStatus.MITIGATING,
    ))
    return risks
