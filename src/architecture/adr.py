"""Architecture decision record generation.

Decision areas come from the module breakdown and the domain; options,
context and consequences come from ``decisions.yaml``.  Option scores are
adjusted against the project constraints and the highest adjusted score is
chosen.
"""

from __future__ import annotations

from datetime import date
from functools import lru_cache
from pathlib import Path
from typing import Any, Optional

import yaml
from pydantic import BaseModel, ConfigDict, Field

from src.designer.models import Module, ModuleType
from src.domains.models import EncryptionPolicy, LoadedDomain
from src.utils import IdSequence, contains_any

from .models import (
    ADROutput,
    ADRSummary,
    AdrStatus,
    ArchitectureDecision,
    Constraint,
    ConstraintType,
    DecisionOption,
    Level,
    TechComparison,
    TechnologyOption,
    TradeoffComparison,
    TradeoffMatrix,
)

CATALOG_FILE = Path(__file__).parent / "decisions.yaml"

SOFT_WEIGHT = 5
HARD_WEIGHT = 15

BASE_AREAS = ["caching", "logging", "deployment", "error_handling"]

# Extra decision areas per domain, appended after the base areas.
DOMAIN_AREAS: dict[str, list[str]] = {
    "secure_comm": ["e2ee_protocol", "key_exchange"],
    "malware_analysis": ["sandbox", "static_analysis"],
    "blockchain": ["consensus", "smart_contract_language"],
    "ml_ai": ["model_serving", "feature_store", "adversarial_defense"],
    "networksec": ["ids_mode", "packet_capture"],
    "websec": ["waf", "bot_detection"],
    "appsec": ["sast_tool", "security_testing_pipeline"],
}

LEVEL_ORDER = {Level.LOW: 0, Level.MEDIUM: 1, Level.HIGH: 2}


# ---------------------------------------------------------------------------
# Catalog
# ---------------------------------------------------------------------------

class DecisionArea(BaseModel):
    model_config = ConfigDict(frozen=True)

    title: str
    context: str = ""
    drivers: tuple[str, ...] = ()
    options: tuple[DecisionOption, ...] = ()
    related: tuple[str, ...] = ()
    compliance_keywords: tuple[str, ...] = ()


class DecisionCatalog(BaseModel):
    """Everything loaded from ``decisions.yaml``."""

    model_config = ConfigDict(frozen=True)

    areas: dict[str, DecisionArea] = Field(default_factory=dict)
    technology: dict[str, TechComparison] = Field(default_factory=dict)


@lru_cache(maxsize=1)
def load_decision_catalog(path: Path = CATALOG_FILE) -> DecisionCatalog:
    raw: dict[str, Any] = yaml.safe_load(path.read_text(encoding="utf-8")) or {}
    return DecisionCatalog.model_validate(raw)


# ---------------------------------------------------------------------------
# Decision areas
# ---------------------------------------------------------------------------

def _needs_auth_decision(modules: list[Module]) -> bool:
    return any(contains_any(m.name, ("auth", "security")) for m in modules)


def _needs_encryption_decision(domain: Optional[LoadedDomain]) -> bool:
    if domain is None:
        return False
    return any(d.encryption == EncryptionPolicy.REQUIRED for d in domain.domain.sensitive_data)


def identify_decision_areas(
    modules: list[Module], domain: Optional[LoadedDomain] = None
) -> list[str]:
    """Catalog keys of the decisions this system needs, in ADR order."""
    areas = ["database"]
    if any(m.type == ModuleType.CONTROLLER for m in modules):
        areas.append("api_style")
    if _needs_auth_decision(modules):
        areas.append("auth")
    if _needs_encryption_decision(domain):
        areas.append("encryption")
    areas.extend(BASE_AREAS)
    if domain is not None:
        areas.extend(DOMAIN_AREAS.get(domain.name, []))
    return areas


# ---------------------------------------------------------------------------
# Scoring
# ---------------------------------------------------------------------------

def constraint_adjustment(option: DecisionOption, constraint: Constraint) -> int:
    """Score delta one constraint applies to one option.

    Only constraints of a type the option ``affects`` count.  A keyword match
    in the constraint text is a bonus; otherwise budget favours cheap options
    and timeline / team-skill favour simple ones.
    """
    if constraint.type not in option.affects:
        return 0
    weight = HARD_WEIGHT if constraint.hard else SOFT_WEIGHT
    if option.keywords and contains_any(constraint.description, option.keywords):
        return weight
    if constraint.type == ConstraintType.BUDGET:
        level = option.cost
    elif constraint.type in (ConstraintType.TIMELINE, ConstraintType.TEAM_SKILL):
        level = option.complexity
    else:
        return 0
    return {Level.LOW: weight, Level.MEDIUM: 0, Level.HIGH: -weight}[level]


def score_option(
    option: DecisionOption, constraints: list[Constraint], tech_stack: list[str]
) -> DecisionOption:
    """A copy of *option* with its score adjusted and clamped to 0-100."""
    score = option.score + sum(constraint_adjustment(option, c) for c in constraints)
    stack = " ".join(tech_stack)
    if option.keywords and stack and contains_any(stack, option.keywords):
        score += SOFT_WEIGHT
    return option.model_copy(update={"score": max(0, min(100, score))}, deep=True)


def is_high_risk(decision: ArchitectureDecision, constraints: list[Constraint]) -> bool:
    """Chosen option cannot be undone, or touches a hard constraint."""
    chosen = decision.chosen_option
    if chosen is None:
        return False
    hard_types = {c.type for c in constraints if c.hard}
    return not chosen.reversible or any(t in hard_types for t in chosen.affects)


# ---------------------------------------------------------------------------
# ADRs
# ---------------------------------------------------------------------------

def _compliance_impact(area: DecisionArea, domain: Optional[LoadedDomain]) -> list[str]:
    if domain is None or domain.compliance is None or not area.compliance_keywords:
        return []
    impact = []
    for regulation in domain.compliance.regulations:
        for requirement in regulation.requirements:
            text = f"{requirement.name} {requirement.description}"
            if contains_any(text, area.compliance_keywords):
                impact.append(f"{regulation.name} {requirement.id}: {requirement.name}")
    return impact


def _decision_text(chosen: DecisionOption, others: list[DecisionOption]) -> str:
    lines = [f"**Selected: {chosen.name}**", "", f"{chosen.description}."]
    if chosen.pros:
        lines += ["", "Key reasons:"]
        lines += [f"{n}. {pro}" for n, pro in enumerate(chosen.pros, start=1)]
    if others:
        runners = ", ".join(f"{o.name} ({o.score}/100)" for o in others)
        lines += ["", f"Scored {chosen.score}/100 against {runners}."]
    return "\n".join(lines)


def generic_adr(adr_id: str, key: str, title: str, decided_on: date) -> ArchitectureDecision:
    """Placeholder ADR for an area the catalog has no options for."""
    return ArchitectureDecision(
        id=adr_id,
        title=title,
        area=key,
        status=AdrStatus.PROPOSED,
        decided_on=decided_on,
        context=f"Decision required for: {title}",
        decision_drivers=["To be determined"],
        decision="To be decided based on team discussion",
    )


def generate_adr(
    adr_id: str,
    key: str,
    area: DecisionArea,
    constraints: list[Constraint],
    tech_stack: list[str],
    domain: Optional[LoadedDomain],
    decided_on: date,
) -> ArchitectureDecision:
    if not area.options:
        return generic_adr(adr_id, key, area.title, decided_on)

    options = [score_option(o, constraints, tech_stack) for o in area.options]
    # max() keeps the first option on ties
    chosen = max(options, key=lambda o: o.score)
    others = [o for o in options if o is not chosen]

    return ArchitectureDecision(
        id=adr_id,
        title=area.title,
        area=key,
        status=AdrStatus.ACCEPTED,
        decided_on=decided_on,
        context=area.context.strip(),
        decision_drivers=list(area.drivers),
        options=options,
        chosen=chosen.name,
        decision=_decision_text(chosen, others),
        consequences=[c.model_copy() for c in chosen.consequences],
        compliance_impact=_compliance_impact(area, domain),
    )


# ---------------------------------------------------------------------------
# Analysis
# ---------------------------------------------------------------------------

def _winner(dimension: str, a: DecisionOption, b: DecisionOption) -> str:
    if dimension == "performance":
        return a.name if LEVEL_ORDER[a.complexity] < LEVEL_ORDER[b.complexity] else b.name
    if dimension == "security":
        return a.name if LEVEL_ORDER[a.risk] < LEVEL_ORDER[b.risk] else b.name
    if dimension == "cost":
        return a.name if LEVEL_ORDER[a.cost] < LEVEL_ORDER[b.cost] else b.name
    return a.name if a.score > b.score else b.name


def generate_tradeoff_matrix(decisions: list[ArchitectureDecision]) -> TradeoffMatrix:
    """Compare the first two options of every decision on each impact area."""
    dimensions: list[str] = []
    for decision in decisions:
        for consequence in decision.consequences:
            if consequence.impact_area.value not in dimensions:
                dimensions.append(consequence.impact_area.value)

    comparisons = []
    for decision in decisions:
        if len(decision.options) < 2:
            continue
        a, b = decision.options[0], decision.options[1]
        comparisons.append(TradeoffComparison(
            decision_id=decision.id,
            option_a=a.name,
            option_b=b.name,
            winner_by_dimension={d: _winner(d, a, b) for d in dimensions},
            recommendation=decision.chosen or "",
        ))
    return TradeoffMatrix(dimensions=dimensions, comparisons=comparisons)


def generate_tech_comparison(areas: list[str]) -> list[TechComparison]:
    technology = load_decision_catalog().technology
    return [technology[key].model_copy(deep=True) for key in areas if key in technology]


def default_constraints(delivery_weeks: int) -> list[Constraint]:
    """Delivery deadline from the project plan plus the usual team profile."""
    return [
        Constraint(
            type=ConstraintType.TIMELINE,
            description=f"Must deliver in {delivery_weeks} weeks",
            hard=True,
            impact="Limits technology choices to mature, well-documented options",
        ),
        Constraint(
            type=ConstraintType.TEAM_SKILL,
            description="Team has strong background in SQL and REST APIs",
            hard=False,
            impact="Prefer relational databases and REST",
        ),
    ]


def generate_adrs(
    modules: list[Module],
    tech_stack: list[str],
    domain: Optional[LoadedDomain] = None,
    constraints: list[Constraint] | None = None,
    decided_on: date | None = None,
) -> ADROutput:
    """Generate one ADR per decision area plus the trade-off analysis."""
    catalog = load_decision_catalog()
    constraints = constraints or []
    decided_on = decided_on or date.today()
    ids = IdSequence("ADR")

    areas = identify_decision_areas(modules, domain)
    decisions: list[ArchitectureDecision] = []
    id_by_area: dict[str, str] = {}
    for key in areas:
        adr = generate_adr(
            ids.next(), key, catalog.areas[key], constraints, tech_stack, domain, decided_on
        )
        id_by_area[key] = adr.id
        decisions.append(adr)

    for adr in decisions:
        related = catalog.areas[adr.area].related
        adr.related_decisions = [id_by_area[k] for k in related if k in id_by_area]

    return ADROutput(
        decisions=decisions,
        tradeoff_analysis=generate_tradeoff_matrix(decisions),
        technology_comparison=generate_tech_comparison(areas),
        summary=ADRSummary(
            total_decisions=len(decisions),
            accepted_decisions=sum(1 for d in decisions if d.status == AdrStatus.ACCEPTED),
            key_decision_areas=[d.title for d in decisions],
            high_risk_decisions=[d.id for d in decisions if is_high_risk(d, constraints)],
        ),
    )
