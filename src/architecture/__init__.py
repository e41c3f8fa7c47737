"""Architecture decision records (ADR phase).

Usage::

    from src.architecture import default_constraints, generate_adrs

    output = generate_adrs(design.modules, ["python", "fastapi"], domain,
                           constraints=default_constraints(delivery_weeks=8))
    print(output.summary.high_risk_decisions)
"""

from src.architecture.adr import (
    DOMAIN_AREAS,
    constraint_adjustment,
    default_constraints,
    generate_adrs,
    generate_tradeoff_matrix,
    identify_decision_areas,
    is_high_risk,
    load_decision_catalog,
)
from src.architecture.models import (
    ADROutput,
    ADRSummary,
    AdrStatus,
    ArchitectureDecision,
    Consequence,
    ConsequenceType,
    Constraint,
    ConstraintType,
    DecisionOption,
    ImpactArea,
    Level,
    TechComparison,
    TradeoffComparison,
    TradeoffMatrix,
)

__all__ = [
    "DOMAIN_AREAS",
    "constraint_adjustment",
    "default_constraints",
    "generate_adrs",
    "generate_tradeoff_matrix",
    "identify_decision_areas",
    "is_high_risk",
    "load_decision_catalog",
    "ADROutput",
    "ADRSummary",
    "AdrStatus",
    "ArchitectureDecision",
    "Consequence",
    "ConsequenceType",
    "Constraint",
    "ConstraintType",
    "DecisionOption",
    "ImpactArea",
    "Level",
    "TechComparison",
    "TradeoffComparison",
    "TradeoffMatrix",
]
