"""Pydantic v2 models for architecture decision records (ADR phase)."""

from __future__ import annotations

from datetime import date
from enum import Enum
from typing import Optional

from pydantic import BaseModel, Field


# ---------------------------------------------------------------------------
# Enumerations
# ---------------------------------------------------------------------------

class AdrStatus(str, Enum):
    PROPOSED = "proposed"
    ACCEPTED = "accepted"
    DEPRECATED = "deprecated"
    SUPERSEDED = "superseded"


class ConstraintType(str, Enum):
    BUDGET = "budget"
    TIMELINE = "timeline"
    TECHNOLOGY = "technology"
    REGULATION = "regulation"
    TEAM_SKILL = "team_skill"


class Level(str, Enum):
    """Three-step scale for cost, complexity, risk and severity."""
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


class ConsequenceType(str, Enum):
    POSITIVE = "positive"
    NEGATIVE = "negative"
    NEUTRAL = "neutral"


class ImpactArea(str, Enum):
    PERFORMANCE = "performance"
    SECURITY = "security"
    MAINTAINABILITY = "maintainability"
    COST = "cost"
    SCALABILITY = "scalability"
    COMPLIANCE = "compliance"


class Maturity(str, Enum):
    EXPERIMENTAL = "experimental"
    EMERGING = "emerging"
    MATURE = "mature"
    LEGACY = "legacy"


# ---------------------------------------------------------------------------
# Inputs
# ---------------------------------------------------------------------------

class Constraint(BaseModel):
    """A project constraint decisions are scored against."""
    type: ConstraintType = Field(...)
    description: str = Field(..., description="Free text; option keywords are matched against it")
    hard: bool = Field(default=False, description="True when the constraint cannot be negotiated")
    impact: str = Field(default="", description="How the constraint shapes decisions")


# ---------------------------------------------------------------------------
# Decisions
# ---------------------------------------------------------------------------

class Consequence(BaseModel):
    type: ConsequenceType = Field(...)
    description: str = Field(...)
    impact_area: ImpactArea = Field(...)
    severity: Level = Field(default=Level.MEDIUM)


class DecisionOption(BaseModel):
    """One candidate answer to an architectural question."""
    name: str = Field(...)
    description: str = Field(default="")
    pros: list[str] = Field(default_factory=list)
    cons: list[str] = Field(default_factory=list)
    cost: Level = Field(default=Level.MEDIUM)
    complexity: Level = Field(default=Level.MEDIUM)
    risk: Level = Field(default=Level.MEDIUM)
    score: int = Field(default=50, ge=0, le=100, description="Weighted score after constraints")
    reversible: bool = Field(default=True, description="False when switching later means a rewrite")
    affects: list[ConstraintType] = Field(
        default_factory=list, description="Constraint types this option interacts with"
    )
    keywords: list[str] = Field(default_factory=list, description="Affinity keywords")
    consequences: list[Consequence] = Field(default_factory=list)


class ArchitectureDecision(BaseModel):
    """A single ADR in Nygard format."""
    id: str = Field(..., description="ADR id, e.g. 'ADR-001'")
    title: str = Field(...)
    area: str = Field(..., description="Catalog key of the decision area")
    status: AdrStatus = Field(default=AdrStatus.PROPOSED)
    decided_on: date = Field(...)
    context: str = Field(default="")
    decision_drivers: list[str] = Field(default_factory=list)
    options: list[DecisionOption] = Field(default_factory=list)
    chosen: Optional[str] = Field(default=None, description="Name of the selected option")
    decision: str = Field(default="")
    consequences: list[Consequence] = Field(default_factory=list)
    related_decisions: list[str] = Field(default_factory=list, description="ADR ids")
    compliance_impact: list[str] = Field(default_factory=list)

    @property
    def chosen_option(self) -> Optional[DecisionOption]:
        for option in self.options:
            if option.name == self.chosen:
                return option
        return None


# ---------------------------------------------------------------------------
# Analysis
# ---------------------------------------------------------------------------

class TradeoffComparison(BaseModel):
    """Head-to-head comparison of a decision's first two options."""
    decision_id: str = Field(...)
    option_a: str = Field(...)
    option_b: str = Field(...)
    winner_by_dimension: dict[str, str] = Field(default_factory=dict)
    recommendation: str = Field(default="")


class TradeoffMatrix(BaseModel):
    dimensions: list[str] = Field(default_factory=list)
    comparisons: list[TradeoffComparison] = Field(default_factory=list)


class TechnologyOption(BaseModel):
    name: str = Field(...)
    maturity: Maturity = Field(default=Maturity.MATURE)
    community_support: Level = Field(default=Level.MEDIUM)
    learning_curve: Level = Field(default=Level.MEDIUM)
    performance_rating: int = Field(default=5, ge=1, le=10)
    security_rating: int = Field(default=5, ge=1, le=10)
    cost_rating: int = Field(default=5, ge=1, le=10, description="10 is cheapest")


class TechComparison(BaseModel):
    category: str = Field(...)
    options: list[TechnologyOption] = Field(default_factory=list)
    recommendation: str = Field(default="")
    justification: str = Field(default="")


class ADRSummary(BaseModel):
    total_decisions: int = Field(default=0, ge=0)
    accepted_decisions: int = Field(default=0, ge=0)
    key_decision_areas: list[str] = Field(default_factory=list)
    high_risk_decisions: list[str] = Field(default_factory=list, description="ADR ids")


class ADROutput(BaseModel):
    """Everything the architecture-decision phase produces."""
    decisions: list[ArchitectureDecision] = Field(default_factory=list)
    tradeoff_analysis: TradeoffMatrix = Field(default_factory=TradeoffMatrix)
    technology_comparison: list[TechComparison] = Field(default_factory=list)
    summary: ADRSummary = Field(default_factory=ADRSummary)
