"""Pydantic v2 models for the test-strategy (QA) phase."""

from __future__ import annotations

from pydantic import BaseModel, Field

from src.analyst.models import Severity


class TestCase(BaseModel):
    """One functional, security or compliance test case."""
    __test__ = False  # not a pytest class

    id: str = Field(..., description="Test case id, e.g. 'TC-001'")
    category: str = Field(..., description="Functional, Compliance, or a security area")
    title: str = Field(...)
    related_to: str = Field(..., description="Feature id, threat id or compliance requirement")
    priority: Severity = Field(...)
    steps: list[str] = Field(default_factory=list)
    expected_result: str = Field(default="")
    automated: bool = Field(default=True)
    tools: list[str] = Field(default_factory=list)


class PenTestPhase(BaseModel):
    phase: str = Field(...)
    duration: str = Field(..., description="e.g. '3 days'")
    activities: list[str] = Field(default_factory=list)


class AutomationCoverage(BaseModel):
    total: int = Field(default=0, ge=0)
    automated: int = Field(default=0, ge=0)
    manual: int = Field(default=0, ge=0)
    percentage: int = Field(default=0, ge=0, le=100)


class QAOutput(BaseModel):
    test_cases: list[TestCase] = Field(default_factory=list)
    penetration_test_plan: list[PenTestPhase] = Field(default_factory=list)
    automation_coverage: AutomationCoverage = Field(default_factory=AutomationCoverage)
