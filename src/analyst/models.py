"""Pydantic v2 models for the business-analysis phase.

Also home to the ordinal vocabularies (``Priority``, ``Severity``) shared by
the later phases.
"""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, Field

from src.domains.models import DataClassification, Impact, Likelihood, Stakeholder


# ---------------------------------------------------------------------------
# Enumerations
# ---------------------------------------------------------------------------

class Priority(str, Enum):
    """Delivery priority. P0 = must-have ... P3 = could-have."""
    P0 = "P0"
    P1 = "P1"
    P2 = "P2"
    P3 = "P3"


class Severity(str, Enum):
    """Four-level severity used by requirements, test cases and risks."""
    CRITICAL = "critical"
    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"


class Effort(str, Enum):
    """T-shirt size estimate for a user story."""
    SMALL = "Small"
    MEDIUM = "Medium"
    LARGE = "Large"
    XLARGE = "XLarge"


# ---------------------------------------------------------------------------
# Phase records
# ---------------------------------------------------------------------------

class UserStory(BaseModel):
    """A user story derived from a business goal."""
    id: str = Field(..., description="Story id, e.g. 'US-001'")
    title: str = Field(...)
    as_a: str = Field(..., description="Actor")
    i_want: str = Field(...)
    so_that: str = Field(...)
    priority: Priority = Field(default=Priority.P2)
    acceptance_criteria: list[str] = Field(default_factory=list)
    security_considerations: list[str] = Field(default_factory=list)
    estimated_effort: Effort = Field(default=Effort.MEDIUM)


class SecurityRequirement(BaseModel):
    """A security requirement with its compliance mapping."""
    id: str = Field(..., description="Requirement id, e.g. 'SR-001'")
    category: str = Field(..., description="Control family or regulation name")
    requirement: str = Field(...)
    priority: Severity = Field(default=Severity.HIGH)
    compliance_mapping: list[str] = Field(default_factory=list)


class AbuseCase(BaseModel):
    """A story told from an attacker's point of view."""
    id: str = Field(..., description="Abuse case id, e.g. 'AC-001'")
    title: str = Field(...)
    as_a: str = Field(..., description="Threat actor")
    i_want: str = Field(...)
    so_that: str = Field(...)
    likelihood: Likelihood = Field(default=Likelihood.MEDIUM)
    impact: Impact = Field(default=Impact.HIGH)
    mitigation: str = Field(default="")


class BAOutput(BaseModel):
    """Everything the business-analysis phase produces."""
    project_name: str = Field(...)
    domain: str = Field(default="generic", description="Resolved domain name")
    stakeholders: list[Stakeholder] = Field(default_factory=list)
    user_stories: list[UserStory] = Field(default_factory=list)
    security_requirements: list[SecurityRequirement] = Field(default_factory=list)
    abuse_cases: list[AbuseCase] = Field(default_factory=list)
    data_classification: DataClassification = Field(default_factory=DataClassification)
    compliance_frameworks: list[str] = Field(
        default_factory=list, description="Regulation names declared by the domain"
    )
