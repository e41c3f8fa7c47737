"""Pydantic v2 models for the threat-modelling (Security) phase."""

from __future__ import annotations

from enum import Enum
from typing import Optional

from pydantic import BaseModel, Field

from src.analyst.models import Severity
from src.domains.models import Impact, Likelihood


class StrideCategory(str, Enum):
    SPOOFING = "Spoofing"
    TAMPERING = "Tampering"
    REPUDIATION = "Repudiation"
    INFORMATION_DISCLOSURE = "Information Disclosure"
    DENIAL_OF_SERVICE = "Denial of Service"
    ELEVATION_OF_PRIVILEGE = "Elevation of Privilege"


class ThreatSource(str, Enum):
    """Where a threat came from."""
    STRIDE = "stride"
    DOMAIN = "domain"


class Threat(BaseModel):
    """A threat against one component.

    ``category`` is a STRIDE category for generated threats; domain threats
    keep whatever category their reference data declares (e.g. ``Injection``).
    """
    id: str = Field(..., description="Threat id, e.g. 'T-001'")
    category: str = Field(...)
    name: str = Field(...)
    description: str = Field(default="")
    target: str = Field(..., description="Module name, or 'System' for domain threats")
    likelihood: Likelihood = Field(...)
    impact: Impact = Field(...)
    risk_score: float = Field(..., ge=0.0, description="Numeric risk score")
    cwe: str = Field(default="CWE-1000")
    owasp: str = Field(default="A00:2021")
    mitigations: list[str] = Field(default_factory=list)
    compliance_impact: Optional[str] = Field(default=None)
    source: ThreatSource = Field(default=ThreatSource.STRIDE)

    @property
    def stride(self) -> Optional[StrideCategory]:
        """The STRIDE category, or None for non-STRIDE categories."""
        try:
            return StrideCategory(self.category)
        except ValueError:
            return None


class RiskMatrixEntry(BaseModel):
    threat_id: str = Field(...)
    likelihood: Likelihood = Field(...)
    impact: Impact = Field(...)
    risk_score: float = Field(...)
    risk: Severity = Field(..., description="Bucketed risk level")


class SecurityOutput(BaseModel):
    """Threats, risk matrix and recommendations."""
    threats: list[Threat] = Field(default_factory=list)
    risk_matrix: list[RiskMatrixEntry] = Field(default_factory=list)
    recommendations: list[str] = Field(default_factory=list)

    def by_level(self, level: Severity) -> list[Threat]:
        ids = {row.threat_id for row in self.risk_matrix if row.risk == level}
        return [t for t in self.threats if t.id in ids]
