"""Pydantic v2 models for the domain catalog.

A domain bundles the keywords used for auto-detection with the stakeholders,
sensitive-data inventory and optional compliance / threat reference data that
every later pipeline phase consults.
"""

from __future__ import annotations

from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


# ---------------------------------------------------------------------------
# Enumerations
# ---------------------------------------------------------------------------

class StakeholderType(str, Enum):
    """Broad class of a stakeholder."""
    END_USER = "end_user"
    PROFESSIONAL = "professional"
    INTERNAL = "internal"
    EXTERNAL = "external"
    GOVERNANCE = "governance"
    BUSINESS_PARTNER = "business_partner"


class DataLevel(str, Enum):
    """Sensitivity level of a data type."""
    CRITICAL = "critical"
    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"


class EncryptionPolicy(str, Enum):
    """Whether a data type must be encrypted."""
    REQUIRED = "required"
    RECOMMENDED = "recommended"
    OPTIONAL = "optional"


class Likelihood(str, Enum):
    """Ordinal likelihood of a threat materialising."""
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


class Impact(str, Enum):
    """Ordinal impact of a threat or risk."""
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    CRITICAL = "critical"


# ---------------------------------------------------------------------------
# domain.yaml
# ---------------------------------------------------------------------------

class _Record(BaseModel):
    model_config = ConfigDict(frozen=True, extra="ignore")


class Stakeholder(_Record):
    """A party that interacts with, or is accountable for, the system."""
    name: str = Field(..., description="Display name, e.g. 'Patient'")
    type: StakeholderType = Field(default=StakeholderType.END_USER)
    data_access: str = Field(default="", description="What data the stakeholder can reach")


class SensitiveData(_Record):
    """A sensitive data type handled by systems in the domain."""
    type: str = Field(..., description="Data type, e.g. 'PHI'")
    level: DataLevel = Field(default=DataLevel.MEDIUM)
    encryption: EncryptionPolicy = Field(default=EncryptionPolicy.RECOMMENDED)


class DataClassification(_Record):
    """Example data items per sensitivity level."""
    critical: list[str] = Field(default_factory=list)
    high: list[str] = Field(default_factory=list)
    medium: list[str] = Field(default_factory=list)
    low: list[str] = Field(default_factory=list)

    def is_empty(self) -> bool:
        return not (self.critical or self.high or self.medium or self.low)


class Domain(_Record):
    """The base record of a catalog entry (``domain.yaml``)."""
    name: str = Field(..., description="Catalog identifier, equal to the entry directory name")
    display_name: str = Field(default="", description="Human-readable domain name")
    description: str = Field(default="")
    keywords: list[str] = Field(default_factory=list, description="Auto-detection keywords")
    knowledge_base: list[str] = Field(default_factory=list)
    architecture_patterns: list[str] = Field(default_factory=list)
    security_standards: list[str] = Field(default_factory=list)
    stakeholders: list[Stakeholder] = Field(default_factory=list)
    sensitive_data: list[SensitiveData] = Field(default_factory=list)
    data_classification: DataClassification = Field(default_factory=DataClassification)


# ---------------------------------------------------------------------------
# compliance.yaml
# ---------------------------------------------------------------------------

class ComplianceRequirement(_Record):
    """A single clause of a regulation."""
    id: str = Field(..., description="Clause id, e.g. '164.312(a)(1)'")
    name: str = Field(...)
    description: str = Field(default="")


class Regulation(_Record):
    """A regulation or standard the domain is subject to."""
    name: str = Field(..., description="Short name, e.g. 'HIPAA'")
    full_name: str = Field(default="")
    requirements: list[ComplianceRequirement] = Field(default_factory=list)


class AuditRequirements(_Record):
    """Audit log retention and scope."""
    retention_years: int = Field(default=1, ge=0)
    must_log: list[str] = Field(default_factory=list)


class ComplianceData(_Record):
    """Contents of ``compliance.yaml``."""
    regulations: list[Regulation] = Field(default_factory=list)
    audit_requirements: Optional[AuditRequirements] = Field(default=None)


# ---------------------------------------------------------------------------
# threats.yaml
# ---------------------------------------------------------------------------

class DomainThreat(_Record):
    """A known threat declared by the domain's reference data.

    ``category`` is free text: most entries use a STRIDE category, some use
    domain vocabulary such as ``Injection`` or ``Evasion``.
    """
    id: str = Field(...)
    category: str = Field(...)
    name: str = Field(...)
    description: str = Field(default="")
    likelihood: Likelihood = Field(default=Likelihood.MEDIUM)
    impact: Impact = Field(default=Impact.MEDIUM)
    mitigation: str = Field(default="")
    compliance_impact: Optional[str] = Field(default=None)


# ---------------------------------------------------------------------------
# Loaded entry
# ---------------------------------------------------------------------------

class LoadedDomain(_Record):
    """A fully loaded catalog entry: base record plus optional reference data."""
    name: str = Field(..., description="Catalog identifier")
    domain: Domain
    compliance: Optional[ComplianceData] = Field(default=None)
    threats: list[DomainThreat] = Field(default_factory=list)

    @property
    def regulation_names(self) -> list[str]:
        """Short names of every declared regulation."""
        if self.compliance is None:
            return []
        return [r.name for r in self.compliance.regulations]
