"""Domain profiles for the SSDLC planner.

Resolves a free-text project description to a domain profile (healthcare,
fintech, secure_comm, ...) and loads its reference data.

Usage::

    from src.domains import load_domain_auto

    loaded = load_domain_auto("Patient health records with HIPAA compliance")
    print(loaded.name)                # "healthcare"
    print(loaded.regulation_names)    # ["HIPAA", "HITECH"]
"""

from src.domains.errors import (
    DomainError,
    DomainNotFoundError,
    ErrorKind,
    MalformedReferenceDataError,
)
from src.domains.loader import (
    GENERIC_DOMAIN,
    DomainCatalog,
    default_catalog,
    list_available_domains,
    load_domain,
    load_domain_auto,
    resolve_domain,
)
from src.domains.models import (
    ComplianceData,
    DataClassification,
    DataLevel,
    Domain,
    DomainThreat,
    EncryptionPolicy,
    Impact,
    Likelihood,
    LoadedDomain,
    Regulation,
    SensitiveData,
    Stakeholder,
)

__all__ = [
    "GENERIC_DOMAIN",
    "ComplianceData",
    "DataClassification",
    "DataLevel",
    "Domain",
    "DomainCatalog",
    "DomainError",
    "DomainNotFoundError",
    "DomainThreat",
    "EncryptionPolicy",
    "ErrorKind",
    "Impact",
    "Likelihood",
    "LoadedDomain",
    "MalformedReferenceDataError",
    "Regulation",
    "SensitiveData",
    "Stakeholder",
    "default_catalog",
    "list_available_domains",
    "load_domain",
    "load_domain_auto",
    "resolve_domain",
]
