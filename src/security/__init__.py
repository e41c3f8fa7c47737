"""Threat modelling (Security phase).

Usage::

    from src.security import generate_threat_model

    model = generate_threat_model(design.modules, loaded_domain)
    critical = [t for t in model.threats if t.risk_score >= 8]
"""

from src.security.models import (
    RiskMatrixEntry,
    SecurityOutput,
    StrideCategory,
    Threat,
    ThreatSource,
)
from src.security.threat_model import (
    calculate_risk,
    categorize_risk,
    generate_risk_matrix,
    generate_threat_model,
)

__all__ = [
    "generate_threat_model",
    "generate_risk_matrix",
    "calculate_risk",
    "categorize_risk",
    "RiskMatrixEntry",
    "SecurityOutput",
    "StrideCategory",
    "Threat",
    "ThreatSource",
]
