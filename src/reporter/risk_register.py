"""Risk register document (``risk-register.md``)."""

from __future__ import annotations

from datetime import date
from typing import Optional

from src.domains.models import Impact
from src.planner.models import RiskItem

from .templates import default_renderer


def render_risk_register(
    risks: list[RiskItem], project_name: str, generated_on: Optional[date] = None
) -> str:
    """Render risks highest score first; equal scores keep register order."""
    ordered = sorted(risks, key=lambda r: r.score, reverse=True)
    context = {
        "project_name": project_name,
        "generated_on": generated_on or date.today(),
        "risks": ordered,
        "critical_count": sum(1 for r in risks if r.impact == Impact.CRITICAL),
        "high_count": sum(1 for r in risks if r.impact == Impact.HIGH),
    }
    return default_renderer().render("risk_register.md.j2", context)
