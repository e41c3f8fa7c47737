"""Business-analysis phase: user stories, security requirements, abuse cases.

Usage::

    from src.analyst import analyze_requirements

    ba = analyze_requirements("Patient portal", ["Patients view lab results"], domain)
    print(ba.user_stories[0].title)
"""

from src.analyst.models import (
    AbuseCase,
    BAOutput,
    Effort,
    Priority,
    SecurityRequirement,
    Severity,
    UserStory,
)
from src.analyst.requirements import analyze_requirements

__all__ = [
    "analyze_requirements",
    "AbuseCase",
    "BAOutput",
    "Effort",
    "Priority",
    "SecurityRequirement",
    "Severity",
    "UserStory",
]
