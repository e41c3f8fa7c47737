"""Test strategy (QA phase)."""

from src.qa.models import AutomationCoverage, PenTestPhase, QAOutput, TestCase
from src.qa.strategy import (
    calculate_coverage,
    design_test_strategy,
    generate_pen_test_plan,
    generate_test_cases,
)

__all__ = [
    "design_test_strategy",
    "generate_test_cases",
    "generate_pen_test_plan",
    "calculate_coverage",
    "AutomationCoverage",
    "PenTestPhase",
    "QAOutput",
    "TestCase",
]
