"""Shared pytest fixtures for the SSDLC planner test suite.

Provides reusable fixtures for:
- The bundled domain catalog and a few loaded domains
- Throw-away catalogs written to ``tmp_path``
- Business-analysis, technical-design and threat-model outputs for a
  healthcare project, so later-phase tests do not rebuild them by hand
- Small hand-made features, threats and tasks
"""

from __future__ import annotations

from datetime import date
from pathlib import Path
from typing import Any

import pytest
import yaml

from src.analyst import BAOutput, Priority, analyze_requirements
from src.config import PipelineConfig
from src.designer import Feature, SubFeature, TechLeadOutput, design_system
from src.domains import DomainCatalog, Impact, Likelihood, LoadedDomain, default_catalog
from src.planner import Task, TaskType
from src.security import SecurityOutput, Threat, generate_threat_model

HEALTHCARE_DESCRIPTION = "Patient health records management with HIPAA compliance"

HEALTHCARE_GOALS = [
    "Patients can view their medical records",
    "Physicians update patient data securely",
    "Admin can manage user accounts",
    "Generate compliance reports for auditors",
]

PROJECT_START = date(2025, 1, 6)


# ---------------------------------------------------------------------------
# Domain catalog
# ---------------------------------------------------------------------------

@pytest.fixture
def catalog() -> DomainCatalog:
    """The bundled catalog (process-wide instance)."""
    return default_catalog()


@pytest.fixture
def healthcare(catalog: DomainCatalog) -> LoadedDomain:
    return catalog.load("healthcare")


@pytest.fixture
def secure_comm(catalog: DomainCatalog) -> LoadedDomain:
    return catalog.load("secure_comm")


def write_yaml(path: Path, data: Any) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(yaml.safe_dump(data, sort_keys=False), encoding="utf-8")


@pytest.fixture
def make_catalog(tmp_path: Path):
    """Factory building a catalog directory from ``{name: {file: data}}``.

    Usage::

        def test_something(make_catalog):
            catalog = make_catalog({"alpha": {"domain.yaml": {"keywords": ["a"]}}})
    """

    def _make(entries: dict[str, dict[str, Any]]) -> DomainCatalog:
        root = tmp_path / "catalog"
        root.mkdir(exist_ok=True)
        for name, files in entries.items():
            entry_dir = root / name
            entry_dir.mkdir(exist_ok=True)
            for filename, data in files.items():
                if isinstance(data, str):
                    (entry_dir / filename).write_text(data, encoding="utf-8")
                else:
                    write_yaml(entry_dir / filename, data)
        return DomainCatalog(root)

    return _make


# ---------------------------------------------------------------------------
# Phase outputs for a healthcare project
# ---------------------------------------------------------------------------

@pytest.fixture
def healthcare_ba(healthcare: LoadedDomain) -> BAOutput:
    return analyze_requirements(HEALTHCARE_DESCRIPTION, HEALTHCARE_GOALS, healthcare)


@pytest.fixture
def healthcare_design(healthcare_ba: BAOutput) -> TechLeadOutput:
    return design_system(
        healthcare_ba.user_stories,
        healthcare_ba.security_requirements,
        language="python",
        domain_name="healthcare",
    )


@pytest.fixture
def healthcare_threats(
    healthcare_design: TechLeadOutput, healthcare: LoadedDomain
) -> SecurityOutput:
    return generate_threat_model(healthcare_design.modules, healthcare)


# ---------------------------------------------------------------------------
# Hand-made records
# ---------------------------------------------------------------------------

def make_feature(
    feature_id: str, name: str, priority: Priority = Priority.P1, subs: int = 1
) -> Feature:
    return Feature(
        id=feature_id,
        name=name,
        priority=priority,
        sub_features=[
            SubFeature(id=f"{feature_id}-{n}", name=f"{name} part {n}", parent_id=feature_id)
            for n in range(1, subs + 1)
        ],
    )


def make_threat(
    threat_id: str,
    category: str = "Spoofing",
    impact: Impact = Impact.HIGH,
    likelihood: Likelihood = Likelihood.MEDIUM,
    score: float = 6.5,
) -> Threat:
    return Threat(
        id=threat_id,
        category=category,
        name=f"{category} threat {threat_id}",
        description=f"{category} against the system",
        target="AuthController",
        likelihood=likelihood,
        impact=impact,
        risk_score=score,
        mitigations=["Mitigation A", "Mitigation B"],
    )


def make_task(task_id: str, hours: int, deps: list[str] | None = None, points: int = 2) -> Task:
    return Task(
        id=task_id,
        title=f"Task {task_id}",
        type=TaskType.DEVELOPMENT,
        assigned_role="Backend Dev",
        estimated_hours=hours,
        story_points=points,
        dependencies=deps or [],
        related_feature="F-001",
    )


@pytest.fixture
def three_features() -> list[Feature]:
    return [
        make_feature("F-001", "Authentication & Authorization", Priority.P0),
        make_feature("F-002", "Data Management", Priority.P1),
        make_feature("F-003", "Reporting & Analytics", Priority.P2),
    ]


@pytest.fixture
def two_threats() -> list[Threat]:
    return [
        make_threat("T-001", "Spoofing", Impact.CRITICAL, Likelihood.HIGH, 9.0),
        make_threat("T-002", "Repudiation", Impact.MEDIUM, Likelihood.MEDIUM, 4.4),
    ]


@pytest.fixture
def tmp_config(tmp_path: Path) -> PipelineConfig:
    """Quiet config writing under ``tmp_path`` with a fixed start date."""
    return PipelineConfig(output_dir=tmp_path / "out", start_date=PROJECT_START, quiet=True)
