"""Pipeline smoke tests for the SSDLC planner.

These tests run every phase end-to-end against the bundled domain catalog
and write the full document set to a temporary directory.  No network or
external tooling is involved.
"""

from __future__ import annotations

import json
from pathlib import Path

import pytest
import yaml

from conftest import HEALTHCARE_DESCRIPTION, HEALTHCARE_GOALS
from src.config import PipelineConfig
from src.pipeline import PipelineInput, orchestrate_pipeline, write_outputs


@pytest.mark.integration
class TestPipelineSmoke:
    """Full runs over representative domains."""

    def test_healthcare_end_to_end(self, tmp_config: PipelineConfig) -> None:
        request = PipelineInput(
            project_description=HEALTHCARE_DESCRIPTION,
            business_goals=HEALTHCARE_GOALS,
            tech_stack=["python", "postgresql"],
        )
        result = orchestrate_pipeline(request, tmp_config)

        assert result.domain.name == "healthcare"
        assert "HIPAA" in result.summary.compliance_frameworks
        assert "HITECH" in result.summary.compliance_frameworks
        assert result.summary.total_threats > 0
        assert result.phases.pm.sprints, "Project plan has no sprints"

        written = write_outputs(result, tmp_config)
        srs = written["srs.md"].read_text(encoding="utf-8")
        assert srs.rstrip().endswith("# End of Specification")

        envelope = json.loads(written["result"].read_text(encoding="utf-8"))
        assert envelope["project_name"] == result.project_name
        assert len(envelope["deliverables"]["adr_documents"]) == len(
            result.phases.architecture.decisions
        )

        adr_files = sorted(tmp_config.adr_dir.glob("ADR-*.md"))
        assert len(adr_files) == len(result.phases.architecture.decisions)

    def test_secure_comm_rust(self, tmp_path: Path) -> None:
        config = PipelineConfig(
            output_dir=tmp_path,
            start_date="2025-01-06",
            target_language="rust",
            quiet=True,
        )
        request = PipelineInput(
            project_description="Secure messenger with end-to-end encryption",
            business_goals=["Users exchange encrypted messages"],
            tech_stack=["rust"],
            domain="secure_comm",
        )
        result = orchestrate_pipeline(request, config)

        assert result.domain.name == "secure_comm"
        assert result.phases.devops.build_config is not None
        areas = [d.area for d in result.phases.architecture.decisions]
        assert areas[-2:] == ["e2ee_protocol", "key_exchange"]

        ci = yaml.safe_load(result.phases.devops.ci_config)
        assert "jobs" in ci

    @pytest.mark.parametrize("domain", ["fintech", "blockchain", "ml_ai", "generic"])
    def test_other_domains(self, tmp_config: PipelineConfig, domain: str) -> None:
        request = PipelineInput(
            project_description="Platform for tracking assets",
            business_goals=["Users track their assets"],
            domain=domain,
        )
        result = orchestrate_pipeline(request, tmp_config)
        assert result.domain.name == domain
        assert result.deliverables.risk_register.startswith("# RISK REGISTER: ")
