"""SSDLC Planner Pipeline Orchestrator.

Runs the eight-step planning pipeline over a short project description:

Phase 0: DOMAIN                  -- Resolve the domain profile from the catalog.
Phase 1: BUSINESS ANALYSIS       -- User stories, security requirements, abuse cases.
Phase 2: TECHNICAL DESIGN        -- Features, modules, pseudocode, diagrams, scaffold.
Phase 3: THREAT MODEL            -- STRIDE and domain threats with a risk matrix.
Phase 4: TEST STRATEGY           -- Functional, security and compliance test cases.
Phase 5: CI/CD                   -- Pipeline stages, security gates, deployment.
Phase 6: PROJECT PLAN            -- Tasks, sprints, team, critical path, risks.
Phase 7: ARCHITECTURE DECISIONS  -- One ADR per decision area.

Each phase only sees what earlier phases produced; the result envelope holds
every phase output plus the rendered Markdown deliverables.

Usage::

    python -m src.pipeline "Patient health records management with HIPAA compliance"
    python -m src.pipeline "Crypto wallet" --goal "Users send tokens" --tech rust -o ./plan
"""

from __future__ import annotations

import sys
import time
import uuid
from collections.abc import Callable
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Optional, TypeVar

from pydantic import BaseModel, Field
from rich.panel import Panel

from src.analyst import BAOutput, analyze_requirements
from src.architecture import ADROutput, Constraint, default_constraints, generate_adrs
from src.config import PipelineConfig
from src.designer import TechLeadOutput, design_system
from src.devops import DevOpsOutput, design_cicd
from src.domains import DomainCatalog, DomainError, Impact, LoadedDomain, default_catalog
from src.planner import PMOutput, generate_project_plan
from src.qa import QAOutput, design_test_strategy
from src.reporter.adr import adr_filename, render_adr
from src.reporter.project_plan import render_project_plan
from src.reporter.risk_register import render_risk_register
from src.reporter.srs import render_srs
from src.security import SecurityOutput, generate_threat_model
from src.utils import (
    PHASE_NAMES,
    console,
    ensure_dir,
    format_duration,
    print_error,
    print_phase_header,
    print_success,
    print_summary_table,
    save_json,
)

T = TypeVar("T")

# ---------------------------------------------------------------------------
# Exceptions
# ---------------------------------------------------------------------------


class PipelineError(Exception):
    """Raised when a pipeline phase fails irrecoverably."""

    def __init__(self, phase: int, message: str) -> None:
        self.phase = phase
        self.phase_name = PHASE_NAMES.get(phase, "?")
        super().__init__(f"Phase {phase} ({self.phase_name}): {message}")


# ---------------------------------------------------------------------------
# Input / result envelope
# ---------------------------------------------------------------------------


class PipelineInput(BaseModel):
    """What the caller knows about the project up front.

    Technology targets left as ``None`` fall back to the pipeline config.
    """

    project_description: str = Field(..., min_length=1, description="Free-text project description")
    business_goals: list[str] = Field(
        default_factory=list, description="One line per goal; each becomes a user story"
    )
    tech_stack: list[str] = Field(default_factory=list, description="Technology tags, e.g. ['rust']")
    target_language: Optional[str] = Field(default=None, description="Pseudocode language")
    deployment_target: Optional[str] = Field(default=None)
    repository_platform: Optional[str] = Field(default=None)
    compliance_requirements: list[str] = Field(
        default_factory=list, description="Extra compliance frameworks beyond the domain's"
    )
    constraints: list[Constraint] = Field(
        default_factory=list,
        description="ADR constraints; derived from the project plan when empty",
    )
    domain: Optional[str] = Field(
        default=None, description="Catalog domain name; auto-detected when unset"
    )


class PhaseOutputs(BaseModel):
    ba: BAOutput
    tech_lead: TechLeadOutput
    security: SecurityOutput
    qa: QAOutput
    devops: DevOpsOutput
    pm: PMOutput
    architecture: ADROutput


class PipelineSummary(BaseModel):
    """Headline numbers for the run."""

    total_features: int = Field(default=0, ge=0)
    total_modules: int = Field(default=0, ge=0)
    total_threats: int = Field(default=0, ge=0)
    total_test_cases: int = Field(default=0, ge=0)
    critical_threats: int = Field(default=0, ge=0, description="Threats with critical impact")
    automation_coverage: int = Field(default=0, ge=0, le=100)
    compliance_frameworks: list[str] = Field(default_factory=list)


class Deliverables(BaseModel):
    """Rendered Markdown documents."""

    adr_documents: list[str] = Field(default_factory=list)
    project_plan: str = Field(default="")
    risk_register: str = Field(default="")


class PipelineResult(BaseModel):
    orchestration_id: str = Field(..., description="'ssdlc-<epoch ms>'")
    generation_id: str = Field(..., description="Random UUID for this run")
    timestamp: datetime = Field(...)
    project_name: str = Field(...)
    domain: LoadedDomain
    phases: PhaseOutputs
    summary: PipelineSummary
    deliverables: Deliverables


# Frameworks named both on the request and by the domain collapse to one
# entry, so each gets a single compliance test case.
def _merge_unique(*groups: list[str]) -> list[str]:
    merged: list[str] = []
    for group in groups:
        for item in group:
            if item not in merged:
                merged.append(item)
    return merged


# ---------------------------------------------------------------------------
# Pipeline Orchestrator
# ---------------------------------------------------------------------------


class Pipeline:
    """SSDLC Planner Pipeline Orchestrator.

    Runs the phases strictly in order.  Phases are pure functions; the
    orchestrator only threads outputs forward, times each phase and reports
    progress on the shared console.

    Attributes:
        config: Planning knobs, technology defaults and output locations.
        catalog: Domain catalog used for phase 0.
    """

    def __init__(self, config: PipelineConfig | None = None, catalog: DomainCatalog | None = None) -> None:
        self.config = config or PipelineConfig()
        if catalog is None:
            catalog = DomainCatalog(self.config.catalog_dir) if self.config.catalog_dir else default_catalog()
        self.catalog = catalog

    # ------------------------------------------------------------------
    # Phase execution
    # ------------------------------------------------------------------

    def _phase(self, phase: int, fn: Callable[..., T], *args: Any, **kwargs: Any) -> T:
        """Run one phase, wrapping unexpected failures in :class:`PipelineError`.

        Domain errors pass through unchanged so callers can tell a bad
        domain name apart from a phase failure.
        """
        quiet = self.config.quiet
        if not quiet:
            print_phase_header(phase, PHASE_NAMES[phase])
        phase_start = time.monotonic()
        try:
            result = fn(*args, **kwargs)
        except (DomainError, PipelineError):
            raise
        except Exception as exc:
            raise PipelineError(phase, str(exc)) from exc

        if not quiet:
            elapsed = time.monotonic() - phase_start
            print_success(f"Phase {phase} ({PHASE_NAMES[phase]}) completed in {format_duration(elapsed)}")
        return result

    def _resolve_domain(self, request: PipelineInput) -> LoadedDomain:
        if request.domain:
            loaded = self.catalog.load(request.domain)
        else:
            loaded = self.catalog.load_auto(request.project_description)
        if not self.config.quiet:
            regulations = ", ".join(loaded.regulation_names) or "none"
            console.print(f"  Domain: [bold]{loaded.name}[/bold] (regulations: {regulations})")
        return loaded

    # ------------------------------------------------------------------
    # Run
    # ------------------------------------------------------------------

    def run(self, request: PipelineInput) -> PipelineResult:
        """Execute every phase and assemble the result envelope.

        Raises:
            DomainError: If an explicitly requested domain is unknown or malformed.
            PipelineError: If any phase fails.
        """
        config = self.config
        pipeline_start = time.monotonic()
        timestamp = datetime.now(timezone.utc)

        if not config.quiet:
            console.print(
                Panel(
                    f"[bold bright_cyan]SSDLC Planner Pipeline[/bold bright_cyan]\n"
                    f"Project : {request.project_description}\n"
                    f"Team    : {config.team_size} x {config.sprint_weeks}-week sprints",
                    title="[bold]Pipeline Start[/bold]",
                    border_style="bright_cyan",
                )
            )

        domain = self._phase(0, self._resolve_domain, request)

        ba = self._phase(
            1, analyze_requirements,
            request.project_description, request.business_goals, domain,
        )

        tech_lead = self._phase(
            2, design_system,
            ba.user_stories,
            ba.security_requirements,
            language=request.target_language or config.target_language,
            domain_name=domain.name,
        )

        security = self._phase(3, generate_threat_model, tech_lead.modules, domain)

        compliance = _merge_unique(request.compliance_requirements, domain.regulation_names)
        qa = self._phase(4, design_test_strategy, tech_lead.features, security.threats, compliance)

        devops = self._phase(
            5, design_cicd,
            ba.project_name,
            request.tech_stack,
            deployment_target=request.deployment_target or config.deployment_target,
            repository_platform=request.repository_platform or config.repository_platform,
        )

        pm = self._phase(
            6, generate_project_plan,
            tech_lead.features,
            security.threats,
            team_size=config.team_size,
            sprint_weeks=config.sprint_weeks,
            start_date=config.effective_start_date,
        )

        constraints = request.constraints or default_constraints(len(pm.sprints) * config.sprint_weeks)
        architecture = self._phase(
            7, generate_adrs,
            tech_lead.modules,
            request.tech_stack,
            domain,
            constraints=constraints,
            decided_on=timestamp.date(),
        )

        result = PipelineResult(
            orchestration_id=f"ssdlc-{int(timestamp.timestamp() * 1000)}",
            generation_id=str(uuid.uuid4()),
            timestamp=timestamp,
            project_name=ba.project_name,
            domain=domain,
            phases=PhaseOutputs(
                ba=ba,
                tech_lead=tech_lead,
                security=security,
                qa=qa,
                devops=devops,
                pm=pm,
                architecture=architecture,
            ),
            summary=PipelineSummary(
                total_features=len(tech_lead.features),
                total_modules=len(tech_lead.modules),
                total_threats=len(security.threats),
                total_test_cases=len(qa.test_cases),
                critical_threats=sum(1 for t in security.threats if t.impact == Impact.CRITICAL),
                automation_coverage=qa.automation_coverage.percentage,
                compliance_frameworks=compliance,
            ),
            deliverables=Deliverables(
                adr_documents=[render_adr(adr) for adr in architecture.decisions],
                project_plan=render_project_plan(pm, ba.project_name, timestamp.date()),
                risk_register=render_risk_register(pm.risk_register, ba.project_name, timestamp.date()),
            ),
        )

        if not config.quiet:
            self._print_final_summary(result, time.monotonic() - pipeline_start)
        return result

    def _print_final_summary(self, result: PipelineResult, total_elapsed: float) -> None:
        summary = result.summary
        print_summary_table(
            {
                "Domain": result.domain.name,
                "Features": summary.total_features,
                "Modules": summary.total_modules,
                "Threats": f"{summary.total_threats} ({summary.critical_threats} critical)",
                "Test cases": f"{summary.total_test_cases} ({summary.automation_coverage}% automated)",
                "Sprints": len(result.phases.pm.sprints),
                "ADRs": len(result.phases.architecture.decisions),
                "Compliance": ", ".join(summary.compliance_frameworks) or "none",
            },
            title=result.project_name,
        )
        console.print(
            Panel(
                f"[bold green]PIPELINE SUCCEEDED[/bold green]\n\n"
                f"Duration : {format_duration(total_elapsed)}\n"
                f"Run      : {result.orchestration_id}",
                title="[bold]Pipeline Complete[/bold]",
                border_style="bold green",
            )
        )


def orchestrate_pipeline(
    request: PipelineInput,
    config: PipelineConfig | None = None,
    catalog: DomainCatalog | None = None,
) -> PipelineResult:
    """Run the full pipeline once.  Convenience wrapper around :class:`Pipeline`."""
    return Pipeline(config, catalog).run(request)


# ---------------------------------------------------------------------------
# Output files
# ---------------------------------------------------------------------------


def write_outputs(result: PipelineResult, config: PipelineConfig) -> dict[str, Path]:
    """Write the JSON envelope and every Markdown document.

    Layout::

        <output_dir>/pipeline-result.json
        <output_dir>/docs/srs.md
        <output_dir>/docs/project-plan.md
        <output_dir>/docs/risk-register.md
        <output_dir>/docs/adr/ADR-001-<slug>.md ...

    Returns:
        Document name -> written path.
    """
    config.ensure_directories()
    written: dict[str, Path] = {
        "result": save_json(result.model_dump(mode="json"), config.result_path),
    }

    documents = {
        "srs.md": render_srs(result, result.timestamp.date()),
        "project-plan.md": result.deliverables.project_plan,
        "risk-register.md": result.deliverables.risk_register,
    }
    for name, text in documents.items():
        path = config.docs_dir / name
        path.write_text(text, encoding="utf-8")
        written[name] = path

    adr_dir = ensure_dir(config.adr_dir)
    for adr, text in zip(result.phases.architecture.decisions, result.deliverables.adr_documents):
        path = adr_dir / adr_filename(adr)
        path.write_text(text, encoding="utf-8")
        written[adr.id] = path
    return written


# ---------------------------------------------------------------------------
# CLI entry point
# ---------------------------------------------------------------------------


def main(argv: list[str] | None = None) -> None:
    """CLI entry point for ``python -m src.pipeline``."""
    import argparse

    parser = argparse.ArgumentParser(
        description="SSDLC Planner -- requirements, design, threat model and plan from a description",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=(
            "Examples:\n"
            '  python -m src.pipeline "Patient health records with HIPAA compliance"\n'
            '  python -m src.pipeline "Secure messenger" --goal "Users chat privately" --tech rust\n'
            '  python -m src.pipeline "Trading API" --domain fintech --team-size 5 -o ./plan\n'
        ),
    )

    parser.add_argument("description", help="Free-text project description")
    parser.add_argument(
        "--goal", "-g", action="append", default=[], dest="goals",
        help="Business goal (repeatable)",
    )
    parser.add_argument(
        "--tech", "-t", action="append", default=[], dest="tech_stack",
        help="Tech-stack tag, e.g. rust, c++, python (repeatable)",
    )
    parser.add_argument(
        "--compliance", action="append", default=[],
        help="Extra compliance framework, e.g. SOC2 (repeatable)",
    )
    parser.add_argument("--domain", default=None, help="Catalog domain (auto-detected if omitted)")
    parser.add_argument("--language", default=None, help="Pseudocode language")
    parser.add_argument("--target", default=None, help="Deployment target, e.g. kubernetes, aws")
    parser.add_argument("--platform", default=None, help="Repository platform: github, gitlab, bitbucket")
    parser.add_argument("--team-size", type=int, default=None)
    parser.add_argument("--sprint-weeks", type=int, default=None)
    parser.add_argument("--start-date", default=None, help="Project start date (YYYY-MM-DD)")
    parser.add_argument(
        "--output", "-o", default=None,
        help="Output directory (default: ./ssdlc-output or $SSDLC_OUTPUT_DIR)",
    )
    parser.add_argument("--quiet", "-q", action="store_true", help="Suppress progress output")

    args = parser.parse_args(argv)

    overrides: dict[str, Any] = {"quiet": args.quiet}
    if args.team_size is not None:
        overrides["team_size"] = args.team_size
    if args.sprint_weeks is not None:
        overrides["sprint_weeks"] = args.sprint_weeks
    if args.start_date:
        overrides["start_date"] = args.start_date
    if args.output:
        overrides["output_dir"] = Path(args.output)

    try:
        config = PipelineConfig.model_validate(
            {**PipelineConfig.from_env().model_dump(), **overrides}
        )
    except ValueError as exc:
        print_error(f"Error: invalid configuration: {exc}")
        sys.exit(2)

    request = PipelineInput(
        project_description=args.description,
        business_goals=args.goals,
        tech_stack=args.tech_stack,
        target_language=args.language,
        deployment_target=args.target,
        repository_platform=args.platform,
        compliance_requirements=args.compliance,
        domain=args.domain,
    )

    try:
        result = orchestrate_pipeline(request, config)
    except DomainError as exc:
        print_error(f"Error: {exc}")
        sys.exit(2)
    except PipelineError as exc:
        print_error(f"Pipeline failed: {exc}")
        sys.exit(1)

    written = write_outputs(result, config)
    if not config.quiet:
        console.print(f"Wrote {len(written)} files to [bold]{config.output_dir.resolve()}[/bold]")


if __name__ == "__main__":
    main()
