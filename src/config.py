"""SSDLC planner configuration.

Centralised, typed configuration for the pipeline. Settings use a Pydantic v2
model so they are validated at construction time and serialise to/from JSON or
environment variables without boiler-plate.
"""

from __future__ import annotations

import os
from datetime import date
from pathlib import Path
from typing import Any, Optional

from pydantic import BaseModel, Field


class PipelineConfig(BaseModel):
    """Global SSDLC planner configuration.

    Holds the planning knobs (team size, sprint length, start date), the
    default technology targets used when a pipeline input leaves them unset,
    and the output locations used by the CLI.
    """

    team_size: int = Field(default=3, ge=1, description="Number of engineers on the project")
    sprint_weeks: int = Field(default=2, ge=1, description="Sprint length in weeks")
    start_date: Optional[date] = Field(
        default=None, description="Project start date; today when unset"
    )
    target_language: str = Field(default="python", description="Pseudocode target language")
    deployment_target: str = Field(default="kubernetes")
    repository_platform: str = Field(default="github")
    catalog_dir: Optional[Path] = Field(
        default=None, description="Override for the bundled domain catalog directory"
    )
    output_dir: Path = Field(default=Path("./ssdlc-output"))
    quiet: bool = Field(default=False, description="Suppress console output")

    # ------------------------------------------------------------------
    # Derived values (read-only properties)
    # ------------------------------------------------------------------

    @property
    def effective_start_date(self) -> date:
        """The configured start date, or today."""
        return self.start_date or date.today()

    @property
    def result_path(self) -> Path:
        """Path to the JSON result envelope."""
        return self.output_dir / "pipeline-result.json"

    @property
    def docs_dir(self) -> Path:
        """Directory for rendered Markdown documents."""
        return self.output_dir / "docs"

    @property
    def adr_dir(self) -> Path:
        """Directory holding one Markdown file per ADR."""
        return self.docs_dir / "adr"

    # ------------------------------------------------------------------
    # Serialisation helpers
    # ------------------------------------------------------------------

    def save(self, path: Path | None = None) -> Path:
        """Persist the configuration to a JSON file.

        Args:
            path: Destination file. Defaults to ``<output_dir>/config.json``.

        Returns:
            The path where the file was written.
        """
        target = path or (self.output_dir / "config.json")
        target.parent.mkdir(parents=True, exist_ok=True)
        target.write_text(self.model_dump_json(indent=2), encoding="utf-8")
        return target

    @classmethod
    def load(cls, path: Path) -> "PipelineConfig":
        """Load a previously-saved configuration from JSON."""
        raw = Path(path).read_text(encoding="utf-8")
        return cls.model_validate_json(raw)

    @classmethod
    def from_env(cls) -> "PipelineConfig":
        """Build a ``PipelineConfig`` from environment variables.

        Recognised variables (all optional):
            SSDLC_TEAM_SIZE, SSDLC_SPRINT_WEEKS, SSDLC_START_DATE,
            SSDLC_TARGET_LANGUAGE, SSDLC_DEPLOYMENT_TARGET,
            SSDLC_REPOSITORY_PLATFORM, SSDLC_CATALOG_DIR, SSDLC_OUTPUT_DIR.
        """
        kwargs: dict[str, Any] = {}
        if os.environ.get("SSDLC_TEAM_SIZE"):
            kwargs["team_size"] = int(os.environ["SSDLC_TEAM_SIZE"])
        if os.environ.get("SSDLC_SPRINT_WEEKS"):
            kwargs["sprint_weeks"] = int(os.environ["SSDLC_SPRINT_WEEKS"])
        if os.environ.get("SSDLC_START_DATE"):
            kwargs["start_date"] = date.fromisoformat(os.environ["SSDLC_START_DATE"])
        if os.environ.get("SSDLC_TARGET_LANGUAGE"):
            kwargs["target_language"] = os.environ["SSDLC_TARGET_LANGUAGE"]
        if os.environ.get("SSDLC_DEPLOYMENT_TARGET"):
            kwargs["deployment_target"] = os.environ["SSDLC_DEPLOYMENT_TARGET"]
        if os.environ.get("SSDLC_REPOSITORY_PLATFORM"):
            kwargs["repository_platform"] = os.environ["SSDLC_REPOSITORY_PLATFORM"]
        if os.environ.get("SSDLC_CATALOG_DIR"):
            kwargs["catalog_dir"] = Path(os.environ["SSDLC_CATALOG_DIR"])

        return cls(
            output_dir=Path(os.environ.get("SSDLC_OUTPUT_DIR", "./ssdlc-output")),
            **kwargs,
        )

    def ensure_directories(self) -> None:
        """Create all output directories used by the CLI."""
        for directory in (self.output_dir, self.docs_dir, self.adr_dir):
            directory.mkdir(parents=True, exist_ok=True)
