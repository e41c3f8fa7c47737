"""Pydantic v2 models for the CI/CD (DevOps) phase."""

from __future__ import annotations

from enum import Enum
from typing import Optional

from pydantic import BaseModel, Field


class DeploymentTarget(str, Enum):
    KUBERNETES = "kubernetes"
    AWS = "aws"
    AZURE = "azure"
    GCP = "gcp"
    DOCKER = "docker"


class RepositoryPlatform(str, Enum):
    GITHUB = "github"
    GITLAB = "gitlab"
    BITBUCKET = "bitbucket"


class Job(BaseModel):
    name: str = Field(...)
    commands: list[str] = Field(default_factory=list)


class PipelineStage(BaseModel):
    name: str = Field(...)
    order: int = Field(..., ge=1)
    jobs: list[Job] = Field(default_factory=list)


class SecurityGate(BaseModel):
    name: str = Field(...)
    tool: str = Field(...)
    fail_condition: str = Field(...)


class DeploymentConfig(BaseModel):
    target: DeploymentTarget = Field(default=DeploymentTarget.KUBERNETES)
    strategy: str = Field(default="Blue-Green")
    rollback_enabled: bool = Field(default=True)
    health_check: str = Field(default="/health")
    notes: list[str] = Field(default_factory=list)


class DevOpsOutput(BaseModel):
    """Pipeline design for one project."""
    platform: RepositoryPlatform = Field(default=RepositoryPlatform.GITHUB)
    pipeline_stages: list[PipelineStage] = Field(default_factory=list)
    security_gates: list[SecurityGate] = Field(default_factory=list)
    deployment_config: DeploymentConfig = Field(default_factory=DeploymentConfig)
    build_config: Optional[str] = Field(
        default=None, description="CMakeLists.txt / Cargo.toml snippet for native stacks"
    )
    ci_config_path: str = Field(default=".github/workflows/ci.yml")
    ci_config: str = Field(default="", description="Rendered CI definition (YAML)")
