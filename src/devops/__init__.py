"""CI/CD pipeline design (DevOps phase)."""

from src.devops.models import (
    DeploymentConfig,
    DeploymentTarget,
    DevOpsOutput,
    Job,
    PipelineStage,
    RepositoryPlatform,
    SecurityGate,
)
from src.devops.pipeline_design import (
    design_cicd,
    generate_security_gates,
    render_ci_config,
    stack_family,
)

__all__ = [
    "design_cicd",
    "generate_security_gates",
    "render_ci_config",
    "stack_family",
    "DeploymentConfig",
    "DeploymentTarget",
    "DevOpsOutput",
    "Job",
    "PipelineStage",
    "RepositoryPlatform",
    "SecurityGate",
]
