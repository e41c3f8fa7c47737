"""CI/CD pipeline design from the tech stack, deployment target and platform.

Everything here is template selection: the stack picks build/test and scan
commands, the target picks deployment notes, the platform picks the CI file
name and layout.
"""

from __future__ import annotations

from typing import Any, Optional

import yaml

from .models import (
    DeploymentConfig,
    DeploymentTarget,
    DevOpsOutput,
    Job,
    PipelineStage,
    RepositoryPlatform,
    SecurityGate,
)

# Stack family -> tech-stack tags that select it.  Checked in order; the
# first family with a matching tag wins, Node is the fallback.
STACK_FAMILIES: list[tuple[str, tuple[str, ...]]] = [
    ("cpp", ("c++", "cpp")),
    ("rust", ("rust", "tauri")),
    ("python", ("python", "fastapi", "django", "flask")),
    ("go", ("go", "golang")),
    ("java", ("java", "spring", "kotlin")),
]
DEFAULT_FAMILY = "node"

BUILD_JOBS: dict[str, list[tuple[str, list[str]]]] = {
    "cpp": [
        ("Configure CMake", ["cmake -S . -B build -G Ninja"]),
        ("Build", ["cmake --build build"]),
        ("Test", ["cd build && ctest"]),
    ],
    "rust": [
        ("Build", ["cargo build --release"]),
        ("Test", ["cargo test"]),
    ],
    "python": [
        ("Install", ["pip install -e .[test]"]),
        ("Test", ["pytest"]),
    ],
    "go": [
        ("Build", ["go build ./..."]),
        ("Test", ["go test ./..."]),
    ],
    "java": [
        ("Build", ["mvn -B package -DskipTests"]),
        ("Test", ["mvn -B test"]),
    ],
    "node": [
        ("Install", ["npm ci"]),
        ("Build", ["npm run build"]),
        ("Test", ["npm test"]),
    ],
}

SAST_COMMANDS = {
    "cpp": ["cppcheck .", "flawfinder ."],
    "rust": ["cargo clippy -- -D warnings"],
    "python": ["bandit -r .", "semgrep scan"],
    "go": ["gosec ./..."],
    "java": ["semgrep scan", "spotbugs -textui target/classes"],
    "node": ["semgrep scan"],
}

DEPENDENCY_COMMANDS = {
    "cpp": ["conan info ."],
    "rust": ["cargo audit"],
    "python": ["pip-audit"],
    "go": ["govulncheck ./..."],
    "java": ["dependency-check --scan ."],
    "node": ["npm audit --audit-level=high"],
}

DEPLOY_COMMANDS = {
    DeploymentTarget.KUBERNETES: ["kubectl apply -f k8s/", "kubectl rollout status deployment/app"],
    DeploymentTarget.AWS: ["aws ecs update-service --force-new-deployment"],
    DeploymentTarget.AZURE: ["az webapp deployment slot swap"],
    DeploymentTarget.GCP: ["gcloud run deploy"],
    DeploymentTarget.DOCKER: ["docker compose up -d"],
}

DEPLOYMENT_NOTES = {
    DeploymentTarget.KUBERNETES: ["Readiness and liveness probes on the health endpoint",
                                  "NetworkPolicies restrict pod-to-pod traffic"],
    DeploymentTarget.AWS: ["Use separate target groups for blue and green",
                           "Secrets from AWS Secrets Manager"],
    DeploymentTarget.AZURE: ["Deployment slots for blue and green", "Secrets from Key Vault"],
    DeploymentTarget.GCP: ["Traffic splitting between revisions", "Secrets from Secret Manager"],
    DeploymentTarget.DOCKER: ["Run containers as a non-root user", "Pin image digests"],
}

CI_CONFIG_PATHS = {
    RepositoryPlatform.GITHUB: ".github/workflows/ci.yml",
    RepositoryPlatform.GITLAB: ".gitlab-ci.yml",
    RepositoryPlatform.BITBUCKET: "bitbucket-pipelines.yml",
}

CMAKE_CONFIG = (
    "# CMakeLists.txt\n"
    "cmake_minimum_required(VERSION 3.20)\n"
    "project(MyApp)\n"
    "add_executable(MyApp main.cpp)\n"
)
CARGO_CONFIG = (
    "# Cargo.toml\n"
    "[package]\n"
    'name = "my_app"\n'
    'version = "0.1.0"\n'
    "[dependencies]\n"
)


def _normalise(tech_stack: list[str]) -> list[str]:
    return [tag.strip().lower() for tag in tech_stack]


def stack_family(tech_stack: list[str]) -> str:
    """The build family selected by the first recognised tech-stack tag."""
    stack = _normalise(tech_stack)
    for family, tags in STACK_FAMILIES:
        if any(tag in stack for tag in tags):
            return family
    return DEFAULT_FAMILY


# ---------------------------------------------------------------------------
# Stages, gates, deployment
# ---------------------------------------------------------------------------

def generate_pipeline_stages(
    tech_stack: list[str], target: DeploymentTarget = DeploymentTarget.KUBERNETES
) -> list[PipelineStage]:
    family = stack_family(tech_stack)
    jobs = [Job(name="Checkout", commands=["git checkout $BRANCH"])]
    jobs += [Job(name=name, commands=list(cmds)) for name, cmds in BUILD_JOBS[family]]
    if "tauri" in _normalise(tech_stack):
        jobs.append(Job(name="Tauri Build", commands=["npm run tauri build"]))

    return [
        PipelineStage(name="Build & Test", order=1, jobs=jobs),
        PipelineStage(name="Security Scan", order=2, jobs=[
            Job(name="SAST", commands=list(SAST_COMMANDS[family])),
            Job(name="Dependency Check", commands=list(DEPENDENCY_COMMANDS[family])),
            Job(name="Secret Scan", commands=["trufflehog git file://. --fail"]),
        ]),
        PipelineStage(name="Deploy", order=3, jobs=[
            Job(name="Deploy Green", commands=list(DEPLOY_COMMANDS[target])),
            Job(name="Health Check", commands=["curl --fail $GREEN_URL/health"]),
            Job(name="Switch Traffic", commands=["promote green; keep blue for rollback"]),
        ]),
    ]


def generate_security_gates(tech_stack: list[str]) -> list[SecurityGate]:
    stack = _normalise(tech_stack)
    gates = [
        SecurityGate(name="Secret Scan", tool="TruffleHog", fail_condition="Any secrets detected"),
    ]
    if "c++" in stack or "cpp" in stack:
        gates.append(SecurityGate(
            name="Memory Safe", tool="Valgrind/ASan", fail_condition="Memory leaks detected",
        ))
    if "rust" in stack:
        gates.append(SecurityGate(
            name="Audit", tool="cargo-audit", fail_condition="Vulnerable crates",
        ))
    return gates


def generate_deployment_config(target: DeploymentTarget) -> DeploymentConfig:
    """Blue-green with rollback and a health check, whatever the target."""
    return DeploymentConfig(
        target=target,
        strategy="Blue-Green",
        rollback_enabled=True,
        health_check="/health",
        notes=list(DEPLOYMENT_NOTES[target]),
    )


def generate_build_config(tech_stack: list[str]) -> Optional[str]:
    stack = _normalise(tech_stack)
    if "c++" in stack or "cpp" in stack:
        return CMAKE_CONFIG
    if "rust" in stack:
        return CARGO_CONFIG
    return None


# ---------------------------------------------------------------------------
# CI definition
# ---------------------------------------------------------------------------

def _github_config(project_name: str, stages: list[PipelineStage]) -> dict[str, Any]:
    jobs: dict[str, Any] = {}
    previous: Optional[str] = None
    for stage in stages:
        key = stage.name.lower().replace(" & ", "-").replace(" ", "-")
        job: dict[str, Any] = {
            "runs-on": "ubuntu-latest",
            "steps": [{"name": j.name, "run": "\n".join(j.commands)} for j in stage.jobs],
        }
        if previous:
            job["needs"] = previous
        jobs[key] = job
        previous = key
    return {"name": project_name, "on": ["push", "pull_request"], "jobs": jobs}


def _gitlab_config(project_name: str, stages: list[PipelineStage]) -> dict[str, Any]:
    config: dict[str, Any] = {"stages": [s.name for s in stages]}
    for stage in stages:
        for job in stage.jobs:
            config[f"{stage.name}: {job.name}"] = {"stage": stage.name, "script": list(job.commands)}
    return config


def _bitbucket_config(project_name: str, stages: list[PipelineStage]) -> dict[str, Any]:
    steps = [
        {"step": {"name": f"{stage.name}: {job.name}", "script": list(job.commands)}}
        for stage in stages
        for job in stage.jobs
    ]
    return {"pipelines": {"default": steps}}


CI_BUILDERS = {
    RepositoryPlatform.GITHUB: _github_config,
    RepositoryPlatform.GITLAB: _gitlab_config,
    RepositoryPlatform.BITBUCKET: _bitbucket_config,
}


def render_ci_config(
    project_name: str, stages: list[PipelineStage], platform: RepositoryPlatform
) -> str:
    """Serialise the stages in the platform's CI file layout."""
    data = CI_BUILDERS[platform](project_name, stages)
    return yaml.safe_dump(data, sort_keys=False, default_flow_style=False)


def design_cicd(
    project_name: str,
    tech_stack: list[str],
    deployment_target: str = "kubernetes",
    repository_platform: str = "github",
) -> DevOpsOutput:
    """Design the CI/CD pipeline.

    Raises:
        ValueError: If the deployment target or repository platform is not
            one of the supported values.
    """
    target = DeploymentTarget(deployment_target.lower())
    platform = RepositoryPlatform(repository_platform.lower())
    stages = generate_pipeline_stages(tech_stack, target)

    return DevOpsOutput(
        platform=platform,
        pipeline_stages=stages,
        security_gates=generate_security_gates(tech_stack),
        deployment_config=generate_deployment_config(target),
        build_config=generate_build_config(tech_stack),
        ci_config_path=CI_CONFIG_PATHS[platform],
        ci_config=render_ci_config(project_name, stages, platform),
    )
