"""Unit tests for CI/CD pipeline design (src.devops.pipeline_design).

Tests cover:
- Stack family selection from tech-stack tags
- Stage layout and per-family build / scan commands
- Security gates and build configuration for C++ and Rust
- Deployment config per target
- CI definition path and YAML layout per repository platform
- Validation of target and platform values
"""

from __future__ import annotations

import pytest
import yaml

from src.devops import (
    DeploymentTarget,
    RepositoryPlatform,
    design_cicd,
    generate_security_gates,
    render_ci_config,
    stack_family,
)
from src.devops.pipeline_design import generate_build_config, generate_pipeline_stages

pytestmark = pytest.mark.unit


class TestStackFamily:
    @pytest.mark.parametrize("stack, family", [
        (["C++", "Qt"], "cpp"),
        (["rust"], "rust"),
        (["tauri", "react"], "rust"),
        (["FastAPI", "PostgreSQL"], "python"),
        (["golang"], "go"),
        (["Spring"], "java"),
        (["react", "express"], "node"),
        ([], "node"),
    ])
    def test_family(self, stack: list[str], family: str):
        assert stack_family(stack) == family

    def test_first_family_in_table_order_wins(self):
        assert stack_family(["python", "rust"]) == "rust"


class TestStages:
    def test_three_ordered_stages(self):
        stages = generate_pipeline_stages(["python"])
        assert [(s.order, s.name) for s in stages] == [
            (1, "Build & Test"), (2, "Security Scan"), (3, "Deploy"),
        ]

    def test_build_jobs_for_family(self):
        build = generate_pipeline_stages(["rust"])[0]
        assert [j.name for j in build.jobs] == ["Checkout", "Build", "Test"]
        assert build.jobs[1].commands == ["cargo build --release"]

    def test_tauri_adds_bundle_job(self):
        build = generate_pipeline_stages(["tauri"])[0]
        assert build.jobs[-1].name == "Tauri Build"

    def test_security_scan_jobs(self):
        scan = generate_pipeline_stages(["python"])[1]
        assert [j.name for j in scan.jobs] == ["SAST", "Dependency Check", "Secret Scan"]
        assert scan.jobs[0].commands == ["bandit -r .", "semgrep scan"]

    def test_deploy_commands_follow_target(self):
        deploy = generate_pipeline_stages(["python"], DeploymentTarget.GCP)[2]
        assert deploy.jobs[0].commands == ["gcloud run deploy"]


class TestGatesAndBuildConfig:
    def test_secret_scan_always_present(self):
        gates = generate_security_gates(["python"])
        assert [(g.name, g.tool) for g in gates] == [("Secret Scan", "TruffleHog")]

    def test_cpp_memory_gate(self):
        names = [g.name for g in generate_security_gates(["C++"])]
        assert names == ["Secret Scan", "Memory Safe"]

    def test_rust_audit_gate(self):
        gates = generate_security_gates(["Rust"])
        assert gates[-1].tool == "cargo-audit"

    def test_build_config(self):
        assert "cmake_minimum_required" in generate_build_config(["cpp"])
        assert "[package]" in generate_build_config(["rust"])
        assert generate_build_config(["python"]) is None


class TestCIConfig:
    @pytest.mark.parametrize("platform, path", [
        ("github", ".github/workflows/ci.yml"),
        ("gitlab", ".gitlab-ci.yml"),
        ("bitbucket", "bitbucket-pipelines.yml"),
    ])
    def test_config_path(self, platform: str, path: str):
        devops = design_cicd("Demo", ["python"], repository_platform=platform)
        assert devops.ci_config_path == path
        assert devops.platform == RepositoryPlatform(platform)

    def test_github_jobs_chain(self):
        stages = generate_pipeline_stages(["python"])
        data = yaml.safe_load(render_ci_config("Demo", stages, RepositoryPlatform.GITHUB))
        assert data["name"] == "Demo"
        assert list(data["jobs"]) == ["build-test", "security-scan", "deploy"]
        assert data["jobs"]["security-scan"]["needs"] == "build-test"
        assert "needs" not in data["jobs"]["build-test"]

    def test_gitlab_layout(self):
        stages = generate_pipeline_stages(["go"])
        data = yaml.safe_load(render_ci_config("Demo", stages, RepositoryPlatform.GITLAB))
        assert data["stages"] == ["Build & Test", "Security Scan", "Deploy"]
        assert data["Security Scan: SAST"]["script"] == ["gosec ./..."]

    def test_bitbucket_layout(self):
        stages = generate_pipeline_stages(["java"])
        data = yaml.safe_load(render_ci_config("Demo", stages, RepositoryPlatform.BITBUCKET))
        steps = data["pipelines"]["default"]
        assert steps[0]["step"]["name"] == "Build & Test: Checkout"


class TestDesignCicd:
    def test_defaults(self):
        devops = design_cicd("Demo", ["python"])
        assert devops.deployment_config.target == DeploymentTarget.KUBERNETES
        assert devops.deployment_config.strategy == "Blue-Green"
        assert devops.deployment_config.rollback_enabled is True
        assert devops.build_config is None
        assert devops.ci_config

    def test_target_and_platform_are_case_insensitive(self):
        devops = design_cicd("Demo", ["python"], "AWS", "GitLab")
        assert devops.deployment_config.target == DeploymentTarget.AWS
        assert devops.platform == RepositoryPlatform.GITLAB

    def test_unknown_target(self):
        with pytest.raises(ValueError):
            design_cicd("Demo", ["python"], deployment_target="mainframe")

    def test_unknown_platform(self):
        with pytest.raises(ValueError):
            design_cicd("Demo", ["python"], repository_platform="sourceforge")
