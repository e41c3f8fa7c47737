"""Software requirements specification document (``srs.md``).

The SRS stitches every phase output into one Markdown document, from the
stakeholder table through to the CI/CD stages.
"""

from __future__ import annotations

from datetime import date
from typing import TYPE_CHECKING, Optional

from src.analyst.models import Priority, UserStory
from src.designer.models import ClassDefinition, FileNode, NodeType

from .templates import default_renderer

if TYPE_CHECKING:
    from src.pipeline import PipelineResult

MAX_PSEUDOCODE_FILES = 3


def tree_lines(nodes: list[FileNode], prefix: str = "") -> list[str]:
    """Draw a file tree with box-drawing connectors, one line per node."""
    lines = []
    for n, node in enumerate(nodes):
        last = n == len(nodes) - 1
        name = f"{node.name}/" if node.type == NodeType.DIRECTORY else node.name
        if node.description:
            name = f"{name}  # {node.description}"
        lines.append(f"{prefix}{'└── ' if last else '├── '}{name}")
        if node.children:
            lines += tree_lines(node.children, prefix + ("    " if last else "│   "))
    return lines


def stories_by_priority(stories: list[UserStory]) -> list[tuple[str, list[UserStory]]]:
    """Stories bucketed P0..P3; empty buckets are left out."""
    buckets = [(p.value, [s for s in stories if s.priority == p]) for p in Priority]
    return [(p, bucket) for p, bucket in buckets if bucket]


def _entities(result: PipelineResult) -> list[ClassDefinition]:
    """Classes that carry state, i.e. declare at least one field."""
    return [
        class_def
        for module in result.phases.tech_lead.modules
        for class_def in module.classes
        if class_def.properties
    ]


def render_srs(result: PipelineResult, generated_on: Optional[date] = None) -> str:
    phases = result.phases
    pseudocode = phases.tech_lead.pseudocode

    context = {
        "result": result,
        "generated_on": generated_on or date.today(),
        "ba": phases.ba,
        "tech_lead": phases.tech_lead,
        "security": phases.security,
        "qa": phases.qa,
        "devops": phases.devops,
        "pm": phases.pm,
        "architecture": phases.architecture,
        "stakeholders": phases.ba.stakeholders,
        "security_standards": result.domain.domain.security_standards,
        "entities": _entities(result),
        "stories_by_priority": stories_by_priority(phases.ba.user_stories),
        "root_name": result.project_name.replace(" ", ""),
        "tree": tree_lines(phases.tech_lead.file_structure),
        "pseudocode": pseudocode[:MAX_PSEUDOCODE_FILES],
        "more_files": max(0, len(pseudocode) - MAX_PSEUDOCODE_FILES),
    }
    return default_renderer().render("srs.md.j2", context)
