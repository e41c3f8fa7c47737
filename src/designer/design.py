"""Tech-Lead phase entry point."""

from __future__ import annotations

from typing import Optional

from src.analyst.models import SecurityRequirement, UserStory

from .diagrams import architecture_diagram, component_diagram, data_flow_diagram, sequence_diagram
from .features import generate_feature_checklist, generate_feature_flows
from .models import Diagrams, TechLeadOutput
from .modules import generate_module_breakdown
from .pseudocode import generate_pseudocode
from .scaffold import generate_design_patterns, generate_file_structure


def design_system(
    stories: list[UserStory],
    security_requirements: list[SecurityRequirement],
    language: str = "python",
    domain_name: Optional[str] = None,
) -> TechLeadOutput:
    """Turn user stories into features, modules, pseudocode, diagrams and a scaffold.

    Args:
        stories: User stories from the business-analysis phase.
        security_requirements: Each requirement becomes a sub-feature of the
            ``Security Controls`` feature.
        language: Pseudocode target language tag.
        domain_name: Resolved domain; selects specialised modules, scaffold
            and design patterns.
    """
    features = generate_feature_checklist(stories, [r.requirement for r in security_requirements])
    flows = generate_feature_flows(features)
    modules = generate_module_breakdown(features, domain_name)
    actors = list(dict.fromkeys(story.as_a for story in stories))

    return TechLeadOutput(
        features=features,
        flows=flows,
        modules=modules,
        pseudocode=generate_pseudocode(modules, language),
        diagrams=Diagrams(
            architecture=architecture_diagram(modules),
            components=component_diagram(modules),
            sequence=sequence_diagram(flows, features),
            data_flow=data_flow_diagram(modules, actors),
        ),
        file_structure=generate_file_structure(modules, language, domain_name),
        design_patterns=generate_design_patterns(domain_name),
    )
