"""Technical design (Tech-Lead phase).

Groups user stories into features, derives one module per feature plus the
shared Common/Security modules, and renders pseudocode, Mermaid diagrams and
a proposed source tree.

Quick usage::

    from src.designer import design_system

    design = design_system(ba.user_stories, ba.security_requirements, "rust", "secure_comm")
    design.modules[0].classes[0].name
"""

from src.designer.design import design_system
from src.designer.diagrams import (
    architecture_diagram,
    component_diagram,
    data_flow_diagram,
    sequence_diagram,
)
from src.designer.features import generate_feature_checklist, generate_feature_flows
from src.designer.models import (
    ClassDefinition,
    DesignPattern,
    Diagrams,
    Feature,
    FeatureFlow,
    FileNode,
    FlowStep,
    InterfaceDefinition,
    Language,
    MethodSignature,
    Module,
    ModuleType,
    NodeType,
    PropertyDefinition,
    PseudocodeFile,
    SubFeature,
    TechLeadOutput,
    Visibility,
)
from src.designer.modules import (
    COMMON_MODULE,
    DATABASE_MODULE,
    SECURITY_MODULE,
    generate_module_breakdown,
)
from src.designer.pseudocode import generate_pseudocode, simplify_params
from src.designer.scaffold import generate_design_patterns, generate_file_structure

__all__ = [
    "design_system",
    "generate_feature_checklist",
    "generate_feature_flows",
    "generate_module_breakdown",
    "generate_pseudocode",
    "simplify_params",
    "generate_file_structure",
    "generate_design_patterns",
    "architecture_diagram",
    "component_diagram",
    "sequence_diagram",
    "data_flow_diagram",
    "COMMON_MODULE",
    "DATABASE_MODULE",
    "SECURITY_MODULE",
    "ClassDefinition",
    "DesignPattern",
    "Diagrams",
    "Feature",
    "FeatureFlow",
    "FileNode",
    "FlowStep",
    "InterfaceDefinition",
    "Language",
    "MethodSignature",
    "Module",
    "ModuleType",
    "NodeType",
    "PropertyDefinition",
    "PseudocodeFile",
    "SubFeature",
    "TechLeadOutput",
    "Visibility",
]
