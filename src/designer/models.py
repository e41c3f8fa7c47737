"""Pydantic v2 models for the technical-design (Tech-Lead) phase."""

from __future__ import annotations

from enum import Enum
from typing import Optional

from pydantic import BaseModel, Field

from src.analyst.models import Priority


# ---------------------------------------------------------------------------
# Enumerations
# ---------------------------------------------------------------------------

class ModuleType(str, Enum):
    """Architectural role of a module."""
    SERVICE = "service"
    REPOSITORY = "repository"
    CONTROLLER = "controller"
    UTILITY = "utility"


class Visibility(str, Enum):
    PUBLIC = "public"
    PRIVATE = "private"
    PROTECTED = "protected"


class Language(str, Enum):
    """Pseudocode target languages."""
    PYTHON = "python"
    TYPESCRIPT = "typescript"
    JAVA = "java"
    GO = "go"
    CSHARP = "csharp"
    CPP = "cpp"
    RUST = "rust"


class NodeType(str, Enum):
    FILE = "file"
    DIRECTORY = "directory"


# ---------------------------------------------------------------------------
# Features & flows
# ---------------------------------------------------------------------------

class SubFeature(BaseModel):
    """One deliverable inside a feature, usually derived from a user story."""
    id: str = Field(..., description="Sub-feature id, e.g. 'F-001-2'")
    name: str = Field(...)
    parent_id: str = Field(...)


class Feature(BaseModel):
    """A group of related user stories delivered together."""
    id: str = Field(..., description="Feature id, e.g. 'F-001'")
    name: str = Field(...)
    priority: Priority = Field(default=Priority.P2)
    description: str = Field(default="")
    dependencies: list[str] = Field(default_factory=list, description="Ids of other features")
    acceptance_criteria: list[str] = Field(default_factory=list)
    sub_features: list[SubFeature] = Field(default_factory=list)


class FlowStep(BaseModel):
    order: int = Field(..., ge=1)
    actor: str = Field(..., description="User, System, API, Admin or Database")
    action: str = Field(...)
    notes: Optional[str] = Field(default=None)


class FeatureFlow(BaseModel):
    """Ordered actor/action steps for one feature."""
    feature_id: str = Field(...)
    steps: list[FlowStep] = Field(default_factory=list)


# ---------------------------------------------------------------------------
# Modules
# ---------------------------------------------------------------------------

class MethodSignature(BaseModel):
    """A method described by strings; never compiled."""
    name: str = Field(...)
    params: str = Field(default="", description="e.g. 'id: string, data: UpdateDto'")
    returns: str = Field(default="void")
    description: str = Field(default="")


class PropertyDefinition(BaseModel):
    name: str = Field(...)
    type: str = Field(...)
    visibility: Visibility = Field(default=Visibility.PRIVATE)


class ClassDefinition(BaseModel):
    name: str = Field(...)
    purpose: str = Field(default="")
    methods: list[MethodSignature] = Field(default_factory=list)
    properties: list[PropertyDefinition] = Field(default_factory=list)


class InterfaceDefinition(BaseModel):
    name: str = Field(...)
    purpose: str = Field(default="")
    methods: list[MethodSignature] = Field(default_factory=list)


class Module(BaseModel):
    """A deployable unit of the designed system."""
    name: str = Field(..., description="PascalCase module name")
    type: ModuleType = Field(default=ModuleType.SERVICE)
    classes: list[ClassDefinition] = Field(default_factory=list)
    interfaces: list[InterfaceDefinition] = Field(default_factory=list)
    dependencies: list[str] = Field(default_factory=list, description="Names of other modules")

    def has_class_suffix(self, suffix: str) -> bool:
        return any(c.name.endswith(suffix) for c in self.classes)


# ---------------------------------------------------------------------------
# Pseudocode, scaffold, patterns
# ---------------------------------------------------------------------------

class PseudocodeFile(BaseModel):
    """Comment-driven pseudocode for one class."""
    filename: str = Field(...)
    module: str = Field(...)
    class_name: str = Field(...)
    language: str = Field(
        default="python", description="Language tag; unknown tags render as generic pseudocode"
    )
    purpose: str = Field(default="")
    security_notes: list[str] = Field(default_factory=list)
    content: str = Field(default="")


class FileNode(BaseModel):
    """A file or directory in the proposed source tree."""
    name: str = Field(...)
    type: NodeType = Field(default=NodeType.FILE)
    description: Optional[str] = Field(default=None)
    children: list["FileNode"] = Field(default_factory=list)


class DesignPattern(BaseModel):
    name: str = Field(...)
    description: str = Field(default="")
    justification: str = Field(default="")
    tradeoffs: list[str] = Field(default_factory=list)


class Diagrams(BaseModel):
    """Mermaid sources, each wrapped in a fenced ``mermaid`` block."""
    architecture: str = Field(default="")
    components: str = Field(default="")
    sequence: str = Field(default="")
    data_flow: str = Field(default="")


class TechLeadOutput(BaseModel):
    """Everything the technical-design phase produces."""
    features: list[Feature] = Field(default_factory=list)
    flows: list[FeatureFlow] = Field(default_factory=list)
    modules: list[Module] = Field(default_factory=list)
    pseudocode: list[PseudocodeFile] = Field(default_factory=list)
    diagrams: Diagrams = Field(default_factory=Diagrams)
    file_structure: list[FileNode] = Field(default_factory=list)
    design_patterns: list[DesignPattern] = Field(default_factory=list)

    @property
    def architecture_diagram(self) -> str:
        return self.diagrams.architecture
