"""Mermaid diagrams for the technical design.

Every function returns Mermaid source wrapped in a fenced ``mermaid`` block
so the text can be dropped straight into Markdown.
"""

from __future__ import annotations

from src.utils import mermaid_id

from .models import Feature, FeatureFlow, Module, ModuleType, Visibility
from .modules import SECURITY_MODULE

VISIBILITY_MARKERS = {
    Visibility.PRIVATE: "-",
    Visibility.PROTECTED: "#",
    Visibility.PUBLIC: "+",
}

# Flow actor -> sequence-diagram participant.
ACTOR_TARGETS = {
    "User": "UI",
    "Admin": "UI",
    "API": "API",
    "System": "Service",
    "Database": "DB",
}

PARTICIPANTS = ("UI", "API", "Service", "DB")
MAX_DFD_PROCESSES = 6


def _fence(lines: list[str]) -> str:
    return "```mermaid\n" + "\n".join(lines) + "\n```"


def _label(text: str) -> str:
    return text.replace('"', "'")


def _mermaid_type(type_name: str) -> str:
    """Mermaid class diagrams spell generics with ``~``."""
    return type_name.replace("<", "~").replace(">", "~").replace(" | ", " or ")


def _is_service(module: Module) -> bool:
    return module.type == ModuleType.SERVICE and module.name != SECURITY_MODULE


def _has_repository(module: Module) -> bool:
    return module.type == ModuleType.REPOSITORY or module.has_class_suffix("Repository")


# ---------------------------------------------------------------------------
# Architecture
# ---------------------------------------------------------------------------

def architecture_diagram(modules: list[Module]) -> str:
    """Layered ``graph TB`` view: client, API, business, security and data."""
    controllers = [m for m in modules if m.type == ModuleType.CONTROLLER]
    services = [m for m in modules if _is_service(m)]
    repositories = [m for m in modules if _has_repository(m)]

    lines = ["graph TB", "    subgraph Client", "        UI[Web / Mobile UI]", "    end"]

    lines += ["    subgraph API[API Layer]", "        Gateway[API Gateway]"]
    lines += [f'        {mermaid_id(m.name)}Ctrl["{_label(m.name)}"]' for m in controllers]
    lines.append("    end")

    lines.append("    subgraph Business[Business Logic]")
    lines += [f'        {mermaid_id(m.name)}Svc["{_label(m.name)}"]' for m in services]
    lines.append("    end")

    lines += [
        "    subgraph Security[Security Layer]",
        "        Auth[Authentication]",
        "        Authz[Authorization]",
        "    end",
    ]

    lines.append("    subgraph Data[Data Layer]")
    lines += [f'        {mermaid_id(m.name)}Repo["{_label(m.name)} Repository"]' for m in repositories]
    lines += ["        DB[(Database)]", "    end"]

    lines += ["    UI --> Gateway", "    Gateway --> Auth", "    Auth --> Authz"]
    for module in controllers:
        lines.append(f"    Gateway --> {mermaid_id(module.name)}Ctrl")
    for module in services:
        lines.append(f"    Gateway --> {mermaid_id(module.name)}Svc")
        if _has_repository(module):
            lines.append(f"    {mermaid_id(module.name)}Svc --> {mermaid_id(module.name)}Repo")
    for module in repositories:
        lines.append(f"    {mermaid_id(module.name)}Repo --> DB")
    return _fence(lines)


# ---------------------------------------------------------------------------
# Components
# ---------------------------------------------------------------------------

def component_diagram(modules: list[Module]) -> str:
    """``classDiagram`` of every class and interface with their relations."""
    lines = ["classDiagram"]
    first_class: dict[str, str] = {}

    for module in modules:
        for class_def in module.classes:
            first_class.setdefault(module.name, class_def.name)
            lines.append(f"    class {mermaid_id(class_def.name)} {{")
            for prop in class_def.properties:
                marker = VISIBILITY_MARKERS[prop.visibility]
                lines.append(f"        {marker}{prop.name} {_mermaid_type(prop.type)}")
            for method in class_def.methods:
                lines.append(
                    f"        +{method.name}({method.params}) {_mermaid_type(method.returns)}"
                )
            lines.append("    }")
        for interface in module.interfaces:
            lines.append(f"    class {mermaid_id(interface.name)} {{")
            lines.append("        <<interface>>")
            for method in interface.methods:
                lines.append(
                    f"        +{method.name}({method.params}) {_mermaid_type(method.returns)}"
                )
            lines.append("    }")

    for module in modules:
        names = {c.name for c in module.classes}
        service = f"{module.name}Service"
        for interface in module.interfaces:
            if interface.name == f"I{service}" and service in names:
                lines.append(f"    {mermaid_id(service)} ..|> {mermaid_id(interface.name)}")
        if f"{module.name}Controller" in names and service in names:
            lines.append(f"    {mermaid_id(module.name)}Controller --> {mermaid_id(service)}")
        if f"{module.name}Repository" in names and service in names:
            lines.append(f"    {mermaid_id(service)} --> {mermaid_id(module.name)}Repository")

    for module in modules:
        source = first_class.get(module.name)
        for dependency in module.dependencies:
            target = first_class.get(dependency)
            if source and target and source != target:
                lines.append(f"    {mermaid_id(source)} ..> {mermaid_id(target)} : uses")

    return _fence(lines)


# ---------------------------------------------------------------------------
# Sequence
# ---------------------------------------------------------------------------

def sequence_diagram(flows: list[FeatureFlow], features: list[Feature] | None = None) -> str:
    """Sequence diagram for the authentication flow, or the first flow."""
    if not flows:
        return _fence(["sequenceDiagram", "    actor User"])

    flow = flows[0]
    names = {f.id: f.name for f in features or []}
    for candidate in flows:
        if "auth" in names.get(candidate.feature_id, "").lower():
            flow = candidate
            break

    lines = ["sequenceDiagram", "    actor User"]
    lines += [f"    participant {p}" for p in PARTICIPANTS]

    previous = "User"
    for step in flow.steps:
        target = ACTOR_TARGETS.get(step.actor, "Service")
        source = "User" if step.actor in ("User", "Admin") else previous
        action = _label(step.action).replace(";", ",")
        if source == target:
            lines.append(f"    Note over {target}: {action}")
        else:
            lines.append(f"    {source}->>{target}: {action}")
        previous = target
    return _fence(lines)


# ---------------------------------------------------------------------------
# Data flow
# ---------------------------------------------------------------------------

def data_flow_diagram(modules: list[Module], actors: list[str]) -> str:
    """Level-0 context and level-1 process view in one ``graph LR``."""
    lines = ["graph LR", "    subgraph L0[Level 0: Context]"]
    actor_ids = []
    for actor in actors:
        node = f"E_{mermaid_id(actor.title())}"
        actor_ids.append(node)
        lines.append(f'        {node}[/"{_label(actor)}"/]')
    lines += [
        "        SYS((System))",
        "        STORE[(Data Store)]",
        "        EXT[External APIs]",
        "        IDP[Identity Provider]",
        "    end",
    ]

    processes = modules[:MAX_DFD_PROCESSES]
    lines.append("    subgraph L1[Level 1: Processes]")
    for n, module in enumerate(processes, start=1):
        lines.append(f'        P{n}(("{n}. {_label(module.name)}"))')
    lines.append("    end")

    for node in actor_ids:
        lines.append(f"    {node} -->|requests| SYS")
        lines.append(f"    SYS -->|responses| {node}")
    lines += [
        "    SYS -->|credentials| IDP",
        "    SYS <-->|records| STORE",
        "    SYS -->|integration calls| EXT",
    ]
    for n, module in enumerate(processes, start=1):
        lines.append(f"    SYS --> P{n}")
        if _has_repository(module):
            lines.append(f"    P{n} <-->|read/write| STORE")
    return _fence(lines)
