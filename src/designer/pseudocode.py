"""Pseudocode generation for every class of every module.

Each class is rendered through a per-language Jinja2 template
(``templates/<language>.j2``).  Method bodies are comment steps picked from
the verb table in ``playbooks.yaml``; classes recognised by a domain
playbook (secure messaging, sandboxing, smart contracts, ...) get the
playbook's routines instead.
"""

from __future__ import annotations

from functools import lru_cache
from pathlib import Path
from typing import Any, Optional

import yaml
from pydantic import BaseModel, ConfigDict

from src.reporter.templates import TemplateRenderer
from src.utils import contains_any, to_kebab_case, to_snake_case

from .models import ClassDefinition, Language, MethodSignature, Module, PseudocodeFile

PLAYBOOK_FILE = Path(__file__).parent / "playbooks.yaml"
TEMPLATE_DIR = Path(__file__).parent / "templates"

GENERIC_TEMPLATE = "generic.j2"
PLAYBOOK_TEMPLATE = "playbook.j2"


# ---------------------------------------------------------------------------
# Playbook data
# ---------------------------------------------------------------------------

class Step(BaseModel):
    model_config = ConfigDict(frozen=True)

    text: str
    details: tuple[str, ...] = ()


class Routine(BaseModel):
    model_config = ConfigDict(frozen=True)

    when: tuple[str, ...]
    heading: str
    signature: str
    steps: tuple[Step, ...]
    returns: str


class Playbook(BaseModel):
    """Domain-flavoured routines for a family of classes."""

    model_config = ConfigDict(frozen=True)

    name: str
    title: str
    reference: str = ""
    modules: tuple[str, ...] = ()
    classes: tuple[str, ...] = ()
    routines: tuple[Routine, ...] = ()
    notes: tuple[str, ...] = ()

    def matches(self, module_name: str, class_name: str) -> bool:
        return (
            any(k in module_name for k in self.modules)
            or any(k in class_name for k in self.classes)
        )

    def routines_for(self, class_name: str) -> list[Routine]:
        return [r for r in self.routines if any(k in class_name for k in r.when)]


class VerbSteps(BaseModel):
    model_config = ConfigDict(frozen=True)

    verbs: tuple[str, ...]
    steps: tuple[Step, ...]
    returns: str


class PlaybookBook(BaseModel):
    """Everything loaded from ``playbooks.yaml``."""

    model_config = ConfigDict(frozen=True)

    playbooks: tuple[Playbook, ...] = ()
    method_steps: tuple[VerbSteps, ...] = ()
    default_steps: tuple[Step, ...] = ()
    default_returns: str = "Result"


@lru_cache(maxsize=1)
def load_playbooks(path: Path = PLAYBOOK_FILE) -> PlaybookBook:
    """Parse ``playbooks.yaml`` once per process."""
    raw = yaml.safe_load(path.read_text(encoding="utf-8")) or {}
    return PlaybookBook.model_validate(raw)


def find_playbook(module_name: str, class_name: str) -> Optional[Playbook]:
    """First playbook whose module or class triggers match."""
    for playbook in load_playbooks().playbooks:
        if playbook.matches(module_name, class_name):
            return playbook
    return None


def steps_for_method(method_name: str) -> tuple[tuple[Step, ...], str]:
    """Comment steps and return description chosen by the method's verb."""
    book = load_playbooks()
    lowered = method_name.lower()
    for entry in book.method_steps:
        if any(verb in lowered for verb in entry.verbs):
            return entry.steps, entry.returns
    return book.default_steps, book.default_returns


# ---------------------------------------------------------------------------
# Naming helpers
# ---------------------------------------------------------------------------

FILENAME_RULES: dict[str, Any] = {
    Language.PYTHON.value: lambda name: f"{to_snake_case(name)}.py",
    Language.TYPESCRIPT.value: lambda name: f"{to_kebab_case(name)}.ts",
    Language.JAVA.value: lambda name: f"{name}.java",
    Language.GO.value: lambda name: f"{to_snake_case(name)}.go",
    Language.CSHARP.value: lambda name: f"{name}.cs",
    Language.CPP.value: lambda name: f"{name}.cpp",
    Language.RUST.value: lambda name: f"{to_snake_case(name)}.rs",
}

COMMENT_MARKERS: dict[str, str] = {Language.PYTHON.value: "#"}


def pseudocode_filename(class_name: str, language: str) -> str:
    rule = FILENAME_RULES.get(language)
    if rule is None:
        return f"{class_name}.txt"
    return rule(class_name)


def simplify_params(params: str) -> str:
    """Keep only parameter names: ``"id: string, data: Dto"`` -> ``"id, data"``."""
    names = [p.split(":")[0].strip() for p in params.split(",")]
    return ", ".join(n for n in names if n)


def inner_type(returns: str) -> str:
    """Unwrap ``Promise<T>`` / ``Result<T>`` to ``T``."""
    for wrapper in ("Promise<", "Result<"):
        if returns.startswith(wrapper) and returns.endswith(">"):
            return returns[len(wrapper):-1]
    return returns


# ---------------------------------------------------------------------------
# Security notes
# ---------------------------------------------------------------------------

BASE_NOTES = [
    "Input validation required for ALL public methods",
    "Audit logging for all data operations (CREATE/UPDATE/DELETE)",
]

LANGUAGE_NOTES: dict[str, list[str]] = {
    Language.CPP.value: [
        "Use smart pointers (std::unique_ptr, std::shared_ptr); no raw new/delete",
        "Bounds-check every buffer access; prefer std::array/std::vector over char*",
        "Release resources through RAII",
    ],
    Language.RUST.value: [
        "Rely on ownership and borrowing; keep unsafe blocks out of business logic",
        "Never call .unwrap() on untrusted input",
        "Handle every Result/Option explicitly",
    ],
}

NOTES_HEADINGS: dict[str, str] = {
    Language.CPP.value: "Security Checklist",
    Language.RUST.value: "Rust Safety Notes",
}


def security_notes_for(module_name: str, class_name: str, language: str) -> list[str]:
    """Security reminders for one class, by language and by name keywords."""
    notes = list(BASE_NOTES)
    notes.extend(LANGUAGE_NOTES.get(language, []))
    if contains_any(class_name, ("auth",)):
        notes.append("Rate limiting on authentication attempts (max 5 per 15 minutes)")
        notes.append("Require MFA for privileged accounts")
    if contains_any(class_name, ("payment", "transaction")):
        notes.append("PCI-DSS compliance required for card data handling")
        notes.append("Encrypt card data with AES-256; never log full card numbers")
    if "Signal" in module_name or "Crypto" in module_name:
        notes.append("Constant-time comparison for MACs and signatures")
        notes.append("Zeroize key material after use")
    return notes


# ---------------------------------------------------------------------------
# Rendering
# ---------------------------------------------------------------------------

@lru_cache(maxsize=1)
def _renderer() -> TemplateRenderer:
    return TemplateRenderer(TEMPLATE_DIR)


def _method_context(method: MethodSignature) -> dict[str, Any]:
    steps, returns = steps_for_method(method.name)
    return {
        "name": method.name,
        "params": method.params,
        "simple_params": simplify_params(method.params),
        "returns": method.returns,
        "inner_returns": inner_type(method.returns),
        "description": method.description or method.name,
        "steps": steps,
        "result": returns,
    }


def render_class(module: Module, class_def: ClassDefinition, language: str) -> PseudocodeFile:
    """Render one class in *language*, preferring a matching domain playbook."""
    filename = pseudocode_filename(class_def.name, language)
    notes = security_notes_for(module.name, class_def.name, language)
    comment = COMMENT_MARKERS.get(language, "//")
    context: dict[str, Any] = {
        "filename": filename,
        "module": module.name,
        "class_name": class_def.name,
        "purpose": class_def.purpose,
        "properties": class_def.properties,
        "methods": [_method_context(m) for m in class_def.methods],
        "comment": comment,
        "notes_heading": NOTES_HEADINGS.get(language, "Security Notes"),
    }

    playbook = find_playbook(module.name, class_def.name)
    routines = playbook.routines_for(class_def.name) if playbook else []
    if playbook is not None and routines:
        notes = list(playbook.notes) + notes
        template = PLAYBOOK_TEMPLATE
        context.update(playbook=playbook, routines=routines)
    elif language in FILENAME_RULES:
        template = f"{language}.j2"
    else:
        template = GENERIC_TEMPLATE

    context["notes"] = notes
    return PseudocodeFile(
        filename=filename,
        module=module.name,
        class_name=class_def.name,
        language=language,
        purpose=class_def.purpose,
        security_notes=notes,
        content=_renderer().render(template, context),
    )


def generate_pseudocode(modules: list[Module], language: str = "python") -> list[PseudocodeFile]:
    """One pseudocode file per class, in module order."""
    language = language.lower()
    return [
        render_class(module, class_def, language)
        for module in modules
        for class_def in module.classes
    ]
