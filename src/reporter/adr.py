"""Architecture decision record documents (``adr/ADR-NNN-<slug>.md``)."""

from __future__ import annotations

from src.architecture.models import ArchitectureDecision
from src.utils import sanitize_name

from .templates import default_renderer

DEFAULT_DECIDERS = "Tech Lead, Security Engineer"


def adr_filename(adr: ArchitectureDecision) -> str:
    return f"{adr.id}-{sanitize_name(adr.title)}.md"


def render_adr(adr: ArchitectureDecision, deciders: str = DEFAULT_DECIDERS) -> str:
    return default_renderer().render("adr.md.j2", {"adr": adr, "deciders": deciders})
