"""Jinja2 template rendering for generated documents.

Provides the TemplateRenderer class which loads Jinja2 templates from a
template directory (by default ``src/reporter/templates/``) and renders them
with document-specific context data.  The Tech-Lead phase points its own
renderer at ``src/designer/templates/`` for pseudocode.
"""

from __future__ import annotations

from functools import lru_cache
from pathlib import Path
from typing import Any

from jinja2 import Environment, FileSystemLoader, StrictUndefined

from src.utils import sanitize_name, to_kebab_case, to_snake_case


# ---------------------------------------------------------------------------
# Template directory discovery
# ---------------------------------------------------------------------------

_DEFAULT_TEMPLATE_DIR = Path(__file__).parent / "templates"


# ---------------------------------------------------------------------------
# TemplateRenderer
# ---------------------------------------------------------------------------


class TemplateRenderer:
    """Renders Jinja2 templates for Markdown documents and pseudocode.

    Templates are plain text (no HTML autoescaping).  Undefined variables
    raise instead of rendering as empty strings, so a template/context
    mismatch fails loudly.
    """

    def __init__(self, template_dir: str | Path | None = None) -> None:
        if template_dir is None:
            template_dir = _DEFAULT_TEMPLATE_DIR
        self.template_dir = Path(template_dir)
        self.env = Environment(
            loader=FileSystemLoader(str(self.template_dir)),
            autoescape=False,
            undefined=StrictUndefined,
            keep_trailing_newline=True,
            trim_blocks=True,
            lstrip_blocks=True,
        )
        # Register custom filters
        self.env.filters["slugify"] = sanitize_name
        self.env.filters["snake_case"] = to_snake_case
        self.env.filters["kebab_case"] = to_kebab_case
        self.env.filters["camel_case"] = _camel_case_filter
        self.env.filters["title_case"] = _title_case_filter
        self.env.filters["md_cell"] = _md_cell_filter

    # -- Single template rendering -----------------------------------------

    def render(self, template_path: str, context: dict[str, Any]) -> str:
        """Render a single template with the provided context.

        Args:
            template_path: Path relative to the template directory (e.g.
                ``"adr.md.j2"``).
            context: Dictionary of variables available inside the template.

        Returns:
            The rendered template content as a string.
        """
        template = self.env.get_template(template_path)
        return template.render(**context)


# ---------------------------------------------------------------------------
# Jinja2 custom filters
# ---------------------------------------------------------------------------

def _camel_case_filter(value: str) -> str:
    """Convert ``findById`` / ``FindById`` / ``find_by_id`` to ``findById``."""
    parts = [p for p in to_snake_case(value).split("_") if p]
    if not parts:
        return ""
    return parts[0] + "".join(p.capitalize() for p in parts[1:])


def _title_case_filter(value: str) -> str:
    """Convert ``critical_path`` or ``criticalPath`` to ``Critical Path``."""
    return " ".join(word.capitalize() for word in to_snake_case(str(value)).split("_") if word)


def _md_cell_filter(value: Any) -> str:
    """Make a value safe inside a Markdown table cell."""
    return str(value).replace("|", "\\|").replace("\n", " ")


@lru_cache(maxsize=1)
def default_renderer() -> TemplateRenderer:
    """Process-wide renderer over the bundled document templates."""
    return TemplateRenderer()
