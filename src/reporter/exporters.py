"""JSON / YAML / Markdown export of phase outputs.

Any pydantic model, mapping or list can be exported.  Models are dumped in
JSON mode first so dates and enums come out as plain strings everywhere.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel

from src.utils import ensure_dir


def to_data(value: Any) -> Any:
    """Plain JSON-compatible data for *value*."""
    if isinstance(value, BaseModel):
        return value.model_dump(mode="json")
    if isinstance(value, dict):
        return {str(k): to_data(v) for k, v in value.items()}
    if isinstance(value, (list, tuple)):
        return [to_data(v) for v in value]
    return value


def to_json(value: Any) -> str:
    return json.dumps(to_data(value), indent=2, ensure_ascii=False)


def to_yaml(value: Any) -> str:
    return yaml.safe_dump(to_data(value), sort_keys=False, allow_unicode=True)


def _heading(key: str) -> str:
    return key.replace("_", " ").title()


def _markdown_lines(value: Any, depth: int) -> list[str]:
    lines: list[str] = []
    if isinstance(value, dict):
        for key, item in value.items():
            if isinstance(item, (dict, list)):
                lines += ["", f"{'#' * min(depth, 6)} {_heading(key)}", ""]
                lines += _markdown_lines(item, depth + 1)
            else:
                lines.append(f"- **{_heading(key)}**: {item}")
    elif isinstance(value, list):
        for item in value:
            if isinstance(item, dict):
                lines += _markdown_lines(item, depth)
                lines.append("")
            elif isinstance(item, list):
                lines += _markdown_lines(item, depth)
            else:
                lines.append(f"- {item}")
    else:
        lines.append(str(value))
    return lines


def to_markdown(value: Any, title: str) -> str:
    """Nested mappings become headings, scalars become bullet points."""
    lines = [f"# {title}", ""] + _markdown_lines(to_data(value), 2)
    return "\n".join(lines).rstrip() + "\n"


def export_all(value: Any, base_path: str | Path, filename: str, title: str) -> dict[str, Path]:
    """Write ``<filename>.json``, ``.yaml`` and ``.md`` under *base_path*.

    Returns:
        Format name -> written path.
    """
    directory = ensure_dir(base_path)
    written = {
        "json": directory / f"{filename}.json",
        "yaml": directory / f"{filename}.yaml",
        "markdown": directory / f"{filename}.md",
    }
    written["json"].write_text(to_json(value) + "\n", encoding="utf-8")
    written["yaml"].write_text(to_yaml(value), encoding="utf-8")
    written["markdown"].write_text(to_markdown(value, title), encoding="utf-8")
    return written
