"""Shared utility functions for the SSDLC planner.

Provides id sequences, name/case helpers, keyword matching, JSON output and
Rich-based progress reporting.  Phase generators only use the pure helpers;
the console helpers are reserved for the orchestrator and the CLI.
"""

from __future__ import annotations

import json
import re
from collections.abc import Iterable
from pathlib import Path
from typing import Any

from rich.console import Console
from rich.rule import Rule
from rich.table import Table

console = Console()

# ---------------------------------------------------------------------------
# Id sequences
# ---------------------------------------------------------------------------


class IdSequence:
    """A locally-scoped, monotonically increasing id generator.

    Every generation call creates its own sequence, so two pipeline runs in
    the same process never share counters.

    Examples::

        seq = IdSequence("TC")
        seq.next()  -> "TC-001"
        seq.next()  -> "TC-002"
    """

    def __init__(self, prefix: str, width: int = 3, start: int = 1) -> None:
        self.prefix = prefix
        self.width = width
        self._value = start

    def next(self) -> str:
        """Return the next id and advance the counter."""
        ident = f"{self.prefix}-{self._value:0{self.width}d}"
        self._value += 1
        return ident

    @property
    def issued(self) -> int:
        """How many ids have been handed out so far."""
        return self._value - 1


# ---------------------------------------------------------------------------
# String / name helpers
# ---------------------------------------------------------------------------


def contains_any(text: str, keywords: Iterable[str]) -> bool:
    """Case-insensitive substring test against several keywords."""
    lowered = text.lower()
    return any(keyword.lower() in lowered for keyword in keywords)


def first_words(text: str, count: int = 5, ellipsis: bool = True) -> str:
    """Return the first *count* words of *text*.

    When the text is longer and *ellipsis* is set, ``"..."`` is appended.
    """
    words = text.split()
    head = " ".join(words[:count])
    if ellipsis and len(words) > count:
        head += "..."
    return head


def to_module_name(name: str) -> str:
    """Turn a feature name into a PascalCase module name.

    Examples::

        to_module_name("User Management")               -> "UserManagement"
        to_module_name("Authentication & Authorization") -> "AuthenticationAuthorization"
    """
    words = [w for w in re.split(r"[\s&]+", name) if w]
    return "".join(w[0].upper() + w[1:].lower() for w in words)


def to_snake_case(name: str) -> str:
    """Convert ``PascalCase``/``camelCase`` to ``snake_case``."""
    result = re.sub(r"([a-z0-9])([A-Z])", r"\1_\2", name)
    result = re.sub(r"([A-Z]+)([A-Z][a-z])", r"\1_\2", result)
    return result.replace("-", "_").replace(" ", "_").lower()


def to_kebab_case(name: str) -> str:
    """Convert ``PascalCase``/``camelCase`` to ``kebab-case``."""
    return to_snake_case(name).replace("_", "-")


def sanitize_name(name: str) -> str:
    """Convert an arbitrary name to a safe file/identifier name.

    * Lowercases the input.
    * Replaces spaces and non-alphanumeric characters (except hyphens and
      underscores) with hyphens.
    * Collapses consecutive hyphens and strips leading/trailing hyphens.

    Examples::

        sanitize_name("Database Technology Selection") -> "database-technology-selection"
        sanitize_name("  IDS/IPS (mode)  ") -> "ids-ips-mode"
    """
    result = re.sub(r"[^a-zA-Z0-9_-]", "-", name.strip().lower())
    result = re.sub(r"-+", "-", result)
    return result.strip("-")


def mermaid_id(name: str) -> str:
    """Strip everything Mermaid does not accept in a node identifier."""
    return re.sub(r"[^A-Za-z0-9_]", "", name) or "node"


# ---------------------------------------------------------------------------
# JSON output
# ---------------------------------------------------------------------------


def save_json(data: dict[str, Any] | list[Any], path: str | Path) -> Path:
    """Save data as pretty-printed JSON, creating parent directories."""
    file_path = Path(path)
    file_path.parent.mkdir(parents=True, exist_ok=True)
    content = json.dumps(data, indent=2, ensure_ascii=False, default=str)
    file_path.write_text(content, encoding="utf-8")
    return file_path


def ensure_dir(path: str | Path) -> Path:
    """Create a directory (and parents) if it does not exist."""
    dir_path = Path(path)
    dir_path.mkdir(parents=True, exist_ok=True)
    return dir_path.resolve()


# ---------------------------------------------------------------------------
# Formatting helpers
# ---------------------------------------------------------------------------


def format_duration(seconds: float) -> str:
    """Format a duration in seconds to a human-readable string.

    Examples::

        format_duration(0.042)  -> "42ms"
        format_duration(3.7)    -> "3.7s"
        format_duration(65.2)   -> "1m 5s"
    """
    if seconds < 0:
        return "0ms"
    if seconds < 1:
        return f"{int(round(seconds * 1000))}ms"

    minutes = int(seconds // 60)
    secs = seconds % 60
    if minutes > 0:
        return f"{minutes}m {int(secs)}s"
    return f"{secs:.1f}s"


# ---------------------------------------------------------------------------
# Rich output helpers
# ---------------------------------------------------------------------------


PHASE_NAMES: dict[int, str] = {
    0: "DOMAIN",
    1: "BUSINESS ANALYSIS",
    2: "TECHNICAL DESIGN",
    3: "THREAT MODEL",
    4: "TEST STRATEGY",
    5: "CI/CD",
    6: "PROJECT PLAN",
    7: "ARCHITECTURE DECISIONS",
}

PHASE_COLORS: dict[int, str] = {
    0: "white",
    1: "bright_cyan",
    2: "bright_green",
    3: "bright_red",
    4: "bright_magenta",
    5: "bright_yellow",
    6: "bright_blue",
    7: "cyan",
}


def print_phase_header(phase: int, name: str) -> None:
    """Print a full-width rule with the phase number and name."""
    color = PHASE_COLORS.get(phase, "white")
    console.print()
    console.print(
        Rule(
            f"[bold {color}] Phase {phase}: {name.upper()} [/bold {color}]",
            style=color,
        )
    )


def print_summary_table(data: dict[str, Any], title: str = "Summary") -> None:
    """Print a two-column key/value summary table."""
    table = Table(title=title, show_header=True, header_style="bold cyan")
    table.add_column("Item", style="dim", no_wrap=True)
    table.add_column("Value")

    for key, value in data.items():
        table.add_row(key, str(value))

    console.print(table)
    console.print()


def print_success(message: str) -> None:
    """Print a green success message."""
    console.print(f"[bold green]{message}[/bold green]")


def print_error(message: str) -> None:
    """Print a red error message."""
    console.print(f"[bold red]{message}[/bold red]")
