"""Domain catalog: detection, listing and loading of domain profiles.

Every entry lives in its own directory under the catalog root::

    catalog/
        healthcare/
            domain.yaml       (required)
            compliance.yaml   (optional)
            threats.yaml      (optional)

Directories starting with ``_`` or lacking ``domain.yaml`` are ignored.  The
whole catalog is parsed once, when a ``DomainCatalog`` is constructed; entries
that fail to parse are remembered and only surface when requested by name.
"""

from __future__ import annotations

from functools import lru_cache
from pathlib import Path
from typing import Any, Optional

import yaml
from pydantic import ValidationError

from .errors import DomainNotFoundError, MalformedReferenceDataError
from .models import ComplianceData, Domain, DomainThreat, LoadedDomain

BUNDLED_CATALOG = Path(__file__).parent / "catalog"

GENERIC_DOMAIN = "generic"

# Never candidates during auto-detection.
RESERVED_DOMAINS: frozenset[str] = frozenset({GENERIC_DOMAIN, "custom"})


# ---------------------------------------------------------------------------
# YAML helpers
# ---------------------------------------------------------------------------

def _read_yaml(path: Path, domain_name: str) -> dict[str, Any]:
    """Parse one YAML file into a mapping, or raise ``MalformedReferenceDataError``."""
    try:
        data = yaml.safe_load(path.read_text(encoding="utf-8"))
    except (yaml.YAMLError, UnicodeDecodeError) as exc:
        raise MalformedReferenceDataError(domain_name, f"{path.name}: {exc}") from exc

    if data is None:
        return {}
    if not isinstance(data, dict):
        raise MalformedReferenceDataError(
            domain_name, f"{path.name}: expected a mapping, got {type(data).__name__}"
        )
    return data


def _parse_entry(entry_dir: Path) -> LoadedDomain:
    """Parse a catalog entry directory into a ``LoadedDomain``."""
    name = entry_dir.name
    raw_domain = _read_yaml(entry_dir / "domain.yaml", name)
    # The directory name is authoritative; a display name may live in the file.
    raw_domain["display_name"] = raw_domain.get("display_name") or raw_domain.get("name", name)
    raw_domain["name"] = name

    try:
        domain = Domain.model_validate(raw_domain)

        compliance: Optional[ComplianceData] = None
        compliance_file = entry_dir / "compliance.yaml"
        if compliance_file.is_file():
            compliance = ComplianceData.model_validate(_read_yaml(compliance_file, name))

        threats: list[DomainThreat] = []
        threats_file = entry_dir / "threats.yaml"
        if threats_file.is_file():
            raw_threats = _read_yaml(threats_file, name).get("threats") or []
            threats = [DomainThreat.model_validate(t) for t in raw_threats]
    except ValidationError as exc:
        raise MalformedReferenceDataError(name, str(exc)) from exc

    return LoadedDomain(name=name, domain=domain, compliance=compliance, threats=threats)


# ---------------------------------------------------------------------------
# Catalog
# ---------------------------------------------------------------------------

class DomainCatalog:
    """An immutable, in-memory view of a domain catalog directory.

    Attributes:
        root: Catalog root directory.
    """

    def __init__(self, root: Path | str | None = None) -> None:
        self.root = Path(root) if root is not None else BUNDLED_CATALOG
        self._entries: dict[str, LoadedDomain] = {}
        self._errors: dict[str, MalformedReferenceDataError] = {}

        if not self.root.is_dir():
            return

        for entry_dir in sorted(self.root.iterdir()):
            if not entry_dir.is_dir() or entry_dir.name.startswith("_"):
                continue
            if not (entry_dir / "domain.yaml").is_file():
                continue
            try:
                self._entries[entry_dir.name] = _parse_entry(entry_dir)
            except MalformedReferenceDataError as exc:
                self._errors[entry_dir.name] = exc

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def list_domains(self) -> list[str]:
        """Names of every loadable domain, sorted."""
        return sorted(self._entries)

    @property
    def malformed(self) -> dict[str, MalformedReferenceDataError]:
        """Entries skipped because their reference data failed to parse."""
        return dict(self._errors)

    def score(self, description: str) -> dict[str, int]:
        """Keyword match count per candidate domain.

        A keyword counts once when it occurs anywhere in the description
        (case-insensitive substring).  Reserved and malformed entries are not
        candidates.
        """
        text = description.lower()
        scores: dict[str, int] = {}
        for name in self.list_domains():
            if name in RESERVED_DOMAINS:
                continue
            keywords = self._entries[name].domain.keywords
            scores[name] = sum(1 for kw in keywords if kw and kw.lower() in text)
        return scores

    def resolve(self, description: str) -> str:
        """Return the best-matching domain name, or ``"generic"``.

        The first domain reaching the highest score wins; a later domain
        must score strictly higher to replace it.
        """
        best_name = GENERIC_DOMAIN
        best_score = 0
        for name, value in self.score(description).items():
            if value > best_score:
                best_name, best_score = name, value
        return best_name

    def load(self, name: str) -> LoadedDomain:
        """Load a domain by name.

        Raises:
            DomainNotFoundError: No entry with that name (or no ``domain.yaml``).
            MalformedReferenceDataError: The entry exists but fails to parse.
        """
        if name in self._errors:
            raise self._errors[name]
        entry = self._entries.get(name)
        if entry is None:
            raise DomainNotFoundError(name)
        return entry.model_copy(deep=True)

    def load_auto(self, description: str) -> LoadedDomain:
        """Resolve the description to a domain and load it."""
        return self.load(self.resolve(description))

    def __contains__(self, name: object) -> bool:
        return name in self._entries

    def __len__(self) -> int:
        return len(self._entries)


@lru_cache(maxsize=None)
def default_catalog() -> DomainCatalog:
    """The process-wide catalog built from the bundled reference data."""
    return DomainCatalog(BUNDLED_CATALOG)


# ---------------------------------------------------------------------------
# Module-level shortcuts on the bundled catalog
# ---------------------------------------------------------------------------

def list_available_domains() -> list[str]:
    return default_catalog().list_domains()


def resolve_domain(description: str) -> str:
    return default_catalog().resolve(description)


def load_domain(name: str) -> LoadedDomain:
    return default_catalog().load(name)


def load_domain_auto(description: str) -> LoadedDomain:
    return default_catalog().load_auto(description)
