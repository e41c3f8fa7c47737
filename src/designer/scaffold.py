"""Proposed source tree and design patterns.

The default tree follows the layered module breakdown: one file per class,
grouped by architectural role, in the target language's naming convention.
Domains with a well-known reference layout register their own tree in
``DOMAIN_SCAFFOLDS``.
"""

from __future__ import annotations

from collections.abc import Callable
from typing import Optional

from .models import DesignPattern, FileNode, Module, NodeType
from .pseudocode import pseudocode_filename

# Class-name suffix -> directory in the default tree.
ROLE_DIRECTORIES: list[tuple[str, str, str]] = [
    ("Controller", "controllers", "HTTP/API endpoint handlers"),
    ("Service", "services", "Business logic"),
    ("Repository", "repositories", "Data access layer"),
]

ENTRY_POINTS = {
    "python": "main.py",
    "typescript": "index.ts",
    "java": "Main.java",
    "go": "main.go",
    "csharp": "Program.cs",
    "cpp": "main.cpp",
    "rust": "main.rs",
}

MANIFESTS = {
    "python": "pyproject.toml",
    "typescript": "package.json",
    "java": "pom.xml",
    "go": "go.mod",
    "csharp": "App.csproj",
    "cpp": "CMakeLists.txt",
    "rust": "Cargo.toml",
}


def _file(name: str, description: Optional[str] = None) -> FileNode:
    return FileNode(name=name, type=NodeType.FILE, description=description)


def _dir(name: str, children: list[FileNode], description: Optional[str] = None) -> FileNode:
    return FileNode(name=name, type=NodeType.DIRECTORY, description=description, children=children)


# ---------------------------------------------------------------------------
# Trees
# ---------------------------------------------------------------------------

def default_tree(modules: list[Module], language: str) -> list[FileNode]:
    """``src/`` grouped by role, plus tests, manifest and README."""
    buckets: dict[str, list[FileNode]] = {directory: [] for _, directory, _ in ROLE_DIRECTORIES}
    utils: list[FileNode] = []

    for module in modules:
        for class_def in module.classes:
            filename = pseudocode_filename(class_def.name, language)
            for suffix, directory, _ in ROLE_DIRECTORIES:
                if class_def.name.endswith(suffix):
                    buckets[directory].append(_file(filename, class_def.purpose))
                    break
            else:
                utils.append(_file(filename, class_def.purpose))

    src_children = [
        _dir(directory, buckets[directory], description)
        for _, directory, description in ROLE_DIRECTORIES
    ]
    src_children.append(_dir("models", [], "Domain entities and DTOs"))
    src_children.append(_dir("utils", utils, "Shared helpers"))
    src_children.append(_file(ENTRY_POINTS.get(language, "main"), "Application entry point"))

    return [
        _dir("src", src_children),
        _dir("tests", [
            _dir("unit", [], "Unit tests per class"),
            _dir("integration", [], "API and database integration tests"),
            _dir("security", [], "Threat-driven security tests"),
        ]),
        _file(MANIFESTS.get(language, "build.config"), "Dependencies and build settings"),
        _file("README.md", "Project documentation"),
    ]


def secure_comm_tree(modules: list[Module], language: str) -> list[FileNode]:
    """Reference layout of a Signal-Protocol messenger core (Rust)."""
    return [
        _dir("src", [
            _dir("signal", [
                _file("x3dh.rs", "X3DH key agreement"),
                _file("double_ratchet.rs", "Double Ratchet state machine"),
                _file("session_store.rs", "Encrypted session persistence"),
                _file("prekey_manager.rs", "Signed and one-time prekey rotation"),
                _file("cipher.rs", "AEAD message encryption"),
            ], "Signal Protocol implementation"),
            _dir("messaging", [
                _file("queue_manager.rs", "Outgoing message queue"),
                _file("delivery_receipts.rs"),
                _file("typing_indicators.rs"),
            ]),
            _dir("network", [
                _file("websocket_client.rs"),
                _file("api_client.rs"),
            ]),
            _dir("storage", [
                _file("encrypted_db.rs", "SQLCipher-backed local store"),
                _file("migrations.rs"),
            ]),
            _file("main.rs", "Application entry point"),
        ]),
        _dir("tests", [
            _file("security_tests.rs", "Protocol and key-handling tests"),
            _file("e2e_tests.rs"),
        ]),
        _file("Cargo.toml", "Dependencies and build settings"),
        _file("README.md", "Project documentation"),
    ]


DOMAIN_SCAFFOLDS: dict[str, Callable[[list[Module], str], list[FileNode]]] = {
    "secure_comm": secure_comm_tree,
}


def generate_file_structure(
    modules: list[Module], language: str = "python", domain_name: Optional[str] = None
) -> list[FileNode]:
    builder = DOMAIN_SCAFFOLDS.get(domain_name or "", default_tree)
    return builder(modules, language.lower())


def count_files(nodes: list[FileNode]) -> int:
    """Number of file (not directory) nodes in a tree."""
    return sum(
        count_files(node.children) if node.type == NodeType.DIRECTORY else 1
        for node in nodes
    )


# ---------------------------------------------------------------------------
# Design patterns
# ---------------------------------------------------------------------------

DEFAULT_PATTERNS = [
    DesignPattern(
        name="Layered Architecture",
        description="Controllers, services and repositories in separate layers",
        justification="Separation of concerns keeps security controls at well-defined boundaries",
        tradeoffs=["Extra indirection between layers", "Risk of anaemic services"],
    ),
    DesignPattern(
        name="Repository Pattern",
        description="Data access hidden behind repository interfaces",
        justification="Centralises query construction and parameterisation",
        tradeoffs=["More classes per entity", "Leaky abstractions for complex queries"],
    ),
]

DOMAIN_PATTERNS: dict[str, list[DesignPattern]] = {
    "secure_comm": [
        DesignPattern(
            name="Double Ratchet",
            description="Per-message keys derived from a ratcheting chain",
            justification="Forward secrecy and post-compromise security",
            tradeoffs=["Session state must be persisted", "Out-of-order messages need skipped keys"],
        ),
        DesignPattern(
            name="X3DH",
            description="Asynchronous key agreement using published prekeys",
            justification="Sessions can start while the recipient is offline",
            tradeoffs=["Prekey server must be trusted for availability"],
        ),
        DesignPattern(
            name="Sesame",
            description="Multi-device session management",
            justification="Keeps sessions consistent across a user's devices",
            tradeoffs=["Complex device-list synchronisation"],
        ),
        DesignPattern(
            name="Zero-Knowledge Proofs",
            description="Prove group membership without revealing identity",
            justification="Minimises metadata exposed to the server",
            tradeoffs=["Higher CPU cost", "Specialist review required"],
        ),
    ],
}


def generate_design_patterns(domain_name: Optional[str] = None) -> list[DesignPattern]:
    patterns = DOMAIN_PATTERNS.get(domain_name or "", DEFAULT_PATTERNS)
    return [p.model_copy(deep=True) for p in patterns]
