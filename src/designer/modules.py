"""Module breakdown: one module per feature plus the shared modules.

Each feature normally yields a Service / Repository / Controller triad with
a same-named service interface.  Domains with their own building blocks
register a specialised builder in ``SPECIALISED_MODULE_BUILDERS`` (and,
optionally, a security-module builder in ``SECURITY_MODULE_BUILDERS``).
"""

from __future__ import annotations

from collections.abc import Callable
from typing import Optional

from src.utils import contains_any, to_module_name

from .models import (
    ClassDefinition,
    Feature,
    InterfaceDefinition,
    MethodSignature,
    Module,
    ModuleType,
    PropertyDefinition,
)

COMMON_MODULE = "CommonModule"
SECURITY_MODULE = "SecurityModule"
DATABASE_MODULE = "DatabaseModule"

DATA_KEYWORDS = ("data", "record", "user")
SECURITY_KEYWORDS = ("auth", "security")


def _method(name: str, params: str, returns: str, description: str) -> MethodSignature:
    return MethodSignature(name=name, params=params, returns=returns, description=description)


def _prop(name: str, type_: str) -> PropertyDefinition:
    return PropertyDefinition(name=name, type=type_)


def module_type_for(name: str) -> ModuleType:
    """Infer the module's role from keywords in its feature name."""
    if contains_any(name, ("util", "common", "helper")):
        return ModuleType.UTILITY
    if contains_any(name, ("data", "repository")):
        return ModuleType.REPOSITORY
    if contains_any(name, ("controller", "api")):
        return ModuleType.CONTROLLER
    return ModuleType.SERVICE


# ---------------------------------------------------------------------------
# Generic triad
# ---------------------------------------------------------------------------

CRUD_METHODS = [
    ("create", "data: CreateDto", "Promise<Entity>"),
    ("findById", "id: string", "Promise<Entity | null>"),
    ("update", "id: string, data: UpdateDto", "Promise<Entity>"),
    ("delete", "id: string", "Promise<void>"),
]


def _service_class(module_name: str, feature: Feature) -> ClassDefinition:
    descriptions = [
        "Create new record with validation",
        "Find record by ID",
        "Update existing record",
        "Soft delete record",
    ]
    return ClassDefinition(
        name=f"{module_name}Service",
        purpose=f"Business logic for {feature.name}",
        methods=[_method(n, p, r, d) for (n, p, r), d in zip(CRUD_METHODS, descriptions)],
        properties=[_prop("repository", f"{module_name}Repository"), _prop("logger", "Logger")],
    )


def _repository_class(module_name: str) -> ClassDefinition:
    return ClassDefinition(
        name=f"{module_name}Repository",
        purpose=f"Data access layer for {module_name}",
        methods=[
            _method("save", "entity: Entity", "Promise<Entity>", "Persist entity to database"),
            _method("findOne", "query: QueryOptions", "Promise<Entity | null>",
                    "Find single matching entity"),
            _method("findMany", "query: QueryOptions, pagination: PaginationOptions",
                    "Promise<Entity[]>", "Find multiple entities with pagination"),
        ],
        properties=[_prop("db", "DatabaseConnection")],
    )


def _controller_class(module_name: str) -> ClassDefinition:
    handlers = [
        ("handleCreate", "POST endpoint handler"),
        ("handleGet", "GET endpoint handler"),
        ("handleUpdate", "PUT/PATCH endpoint handler"),
        ("handleDelete", "DELETE endpoint handler"),
    ]
    return ClassDefinition(
        name=f"{module_name}Controller",
        purpose=f"HTTP/API endpoint handler for {module_name}",
        methods=[_method(n, "req: Request, res: Response", "Promise<void>", d) for n, d in handlers],
        properties=[_prop("service", f"{module_name}Service"), _prop("validator", "InputValidator")],
    )


def _service_interface(module_name: str) -> InterfaceDefinition:
    verbs = ["Create", "Find", "Update", "Delete"]
    return InterfaceDefinition(
        name=f"I{module_name}Service",
        purpose=f"Interface contract for {module_name} service",
        methods=[_method(n, p, r, f"{v} operation") for (n, p, r), v in zip(CRUD_METHODS, verbs)],
    )


def _standard_module(module_name: str, feature: Feature) -> Module:
    module = Module(
        name=module_name,
        type=module_type_for(feature.name),
        dependencies=[COMMON_MODULE],
    )
    module.classes.append(_service_class(module_name, feature))

    if contains_any(feature.name, DATA_KEYWORDS) or contains_any(module_name, DATA_KEYWORDS):
        module.classes.append(_repository_class(module_name))
        module.dependencies.append(DATABASE_MODULE)

    module.classes.append(_controller_class(module_name))
    module.interfaces.append(_service_interface(module_name))

    if contains_any(feature.name, SECURITY_KEYWORDS):
        module.dependencies.append(SECURITY_MODULE)
    return module


# ---------------------------------------------------------------------------
# Secure communication specialisation
# ---------------------------------------------------------------------------

SECURE_COMM_KEYWORDS = ("signal", "e2ee", "encrypt", "session", "secure communication")
SECURE_COMM_MODULES = ("CoreBusinessLogic", "AuthenticationAuthorization")


def _secure_comm_module(module_name: str, feature: Feature) -> Optional[Module]:
    """Key-exchange and ratchet services for session/encryption features."""
    if not (
        contains_any(feature.name, SECURE_COMM_KEYWORDS)
        or contains_any(module_name, SECURE_COMM_KEYWORDS)
        or module_name in SECURE_COMM_MODULES
    ):
        return None

    if "Auth" in module_name or "Identity" in module_name:
        service = ClassDefinition(
            name=f"{module_name}Service",
            purpose="Manages user identity keys and authentication (X3DH)",
            methods=[
                _method("registerIdentity", "identityKey: PublicKey, signedPreKey: SignedPreKey",
                        "Promise<void>", "Publish initial key bundle"),
                _method("verifySession", "sessionId: string, signature: string",
                        "Promise<boolean>", "Verify user session signature"),
                _method("rotatePreKeys", "count: number", "Promise<void>",
                        "Generate and upload new one-time prekeys"),
            ],
            properties=[_prop("keyStore", "KeyStore")],
        )
    else:
        service = ClassDefinition(
            name=f"{module_name}Service",
            purpose="Secure E2EE messaging logic using Signal Protocol",
            methods=[
                _method("initiateSession", "recipientId: string", "Promise<SessionId>",
                        "Perform X3DH handshake"),
                _method("encryptMessage", "sessionId: string, plaintext: string",
                        "Promise<EncryptedMessage>", "Double Ratchet encryption"),
                _method("decryptMessage", "sessionId: string, ciphertext: EncryptedMessage",
                        "Promise<string>", "Double Ratchet decryption"),
                _method("handleRatchet", "header: RatchetHeader", "Promise<void>",
                        "Advance chain keys"),
            ],
            properties=[_prop("sessionStore", "SessionStore"), _prop("signalContext", "SignalContext")],
        )

    controller = ClassDefinition(
        name=f"{module_name}Controller",
        purpose="Secure API endpoints",
        methods=[
            _method("handleHandshake", "req: Request", "Promise<void>", "Handle X3DH bundle request"),
            _method("handleMessage", "req: Request", "Promise<void>",
                    "Handle encrypted message payload"),
        ],
        properties=[_prop("service", f"{module_name}Service")],
    )

    return Module(
        name=module_name,
        type=ModuleType.SERVICE,
        classes=[service, controller],
        dependencies=[COMMON_MODULE, SECURITY_MODULE, "SignalProtocolLib"],
    )


def _secure_comm_security_module() -> Module:
    return Module(
        name=SECURITY_MODULE,
        type=ModuleType.SERVICE,
        classes=[
            ClassDefinition(
                name="SignalProtocolService",
                purpose="Core Signal Protocol implementation wrapper",
                methods=[
                    _method("x3dh_handshake", "peer_bundle: PreKeyBundle", "Result<Session>",
                            "Perform X3DH Agreement"),
                    _method("double_ratchet_encrypt", "state: SessionState, msg: bytes",
                            "Result<Ciphertext>", "Encrypt with ratchet advancement"),
                    _method("double_ratchet_decrypt", "state: SessionState, msg: Ciphertext",
                            "Result<bytes>", "Decrypt with ratchet advancement"),
                ],
            ),
            ClassDefinition(
                name="KeyTransferService",
                purpose="Secure file key exchange",
                methods=[
                    _method("generate_ephemeral_key", "", "Key", "Generate file-specific key"),
                    _method("encrypt_key_for_recipient", "file_key: Key, recipient_pub: PublicKey",
                            "EncryptedKey", "Wrap key for recipient"),
                ],
            ),
        ],
        dependencies=["libsodium", "signal-protocol-rs"],
    )


# Domain name -> builder returning a replacement module, or None to fall through.
SPECIALISED_MODULE_BUILDERS: dict[str, Callable[[str, Feature], Optional[Module]]] = {
    "secure_comm": _secure_comm_module,
}

SECURITY_MODULE_BUILDERS: dict[str, Callable[[], Module]] = {
    "secure_comm": _secure_comm_security_module,
}


# ---------------------------------------------------------------------------
# Shared modules
# ---------------------------------------------------------------------------

def common_module() -> Module:
    """Logger and input validator shared by every module."""
    return Module(
        name=COMMON_MODULE,
        type=ModuleType.UTILITY,
        classes=[
            ClassDefinition(
                name="Logger",
                purpose="Centralized logging with audit trail support",
                methods=[
                    _method("info", "message: string, context?: object", "void", "Info level log"),
                    _method("error", "message: string, error?: Error", "void", "Error level log"),
                    _method("audit", "action: string, userId: string, details: object", "void",
                            "Audit log for compliance"),
                ],
            ),
            ClassDefinition(
                name="InputValidator",
                purpose="Input validation and sanitization",
                methods=[
                    _method("validate", "data: unknown, schema: Schema", "ValidationResult",
                            "Validate input against schema"),
                    _method("sanitize", "input: string", "string", "Sanitize user input"),
                ],
            ),
        ],
    )


def security_module(domain_name: Optional[str] = None) -> Module:
    """Authentication and RBAC services, or the domain's specialised variant."""
    builder = SECURITY_MODULE_BUILDERS.get(domain_name or "")
    if builder is not None:
        return builder()

    return Module(
        name=SECURITY_MODULE,
        type=ModuleType.SERVICE,
        classes=[
            ClassDefinition(
                name="AuthService",
                purpose="Authentication handling",
                methods=[
                    _method("authenticate", "credentials: Credentials", "Promise<AuthToken>",
                            "Verify user credentials"),
                    _method("validateToken", "token: string", "Promise<TokenPayload>",
                            "Validate JWT token"),
                    _method("refreshToken", "refreshToken: string", "Promise<AuthToken>",
                            "Refresh access token"),
                ],
                properties=[_prop("tokenManager", "TokenManager"), _prop("hasher", "PasswordHasher")],
            ),
            ClassDefinition(
                name="AuthorizationService",
                purpose="Role-based access control",
                methods=[
                    _method("checkPermission", "userId: string, resource: string, action: string",
                            "Promise<boolean>", "Check if user has permission"),
                    _method("getUserRoles", "userId: string", "Promise<Role[]>", "Get user roles"),
                ],
            ),
        ],
        interfaces=[
            InterfaceDefinition(
                name="IAuthProvider",
                purpose="Authentication provider interface",
                methods=[_method("authenticate", "credentials: Credentials", "Promise<AuthResult>",
                                 "Authenticate user")],
            ),
        ],
        dependencies=[COMMON_MODULE, DATABASE_MODULE],
    )


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------

def module_for_feature(feature: Feature, domain_name: Optional[str] = None) -> Module:
    """Build the module for one feature, consulting the domain's specialisation first."""
    module_name = to_module_name(feature.name)
    builder = SPECIALISED_MODULE_BUILDERS.get(domain_name or "")
    if builder is not None:
        specialised = builder(module_name, feature)
        if specialised is not None:
            return specialised
    return _standard_module(module_name, feature)


def generate_module_breakdown(
    features: list[Feature], domain_name: Optional[str] = None
) -> list[Module]:
    """One module per feature, then ``CommonModule`` and ``SecurityModule`` once each."""
    modules = [module_for_feature(feature, domain_name) for feature in features]
    modules.append(common_module())
    modules.append(security_module(domain_name))
    return modules
