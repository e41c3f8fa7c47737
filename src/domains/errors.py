"""Errors raised by the domain catalog."""

from __future__ import annotations

from enum import Enum


class ErrorKind(str, Enum):
    """What went wrong while resolving or loading a domain."""
    NOT_FOUND = "not_found"
    MALFORMED_REFERENCE_DATA = "malformed_reference_data"


class DomainError(Exception):
    """Base class for catalog errors.

    Attributes:
        kind: The error kind.
        identifier: The offending domain name.
    """

    kind: ErrorKind = ErrorKind.NOT_FOUND

    def __init__(self, identifier: str, message: str) -> None:
        self.identifier = identifier
        super().__init__(f"{self.kind.value}: {identifier}: {message}")


class DomainNotFoundError(DomainError):
    """The name has no catalog entry, or its ``domain.yaml`` is missing."""

    kind = ErrorKind.NOT_FOUND

    def __init__(self, identifier: str, message: str = "no such domain in catalog") -> None:
        super().__init__(identifier, message)


class MalformedReferenceDataError(DomainError):
    """A catalog entry exists but one of its YAML files fails to parse or validate."""

    kind = ErrorKind.MALFORMED_REFERENCE_DATA
