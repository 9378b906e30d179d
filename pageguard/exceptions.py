"""Exception hierarchy for pageguard."""

from __future__ import annotations


class PageGuardError(Exception):
    """Base class for all pageguard errors."""


class ConfigurationError(PageGuardError):
    """Stored settings or config values are malformed."""


class UnknownNode(PageGuardError):
    """The ancestor provider cannot resolve a node id."""

    def __init__(self, node_id: int) -> None:
        super().__init__(f"Unknown node {node_id}")
        self.node_id = node_id


class ValidationError(PageGuardError):
    """Submitted rule options reference unknown role names."""

    def __init__(self, unknown_roles: frozenset[str]) -> None:
        names = ", ".join(sorted(unknown_roles))
        super().__init__(f"Unknown roles: {names}")
        self.unknown_roles = unknown_roles


class StorageError(PageGuardError):
    """The settings store could not be read or written."""


class StorageConflict(StorageError):
    """A snapshot was saved over a newer stored version."""


__all__ = [
    "PageGuardError",
    "ConfigurationError",
    "UnknownNode",
    "ValidationError",
    "StorageError",
    "StorageConflict",
]
