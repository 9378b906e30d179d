"""pageguard package: access resolution for protected content trees."""

from .adapters import JsonFileSettingsStore, MemorySettingsStore, SettingsStore
from .config import GlobalConfig, SiteLayout
from .editor import EditResult, RuleEditor, apply, protect, protect_site, protected_pages
from .exceptions import (
    ConfigurationError,
    PageGuardError,
    StorageConflict,
    StorageError,
    UnknownNode,
    ValidationError,
)
from .guard import GateDecision, PageGuard
from .messages import resolve_label, resolve_message
from .nodes import NodeRef
from .policies import LocalizedText, ProtectionRule, Session
from .providers import AncestorProvider, MemoryTree
from .resolver import Verdict, ancestor_chain, releases_unpublished, resolve
from .snapshot import SettingsSnapshot

__all__ = [
    "PageGuard",
    "GateDecision",
    "resolve",
    "releases_unpublished",
    "ancestor_chain",
    "Verdict",
    "apply",
    "protect",
    "protect_site",
    "protected_pages",
    "RuleEditor",
    "EditResult",
    "resolve_message",
    "resolve_label",
    "NodeRef",
    "ProtectionRule",
    "LocalizedText",
    "Session",
    "GlobalConfig",
    "SiteLayout",
    "SettingsSnapshot",
    "SettingsStore",
    "MemorySettingsStore",
    "JsonFileSettingsStore",
    "AncestorProvider",
    "MemoryTree",
    "PageGuardError",
    "ConfigurationError",
    "UnknownNode",
    "ValidationError",
    "StorageError",
    "StorageConflict",
]
