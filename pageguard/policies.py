"""Protection rules, localized text and visitor sessions."""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field


@dataclass(frozen=True)
class LocalizedText:
    """Text with optional per-locale variants.

    The default locale is addressed with the empty string.
    """

    default: str = ""
    translations: Mapping[str, str] = field(default_factory=dict)

    def get(self, locale: str = "") -> str:
        if not locale:
            return self.default
        return self.translations.get(locale, "")


def _freeze_roles(roles: Iterable[str] | None) -> frozenset[str] | None:
    if roles is None:
        return None
    if isinstance(roles, str):
        roles = [roles]
    frozen = frozenset(role for role in roles if role)
    return frozen or None


@dataclass(frozen=True)
class ProtectionRule:
    """Protection settings stored for a single protection root."""

    protect_children: bool = False
    roles: frozenset[str] | None = None
    message_override: LocalizedText = field(default_factory=LocalizedText)
    prohibited_message: LocalizedText = field(default_factory=LocalizedText)

    def __post_init__(self) -> None:
        object.__setattr__(self, "roles", _freeze_roles(self.roles))

    def admits(self, roles: Iterable[str]) -> bool:
        if not self.roles:
            return True
        return bool(self.roles & frozenset(roles))


@dataclass(frozen=True)
class Session:
    """Post-authentication view of the visitor."""

    authenticated: bool = False
    roles: frozenset[str] = frozenset()

    def __init__(self, authenticated: bool = False, roles: Iterable[str] = ()) -> None:
        object.__setattr__(self, "authenticated", authenticated)
        object.__setattr__(self, "roles", frozenset(roles))

    @classmethod
    def guest(cls) -> "Session":
        return cls(authenticated=False, roles=("guest",))

    @classmethod
    def member(cls, *roles: str) -> "Session":
        return cls(authenticated=True, roles=roles)


__all__ = ["LocalizedText", "ProtectionRule", "Session"]
