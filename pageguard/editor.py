"""Merging editor submissions into stored protection rules."""

from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping, Sequence
from dataclasses import dataclass, field
from typing import Any

from .adapters import SettingsStore
from .codec import localized_key
from .config import DEFAULT_PROHIBITED_MESSAGE, GlobalConfig, SiteLayout
from .exceptions import ValidationError
from .nodes import NodeRef
from .policies import LocalizedText, ProtectionRule

logger = logging.getLogger(__name__)

PROTECT_OPTIONS: dict[str, Any] = {
    "pid": None,
    "page_protected": False,
    "children": False,
    "message_override": "",
    "roles": None,
    "prohibited_message": DEFAULT_PROHIBITED_MESSAGE,
}

_TRUTHY = {"1", "on", "true", "yes", "checked"}


def _checked(value: Any) -> bool:
    if isinstance(value, str):
        return value.strip().lower() in _TRUTHY
    return bool(value)


def _text(value: Any) -> str:
    return "" if value is None else str(value)


def default_options(config: GlobalConfig) -> dict[str, Any]:
    """Option schema with one localized override pair per configured locale."""
    options = dict(PROTECT_OPTIONS)
    for locale in config.locales:
        options[localized_key("message_override", locale)] = ""
        options[localized_key("prohibited_message", locale)] = ""
    return options


def merge_options(
    node_id: int, submitted: Mapping[str, Any], config: GlobalConfig
) -> dict[str, Any]:
    options = default_options(config)
    options.update(submitted)
    options["pid"] = node_id
    return options


def _localized(options: Mapping[str, Any], name: str, locales: Iterable[str]) -> LocalizedText:
    translations = {locale: _text(options.get(localized_key(name, locale))) for locale in locales}
    return LocalizedText(default=_text(options.get(name)), translations=translations)


def build_rule(options: Mapping[str, Any], config: GlobalConfig) -> ProtectionRule | None:
    """Build a fresh rule from merged options alone, or ``None`` when unprotected."""
    if not _checked(options.get("page_protected")):
        return None
    return ProtectionRule(
        protect_children=_checked(options.get("children")),
        roles=options.get("roles"),
        message_override=_localized(options, "message_override", config.locales),
        prohibited_message=_localized(options, "prohibited_message", config.locales),
    )


def apply(
    node_id: int,
    submitted: Mapping[str, Any],
    rules: Mapping[int, ProtectionRule],
    config: GlobalConfig,
) -> tuple[ProtectionRule | None, bool]:
    """Merge an editor submission for ``node_id`` and report whether it changed.

    The new rule never inherits fields from the stored one. ``changed`` is
    true when protection is added, removed, or its content differs.
    """
    rule = build_rule(merge_options(node_id, submitted, config), config)
    return rule, rule != rules.get(node_id)


def protect(node_id: int, options: Mapping[str, Any], config: GlobalConfig) -> ProtectionRule | None:
    """Programmatic protection; an empty message falls back to the site message."""
    merged = merge_options(node_id, {"page_protected": True, **options}, config)
    if not _text(merged["message_override"]):
        merged["message_override"] = config.message.default
    return build_rule(merged, config)


def protect_site(
    rules: Mapping[int, ProtectionRule],
    config: GlobalConfig,
    root_id: int = 1,
) -> tuple[ProtectionRule | None, bool]:
    existing = rules.get(root_id)
    if existing is not None and existing.protect_children:
        return existing, False
    prohibited = config.prohibited_message.default if config.login_template else ""
    rule = ProtectionRule(
        protect_children=True,
        roles=None,
        message_override=LocalizedText(config.message.default),
        prohibited_message=LocalizedText(prohibited),
    )
    return rule, True


def validate_roles(rule: ProtectionRule | None, known_roles: Iterable[str] | None) -> None:
    if rule is None or not rule.roles or known_roles is None:
        return
    unknown = rule.roles - frozenset(known_roles)
    if unknown:
        raise ValidationError(frozenset(unknown))


@dataclass
class EditResult:
    node_id: int
    rule: ProtectionRule | None
    changed: bool
    skipped: bool = False
    warnings: list[str] = field(default_factory=list)


@dataclass(frozen=True)
class ProtectedPageRow:
    node_id: int
    children: bool
    roles: tuple[str, ...]

    def cells(self) -> tuple[str, str, str]:
        return (
            str(self.node_id),
            "Yes" if self.children else "No",
            ", ".join(self.roles) if self.roles else "ALL",
        )


def protected_pages(rules: Mapping[int, ProtectionRule]) -> list[ProtectedPageRow]:
    return [
        ProtectedPageRow(
            node_id=node_id,
            children=rule.protect_children,
            roles=tuple(sorted(rule.roles or ())),
        )
        for node_id, rule in sorted(rules.items())
    ]


class RuleEditor:
    """Apply editor saves to a settings store, writing only on change."""

    def __init__(
        self,
        store: SettingsStore,
        *,
        site: SiteLayout | None = None,
        known_roles: Iterable[str] | None = None,
    ) -> None:
        self.store = store
        self.site = site or SiteLayout()
        self.known_roles = frozenset(known_roles) if known_roles is not None else None

    def _outside_content(self, node_id: int, ancestors: Sequence[NodeRef | None]) -> bool:
        excluded = {self.site.admin_root_id, self.site.trash_id}
        if node_id in excluded:
            return True
        return any(parent is not None and parent.id in excluded for parent in ancestors)

    def _commit(self, node_id: int, rule: ProtectionRule | None, changed: bool) -> EditResult:
        result = EditResult(node_id=node_id, rule=rule, changed=changed)
        try:
            validate_roles(rule, self.known_roles)
        except ValidationError as exc:
            logger.warning("Protection for node %d: %s", node_id, exc)
            result.warnings.append(str(exc))
        if not changed:
            logger.debug("Protection for node %d unchanged; skipping save", node_id)
            return result
        self.store.put_rule(node_id, rule)
        if rule is None:
            logger.info("Removed protection from node %d", node_id)
        else:
            logger.info("Saved protection for node %d", node_id)
        return result

    def submit(
        self,
        node_id: int,
        submitted: Mapping[str, Any],
        ancestors: Sequence[NodeRef | None] = (),
    ) -> EditResult:
        """Handle the protection fields of an edit form save."""
        if self._outside_content(node_id, ancestors):
            return EditResult(node_id=node_id, rule=None, changed=False, skipped=True)
        snapshot = self.store.load()
        rule, changed = apply(node_id, submitted, snapshot.rules, snapshot.config)
        return self._commit(node_id, rule, changed)

    def protect(self, node_id: int, options: Mapping[str, Any] | None = None) -> EditResult:
        snapshot = self.store.load()
        rule = protect(node_id, options or {}, snapshot.config)
        return self._commit(node_id, rule, rule != snapshot.rules.get(node_id))

    def protect_site(self) -> EditResult:
        snapshot = self.store.load()
        rule, changed = protect_site(snapshot.rules, snapshot.config, self.site.root_id)
        return self._commit(self.site.root_id, rule, changed)


__all__ = [
    "PROTECT_OPTIONS",
    "default_options",
    "merge_options",
    "build_rule",
    "apply",
    "protect",
    "protect_site",
    "validate_roles",
    "EditResult",
    "ProtectedPageRow",
    "protected_pages",
    "RuleEditor",
]
