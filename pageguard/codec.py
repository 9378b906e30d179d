"""Conversion between the stored settings document and typed values.

The stored document keeps the flat locale convention: every localized field
``name`` is stored as ``name`` for the default locale and ``name__<locale>``
for each other locale. Nothing outside this module sees those keys.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from .config import LOCALIZED_FIELDS, TOGGLE_FIELDS, GlobalConfig
from .exceptions import ConfigurationError
from .policies import LocalizedText, ProtectionRule
from .snapshot import SettingsSnapshot

LOCALE_SEPARATOR = "__"
RULES_KEY = "protectedPages"
VERSION_KEY = "_version"


def localized_key(name: str, locale: str) -> str:
    return f"{name}{LOCALE_SEPARATOR}{locale}" if locale else name


def _text(value: Any, key: str) -> str:
    if value is None:
        return ""
    if not isinstance(value, str):
        raise ConfigurationError(f"{key} must be text, got {type(value).__name__}")
    return value


def parse_flag(value: Any, key: str) -> bool:
    """Read a stored on/off flag; anything unrecognised is a configuration error."""
    if value is None or value == "":
        return False
    if isinstance(value, bool):
        return value
    if isinstance(value, int) and value in (0, 1):
        return bool(value)
    if isinstance(value, str) and value.strip().lower() in ("0", "1", "false", "true"):
        return value.strip().lower() in ("1", "true")
    raise ConfigurationError(f"{key} must be a boolean flag, got {value!r}")


def read_localized(record: Mapping[str, Any], name: str, default: str = "") -> LocalizedText:
    prefix = name + LOCALE_SEPARATOR
    translations: dict[str, str] = {}
    for key, value in record.items():
        if key.startswith(prefix):
            translations[key[len(prefix):]] = _text(value, key)
    text = _text(record[name], name) if name in record else default
    return LocalizedText(default=text, translations=translations)


def write_localized(record: dict[str, Any], name: str, text: LocalizedText) -> None:
    record[name] = text.default
    for locale, value in sorted(text.translations.items()):
        record[localized_key(name, locale)] = value


def rule_from_record(record: Any, node_id: Any = None) -> ProtectionRule:
    if not isinstance(record, Mapping):
        raise ConfigurationError(f"Rule for node {node_id} must be a mapping")
    roles = record.get("roles")
    if roles is not None:
        if not isinstance(roles, (list, tuple)) or not all(isinstance(role, str) for role in roles):
            raise ConfigurationError(f"Roles for node {node_id} must be a list of names")
    return ProtectionRule(
        protect_children=parse_flag(record.get("children"), "children"),
        roles=roles,
        message_override=read_localized(record, "message_override"),
        prohibited_message=read_localized(record, "prohibited_message"),
    )


def rule_to_record(rule: ProtectionRule) -> dict[str, Any]:
    record: dict[str, Any] = {
        "children": 1 if rule.protect_children else 0,
        "roles": sorted(rule.roles) if rule.roles else None,
    }
    write_localized(record, "message_override", rule.message_override)
    write_localized(record, "prohibited_message", rule.prohibited_message)
    return record


def config_from_document(document: Mapping[str, Any]) -> GlobalConfig:
    defaults = GlobalConfig()
    values: dict[str, Any] = {}
    for attr, key in TOGGLE_FIELDS.items():
        values[attr] = parse_flag(document.get(key), key)
    for attr, key in LOCALIZED_FIELDS.items():
        values[attr] = read_localized(document, key, getattr(defaults, attr).default)
    values["login_template"] = _text(document.get("login_template"), "login_template")
    locales = document.get("locales") or ()
    if not isinstance(locales, (list, tuple)) or not all(isinstance(item, (str, int)) for item in locales):
        raise ConfigurationError("locales must be a list of locale ids")
    values["locales"] = tuple(str(item) for item in locales)
    return GlobalConfig(**values)


def config_to_document(config: GlobalConfig) -> dict[str, Any]:
    document: dict[str, Any] = {}
    for attr, key in TOGGLE_FIELDS.items():
        document[key] = 1 if getattr(config, attr) else 0
    for attr, key in LOCALIZED_FIELDS.items():
        write_localized(document, key, getattr(config, attr))
    document["login_template"] = config.login_template
    document["locales"] = list(config.locales)
    return document


def snapshot_from_document(document: Any) -> SettingsSnapshot:
    """Parse a stored settings document, raising ``ConfigurationError`` on damage."""
    if not isinstance(document, Mapping):
        raise ConfigurationError("Settings document must be a mapping")
    raw_rules = document.get(RULES_KEY) or {}
    if not isinstance(raw_rules, Mapping):
        raise ConfigurationError(f"{RULES_KEY} must be a mapping")
    rules: dict[int, ProtectionRule] = {}
    for key, record in raw_rules.items():
        try:
            node_id = int(key)
        except (TypeError, ValueError) as exc:
            raise ConfigurationError(f"Invalid node id {key!r} in {RULES_KEY}") from exc
        rules[node_id] = rule_from_record(record, node_id)
    version = document.get(VERSION_KEY, 0)
    if not isinstance(version, int):
        raise ConfigurationError(f"{VERSION_KEY} must be an integer")
    return SettingsSnapshot(rules=rules, config=config_from_document(document), version=version)


def snapshot_to_document(snapshot: SettingsSnapshot) -> dict[str, Any]:
    document = config_to_document(snapshot.config)
    document[RULES_KEY] = {
        str(node_id): rule_to_record(rule) for node_id, rule in sorted(snapshot.rules.items())
    }
    document[VERSION_KEY] = snapshot.version
    return document


__all__ = [
    "localized_key",
    "parse_flag",
    "read_localized",
    "write_localized",
    "rule_from_record",
    "rule_to_record",
    "config_from_document",
    "config_to_document",
    "snapshot_from_document",
    "snapshot_to_document",
]
