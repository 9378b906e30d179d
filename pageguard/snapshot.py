"""Consistent view of the stored rules and config."""

from __future__ import annotations

from dataclasses import dataclass, field, replace

from .config import GlobalConfig
from .policies import ProtectionRule


@dataclass(frozen=True)
class SettingsSnapshot:
    """Rules and config loaded together in a single read."""

    rules: dict[int, ProtectionRule] = field(default_factory=dict)
    config: GlobalConfig = field(default_factory=GlobalConfig)
    version: int = 0

    def with_rule(self, node_id: int, rule: ProtectionRule | None) -> "SettingsSnapshot":
        rules = dict(self.rules)
        if rule is None:
            rules.pop(node_id, None)
        else:
            rules[node_id] = rule
        return replace(self, rules=rules)


__all__ = ["SettingsSnapshot"]
