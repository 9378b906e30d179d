"""Node references handed to the resolver by the content tree."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class NodeRef:
    """A content tree node as seen by the access-resolution core."""

    id: int
    template: str = ""
    hidden: bool = False
    unpublished: bool = False
    parent_id: int | None = None

    def is_admin(self, admin_template: str) -> bool:
        return self.template == admin_template


__all__ = ["NodeRef"]
