from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Mapping

from ..core.enums import Capability, Role

DASHBOARD = "dashboard"

_ADMIN_EXTRAS = frozenset({Capability.MANAGEMENT, Capability.SETTINGS})


@dataclass(frozen=True)
class UserPermissions:
    """Per-user section flags as stored on the user profile."""

    production: bool = False
    finance: bool = False
    inventory: bool = False
    employees: bool = False
    analytics: bool = False
    ai: bool = False

    @classmethod
    def from_row(cls, row: Mapping[str, Any] | None) -> "UserPermissions":
        row = row or {}
        return cls(**{name: bool(row.get(name)) for name in cls.__dataclass_fields__})

    def granted(self) -> frozenset[Capability]:
        return frozenset(Capability(name) for name in self.__dataclass_fields__ if getattr(self, name))


def parse_role(raw: Any) -> Role:
    try:
        return Role(str(raw or "").upper())
    except ValueError:
        return Role.OPERATIONAL


def visible_sections(role: Role, permissions: UserPermissions | None = None) -> frozenset[Capability]:
    """Sections the menu shows; the dashboard is always reachable and is not listed."""
    if role == Role.MASTER:
        return frozenset(Capability)
    granted = (permissions or UserPermissions()).granted()
    if role == Role.ADMIN:
        return granted | _ADMIN_EXTRAS
    return granted


def is_global_role(role: Role) -> bool:
    return role == Role.MASTER
