"""Permission catalog: the vocabulary the validator understands.

Provides:
- ``Permission``: immutable catalog entry.
- ``PermissionCatalog``: read-only lookup keyed by permission code.
- ``DEFAULT_PERMISSIONS`` / ``DEFAULT_PERMISSION_CATALOG``: the console's built-in set.

Catalogs are passed into the validator and the engine rather than read from
a global, so deployments can extend or replace the built-in set.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, Iterator, Mapping

from ..exceptions import CatalogError, UnknownPermissionError
from .constants import PermissionAction, Permissions, is_wildcard


@dataclass(frozen=True)
class Permission:
    """A named capability in the catalog.

    Attributes:
        code: Unique code, ``resource.action``, ``resource.*`` or ``*``.
        name: Display name for permission pickers.
        description: Longer explanation for administrators.
        resource: Resource part of the code (``"tanks"``).
        action: What the permission allows on the resource.
    """

    code: str
    name: str
    description: str
    resource: str
    action: PermissionAction


class PermissionCatalog:
    """Read-only permission table keyed by code.

    Args:
        entries: Catalog entries. Codes must be unique and non-empty.

    Raises:
        CatalogError: On duplicate or empty codes.

    Example::

        catalog = PermissionCatalog(DEFAULT_PERMISSIONS)
        "tanks.read" in catalog            # True
        catalog.is_acceptable("coupons.*")  # True (wildcard)
        catalog.is_acceptable("coupons.x")  # False
    """

    __slots__ = ("_entries",)

    def __init__(self, entries: Iterable[Permission] = ()) -> None:
        table: dict[str, Permission] = {}
        for entry in entries:
            if not entry.code:
                raise CatalogError("Permission code must not be empty", resource=entry.resource)
            if entry.code in table:
                raise CatalogError(f"Duplicate permission code '{entry.code}'", permission=entry.code)
            table[entry.code] = entry
        self._entries: Mapping[str, Permission] = table

    def get(self, code: str) -> Permission | None:
        return self._entries.get(code)

    def require(self, code: str) -> Permission:
        """Strict lookup.

        Raises:
            UnknownPermissionError: If ``code`` is not in the catalog.
        """
        entry = self._entries.get(code)
        if entry is None:
            raise UnknownPermissionError(f"Unknown permission '{code}'", permission=code)
        return entry

    def codes(self) -> tuple[str, ...]:
        return tuple(self._entries)

    def by_resource(self) -> dict[str, tuple[Permission, ...]]:
        """Group entries by resource, preserving catalog order."""
        grouped: dict[str, list[Permission]] = {}
        for entry in self._entries.values():
            grouped.setdefault(entry.resource, []).append(entry)
        return {resource: tuple(entries) for resource, entries in grouped.items()}

    def is_acceptable(self, code: str) -> bool:
        """Whether a role may reference ``code``.

        Accepted: catalog codes, wildcard forms (``*`` or anything ending in
        ``*``) and ``system.admin``.
        """
        return code in self._entries or is_wildcard(code) or code == Permissions.SYSTEM_ADMIN

    def extended(self, entries: Iterable[Permission]) -> PermissionCatalog:
        """Return a new catalog with ``entries`` appended."""
        return PermissionCatalog([*self._entries.values(), *entries])

    def __contains__(self, code: object) -> bool:
        return code in self._entries

    def __iter__(self) -> Iterator[Permission]:
        return iter(self._entries.values())

    def __len__(self) -> int:
        return len(self._entries)

    def __repr__(self) -> str:
        return f"PermissionCatalog(codes={len(self._entries)})"


def _entry(code: str, name: str, description: str, action: PermissionAction) -> Permission:
    resource = code.split(".", 1)[0]
    return Permission(code=code, name=name, description=description, resource=resource, action=action)


DEFAULT_PERMISSIONS: tuple[Permission, ...] = (
    # Users
    _entry(Permissions.USERS_CREATE, "Create users", "Create new users", PermissionAction.CREATE),
    _entry(Permissions.USERS_READ, "View users", "View the user list and profiles", PermissionAction.READ),
    _entry(Permissions.USERS_UPDATE, "Edit users", "Edit user data and role assignments", PermissionAction.UPDATE),
    _entry(Permissions.USERS_DELETE, "Delete users", "Remove users from the system", PermissionAction.DELETE),
    # Roles
    _entry(Permissions.ROLES_CREATE, "Create roles", "Create new roles", PermissionAction.CREATE),
    _entry(Permissions.ROLES_READ, "View roles", "View roles and their permissions", PermissionAction.READ),
    _entry(Permissions.ROLES_UPDATE, "Edit roles", "Change roles and their permissions", PermissionAction.UPDATE),
    _entry(Permissions.ROLES_DELETE, "Delete roles", "Delete non-system roles", PermissionAction.DELETE),
    # Networks
    _entry(Permissions.NETWORKS_CREATE, "Create networks", "Create trading networks", PermissionAction.CREATE),
    _entry(Permissions.NETWORKS_READ, "View networks", "View trading networks", PermissionAction.READ),
    _entry(Permissions.NETWORKS_UPDATE, "Edit networks", "Edit trading network settings", PermissionAction.UPDATE),
    _entry(Permissions.NETWORKS_DELETE, "Delete networks", "Delete trading networks", PermissionAction.DELETE),
    # Trading points
    _entry(
        Permissions.TRADING_POINTS_ALL,
        "Full trading point access",
        "All operations on trading points",
        PermissionAction.ALL,
    ),
    _entry(Permissions.TRADING_POINTS_READ, "View trading points", "View trading point cards", PermissionAction.READ),
    _entry(
        Permissions.TRADING_POINTS_UPDATE,
        "Edit trading points",
        "Edit trading point settings and equipment",
        PermissionAction.UPDATE,
    ),
    # Fuel operations
    _entry(Permissions.OPERATIONS_CREATE, "Create operations", "Record fuel sale operations", PermissionAction.CREATE),
    _entry(Permissions.OPERATIONS_READ, "View operations", "View operations and transactions", PermissionAction.READ),
    _entry(Permissions.OPERATIONS_UPDATE, "Edit operations", "Change operation status", PermissionAction.UPDATE),
    # Tanks
    _entry(Permissions.TANKS_READ, "Monitor tanks", "View tank state and levels", PermissionAction.READ),
    _entry(Permissions.TANKS_UPDATE, "Manage tanks", "Change tank parameters", PermissionAction.UPDATE),
    # Prices
    _entry(Permissions.PRICES_READ, "View prices", "View current fuel prices", PermissionAction.READ),
    _entry(Permissions.PRICES_UPDATE, "Change prices", "Set and change fuel prices", PermissionAction.UPDATE),
    # Reports
    _entry(Permissions.REPORTS_READ, "View reports", "Access reports and analytics", PermissionAction.READ),
    _entry(Permissions.REPORTS_EXPORT, "Export reports", "Export reports to files", PermissionAction.EXECUTE),
    # System
    _entry(
        Permissions.SYSTEM_ADMIN,
        "System administration",
        "Full access to every console function",
        PermissionAction.ALL,
    ),
    _entry(Permissions.AUDIT_READ, "View audit log", "Access the system audit log", PermissionAction.READ),
)

DEFAULT_PERMISSION_CATALOG = PermissionCatalog(DEFAULT_PERMISSIONS)


__all__ = [
    "DEFAULT_PERMISSIONS",
    "DEFAULT_PERMISSION_CATALOG",
    "Permission",
    "PermissionCatalog",
]
