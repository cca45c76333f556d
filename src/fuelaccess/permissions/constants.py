"""Permission constants, actions and role scopes for fuelaccess.

Provides:
- ``Permissions``: built-in permission string constants (``resource.action`` format).
- ``PermissionAction``: action vocabulary of catalog entries.
- ``RoleScope``: breadth level of a role (global / network / trading_point).
"""

from __future__ import annotations

from enum import Enum


class Permissions:
    """Canonical permission constants for the fuel-retail console.

    Format: ``{resource}.{action}``

    Two modes of use:

    1. **Static constants**, predefined permissions::

        check_access(user_roles, roles, Permissions.PRICES_UPDATE, scope)

    2. **Dynamic builders**, for resources outside the built-in set::

        Permissions.of("coupons", "read")   → "coupons.read"
        Permissions.all_of("coupons")       → "coupons.*"
    """

    # ── Users & Roles ───────────────────────────────────
    USERS_CREATE = "users.create"
    USERS_READ = "users.read"
    USERS_UPDATE = "users.update"
    USERS_DELETE = "users.delete"
    ROLES_CREATE = "roles.create"
    ROLES_READ = "roles.read"
    ROLES_UPDATE = "roles.update"
    ROLES_DELETE = "roles.delete"

    # ── Networks & Trading Points ───────────────────────
    NETWORKS_CREATE = "networks.create"
    NETWORKS_READ = "networks.read"
    NETWORKS_UPDATE = "networks.update"
    NETWORKS_DELETE = "networks.delete"
    NETWORKS_ALL = "networks.*"
    TRADING_POINTS_READ = "trading_points.read"
    TRADING_POINTS_UPDATE = "trading_points.update"
    TRADING_POINTS_ALL = "trading_points.*"

    # ── Fuel Operations ─────────────────────────────────
    OPERATIONS_CREATE = "operations.create"
    OPERATIONS_READ = "operations.read"
    OPERATIONS_UPDATE = "operations.update"
    OPERATIONS_ALL = "operations.*"
    TANKS_READ = "tanks.read"
    TANKS_UPDATE = "tanks.update"
    PRICES_READ = "prices.read"
    PRICES_UPDATE = "prices.update"

    # ── Reports & Audit ─────────────────────────────────
    REPORTS_READ = "reports.read"
    REPORTS_EXPORT = "reports.export"
    AUDIT_READ = "audit.read"

    # ── Superuser ───────────────────────────────────────
    SYSTEM_ADMIN = "system.admin"
    ALL = "*"  # Universal wildcard

    # ── Builders ────────────────────────────────────────

    @staticmethod
    def of(resource: str, action: str) -> str:
        """Build a permission string from resource and action.

        Example::

            Permissions.of("tanks", "read")  # "tanks.read"
        """
        return f"{resource}.{action}"

    @staticmethod
    def all_of(resource: str) -> str:
        """Build the resource wildcard, e.g. ``"operations.*"``."""
        return f"{resource}.*"


# Held codes that satisfy every required permission.
UNIVERSAL_PERMISSIONS = frozenset({Permissions.ALL, Permissions.SYSTEM_ADMIN})


def is_wildcard(code: str) -> bool:
    """True for ``*``, ``resource.*`` and ``prefix*`` codes."""
    return code.endswith("*")


class PermissionAction(str, Enum):
    """Action part of a catalog permission."""

    CREATE = "create"
    READ = "read"
    UPDATE = "update"
    DELETE = "delete"
    EXECUTE = "execute"
    ALL = "*"


class RoleScope(str, Enum):
    """Breadth level of a role.

    Ordered by breadth: ``global`` > ``network`` > ``trading_point``.
    The breadth of a role says how wide its permissions apply; the concrete
    network or trading point comes from the assignment.
    """

    GLOBAL = "global"
    NETWORK = "network"
    TRADING_POINT = "trading_point"

    @property
    def breadth(self) -> int:
        """Numeric breadth, higher is wider."""
        return _BREADTH[self]

    @classmethod
    def values(cls) -> frozenset[str]:
        return frozenset(member.value for member in cls)


_BREADTH = {
    RoleScope.GLOBAL: 3,
    RoleScope.NETWORK: 2,
    RoleScope.TRADING_POINT: 1,
}


__all__ = [
    "PermissionAction",
    "Permissions",
    "RoleScope",
    "UNIVERSAL_PERMISSIONS",
    "is_wildcard",
]
