"""Role registry and the built-in system roles.

Provides:
- ``SYSTEM_ROLE_DEFINITIONS``: built-in roles keyed by code.
- ``build_system_roles()``: materialize them as ``Role`` objects.
- ``RoleRegistry``: in-memory holder of a deployment's roles.

The registry is a data holder. Evaluation functions take plain role lists,
so ``registry.roles()`` is what gets passed to them.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Callable, Iterable, Iterator, Optional

from ..exceptions import RoleRegistryError
from ..permissions.constants import Permissions, RoleScope
from .models import Role, UserRole

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SystemRoleDefinition:
    name: str
    scope: RoleScope
    permissions: tuple[str, ...]
    description: str = ""


SYSTEM_ROLE_DEFINITIONS: dict[str, SystemRoleDefinition] = {
    "system_admin": SystemRoleDefinition(
        name="System administrator",
        scope=RoleScope.GLOBAL,
        permissions=(Permissions.SYSTEM_ADMIN,),
        description="Full access to every console function",
    ),
    "network_admin": SystemRoleDefinition(
        name="Network administrator",
        scope=RoleScope.NETWORK,
        permissions=(
            Permissions.NETWORKS_ALL,
            Permissions.TRADING_POINTS_ALL,
            Permissions.USERS_READ,
            Permissions.USERS_UPDATE,
            Permissions.OPERATIONS_READ,
            Permissions.TANKS_READ,
            Permissions.PRICES_READ,
            Permissions.REPORTS_READ,
        ),
        description="Manages one trading network and its trading points",
    ),
    "point_manager": SystemRoleDefinition(
        name="Trading point manager",
        scope=RoleScope.TRADING_POINT,
        permissions=(
            Permissions.TRADING_POINTS_READ,
            Permissions.TRADING_POINTS_UPDATE,
            Permissions.OPERATIONS_ALL,
            Permissions.TANKS_READ,
            Permissions.PRICES_READ,
            Permissions.USERS_READ,
            Permissions.REPORTS_READ,
        ),
        description="Runs a single trading point",
    ),
    "operator": SystemRoleDefinition(
        name="Operator",
        scope=RoleScope.TRADING_POINT,
        permissions=(
            Permissions.OPERATIONS_CREATE,
            Permissions.OPERATIONS_READ,
            Permissions.TANKS_READ,
            Permissions.PRICES_READ,
        ),
        description="Records fuel sales at a trading point",
    ),
    "viewer": SystemRoleDefinition(
        name="Viewer",
        scope=RoleScope.GLOBAL,
        permissions=(
            Permissions.NETWORKS_READ,
            Permissions.TRADING_POINTS_READ,
            Permissions.OPERATIONS_READ,
            Permissions.TANKS_READ,
            Permissions.PRICES_READ,
            Permissions.REPORTS_READ,
        ),
        description="Read-only access across the console",
    ),
}


def build_system_roles(id_factory: Optional[Callable[[str], str]] = None) -> list[Role]:
    """Materialize :data:`SYSTEM_ROLE_DEFINITIONS`.

    Args:
        id_factory: Maps a role code to its id. Default: the code itself.
    """
    make_id = id_factory or (lambda code: code)
    return [
        Role(
            id=make_id(code),
            name=definition.name,
            code=code,
            scope=definition.scope,
            permissions=list(definition.permissions),
            is_system=True,
            description=definition.description,
        )
        for code, definition in SYSTEM_ROLE_DEFINITIONS.items()
    ]


class RoleRegistry:
    """In-memory, insertion-ordered role store.

    Not thread-safe; the owner re-fetches roles from persistence when
    staleness matters.

    Example::

        registry = RoleRegistry.with_system_roles()
        registry.add(Role(id="r9", name="Cashier", code="cashier",
                          scope="trading_point", permissions=["operations.create"]))
        check_access(assignments, registry.roles(), "operations.create", scope)
    """

    def __init__(self, roles: Iterable[Role] = ()) -> None:
        self._roles: dict[str, Role] = {}
        for role in roles:
            self.add(role)

    @classmethod
    def with_system_roles(cls, id_factory: Optional[Callable[[str], str]] = None) -> RoleRegistry:
        return cls(build_system_roles(id_factory))

    def get(self, role_id: str) -> Optional[Role]:
        return self._roles.get(role_id)

    def get_by_code(self, code: str) -> Optional[Role]:
        return next((r for r in self._roles.values() if r.code == code), None)

    def roles(self) -> list[Role]:
        return list(self._roles.values())

    def children_of(self, role_id: str) -> list[Role]:
        return [r for r in self._roles.values() if r.parent_role_id == role_id]

    def add(self, role: Role) -> None:
        """Store a new role.

        Raises:
            RoleRegistryError: If the id or code is already taken.
        """
        if role.id in self._roles:
            raise RoleRegistryError(f"Role id '{role.id}' already exists", role_id=role.id)
        if self.get_by_code(role.code) is not None:
            raise RoleRegistryError(f"Role code '{role.code}' already exists", code=role.code)
        self._roles[role.id] = role
        logger.debug("Role added: %s (%s)", role.code, role.scope.value)

    def replace(self, role: Role) -> Role:
        """Swap in an edited role; returns the previous version.

        System roles keep their code and name.

        Raises:
            RoleRegistryError: If the role is unknown or a system role is renamed.
        """
        previous = self._roles.get(role.id)
        if previous is None:
            raise RoleRegistryError(f"Role '{role.id}' not found", role_id=role.id)
        if previous.is_system and (previous.code != role.code or previous.name != role.name):
            raise RoleRegistryError(f"System role '{previous.code}' cannot be renamed", role_id=role.id)
        clash = self.get_by_code(role.code)
        if clash is not None and clash.id != role.id:
            raise RoleRegistryError(f"Role code '{role.code}' already exists", code=role.code)
        self._roles[role.id] = role
        return previous

    def remove(self, role_id: str, assignments: Iterable[UserRole] = ()) -> Role:
        """Delete a role.

        Args:
            role_id: Role to delete.
            assignments: Current user role assignments; a role still
                referenced by one cannot be removed.

        Raises:
            RoleRegistryError: If the role is unknown, a system role, still
                assigned, or a parent of other roles.
        """
        role = self._roles.get(role_id)
        if role is None:
            raise RoleRegistryError(f"Role '{role_id}' not found", role_id=role_id)
        if role.is_system:
            raise RoleRegistryError(f"System role '{role.code}' cannot be deleted", role_id=role_id)
        if any(a.role_id == role_id for a in assignments):
            raise RoleRegistryError(f"Role '{role.code}' is assigned to users", role_id=role_id)
        if self.children_of(role_id):
            raise RoleRegistryError(f"Role '{role.code}' has child roles", role_id=role_id)
        del self._roles[role_id]
        logger.debug("Role removed: %s", role.code)
        return role

    def __contains__(self, role_id: object) -> bool:
        return role_id in self._roles

    def __iter__(self) -> Iterator[Role]:
        return iter(self._roles.values())

    def __len__(self) -> int:
        return len(self._roles)


__all__ = [
    "RoleRegistry",
    "SYSTEM_ROLE_DEFINITIONS",
    "SystemRoleDefinition",
    "build_system_roles",
]
