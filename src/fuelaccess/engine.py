"""RoleEngine: access functions bound to one catalog, clock and config.

The module-level functions in :mod:`fuelaccess.access`,
:mod:`fuelaccess.delegation` and :mod:`fuelaccess.roles` take the catalog and
evaluation time as arguments. ``RoleEngine`` binds them once per deployment
so request handlers only pass the role and assignment lists.
"""

from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Callable, Iterable, Optional, Sequence

from .access import (
    AccessDecision,
    check_access,
    check_all_access,
    check_any_access,
    get_user_permissions,
    require_access,
)
from .config import AccessConfig
from .delegation import AssignDecision, can_assign_role
from .exceptions import AccessDeniedError
from .permissions.catalog import DEFAULT_PERMISSION_CATALOG, Permission, PermissionCatalog
from .roles.hierarchy import HierarchyNode, build_role_hierarchy
from .roles.inheritance import get_effective_permissions
from .roles.models import AccessScope, Role, UserRole
from .roles.registry import RoleRegistry
from .roles.validation import RoleCandidate, ValidationResult, validate_role

logger = logging.getLogger(__name__)

Clock = Callable[[], datetime]


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def catalog_from_config(config: AccessConfig, base: PermissionCatalog = DEFAULT_PERMISSION_CATALOG) -> PermissionCatalog:
    """Extend ``base`` with ``config.extra_permissions``.

    Raises:
        CatalogError: If an extra permission duplicates an existing code.
    """
    if not config.extra_permissions:
        return base
    return base.extended(
        Permission(
            code=spec.code,
            name=spec.name or spec.code,
            description=spec.description,
            resource=spec.code.split(".", 1)[0],
            action=spec.action,
        )
        for spec in config.extra_permissions
    )


class RoleEngine:
    """Access control entrypoint for one deployment.

    Args:
        catalog: Permission catalog (default: built-in catalog).
        clock: Returns the current time for expiry checks (default: UTC now).
        config: Engine configuration (default: ``AccessConfig()``).

    Example::

        engine = RoleEngine.from_config(load_config_from_env())
        decision = engine.check_access(user_roles, roles, "prices.update",
                                       AccessScope.network("N1"))
        if not decision:
            abort(403, decision.reason)
    """

    def __init__(
        self,
        catalog: Optional[PermissionCatalog] = None,
        *,
        clock: Optional[Clock] = None,
        config: Optional[AccessConfig] = None,
    ) -> None:
        self.catalog = catalog if catalog is not None else DEFAULT_PERMISSION_CATALOG
        self.config = config or AccessConfig()
        self._clock = clock or _utcnow

    @classmethod
    def from_config(cls, config: AccessConfig, *, clock: Optional[Clock] = None) -> RoleEngine:
        return cls(catalog_from_config(config), clock=clock, config=config)

    def new_registry(self, roles: Iterable[Role] = ()) -> RoleRegistry:
        """Create a registry, seeded with system roles if configured."""
        registry = RoleRegistry.with_system_roles() if self.config.seed_system_roles else RoleRegistry()
        for role in roles:
            registry.add(role)
        return registry

    def now(self) -> datetime:
        return self._clock()

    def _log(self, what: str, subject: str, allowed: bool, reason: str) -> None:
        if self.config.log_decisions:
            logger.debug("%s %s -> %s: %s", what, subject, "allow" if allowed else "deny", reason)

    # ── Evaluation ─────────────────────────────────────

    def check_access(
        self,
        user_roles: Iterable[UserRole],
        roles: Sequence[Role],
        required_permission: str,
        scope: AccessScope,
    ) -> AccessDecision:
        decision = check_access(user_roles, roles, required_permission, scope, now=self.now())
        self._log("check_access", required_permission, decision.has_access, decision.reason)
        return decision

    def check_any_access(
        self,
        user_roles: Sequence[UserRole],
        roles: Sequence[Role],
        permissions: Iterable[str],
        scope: AccessScope,
    ) -> AccessDecision:
        codes = list(permissions)
        decision = check_any_access(user_roles, roles, codes, scope, now=self.now())
        self._log("check_any_access", ", ".join(codes), decision.has_access, decision.reason)
        return decision

    def check_all_access(
        self,
        user_roles: Sequence[UserRole],
        roles: Sequence[Role],
        permissions: Iterable[str],
        scope: AccessScope,
    ) -> AccessDecision:
        codes = list(permissions)
        decision = check_all_access(user_roles, roles, codes, scope, now=self.now())
        self._log("check_all_access", ", ".join(codes), decision.has_access, decision.reason)
        return decision

    def require_access(
        self,
        user_roles: Iterable[UserRole],
        roles: Sequence[Role],
        required_permission: str,
        scope: AccessScope,
    ) -> AccessDecision:
        try:
            decision = require_access(user_roles, roles, required_permission, scope, now=self.now())
        except AccessDeniedError as e:
            self._log("require_access", required_permission, False, e.message)
            raise
        self._log("require_access", required_permission, True, decision.reason)
        return decision

    def get_effective_permissions(self, role: Role, roles: Sequence[Role]) -> frozenset[str]:
        return get_effective_permissions(role, roles)

    def get_user_permissions(self, user_roles: Iterable[UserRole], roles: Sequence[Role]) -> frozenset[str]:
        return get_user_permissions(user_roles, roles, now=self.now())

    # ── Administration ─────────────────────────────────

    def validate_role(
        self,
        candidate: RoleCandidate,
        existing_roles: Sequence[Role],
        *,
        role_id: Optional[str] = None,
    ) -> ValidationResult:
        return validate_role(candidate, existing_roles, catalog=self.catalog, role_id=role_id)

    def can_assign_role(
        self,
        assigner_roles: Sequence[UserRole],
        roles: Sequence[Role],
        role_to_assign: Role,
        target_scope: AccessScope,
    ) -> AssignDecision:
        decision = can_assign_role(assigner_roles, roles, role_to_assign, target_scope, now=self.now())
        self._log("can_assign_role", role_to_assign.code, decision.can_assign, decision.reason)
        return decision

    def build_role_hierarchy(self, roles: Sequence[Role]) -> list[HierarchyNode]:
        return build_role_hierarchy(roles)


__all__ = [
    "Clock",
    "RoleEngine",
    "catalog_from_config",
]
