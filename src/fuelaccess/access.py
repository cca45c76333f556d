"""Access evaluation: does a set of role assignments grant a permission at a scope.

Provides runtime functions used by request handlers to gate console actions.
Everything here is a pure function over caller-supplied lists; nothing raises
except :func:`require_access`, which exists for callers that want a hard stop.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime
from typing import Iterable, Optional, Sequence

from .exceptions import AccessDeniedError
from .permissions.constants import RoleScope
from .permissions.matching import has_permission
from .roles.inheritance import collect_permissions, get_effective_permissions, live_roles
from .roles.models import AccessScope, Role, UserRole

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class AccessDecision:
    """Result of an access check.

    Attributes:
        has_access: Whether access is granted.
        reason: Human-readable explanation, safe to show to the user.
        matched_role: Role that granted access (None on denial).
    """

    has_access: bool
    reason: str
    matched_role: Optional[Role] = None

    def __bool__(self) -> bool:
        return self.has_access


@dataclass(frozen=True)
class ScopeMatch:
    has_access: bool
    reason: str


def check_scope_access(role: Role, assignment: UserRole, requested: AccessScope) -> ScopeMatch:
    """Check a role's breadth plus its assignment's org unit against a request.

    - ``global`` roles reach every scope.
    - ``network`` roles never reach a global request, reach a network request
      only for the assigned network, and reach any trading point request.
      Trading point membership in the network is not verified.
    - ``trading_point`` roles reach only a trading point request for the
      assigned trading point.
    """
    if role.scope is RoleScope.GLOBAL:
        return ScopeMatch(True, "Global scope access")

    if role.scope is RoleScope.NETWORK:
        if requested.type.breadth > role.scope.breadth:
            return ScopeMatch(False, "Network role cannot access global scope")
        if requested.type is RoleScope.NETWORK:
            if assignment.network_id == requested.network_id:
                return ScopeMatch(True, "Network scope match")
            return ScopeMatch(False, "Different network")
        # TODO: verify requested.trading_point_id belongs to assignment.network_id once
        # the trading point directory is passed into the evaluator.
        return ScopeMatch(True, "Network admin can access trading points in network")

    if role.scope is RoleScope.TRADING_POINT:
        if requested.type.breadth > role.scope.breadth:
            return ScopeMatch(False, "Trading point role cannot access higher scopes")
        if assignment.trading_point_id == requested.trading_point_id:
            return ScopeMatch(True, "Trading point scope match")
        return ScopeMatch(False, "Different trading point")

    return ScopeMatch(False, "Scope mismatch")


def check_access(
    user_roles: Iterable[UserRole],
    roles: Sequence[Role],
    required_permission: str,
    scope: AccessScope,
    *,
    now: Optional[datetime] = None,
) -> AccessDecision:
    """Decide whether the assignments grant ``required_permission`` at ``scope``.

    Assignments are tried in the given order and the first one that passes
    both the permission and the scope check wins. Expired assignments and
    assignments pointing at unknown roles are skipped.

    Args:
        user_roles: The user's role assignments.
        roles: All role definitions (used to resolve ids and parents).
        required_permission: Permission code, e.g. ``"prices.update"``.
        scope: Requested access scope.
        now: Evaluation time for expiry (default: current UTC time).

    Returns:
        :class:`AccessDecision`.

    Example::

        roles = [Role(id="r1", name="Net admin", code="net_admin",
                      scope="network", permissions=["prices.update"])]
        assignments = [UserRole(user_id="u1", role_id="r1", network_id="N1")]
        check_access(assignments, roles, "prices.update", AccessScope.network("N1")).has_access  # True
        check_access(assignments, roles, "prices.update", AccessScope.network("N2")).has_access  # False
    """
    for assignment, role in live_roles(user_roles, roles, now=now):
        effective = get_effective_permissions(role, roles)
        if not has_permission(effective, required_permission):
            continue

        scope_match = check_scope_access(role, assignment, scope)
        if scope_match.has_access:
            return AccessDecision(
                has_access=True,
                matched_role=role,
                reason=f"Access granted by role: {role.name} ({scope_match.reason})",
            )

    return AccessDecision(
        has_access=False,
        reason=(
            f"Access denied: required permission '{required_permission}' "
            f"not found in user roles for scope {scope.type.value}"
        ),
    )


def check_any_access(
    user_roles: Sequence[UserRole],
    roles: Sequence[Role],
    permissions: Iterable[str],
    scope: AccessScope,
    *,
    now: Optional[datetime] = None,
) -> AccessDecision:
    """Grant if any of ``permissions`` is granted (OR).

    Returns the first granting decision, or a denial listing every code.
    """
    codes = list(permissions)
    for code in codes:
        decision = check_access(user_roles, roles, code, scope, now=now)
        if decision.has_access:
            return decision
    return AccessDecision(
        has_access=False,
        reason=f"Access denied: none of [{', '.join(codes)}] granted for scope {scope.type.value}",
    )


def check_all_access(
    user_roles: Sequence[UserRole],
    roles: Sequence[Role],
    permissions: Iterable[str],
    scope: AccessScope,
    *,
    now: Optional[datetime] = None,
) -> AccessDecision:
    """Grant only if every code in ``permissions`` is granted (AND).

    The denial is the decision for the first missing code. An empty list
    grants vacuously, with no matched role.
    """
    last: Optional[AccessDecision] = None
    for code in permissions:
        decision = check_access(user_roles, roles, code, scope, now=now)
        if not decision.has_access:
            return decision
        last = decision
    if last is None:
        return AccessDecision(has_access=True, reason="No permissions required")
    return last


def get_user_permissions(
    user_roles: Iterable[UserRole],
    roles: Sequence[Role],
    *,
    now: Optional[datetime] = None,
) -> frozenset[str]:
    """Union of effective permissions over live assignments, ignoring scope.

    Suitable for deciding which menu sections to show; use
    :func:`check_access` to gate the action itself.
    """
    return collect_permissions((role for _, role in live_roles(user_roles, roles, now=now)), roles)


def require_access(
    user_roles: Iterable[UserRole],
    roles: Sequence[Role],
    required_permission: str,
    scope: AccessScope,
    *,
    now: Optional[datetime] = None,
) -> AccessDecision:
    """Like :func:`check_access` but raise on denial.

    Raises:
        AccessDeniedError: With the decision reason as message.
    """
    decision = check_access(user_roles, roles, required_permission, scope, now=now)
    if not decision.has_access:
        logger.info("Access denied for '%s' at %s scope", required_permission, scope.type.value)
        raise AccessDeniedError(
            decision.reason,
            permission=required_permission,
            scope=scope.type.value,
        )
    return decision


__all__ = [
    "AccessDecision",
    "ScopeMatch",
    "check_access",
    "check_all_access",
    "check_any_access",
    "check_scope_access",
    "get_user_permissions",
    "require_access",
]
