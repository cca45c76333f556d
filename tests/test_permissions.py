"""Tests for the permission catalog and wildcard matching."""

from __future__ import annotations

import pytest

from fuelaccess import (
    DEFAULT_PERMISSION_CATALOG,
    CatalogError,
    Permission,
    PermissionAction,
    PermissionCatalog,
    Permissions,
    RoleScope,
    UnknownPermissionError,
    has_permission,
    parse_grant,
    permission_matches,
)
from fuelaccess.permissions import GrantKind, has_universal


class TestPermissions:
    """Tests for Permissions constants."""

    def test_permission_format(self) -> None:
        """All string-constant permissions follow resource.action format (except '*')."""
        for attr in dir(Permissions):
            if attr.startswith("_"):
                continue
            value = getattr(Permissions, attr)
            if callable(value) or value == Permissions.ALL:
                continue
            assert "." in value, f"{attr}={value} missing '.'"
            resource, action = value.split(".", 1)
            assert resource, f"{attr} has empty resource"
            assert action, f"{attr} has empty action"

    def test_unique_permissions(self) -> None:
        """All permission values are unique."""
        values = [
            getattr(Permissions, attr)
            for attr in dir(Permissions)
            if not attr.startswith("_") and not callable(getattr(Permissions, attr))
        ]
        assert len(values) == len(set(values)), "Duplicate permission values found"

    def test_builders(self) -> None:
        """of() and all_of() build codes."""
        assert Permissions.of("coupons", "read") == "coupons.read"
        assert Permissions.all_of("coupons") == "coupons.*"


class TestRoleScope:
    """Tests for RoleScope breadth ordering."""

    def test_breadth_order(self) -> None:
        """global > network > trading_point."""
        assert RoleScope.GLOBAL.breadth > RoleScope.NETWORK.breadth > RoleScope.TRADING_POINT.breadth

    def test_values(self) -> None:
        """Exactly three scope values exist."""
        assert RoleScope.values() == frozenset({"global", "network", "trading_point"})


class TestPermissionCatalog:
    """Tests for PermissionCatalog."""

    def test_default_catalog_contents(self) -> None:
        """Built-in catalog has the console permissions."""
        for code in (
            Permissions.USERS_UPDATE,
            Permissions.TRADING_POINTS_ALL,
            Permissions.PRICES_UPDATE,
            Permissions.SYSTEM_ADMIN,
            Permissions.AUDIT_READ,
        ):
            assert code in DEFAULT_PERMISSION_CATALOG

    def test_reports_export_is_execute(self) -> None:
        """reports.export uses the execute action."""
        entry = DEFAULT_PERMISSION_CATALOG.require(Permissions.REPORTS_EXPORT)
        assert entry.action is PermissionAction.EXECUTE
        assert entry.resource == "reports"

    def test_get_unknown_returns_none(self) -> None:
        """get() returns None for unknown codes."""
        assert DEFAULT_PERMISSION_CATALOG.get("coupons.read") is None

    def test_require_unknown_raises(self) -> None:
        """require() raises UnknownPermissionError."""
        with pytest.raises(UnknownPermissionError) as exc_info:
            DEFAULT_PERMISSION_CATALOG.require("coupons.read")
        assert exc_info.value.code == "UNKNOWN_PERMISSION"
        assert exc_info.value.details["permission"] == "coupons.read"

    def test_duplicate_code_rejected(self) -> None:
        """Duplicate codes raise CatalogError."""
        entry = Permission("a.read", "A", "", "a", PermissionAction.READ)
        with pytest.raises(CatalogError, match="Duplicate"):
            PermissionCatalog([entry, entry])

    def test_is_acceptable(self) -> None:
        """Known codes, wildcards and system.admin are acceptable."""
        catalog = PermissionCatalog()
        assert catalog.is_acceptable("*")
        assert catalog.is_acceptable("coupons.*")
        assert catalog.is_acceptable("coup*")
        assert catalog.is_acceptable("system.admin")
        assert not catalog.is_acceptable("coupons.read")
        assert DEFAULT_PERMISSION_CATALOG.is_acceptable("tanks.read")

    def test_by_resource_groups(self) -> None:
        """by_resource() groups codes under their resource."""
        grouped = DEFAULT_PERMISSION_CATALOG.by_resource()
        assert {p.code for p in grouped["tanks"]} == {"tanks.read", "tanks.update"}
        assert list(grouped)[0] == "users"

    def test_extended_leaves_original_untouched(self) -> None:
        """extended() returns a new catalog."""
        extra = Permission("coupons.read", "Coupons", "", "coupons", PermissionAction.READ)
        bigger = DEFAULT_PERMISSION_CATALOG.extended([extra])
        assert "coupons.read" in bigger
        assert "coupons.read" not in DEFAULT_PERMISSION_CATALOG
        assert len(bigger) == len(DEFAULT_PERMISSION_CATALOG) + 1


class TestMatching:
    """Tests for held-side permission matching."""

    def test_exact(self) -> None:
        """Identical codes match."""
        assert permission_matches("tanks.read", "tanks.read")
        assert not permission_matches("tanks.read", "tanks.update")

    def test_resource_wildcard(self) -> None:
        """users.* matches users actions but not other resources."""
        for action in ("create", "read", "update", "delete"):
            assert permission_matches("users.*", f"users.{action}")
        assert not permission_matches("users.*", "roles.create")

    def test_bare_prefix_wildcard(self) -> None:
        """prefix* matches by raw string prefix."""
        assert permission_matches("trading*", "trading_points.read")
        assert not permission_matches("trading*", "tanks.read")

    def test_universal(self) -> None:
        """* and system.admin match anything."""
        assert permission_matches("*", "prices.update")
        assert permission_matches("system.admin", "audit.read")

    def test_required_wildcard_is_not_universal(self) -> None:
        """Requiring '*' is not satisfied by a narrow grant."""
        assert not permission_matches("users.read", "*")
        assert permission_matches("system.admin", "*")

    def test_parse_grant_kinds(self) -> None:
        """Grants are classified once."""
        assert parse_grant("*").kind is GrantKind.UNIVERSAL
        assert parse_grant("system.admin").kind is GrantKind.UNIVERSAL
        assert parse_grant("operations.*").kind is GrantKind.PREFIX
        assert parse_grant("operations.*").prefix == "operations."
        assert parse_grant("operations.read").kind is GrantKind.EXACT

    def test_has_permission_unknown_codes_deny(self) -> None:
        """Unknown codes never raise and never match."""
        assert not has_permission(["no.such"], "tanks.read")
        assert not has_permission([], "tanks.read")

    def test_has_universal(self) -> None:
        """has_universal spots * and system.admin."""
        assert has_universal(["tanks.read", "*"])
        assert has_universal(["system.admin"])
        assert not has_universal(["users.*"])
