"""Tests for role models, inheritance, validation, registry and hierarchy."""

from __future__ import annotations

import pytest
from conftest import assign, make_role
from pydantic import ValidationError

from fuelaccess import (
    DEFAULT_PERMISSION_CATALOG,
    SYSTEM_ROLE_DEFINITIONS,
    Permission,
    PermissionAction,
    PermissionCatalog,
    RoleDraft,
    RoleRegistry,
    RoleRegistryError,
    RoleScope,
    build_role_hierarchy,
    build_system_roles,
    flatten_hierarchy,
    get_effective_permissions,
    validate_role,
)


class TestEffectivePermissions:
    """Tests for permission inheritance through the parent chain."""

    def test_own_permissions(self) -> None:
        """A role without a parent yields its own permissions."""
        role = make_role("a", "global", ["tanks.read", "prices.read"])
        assert get_effective_permissions(role, [role]) == frozenset({"tanks.read", "prices.read"})

    def test_transitive(self) -> None:
        """Grandparent permissions reach the grandchild."""
        roles = [
            make_role("a", "network", ["reports.read"]),
            make_role("b", "network", ["tanks.read"], parent_role_id="a"),
            make_role("c", "network", ["prices.read"], parent_role_id="b"),
        ]
        assert get_effective_permissions(roles[2], roles) == frozenset({"reports.read", "tanks.read", "prices.read"})

    def test_two_role_cycle_terminates(self) -> None:
        """A <-> B cycle terminates and includes both roles' permissions."""
        a = make_role("A", "global", ["tanks.read"], parent_role_id="B")
        b = make_role("B", "global", ["prices.read"], parent_role_id="A")
        result = get_effective_permissions(a, [a, b])
        assert "tanks.read" in result
        assert result == frozenset({"tanks.read", "prices.read"})

    def test_self_parent_terminates(self) -> None:
        """A role pointing at itself terminates."""
        a = make_role("A", "global", ["tanks.read"], parent_role_id="A")
        assert get_effective_permissions(a, [a]) == frozenset({"tanks.read"})

    def test_dangling_parent(self) -> None:
        """A missing parent ends the chain."""
        a = make_role("A", "global", ["tanks.read"], parent_role_id="gone")
        assert get_effective_permissions(a, [a]) == frozenset({"tanks.read"})


class TestValidateRole:
    """Tests for validate_role."""

    def setup_method(self) -> None:
        self.existing = [
            make_role("r1", "network", ["prices.update"], code="net_admin"),
            make_role("r2", "trading_point", ["tanks.read"], code="tank_watch"),
        ]

    def test_valid_role(self) -> None:
        """A role with distinct, valid fields passes."""
        draft = RoleDraft(name="Cashier", code="cashier", scope="trading_point",
                          permissions=["operations.create", "operations.*"], parent_role_id="r2")
        result = validate_role(draft, self.existing)
        assert result.is_valid
        assert result.errors == []

    def test_duplicate_code(self) -> None:
        """A duplicate code is reported as duplication."""
        draft = RoleDraft(name="Other", code="net_admin", scope="network", permissions=["prices.read"])
        result = validate_role(draft, self.existing)
        assert not result.is_valid
        assert any("duplicate" in e.lower() for e in result.errors)

    def test_editing_keeps_own_code(self) -> None:
        """Passing role_id excludes the role itself from duplicate detection."""
        draft = RoleDraft(name="Net admin", code="net_admin", scope="network", permissions=["prices.read"])
        assert validate_role(draft, self.existing, role_id="r1").is_valid

    def test_errors_accumulate(self) -> None:
        """Every violation is reported at once."""
        result = validate_role(
            {"name": " ", "code": "", "scope": "region", "permissions": []},
            self.existing,
        )
        assert not result.is_valid
        assert result.errors == [
            "Role name is required",
            "Role code is required",
            "Invalid role scope 'region'",
            "Role must have at least one permission",
        ]

    def test_null_fields_reported(self) -> None:
        """Null fields from a REST row are reported, not raised."""
        result = validate_role(
            {"name": None, "code": None, "scope": None, "permissions": None, "description": None},
            self.existing,
        )
        assert result.errors == [
            "Role name is required",
            "Role code is required",
            "Invalid role scope ''",
            "Role must have at least one permission",
        ]

    def test_missing_fields_reported(self) -> None:
        """An empty mapping yields every required-field error."""
        result = validate_role({}, self.existing)
        assert not result.is_valid
        assert "Role name is required" in result.errors
        assert "Role must have at least one permission" in result.errors

    def test_malformed_field_reported(self) -> None:
        """A field of the wrong shape becomes an error entry."""
        result = validate_role(
            {"name": "X", "code": "x", "scope": "global", "permissions": 42},
            self.existing,
        )
        assert not result.is_valid
        assert len(result.errors) == 1
        assert result.errors[0].startswith("Invalid field 'permissions'")

    def test_invalid_permissions_combined(self) -> None:
        """Unknown non-wildcard codes are listed in one error."""
        draft = RoleDraft(name="X", code="x", scope="global",
                          permissions=["tanks.read", "coupons.read", "fuel.pump", "coupons.*", "*", "system.admin"])
        result = validate_role(draft, self.existing)
        assert result.errors == ["Invalid permissions: coupons.read, fuel.pump"]

    def test_injected_catalog(self) -> None:
        """A deployment catalog recognizes extra codes."""
        catalog = DEFAULT_PERMISSION_CATALOG.extended(
            [Permission("coupons.read", "Coupons", "", "coupons", PermissionAction.READ)]
        )
        draft = RoleDraft(name="X", code="x", scope="global", permissions=["coupons.read"])
        assert validate_role(draft, self.existing, catalog=catalog).is_valid
        assert not validate_role(draft, self.existing, catalog=PermissionCatalog()).is_valid

    def test_missing_parent(self) -> None:
        """A parent id that does not exist is reported."""
        draft = RoleDraft(name="X", code="x", scope="network", permissions=["tanks.read"], parent_role_id="nope")
        assert validate_role(draft, self.existing).errors == ["Parent role 'nope' not found"]

    def test_parent_scope_mismatch(self) -> None:
        """Parent and child must share a scope."""
        draft = RoleDraft(name="X", code="x", scope="global", permissions=["tanks.read"], parent_role_id="r1")
        assert validate_role(draft, self.existing).errors == ["Role scope must match parent role scope"]

    def test_edit_creating_cycle(self) -> None:
        """Re-parenting a role under its own descendant is rejected."""
        roles = [
            make_role("a", "network", ["tanks.read"]),
            make_role("b", "network", ["prices.read"], parent_role_id="a"),
        ]
        draft = RoleDraft.from_role(roles[0]).model_copy(update={"parent_role_id": "b"})
        result = validate_role(draft, roles, role_id="a")
        assert "Role inheritance would create a cycle" in result.errors

    def test_accepts_role_instance(self) -> None:
        """A Role can be validated directly."""
        role = make_role("new", "global", ["reports.read"], code="reporter")
        assert validate_role(role, self.existing).is_valid

    def test_draft_to_role_rejects_bad_scope(self) -> None:
        """Materializing a draft with an unknown scope raises."""
        with pytest.raises(ValidationError):
            RoleDraft(name="X", code="x", scope="region", permissions=["tanks.read"]).to_role("id1")


class TestRoleRegistry:
    """Tests for RoleRegistry and system roles."""

    def test_system_roles_seeded(self) -> None:
        """with_system_roles seeds the five built-in roles."""
        registry = RoleRegistry.with_system_roles()
        assert len(registry) == 5
        assert {r.code for r in registry} == set(SYSTEM_ROLE_DEFINITIONS)
        assert all(r.is_system for r in registry)

    def test_system_role_scopes(self) -> None:
        """Built-in roles carry their documented scopes."""
        by_code = {r.code: r for r in build_system_roles()}
        assert by_code["system_admin"].scope is RoleScope.GLOBAL
        assert by_code["network_admin"].scope is RoleScope.NETWORK
        assert by_code["point_manager"].scope is RoleScope.TRADING_POINT
        assert by_code["operator"].scope is RoleScope.TRADING_POINT
        assert by_code["viewer"].scope is RoleScope.GLOBAL

    def test_system_roles_pass_validation(self) -> None:
        """Built-in role definitions validate against the default catalog."""
        for role in build_system_roles():
            assert validate_role(role, []).is_valid, role.code

    def test_id_factory(self) -> None:
        """id_factory controls role ids."""
        roles = build_system_roles(lambda code: f"sys-{code}")
        assert roles[0].id == "sys-system_admin"

    def test_add_duplicate_rejected(self) -> None:
        """Duplicate ids and codes raise."""
        registry = RoleRegistry([make_role("r1", "global", ["tanks.read"])])
        with pytest.raises(RoleRegistryError):
            registry.add(make_role("r1", "global", ["tanks.read"], code="other"))
        with pytest.raises(RoleRegistryError):
            registry.add(make_role("r2", "global", ["tanks.read"], code="r1"))

    def test_lookup(self) -> None:
        """get / get_by_code / children_of / contains."""
        parent = make_role("p", "network", ["tanks.read"])
        child = make_role("c", "network", ["prices.read"], parent_role_id="p")
        registry = RoleRegistry([parent, child])
        assert registry.get("p") == parent
        assert registry.get_by_code("c") == child
        assert registry.children_of("p") == [child]
        assert "p" in registry
        assert registry.get("zzz") is None

    def test_remove_guards(self) -> None:
        """System, assigned and parent roles cannot be removed."""
        parent = make_role("p", "network", ["tanks.read"])
        child = make_role("c", "network", ["prices.read"], parent_role_id="p")
        registry = RoleRegistry([*build_system_roles(), parent, child])

        with pytest.raises(RoleRegistryError, match="cannot be deleted"):
            registry.remove("system_admin")
        with pytest.raises(RoleRegistryError, match="child roles"):
            registry.remove("p")
        with pytest.raises(RoleRegistryError, match="assigned"):
            registry.remove("c", assignments=[assign("c")])
        with pytest.raises(RoleRegistryError, match="not found"):
            registry.remove("ghost")

        assert registry.remove("c").id == "c"
        assert registry.remove("p").id == "p"

    def test_replace(self) -> None:
        """replace swaps roles but protects system role names."""
        registry = RoleRegistry.with_system_roles()
        viewer = registry.get("viewer")
        assert viewer is not None
        updated = viewer.model_copy(update={"permissions": [*viewer.permissions, "audit.read"]})
        assert registry.replace(updated) == viewer
        assert "audit.read" in registry.get("viewer").permissions  # type: ignore[union-attr]

        with pytest.raises(RoleRegistryError, match="renamed"):
            registry.replace(viewer.model_copy(update={"name": "Watcher"}))


class TestRoleHierarchy:
    """Tests for build_role_hierarchy."""

    def test_forest_and_levels(self) -> None:
        """Roots are parentless roles; level is depth from root."""
        roles = [
            make_role("root1", "network", ["a.read"]),
            make_role("mid", "network", ["b.read"], parent_role_id="root1"),
            make_role("leaf", "network", ["c.read"], parent_role_id="mid"),
            make_role("root2", "global", ["d.read"]),
        ]
        forest = build_role_hierarchy(roles)
        assert [n.role.id for n in forest] == ["root1", "root2"]
        assert forest[0].level == 0
        assert forest[0].children[0].role.id == "mid"
        assert forest[0].children[0].level == 1
        assert forest[0].children[0].children[0].level == 2
        assert forest[1].children == []

    def test_flatten(self) -> None:
        """flatten_hierarchy yields depth-first order."""
        roles = [
            make_role("r", "global", ["a.read"]),
            make_role("c1", "global", ["a.read"], parent_role_id="r"),
            make_role("g1", "global", ["a.read"], parent_role_id="c1"),
            make_role("c2", "global", ["a.read"], parent_role_id="r"),
        ]
        order = [(n.role.id, n.level) for n in flatten_hierarchy(build_role_hierarchy(roles))]
        assert order == [("r", 0), ("c1", 1), ("g1", 2), ("c2", 1)]

    def test_cycle_excluded(self) -> None:
        """Roles on a parent cycle have no root and do not hang the builder."""
        roles = [
            make_role("A", "global", ["a.read"], parent_role_id="B"),
            make_role("B", "global", ["b.read"], parent_role_id="A"),
            make_role("R", "global", ["r.read"]),
        ]
        forest = build_role_hierarchy(roles)
        assert [n.role.id for n in flatten_hierarchy(forest)] == ["R"]

    def test_empty(self) -> None:
        """No roles, no nodes."""
        assert build_role_hierarchy([]) == []
