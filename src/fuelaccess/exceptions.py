"""Unified exception hierarchy for fuelaccess.

Access checks, role validation and delegation checks never raise: they
return structured results. Exceptions exist only at the edges, where the
caller asks for a hard failure:

- catalog construction and strict lookups
- registry mutation (duplicate roles, refused removals)
- configuration loading
- ``require_access()`` when a decision is a denial

Usage:
    from fuelaccess.exceptions import (
        FuelAccessError,
        AccessDeniedError,
        RoleRegistryError,
    )

Callers may define thin subclasses for their own errors:
    @register_error("PRICE_LOCKED")
    class PriceLockedError(FuelAccessError):
        code = "PRICE_LOCKED"
"""

from __future__ import annotations

from typing import Any, Callable, TypeVar, cast

__all__ = [
    # Base hierarchy
    "FuelAccessError",
    "ConfigurationError",
    "CatalogError",
    "UnknownPermissionError",
    "RoleRegistryError",
    "AccessDeniedError",
    # Registry
    "ErrorRegistry",
    "error_registry",
    "register_error",
    # Protocol mapping
    "http_status_for",
]


# ---- Exception Hierarchy ----------------------------------------------------


class FuelAccessError(Exception):
    """Base exception for fuelaccess.

    Attributes:
        code: Stable error code string for protocol mapping (e.g. "ACCESS_DENIED").
        message: Human-readable error description.
        details: Additional context as keyword arguments.
    """

    code: str = "INTERNAL_ERROR"
    message: str = "An internal error occurred"

    def __init__(self, message: str | None = None, code: str | None = None, **kwargs: Any) -> None:
        self.message = message or self.message
        self.code = code or self.code
        self.details = kwargs
        super().__init__(self.message)


class ConfigurationError(FuelAccessError):
    """Invalid or missing configuration."""

    code: str = "CONFIGURATION_ERROR"


class CatalogError(FuelAccessError):
    """Malformed permission catalog (duplicate or empty codes)."""

    code: str = "CATALOG_ERROR"


class UnknownPermissionError(CatalogError):
    """Strict lookup of a permission code that is not in the catalog."""

    code: str = "UNKNOWN_PERMISSION"


class RoleRegistryError(FuelAccessError):
    """Role registry refused a mutation."""

    code: str = "ROLE_REGISTRY_ERROR"


class AccessDeniedError(FuelAccessError):
    """Role assignments do not grant the requested permission at the requested scope."""

    code: str = "ACCESS_DENIED"


# ---- Error Registry for Protocol Mapping ------------------------------------

_E = TypeVar("_E", bound=type[FuelAccessError])


class ErrorRegistry:
    """Registry for mapping internal errors to external protocol codes."""

    def __init__(self) -> None:
        self._errors: dict[str, type[FuelAccessError]] = {}

    def register(self, code: str, error_cls: type[FuelAccessError]) -> None:
        self._errors[code] = error_cls

    def get(self, code: str) -> type[FuelAccessError] | None:
        return self._errors.get(code)

    def all(self) -> dict[str, type[FuelAccessError]]:
        return dict(self._errors)


error_registry = ErrorRegistry()


def register_error(code: str) -> Callable[[_E], _E]:
    """Decorator to register a custom error type.

    Usage:
        @register_error("MY_CUSTOM_ERROR")
        class MyCustomError(FuelAccessError):
            code = "MY_CUSTOM_ERROR"
    """

    def decorator(cls: _E) -> _E:
        error_registry.register(code, cls)
        return cls

    return cast(Callable[[_E], _E], decorator)


# Register base errors
error_registry.register("INTERNAL_ERROR", FuelAccessError)
error_registry.register("CONFIGURATION_ERROR", ConfigurationError)
error_registry.register("CATALOG_ERROR", CatalogError)
error_registry.register("UNKNOWN_PERMISSION", UnknownPermissionError)
error_registry.register("ROLE_REGISTRY_ERROR", RoleRegistryError)
error_registry.register("ACCESS_DENIED", AccessDeniedError)


def http_status_for(error: FuelAccessError) -> int:
    """Map a FuelAccessError to the HTTP status the console API answers with."""
    error_to_status = {
        "ACCESS_DENIED": 403,
        "UNKNOWN_PERMISSION": 400,
        "CATALOG_ERROR": 500,
        "CONFIGURATION_ERROR": 500,
        "ROLE_REGISTRY_ERROR": 409,
    }
    return error_to_status.get(error.code, 500)
