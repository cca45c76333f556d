"""Configuration for fuelaccess.

Pydantic-validated settings for the access engine: logging, decision
logging, system role seeding and deployment-specific permissions that extend
the built-in catalog.

Direct os.environ/os.getenv usage is limited to
:func:`load_config_from_env`. Everything else receives an ``AccessConfig``.
"""

from __future__ import annotations

from enum import Enum
from typing import Optional

from pydantic import BaseModel, Field, ValidationError, field_validator

from .exceptions import ConfigurationError
from .permissions.constants import PermissionAction


class LogLevel(str, Enum):
    """Standard log levels."""

    DEBUG = "DEBUG"
    INFO = "INFO"
    WARNING = "WARNING"
    ERROR = "ERROR"
    CRITICAL = "CRITICAL"


class PermissionSpec(BaseModel):
    """A deployment-specific catalog entry declared in configuration."""

    model_config = {"extra": "forbid"}

    code: str = Field(min_length=1, description="Permission code, e.g. 'coupons.read'")
    name: str = Field(default="", description="Display name (defaults to the code)")
    description: str = ""
    action: PermissionAction = Field(
        default=PermissionAction.READ,
        description="Catalog action: create, read, update, delete, execute or *",
    )

    @field_validator("code")
    @classmethod
    def validate_code(cls, v: str) -> str:
        """Codes follow ``resource.action`` or ``resource.*``."""
        resource, sep, action = v.partition(".")
        if not sep or not resource or not action:
            raise ValueError(f"Permission code must be 'resource.action', got '{v}'")
        return v


class AccessConfig(BaseModel):
    """Settings for :class:`fuelaccess.engine.RoleEngine` and logging."""

    # Logging
    log_level: LogLevel = Field(
        default=LogLevel.INFO,
        description="Logging level",
    )
    log_json: bool = Field(
        default=False,
        description="Use JSON log format (default: plain text)",
    )
    log_decisions: bool = Field(
        default=False,
        description="Log every access/delegation decision at DEBUG level",
    )

    # Roles & catalog
    seed_system_roles: bool = Field(
        default=True,
        description="Seed the built-in system roles into new registries",
    )
    extra_permissions: list[PermissionSpec] = Field(
        default_factory=list,
        description="Permissions appended to the built-in catalog",
    )

    # Service identification
    service_name: Optional[str] = Field(
        default=None,
        description="Service name used as logger name when set",
    )

    @field_validator("log_level", mode="before")
    @classmethod
    def validate_log_level(cls, v: str | LogLevel) -> LogLevel:
        """Convert string to LogLevel enum."""
        if isinstance(v, LogLevel):
            return v
        if isinstance(v, str):
            try:
                return LogLevel[v.upper()]
            except KeyError:
                raise ValueError(f"Invalid log level: {v}. Must be one of {[e.value for e in LogLevel]}")
        raise ValueError(f"Log level must be string or LogLevel enum, got {type(v)}")

    model_config = {
        "extra": "forbid",  # Prevent accidental extra fields
    }


_TRUTHY = ("true", "1", "yes", "on")


def load_config_from_env() -> AccessConfig:
    """Load configuration from environment variables.

    This is the ONLY place where os.getenv is allowed.

    Environment variables:
    - LOG_LEVEL: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
    - LOG_JSON: Use JSON log format (true/false, default: false)
    - FUELACCESS_LOG_DECISIONS: Log access decisions (true/false, default: false)
    - FUELACCESS_SEED_SYSTEM_ROLES: Seed system roles (true/false, default: true)
    - SERVICE_NAME: Service name for logging

    Raises:
        ConfigurationError: If a variable holds an invalid value.
    """
    import os

    try:
        return AccessConfig(
            log_level=os.getenv("LOG_LEVEL", "INFO"),
            log_json=os.getenv("LOG_JSON", "false").lower() in _TRUTHY,
            log_decisions=os.getenv("FUELACCESS_LOG_DECISIONS", "false").lower() in _TRUTHY,
            seed_system_roles=os.getenv("FUELACCESS_SEED_SYSTEM_ROLES", "true").lower() in _TRUTHY,
            service_name=os.getenv("SERVICE_NAME"),
        )
    except ValidationError as e:
        raise ConfigurationError(f"Invalid fuelaccess configuration: {e}") from e


__all__ = [
    "AccessConfig",
    "LogLevel",
    "PermissionSpec",
    "load_config_from_env",
]
