from .access import (
    AccessDecision,
    ScopeMatch,
    check_access,
    check_all_access,
    check_any_access,
    check_scope_access,
    get_user_permissions,
    require_access,
)
from .config import AccessConfig, LogLevel, PermissionSpec, load_config_from_env
from .delegation import AssignDecision, can_assign_role
from .engine import RoleEngine, catalog_from_config
from .exceptions import (
    AccessDeniedError,
    CatalogError,
    ConfigurationError,
    FuelAccessError,
    RoleRegistryError,
    UnknownPermissionError,
    error_registry,
    http_status_for,
    register_error,
)
from .logging import (
    AccessLogFormatter,
    AccessLoggerAdapter,
    get_access_logger,
    redact_secrets,
    safe_log_value,
    safe_preview,
    setup_logging,
)
from .permissions import (
    DEFAULT_PERMISSION_CATALOG,
    DEFAULT_PERMISSIONS,
    Permission,
    PermissionAction,
    PermissionCatalog,
    PermissionGrant,
    Permissions,
    RoleScope,
    has_permission,
    parse_grant,
    permission_matches,
)
from .roles import (
    SYSTEM_ROLE_DEFINITIONS,
    AccessScope,
    HierarchyNode,
    Role,
    RoleDraft,
    RoleRegistry,
    UserRole,
    ValidationResult,
    build_role_hierarchy,
    build_system_roles,
    flatten_hierarchy,
    get_effective_permissions,
    validate_role,
)

__all__ = [
    'AccessDecision',
    'ScopeMatch',
    'check_access',
    'check_all_access',
    'check_any_access',
    'check_scope_access',
    'get_user_permissions',
    'require_access',
    'AccessConfig',
    'LogLevel',
    'PermissionSpec',
    'load_config_from_env',
    'AssignDecision',
    'can_assign_role',
    'RoleEngine',
    'catalog_from_config',
    'AccessDeniedError',
    'CatalogError',
    'ConfigurationError',
    'FuelAccessError',
    'RoleRegistryError',
    'UnknownPermissionError',
    'error_registry',
    'http_status_for',
    'register_error',
    'AccessLogFormatter',
    'AccessLoggerAdapter',
    'get_access_logger',
    'redact_secrets',
    'safe_log_value',
    'safe_preview',
    'setup_logging',
    'DEFAULT_PERMISSION_CATALOG',
    'DEFAULT_PERMISSIONS',
    'Permission',
    'PermissionAction',
    'PermissionCatalog',
    'PermissionGrant',
    'Permissions',
    'RoleScope',
    'has_permission',
    'parse_grant',
    'permission_matches',
    'SYSTEM_ROLE_DEFINITIONS',
    'AccessScope',
    'HierarchyNode',
    'Role',
    'RoleDraft',
    'RoleRegistry',
    'UserRole',
    'ValidationResult',
    'build_role_hierarchy',
    'build_system_roles',
    'flatten_hierarchy',
    'get_effective_permissions',
    'validate_role',
]
