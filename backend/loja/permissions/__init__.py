# Overview: Access policy package.
# Re-exports the role/resource/operation constants and grant definitions.

from .categories import AccessRole, Operation, Resource
from .definitions import (
    GRANT_DEFINITIONS,
    MANAGER_GRANTS,
    EMPLOYEE_GRANTS,
    CUSTOMER_GRANTS,
    ROLE_DESCRIPTIONS,
)
from .helpers import (
    expand_grants,
    get_role_grants,
    validate_role,
    validate_resource,
    validate_operation,
)

__all__ = [
    "AccessRole",
    "Operation",
    "Resource",
    "GRANT_DEFINITIONS",
    "MANAGER_GRANTS",
    "EMPLOYEE_GRANTS",
    "CUSTOMER_GRANTS",
    "ROLE_DESCRIPTIONS",
    "expand_grants",
    "get_role_grants",
    "validate_role",
    "validate_resource",
    "validate_operation",
]
