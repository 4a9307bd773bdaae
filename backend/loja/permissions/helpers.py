# Overview: Utility functions for grant lookups and validation.

from .categories import AccessRole, Operation, Resource
from .definitions import GRANT_DEFINITIONS


def expand_grants(definitions=GRANT_DEFINITIONS) -> frozenset:
    """Flatten grant definitions into (role, resource, operation) triples."""
    return frozenset(
        (role, resource, operation)
        for role, resource, operations, _description in definitions
        for operation in operations
    )


def get_role_grants(role):
    """Get all grant definitions for a role."""
    return [
        {
            "role": grant[0],
            "resource": grant[1],
            "operations": list(grant[2]),
            "description": grant[3],
        }
        for grant in GRANT_DEFINITIONS
        if grant[0] == role
    ]


def validate_role(role):
    """Check if a role name is one of the fixed account groups."""
    return role in AccessRole.ALL


def validate_resource(resource):
    return resource in Resource.ALL


def validate_operation(operation):
    return operation in Operation.ALL
