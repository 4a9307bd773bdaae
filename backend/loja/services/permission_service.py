# Overview: Access policy and per-call access context; every public service operation checks grants here.

"""
Role-Based Access for the store database

WHY: Each store role (gerencia / funcionario / cliente) holds a fixed set of
table and view grants. The grants are an explicit policy table keyed by
(role, resource, operation), and callers pass an AccessContext into every
operation instead of relying on an ambient session identity.

DESIGN PRINCIPLES:
- Fail closed: deny by default, require an explicit grant
- Check before touching data: a denied call performs no reads or writes
- Log denials only: granted checks are not logged
"""

from __future__ import annotations

import logging
from dataclasses import dataclass

from ..errors import InvalidArgumentError, NotFoundError
from ..extensions import db
from ..models import User
from ..permissions import (
    GRANT_DEFINITIONS,
    expand_grants,
    validate_operation,
    validate_resource,
    validate_role,
)


logger = logging.getLogger(__name__)


class PermissionDeniedError(Exception):
    """Raised when a role lacks a required grant."""
    def __init__(self, role: str, resource: str, operation: str):
        super().__init__(f"Permission denied: {operation} on {resource} for role {role}")
        self.role = role
        self.resource = resource
        self.operation = operation


class AccessPolicy:
    """Immutable grant table of (role, resource, operation) triples."""

    def __init__(self, grants):
        grants = frozenset(grants)
        for role, resource, operation in grants:
            if not (validate_role(role) and validate_resource(resource) and validate_operation(operation)):
                raise InvalidArgumentError(
                    "Unknown grant",
                    details={"role": role, "resource": resource, "operation": operation},
                )
        self._grants = grants

    @classmethod
    def from_definitions(cls, definitions=GRANT_DEFINITIONS) -> "AccessPolicy":
        return cls(expand_grants(definitions))

    def allows(self, role: str, resource: str, operation: str) -> bool:
        return (role, resource, operation) in self._grants

    def grants_for(self, role: str) -> set[tuple[str, str]]:
        return {(resource, operation) for r, resource, operation in self._grants if r == role}

    def __len__(self) -> int:
        return len(self._grants)


DEFAULT_POLICY = AccessPolicy.from_definitions()


@dataclass(frozen=True)
class AccessContext:
    """
    Who is calling, resolved to a role, plus the policy to check it against.

    Usage:
        access = context_for_role(AccessRole.EMPLOYEE)
        sales_service.add_item(sale.id, product.id, 2, access=access)
    """
    role: str
    user_id: int | None = None
    policy: AccessPolicy = DEFAULT_POLICY

    def can(self, resource: str, operation: str) -> bool:
        return self.policy.allows(self.role, resource, operation)

    def require(self, *grants: tuple[str, str]) -> None:
        """Raise PermissionDeniedError on the first (resource, operation) not granted."""
        for resource, operation in grants:
            if not self.can(resource, operation):
                logger.warning(
                    "Permission denied: role=%s user_id=%s operation=%s resource=%s",
                    self.role,
                    self.user_id,
                    operation,
                    resource,
                )
                raise PermissionDeniedError(self.role, resource, operation)


def context_for_role(role: str, user_id: int | None = None, policy: AccessPolicy = DEFAULT_POLICY) -> AccessContext:
    if not validate_role(role):
        raise InvalidArgumentError(f"Unknown role: {role}", details={"role": role})
    return AccessContext(role=role, user_id=user_id, policy=policy)


def context_for_user(user_id: int, policy: AccessPolicy = DEFAULT_POLICY) -> AccessContext:
    """Resolve a usuarios row to the access context of its group."""
    user = db.session.get(User, user_id)
    if user is None:
        raise NotFoundError("User not found", details={"user_id": user_id})
    return context_for_role(user.group.name, user_id=user.id, policy=policy)
