# Overview: Account groups and users; the replacement for the fixed database logins.

from __future__ import annotations

import logging

from ..errors import NotFoundError
from ..extensions import db
from ..models import User, UserGroup
from ..permissions import AccessRole, Operation, ROLE_DESCRIPTIONS, Resource
from ..validation import require_text
from .concurrency import run_with_retry


logger = logging.getLogger(__name__)


# One login per group
DEFAULT_ACCOUNTS = [
    ("gerencia", AccessRole.MANAGER),
    ("funcionario", AccessRole.EMPLOYEE),
    ("cliente", AccessRole.CUSTOMER),
]


def ensure_default_groups() -> list[UserGroup]:
    """
    Create the GERENCIA / FUNCIONARIO / CLIENTE groups if missing.

    Safe to call repeatedly (idempotent). Bootstrap only: no access check.
    """
    groups = []
    for role in AccessRole.ALL:
        group = db.session.query(UserGroup).filter_by(name=role).first()
        if group is None:
            group = UserGroup(name=role, description=ROLE_DESCRIPTIONS[role])
            db.session.add(group)
            logger.info("Group created: %s", role)
        groups.append(group)
    db.session.commit()
    return groups


def ensure_default_accounts() -> list[User]:
    """Create one account per default group if missing (idempotent)."""
    ensure_default_groups()
    users = []
    for name, role in DEFAULT_ACCOUNTS:
        group = db.session.query(UserGroup).filter_by(name=role).one()
        user = db.session.query(User).filter_by(name=name, group_id=group.id).first()
        if user is None:
            user = User(name=name, group_id=group.id)
            db.session.add(user)
            logger.info("Account created: %s (%s)", name, role)
        users.append(user)
    db.session.commit()
    return users


def get_group(name: str) -> UserGroup:
    group = db.session.query(UserGroup).filter_by(name=name).first()
    if group is None:
        raise NotFoundError(f"Group not found: {name}", details={"group": name})
    return group


def create_user(name, group_name: str, *, access) -> User:
    access.require((Resource.USERS, Operation.INSERT))
    name = require_text(name, "name", 120)

    def _op():
        group = get_group(group_name)
        user = User(name=name, group_id=group.id)
        db.session.add(user)
        db.session.commit()
        logger.info("User created: user_id=%s group=%s", user.id, group.name)
        return user

    return run_with_retry(_op)


def list_users(*, access) -> list[User]:
    access.require((Resource.USERS, Operation.SELECT))
    return db.session.query(User).order_by(User.id).all()
