"""
Role-based authorization for gated actions, plus the FastAPI dependency that
enforces it on the routers.
"""
import logging
from dataclasses import dataclass
from typing import Optional

from fastapi import Depends, HTTPException, status

from models.enums import Action, Role
from utils import config
from utils.auth import get_current_user

logger = logging.getLogger(__name__)

WORKER_ACTIONS = frozenset({Action.REPORT_INCIDENT, Action.VIEW_OWN_INCIDENTS_ONLY})

# Actions that only make sense against the caller's own records
OWNER_SCOPED_ACTIONS = frozenset({Action.VIEW_OWN_INCIDENTS_ONLY})


@dataclass(frozen=True)
class PermissionPolicy:
    managers_can_report_incidents: bool = True


def default_policy() -> PermissionPolicy:
    return PermissionPolicy(managers_can_report_incidents=config.MANAGERS_CAN_REPORT_INCIDENTS)


def _coerce(enum_cls, value):
    if isinstance(value, enum_cls):
        return value
    try:
        return enum_cls(value)
    except ValueError:
        return None


def can_perform(action, user, resource_owner_id=None, policy: Optional[PermissionPolicy] = None) -> bool:
    """
    Decide whether ``user`` may perform ``action``.

    Unknown actions, unknown roles and a missing user are all denied.

    Args:
        action: An ``Action`` or its string value
        user: Object with ``id`` and ``role``
        resource_owner_id: Owner of the targeted record, when there is one
        policy: Overrides for configurable rules; defaults to the environment

    Returns:
        True if permitted
    """
    if user is None:
        return False
    action = _coerce(Action, action)
    role = _coerce(Role, getattr(user, "role", None))
    if action is None or role is None:
        return False
    policy = policy or default_policy()

    if role == Role.MANAGER:
        if action == Action.REPORT_INCIDENT:
            return policy.managers_can_report_incidents
        return True

    if action not in WORKER_ACTIONS:
        return False
    if action in OWNER_SCOPED_ACTIONS and resource_owner_id is not None:
        return resource_owner_id == user.id
    return True


def require_action(action: Action):
    """Dependency factory: 403 unless the current user may perform ``action``."""

    def dependency(current_user=Depends(get_current_user)):
        if not can_perform(action, current_user):
            logger.info(f"User {current_user.id} denied action {action.value}")
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail="You do not have permission to perform this action"
            )
        return current_user

    return dependency
