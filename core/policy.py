# core/policy.py
"""
Visibility and edit policy.

A single capability function decides whether a principal may perform an
action on a resource. Handlers call `require(...)` once per request instead of
branching on role and department themselves.
"""
from dataclasses import dataclass
from enum import Enum
from typing import NamedTuple

from core.errors import AuthorizationError
from db_models.user import UserRole


class Action(str, Enum):
    ASSET_READ = "asset.read"
    ASSET_CREATE = "asset.create"
    ASSET_EDIT = "asset.edit"
    ASSET_DELETE = "asset.delete"
    ASSET_SET_STATUS = "asset.set_status"
    TRANSFER_REQUEST = "transfer.request"
    TRANSFER_RESOLVE = "transfer.resolve"
    AUDIT_SUBMIT = "audit.submit"
    AUDIT_CONFIRM = "audit.confirm"
    CATALOG_WRITE = "catalog.write"
    DEPARTMENT_WRITE = "department.write"
    LOCATION_WRITE = "location.write"
    SETTINGS_WRITE = "settings.write"
    USER_MANAGE = "user.manage"


# Writes that count against the once-per-asset edit window.
WINDOWED_ACTIONS = frozenset({Action.ASSET_EDIT, Action.TRANSFER_REQUEST, Action.AUDIT_SUBMIT})

# Department-scoped writes open to Admin and User alike.
DEPARTMENT_WRITES = WINDOWED_ACTIONS | {Action.ASSET_CREATE}

SUPER_ADMIN_ONLY = frozenset({
    Action.ASSET_DELETE,
    Action.ASSET_SET_STATUS,
    Action.CATALOG_WRITE,
    Action.DEPARTMENT_WRITE,
    Action.LOCATION_WRITE,
    Action.SETTINGS_WRITE,
    Action.USER_MANAGE,
})


@dataclass(frozen=True)
class Principal:
    """Already-authenticated caller."""
    id: int
    role: UserRole
    department_id: int | None = None

    @property
    def is_super_admin(self) -> bool:
        return self.role == UserRole.SUPER_ADMIN

    @property
    def is_admin(self) -> bool:
        return self.role == UserRole.ADMIN

    @property
    def has_department(self) -> bool:
        return self.department_id is not None


@dataclass(frozen=True)
class Resource:
    """
    What the action targets.

    `department_id` is the owning department for asset actions, the destination
    department for transfer resolution and the audit's department for confirms.
    `edited_in_window` is true when the principal already edited this asset
    inside the currently active edit window.
    """
    department_id: int | None = None
    edited_in_window: bool = False


class Decision(NamedTuple):
    allowed: bool
    reason: str | None = None


ALLOW = Decision(True)


def _deny(reason: str) -> Decision:
    return Decision(False, reason)


def authorize(principal: Principal, action: Action, resource: Resource | None = None) -> Decision:
    resource = resource or Resource()

    if principal.is_super_admin:
        return ALLOW

    if action == Action.ASSET_READ:
        return ALLOW

    if action in SUPER_ADMIN_ONLY:
        return _deny("Only a SuperAdmin may perform this action")

    if not principal.has_department:
        return _deny(
            "Users without a department can only view assets. "
            "Ask an administrator to assign a department."
        )

    if resource.department_id != principal.department_id:
        return _deny("The record belongs to another department")

    if action in DEPARTMENT_WRITES:
        if action in WINDOWED_ACTIONS and resource.edited_in_window:
            return _deny("This asset was already edited by you during the current edit window")
        return ALLOW

    if action in (Action.TRANSFER_RESOLVE, Action.AUDIT_CONFIRM):
        if principal.is_admin:
            return ALLOW
        return _deny("Only an Admin of the department may resolve this request")

    return _deny(f"Action {action.value} is not permitted")


def require(principal: Principal, action: Action, resource: Resource | None = None) -> None:
    decision = authorize(principal, action, resource)
    if not decision.allowed:
        raise AuthorizationError(decision.reason or "Not enough permissions")


def scoped_department(principal: Principal, requested: int | None = None) -> tuple[bool, int | None]:
    """
    Resolve the department filter for a collection read.

    Returns (visible, department_id). `visible` is False when the principal can
    see nothing at all. department_id None with visible True means unfiltered.
    """
    if principal.is_super_admin:
        return True, requested
    if not principal.has_department:
        return False, None
    if requested is not None and requested != principal.department_id:
        raise AuthorizationError("You can only list records of your own department")
    return True, principal.department_id
