import pytest

from core.errors import AuthorizationError
from core.policy import (
    Action,
    Principal,
    Resource,
    SUPER_ADMIN_ONLY,
    authorize,
    require,
    scoped_department,
)
from db_models.user import UserRole

SUPER = Principal(id=1, role=UserRole.SUPER_ADMIN)
ADMIN = Principal(id=2, role=UserRole.ADMIN, department_id=10)
USER = Principal(id=3, role=UserRole.USER, department_id=10)
DRIFTER = Principal(id=4, role=UserRole.USER)


@pytest.mark.parametrize("action", list(Action))
def test_super_admin_may_do_anything(action):
    assert authorize(SUPER, action, Resource(department_id=99, edited_in_window=True)).allowed


@pytest.mark.parametrize("principal", [ADMIN, USER, DRIFTER])
def test_single_record_reads_are_open(principal):
    assert authorize(principal, Action.ASSET_READ, Resource(department_id=99)).allowed


@pytest.mark.parametrize("action", sorted(SUPER_ADMIN_ONLY, key=lambda a: a.value))
def test_super_admin_only_actions(action):
    assert not authorize(ADMIN, action, Resource(department_id=10)).allowed
    assert not authorize(USER, action, Resource(department_id=10)).allowed


@pytest.mark.parametrize("action", [Action.ASSET_EDIT, Action.TRANSFER_REQUEST, Action.AUDIT_SUBMIT, Action.ASSET_CREATE])
def test_department_writes(action):
    own = Resource(department_id=10)
    other = Resource(department_id=11)
    assert authorize(ADMIN, action, own).allowed
    assert authorize(USER, action, own).allowed
    assert not authorize(USER, action, other).allowed
    assert not authorize(DRIFTER, action, Resource(department_id=None)).allowed


@pytest.mark.parametrize("action", [Action.ASSET_EDIT, Action.TRANSFER_REQUEST, Action.AUDIT_SUBMIT])
def test_second_edit_in_window_is_denied(action):
    decision = authorize(USER, action, Resource(department_id=10, edited_in_window=True))
    assert not decision.allowed
    assert "edit window" in decision.reason


def test_create_is_not_windowed():
    assert authorize(USER, Action.ASSET_CREATE, Resource(department_id=10, edited_in_window=True)).allowed


@pytest.mark.parametrize("action", [Action.TRANSFER_RESOLVE, Action.AUDIT_CONFIRM])
def test_resolution_needs_admin_of_the_department(action):
    assert authorize(ADMIN, action, Resource(department_id=10)).allowed
    assert not authorize(ADMIN, action, Resource(department_id=11)).allowed
    assert not authorize(USER, action, Resource(department_id=10)).allowed


def test_require_raises_with_reason():
    with pytest.raises(AuthorizationError, match="department"):
        require(DRIFTER, Action.ASSET_EDIT, Resource(department_id=10))


def test_scoped_department():
    assert scoped_department(SUPER) == (True, None)
    assert scoped_department(SUPER, 5) == (True, 5)
    assert scoped_department(USER) == (True, 10)
    assert scoped_department(USER, 10) == (True, 10)
    assert scoped_department(DRIFTER) == (False, None)
    assert scoped_department(DRIFTER, 10) == (False, None)
    with pytest.raises(AuthorizationError):
        scoped_department(USER, 11)
