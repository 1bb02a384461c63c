import pytest

from saferadius.core.exceptions import SelfDemotionException
from saferadius.domain.policy import Operation, Role, ensure_not_self_demotion, is_allowed

EXPECTED = {
    Operation.SUBMIT_POI: {"owner", "admin"},
    Operation.VIEW_OWN_POIS: {"owner", "admin"},
    Operation.SEARCH_POIS: {"user", "owner", "admin"},
    Operation.VIEW_ALL_POIS: {"admin"},
    Operation.DELETE_POI: {"admin"},
    Operation.LIST_USERS: {"admin"},
    Operation.CHANGE_USER_ROLE: {"admin"},
    Operation.VIEW_ADMIN_STATS: {"admin"},
}


@pytest.mark.parametrize("operation", list(Operation))
@pytest.mark.parametrize("role", ["user", "owner", "admin"])
def test_permission_table(role, operation):
    assert is_allowed(role, operation) is (role in EXPECTED[operation])


def test_accepts_role_enum():
    assert is_allowed(Role.ADMIN, Operation.DELETE_POI)
    assert not is_allowed(Role.OWNER, Operation.DELETE_POI)


@pytest.mark.parametrize("role", ["", "superuser", "ADMIN", None])
def test_unknown_roles_are_denied(role):
    assert not any(is_allowed(role, op) for op in Operation)


@pytest.mark.parametrize("new_role", ["user", "owner"])
def test_admin_cannot_demote_self(new_role):
    with pytest.raises(SelfDemotionException):
        ensure_not_self_demotion(1, "admin", 1, new_role)


def test_owner_cannot_demote_self():
    with pytest.raises(SelfDemotionException):
        ensure_not_self_demotion(7, Role.OWNER, 7, Role.USER)


def test_reassigning_own_role_is_allowed():
    ensure_not_self_demotion(1, "admin", 1, "admin")


@pytest.mark.parametrize("new_role", ["user", "owner", "admin"])
def test_changing_someone_else_is_not_guarded(new_role):
    ensure_not_self_demotion(1, "admin", 2, new_role)
