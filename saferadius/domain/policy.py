"""
Role-gated access policy.

Every endpoint maps to one ``Operation``; the static ``PERMISSIONS`` table is
the only place that decides which roles may perform it. The self-demotion
guard is a separate rule applied where roles are changed.
"""

from enum import Enum
from typing import Any

from saferadius.core.exceptions import SelfDemotionException


class Role(str, Enum):
    USER = "user"
    OWNER = "owner"
    ADMIN = "admin"


class Operation(str, Enum):
    SUBMIT_POI = "submit_poi"
    VIEW_OWN_POIS = "view_own_pois"
    SEARCH_POIS = "search_pois"
    VIEW_ALL_POIS = "view_all_pois"
    DELETE_POI = "delete_poi"
    LIST_USERS = "list_users"
    CHANGE_USER_ROLE = "change_user_role"
    VIEW_ADMIN_STATS = "view_admin_stats"


_EVERYONE = frozenset(Role)
_MANAGERS = frozenset({Role.OWNER, Role.ADMIN})
_ADMINS = frozenset({Role.ADMIN})

PERMISSIONS: dict[Operation, frozenset[Role]] = {
    Operation.SUBMIT_POI: _MANAGERS,
    Operation.VIEW_OWN_POIS: _MANAGERS,
    Operation.SEARCH_POIS: _EVERYONE,
    Operation.VIEW_ALL_POIS: _ADMINS,
    Operation.DELETE_POI: _ADMINS,
    Operation.LIST_USERS: _ADMINS,
    Operation.CHANGE_USER_ROLE: _ADMINS,
    Operation.VIEW_ADMIN_STATS: _ADMINS,
}

# Higher rank means more privileges
ROLE_RANK = {Role.USER: 0, Role.OWNER: 1, Role.ADMIN: 2}


def parse_role(value: Any) -> Role | None:
    """Return the Role for ``value`` or None if it is not a known role."""
    try:
        return Role(value)
    except ValueError:
        return None


def is_allowed(role: Any, operation: Operation) -> bool:
    """Whether ``role`` may perform ``operation``. Unknown roles are denied."""
    parsed = parse_role(role)
    if parsed is None:
        return False
    return parsed in PERMISSIONS.get(operation, frozenset())


def ensure_not_self_demotion(actor_id: Any, actor_role: Any, target_id: Any, new_role: Any) -> None:
    """Reject an actor lowering their own role.

    Raises SelfDemotionException; changes to other accounts always pass.
    """
    if actor_id != target_id:
        return
    current = parse_role(actor_role)
    requested = parse_role(new_role)
    if current is None or requested is None:
        return
    if ROLE_RANK[requested] < ROLE_RANK[current]:
        raise SelfDemotionException(
            details={"current_role": current.value, "requested_role": requested.value}
        )
