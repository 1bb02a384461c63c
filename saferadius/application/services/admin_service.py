"""Admin service — user management, role changes and dashboard stats."""

import hmac
from datetime import datetime, timedelta, timezone
from typing import List

import structlog

from saferadius.config import get_settings
from saferadius.core.exceptions import EntityNotFoundException, ForbiddenException
from saferadius.domain.models.user import User
from saferadius.domain.policy import Role, ensure_not_self_demotion
from saferadius.domain.repositories.poi_repository import POIRepository
from saferadius.domain.repositories.user_repository import UserRepository
from saferadius.domain.schemas.admin import AdminStats
from saferadius.domain.schemas.auth import AdminRegister
from saferadius.application.services.auth_service import create_user

logger = structlog.get_logger(__name__)


def list_users(repo: UserRepository) -> List[User]:
    return repo.list_newest_first()


def change_user_role(repo: UserRepository, actor: User, user_id: int, new_role: Role) -> User:
    """Assign ``new_role`` to a user. An actor may never lower their own role."""
    ensure_not_self_demotion(actor.id, actor.role, user_id, new_role)

    user = repo.get_by_id(user_id)
    if user is None:
        raise EntityNotFoundException("User not found", details={"user_id": user_id})

    previous = user.role
    user = repo.update(user, {"role": Role(new_role).value})
    logger.info("User role changed", user_id=user.id, previous_role=previous, new_role=user.role, changed_by=actor.id)
    return user


def get_stats(user_repo: UserRepository, poi_repo: POIRepository) -> AdminStats:
    settings = get_settings()
    since = datetime.now(timezone.utc) - timedelta(days=settings.RECENT_ACTIVITY_DAYS)
    return AdminStats(
        total_users=user_repo.count_by_role(Role.USER.value),
        total_owners=user_repo.count_by_role(Role.OWNER.value),
        total_pois=poi_repo.count(),
        recent_activity=poi_repo.count_created_since(since),
    )


def register_admin(repo: UserRepository, body: AdminRegister) -> User:
    """Create an admin account for a caller holding the admin secret."""
    secret = get_settings().ADMIN_SECRET_KEY
    if not secret or not hmac.compare_digest(body.secret.encode("utf-8"), secret.encode("utf-8")):
        raise ForbiddenException("Invalid secret key")
    return create_user(repo, name=body.name, email=body.email, password=body.password, role=Role.ADMIN)
