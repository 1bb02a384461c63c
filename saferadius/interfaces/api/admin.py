"""Admin API routes — POI moderation, user roles, stats."""

from fastapi import APIRouter, Depends, Response, status

from saferadius.application.services import admin_service, poi_service
from saferadius.domain.models.user import User
from saferadius.domain.policy import Operation
from saferadius.domain.repositories.poi_repository import POIRepository
from saferadius.domain.repositories.user_repository import UserRepository
from saferadius.domain.schemas.admin import AdminStats
from saferadius.domain.schemas.auth import AdminRegister, RoleUpdate, UserRead
from saferadius.domain.schemas.poi import POIAdminRead
from saferadius.interfaces.api.deps import require_permission
from saferadius.interfaces.deps import get_poi_repository, get_user_repository

router = APIRouter(prefix="/api/admin", tags=["Admin"])


@router.get("/pois", response_model=list[POIAdminRead])
def all_pois(
    repo: POIRepository = Depends(get_poi_repository),
    user: User = Depends(require_permission(Operation.VIEW_ALL_POIS)),
):
    return [POIAdminRead.model_validate(p) for p in poi_service.list_all_pois(repo)]


@router.delete("/pois/{poi_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_poi(
    poi_id: int,
    repo: POIRepository = Depends(get_poi_repository),
    user: User = Depends(require_permission(Operation.DELETE_POI)),
):
    poi_service.delete_poi(repo, poi_id, user)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.get("/users", response_model=list[UserRead])
def list_users(
    repo: UserRepository = Depends(get_user_repository),
    user: User = Depends(require_permission(Operation.LIST_USERS)),
):
    return [UserRead.model_validate(u) for u in admin_service.list_users(repo)]


@router.patch("/users/{user_id}/role", response_model=UserRead)
def update_role(
    user_id: int,
    body: RoleUpdate,
    repo: UserRepository = Depends(get_user_repository),
    user: User = Depends(require_permission(Operation.CHANGE_USER_ROLE)),
):
    updated = admin_service.change_user_role(repo, user, user_id, body.role)
    return UserRead.model_validate(updated)


@router.get("/stats", response_model=AdminStats)
def stats(
    user_repo: UserRepository = Depends(get_user_repository),
    poi_repo: POIRepository = Depends(get_poi_repository),
    user: User = Depends(require_permission(Operation.VIEW_ADMIN_STATS)),
):
    return admin_service.get_stats(user_repo, poi_repo)


@router.post("/register", response_model=UserRead, status_code=status.HTTP_201_CREATED)
def register_admin(body: AdminRegister, repo: UserRepository = Depends(get_user_repository)):
    return UserRead.model_validate(admin_service.register_admin(repo, body))
