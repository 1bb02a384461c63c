"""Auth API routes — login, register, me."""

from fastapi import APIRouter, Depends, HTTPException, status

from saferadius.application.services.auth_service import (
    authenticate_user,
    create_access_token,
    create_user,
)
from saferadius.domain.models.user import User
from saferadius.domain.policy import Role
from saferadius.domain.repositories.user_repository import UserRepository
from saferadius.domain.schemas.auth import LoginRequest, TokenResponse, UserCreate, UserRead
from saferadius.interfaces.api.deps import get_current_user
from saferadius.interfaces.deps import get_user_repository

router = APIRouter(prefix="/api/auth", tags=["Auth"])


@router.post("/login", response_model=TokenResponse)
def login(body: LoginRequest, repo: UserRepository = Depends(get_user_repository)):
    user = authenticate_user(repo, body.email, body.password)
    if not user:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid email or password",
        )

    return TokenResponse(
        access_token=create_access_token(user),
        user=UserRead.model_validate(user),
    )


@router.post("/register", response_model=UserRead, status_code=status.HTTP_201_CREATED)
def register(body: UserCreate, repo: UserRepository = Depends(get_user_repository)):
    # Elevated roles are granted by an admin, never self-assigned
    user = create_user(repo, name=body.name, email=body.email, password=body.password, role=Role.USER)
    return UserRead.model_validate(user)


@router.get("/me", response_model=UserRead)
def get_me(user: User = Depends(get_current_user)):
    return UserRead.model_validate(user)
