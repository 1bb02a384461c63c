"""Auth service — JWT token management and password hashing."""

from datetime import datetime, timedelta, timezone
from typing import Optional

import structlog
from jose import JWTError, jwt
from passlib.context import CryptContext

from saferadius.config import get_settings
from saferadius.core.exceptions import DuplicateEmailException
from saferadius.domain.models.user import User
from saferadius.domain.policy import Role
from saferadius.domain.repositories.user_repository import UserRepository

logger = structlog.get_logger(__name__)
pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")


def hash_password(password: str) -> str:
    return pwd_context.hash(password)


def verify_password(plain_password: str, hashed_password: str) -> bool:
    return pwd_context.verify(plain_password, hashed_password)


def create_access_token(user: User, expires_delta: Optional[timedelta] = None) -> str:
    settings = get_settings()
    expire = datetime.now(timezone.utc) + (
        expires_delta or timedelta(minutes=settings.JWT_EXPIRATION_MINUTES)
    )
    to_encode = {
        "sub": str(user.id),
        "email": user.email,
        "role": user.role,
        "exp": expire,
    }
    return jwt.encode(to_encode, settings.SECRET_KEY, algorithm=settings.JWT_ALGORITHM)


def decode_access_token(token: str) -> Optional[dict]:
    settings = get_settings()
    try:
        return jwt.decode(token, settings.SECRET_KEY, algorithms=[settings.JWT_ALGORITHM])
    except JWTError:
        return None


def authenticate_user(repo: UserRepository, email: str, password: str) -> Optional[User]:
    user = repo.get_by_email(email)
    if not user or not verify_password(password, user.password_hash):
        return None
    if not user.is_active:
        return None
    return user


def create_user(
    repo: UserRepository,
    name: str,
    email: str,
    password: str,
    role: Role = Role.USER,
) -> User:
    email = email.strip().lower()
    if repo.get_by_email(email):
        raise DuplicateEmailException(details={"email": email})

    user = repo.create(
        {
            "name": name,
            "email": email,
            "password_hash": hash_password(password),
            "role": Role(role).value,
        }
    )
    logger.info("User created", user_id=user.id, role=user.role)
    return user
