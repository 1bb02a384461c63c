"""FastAPI application — main entry point."""

from contextlib import asynccontextmanager

import structlog
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from saferadius.config import get_settings
from saferadius.core.exceptions import AppError, app_error_handler, global_exception_handler
from saferadius.core.logging import configure_logging
from saferadius.core.middleware import setup_middleware
from saferadius.infrastructure.database import Base, SessionLocal, engine

# Import all models so SQLAlchemy knows about them
from saferadius.domain.models.user import User
from saferadius.domain.models.poi import POI

from saferadius.interfaces.api.auth import router as auth_router
from saferadius.interfaces.api.poi import router as poi_router
from saferadius.interfaces.api.admin import router as admin_router

settings = get_settings()

configure_logging()
logger = structlog.get_logger(__name__)


def seed_default_admin() -> None:
    """Create the configured admin account if it does not exist yet."""
    if not (settings.DEFAULT_ADMIN_EMAIL and settings.DEFAULT_ADMIN_PASSWORD):
        return

    from saferadius.application.services.auth_service import create_user
    from saferadius.domain.policy import Role
    from saferadius.infrastructure.repositories.user_repository import SQLAlchemyUserRepository

    db = SessionLocal()
    try:
        repo = SQLAlchemyUserRepository(db, User)
        if repo.get_by_email(settings.DEFAULT_ADMIN_EMAIL) is None:
            create_user(
                repo,
                name="Admin",
                email=settings.DEFAULT_ADMIN_EMAIL,
                password=settings.DEFAULT_ADMIN_PASSWORD,
                role=Role.ADMIN,
            )
            logger.info("Default admin user created", email=settings.DEFAULT_ADMIN_EMAIL)
    finally:
        db.close()


@asynccontextmanager
async def lifespan(app: FastAPI):
    logger.info("Starting SafeRadius", env=settings.ENVIRONMENT)

    # Dev convenience; production schemas should come from migrations
    Base.metadata.create_all(bind=engine)
    logger.info("Database tables created/verified")
    seed_default_admin()

    yield

    logger.info("SafeRadius stopped")


app = FastAPI(
    title="SafeRadius",
    description="Privacy-preserving proximity search over encrypted points of interest",
    version="1.0.0",
    lifespan=lifespan,
)

setup_middleware(app)

app.add_exception_handler(AppError, app_error_handler)
app.add_exception_handler(Exception, global_exception_handler)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(auth_router)
app.include_router(poi_router)
app.include_router(admin_router)


@app.get("/")
def root():
    return {
        "name": "SafeRadius",
        "version": "1.0.0",
        "status": "running",
        "docs": "/docs",
    }


@app.get("/health")
def health():
    return {"status": "healthy"}
