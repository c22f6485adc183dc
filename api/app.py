"""
FastAPI application factory.

Creates and configures the FastAPI application instance.
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from shared.config import get_settings
from shared.database import missing_supabase_settings

from .dependencies import get_container
from .errors import register_exception_handlers
from .routes import health
from modules.admin.routes import router as admin_router
from modules.comments.routes import router as comments_router
from modules.contact.routes import router as contact_router
from modules.navigation.routes import router as navigation_router
from modules.posts.routes import router as posts_router
from modules.profiles.routes import router as profiles_router
from modules.reading.routes import router as reading_router
from modules.session.routes import router as session_router
from modules.uploads.routes import router as uploads_router

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Log the configuration the process starts with.

    Settings come from the installed service container. Missing Supabase
    settings are reported here rather than on the first request that
    needs the client.
    """
    settings = get_container().settings
    logger.info(
        f"Starting {settings.app_name} on {settings.host}:{settings.port} "
        f"(gateway: {settings.gateway_backend})"
    )
    if settings.gateway_backend == "supabase":
        missing = missing_supabase_settings(settings)
        if missing:
            logger.warning(f"Supabase gateway is not configured, missing: {', '.join(missing)}")
    if not settings.supabase_jwt_secret:
        logger.warning("BLOGGAZERS_SUPABASE_JWT_SECRET is not set; authenticated routes will return 401")
    yield
    logger.info(f"Shutting down {settings.app_name}")


def create_app() -> FastAPI:
    """
    Create and configure the FastAPI application.

    Returns:
        Configured FastAPI instance
    """
    settings = get_settings()

    app = FastAPI(
        title=settings.app_name,
        description="Multi-author blogging platform API",
        version=settings.app_version,
        lifespan=lifespan,
        docs_url="/api/docs" if settings.debug else None,
        redoc_url="/api/redoc" if settings.debug else None,
    )

    # Configure CORS
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=settings.cors_allow_credentials,
        allow_methods=settings.cors_allow_methods,
        allow_headers=settings.cors_allow_headers,
    )

    register_exception_handlers(app)

    # Register routes
    app.include_router(health.router, prefix="/api", tags=["health"])
    app.include_router(session_router, prefix="/api/session", tags=["session"])
    app.include_router(navigation_router, prefix="/api/navigation", tags=["navigation"])
    app.include_router(profiles_router, prefix="/api/profiles", tags=["profiles"])
    app.include_router(posts_router, prefix="/api/posts", tags=["posts"])
    app.include_router(reading_router, prefix="/api/reading", tags=["reading"])
    app.include_router(comments_router, prefix="/api/comments", tags=["comments"])
    app.include_router(uploads_router, prefix="/api/uploads", tags=["uploads"])
    app.include_router(admin_router, prefix="/api/admin", tags=["admin"])
    app.include_router(contact_router, prefix="/api/contact", tags=["contact"])

    return app


# Application instance for uvicorn
app = create_app()
