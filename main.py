"""
User Service - FastAPI Application

Modular monolith architecture with:
- MongoDB connection pool (shared/persistance), created at startup and
  handed to the app explicitly
- Users module (modules/users)
  - services/: Validation, persistence calls, tagged errors
  - http_handlers/: JSON routes under /api/users
- Web module (modules/web)
  - HTMX-based user management page that calls the JSON API
- Shared HTTP layer (shared/http): middleware and error handlers
"""
import secrets
import sys
import time
from contextlib import asynccontextmanager
from datetime import datetime, timezone
from typing import Optional

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from dotenv import load_dotenv
from pymongo.errors import PyMongoError

# Load environment variables first
load_dotenv()

from config.settings import Settings, settings
from shared.http import (
    BodySizeLimitMiddleware,
    FixedWindowRateLimiter,
    RateLimitMiddleware,
    RequestLoggingMiddleware,
    SecurityHeadersMiddleware,
    register_error_handlers,
)
from shared.persistance.mongo_db import MongoDBPool
from shared.services.logger import get_logger, setup_logging
from modules.users import UserService, users_router
from modules.web import pages_router
from modules.web.services.users_client import UsersApiClient


setup_logging(settings.LOG_LEVEL)
logger = get_logger(__name__)

PROCESS_STARTED_AT = time.monotonic()


def create_app(
    pool: Optional[MongoDBPool] = None,
    *,
    user_service: Optional[UserService] = None,
    users_client: Optional[UsersApiClient] = None,
    limiter: Optional[FixedWindowRateLimiter] = None,
    app_settings: Optional[Settings] = None,
) -> FastAPI:
    """
    Build the application.

    Args:
        pool: MongoDB pool; connected (if needed) and closed by the lifespan
        user_service: Pre-built service, used instead of one bound to the pool
        users_client: API client for the web pages; build it with
                app.state.internal_token to keep its calls out of the rate limit
        limiter: Rate limiter; defaults to the configured fixed window
        app_settings: Settings override
    """
    cfg = app_settings or settings

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """
        Application lifespan handler.
        Binds the user service to the pool on startup, closes connections on shutdown.
        """
        logger.info("🚀 Starting User Service...")

        if pool is not None:
            try:
                pool.connect()
            except PyMongoError as e:
                logger.error(f"❌ MongoDB connection failed: {e}")
                raise
            logger.info(f"✅ MongoDB connected to {cfg.MONGO_DB}")

            if app.state.user_service is None:
                service = UserService(
                    pool.get_collection(cfg.USERS_COLLECTION, cfg.MONGO_DB),
                    strict_ids=cfg.STRICT_OBJECT_IDS,
                )
                service.ensure_indexes()
                app.state.user_service = service

        logger.info(f"Environment: {cfg.ENVIRONMENT}")

        yield

        # Shutdown
        logger.info("👋 Shutting down User Service...")
        await app.state.users_client.aclose()
        if pool is not None:
            pool.close()
            logger.info("✅ MongoDB connection closed")

    app = FastAPI(
        title="User Service",
        description="CRUD service for users backed by MongoDB",
        version="0.1.0",
        lifespan=lifespan,
    )

    # Shared only between the web pages' API client and the rate limiter
    internal_token = secrets.token_urlsafe(32)

    app.state.user_service = user_service
    app.state.internal_token = internal_token
    app.state.users_client = users_client or UsersApiClient(cfg.API_URL, internal_token=internal_token)

    # Middleware: the last one added runs first
    app.add_middleware(RequestLoggingMiddleware)
    app.add_middleware(BodySizeLimitMiddleware, max_bytes=cfg.MAX_BODY_BYTES)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=[cfg.FRONTEND_URL],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.add_middleware(
        RateLimitMiddleware,
        limiter=limiter or FixedWindowRateLimiter(
            max_requests=cfg.RATE_LIMIT_MAX,
            window_seconds=cfg.RATE_LIMIT_WINDOW_SECONDS,
        ),
        internal_token=internal_token,
    )
    app.add_middleware(SecurityHeadersMiddleware)

    register_error_handlers(app)

    @app.get("/health")
    def health_check():
        """Liveness probe; also reports whether MongoDB answers a ping."""
        try:
            database = "connected" if pool is not None and pool.ping() else "disconnected"
        except PyMongoError as e:
            logger.warning(f"Health check ping failed: {e}")
            database = f"error: {e}"

        return {
            "status": "OK",
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "uptime": time.monotonic() - PROCESS_STARTED_AT,
            "database": database,
        }

    app.include_router(users_router)

    # Web module routes (HTMX interface)
    app.include_router(pages_router)

    return app


# Pool connects lazily in the lifespan when served as `uvicorn main:app`
app = create_app(MongoDBPool(settings.DATABASE_URL, settings.MONGO_DB))


def main() -> None:
    """Connect to MongoDB, then serve; exit 1 if the database is unreachable."""
    import uvicorn

    pool = MongoDBPool(settings.DATABASE_URL, settings.MONGO_DB)
    try:
        pool.connect()
    except PyMongoError as e:
        logger.error(f"❌ Database connection error: {e}")
        sys.exit(1)

    uvicorn.run(
        create_app(pool),
        host=settings.HOST,
        port=settings.PORT,
    )
    logger.info(f"Server on port {settings.PORT} stopped")


if __name__ == "__main__":
    main()
