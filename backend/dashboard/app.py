"""FastAPI application factory"""

import asyncio
import logging
import time
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import PlainTextResponse

from dashboard.core.config import Settings, get_settings
from dashboard.core.database import DatabaseManager
from dashboard.core.logging import setup_logging
from dashboard.routers import analytics_router, feedback_router, stats_router
from dashboard.services import TelemetryClient

logger = logging.getLogger(__name__)

VERSION = "1.0.0"


async def _db_retry_loop(db_manager: DatabaseManager) -> None:
    """Background loop to retry DB connection after startup failure."""
    delay = 5
    max_delay = 60
    while True:
        await asyncio.sleep(delay)
        if db_manager.is_connected:
            logger.info("DB retry loop: pool already connected, stopping")
            return
        try:
            await db_manager.connect()
            logger.info("Database connected (background retry)")
            return
        except asyncio.CancelledError:
            return
        except Exception as e:
            logger.warning(
                f"DB background retry failed: {type(e).__name__}: {e}, next retry in {min(delay * 2, max_delay)}s"
            )
            delay = min(delay * 2, max_delay)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Handle startup and shutdown"""
    settings: Settings = app.state.settings
    app.state.start_time = time.time()

    # Startup
    logger.info("Starting Impostor admin API server")
    logger.info(f"Environment: {settings.environment}")
    logger.info(f"Game server: {settings.game_server_url}")

    db_manager = DatabaseManager(
        settings.database_url,
        ssl=settings.database_ssl,
        command_timeout=settings.database_command_timeout,
    )
    app.state.db_manager = db_manager
    app.state.telemetry = TelemetryClient(
        settings.game_server_url, timeout=settings.telemetry_timeout
    )

    # Requests that arrive before the pool is ready get 503 from get_db_pool
    retry_task: asyncio.Task | None = None
    try:
        await asyncio.wait_for(db_manager.connect(), timeout=30)
        logger.info("Database connected")
    except Exception as e:
        logger.error(
            f"DB connection failed during startup: {type(e).__name__}: {e}, retrying in background"
        )
        retry_task = asyncio.create_task(_db_retry_loop(db_manager))

    yield

    # Shutdown
    logger.info("Shutting down Impostor admin API server")
    if retry_task:
        retry_task.cancel()
    try:
        await app.state.telemetry.close()
        await db_manager.disconnect()
        logger.info("Database disconnected")
    except Exception as e:
        logger.exception(f"Error during shutdown: {e}")


def create_app(settings: Settings | None = None) -> FastAPI:
    """Create and configure FastAPI application"""
    settings = settings or get_settings()

    # Setup logging first
    setup_logging(settings)

    app = FastAPI(
        title="Impostor Admin API",
        description="Operations dashboard API - live and historical game stats",
        version=VERSION,
        lifespan=lifespan,
        docs_url="/docs" if settings.is_development else None,
        redoc_url="/redoc" if settings.is_development else None,
    )
    app.state.settings = settings
    app.state.start_time = time.time()

    # Configure CORS
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Register routers
    app.include_router(feedback_router.router)
    app.include_router(stats_router.router)
    app.include_router(analytics_router.router)

    # Root endpoint
    @app.get("/")
    async def root():
        """Root endpoint - minimal service info"""
        return {"service": "impostor-admin-api", "status": "running"}

    # Liveness probe — always 200, no external dependency
    @app.get("/health")
    async def health():
        """Liveness check (no DB dependency)"""
        db_manager = getattr(app.state, "db_manager", None)
        return {
            "status": "ok",
            "database": db_manager is not None and db_manager.is_connected,
            "uptime_seconds": int(time.time() - app.state.start_time),
        }

    # Detailed status endpoint (includes DB health)
    @app.get("/status")
    async def status():
        """Readiness / status endpoint — includes actual DB health check"""
        db_manager = getattr(app.state, "db_manager", None)
        db_ok = db_manager is not None and await db_manager.check_health()
        return {
            "service": "impostor-admin-api",
            "version": VERSION,
            "uptime_seconds": int(time.time() - app.state.start_time),
            "db_connected": db_ok,
            "environment": settings.environment,
        }

    # Ping endpoint
    @app.api_route("/ping", methods=["GET", "HEAD"], response_class=PlainTextResponse)
    async def ping():
        """Ping endpoint"""
        return "pong"

    logger.info("FastAPI application configured")

    return app
