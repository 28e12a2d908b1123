"""
app/main.py

Purpose: Application entry point

- Initializes FastAPI app
- Loads configuration and logging
- Builds the Telegram / Supabase clients once and shares them via BotContext
- Registers API routes (webhook, admin) and exception handlers
- Starts degraded (503 on bot endpoints) when secrets are missing
"""

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from contextlib import asynccontextmanager
import time

import httpx

from app.core.config import settings, get_missing_settings
from app.core.errors import add_exception_handlers
from app.core.logging import setup_logging, get_logger
from app.db.supabase import create_supabase_client, close_supabase_client
from app.flow.context import BotContext
from app.services.market_data_service import MockMarketDataProvider
from app.services.store_service import StoreService
from app.services.telegram_service import TelegramService
from app.api import admin, webhook

# Initialize logging first
setup_logging()
logger = get_logger(__name__)

APP_VERSION = "1.0.0"


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Application lifespan manager.
    Handles startup and shutdown events.
    """
    # Startup
    logger.info("🚀 Starting Borsa Bot application...")

    app.state.config = settings
    app.state.bot_context = None
    app.state.missing_settings = get_missing_settings(settings)

    http_client = None
    supabase_client = None

    if app.state.missing_settings:
        logger.warning(
            f"⚠️ Missing configuration: {', '.join(app.state.missing_settings)}. "
            "Bot endpoints will answer 503 until it is set."
        )
    else:
        try:
            http_client = httpx.AsyncClient(timeout=settings.TELEGRAM_TIMEOUT)
            supabase_client = await create_supabase_client(settings)

            store = StoreService(supabase_client)
            app.state.bot_context = BotContext(
                telegram=TelegramService(
                    token=settings.TELEGRAM_BOT_TOKEN,
                    client=http_client,
                    api_base=settings.TELEGRAM_API_BASE,
                    timeout=settings.TELEGRAM_TIMEOUT,
                ),
                store=store,
                market=MockMarketDataProvider(seed=settings.MARKET_DATA_SEED),
                config=settings,
            )

            if await store.ping():
                logger.info("✅ Database health check passed")
            else:
                logger.warning("⚠️ Database health check failed during startup")

        except Exception as e:
            logger.critical(f"Failed to start application: {str(e)}", exc_info=True)
            if http_client is not None:
                await http_client.aclose()
            raise

    logger.info("🎉 Borsa Bot application started")
    logger.info(f"Environment: {settings.ENVIRONMENT}")
    logger.info(f"Debug Mode: {settings.DEBUG}")

    yield  # Application runs here

    # Shutdown
    logger.info("🛑 Shutting down Borsa Bot application...")

    try:
        if http_client is not None:
            await http_client.aclose()
            logger.info("✅ Telegram HTTP client closed")

        await close_supabase_client(supabase_client)

        logger.info("👋 Borsa Bot application shut down successfully")

    except Exception as e:
        logger.error(f"Error during shutdown: {str(e)}", exc_info=True)


# Create FastAPI app with lifespan
app = FastAPI(
    title="Borsa Bot",
    description="Membership-gated Telegram bot for Borsa Istanbul lookups",
    version=APP_VERSION,
    lifespan=lifespan,
    debug=settings.DEBUG,
    docs_url="/docs" if settings.is_development else None,  # Disable docs in production
    redoc_url="/redoc" if settings.is_development else None,
)

# CORS Middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# Request timing middleware
@app.middleware("http")
async def add_process_time_header(request: Request, call_next):
    """Add processing time header to all responses."""
    start_time = time.time()
    response = await call_next(request)
    process_time = time.time() - start_time
    response.headers["X-Process-Time"] = str(process_time)

    if process_time > 5.0:
        logger.warning(
            f"Slow request detected: {request.method} {request.url.path}",
            extra={"process_time": process_time}
        )

    return response


add_exception_handlers(app)

# Register API routes
app.include_router(webhook.router, prefix=settings.API_PREFIX, tags=["Webhook"])
app.include_router(admin.router, prefix=settings.API_PREFIX, tags=["Admin"])


# Root endpoint
@app.get("/", tags=["Health"])
async def root():
    """Root endpoint - basic info."""
    return {
        "name": "Borsa Bot API",
        "version": APP_VERSION,
        "description": "Telegram bot backend for Borsa Istanbul lookups",
        "status": "running",
        "environment": settings.ENVIRONMENT
    }


# Health check endpoint
@app.get("/health", tags=["Health"])
async def health_check(request: Request):
    """
    Health check endpoint.
    Reports configuration and database connectivity.
    """
    health_status = {
        "status": "healthy",
        "timestamp": time.time(),
        "environment": settings.ENVIRONMENT,
        "version": APP_VERSION,
        "checks": {}
    }

    missing = getattr(request.app.state, "missing_settings", None) or []
    health_status["checks"]["configuration"] = "missing: " + ", ".join(missing) if missing else "ok"

    ctx = getattr(request.app.state, "bot_context", None)
    if ctx is None:
        health_status["checks"]["database"] = "not_configured"
        health_status["status"] = "degraded"
    else:
        db_healthy = await ctx.store.ping()
        health_status["checks"]["database"] = "healthy" if db_healthy else "unhealthy"
        if not db_healthy:
            health_status["status"] = "degraded"

    status_code = 200 if health_status["status"] == "healthy" else 503
    return JSONResponse(content=health_status, status_code=status_code)


# Readiness probe (for Kubernetes/orchestration)
@app.get("/ready", tags=["Health"])
async def readiness_check(request: Request):
    """
    Readiness probe - indicates if app is ready to receive traffic.
    """
    ctx = getattr(request.app.state, "bot_context", None)
    if ctx is None:
        return JSONResponse(
            status_code=503,
            content={"status": "not_ready", "reason": "not_configured"}
        )
    if await ctx.store.ping():
        return {"status": "ready"}
    return JSONResponse(
        status_code=503,
        content={"status": "not_ready", "reason": "database_unavailable"}
    )


# Liveness probe (for Kubernetes/orchestration)
@app.get("/live", tags=["Health"])
async def liveness_check():
    """
    Liveness probe - indicates if app is alive.
    """
    return {"status": "alive"}


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "app.main:app",
        host="0.0.0.0",
        port=8000,
        reload=settings.is_development,
        log_level=settings.LOG_LEVEL.lower()
    )
