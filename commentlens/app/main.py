# commentlens/app/main.py
"""
FastAPI Main Application
CommentLens: credit-gated YouTube comment analysis
"""

import logging
from contextlib import asynccontextmanager
from typing import AsyncGenerator

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from commentlens import __version__
from commentlens.app.config import get_config, setup_logging, validate_config
from commentlens.app.database import db_manager
from commentlens.app.dependencies import get_profile_stream
from commentlens.services import ServiceError, error_to_http_status

logger = logging.getLogger(__name__)


# ============================================================================
# Application Lifecycle Management
# ============================================================================


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator:
    """
    Application lifespan manager
    Handles startup and shutdown events
    """
    # ========== STARTUP ==========
    logger.info("🚀 Starting CommentLens...")

    # 1. Load and validate configuration
    config = get_config()
    setup_logging(config)

    validation_result = validate_config(config)
    if not validation_result["valid"]:
        logger.error("❌ Configuration validation failed!")
        for error in validation_result["errors"]:
            logger.error(f"  - {error}")
        raise RuntimeError("Invalid configuration")

    for warning in validation_result["warnings"]:
        logger.warning(f"  ⚠️  {warning}")

    logger.info("✅ Configuration loaded and validated")

    # 2. Initialize database
    logger.info("🗄️  Initializing database...")
    try:
        await db_manager.create_tables()
    except Exception as e:
        logger.error(f"❌ Database initialization failed: {e}")
        raise

    _print_startup_summary(config)
    logger.info("✅ Application startup complete!\n")

    yield

    # ========== SHUTDOWN ==========
    logger.info("\n🛑 Shutting down application...")
    get_profile_stream().close()
    await db_manager.close()
    logger.info("✅ Application shutdown complete")


def _print_startup_summary(config) -> None:
    """Print startup summary"""
    summary = f"""
╔══════════════════════════════════════════════════════════════════════╗
║                     CommentLens  Status: Ready 🚀                    ║
╚══════════════════════════════════════════════════════════════════════╝

📋 Configuration:
   • Database: {config.database.url.split('/')[-1]}
   • API Host: {config.api.host}:{config.api.port}
   • Debug Mode: {config.api.debug}
   • Model: {config.gemini.model}
   • Comments per analysis: {config.analysis.max_comments}
   • Starting credits: {config.accounts.starting_credits}

🔑 API Keys:
   • YouTube: {'✅' if config.youtube_api_key else '❌'}
   • Gemini: {'✅' if config.gemini_api_key else '❌'}

🔌 Endpoints:
   • API Docs: http://{config.api.host}:{config.api.port}/docs
   • Health: http://{config.api.host}:{config.api.port}/health
    """
    print(summary)


# ============================================================================
# FastAPI Application Instance
# ============================================================================


def create_app() -> FastAPI:
    """
    FastAPI application factory
    Creates and configures the FastAPI application
    """
    config = get_config()

    app = FastAPI(
        title="CommentLens",
        description="Turns a YouTube video's comments into a structured audience report",
        version=__version__,
        docs_url="/docs",
        redoc_url="/redoc",
        openapi_url="/openapi.json",
        lifespan=lifespan,
        debug=config.api.debug,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=config.api.cors_origins_list,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    _register_exception_handlers(app)
    _register_routers(app)

    return app


def _register_exception_handlers(app: FastAPI) -> None:
    """Register custom exception handlers"""

    @app.exception_handler(ServiceError)
    async def service_exception_handler(request: Request, exc: ServiceError):
        status_code = error_to_http_status(exc)
        logger.error(f"Service error: {status_code} - {exc.message}")
        return JSONResponse(status_code=status_code, content=exc.to_dict())

    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(request: Request, exc: StarletteHTTPException):
        """Handle HTTP exceptions"""
        logger.error(f"HTTP error: {exc.status_code} - {exc.detail}")
        return JSONResponse(
            status_code=exc.status_code,
            content={
                "error": exc.detail,
                "status_code": exc.status_code,
                "path": str(request.url),
            },
        )

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(
        request: Request, exc: RequestValidationError
    ):
        """Handle validation errors"""
        logger.error(f"Validation error: {exc.errors()}")
        return JSONResponse(
            status_code=422,
            content={"error": "Validation Error", "details": exc.errors()},
        )

    @app.exception_handler(Exception)
    async def general_exception_handler(request: Request, exc: Exception):
        """Handle all other exceptions"""
        logger.exception(f"Unhandled exception: {exc}")
        return JSONResponse(
            status_code=500,
            content={
                "error": "Internal Server Error",
                "message": str(exc),
                "path": str(request.url),
            },
        )


def _register_routers(app: FastAPI) -> None:
    """Register API routers"""
    from commentlens.api.routers import analysis_router, profile_router, report_router

    @app.get("/health", tags=["System"])
    async def health_check():
        """Health check endpoint"""
        try:
            database = "connected" if await db_manager.ping() else "unavailable"
        except Exception as e:
            logger.error(f"❌ Database ping failed: {e}")
            database = "unavailable"
        return {
            "status": "healthy" if database == "connected" else "degraded",
            "version": __version__,
            "database": database,
        }

    @app.get("/", tags=["System"])
    async def root():
        """Root endpoint with API information"""
        return {
            "message": "CommentLens API",
            "version": __version__,
            "docs": "/docs",
            "health": "/health",
        }

    app.include_router(profile_router)
    app.include_router(analysis_router)
    app.include_router(report_router)

    logger.info("✅ API routers registered")


# ============================================================================
# Application Instance
# ============================================================================

app = create_app()


# ============================================================================
# Development Server Entry Point
# ============================================================================

if __name__ == "__main__":
    import uvicorn

    config = get_config()

    uvicorn.run(
        "commentlens.app.main:app",
        host=config.api.host,
        port=config.api.port,
        reload=config.api.debug,
        log_level=config.logging.level.lower(),
    )
