# main.py
import logging
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.exceptions import RequestValidationError
from starlette.exceptions import HTTPException as StarletteHTTPException

from app.routers import product_router, stock_movement_router

from app.core.config import Settings, load_settings
from app.core.db import build_engine, build_session_factory
from app.core.exceptions import (
    AppException,
    BusinessRuleViolation,
    InfrastructureFailure,
)
from app.core.logging import setup_logging
from app.middleware.request_logging import request_logging_middleware
from app.core.error_handlers import (
    app_exception_handler,
    validation_exception_handler,
    http_exception_handler,
    business_rule_exception_handler,
    infrastructure_exception_handler,
    unhandled_exception_handler,
)

logger = logging.getLogger(__name__)


# ------------------------------------------------------------------------------
# LIFESPAN
# ------------------------------------------------------------------------------
@asynccontextmanager
async def lifespan(app: FastAPI):
    settings: Settings = app.state.settings
    logger.info("🚀 Starting application (%s)", settings.app_env)

    engine = build_engine(settings)
    app.state.engine = engine
    app.state.session_factory = build_session_factory(engine)
    logger.info("📦 Database engine ready")

    yield

    logger.info("🛑 Shutting down application")
    await engine.dispose()


# ------------------------------------------------------------------------------
# APP FACTORY
# ------------------------------------------------------------------------------
def create_app(settings: Optional[Settings] = None) -> FastAPI:
    settings = settings or load_settings()

    setup_logging(settings.effective_log_level)

    app = FastAPI(
        title=settings.app_name,
        description="Backend API for products and stock movements",
        version=settings.app_version,
        docs_url="/docs" if not settings.is_production else None,
        redoc_url=None,
        lifespan=lifespan,
    )
    app.state.settings = settings

    # --------------------------------------------------------------------------
    # EXCEPTION HANDLERS
    # --------------------------------------------------------------------------
    app.add_exception_handler(AppException, app_exception_handler)
    app.add_exception_handler(RequestValidationError, validation_exception_handler)
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(BusinessRuleViolation, business_rule_exception_handler)
    app.add_exception_handler(InfrastructureFailure, infrastructure_exception_handler)
    app.add_exception_handler(Exception, unhandled_exception_handler)

    # --------------------------------------------------------------------------
    # MIDDLEWARE
    # --------------------------------------------------------------------------
    app.middleware("http")(request_logging_middleware)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # --------------------------------------------------------------------------
    # HEALTH CHECK
    # --------------------------------------------------------------------------
    @app.get("/", tags=["Health"])
    async def health_check():
        return {
            "status": "ok",
            "service": "inventory-api",
            "environment": settings.app_env,
            "version": settings.app_version,
        }

    # --------------------------------------------------------------------------
    # ROUTERS
    # --------------------------------------------------------------------------
    app.include_router(product_router, prefix=settings.api_prefix)
    app.include_router(stock_movement_router, prefix=settings.api_prefix)

    return app


app = create_app()
