"""FastAPI application factory"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from prometheus_client import generate_latest, CONTENT_TYPE_LATEST
from starlette.responses import Response

from wealthblend.api.middleware import RequestIDMiddleware, MetricsMiddleware, SecurityHeadersMiddleware
from wealthblend.api.v1 import budget, estate, tax
from wealthblend.infrastructure.database.session import init_db
from wealthblend.infrastructure.observability.logging import setup_logging
from wealthblend.config import settings
from wealthblend.utils.date_utils import utcnow

# Setup structured logging
setup_logging(settings.log_level)

API_VERSION = "1.0.0"


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Create missing tables on startup"""
    init_db()
    logging.info("WealthBlend API started", extra={"environment": settings.environment})
    yield
    logging.info("WealthBlend API shutting down")


def create_app() -> FastAPI:
    """Create and configure FastAPI application"""
    app = FastAPI(
        title="WealthBlend API",
        description="Tax records, budgets and estate plans with derived financial state",
        version=API_VERSION,
        docs_url="/docs",
        redoc_url="/redoc",
        lifespan=lifespan,
    )

    # Add middleware (order matters: last added = first executed)
    app.add_middleware(SecurityHeadersMiddleware)
    app.add_middleware(MetricsMiddleware)
    app.add_middleware(RequestIDMiddleware)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_allowed_origins,
        allow_credentials=True,
        allow_methods=["GET", "POST", "PUT", "DELETE", "PATCH", "OPTIONS"],
        allow_headers=["Content-Type", "Authorization", "X-Requested-With", "X-User-ID"],
    )

    @app.get("/")
    def root():
        return {
            "success": True,
            "message": "Welcome to WealthBlend API",
            "version": API_VERSION,
            "documentation": "/docs",
            "endpoints": {
                "budget": "/api/budget",
                "estate": "/api/estate",
                "tax": "/api/tax",
            },
        }

    # Health check endpoint
    @app.get("/health")
    def health_check():
        return {
            "status": "ok",
            "service": settings.service_name,
            "environment": settings.environment,
            "timestamp": utcnow().isoformat(),
        }

    # Prometheus metrics endpoint
    @app.get("/metrics")
    def metrics():
        return Response(content=generate_latest(), media_type=CONTENT_TYPE_LATEST)

    # Register API routers
    app.include_router(budget.router, prefix="/api", tags=["budget"])
    app.include_router(estate.router, prefix="/api", tags=["estate"])
    app.include_router(tax.router, prefix="/api", tags=["tax"])

    return app


app = create_app()
