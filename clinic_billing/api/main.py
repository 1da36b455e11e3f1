"""FastAPI application factory"""

from contextlib import asynccontextmanager

from fastapi import FastAPI
from prometheus_client import generate_latest, CONTENT_TYPE_LATEST
from starlette.responses import Response

from clinic_billing.api.middleware import RequestIDMiddleware, MetricsMiddleware
from clinic_billing.api.v1 import appointments, cashflow, dashboard, history, schedule
from clinic_billing.infrastructure.database.session import init_db
from clinic_billing.infrastructure.observability.logging import setup_logging
from clinic_billing.config import settings

# Setup structured logging
setup_logging(settings.log_level, settings.service_name)


@asynccontextmanager
async def lifespan(app: FastAPI):
    if settings.create_schema_on_startup:
        init_db()
    yield


def create_app() -> FastAPI:
    """Create and configure FastAPI application"""
    app = FastAPI(
        title="Clinic Billing",
        description="Procedure installment plans, client history and cash flow",
        version="0.1.0",
        docs_url="/docs",
        redoc_url="/redoc",
        lifespan=lifespan,
    )

    # Add middleware (order matters: last added = first executed)
    app.add_middleware(MetricsMiddleware)
    app.add_middleware(RequestIDMiddleware)

    # Health check endpoint
    @app.get("/health")
    def health_check():
        return {"status": "ok", "service": settings.service_name}

    # Prometheus metrics endpoint
    @app.get("/metrics")
    def metrics():
        return Response(content=generate_latest(), media_type=CONTENT_TYPE_LATEST)

    # Register API routers
    app.include_router(schedule.router, prefix="/v1", tags=["schedule"])
    app.include_router(appointments.router, prefix="/v1", tags=["appointments"])
    app.include_router(history.router, prefix="/v1", tags=["history"])
    app.include_router(dashboard.router, prefix="/v1", tags=["dashboard"])
    app.include_router(cashflow.router, prefix="/v1", tags=["cash flow"])

    return app


app = create_app()
