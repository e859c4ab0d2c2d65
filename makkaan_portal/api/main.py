"""FastAPI application factory"""

from fastapi import FastAPI
from prometheus_client import generate_latest, CONTENT_TYPE_LATEST
from starlette.responses import Response

from makkaan_portal.api.middleware import RequestIDMiddleware, MetricsMiddleware
from makkaan_portal.api.v1 import clients, ledger
from makkaan_portal.infrastructure.observability.logging import setup_logging
from makkaan_portal.config import settings

# Setup structured logging
setup_logging(settings.log_level)


def create_app() -> FastAPI:
    """Create and configure FastAPI application"""
    app = FastAPI(
        title="Makkaan Installment Portal",
        description="Client contracts and installment ledger service",
        version="0.1.0",
        docs_url="/docs",
        redoc_url="/redoc",
    )

    # Add middleware (order matters: last added = first executed)
    app.add_middleware(MetricsMiddleware)
    app.add_middleware(RequestIDMiddleware)

    @app.get("/health")
    def health_check():
        return {"status": "ok", "service": settings.service_name}

    # Prometheus metrics endpoint
    @app.get("/metrics")
    def metrics():
        return Response(content=generate_latest(), media_type=CONTENT_TYPE_LATEST)

    app.include_router(clients.router, prefix="/v1", tags=["clients"])
    app.include_router(ledger.router, prefix="/v1", tags=["ledger"])

    return app


app = create_app()
