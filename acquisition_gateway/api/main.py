"""FastAPI application factory"""

from fastapi import FastAPI
from prometheus_client import generate_latest, CONTENT_TYPE_LATEST
from starlette.responses import Response

from acquisition_gateway.api.middleware import RequestIDMiddleware, MetricsMiddleware
from acquisition_gateway.api.v1 import deal_structure, history, sba, working_capital, workspaces
from acquisition_gateway.infrastructure.observability.logging import setup_logging
from acquisition_gateway.config import settings

# Setup structured logging
setup_logging(settings.log_level)


def create_app() -> FastAPI:
    """Create and configure FastAPI application"""
    app = FastAPI(
        title="Acquisition Financing Gateway",
        description="SBA 7(a) loan structuring, eligibility, deal-structure and working-capital calculators",
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

    @app.get("/metrics")
    def metrics():
        return Response(content=generate_latest(), media_type=CONTENT_TYPE_LATEST)

    app.include_router(sba.router, prefix="/v1", tags=["sba"])
    app.include_router(deal_structure.router, prefix="/v1", tags=["deal-structure"])
    app.include_router(working_capital.router, prefix="/v1", tags=["working-capital"])
    app.include_router(history.router, prefix="/v1", tags=["history"])
    app.include_router(workspaces.router, prefix="/v1", tags=["workspaces"])

    return app


app = create_app()
