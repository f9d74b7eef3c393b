"""FastAPI application factory"""

import logging
from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from prometheus_client import generate_latest, CONTENT_TYPE_LATEST
from starlette.responses import Response

from cashflow_gateway.api.dependencies import get_request_id
from cashflow_gateway.api.middleware import RequestIDMiddleware, MetricsMiddleware
from cashflow_gateway.api.v1 import allocations, forecast, goals, installments
from cashflow_gateway.domain.exceptions import AllocationStateError, InvalidInputError
from cashflow_gateway.infrastructure.observability.logging import setup_logging
from cashflow_gateway.config import settings

setup_logging(settings.log_level)


async def invalid_input_handler(request: Request, exc: InvalidInputError) -> JSONResponse:
    logging.warning(f"Invalid input: {exc}", extra={"request_id": get_request_id(request)})
    return JSONResponse(status_code=422, content={"detail": str(exc)})


async def allocation_state_handler(request: Request, exc: AllocationStateError) -> JSONResponse:
    logging.warning(f"Rejected transition: {exc}", extra={"request_id": get_request_id(request)})
    return JSONResponse(status_code=409, content={"detail": str(exc)})


def create_app() -> FastAPI:
    """Create and configure the cash-flow gateway"""
    app = FastAPI(
        title="Cash-Flow Gateway",
        description="Obligation forecasting and income allocation service",
        version="0.1.0",
        docs_url="/docs",
        redoc_url="/redoc",
    )

    # Last added = first executed, so every request carries an ID before it is timed
    app.add_middleware(MetricsMiddleware)
    app.add_middleware(RequestIDMiddleware)

    # Domain errors that escape a handler still map onto the documented status codes
    app.add_exception_handler(InvalidInputError, invalid_input_handler)
    app.add_exception_handler(AllocationStateError, allocation_state_handler)

    @app.get("/health")
    def health_check():
        return {"status": "ok", "service": settings.service_name}

    @app.get("/metrics")
    def metrics():
        return Response(content=generate_latest(), media_type=CONTENT_TYPE_LATEST)

    app.include_router(forecast.router, prefix="/v1", tags=["forecast"])
    app.include_router(goals.router, prefix="/v1", tags=["goals"])
    app.include_router(allocations.router, prefix="/v1", tags=["allocations"])
    app.include_router(installments.router, prefix="/v1", tags=["installments"])

    return app


app = create_app()
