"""Application entry point."""

import logging

from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse

from .api import api_router
from .core.config import settings
from .core.logging import RequestIDMiddleware, init_logging
from .domain import schemas
from .domain.errors import (
    AppointmentRejectedError,
    InvalidAppointmentError,
    LocationColorError,
    StoreUnavailableError,
)

logger = logging.getLogger(__name__)


async def rejected_handler(request: Request, exc: AppointmentRejectedError) -> JSONResponse:
    body = schemas.ValidationResult.from_domain(exc.result)
    return JSONResponse(status_code=status.HTTP_409_CONFLICT, content=body.model_dump(mode="json"))


async def invalid_handler(request: Request, exc: ValueError) -> JSONResponse:
    return JSONResponse(
        status_code=status.HTTP_422_UNPROCESSABLE_ENTITY, content={"detail": str(exc)}
    )


async def unavailable_handler(request: Request, exc: StoreUnavailableError) -> JSONResponse:
    logger.error("Store unavailable: %s", exc)
    return JSONResponse(
        status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
        content={"detail": "Storage is temporarily unavailable; please retry."},
    )


def create_app() -> FastAPI:
    """Create and configure the FastAPI application."""
    init_logging(settings.LOG_LEVEL)

    app = FastAPI(title="Docket scheduling engine")
    app.add_middleware(RequestIDMiddleware)
    app.add_exception_handler(AppointmentRejectedError, rejected_handler)
    app.add_exception_handler(InvalidAppointmentError, invalid_handler)
    app.add_exception_handler(LocationColorError, invalid_handler)
    app.add_exception_handler(StoreUnavailableError, unavailable_handler)
    app.include_router(api_router)
    return app


app = create_app()
