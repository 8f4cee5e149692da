"""HTTP routers."""

from fastapi import APIRouter

from . import appointments, calendar, colors, health

api_router = APIRouter()
api_router.include_router(health.router)
api_router.include_router(appointments.router)
api_router.include_router(calendar.router)
api_router.include_router(colors.router)
