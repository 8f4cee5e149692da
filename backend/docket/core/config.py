"""Application configuration utilities."""

from __future__ import annotations

import os
from functools import lru_cache

from pydantic import BaseModel


class Settings(BaseModel):
    LOG_LEVEL: str = "INFO"
    OWNER_TZ: str = "Asia/Colombo"
    BUSINESS_HOURS_START: str = "09:30"
    BUSINESS_HOURS_END: str = "15:30"
    DEFAULT_LOCATION_COLOR: str = "#9CA3AF"
    TRAVEL_PROVIDER: str = "matrix"
    TRAVEL_MATRIX_PATH: str = ""
    TRAVEL_PROVIDER_URL: str = ""
    TRAVEL_TIMEOUT_SECONDS: float = 5.0


@lru_cache
def get_settings() -> Settings:
    return Settings(
        LOG_LEVEL=os.getenv("LOG_LEVEL", "INFO"),
        OWNER_TZ=os.getenv("OWNER_TZ", "Asia/Colombo"),
        BUSINESS_HOURS_START=os.getenv("BUSINESS_HOURS_START", "09:30"),
        BUSINESS_HOURS_END=os.getenv("BUSINESS_HOURS_END", "15:30"),
        DEFAULT_LOCATION_COLOR=os.getenv("DEFAULT_LOCATION_COLOR", "#9CA3AF"),
        TRAVEL_PROVIDER=os.getenv("TRAVEL_PROVIDER", "matrix").strip().lower(),
        TRAVEL_MATRIX_PATH=os.getenv("TRAVEL_MATRIX_PATH", ""),
        TRAVEL_PROVIDER_URL=os.getenv("TRAVEL_PROVIDER_URL", ""),
        TRAVEL_TIMEOUT_SECONDS=float(os.getenv("TRAVEL_TIMEOUT_SECONDS", "5.0")),
    )


settings = get_settings()
