"""Application configuration utilities."""

from __future__ import annotations

import os
from functools import lru_cache

from pydantic import BaseModel


def _flag(value: str) -> bool:
    return value.strip().lower() in {"1", "true", "yes", "on"}


class Settings(BaseModel):
    LOG_LEVEL: str = "INFO"
    SEED_DEMO_DATA: bool = False
    SEED_CANDIDATES: int = 25
    SEED_APPLICATIONS: int = 40
    API_BASE_URL: str = "http://localhost:8000"
    HTTP_TIMEOUT: float = 10.0


@lru_cache
def get_settings() -> Settings:
    return Settings(
        LOG_LEVEL=os.getenv("LOG_LEVEL", "INFO"),
        SEED_DEMO_DATA=_flag(os.getenv("SEED_DEMO_DATA", "false")),
        SEED_CANDIDATES=int(os.getenv("SEED_CANDIDATES", "25")),
        SEED_APPLICATIONS=int(os.getenv("SEED_APPLICATIONS", "40")),
        API_BASE_URL=os.getenv("API_BASE_URL", "http://localhost:8000"),
        HTTP_TIMEOUT=float(os.getenv("HTTP_TIMEOUT", "10")),
    )


settings = get_settings()
