from __future__ import annotations

import logging
from functools import lru_cache
from typing import Optional

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class ShopSettings(BaseSettings):
    """Demo settings, read from ``SHOP_*`` environment variables or ``.env``."""

    model_config = SettingsConfigDict(env_prefix="SHOP_", env_file=".env", extra="ignore")

    log_level: str = Field("INFO", description="Root log level")
    log_format: str = Field("%(message)s", description="logging format string")
    decline_payments: bool = Field(False, description="Make the mock payment gateway decline every charge")
    courier_name: str = Field("MockCourier", description="Name reported by the mock courier")

    @field_validator("log_level")
    @classmethod
    def _known_level(cls, value: str) -> str:
        value = value.upper()
        if value not in logging.getLevelNamesMapping():
            raise ValueError(f"Unknown log level: {value}")
        return value


@lru_cache
def get_settings() -> ShopSettings:
    return ShopSettings()


def configure_logging(settings: Optional[ShopSettings] = None) -> None:
    settings = settings or get_settings()
    logging.basicConfig(level=settings.log_level, format=settings.log_format)
