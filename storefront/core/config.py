"""Storefront Configuration"""

from typing import Literal
from pydantic_settings import BaseSettings
from functools import lru_cache


class Settings(BaseSettings):
    """Application settings loaded from environment"""

    # Application
    app_name: str = "Storefront"
    debug: bool = False
    log_level: str = "INFO"

    # Persistence
    storage_backend: Literal["memory", "json"] = "json"
    storage_path: str = "storefront-data.json"

    # Pricing
    currency: str = "TND"
    tax_rate: float = 0.08
    shipping_fee: float = 10.0
    free_shipping_threshold: float = 100.0

    # Orders
    order_id_prefix: str = "ORD"

    # Inventory
    low_stock_threshold: int = 5

    class Config:
        env_prefix = "STOREFRONT_"
        env_file = ".env"
        env_file_encoding = "utf-8"
        case_sensitive = False

    @property
    def effective_log_level(self) -> str:
        """DEBUG when debug mode is on, otherwise the configured level"""
        if self.debug:
            return "DEBUG"
        return self.log_level.upper()


@lru_cache()
def get_settings() -> Settings:
    """Get cached settings instance"""
    return Settings()
