"""
Application settings for the field ops service
"""

from functools import lru_cache
from typing import Any, Dict, List

from pydantic_settings import BaseSettings, SettingsConfigDict


class AppSettings(BaseSettings):
    model_config = SettingsConfigDict(env_prefix="FIELD_OPS_", env_file=".env", extra="ignore")

    # Storage
    DATA_FILE: str = "./field_ops_db.json"

    # Server
    HOST: str = "0.0.0.0"
    PORT: int = 3000
    CORS_ORIGINS: str = "*"

    # Logging
    LOG_LEVEL: str = "INFO"
    JSON_LOGS: bool = False

    # Invoicing
    INVOICE_DUE_DAYS: int = 30

    # Seed values for the settings record of a new document
    DEFAULT_TAX_RATE: str = "7.75"
    DEFAULT_INVOICE_PREFIX: str = "INV-"
    DEFAULT_QUOTE_PREFIX: str = "Q-"
    DEFAULT_COMPANY_NAME: str = "Field Service Co."
    DEFAULT_COMPANY_PHONE: str = ""
    DEFAULT_COMPANY_EMAIL: str = ""
    DEFAULT_COMPANY_ADDRESS: str = ""

    @property
    def cors_origins(self) -> List[str]:
        return [origin.strip() for origin in self.CORS_ORIGINS.split(",") if origin.strip()]


@lru_cache()
def get_app_settings() -> AppSettings:
    """Get cached settings built from the environment"""
    return AppSettings()


def default_settings_record(settings: AppSettings) -> Dict[str, Any]:
    """Settings record written into a freshly created document"""
    return {
        "company_name": settings.DEFAULT_COMPANY_NAME,
        "company_phone": settings.DEFAULT_COMPANY_PHONE,
        "company_email": settings.DEFAULT_COMPANY_EMAIL,
        "company_address": settings.DEFAULT_COMPANY_ADDRESS,
        "tax_rate": settings.DEFAULT_TAX_RATE,
        "invoice_prefix": settings.DEFAULT_INVOICE_PREFIX,
        "quote_prefix": settings.DEFAULT_QUOTE_PREFIX,
    }
