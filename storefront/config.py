"""
Storefront Configuration
Central place to configure the Schema API connection, caching and storefront routes
Change values here or via environment variables without modifying workflow code
"""
from enum import Enum
from pydantic_settings import BaseSettings
from typing import Optional

class LogLevel(str, Enum):
    """Logging level options"""
    DEBUG = "DEBUG"
    INFO = "INFO"
    WARNING = "WARNING"
    ERROR = "ERROR"

class Settings(BaseSettings):
    """Application Settings"""

    # ============================================
    # SCHEMA API CONFIGURATION
    # ============================================

    # Find yours in Admin > Settings > API Keys
    SCHEMA_CLIENT_ID: Optional[str] = None
    SCHEMA_CLIENT_KEY: Optional[str] = None

    SCHEMA_API_URL: str = "https://api.schema.io"
    SCHEMA_TIMEOUT_SECONDS: float = 20.0

    # ============================================
    # RESPONSE CACHE
    # ============================================

    CACHE_ENABLED: bool = True
    CACHE_TTL_SECONDS: int = 300
    CACHE_MAX_SIZE: int = 500

    # ============================================
    # STOREFRONT ROUTES
    # ============================================

    SESSION_COOKIE_NAME: str = "storefront_session"
    LOGIN_PATH: str = "/account-login"
    CHECKOUT_BILLING_PATH: str = "/checkout/billing"
    RECEIPT_PATH: str = "/receipt"

    # ============================================
    # APPLICATION SETTINGS
    # ============================================

    APP_NAME: str = "Storefront"
    DEBUG: bool = False
    LOG_LEVEL: LogLevel = LogLevel.INFO
    CORS_ORIGINS: list[str] = [
        "http://localhost:3000",
        "http://localhost:8000",
        "http://127.0.0.1:8000",
    ]

    class Config:
        env_file = ".env"
        case_sensitive = True

# Global settings instance
settings = Settings()

# Helper function to get current API client info
def get_client_info() -> dict:
    """Get current Schema API configuration (without secrets)"""
    return {
        "api_url": settings.SCHEMA_API_URL,
        "client_id": settings.SCHEMA_CLIENT_ID,
        "connected": bool(settings.SCHEMA_CLIENT_ID and settings.SCHEMA_CLIENT_KEY),
        "cache_enabled": settings.CACHE_ENABLED,
    }
