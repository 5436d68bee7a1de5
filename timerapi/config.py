from pydantic_settings import BaseSettings, SettingsConfigDict
from typing import List


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file="timerapi/.env",
        env_file_encoding="utf-8",
        extra="allow",
    )
    # Application
    APP_NAME: str = "Countdown Timer API"
    API_PREFIX: str = "/api"
    ENVIRONMENT: str = "development"
    DEBUG: bool = False
    LOG_LEVEL: str = "INFO"
    LOG_FORMAT: str = "simple"  # simple | json

    # Database
    DATABASE_URL: str = "sqlite:///./timers.db"
    DB_POOL_SIZE: int = 10
    DB_MAX_OVERFLOW: int = 20

    # Shop resolution
    SHOP_HEADER_NAME: str = "X-Shopify-Shop-Domain"
    SHOP_DOMAIN_PATTERN: str = r"^[a-zA-Z0-9][a-zA-Z0-9-]*\.myshopify\.com$"

    # Status scheduler
    SCHEDULER_ENABLED: bool = True
    SCHEDULER_INTERVAL_MINUTES: int = 5  # 상태 점검 주기 (분)
    SCHEDULER_RUN_ON_START: bool = True  # 기동 직후 1회 즉시 실행

    # Public storefront endpoint
    PUBLIC_CACHE_MAX_AGE: int = 300  # seconds

    # CORS
    ALLOWED_ORIGINS: List[str] = ["*"]

    @property
    def is_sqlite(self) -> bool:
        return self.DATABASE_URL.startswith("sqlite")


settings = Settings()
