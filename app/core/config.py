# app/core/config.py

import os
from typing import List, Optional

from dotenv import load_dotenv
from pydantic import BaseModel, field_validator

ALLOWED_ENVS = {"development", "staging", "production", "test"}


class Settings(BaseModel):
    # =====================================================
    # APPLICATION
    # =====================================================
    app_env: str = "development"
    app_name: str = "StockBox Inventory API"
    app_version: str = "1.0.0"
    api_prefix: str = "/api/v1/internal"
    cors_origins: List[str] = []
    log_level: Optional[str] = None

    # =====================================================
    # DATABASE
    # =====================================================
    database_url: Optional[str] = None
    db_pool_size: int = 10
    db_max_overflow: int = 20
    db_pool_timeout: int = 30
    db_echo_pool: bool = False
    db_ssl: bool = True
    db_ssl_verify: bool = True

    # SQLSTATE raised by stored functions for business-rule violations
    business_rule_sqlstate: str = "51000"

    # =====================================================
    # AUTHORIZATION
    # =====================================================
    enforce_permissions: bool = True

    @field_validator("app_env")
    @classmethod
    def check_app_env(cls, value: str) -> str:
        if value not in ALLOWED_ENVS:
            raise ValueError(
                "APP_ENV must be development | staging | production | test"
            )
        return value

    @field_validator("database_url")
    @classmethod
    def check_database_url(cls, value: Optional[str]) -> Optional[str]:
        if value and not value.startswith("postgresql+asyncpg://"):
            raise ValueError("DATABASE_URL must use the postgresql+asyncpg driver")
        return value

    @field_validator("business_rule_sqlstate")
    @classmethod
    def check_sqlstate(cls, value: str) -> str:
        if len(value) != 5 or not value.isalnum():
            raise ValueError("BUSINESS_RULE_SQLSTATE must be a 5 character SQLSTATE")
        return value.upper()

    @property
    def is_production(self) -> bool:
        return self.app_env == "production"

    @property
    def effective_log_level(self) -> str:
        if self.log_level:
            return self.log_level.upper()
        return "DEBUG" if self.app_env == "development" else "INFO"


def _env_bool(name: str, default: str) -> bool:
    return os.getenv(name, default).lower() == "true"


def load_settings() -> Settings:
    load_dotenv()

    origins = os.getenv("CORS_ORIGINS", "").split(",")

    return Settings(
        app_env=os.getenv("APP_ENV", "development"),
        app_version=os.getenv("APP_VERSION", "1.0.0"),
        api_prefix=os.getenv("API_PREFIX", "/api/v1/internal"),
        cors_origins=[o.strip() for o in origins if o.strip()],
        log_level=os.getenv("LOG_LEVEL") or None,
        database_url=os.getenv("DATABASE_URL") or None,
        db_pool_size=int(os.getenv("DB_POOL_SIZE", 10)),
        db_max_overflow=int(os.getenv("DB_MAX_OVERFLOW", 20)),
        db_pool_timeout=int(os.getenv("DB_POOL_TIMEOUT", 30)),
        db_echo_pool=_env_bool("DB_ECHO_POOL", "false"),
        db_ssl=_env_bool("DB_SSL", "true"),
        db_ssl_verify=_env_bool("DB_SSL_VERIFY", "true"),
        business_rule_sqlstate=os.getenv("BUSINESS_RULE_SQLSTATE", "51000"),
        enforce_permissions=_env_bool("ENFORCE_PERMISSIONS", "true"),
    )
