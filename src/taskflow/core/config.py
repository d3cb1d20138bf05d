from functools import lru_cache

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

_PLACEHOLDER_SECRET = "change-me-in-production"


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # App
    app_name: str = "TaskFlow API"
    app_env: str = "development"  # development, testing, production
    debug: bool = False

    # Security
    log_user_emails: bool = False  # Keep off in production (GDPR)

    # Database
    database_url: str
    database_pool_size: int = 5
    database_max_overflow: int = 10

    # Shutdown
    shutdown_grace_period: int = 30

    # Auth
    jwt_secret_key: str
    jwt_refresh_secret_key: str
    jwt_algorithm: str = "HS256"
    access_token_expire_minutes: int = 15
    refresh_token_expire_days: int = 7
    max_refresh_tokens_per_user: int = 10  # 0 disables the cap
    argon2_time_cost: int = 3
    argon2_memory_cost: int = 65536
    argon2_parallelism: int = 1

    @field_validator("jwt_secret_key", "jwt_refresh_secret_key")
    @classmethod
    def validate_jwt_secret(cls, v: str) -> str:
        if v == _PLACEHOLDER_SECRET:
            raise ValueError(
                "JWT signing keys must be changed from the default value. "
                "Generate a secure secret with: openssl rand -hex 32"
            )
        if len(v) < 32:
            raise ValueError("JWT signing keys must be at least 32 characters")
        return v

    @field_validator("cors_origins")
    @classmethod
    def validate_cors_origins(cls, v: list[str]) -> list[str]:
        """Reject wildcards since credentials are allowed."""
        for origin in v:
            if origin == "*":
                raise ValueError(
                    "CORS wildcard '*' is not allowed when allow_credentials=True. "
                    "Specify explicit origins instead."
                )
        return v

    # CORS
    cors_origins: list[str] = ["http://localhost:3000"]

    # Metrics
    metrics_api_key: str | None = None  # If set, /metrics requires this key

    # Redis (optional - app works without it)
    redis_url: str | None = None  # e.g., "redis://localhost:6379/0"
    redis_pool_size: int = 10

    # Rate limiting (slowapi limit strings)
    general_rate_limit: str = "100/15minutes"  # Per IP, every route except health, metrics and docs
    auth_rate_limit: str = "5/15minutes"  # Failed register/login attempts only
    refresh_rate_limit: str = "10/minute"

    # Temporal
    temporal_host: str = "localhost:7233"
    temporal_namespace: str = "default"
    temporal_task_queue: str = "taskflow-queue"

    # Cleanup (Temporal scheduled workflow)
    cleanup_schedule: str | None = None  # Cron syntax, e.g., "0 3 * * *"
    cleanup_retention_days: int = 0  # Grace period after expiry before deletion


@lru_cache
def get_settings() -> Settings:
    return Settings()
