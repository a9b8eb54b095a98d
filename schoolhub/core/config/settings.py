# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Environment-driven configuration for SchoolHub.

Each concern has its own settings group with its own environment
prefix (``DB_``, ``CLOUDINARY_``, ``INVITATION_CODE_``, ``CORS_``,
``API_``). ``Settings`` nests the groups and adds the top-level
environment switches. Code should go through ``get_settings()`` so the
whole process shares one instance.
"""

from functools import lru_cache
from typing import Literal, Self

from pydantic import Field, SecretStr, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_UPLOAD_SECRET = "change-this-in-production"

Environment = Literal["development", "staging", "production"]
LogLevel = Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]


class DatabaseSettings(BaseSettings):
    """PostgreSQL connection parameters and pool sizing."""

    model_config = SettingsConfigDict(env_prefix="DB_", extra="ignore")

    user: str = "schoolhub"
    password: SecretStr = SecretStr("schoolhub_password")
    host: str = "localhost"
    port: int = 5432
    database: str = "schoolhub"
    pool_size: int = 10
    max_overflow: int = 20

    @property
    def url(self) -> str:
        """asyncpg URL used by the engine and by alembic."""
        secret = self.password.get_secret_value()
        return (
            f"postgresql+asyncpg://{self.user}:{secret}"
            f"@{self.host}:{self.port}/{self.database}"
        )


class UploadSettings(BaseSettings):
    """Credentials and endpoint of the Cloudinary-compatible image host.

    Attributes:
        cloud_name: Account segment of the upload URL.
        api_key: Public key sent with every signed request.
        api_secret: Signing secret. Must be overridden in production.
        base_url: API root, without the account segment.
        timeout: Per-request timeout in seconds.
    """

    model_config = SettingsConfigDict(env_prefix="CLOUDINARY_", extra="ignore")

    cloud_name: str = "schoolhub"
    api_key: str = ""
    api_secret: SecretStr = SecretStr(DEFAULT_UPLOAD_SECRET)
    base_url: str = "https://api.cloudinary.com/v1_1"
    timeout: float = 30.0

    @property
    def image_api_url(self) -> str:
        return f"{self.base_url.rstrip('/')}/{self.cloud_name}/image"


class CodeSettings(BaseSettings):
    """Generation and hashing of invitation and class codes."""

    model_config = SettingsConfigDict(env_prefix="INVITATION_CODE_", extra="ignore")

    length: int = Field(default=8, ge=4, le=32)
    hash_rounds: int = Field(default=12, ge=4, le=16, description="bcrypt cost factor")


class CORSSettings(BaseSettings):
    model_config = SettingsConfigDict(env_prefix="CORS_", extra="ignore")

    origins: str = Field(
        default="http://localhost:3000,http://localhost:5173",
        description="Comma separated allowed origins",
    )
    allow_credentials: bool = True
    allow_methods: list[str] = ["*"]
    allow_headers: list[str] = ["*"]

    @property
    def origins_list(self) -> list[str]:
        """Origins split on commas, blanks dropped."""
        return [item.strip() for item in self.origins.split(",") if item.strip()]


class APISettings(BaseSettings):
    """Options passed to uvicorn by ``python -m schoolhub``."""

    model_config = SettingsConfigDict(env_prefix="API_", extra="ignore")

    host: str = "0.0.0.0"
    port: int = 8000
    workers: int = 2
    reload: bool = False


class Settings(BaseSettings):
    """Top-level settings.

    Reads ``.env`` when present. Nested groups are built through their
    own classes so each keeps its prefix.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        case_sensitive=False,
    )

    environment: Environment = "development"
    debug: bool = True
    log_level: LogLevel = "DEBUG"

    database: DatabaseSettings = Field(default_factory=DatabaseSettings)
    upload: UploadSettings = Field(default_factory=UploadSettings)
    codes: CodeSettings = Field(default_factory=CodeSettings)
    cors: CORSSettings = Field(default_factory=CORSSettings)
    api: APISettings = Field(default_factory=APISettings)

    @model_validator(mode="after")
    def reject_default_secret_in_production(self) -> Self:
        """Refuse to start production with the placeholder upload secret.

        Raises:
            ValueError: If ``environment`` is production and
                ``CLOUDINARY_API_SECRET`` was never set.
        """
        if (
            self.environment == "production"
            and self.upload.api_secret.get_secret_value() == DEFAULT_UPLOAD_SECRET
        ):
            raise ValueError(
                "CLOUDINARY_API_SECRET still has its placeholder value; "
                "production needs a real signing secret."
            )
        return self

    @property
    def is_development(self) -> bool:
        return self.environment == "development"


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Return the process-wide Settings instance."""
    return Settings()


def clear_settings_cache() -> None:
    """Forget the cached instance so the next call re-reads the environment."""
    get_settings.cache_clear()
