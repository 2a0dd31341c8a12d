from functools import lru_cache
from typing import Annotated, List

from pydantic import Field, field_validator, model_validator
from pydantic_settings import BaseSettings, NoDecode, SettingsConfigDict

MIN_SECRET_LENGTH = 10


class Settings(BaseSettings):
    # API
    API_STR: str = ""

    # JWT - no defaults, startup must fail without them
    JWT_ACCESS_TOKEN_SECRET: str = Field(..., min_length=MIN_SECRET_LENGTH)
    JWT_ACCESS_TOKEN_EXPIRATION_TIME_IN_SECONDS: int = Field(..., gt=0)
    JWT_REFRESH_TOKEN_SECRET: str = Field(..., min_length=MIN_SECRET_LENGTH)
    JWT_REFRESH_TOKEN_EXPIRATION_TIME_IN_SECONDS: int = Field(..., gt=0)
    JWT_ALGORITHM: str = "HS256"

    # Password hashing (bcrypt cost factor)
    SALT_ROUNDS: int = Field(..., ge=4, le=31)

    # Database
    DATABASE_URL: str = Field(...)
    AUTO_CREATE_TABLES: bool = False

    # CORS
    BACKEND_CORS_ORIGINS: Annotated[List[str], NoDecode] = []

    # Environment
    LOG_LEVEL: str = "info"
    LOG_DIR: str = "/tmp/logs"
    ENVIRONMENT: str = "production"

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=True,
        extra="ignore",
    )

    @field_validator("BACKEND_CORS_ORIGINS", mode="before")
    @classmethod
    def assemble_cors_origins(cls, v):
        if isinstance(v, str) and not v.startswith("["):
            return [i.strip() for i in v.split(",") if i.strip()]
        elif isinstance(v, (list, str)):
            return v
        raise ValueError(v)

    @model_validator(mode="after")
    def check_token_kinds_differ(self):
        if self.JWT_ACCESS_TOKEN_SECRET == self.JWT_REFRESH_TOKEN_SECRET:
            raise ValueError("Access and refresh token secrets must differ")
        if (
            self.JWT_REFRESH_TOKEN_EXPIRATION_TIME_IN_SECONDS
            < self.JWT_ACCESS_TOKEN_EXPIRATION_TIME_IN_SECONDS
        ):
            raise ValueError("Refresh token must not expire before access token")
        return self


@lru_cache
def get_settings() -> Settings:
    """Build settings once from the environment."""
    return Settings()
