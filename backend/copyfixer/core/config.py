import secrets
from typing import Annotated, Any, Literal

from pydantic import BeforeValidator
from pydantic_settings import BaseSettings, SettingsConfigDict


def parse_cors(value: Any) -> list[str] | str:
    if isinstance(value, str) and not value.startswith("["):
        return [origin.strip() for origin in value.split(",") if origin.strip()]
    if isinstance(value, (list, str)):
        return value
    raise ValueError(value)


class Settings(BaseSettings):
    PROJECT_NAME: str = "CopyFixer"
    ENVIRONMENT: Literal["local", "staging", "production"] = "local"
    API_PREFIX: str = "/api"
    LOG_LEVEL: str = "INFO"

    BACKEND_CORS_ORIGINS: Annotated[list[str] | str, BeforeValidator(parse_cors)] = [
        "http://localhost:3000",
        "http://127.0.0.1:3000",
    ]

    # Relational datastore
    DATABASE_URL: str = "sqlite:///./copyfixer.db"
    DATABASE_TIMEOUT_SECONDS: float = 10.0

    # S3-compatible object store for reference files. The access/secret pair is the
    # elevated credential; STORAGE_PUBLIC_BASE_URL is the public read-only tier.
    STORAGE_ENDPOINT: str | None = None
    STORAGE_BUCKET: str = "reference-files"
    STORAGE_ACCESS_KEY: str | None = None
    STORAGE_SECRET_KEY: str | None = None
    STORAGE_REGION: str = "us-east-1"
    STORAGE_PUBLIC_BASE_URL: str | None = None
    STORAGE_FORCE_PATH_STYLE: bool = True
    STORAGE_TIMEOUT_SECONDS: float = 15.0

    # LLM chat completions (OpenAI wire format)
    LLM_API_KEY: str | None = None
    LLM_BASE_URL: str = "https://openrouter.ai/api/v1"
    MODEL_DEFAULT: str = "openai/gpt-4o"
    LLM_TEMPERATURE: float = 0.7
    LLM_MAX_TOKENS: int = 1000
    LLM_TIMEOUT_SECONDS: float = 60.0
    LLM_MAX_RETRIES: int = 0

    # Admin access
    ADMIN_SECRET: str | None = None
    SECRET_KEY: str = secrets.token_urlsafe(32)
    ADMIN_TOKEN_EXPIRE_MINUTES: int = 60 * 8

    # Public base URL used to build absolute links sent to the LLM
    APP_BASE_URL: str = "http://localhost:3000"

    SESSION_COOKIE_NAME: str = "user_session"
    SESSION_COOKIE_MAX_AGE_SECONDS: int = 60 * 60 * 24 * 30
    SUBMISSION_HISTORY_LIMIT: int = 50

    @property
    def cors_origins(self) -> list[str]:
        if isinstance(self.BACKEND_CORS_ORIGINS, str):
            return [self.BACKEND_CORS_ORIGINS]
        return self.BACKEND_CORS_ORIGINS

    @property
    def app_base_url(self) -> str:
        return self.APP_BASE_URL.rstrip("/")

    @property
    def storage_public_base_url(self) -> str | None:
        if self.STORAGE_PUBLIC_BASE_URL:
            return self.STORAGE_PUBLIC_BASE_URL.rstrip("/")
        if self.STORAGE_ENDPOINT:
            return f"{self.STORAGE_ENDPOINT.rstrip('/')}/{self.STORAGE_BUCKET}"
        return None

    model_config = SettingsConfigDict(env_file=".env", extra="ignore")


settings = Settings()
