from pydantic import AliasChoices, Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_prefix="FAMTIME_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    jwt_secret: str
    app_env: str = "development"
    log_level: str = "INFO"
    cors_allowed_origins: str = "http://localhost:8081"
    time_zone: str = "Europe/Copenhagen"
    git_sha: str | None = None
    openai_api_key: str | None = Field(
        default=None,
        validation_alias=AliasChoices("OPENAI_API_KEY", "FAMTIME_OPENAI_API_KEY"),
    )
    openai_model: str = Field(
        default="gpt-4o-mini",
        validation_alias=AliasChoices("OPENAI_MODEL", "FAMTIME_OPENAI_MODEL"),
    )
    openai_base_url: str | None = Field(
        default=None,
        validation_alias=AliasChoices("OPENAI_BASE_URL", "FAMTIME_OPENAI_BASE_URL"),
    )
    openai_proxy_url: str | None = Field(
        default=None,
        validation_alias=AliasChoices("OPENAI_PROXY_URL", "FAMTIME_OPENAI_PROXY_URL"),
    )
    refinement_timeout_seconds: float = 15.0


settings = Settings()
