import os
from functools import lru_cache
from typing import Literal, Optional

from pydantic import Field, ValidationError
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    database_url: Optional[str] = Field(None, alias="MBA_DATABASE_URL")
    database_pool_size: int = Field(5, alias="MBA_DATABASE_POOL_SIZE")
    database_max_overflow: int = Field(5, alias="MBA_DATABASE_MAX_OVERFLOW")
    database_echo: bool = Field(False, alias="MBA_DATABASE_ECHO")
    mobile_api_key: Optional[str] = Field(None, alias="MOBILE_API_KEY")
    cron_secret: Optional[str] = Field(None, alias="CRON_SECRET")
    firebase_project_id: Optional[str] = Field(None, alias="FIREBASE_PROJECT_ID")
    firebase_service_account_key: Optional[str] = Field(None, alias="FIREBASE_SERVICE_ACCOUNT_KEY")
    reminder_window_minutes: int = Field(30, alias="MBA_REMINDER_WINDOW_MINUTES", ge=1)
    local_timezone: str = Field("UTC", alias="MBA_LOCAL_TIMEZONE")
    openai_api_key: Optional[str] = Field(None, alias="OPENAI_API_KEY")
    agent_model: str = Field("gpt-5-mini", alias="MBA_AGENT_MODEL")
    advisor_mode: Literal["off", "on"] = Field("on", alias="MBA_ADVISOR_MODE")

    class Config:
        env_file = os.getenv("ENV_FILE", ".env")
        env_file_encoding = "utf-8"
        case_sensitive = True


@lru_cache
def get_settings() -> Settings:
    try:
        settings = Settings()  # type: ignore[arg-type]
        if settings.openai_api_key and not os.getenv("OPENAI_API_KEY"):
            os.environ["OPENAI_API_KEY"] = settings.openai_api_key
        return settings
    except ValidationError as exc:
        raise RuntimeError(f"Invalid backend configuration: {exc}") from exc
