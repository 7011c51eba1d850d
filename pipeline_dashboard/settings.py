from pydantic_settings import BaseSettings, SettingsConfigDict
from pydantic import Field
from typing import List

class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

    version: str = "0.3.0"

    # AWS
    aws_region: str | None = Field(default=None, alias="AWS_REGION")
    aws_profile: str | None = Field(default=None, alias="AWS_PROFILE")
    aws_connect_timeout: float = Field(default=5.0, alias="AWS_CONNECT_TIMEOUT")
    aws_read_timeout: float = Field(default=30.0, alias="AWS_READ_TIMEOUT")

    # DB (pipeline visits)
    database_url: str = Field(default="sqlite:///./pipeline_dashboard.db", alias="DATABASE_URL")

    # telegram (captured errors)
    telegram_bot_token: str = Field(default="", alias="TELEGRAM_BOT_TOKEN")
    telegram_chat_id: str = Field(default="", alias="TELEGRAM_CHAT_ID")

    toast_history_size: int = Field(default=100, alias="TOAST_HISTORY_SIZE")

    # CORS
    cors_allow_origins: List[str] = Field(default_factory=lambda: ["*"])

    log_level: str = Field(default="INFO", alias="LOG_LEVEL")
