"""Process configuration, read from ``GUESSTHAT_*`` environment variables or ``.env``."""

from functools import lru_cache
from pathlib import Path
from typing import Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_prefix="GUESSTHAT_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Language model
    model: str = "openai/gpt-4o-mini"
    temperature: float = 0.7
    num_retries: int = 3
    request_timeout: float = Field(default=60.0, description="LM client timeout in seconds")

    # Pipeline limits
    max_gen_count: int = Field(default=50, ge=1, description="Ceiling on provider batch size")
    max_draw_count: int = Field(default=100, ge=1)

    # Resources
    prompt_template_folder: str = "openai"
    prompt_template_file: str = "card_prompt.txt"
    profanity_list_file: str = "filter_profanity_list.txt"
    resources_dir: Optional[Path] = None

    # Storage
    database_path: str = "cards.db"

    # Server
    server_name: str = "0.0.0.0"
    server_port: int = 7860
    log_level: str = "INFO"


@lru_cache
def get_settings() -> Settings:
    return Settings()
