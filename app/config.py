from functools import lru_cache
from typing import Literal

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8")

    telegram_bot_token: str = ""
    notion_api_key: str = ""
    notion_db_id: str = ""
    notion_version: str = "2022-06-28"
    backend: Literal["notion", "local"] = "notion"
    local_db_path: str = "expense_ledger.json"
    log_level: str = "INFO"


@lru_cache
def get_settings() -> Settings:
    return Settings()
