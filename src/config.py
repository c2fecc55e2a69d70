from __future__ import annotations

from functools import cache
from pathlib import Path

from pydantic_settings import BaseSettings, SettingsConfigDict

PROJECT_ROOT = Path(__file__).resolve().parents[1]
ARTIFACTS_DIR = PROJECT_ROOT / "artifacts"
DB_FILE = ARTIFACTS_DIR / "swap_desk.db"


class AppSettings(BaseSettings):
    prices_url: str = "https://interview.switcheo.com/prices.json"
    icon_base_url: str = "https://raw.githubusercontent.com/Switcheo/token-icons/main/tokens"
    request_timeout: float = 8.0
    price_retry_attempts: int = 3
    price_retry_backoff_seconds: float = 0.5
    price_stale_seconds: float = 60.0
    price_retention_seconds: float = 300.0
    swap_delay_seconds: float = 0.6
    db_file: Path = DB_FILE
    log_level: str = "INFO"

    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")


@cache
def config() -> AppSettings:
    return AppSettings()
