import os
from functools import lru_cache
from typing import Optional

from dotenv import load_dotenv
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    DATABASE_URL: str = "sqlite:///chordcharts.db"
    HOST: str = "127.0.0.1"
    PORT: int = 8000
    LOG_LEVEL: str = "INFO"
    PDF_FONT_PATH: Optional[str] = None

    # read-mode pagination
    PAGE_CHROME_HEIGHT: int = 250
    SECTION_HEIGHT_ONE_COLUMN: int = 150
    SECTION_HEIGHT_TWO_COLUMNS: int = 100
    MIN_SECTIONS_PER_PAGE: int = 2
    MAX_SECTIONS_PER_PAGE: int = 8
    TWO_COLUMN_BREAKPOINT: int = 768

    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

@lru_cache()
def get_settings():
    # If running tests, load .env.test
    if os.getenv("PYTHON_ENV") == "test":
        load_dotenv(".env.test")
    else:
        load_dotenv(".env")
    return Settings()
