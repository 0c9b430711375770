from pydantic_settings import BaseSettings
from typing import Optional


class Settings(BaseSettings):
    # Server configuration
    HOST: str = "0.0.0.0"
    PORT: int = 3000

    # Target site configuration
    BASE_URL: str = "https://www.jobs.ch"
    SEARCH_PATH: str = "/en/vacancies/"
    PUBLICATION_DATE_DAYS: int = 7
    MAX_PAGES: int = 5

    # Browser configuration
    HEADLESS: bool = True
    BROWSER_CDP_URL: Optional[str] = None
    USER_AGENT: str = (
        "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 "
        "(KHTML, like Gecko) Chrome/120 Safari/537.36"
    )
    LOCALE: str = "en-US"
    ACCEPT_LANGUAGE: str = "en-US,en;q=0.9"

    # Logging configuration
    LOG_LEVEL: str = "INFO"

    class Config:
        env_file = ".env"  # Load values from .env file


settings = Settings()
