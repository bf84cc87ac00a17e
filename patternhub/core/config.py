"""Application configuration loaded via pydantic settings."""

from typing import List
import secrets

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Strongly-typed application settings with environment overrides."""

    # Application
    APP_NAME: str = "PatternHub"
    APP_VERSION: str = "0.1.0"
    DEBUG: bool = False

    # Security
    SECRET_KEY: str = secrets.token_urlsafe(32)
    ALGORITHM: str = "HS256"
    ACCESS_TOKEN_EXPIRE_MINUTES: int = 60

    # Database
    DATABASE_URL: str = "sqlite:///./var/patternhub.db"

    # Content files (one Markdown body per pattern and locale)
    CONTENT_ROOT: str = "./var/design-patterns"

    # Localization
    SUPPORTED_LOCALES: List[str] = ["zh", "en"]
    DEFAULT_LOCALE: str = "zh"
    LOCALE_COOKIE_NAME: str = "locale"

    # Cache lifetimes (seconds)
    CACHE_TTL_HOME: int = 1800
    CACHE_TTL_CATEGORIES: int = 3600
    CACHE_TTL_PATTERN_HEADINGS: int = 3600
    CACHE_TTL_PATTERN_CONTENT: int = 3600

    # Markdown
    MARKDOWN_MAX_NESTING: int = 20

    # Pages
    RELATED_PATTERNS_LIMIT: int = 3
    # Browser cache lifetime for successful public GET responses
    PAGE_CACHE_MAX_AGE: int = 3600

    # Development seed data
    SEED_DEMO_DATA: bool = True

    # CORS
    ALLOWED_ORIGINS: List[str] = ["http://localhost:3000", "http://localhost:8000"]

    # Logging
    LOG_LEVEL: str = "INFO"
    LOG_LEVELS: str = "TRACE,ERROR,WARNING,INFO"
    LOG_FILE_PATH: str = "./var/logs/app.log"

    class Config:
        """Configure environment file loading behavior."""

        env_file = ".env"
        env_file_encoding = "utf-8"
        case_sensitive = True


settings = Settings()
