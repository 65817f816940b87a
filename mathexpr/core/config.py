"""
Package configuration.

Settings are read from the environment (prefix ``MATHEXPR_``) or a ``.env`` file.
"""

from functools import lru_cache
from typing import Optional

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """mathexpr settings"""

    APP_NAME: str = "mathexpr"

    # Logging
    LOG_LEVEL: str = "INFO"
    LOG_FORMAT: str = "text"  # json or text
    LOG_FILE: Optional[str] = None

    # YAML file extending the default context (used by the CLI)
    CONTEXT_FILE: Optional[str] = None

    class Config:
        env_prefix = "MATHEXPR_"
        env_file = ".env"
        env_file_encoding = "utf-8"
        case_sensitive = True


@lru_cache()
def get_settings() -> Settings:
    """Get cached settings instance"""
    return Settings()
