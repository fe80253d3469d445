"""
Configuration settings for the Random Deck relay
Loads environment variables and provides application settings
"""

from typing import Dict
from functools import lru_cache
from pydantic import Field
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Application settings loaded from environment variables"""

    # API Configuration
    environment: str = Field(default="production")
    port: int = Field(default=8000)  # PORT

    # Logging
    log_level: str = Field(default="INFO")

    # Timeout Configuration (the upstream site can hang indefinitely)
    upstream_timeout: float = Field(default=10.0)
    upstream_connect_timeout: float = Field(default=5.0)

    # External Services
    archidekt_base_url: str = Field(default="https://archidekt.com/")
    relay_url: str = Field(default="http://localhost:8000")

    # Player name -> Archidekt folder id, e.g. PLAYER_FOLDERS='{"alice": "123"}'
    player_folders: Dict[str, str] = Field(
        default={
            "catar": "397706",
            "timmsen": "966685",
            "failbob": "966113",
        }
    )

    # CORS Configuration
    allowed_origins: list = Field(default=["*"])

    class Config:
        env_file = ".env"
        case_sensitive = False


@lru_cache()
def get_settings() -> Settings:
    """Get cached application settings"""
    return Settings()


# Global settings instance
settings = get_settings()
