"""
sitesketch Configuration
"""
from __future__ import annotations
import logging
from typing import Dict, List, Optional
from pydantic_settings import BaseSettings, SettingsConfigDict
from functools import lru_cache


LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

DEFAULT_PROVIDER_MODELS: Dict[str, List[str]] = {
    "google": [
        "gemini-1.5-pro-exp-0801",
        "gemini-1.5-flash-002",
        "gemini-1.5-pro-002",
        "gemini-1.5-flash",
        "gemini-1.5-pro",
        "gemini-1.0-pro",
    ],
    "openai": [
        "gpt-4o",
        "gpt-4o-mini",
    ],
    "cerebras": [
        "llama3.1-70b",
        "llama3.1-8b",
    ],
}


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

    # AI Configuration
    default_provider: str = "google"
    google_api_key: str = ""
    openai_api_key: str = ""
    cerebras_api_key: str = ""  # requires the optional cerebras-cloud-sdk
    provider_models: Dict[str, List[str]] = DEFAULT_PROVIDER_MODELS
    ai_max_tokens: int = 16384
    # None keeps a generation open until the provider finishes
    ai_timeout_seconds: Optional[float] = None

    # Upload policy
    max_images: int = 5
    max_upload_bytes: int = 10 * 1024 * 1024  # total across all images

    # Application Configuration
    app_name: str = "sitesketch"
    debug: bool = False
    log_level: str = "INFO"
    public_dir: str = "public"

    # Server Configuration
    host: str = "0.0.0.0"
    port: int = 3000

    # CORS Configuration
    cors_origins: List[str] = ["*"]

    # Client Configuration
    server_url: str = "http://localhost:3000"

    def api_key_for(self, provider: str) -> str:
        """Return the configured API key for a provider ("" if none)."""
        return {
            "google": self.google_api_key,
            "openai": self.openai_api_key,
            "cerebras": self.cerebras_api_key,
        }.get(provider, "")


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()


def configure_logging(level: Optional[str] = None) -> None:
    """Configure root logging once for the server, the CLI and scripts."""
    level_name = (level or get_settings().log_level).upper()
    logging.basicConfig(level=getattr(logging, level_name, logging.INFO), format=LOG_FORMAT)
