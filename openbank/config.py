"""Configuration settings for the open banking mock API."""
from pathlib import Path
from typing import Optional

from pydantic_settings import BaseSettings

DEFAULT_SIGNING_KEY = "open-banking-mock-secret"
PACKAGED_FIXTURES_DIR = Path(__file__).resolve().parent / "fixtures"


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # Service identification
    service_name: str = "openbank-mock"

    # Server
    host: str = "0.0.0.0"
    port: int = 3000

    # Access tokens
    # A real deployment must provision this through a secret manager
    signing_key: str = DEFAULT_SIGNING_KEY
    token_ttl_seconds: int = 3600

    # Link handshake (cosmetic, never verified)
    link_token: str = "mock-link-token"
    link_token_ttl_seconds: int = 3600

    # Persona fixtures; None means the files shipped with the package
    fixtures_dir: Optional[Path] = None

    log_level: str = "INFO"

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"

    @property
    def resolved_fixtures_dir(self) -> Path:
        return self.fixtures_dir or PACKAGED_FIXTURES_DIR

    @property
    def uses_default_signing_key(self) -> bool:
        return self.signing_key == DEFAULT_SIGNING_KEY


settings = Settings()
