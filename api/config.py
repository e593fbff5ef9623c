"""
API configuration settings.
"""

from typing import List

from pydantic_settings import BaseSettings


class APIConfig(BaseSettings):
    """API configuration settings."""

    # API Settings
    api_title: str = "Library API"
    api_version: str = "1.0.0"
    api_description: str = """
    A REST API for managing a catalog of books.

    ## Authentication

    Write endpoints (POST, PUT, DELETE) require an API key. Include your API key in the Authorization header:

    ```
    Authorization: Bearer your_api_key_here
    ```
    """

    # Server Settings
    host: str = "0.0.0.0"
    port: int = 8000
    debug: bool = False

    # API Key Settings
    api_keys: str = ""  # Comma-separated list of valid API keys

    # CORS Settings
    cors_origins: list = ["*"]  # Configure appropriately for production
    cors_allow_credentials: bool = True
    cors_allow_methods: list = ["*"]
    cors_allow_headers: list = ["*"]

    # Logging
    log_level: str = "INFO"

    model_config = {
        "env_file": ".env",
        "extra": "ignore"  # Ignore extra fields from .env
    }

    def get_api_keys(self) -> List[str]:
        """Parse the comma-separated API key setting."""
        return [key.strip() for key in self.api_keys.split(",") if key.strip()]


# Global config instance
config = APIConfig()
