"""Application configuration."""

from pydantic_settings import BaseSettings
from typing import List

from weekly.core.enums import Environment
from weekly.core.exceptions import ConfigurationError


class Settings(BaseSettings):
    """Application settings."""

    # Environment
    environment: str = "development"  # development, staging, production

    # API Configuration
    backend_host: str = "0.0.0.0"
    backend_port: int = 8000
    cors_origins: str = "http://localhost:5173,http://localhost:3000"

    @property
    def cors_origins_list(self) -> List[str]:
        """Parse CORS origins from comma-separated string."""
        return [origin.strip() for origin in self.cors_origins.split(",")]

    @property
    def is_production(self) -> bool:
        """Check if running in production mode."""
        return Environment.is_production(self.environment)

    # Anthropic Claude
    anthropic_api_key: str = ""
    llm_model: str = "claude-sonnet-4-5-20250929"
    llm_max_tokens: int = 4096
    chat_max_iterations: int = 10

    # Slack
    slack_bot_token: str = ""  # Bot token (xoxb-)
    slack_user_token: str = ""  # User token (xoxp-), used when no bot token is set

    # Zoom (Server-to-Server OAuth app)
    zoom_client_id: str = ""
    zoom_client_secret: str = ""
    zoom_account_id: str = ""

    # Chorus.ai
    chorus_api_key: str = ""
    chorus_api_base_url: str = "https://api.chorus.ai/v1"

    # Google Sheets / Drive (OAuth refresh token flow)
    google_client_id: str = ""
    google_client_secret: str = ""
    google_refresh_token: str = ""

    # Upper bound for a single vendor call (connect or read)
    connector_timeout_seconds: float = 30.0

    # Logging
    log_level: str = "INFO"
    log_format: str = "development"  # "development" for readable, "json" for structured

    # Application version (for health checks)
    version: str = "1.0.0"

    def require_model_api_key(self) -> str:
        """
        Return the model API key or fail.

        A missing model key is the only configuration problem that stops
        the process; connector credentials are checked lazily on connect.
        """
        key = self.anthropic_api_key.strip()
        if not key:
            raise ConfigurationError(
                "ANTHROPIC_API_KEY is not configured. Add it to your environment or .env file.",
                details={"setting": "ANTHROPIC_API_KEY"},
            )
        return key

    class Config:
        env_file = ".env"
        case_sensitive = False
        extra = "ignore"  # Ignore extra fields in .env


settings = Settings()
