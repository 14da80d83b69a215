"""Application configuration via pydantic-settings.

Loads all settings from environment variables with sensible defaults.
A global `settings` singleton is available for import throughout the app.
"""

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

# Published in .env.example; never accepted as a real signing key.
PLACEHOLDER_SESSION_SECRET = "change-this-in-prod"


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
    )

    # Supabase
    SUPABASE_URL: str
    SUPABASE_KEY: str

    # Cloudinary (unsigned upload preset)
    CLOUDINARY_CLOUD_NAME: str = ""
    CLOUDINARY_UPLOAD_PRESET: str = ""
    UPLOAD_TIMEOUT_SECONDS: float = 60.0

    # Admin panel
    ADMIN_PASSWORD: str = ""
    SESSION_SECRET: str
    LINK_HISTORY_LIMIT: int = 10

    # Public site
    SITE_URL: str = "http://localhost:8000"
    SITE_NAME: str = "TruthVibe"

    # CORS
    ALLOWED_ORIGINS: str = "*"

    # Logging
    LOG_LEVEL: str = "INFO"

    @field_validator("SESSION_SECRET")
    @classmethod
    def _real_session_secret(cls, value: str) -> str:
        value = value.strip()
        if not value or value == PLACEHOLDER_SESSION_SECRET:
            raise ValueError("SESSION_SECRET must be set to a private random value")
        return value

    @property
    def site_url(self) -> str:
        """``SITE_URL`` without a trailing slash."""
        return self.SITE_URL.rstrip("/")


settings = Settings()  # type: ignore[call-arg]
