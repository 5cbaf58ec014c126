"""SnapAI configuration (image service + local paths only)."""

from __future__ import annotations

from pathlib import Path

from dotenv import load_dotenv
from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

# Project root directory (parent of backend/)
PROJECT_ROOT = Path(__file__).parent.parent.parent.parent.resolve()

# Load .env file into environment variables
load_dotenv(PROJECT_ROOT / ".env")


class Settings(BaseSettings):
    """SnapAI configuration.

    The user's API key is not a setting: it is typed into the session and
    only ever travels in the Authorization header of outbound requests.
    """

    # OpenAI image generation
    images_url: str = Field(default="https://api.openai.com/v1/images/generations")
    image_model: str = Field(default="dall-e-3")
    image_size: str = Field(default="1024x1024")
    image_quality: str = Field(default="standard")
    image_count: int = Field(default=1, ge=1)
    request_timeout_s: float = Field(default=120.0, gt=0)
    download_timeout_s: float = Field(default=60.0, gt=0)

    # Downloads
    filename_prefix: str = Field(default="snapai")
    filename_max_chars: int = Field(default=30, ge=1)

    # Notifications auto-dismiss after this many seconds
    notification_ttl_s: float = Field(default=4.0, gt=0)

    # HTTP surface
    cors_origins: list[str] = Field(
        default=["http://localhost:5173", "http://localhost:8080"]
    )

    # Local data (logs only, nothing about the session is persisted)
    data_dir: str = Field(default=str(PROJECT_ROOT / "data"))
    log_file: str = Field(default="logs.txt")

    model_config = SettingsConfigDict(
        env_prefix="SNAPAI_",
        env_file=str(PROJECT_ROOT / ".env"),
        extra="ignore",
    )


settings = Settings()
