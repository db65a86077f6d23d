"""Application configuration using pydantic-settings."""

from pathlib import Path
from typing import Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """
    Application settings loaded from environment variables.

    All settings can be configured via environment variables or a .env file.
    See .env.example for a template.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # ========================================================================
    # Application Settings
    # ========================================================================
    app_name: str = Field(default="Product Promo Generator", description="Application name")
    app_version: str = Field(default="1.0.0", description="Application version")
    debug: bool = Field(default=False, description="Debug mode")
    log_level: str = Field(default="INFO", description="Logging level (DEBUG, INFO, WARNING, ERROR)")
    log_file: Optional[Path] = Field(default=None, description="Optional log file; enables a rotating file sink")
    log_rotation: str = Field(default="10 MB", description="Log file rotation size")
    log_retention: str = Field(default="7 days", description="Log file retention period")

    # ========================================================================
    # Generation Gateway
    # ========================================================================
    gateway_api_key: Optional[str] = Field(
        default=None,
        description="Bearer credential for the generation gateway (required). Set via GATEWAY_API_KEY env var.",
    )
    gateway_base_url: str = Field(
        default="https://openrouter.ai/api/v1",
        description="OpenAI-compatible gateway base URL (default: OpenRouter)",
    )
    gateway_timeout_seconds: float = Field(
        default=60.0, description="Read timeout for each gateway call in seconds (default: 60)"
    )
    gateway_connect_timeout_seconds: float = Field(
        default=10.0, description="Connect timeout for each gateway call in seconds (default: 10)"
    )
    gateway_app_url: Optional[str] = Field(
        default=None, description="Optional HTTP-Referer attribution header sent to the gateway"
    )
    gateway_app_title: Optional[str] = Field(
        default=None, description="Optional X-Title attribution header sent to the gateway"
    )

    # ========================================================================
    # Image Generation Settings
    # ========================================================================
    image_model: str = Field(
        default="google/gemini-2.0-flash-exp",
        description="Multimodal model used for product image generation",
    )
    image_request_mode: str = Field(
        default="chat",
        description="Image request shape: 'chat' (chat completions with image modality) or 'images' (images/generations)",
    )
    image_size: str = Field(default="1024x1024", description="Image size for 'images' request mode")
    image_max_tokens: int = Field(default=2048, description="max_tokens for chat-mode image calls")
    default_style_hint: str = Field(
        default="lifestyle, aesthetic, clean lighting",
        description="Style hint used when the request carries no style",
    )

    # ========================================================================
    # Script Generation Settings
    # ========================================================================
    text_model: str = Field(default="gpt-4o-mini", description="Chat model used for the promo script")
    script_language: str = Field(
        default="Bahasa Indonesia", description="Language the four-scene script is written in"
    )
    script_temperature: float = Field(default=0.8, description="Sampling temperature for the script call")

    # ========================================================================
    # Page Metadata Settings
    # ========================================================================
    metadata_timeout_seconds: float = Field(
        default=10.0, description="Timeout for fetching the product page in seconds (default: 10)"
    )
    metadata_user_agent: str = Field(
        default=(
            "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 "
            "(KHTML, like Gecko) Chrome/120.0.0.0 Safari/537.36"
        ),
        description="User-Agent used when fetching product pages",
    )

    # ========================================================================
    # Parallelism Settings
    # ========================================================================
    max_parallel_api_calls: int = Field(
        default=2,
        description="Maximum number of parallel gateway calls within one request (set to 1 for sequential)",
    )


# Global settings instance
settings = Settings()
