"""Configuration management for the signup form agent."""

from typing import List, Optional
from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings with environment variable support."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore"
    )

    # API Keys
    gemini_api_key: Optional[str] = Field(None, description="Gemini API key")

    # Model Configuration
    llm_model: str = Field("gemini-2.5-flash", description="Vision-capable generative model")
    llm_base_url: str = Field(
        "https://generativelanguage.googleapis.com/v1beta/openai/",
        description="OpenAI-compatible endpoint serving the model"
    )
    llm_temperature: float = Field(0.2, description="Sampling temperature")
    llm_max_tokens: int = Field(2000, description="Maximum tokens per completion")

    # Browser Configuration
    browser_headless: bool = Field(False, description="Run browser in headless mode")
    browser_slow_mo_ms: int = Field(500, description="Delay inserted between browser operations")
    browser_args: List[str] = Field(
        ["--start-maximized", "--disable-extensions", "--disable-file-system"],
        description="Chromium launch arguments"
    )
    navigation_delay_ms: int = Field(1000, description="Wait after loading the base URL")
    settle_delay_ms: int = Field(2000, description="Flat wait before the page snapshot")
    action_timeout_ms: int = Field(10000, description="Timeout for a single fill or click")

    # Artifacts
    screenshot_dir: str = Field("screenshots", description="Directory for page screenshots")

    # Application Configuration
    debug: bool = Field(False, description="Enable debug mode")
    log_level: str = Field("INFO", description="Logging level")


# Global settings instance
settings = Settings()
