"""Application configuration using Pydantic Settings.

All configuration is loaded from environment variables.
No secrets are hardcoded.
"""

from enum import Enum
from functools import lru_cache

from pydantic import Field, SecretStr
from pydantic_settings import BaseSettings, SettingsConfigDict


class Environment(str, Enum):
    """Application environment."""

    DEVELOPMENT = "development"
    STAGING = "staging"
    PRODUCTION = "production"


class OnDeviceSettings(BaseSettings):
    """On-device generative tier configuration.

    Points at a local OpenAI-compatible server (Ollama by default).
    """

    model_config = SettingsConfigDict(env_prefix="ON_DEVICE_")

    enabled: bool = Field(
        default=True,
        description="Whether the on-device tier is attempted at all",
    )
    base_url: str = Field(
        default="http://localhost:11434/v1",
        description="Local generation API base URL (Ollama default)",
    )
    model: str = Field(
        default="llama3.2:3b",
        description="Local model name",
    )
    timeout: float = Field(
        default=10.0,
        description="Request timeout in seconds",
    )
    max_tokens: int = Field(
        default=512,
        description="Maximum tokens in response",
    )
    temperature: float = Field(
        default=0.1,
        description="Sampling temperature (lower = more deterministic)",
    )


class RemoteSettings(BaseSettings):
    """Remote generative tier configuration.

    The tier is only attempted when an API key is present.
    """

    model_config = SettingsConfigDict(env_prefix="REMOTE_LLM_")

    base_url: str = Field(
        default="https://api.openai.com/v1",
        description="Remote generation API base URL",
    )
    model: str = Field(
        default="gpt-4o-mini",
        description="Remote model name",
    )
    api_key: SecretStr | None = Field(
        default=None,
        description="API key (tier disabled when missing)",
    )
    timeout: float = Field(
        default=45.0,
        description="Request timeout in seconds",
    )
    max_tokens: int = Field(
        default=512,
        description="Maximum tokens in response",
    )
    temperature: float = Field(
        default=0.2,
        description="Sampling temperature",
    )

    @property
    def has_credentials(self) -> bool:
        """Whether a non-empty API key is configured."""
        return self.api_key is not None and bool(self.api_key.get_secret_value())


class ClassifierSettings(BaseSettings):
    """Classification validation configuration."""

    model_config = SettingsConfigDict(env_prefix="CLASSIFIER_")

    min_tags: int = Field(
        default=3,
        ge=3,
        le=15,
        description="Minimum accepted tag count",
    )
    max_tags: int = Field(
        default=15,
        ge=3,
        le=15,
        description="Maximum accepted tag count",
    )


class Settings(BaseSettings):
    """Main application settings.

    Aggregates all configuration sections.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Application settings
    environment: Environment = Field(
        default=Environment.DEVELOPMENT,
        description="Application environment",
    )
    log_level: str = Field(
        default="INFO",
        description="Logging level",
    )
    debug: bool = Field(
        default=False,
        description="Enable debug mode",
    )

    # API settings
    api_host: str = Field(
        default="0.0.0.0",
        description="API server host",
    )
    api_port: int = Field(
        default=8000,
        description="API server port",
    )

    # Nested settings
    on_device: OnDeviceSettings = Field(default_factory=OnDeviceSettings)
    remote: RemoteSettings = Field(default_factory=RemoteSettings)
    classifier: ClassifierSettings = Field(default_factory=ClassifierSettings)


@lru_cache
def get_settings() -> Settings:
    """Get cached application settings.

    Returns:
        Settings instance loaded from environment.
    """
    return Settings()
