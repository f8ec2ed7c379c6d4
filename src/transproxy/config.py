"""
Configuration management for the translation proxy.

Every provider credential is injected through the environment (or a .env
file). Nothing secret lives in source.
"""

from functools import lru_cache
from typing import Literal

from pydantic import field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

ProviderName = Literal["deepl", "groq", "huggingface"]


class Settings(BaseSettings):
    """
    Application settings.

    Minimal configuration example:
        DEEPL_API_KEY=your_key:fx
        GROQ_API_KEY=gsk_...
        HUGGINGFACE_TOKEN=hf_...

    Callers may also send their own DeepL key per request.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # ===== Translation chain =====

    # Tried in order; a single entry gives the plain DeepL proxy
    translation_providers: list[ProviderName] = ["deepl", "groq", "huggingface"]

    # DeepL (default key used when a request carries none, and by the monitor)
    deepl_api_key: str | None = None

    # Groq (OpenAI-compatible endpoint)
    groq_api_key: str | None = None
    groq_model: str = "llama-3.1-8b-instant"
    groq_base_url: str = "https://api.groq.com/openai/v1"

    # Hugging Face Inference API
    huggingface_token: str | None = None
    huggingface_base_url: str = "https://api-inference.huggingface.co/models"
    huggingface_min_interval_seconds: float = 1.0

    # Analytics sink (disabled when unset)
    analytics_url: str | None = None

    # ===== API service =====
    api_host: str = "0.0.0.0"
    api_port: int = 3000

    # ===== Quota monitoring =====
    monitor_enabled: bool = False
    monitor_interval_minutes: int = 60
    monitor_high_threshold: float = 0.85
    monitor_critical_threshold: float = 0.95
    cron_secret: str | None = None

    # Alert mail
    smtp_host: str = "smtp.gmail.com"
    smtp_port: int = 587
    email_from: str | None = None
    email_to: str | None = None
    email_password: str | None = None

    # Logging
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = "INFO"
    log_format: Literal["json", "console"] = "console"

    # ===== Validators =====

    @field_validator("translation_providers")
    @classmethod
    def validate_providers(cls, v: list[str]) -> list[str]:
        if not v:
            raise ValueError("translation_providers must name at least one provider")
        if len(set(v)) != len(v):
            raise ValueError("translation_providers must not repeat a provider")
        return v

    @field_validator("monitor_interval_minutes")
    @classmethod
    def validate_monitor_interval(cls, v: int) -> int:
        if v < 1:
            raise ValueError("monitor_interval_minutes must be at least 1")
        return v

    @field_validator("huggingface_min_interval_seconds")
    @classmethod
    def validate_min_interval(cls, v: float) -> float:
        if v < 0:
            raise ValueError("huggingface_min_interval_seconds must not be negative")
        return v

    @model_validator(mode="after")
    def validate_thresholds(self) -> "Settings":
        if not 0 < self.monitor_high_threshold <= self.monitor_critical_threshold <= 1:
            raise ValueError(
                "monitor thresholds must satisfy 0 < high <= critical <= 1"
            )
        return self

    # ===== Derived properties =====

    @property
    def mail_enabled(self) -> bool:
        """Check if alert mail can be sent."""
        return bool(self.email_from and self.email_to)

    def can_monitor(self) -> bool:
        """Check if quota monitoring is properly configured."""
        return bool(self.monitor_enabled and self.deepl_api_key)


@lru_cache
def get_settings() -> Settings:
    """
    Get cached settings instance.

    Usage:
        from transproxy.config import get_settings
        settings = get_settings()
    """
    return Settings()
