"""Configuration system for Content Integrity using Pydantic Settings."""

from pathlib import Path
from typing import Literal

from pydantic import Field, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class LLMConfig(BaseSettings):
    """Generative judgment endpoint configuration."""

    model_config = SettingsConfigDict(env_prefix="LLM_")

    # API settings (OpenAI-compatible server, e.g. vLLM)
    api_base: str = Field(
        default="http://localhost:8000/v1",
        description="OpenAI-compatible API base URL",
    )
    api_key: str = Field(default="EMPTY", description="API key (EMPTY for local)")
    model_name: str = Field(
        default="Qwen/Qwen3-4B-AWQ",
        description="Model name served by the endpoint",
    )

    # Generation settings
    temperature: float = Field(default=0.1, ge=0.0, le=2.0)
    max_tokens: int = Field(default=512, ge=1, description="Max tokens per generation")

    # Transport
    timeout: float = Field(default=60.0, gt=0, description="Request timeout in seconds")
    max_attempts: int = Field(
        default=1,
        ge=1,
        le=10,
        description="Attempts per request (1 = no retry)",
    )


class DetectionConfig(BaseSettings):
    """Detector thresholds and segmentation settings."""

    model_config = SettingsConfigDict(env_prefix="DETECT_")

    match_threshold: float = Field(
        default=0.3,
        ge=0.0,
        le=1.0,
        description="Similarity a candidate must exceed to become a match",
    )
    proposal_chars: int = Field(
        default=1000,
        ge=1,
        description="Leading characters sent for external source proposal",
    )
    source_excerpt_chars: int = Field(
        default=200,
        ge=1,
        description="Placeholder excerpt length for proposed sources",
    )
    corpus_excerpt_chars: int = Field(
        default=100,
        ge=1,
        description="Input excerpt length stored on corpus matches",
    )
    ngram_size: int = Field(default=3, ge=1, description="N-gram length used by the compare command")

    # Segmentation
    ai_segment_size: int = Field(
        default=500,
        ge=1,
        description="Words per AI-content segment",
    )
    plagiarism_segment_size: int = Field(
        default=500,
        ge=1,
        description="Words per chunk for chunked plagiarism analysis",
    )

    # Fan-out
    max_concurrent: int = Field(
        default=4,
        ge=1,
        description="Maximum concurrent judgment calls per analysis",
    )

    @model_validator(mode="after")
    def check_excerpts(self) -> "DetectionConfig":
        if self.source_excerpt_chars > self.proposal_chars:
            raise ValueError("source_excerpt_chars must not exceed proposal_chars")
        return self


class AppConfig(BaseSettings):
    """Main application configuration."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_nested_delimiter="__",
        extra="ignore",
    )

    # Sub-configurations
    llm: LLMConfig = Field(default_factory=LLMConfig)
    detection: DetectionConfig = Field(default_factory=DetectionConfig)

    # Logging
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = Field(default="INFO")
    log_file: Path | None = Field(default=None)

    @classmethod
    def from_yaml(cls, path: Path) -> "AppConfig":
        """Load configuration from YAML file."""
        import yaml

        with open(path, encoding="utf-8") as f:
            data = yaml.safe_load(f) or {}
        return cls(**data)

    def to_yaml(self, path: Path) -> None:
        """Save configuration to YAML file."""
        import yaml

        with open(path, "w", encoding="utf-8") as f:
            yaml.dump(
                self.model_dump(mode="json"),
                f,
                default_flow_style=False,
                allow_unicode=True,
            )


# Global config instance (lazy-loaded)
_config: AppConfig | None = None


def get_config() -> AppConfig:
    """Get or create the global configuration instance."""
    global _config
    if _config is None:
        _config = AppConfig()
    return _config


def load_config(path: Path | None = None) -> AppConfig:
    """Load configuration from file or create default."""
    global _config
    if path and path.exists():
        _config = AppConfig.from_yaml(path)
    else:
        _config = AppConfig()
    return _config
