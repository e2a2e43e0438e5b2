"""Service configuration using Pydantic Settings with YAML support.

This module provides centralized configuration management with:
- YAML-based configuration files organized by domain
- Environment-specific overrides (test, development, production)
- Environment variable loading for secrets
- Type validation and coercion
- Caching for performance
"""

from __future__ import annotations

from functools import lru_cache
from typing import TYPE_CHECKING

from pydantic import BaseModel, Field, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from .yaml_source import MultiYamlConfigSettingsSource


if TYPE_CHECKING:
    from pydantic_settings import PydanticBaseSettingsSource


# =============================================================================
# Nested Configuration Models (from YAML)
# =============================================================================


class AppSettings(BaseModel):
    """Service identity settings."""

    name: str = "Ingredient Substitution Service"
    version: str = "0.1.0"
    debug: bool = False


class LoggingSettings(BaseModel):
    """Logging configuration settings."""

    level: str = "INFO"
    format: str = "json"


class DatabaseSettings(BaseModel):
    """PostgreSQL catalog database configuration settings."""

    host: str = "localhost"
    port: int = 5432
    name: str = "ingredient_catalog"
    user: str | None = None
    min_pool_size: int = 2
    max_pool_size: int = 10
    command_timeout: float = 30.0
    ssl: bool = False


class GenerationModelSettings(BaseModel):
    """A candidate model for substitute generation (A/B variant)."""

    id: str
    weight: float = Field(default=1.0, gt=0)


class GenerationSettings(BaseModel):
    """Substitute generation call policy."""

    models: list[GenerationModelSettings] = [
        GenerationModelSettings(id="qwen/qwen-2.5-7b-instruct")
    ]
    temperature: float = 0.0
    max_attempts: int = Field(default=3, ge=1)
    retry_delay_seconds: float = Field(default=2.0, ge=0)
    # None disables the overall deadline
    deadline_seconds: float | None = 100.0


class LLMSettings(BaseModel):
    """Generative model endpoint configuration."""

    base_url: str = "https://openrouter.ai/api/v1"
    timeout: float = 30.0
    requests_per_minute: float = 60.0
    generation: GenerationSettings = GenerationSettings()
    rewrite_model: str = "qwen/qwen-2.5-7b-instruct"
    explanation_model: str = "qwen/qwen-2.5-7b-instruct"

    @model_validator(mode="after")
    def _deadline_covers_all_attempts(self) -> LLMSettings:
        """Every attempt must be able to time out before the deadline fires."""
        policy = self.generation
        if policy.deadline_seconds is None:
            return self
        worst_case = (
            policy.max_attempts * self.timeout
            + (policy.max_attempts - 1) * policy.retry_delay_seconds
        )
        if policy.deadline_seconds < worst_case:
            msg = (
                f"generation.deadline_seconds ({policy.deadline_seconds}) must be at "
                f"least {worst_case} for {policy.max_attempts} attempts with a "
                f"{self.timeout}s timeout"
            )
            raise ValueError(msg)
        return self


class MatchingSettings(BaseModel):
    """Fuzzy matching configuration.

    The threshold is a tuned constant for the Dice bigram coefficient, not
    something derived from the catalog.
    """

    threshold: float = Field(default=0.77, ge=0, le=1)
    max_substitutes: int = Field(default=10, ge=1)


class PromptSettings(BaseModel):
    """Prompt construction settings."""

    few_shot_examples: int = Field(default=3, ge=0)
    recipe_context_chars: int = Field(default=400, ge=1)


class VocabularySettings(BaseModel):
    """Vocabulary cache settings."""

    # None keeps the snapshot for the process lifetime
    ttl_seconds: float | None = None


class MetricsSettings(BaseModel):
    """Metrics configuration settings."""

    enabled: bool = True


class ObservabilitySettings(BaseModel):
    """Observability configuration settings."""

    metrics: MetricsSettings = MetricsSettings()


# =============================================================================
# Main Settings Class
# =============================================================================


class Settings(BaseSettings):
    """Service settings with YAML + environment variable support.

    Configuration is loaded from multiple sources with the following priority
    (highest to lowest):
    1. Values passed to Settings()
    2. Environment variables
    3. .env file (secrets only)
    4. Environment-specific YAML files (config/environments/{APP_ENV}/)
    5. Base YAML files (config/base/)
    6. Default values in code

    Environment variables can override any setting using the nested delimiter '__'.
    For example: MATCHING__THRESHOLD=0.8 overrides matching.threshold.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_ignore_empty=True,
        extra="ignore",
        case_sensitive=False,
        env_nested_delimiter="__",
    )

    # =========================================================================
    # Environment Selection (from .env)
    # =========================================================================
    APP_ENV: str = "development"

    # =========================================================================
    # Nested Configuration Sections (from YAML)
    # =========================================================================
    app: AppSettings = AppSettings()
    logging: LoggingSettings = LoggingSettings()
    database: DatabaseSettings = DatabaseSettings()
    llm: LLMSettings = LLMSettings()
    matching: MatchingSettings = MatchingSettings()
    prompts: PromptSettings = PromptSettings()
    vocabulary: VocabularySettings = VocabularySettings()
    observability: ObservabilitySettings = ObservabilitySettings()

    # =========================================================================
    # Secrets (from .env only - never in YAML)
    # =========================================================================
    OPENROUTER_API_KEY: str = ""
    DATABASE_PASSWORD: str = ""

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
    ) -> tuple[PydanticBaseSettingsSource, ...]:
        """Customize settings loading order.

        Priority (highest to lowest):
        1. init_settings - Values passed to Settings()
        2. env_settings - Environment variables
        3. dotenv_settings - .env file (secrets)
        4. yaml_settings - YAML files (base + environment)
        5. file_secret_settings - Docker secrets
        """
        return (
            init_settings,
            env_settings,
            dotenv_settings,
            MultiYamlConfigSettingsSource(settings_cls),
            file_secret_settings,
        )

    # =========================================================================
    # Computed Fields
    # =========================================================================

    @property
    def database_dsn(self) -> str:
        """Build PostgreSQL connection URL without the password.

        URL format: postgresql://[user@]host:port/database
        """
        auth_part = f"{self.database.user}@" if self.database.user else ""
        return (
            f"postgresql://{auth_part}{self.database.host}:"
            f"{self.database.port}/{self.database.name}"
        )

    @property
    def is_development(self) -> bool:
        """Check if running in development environment."""
        return self.APP_ENV == "development"

    @property
    def is_production(self) -> bool:
        """Check if running in production environment."""
        return self.APP_ENV == "production"

    @property
    def is_testing(self) -> bool:
        """Check if running in test environment."""
        return self.APP_ENV == "test"


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance.

    Using lru_cache ensures settings are only loaded once,
    improving performance and consistency.
    """
    return Settings()
