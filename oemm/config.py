"""Application configuration with validation."""
from typing import Literal, Optional
from functools import lru_cache
from pydantic import Field, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from oemm.models.enumerations import AssessmentMode, RuleScope


class Settings(BaseSettings):
    """Scoring engine settings, read from the environment or a .env file."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Application
    APP_NAME: str = "OEMM Scoring Engine"
    APP_VERSION: str = "1.0.0"
    APP_ENV: Literal["development", "staging", "production"] = "development"
    DEBUG: bool = False
    LOG_LEVEL: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = "INFO"
    LOG_FORMAT: Literal["json", "console"] = "console"

    # Model source
    MODEL_PATH: Optional[str] = Field(
        default=None,
        description="Default maturity model JSON used by the scoring script"
    )

    # Assessment scope
    ASSESSMENT_MODE: AssessmentMode = AssessmentMode.CORE
    CORE_PARAMETER_LIMIT: int = Field(default=24, ge=1, le=500)

    # Scoring policy
    RULE_SCOPE: RuleScope = RuleScope.VISIBLE
    ALL_NA_AS_ZERO: bool = True

    # Output
    RESULT_DECIMAL_PLACES: int = Field(default=2, ge=0, le=10)

    @model_validator(mode="after")
    def validate_production_settings(self):
        """Production runs must not be in debug mode."""
        if self.APP_ENV == "production" and self.DEBUG:
            raise ValueError("DEBUG must be False in production")
        return self

    def scoring_options(self):
        """Build ScoringOptions from the policy settings."""
        from oemm.scoring.engine import ScoringOptions
        return ScoringOptions(
            rule_scope=self.RULE_SCOPE,
            all_not_applicable_as_zero=self.ALL_NA_AS_ZERO,
        )

@lru_cache
def get_settings() -> Settings:
    return Settings()

settings = get_settings()
