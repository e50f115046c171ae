"""
Type-safe configuration for workflow_model using Pydantic Settings.

Values are read once from the environment (prefix WORKFLOW_MODEL_) or a .env
file and never mutated afterwards.

Usage:
    from workflow_model.config import config

    if config.require_actions:
        ...
"""
from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class WorkflowModelConfig(BaseSettings):
    """
    Central configuration for state decoding and validation.
    """
    model_config = SettingsConfigDict(
        env_prefix="WORKFLOW_MODEL_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        case_sensitive=False,
    )

    # ============================================================================
    # Logging
    # ============================================================================

    log_level: str = Field(default="INFO", description="Level for workflow_model loggers")
    log_propagate: bool = Field(
        default=False,
        description="Propagate records to the root logger (enable when an application owns logging)",
    )

    # ============================================================================
    # Validation
    # ============================================================================

    require_actions: bool = Field(
        default=False,
        description="Report states with an empty action list as violations instead of only logging a warning",
    )

    @field_validator("log_level")
    @classmethod
    def _check_log_level(cls, value: str) -> str:
        normalized = value.upper()
        if normalized not in {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}:
            raise ValueError(f"Unsupported log level '{value}'")
        return normalized


# ============================================================================
# Global Config Instance
# ============================================================================

config = WorkflowModelConfig()
