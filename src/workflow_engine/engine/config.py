"""Configuration for the workflow engine.

Configuration is loaded from:
- environment variables
- and a local `.env` file (if present)
"""

from __future__ import annotations

from pathlib import Path

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class EngineSettings(BaseSettings):
    """Settings for the engine core.

    Environment variables:
    - LOG_LEVEL                    (optional)
    - WORKFLOW_DEFINITIONS_PATH    (optional)

    Notes:
        Pydantic-settings supports overriding the env file in tests via:
        `EngineSettings(_env_file=path_to_env)`.
    """

    log_level: str = Field(
        default="INFO",
        validation_alias="LOG_LEVEL",
        description="Root logging level",
    )

    definitions_path: Path | None = Field(
        default=None,
        validation_alias="WORKFLOW_DEFINITIONS_PATH",
        description=(
            "JSON file, or directory of *.json files, with definitions to load at startup. "
            "Definitions are only read; nothing is written back."
        ),
    )

    model_config = SettingsConfigDict(
        env_prefix="",
        env_file=".env",
        extra="ignore",
    )
