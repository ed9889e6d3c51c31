"""
Configuration — Pydantic v2 Settings (env / .env)
=================================================

Purpose
-------
Centralized, strongly-typed configuration for the support chat backend using:
- Pydantic v2 `BaseSettings` for environment-driven values
- `pydantic-settings` v2 for `.env` loading and model config

Load Order & Behavior
---------------------
- Values are read from the environment; if not present, `.env` is used.
- Every field has a default, so the service boots without a `.env`. A missing
  `OPENAI_API_KEY` is reported per request (`MISSING_API_KEY`), not at import.
- `extra="ignore"`: unknown env vars are ignored (not an error).

Usage
-----
from support_backend.database.config.config import settings

# Example
db_path = settings.DATABASE_PATH
model = settings.OPENAI_MODEL

Security
--------
- Never commit secrets or the `.env` file to source control.
- Prefer runtime environment variables in production (K8s/Secrets Manager/etc.).
"""

from typing import List, Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """
    Application configuration settings loaded from environment variables
    or a `.env` file. Provides strongly typed access to environment values.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # LLM provider
    OPENAI_API_KEY: Optional[str] = Field(None, description="OpenAI API key used for chat completions.")
    OPENAI_MODEL: str = Field("gpt-3.5-turbo", description="OpenAI chat model name.")
    MAX_TOKENS: int = Field(500, description="Maximum number of tokens generated per reply.")
    LLM_TEMPERATURE: float = Field(0.7, description="Sampling temperature for replies.")
    LLM_PRESENCE_PENALTY: float = Field(0.1, description="Presence penalty for replies.")
    LLM_FREQUENCY_PENALTY: float = Field(0.1, description="Frequency penalty for replies.")
    LLM_TIMEOUT_SECONDS: float = Field(30.0, description="Deadline (seconds) for one completion call.")

    # Conversation / storage
    MAX_CONVERSATION_HISTORY: int = Field(
        20, ge=0, description="Number of most recent messages sent to the model as context."
    )
    DATABASE_PATH: str = Field("./data/chat.db", description="Path of the SQLite file holding conversations.")
    KNOWLEDGE_BASE_PATH: Optional[str] = Field(
        None, description="Optional path of a knowledge base file replacing the packaged FAQ."
    )

    # HTTP host
    ENVIRONMENT: str = Field("development", description="`development` or `production`.")
    FRONTEND_URL: Optional[str] = Field(None, description="Allowed CORS origin in production.")
    CORS_DEV_ORIGINS: List[str] = Field(
        default_factory=lambda: [
            "http://localhost:5173",
            "http://localhost:5174",
            "http://127.0.0.1:5173",
        ],
        description="Allowed CORS origins outside production.",
    )
    MAX_BODY_BYTES: int = Field(10 * 1024, description="Maximum accepted request body size in bytes.")
    HOST: str = Field("0.0.0.0", description="Bind address for uvicorn.")
    PORT: int = Field(3000, description="Bind port for uvicorn.")
    LOG_LEVEL: str = Field("INFO", description="Root log level.")

    @property
    def is_production(self) -> bool:
        return self.ENVIRONMENT.lower() == "production"

    @property
    def cors_origins(self) -> List[str]:
        """Origins allowed by the CORS middleware for the current environment."""
        if self.is_production:
            return [self.FRONTEND_URL] if self.FRONTEND_URL else []
        return list(self.CORS_DEV_ORIGINS)


# Singleton instance of Settings for the process entry point
settings = Settings()
"""Defines a Settings object built from the environment and the .env file"""
