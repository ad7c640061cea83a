"""Application settings and CORS configuration."""

import json
import os
from functools import lru_cache
from typing import Literal

from pydantic import field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=(".env"), env_file_encoding="utf-8")

    # App
    APP_NAME: str = "GitRoast"
    ENVIRONMENT: str = "development"  # development | production | test

    # CORS
    # Accept list or CSV/JSON string from env; normalized to list[str] by validators
    CORS_ORIGINS: list[str] | str = [
        "http://localhost:3000",
        "http://127.0.0.1:3000",
    ]
    ALLOW_CREDENTIALS: bool = True

    # GitHub REST access. Unauthenticated access works but hits the
    # 60 requests/hour limit almost immediately for larger profiles.
    GITHUB_TOKEN: str | None = None
    GITHUB_COMMITS_PER_REPO: int = 30
    GITHUB_DETAILED_COMMITS: int = 15

    # AI / LLM provider configuration
    LLM_PROVIDER: Literal["groq", "gemini"] = "groq"
    GROQ_API_KEY: str | None = None
    GEMINI_API_KEY: str | None = None
    CHAT_MODEL: str = "llama-3.3-70b-versatile"
    # Used when LLM_PROVIDER=groq but only a Gemini key is configured
    GEMINI_FALLBACK_MODEL: str = "gemini-2.5-flash"

    # Generation parameters per output mode
    ROAST_TEMPERATURE: float = 1.1
    FEEDBACK_TEMPERATURE: float = 0.7
    MAX_OUTPUT_TOKENS: int = 3000

    @field_validator("CORS_ORIGINS", mode="before")
    @classmethod
    def assemble_cors_origins(cls, v: object) -> list[str]:
        """Allow list, CSV string, or JSON array string for CORS origins."""
        if isinstance(v, list):
            return [str(i).strip() for i in v]
        if isinstance(v, str):
            s = v.strip()
            if not s:
                return []
            if s.startswith("["):
                try:
                    parsed = json.loads(s)
                except json.JSONDecodeError as e:
                    raise ValueError(
                        "CORS_ORIGINS must be a CSV list or JSON array string"
                    ) from e
                if not isinstance(parsed, list):
                    raise ValueError("CORS_ORIGINS JSON must be a list")
                return [str(i).strip() for i in parsed]
            return [i.strip() for i in s.split(",") if i.strip()]
        raise ValueError("Invalid CORS_ORIGINS type; expected str or list[str]")

    @field_validator("GITHUB_COMMITS_PER_REPO", "GITHUB_DETAILED_COMMITS")
    @classmethod
    def _clamp_page_size(cls, v: int) -> int:
        """GitHub caps `per_page` at 100."""
        if v < 0:
            raise ValueError("commit limits must not be negative")
        return min(v, 100)

    @model_validator(mode="after")
    def _validate_cors_credentials(self) -> "Settings":
        """Ensure wildcard origins are not used when credentials are allowed."""
        if isinstance(self.CORS_ORIGINS, str):
            self.CORS_ORIGINS = self.assemble_cors_origins(self.CORS_ORIGINS)
        if self.ALLOW_CREDENTIALS and any(
            o.strip() == "*" for o in (self.CORS_ORIGINS or [])
        ):
            raise ValueError(
                "CORS configuration error: ALLOW_CREDENTIALS=True but "
                "CORS_ORIGINS contains '*'. Use explicit origins when credentials "
                "are allowed."
            )
        return self

    def temperature_for(self, mode: str) -> float:
        return self.ROAST_TEMPERATURE if mode == "roast" else self.FEEDBACK_TEMPERATURE


@lru_cache
def get_settings() -> Settings:
    env = os.getenv("ENVIRONMENT", "development").lower()
    if env not in {"development", "production", "test"}:
        raise ValueError("ENVIRONMENT must be 'development', 'production', or 'test'")

    if env == "production":
        env_file = ".env.prod"
    elif env == "development":
        env_file = ".env.dev"
    else:
        # test environment - no env file needed, use defaults
        env_file = ""

    # Missing API keys are tolerated at startup; the generation source reports
    # a configuration error on first use instead.
    # pydantic-settings supports _env_file at runtime; mypy doesn't type it.
    return Settings(_env_file=env_file or None)  # type: ignore[call-arg]
