from __future__ import annotations

from functools import lru_cache
from pathlib import Path

from dotenv import load_dotenv
from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

load_dotenv()


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

    app_name: str = "mockprep"
    app_env: str = "development"
    app_host: str = "127.0.0.1"
    app_port: int = 8788
    log_level: str = "INFO"
    secret_key: str = "change-me"

    database_url: str = "sqlite:///./data/mockprep.db"
    data_dir: Path = Path("./data")
    seed_mock_jobs: bool = True

    interview_frontend_url: str = "http://localhost:3001"
    interview_token_ttl_hours: int = 24

    caller_id_header: str = "X-User-Id"
    caller_role_header: str = "X-User-Role"

    openai_api_key: str = ""
    openai_base_url: str = "https://api.openai.com/v1"
    openai_model_jd: str = "gpt-4.1-mini"
    openai_timeout_sec: int = 60

    cors_origins: str = "http://localhost:3000,http://localhost:3001"

    @field_validator("app_env")
    @classmethod
    def validate_env(cls, value: str) -> str:
        allowed = {"development", "staging", "production", "test"}
        if value not in allowed:
            raise ValueError(f"app_env must be one of {sorted(allowed)}")
        return value

    @field_validator("interview_token_ttl_hours")
    @classmethod
    def validate_token_ttl(cls, value: int) -> int:
        if value <= 0:
            raise ValueError("interview_token_ttl_hours must be positive")
        return value

    @property
    def cors_origin_list(self) -> list[str]:
        return [origin.strip() for origin in self.cors_origins.split(",") if origin.strip()]


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    return Settings()
