from functools import lru_cache
from pathlib import Path
from typing import Any

import yaml
from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from minietl.core.exceptions import PipelineConfigError

DEFAULT_SPACEX_API_URL = "https://api.spacexdata.com/v5/launches"


class Settings(BaseSettings):
    """Application settings from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Data source (SPACEX_API_URL)
    spacex_api_url: str = Field(default=DEFAULT_SPACEX_API_URL)

    # Application
    debug: bool = Field(default=False)
    cors_origins: list[str] = Field(default=["http://localhost:3000"])


class PipelineConfig:
    """Stage simulator configuration from config.yml."""

    def __init__(self, data: dict[str, Any]) -> None:
        self.stages: list[str] = data.get("stages", ["extract", "transform", "load"])
        self.timings_ms: list[int] = data.get("timings_ms", [200, 1200, 2200, 3200])
        self.batch_size: int = data.get("batch_size", 10)
        self._validate()

    def _validate(self) -> None:
        if not self.stages:
            raise PipelineConfigError("pipeline.stages must not be empty")
        if len(self.timings_ms) != len(self.stages) + 1:
            raise PipelineConfigError(
                f"pipeline.timings_ms needs {len(self.stages) + 1} entries, "
                f"got {len(self.timings_ms)}"
            )
        if any(t < 0 for t in self.timings_ms):
            raise PipelineConfigError("pipeline.timings_ms must not be negative")
        if any(b <= a for a, b in zip(self.timings_ms, self.timings_ms[1:])):
            raise PipelineConfigError("pipeline.timings_ms must be strictly increasing")
        if self.batch_size < 1:
            raise PipelineConfigError("pipeline.batch_size must be positive")

    @property
    def delays(self) -> list[float]:
        """Transition delays in seconds."""
        return [t / 1000 for t in self.timings_ms]


class AppConfig:
    """Combined application configuration from .env and config.yml."""

    def __init__(self, config_path: Path | None = None) -> None:
        self.settings = Settings()
        self._load_yaml(config_path or Path("config.yml"))

    def _load_yaml(self, config_path: Path) -> None:
        if config_path.exists():
            with open(config_path) as f:
                data = yaml.safe_load(f) or {}
        else:
            data = {}

        self.pipeline = PipelineConfig(data.get("pipeline", {}))


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()


@lru_cache
def get_config() -> AppConfig:
    """Get cached full config instance."""
    return AppConfig()
