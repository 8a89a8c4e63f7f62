from __future__ import annotations

from functools import lru_cache
from pathlib import Path
from typing import Optional

from pydantic import ValidationError, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from .core.errors import ConfigurationError


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_prefix="NDC_", case_sensitive=False)

    output_dir: Path = Path(".")
    framework: str = "net9.0"
    port: int = 8080
    min_instances: int = 1
    max_instances: int = 5
    file_mode: int = 0o644
    templates_dir: Optional[Path] = None

    @field_validator("file_mode", mode="before")
    @classmethod
    def _parse_octal(cls, value: object) -> object:
        if isinstance(value, str):
            return int(value, 8)
        return value


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    try:
        return Settings()
    except ValidationError as exc:
        raise ConfigurationError(f"invalid NDC_* environment settings: {exc}") from exc
