from __future__ import annotations

from pathlib import Path

import yaml
from pydantic import BaseModel, Field, field_validator
from pydantic_settings import BaseSettings, PydanticBaseSettingsSource, SettingsConfigDict


class ServerConfig(BaseModel):
    host: str = "127.0.0.1"
    port: int = Field(default=3000, ge=1, le=65535)

    @property
    def server_url(self) -> str:
        return f"{self.host}:{self.port}"


class AuthConfig(BaseModel):
    max_signature_age_s: float | None = None
    """Reject signed requests whose timestamp is further than this from now.
    ``None`` accepts any timestamp."""

    @field_validator("max_signature_age_s")
    @classmethod
    def _validate_positive(cls, value: float | None) -> float | None:
        if value is not None and value <= 0:
            raise ValueError("auth.max_signature_age_s must be positive")
        return value


class LoggingConfig(BaseModel):
    level: str = "INFO"
    json_output: bool = False

    @field_validator("level")
    @classmethod
    def _normalize_level(cls, value: str) -> str:
        return value.upper()


class DirectorySettings(BaseSettings):
    storage_uri: str = "file://./data/users"
    server: ServerConfig = Field(default_factory=ServerConfig)
    auth: AuthConfig = Field(default_factory=AuthConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)

    model_config = SettingsConfigDict(
        env_prefix="USERDIR_",
        env_nested_delimiter="__",
        extra="ignore",
    )

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
    ) -> tuple[PydanticBaseSettingsSource, ...]:
        # USERDIR_* variables win over values read from the config file.
        return env_settings, init_settings, file_secret_settings


def load_config(path: str | Path = "config/userdir.yaml") -> DirectorySettings:
    config_path = Path(path)
    if not config_path.exists():
        raise FileNotFoundError(f"config file not found: {config_path}")

    loaded = yaml.safe_load(config_path.read_text(encoding="utf-8")) or {}
    if not isinstance(loaded, dict):
        raise ValueError("config file must contain a top-level mapping")

    section = loaded.get("userdir", loaded)
    if not isinstance(section, dict):
        raise ValueError("userdir config section must be a mapping")
    return DirectorySettings(**section)


__all__ = [
    "AuthConfig",
    "DirectorySettings",
    "LoggingConfig",
    "ServerConfig",
    "load_config",
]
