"""Load .env and settings.yaml, expose store configuration."""

from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Any

import yaml
from dotenv import load_dotenv
from pydantic import BaseModel, ValidationInfo, field_validator

log = logging.getLogger(__name__)

PROJECT_ROOT = Path(__file__).resolve().parent.parent

ENV_OVERRIDES = {
    "default_ttl": "TTLSTORE_DEFAULT_TTL",
    "http_cache_ttl": "TTLSTORE_HTTP_CACHE_TTL",
    "key_prefix": "TTLSTORE_KEY_PREFIX",
    "log_level": "TTLSTORE_LOG_LEVEL",
}


def _load_env() -> None:
    env_path = PROJECT_ROOT / ".env"
    load_dotenv(env_path)


def _load_yaml(settings_path: Path) -> dict:
    if settings_path.exists():
        try:
            with open(settings_path) as f:
                return yaml.safe_load(f) or {}
        except yaml.YAMLError:
            log.warning("Failed to parse %s, using defaults", settings_path.name)
            return {}
    return {}


class Settings(BaseModel):
    default_ttl: int = 60_000
    http_cache_ttl: int = 30_000
    key_prefix: str = "__cache__"
    log_level: str = "WARNING"

    @field_validator("default_ttl", "http_cache_ttl", mode="before")
    @classmethod
    def positive_ttl(cls, v: Any, info: ValidationInfo) -> int:
        # Bad TTLs fall back to the field default instead of failing.
        try:
            ttl = int(v)
        except (TypeError, ValueError):
            return cls.model_fields[info.field_name].default
        if ttl <= 0:
            return cls.model_fields[info.field_name].default
        return ttl

    @field_validator("log_level")
    @classmethod
    def upper_log_level(cls, v: str) -> str:
        return v.strip().upper()


def load_settings(settings_path: Path | None = None) -> Settings:
    _load_env()
    raw = _load_yaml(settings_path or PROJECT_ROOT / "settings.yaml")
    if not isinstance(raw, dict):
        log.warning("settings.yaml is not a mapping, using defaults")
        raw = {}
    for field, env_name in ENV_OVERRIDES.items():
        value = os.getenv(env_name)
        if value:
            raw[field] = value
    return Settings(**raw)


def configure_logging(settings: Settings) -> None:
    logging.basicConfig(
        level=getattr(logging, settings.log_level, logging.WARNING),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
