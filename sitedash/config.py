"""Application configuration contract."""

import re
from functools import lru_cache
from pathlib import Path
from typing import List

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

_SIZE_UNITS = {
    "": 1,
    "b": 1,
    "k": 1024,
    "kb": 1024,
    "m": 1024**2,
    "mb": 1024**2,
    "g": 1024**3,
    "gb": 1024**3,
}
_SIZE_RE = re.compile(r"^\s*(\d+(?:\.\d+)?)\s*([kmg]?b?)\s*$", re.IGNORECASE)


def parse_size(value: str) -> int:
    """Convert a human size such as ``"10mb"`` or ``"512kb"`` into bytes.

    Raises:
        ValueError: if *value* is not a recognised size expression.
    """
    match = _SIZE_RE.match(value)
    if not match:
        raise ValueError(f"Invalid size expression: {value!r}")
    number, unit = match.groups()
    return int(float(number) * _SIZE_UNITS[unit.lower()])


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    host: str = Field(alias="HOST", default="0.0.0.0")
    port: int = Field(alias="PORT", default=3002)
    app_env: str = Field(alias="APP_ENV", default="development")
    log_level: str = Field(alias="LOG_LEVEL", default="INFO")
    data_dir: Path = Field(alias="DATA_DIR", default=Path("data"))
    cors_origin: str = Field(alias="CORS_ORIGIN", default="*")
    body_limit: str = Field(alias="BODY_LIMIT", default="10mb")
    rate_limit: str = Field(alias="RATE_LIMIT", default="60/minute")
    https_enabled: bool = Field(alias="HTTPS_ENABLED", default=False)
    ssl_key_path: Path = Field(alias="SSL_KEY_PATH", default=Path("ssl/server.key"))
    ssl_cert_path: Path = Field(alias="SSL_CERT_PATH", default=Path("ssl/server.crt"))

    @field_validator("body_limit")
    @classmethod
    def _check_body_limit(cls, value: str) -> str:
        parse_size(value)
        return value

    @property
    def body_limit_bytes(self) -> int:
        return parse_size(self.body_limit)

    @property
    def cors_origins(self) -> List[str]:
        return [item.strip() for item in self.cors_origin.split(",") if item.strip()]


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    return Settings()
