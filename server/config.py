"""Environment-driven settings for the play service."""

from __future__ import annotations

import os
from pathlib import Path
from typing import List, Literal, Mapping, Optional

from pydantic import BaseModel, Field, field_validator

from klondike.deck import DEFAULT_DECK_API_URL

ENV_PREFIX = "KLONDIKE_"


class ServerSettings(BaseModel):
    host: str = "127.0.0.1"
    port: int = Field(3000, ge=1, le=65535)
    cors_origins: List[str] = Field(default_factory=lambda: ["http://localhost:5173"])
    storage: Literal["memory", "file"] = "memory"
    data_dir: Path = Path("data/games")
    deck_source: Literal["local", "api"] = "local"
    deck_api_url: str = DEFAULT_DECK_API_URL
    deck_api_timeout: float = Field(5.0, gt=0)
    deck_seed: Optional[int] = None
    rules_path: Optional[Path] = None
    log_level: str = "INFO"

    @field_validator("cors_origins", mode="before")
    @classmethod
    def split_origins(cls, value):
        if isinstance(value, str):
            return [origin.strip() for origin in value.split(",") if origin.strip()]
        return value

    @field_validator("log_level")
    @classmethod
    def normalize_level(cls, value: str) -> str:
        level = value.upper()
        if level not in {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}:
            raise ValueError(f"Unknown log level: {value!r}")
        return level

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> ServerSettings:
        """Build settings from ``KLONDIKE_*`` variables, e.g. ``KLONDIKE_STORAGE=file``."""
        environ = os.environ if environ is None else environ
        values = {}
        for name in cls.model_fields:
            raw = environ.get(f"{ENV_PREFIX}{name.upper()}")
            if raw is not None and raw != "":
                values[name] = raw
        return cls.model_validate(values)
